"""Reversible payload descrambling."""
from __future__ import annotations

from typing import Callable, Iterable

from djilog_core.keys import record_key
from djilog_core.protocol import SCRAMBLE_MIN_VERSION, UNSCRAMBLED_TYPES

KeySchedule = Callable[[int, int], bytes]


def xor_keystream(payload: bytes, key: bytes) -> bytes:
    """XOR ``payload`` with ``key`` repeated by position. Self-inverse."""
    if not key:
        return bytes(payload)
    klen = len(key)
    return bytes(b ^ key[i % klen] for i, b in enumerate(payload))


class Descrambler:
    """Per-file descrambler.

    ``version`` is the file format version; it selects whether records are
    scrambled at all and seeds the key schedule. Pass ``scrambled_types`` to
    override the set of scrambled type codes (an empty set disables
    descrambling, e.g. for files already rewritten in canonical form).
    """

    def __init__(
        self,
        version: int,
        scrambled_types: Iterable[int] | None = None,
        key_schedule: KeySchedule | None = None,
    ):
        self.version = int(version)
        self.key_schedule = key_schedule or record_key
        self._explicit = None if scrambled_types is None else frozenset(int(t) for t in scrambled_types)
        self._keys: dict[int, bytes] = {}

    def is_scrambled(self, record_type: int) -> bool:
        if self._explicit is not None:
            return int(record_type) in self._explicit
        if self.version < SCRAMBLE_MIN_VERSION:
            return False
        return int(record_type) not in UNSCRAMBLED_TYPES

    def key_for(self, record_type: int) -> bytes:
        key = self._keys.get(record_type)
        if key is None:
            key = self.key_schedule(record_type, self.version)
            self._keys[record_type] = key
        return key

    def descramble(self, record_type: int, payload: bytes) -> bytes:
        if not self.is_scrambled(record_type):
            return bytes(payload)
        return xor_keystream(payload, self.key_for(int(record_type)))

    def scramble(self, record_type: int, payload: bytes) -> bytes:
        # XOR keystream is an involution
        return self.descramble(record_type, payload)
