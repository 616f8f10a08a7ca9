"""Deterministic per-record scramble keys."""
from __future__ import annotations

import hashlib

from .protocol import KEY_LEN


def _digest(b: bytes, length: int) -> bytes:
    """Truncated SHA-256 digest."""
    return hashlib.sha256(b).digest()[:length]


def record_key(record_type: int, seed: int) -> bytes:
    """Derive the XOR key for one record type under a per-file seed.

    The seed is the file format version, so every record of a given type in
    a given file shares one key and no key depends on another record.
    """
    payload = f"djilog\x00{int(record_type)}\x00{int(seed)}"
    return _digest(payload.encode("ascii"), KEY_LEN)
