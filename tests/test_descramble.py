import os

import pytest

from djilog_core.keys import record_key
from djilog_core.protocol import JPEG_TYPE, KEY_LEN
from djilog_decode.descramble import Descrambler, xor_keystream


@pytest.mark.parametrize("rtype", [1, 2, 4, 14, 200])
def test_round_trip(rtype):
    d = Descrambler(version=6)
    assert d.is_scrambled(rtype)
    for n in (0, 1, 7, 8, 9, 37, 255):
        x = os.urandom(n)
        scrambled = d.scramble(rtype, x)
        assert len(scrambled) == n
        assert d.descramble(rtype, scrambled) == x


def test_scramble_changes_payload():
    d = Descrambler(version=6)
    x = bytes(range(32))
    assert d.scramble(1, x) != x


def test_identity_for_old_versions():
    d = Descrambler(version=5)
    x = os.urandom(20)
    assert not d.is_scrambled(1)
    assert d.descramble(1, x) == x


def test_jpeg_never_scrambled():
    d = Descrambler(version=12)
    x = os.urandom(40)
    assert d.descramble(JPEG_TYPE, x) == x


def test_explicit_type_set():
    d = Descrambler(version=12, scrambled_types=())
    x = os.urandom(10)
    assert d.descramble(1, x) == x
    d = Descrambler(version=0, scrambled_types={3})
    assert d.is_scrambled(3) and not d.is_scrambled(1)


def test_records_are_independent():
    d = Descrambler(version=6)
    x = os.urandom(16)
    first = d.descramble(1, x)
    d.descramble(2, os.urandom(50))
    assert d.descramble(1, x) == first
    assert Descrambler(version=6).descramble(1, x) == first


def test_key_schedule():
    k = record_key(1, 6)
    assert len(k) == KEY_LEN
    assert k == record_key(1, 6)
    assert k != record_key(2, 6)
    assert k != record_key(1, 7)


def test_custom_key_schedule():
    d = Descrambler(version=6, key_schedule=lambda t, v: b"\x0f")
    assert d.descramble(1, b"\x00\xf0") == b"\x0f\xff"


def test_xor_keystream_empty_key():
    assert xor_keystream(b"abc", b"") == b"abc"
