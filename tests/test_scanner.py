import pytest

from djilog_core.errors import DecodeWarning
from djilog_decode.scanner import RecordScanner, scan


def test_frames_in_order(build):
    area = build.frame(1, b"abcd") + build.frame(2, b"") + build.frame(9, b"hello")
    frames = list(scan(build.container(area)))
    assert [(f.type, f.length, f.payload) for f in frames] == [(1, 4, b"abcd"), (2, 0, b""), (9, 5, b"hello")]
    assert [f.offset for f in frames] == [100, 107, 110]
    assert all(f.valid for f in frames)


def test_scan_is_restartable(build):
    area = build.frame(1, b"\x01\x02") + build.frame(3, b"\x03" * 7, marker=0)
    scanner = scan(build.container(area))
    assert list(scanner) == list(scanner)


def test_empty_area(build):
    scanner = scan(build.container(size_lo=100))
    assert list(scanner) == []
    assert scanner.tail is None


def test_short_remainder_is_clean_end(build):
    scanner = scan(build.container(build.frame(1, b"ab") + b"\xff\x01"))
    frames = list(scanner)
    assert len(frames) == 1
    assert scanner.tail is None
    assert scanner.unconsumed_bytes == 2


def test_truncated_tail(build):
    area = build.frame(1, b"\x00\x01", length=4)
    scanner = scan(build.container(area))
    with pytest.warns(DecodeWarning):
        frames = list(scanner)
    assert frames == []
    assert scanner.tail is not None
    assert scanner.tail.declared_length == 4
    assert scanner.tail.available == 2
    assert scanner.tail.unconsumed == 5


def test_invalid_marker_still_advances(build):
    area = build.frame(5, b"\x00" * 6, marker=0x00) + build.frame(1, b"zz")
    frames = list(scan(build.container(area)))
    assert [f.valid for f in frames] == [False, True]
    assert frames[1].offset == 100 + 3 + 6
    assert frames[1].payload == b"zz"


def test_scan_stops_at_record_area_end(build):
    area = build.frame(1, b"xy")
    buf = build.container(area, details=build.frame(2, b"details"))
    frames = list(scan(buf))
    assert len(frames) == 1


def test_explicit_bounds():
    buf = b"\xff\x07\x01A\xff\x08\x01B"
    assert [f.payload for f in RecordScanner(buf, start=4)] == [b"B"]


def test_cursor_advances_by_frame_size(build):
    area = build.frame(1, b"\x00" * 9) + build.frame(2, b"\x00" * 250) + build.frame(3, b"")
    frames = list(scan(build.container(area)))
    for prev, nxt in zip(frames, frames[1:]):
        assert nxt.offset == prev.offset + prev.size
    assert frames[-1].offset + frames[-1].size == 100 + len(area)


def test_interleaved_passes_keep_their_own_tail(build):
    torn = build.container(build.frame(1, b"ok") + build.frame(2, b"\x00", length=9))
    scanner = scan(torn)

    first = iter(scanner)
    second = iter(scanner)
    assert next(first).payload == b"ok"
    assert next(second).payload == b"ok"

    with pytest.warns(DecodeWarning):
        assert list(first) == []
    assert first.tail is not None
    assert first.tail.declared_length == 9
    assert second.tail is None

    with pytest.warns(DecodeWarning):
        list(second)
    assert second.tail == first.tail
    assert second.unconsumed_bytes == first.unconsumed_bytes == 4
