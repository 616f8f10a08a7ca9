import struct

import pytest

from djilog_core.protocol import FRAME_FMT, HEADER_FMT, HEADER_LEN, RECORD_MARKER


def frame(rtype: int, payload: bytes, marker: int = RECORD_MARKER, length: int | None = None) -> bytes:
    n = len(payload) if length is None else length
    return struct.pack(FRAME_FMT, marker, rtype, n) + payload


def container(records: bytes = b"", version: int = 0, details: bytes = b"", size_lo: int | None = None) -> bytes:
    lo = HEADER_LEN + len(records) if size_lo is None else size_lo
    header = struct.pack(HEADER_FMT, lo, 0, 0, version)
    header += b"\x00" * (HEADER_LEN - len(header))
    return header + records + details


@pytest.fixture
def build():
    """Builders for frames and whole containers."""
    class _Build:
        pass

    b = _Build()
    b.frame = frame
    b.container = container
    return b
