"""Fixed-size file header parsing."""
from __future__ import annotations

import struct
from dataclasses import dataclass
from warnings import warn

from djilog_core.errors import DecodeWarning, InvalidHeaderError, TruncatedHeaderError
from djilog_core.protocol import HEADER_FMT, HEADER_LEN


@dataclass(frozen=True)
class FileHeader:
    """Area boundaries for one flight log.

    ``header_size + record_area_size + details_area_size == total_file_size``
    holds for every instance returned by :func:`parse_header`.
    """

    total_file_size: int
    header_size: int
    record_area_size: int
    details_area_size: int
    format_version: int
    clamped: bool = False

    @property
    def record_area_start(self) -> int:
        return self.header_size

    @property
    def record_area_end(self) -> int:
        return self.header_size + self.record_area_size


def parse_header(buffer: bytes, total_file_size: int | None = None) -> FileHeader:
    """Decode the first 100 bytes of ``buffer``.

    ``total_file_size`` defaults to ``len(buffer)``; pass it when only the
    header window has been read.
    """
    if len(buffer) < HEADER_LEN:
        raise TruncatedHeaderError(len(buffer), HEADER_LEN)

    if total_file_size is None:
        total_file_size = len(buffer)
    elif total_file_size < HEADER_LEN:
        raise TruncatedHeaderError(total_file_size, HEADER_LEN)

    size_lo, _size_hi, _reserved, version = struct.unpack_from(HEADER_FMT, buffer, 0)

    if size_lo < HEADER_LEN:
        raise InvalidHeaderError(
            f"Header record size {int(size_lo)} is smaller than the {HEADER_LEN}-byte header"
        )

    clamped = False
    if size_lo > total_file_size:
        warn(
            f"Header record size {int(size_lo)} exceeds file size {total_file_size}; clamping",
            DecodeWarning,
        )
        size_lo = total_file_size
        clamped = True

    return FileHeader(
        total_file_size=int(total_file_size),
        header_size=HEADER_LEN,
        record_area_size=int(size_lo) - HEADER_LEN,
        details_area_size=int(total_file_size) - int(size_lo),
        format_version=int(version),
        clamped=clamped,
    )
