"""Record area scanner.

Walks the record area as an untyped byte stream. Every frame is
``[Marker(1) | Type(1) | Length(1)]`` followed by ``Length`` payload bytes.
The scanner never looks at what a type means.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterator
from warnings import warn

from djilog_core.errors import DecodeWarning, TruncatedTailNotification
from djilog_core.protocol import FRAME_FMT, FRAME_OVERHEAD, HEADER_LEN, RECORD_MARKER

from .header import FileHeader, parse_header


@dataclass(frozen=True)
class RawRecordFrame:
    marker: int
    type: int
    length: int
    payload: bytes
    offset: int  # absolute offset of the marker byte

    @property
    def valid(self) -> bool:
        return self.marker == RECORD_MARKER

    @property
    def size(self) -> int:
        return self.length + FRAME_OVERHEAD


class ScanPass:
    """One pass over a record area.

    Iterates frames. Once exhausted, ``tail`` holds the truncation notice
    (if the last frame ran short) and ``unconsumed_bytes`` the number of
    unframed bytes left. Each pass keeps its own report.
    """

    def __init__(self, scanner: "RecordScanner"):
        self.tail: TruncatedTailNotification | None = None
        self.unconsumed_bytes = 0
        self._frames = scanner._frames(self)

    def __iter__(self) -> "ScanPass":
        return self

    def __next__(self) -> RawRecordFrame:
        return next(self._frames)


class RecordScanner:
    """Lazy, restartable frame iterator over one record area.

    Each ``iter()`` starts a fresh :class:`ScanPass` from ``start``. The
    scanner's own ``tail`` and ``unconsumed_bytes`` mirror the most recently
    finished pass; read them from the pass when passes are interleaved.
    """

    def __init__(self, buffer: bytes, start: int = HEADER_LEN, end: int | None = None):
        self.buffer = memoryview(buffer)
        self.start = start
        self.end = len(buffer) if end is None else min(end, len(buffer))
        self.tail: TruncatedTailNotification | None = None
        self.unconsumed_bytes = 0

    @classmethod
    def for_header(cls, buffer: bytes, header: FileHeader) -> "RecordScanner":
        return cls(buffer, header.record_area_start, header.record_area_end)

    def __iter__(self) -> ScanPass:
        return ScanPass(self)

    def _finish(self, state: ScanPass, tail: TruncatedTailNotification | None, unconsumed: int) -> None:
        state.tail = self.tail = tail
        state.unconsumed_bytes = self.unconsumed_bytes = unconsumed

    def _frames(self, state: ScanPass) -> Iterator[RawRecordFrame]:
        buf = self.buffer
        pos = self.start

        while True:
            remaining = self.end - pos

            # Clean end of stream
            if remaining < FRAME_OVERHEAD:
                self._finish(state, None, max(remaining, 0))
                return

            marker, rtype, length = struct.unpack_from(FRAME_FMT, buf, pos)
            available = remaining - FRAME_OVERHEAD

            # Torn final record
            if available < length:
                tail = TruncatedTailNotification(
                    offset=pos,
                    record_type=int(rtype),
                    declared_length=int(length),
                    available=int(available),
                )
                self._finish(state, tail, remaining)
                warn(
                    f"Truncated record type {int(rtype)} at offset {pos}: "
                    f"declared {int(length)} bytes, {available} available. Stopping scan.",
                    DecodeWarning,
                )
                return

            body = pos + FRAME_OVERHEAD
            frame = RawRecordFrame(
                marker=int(marker),
                type=int(rtype),
                length=int(length),
                payload=bytes(buf[body:body + length]),
                offset=pos,
            )
            yield frame
            pos += frame.size


def scan(buffer: bytes, header: FileHeader | None = None) -> RecordScanner:
    """Scanner over the record area bounded by ``header`` (parsed if omitted)."""
    if header is None:
        header = parse_header(buffer)
    return RecordScanner.for_header(buffer, header)
