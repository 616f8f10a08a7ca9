"""Decode pipeline: header -> scanner -> descrambler -> decoder, with stats on the side."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from djilog_core.errors import (
    Diagnostic,
    MalformedRecordError,
    TruncatedTailNotification,
    UnknownRecordTypeNotification,
)
from djilog_core.protocol import FRAME_OVERHEAD, RecordType

from .descramble import Descrambler
from .header import FileHeader, parse_header
from .records import DecodedRecord, RecordTypeDecoder
from .scanner import RawRecordFrame, RecordScanner
from .stats import ScanStats, StatsAccumulator


@dataclass
class DecodeResult:
    header: FileHeader
    records: list[DecodedRecord]
    stats: ScanStats
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        """Records that could not be decoded into fields."""
        return sum(1 for r in self.records if r.error is not None or not r.valid)


@dataclass(frozen=True)
class FileInfo:
    header: FileHeader
    stats: ScanStats


def _make_descrambler(header: FileHeader, descramble: bool) -> Descrambler:
    if descramble:
        return Descrambler(header.format_version)
    return Descrambler(header.format_version, scrambled_types=())


def _tail_diagnostic(tail: TruncatedTailNotification) -> Diagnostic:
    return Diagnostic.make(
        "W_TRUNCATED_TAIL",
        offset=tail.offset,
        record_type=tail.record_type,
        detail=f"declared {tail.declared_length}, available {tail.available}, "
               f"{tail.unconsumed} bytes unconsumed",
    )


def unknown_type_diagnostic(note: UnknownRecordTypeNotification) -> Diagnostic:
    return Diagnostic.make(
        "W_UNKNOWN_TYPE",
        offset=note.offset,
        record_type=note.record_type,
        detail=f"{note.length} bytes",
    )


def decode_frame(
    frame: RawRecordFrame,
    descrambler: Descrambler,
    decoder: RecordTypeDecoder,
) -> tuple[DecodedRecord, Diagnostic | None]:
    """Decode one frame. Never raises for per-record problems."""
    if not frame.valid:
        rec = DecodedRecord(type=frame.type, value=frame.payload, offset=frame.offset,
                            valid=False, raw=True)
        return rec, Diagnostic.make("W_INVALID_MARKER", frame.offset, frame.type,
                                    f"marker 0x{frame.marker:02X}")

    payload = descrambler.descramble(frame.type, frame.payload)
    try:
        rec = decoder.decode(frame.type, payload, frame.offset)
    except MalformedRecordError as e:
        rec = DecodedRecord(type=frame.type, value=payload, offset=frame.offset,
                            raw=True, error=str(e))
        return rec, Diagnostic.make("W_MALFORMED_RECORD", frame.offset, frame.type,
                                    f"expected {e.expected}, got {e.actual}")

    if rec.raw:
        return rec, unknown_type_diagnostic(UnknownRecordTypeNotification(
            record_type=frame.type, offset=frame.offset, length=frame.length))
    return rec, None


def _observed(frames: Iterable[RawRecordFrame], stats: StatsAccumulator | None) -> Iterator[RawRecordFrame]:
    for frame in frames:
        if stats is not None:
            stats.observe(frame)
        yield frame


def iter_records(
    buffer: bytes,
    header: FileHeader | None = None,
    descramble: bool = True,
    decoder: RecordTypeDecoder | None = None,
    stats: StatsAccumulator | None = None,
    diagnostics: list[Diagnostic] | None = None,
    descrambler: Descrambler | None = None,
) -> Iterator[DecodedRecord]:
    """Lazily decode every frame in the record area.

    Stop consuming at any point; nothing past the last yielded record is
    scanned. ``stats`` and ``diagnostics`` are filled in as a side channel.
    """
    if header is None:
        header = parse_header(buffer)
    descrambler = descrambler or _make_descrambler(header, descramble)
    decoder = decoder or RecordTypeDecoder()

    if header.clamped and diagnostics is not None:
        diagnostics.append(Diagnostic.make("W_HEADER_CLAMPED", offset=0))

    scan_pass = iter(RecordScanner.for_header(buffer, header))
    for frame in _observed(scan_pass, stats):
        rec, diag = decode_frame(frame, descrambler, decoder)
        if diag is not None and diagnostics is not None:
            diagnostics.append(diag)
        yield rec

    if stats is not None:
        stats.unconsumed_bytes = scan_pass.unconsumed_bytes
    if scan_pass.tail is not None and diagnostics is not None:
        diagnostics.append(_tail_diagnostic(scan_pass.tail))


def decode_file(
    buffer: bytes,
    descramble: bool = True,
    workers: int | None = None,
    decoder: RecordTypeDecoder | None = None,
    descrambler: Descrambler | None = None,
) -> DecodeResult:
    """Decode a whole file into a partial result plus diagnostics.

    Header failures raise. Everything after the header is reported, not raised.
    With ``workers > 1`` frames are scanned sequentially first and then
    decoded on a thread pool; record order is preserved.
    """
    header = parse_header(buffer)
    descrambler = descrambler or _make_descrambler(header, descramble)
    decoder = decoder or RecordTypeDecoder()
    acc = StatsAccumulator(header.record_area_size, header.format_version)
    diagnostics: list[Diagnostic] = []

    if header.clamped:
        diagnostics.append(Diagnostic.make("W_HEADER_CLAMPED", offset=0))

    scan_pass = iter(RecordScanner.for_header(buffer, header))
    frames = _observed(scan_pass, acc)

    if workers is not None and workers > 1:
        framed = list(frames)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda f: decode_frame(f, descrambler, decoder), framed))
    else:
        results = [decode_frame(f, descrambler, decoder) for f in frames]

    records: list[DecodedRecord] = []
    for rec, diag in results:
        records.append(rec)
        if diag is not None:
            diagnostics.append(diag)

    acc.unconsumed_bytes = scan_pass.unconsumed_bytes
    if scan_pass.tail is not None:
        diagnostics.append(_tail_diagnostic(scan_pass.tail))

    return DecodeResult(header=header, records=records, stats=acc.finalize(), diagnostics=diagnostics)


def file_info(buffer: bytes) -> FileInfo:
    """Header and scan statistics without descrambling or decoding."""
    header = parse_header(buffer)
    acc = StatsAccumulator(header.record_area_size, header.format_version)
    scan_pass = iter(RecordScanner.for_header(buffer, header))
    for frame in scan_pass:
        acc.observe(frame)
    acc.unconsumed_bytes = scan_pass.unconsumed_bytes
    return FileInfo(header=header, stats=acc.finalize())


def filter_records(records: Iterable[DecodedRecord], record_type: int) -> Iterator[DecodedRecord]:
    """Only the records of one type code."""
    record_type = int(record_type)
    return (r for r in records if r.type == record_type)


def group_rows(records: Iterable[DecodedRecord]) -> list[dict]:
    """Group valid records into rows, opening a new row at every OSD record.

    Each row maps type name to decoded value; a later record of the same
    type within a row replaces the earlier one.
    """
    rows: list[dict] = []
    current: dict = {}
    for rec in records:
        if not rec.valid:
            continue
        if rec.type == RecordType.OSD and current:
            rows.append(current)
            current = {}
        current[rec.name] = rec.value
    if current:
        rows.append(current)
    return rows


def unscramble_file(buffer: bytes, descrambler: Descrambler | None = None) -> bytes:
    """Copy of ``buffer`` with every valid frame's payload in canonical form.

    Header, framing, invalid frames, any torn tail and the details area are
    kept byte for byte. Decode the result with ``descramble=False``.
    """
    header = parse_header(buffer)
    descrambler = descrambler or _make_descrambler(header, True)
    out = bytearray(buffer)
    for frame in RecordScanner.for_header(buffer, header):
        if not frame.valid or not descrambler.is_scrambled(frame.type):
            continue
        body = frame.offset + FRAME_OVERHEAD
        out[body:body + frame.length] = descrambler.descramble(frame.type, frame.payload)
    return bytes(out)
