"""djilog decode - header, record scanning, descrambling and decoding."""
from .header import FileHeader, parse_header
from .scanner import RawRecordFrame, RecordScanner, ScanPass, scan
from .descramble import Descrambler
from .records import DecodedRecord, RecordTypeDecoder, decode
from .stats import ScanStats, StatsAccumulator
from .pipeline import (
    DecodeResult,
    FileInfo,
    decode_file,
    file_info,
    filter_records,
    group_rows,
    iter_records,
    unscramble_file,
)


def parse_file(buffer: bytes) -> list[dict]:
    """Decode ``buffer`` into rows keyed by record type name."""
    return group_rows(decode_file(buffer).records)


__all__ = [
    "FileHeader",
    "parse_header",
    "RawRecordFrame",
    "RecordScanner",
    "ScanPass",
    "scan",
    "Descrambler",
    "DecodedRecord",
    "RecordTypeDecoder",
    "decode",
    "ScanStats",
    "StatsAccumulator",
    "DecodeResult",
    "FileInfo",
    "decode_file",
    "file_info",
    "filter_records",
    "group_rows",
    "iter_records",
    "unscramble_file",
    "parse_file",
]
