"""Error taxonomy and diagnostic codes."""
from __future__ import annotations

from dataclasses import dataclass

from .protocol import FRAME_OVERHEAD

DIAGNOSTICS = {
    "W_TRUNCATED_TAIL": "Final record is shorter than its declared length",
    "W_INVALID_MARKER": "Record marker is not 0xFF; payload left undecoded",
    "W_MALFORMED_RECORD": "Record payload is shorter than its field layout",
    "W_UNKNOWN_TYPE": "Record type has no known layout; kept as raw bytes",
    "W_HEADER_CLAMPED": "Header record size points past end of file; clamped",
}


class DecodeWarning(UserWarning):
    """Soft decode condition. The scan continues."""


class DecodeError(ValueError):
    """Base class for flight log decode failures."""


class HeaderError(DecodeError):
    """The file header cannot be used. Fatal to the whole file."""


class TruncatedHeaderError(HeaderError):
    def __init__(self, available: int, required: int):
        self.available = available
        self.required = required
        super().__init__(f"Truncated header: {available} bytes, need {required}")


class InvalidHeaderError(HeaderError):
    pass


class MalformedRecordError(DecodeError):
    """A known record type whose payload is too short for its layout."""

    def __init__(self, record_type: int, offset: int | None, expected: int, actual: int):
        self.record_type = record_type
        self.offset = offset
        self.expected = expected
        self.actual = actual
        where = f" at offset {offset}" if offset is not None else ""
        super().__init__(
            f"Malformed record type {record_type}{where}: "
            f"payload {actual} bytes, layout needs {expected}"
        )


@dataclass(frozen=True)
class UnknownRecordTypeNotification:
    record_type: int
    offset: int
    length: int


@dataclass(frozen=True)
class TruncatedTailNotification:
    """The scan stopped at a frame whose payload runs past the record area.

    ``available`` counts payload bytes present after the frame prologue.
    """

    offset: int
    record_type: int
    declared_length: int
    available: int

    @property
    def unconsumed(self) -> int:
        return FRAME_OVERHEAD + self.available


@dataclass(frozen=True)
class Diagnostic:
    code: str
    offset: int | None = None
    record_type: int | None = None
    message: str = ""

    @classmethod
    def make(cls, code: str, offset: int | None = None, record_type: int | None = None,
             detail: str = "") -> "Diagnostic":
        msg = DIAGNOSTICS[code]
        if detail:
            msg = f"{msg} ({detail})"
        return cls(code=code, offset=offset, record_type=record_type, message=msg)
