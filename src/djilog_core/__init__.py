"""djilog core - protocol constants, key schedule and error taxonomy."""
from .protocol import RecordType, type_name
from .keys import record_key
from .errors import (
    DecodeError,
    DecodeWarning,
    Diagnostic,
    HeaderError,
    InvalidHeaderError,
    MalformedRecordError,
    TruncatedHeaderError,
    TruncatedTailNotification,
    UnknownRecordTypeNotification,
)

__all__ = [
    "RecordType",
    "type_name",
    "record_key",
    "DecodeError",
    "DecodeWarning",
    "Diagnostic",
    "HeaderError",
    "InvalidHeaderError",
    "MalformedRecordError",
    "TruncatedHeaderError",
    "TruncatedTailNotification",
    "UnknownRecordTypeNotification",
]
