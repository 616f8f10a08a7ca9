"""Flight log container protocol constants.

Single source of truth for on-disk offsets, struct layouts and record type
codes. Keep this file stable. Scanner, descrambler and sample writer must
remain synchronized.
"""
from enum import IntEnum

# Header: [HeaderRecordSizeLo(4) | HeaderRecordSizeHi(4) | Reserved(2) | Version(1)]
# padded with zeros to 100 bytes.
HEADER_LEN = 100
HEADER_FMT = "<IIHB"

# Frame prologue: [Marker(1) | Type(1) | Length(1)] followed by Length payload bytes
FRAME_FMT = "<BBB"
FRAME_OVERHEAD = 3
RECORD_MARKER = 0xFF

# Scrambling
SCRAMBLE_MIN_VERSION = 6
KEY_LEN = 8
JPEG_TYPE = 57
UNSCRAMBLED_TYPES = frozenset({JPEG_TYPE})


class RecordType(IntEnum):
    """Record type codes with a known field layout."""

    OSD = 1
    HOME = 2
    GIMBAL = 3
    RC = 4
    CUSTOM = 5
    DEFORM = 6
    CENTER_BATTERY = 7
    SMART_BATTERY = 8
    APP_TIP = 9
    APP_WARN = 10
    RC_GPS = 11
    APP_GPS = 14


def type_name(code: int) -> str:
    """Human name for a type code; unknown codes render as ``UNKNOWN_<code>``."""
    try:
        return RecordType(code).name
    except ValueError:
        return f"UNKNOWN_{int(code)}"
