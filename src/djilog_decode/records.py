"""Per-type record decoding.

A static table maps each known type code to a field layout. Layouts are
fixed-offset little-endian structs with optional converters and bitfield
expansion, or NUL-terminated text. Unknown codes decode to a raw variant.
"""
from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from typing import Callable, Union

from djilog_core.errors import MalformedRecordError
from djilog_core.protocol import RecordType, type_name


@dataclass(frozen=True)
class DecodedRecord:
    type: int
    value: Union[dict, bytes]
    offset: int | None = None
    valid: bool = True
    raw: bool = False
    error: str | None = None

    @property
    def name(self) -> str:
        return type_name(self.type)


def _scale(factor: float) -> Callable[[float], float]:
    return lambda v: round(v * factor, 6)


def _stick(v: int) -> float:
    """RC stick position as percent of travel around the 1024 center."""
    return round((v - 1024) / 6.6, 2)


# (name, shift, width)
Bits = list[tuple[str, int, int]]


@dataclass(frozen=True)
class StructLayout:
    fmt: str
    fields: tuple[str, ...]
    convert: dict[str, Callable] = field(default_factory=dict)
    bits: dict[str, Bits] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return struct.calcsize(self.fmt)

    def decode(self, record_type: int, payload: bytes, offset: int | None = None) -> dict:
        if len(payload) < self.size:
            raise MalformedRecordError(record_type, offset, self.size, len(payload))

        values = struct.unpack_from(self.fmt, payload, 0)
        out: dict = {}
        for name, v in zip(self.fields, values):
            if name in self.bits:
                for sub, shift, width in self.bits[name]:
                    out[sub] = (v >> shift) & ((1 << width) - 1)
                continue
            conv = self.convert.get(name)
            out[name] = conv(v) if conv else v
        return out


@dataclass(frozen=True)
class TextLayout:
    field_name: str = "text"

    def decode(self, record_type: int, payload: bytes, offset: int | None = None) -> dict:
        text = bytes(payload).split(b"\x00", 1)[0].decode("utf-8", errors="replace")
        return {self.field_name: text}


def _deg(v: float) -> float:
    return round(math.degrees(v), 8)


_tenth = _scale(0.1)
_e7 = _scale(1e-7)
_milli = _scale(0.001)

LAYOUTS: dict[int, Union[StructLayout, TextLayout]] = {
    RecordType.OSD: StructLayout(
        "<ddhhhhhhhBBBBBH",
        ("longitude", "latitude", "height", "x_speed", "y_speed", "z_speed",
         "pitch", "roll", "yaw", "state", "flyc_command", "flags", "gps_num",
         "battery", "fly_time"),
        convert={
            "longitude": _deg, "latitude": _deg,
            "height": _tenth, "x_speed": _tenth, "y_speed": _tenth, "z_speed": _tenth,
            "pitch": _tenth, "roll": _tenth, "yaw": _tenth, "fly_time": _tenth,
        },
        bits={
            "state": [("flyc_state", 0, 7), ("is_gps_used", 7, 1)],
            "flags": [("can_ioc_work", 0, 1), ("ground_or_sky", 1, 2), ("is_motor_up", 3, 1),
                      ("is_swave_work", 4, 1), ("go_home_status", 5, 3)],
        },
    ),
    RecordType.HOME: StructLayout(
        "<ddhBH",
        ("longitude", "latitude", "height", "flags", "go_home_height"),
        convert={"longitude": _deg, "latitude": _deg, "height": _tenth},
        bits={"flags": [("has_go_home", 0, 1), ("go_home_status", 1, 3),
                        ("is_dyn_home_point_enabled", 4, 1)]},
    ),
    RecordType.GIMBAL: StructLayout(
        "<hhhB",
        ("pitch", "roll", "yaw", "mode"),
        convert={"pitch": _tenth, "roll": _tenth, "yaw": _tenth},
        bits={"mode": [("is_stuck", 0, 1), ("is_auto_calibration", 1, 1), ("mode", 6, 2)]},
    ),
    RecordType.RC: StructLayout(
        "<HHHH",
        ("aileron", "elevator", "throttle", "rudder"),
        convert={"aileron": _stick, "elevator": _stick, "throttle": _stick, "rudder": _stick},
    ),
    RecordType.CUSTOM: StructLayout(
        "<BBffQ",
        ("camera_shoot", "video_shoot", "h_speed", "distance", "update_time"),
        convert={"h_speed": lambda v: round(v, 3), "distance": lambda v: round(v, 3)},
    ),
    RecordType.DEFORM: StructLayout(
        "<B",
        ("flags",),
        bits={"flags": [("is_deform_protected", 0, 1), ("deform_status", 1, 3),
                        ("deform_mode", 4, 2)]},
    ),
    RecordType.CENTER_BATTERY: StructLayout(
        "<BHHHBHIH",
        ("relative_capacity", "current_pv", "current_capacity", "full_capacity",
         "life", "loop_num", "error_type", "current"),
        convert={"current_pv": _milli, "current": _milli},
    ),
    RecordType.SMART_BATTERY: StructLayout(
        "<HHHHHHB",
        ("useful_time", "go_home_time", "land_time", "go_home_battery",
         "land_battery", "safe_fly_radius", "battery"),
    ),
    RecordType.APP_TIP: TextLayout("tip"),
    RecordType.APP_WARN: TextLayout("warn"),
    RecordType.RC_GPS: StructLayout(
        "<BBBHBBii",
        ("hour", "minute", "second", "year", "month", "day", "latitude", "longitude"),
        convert={"latitude": _e7, "longitude": _e7},
    ),
    RecordType.APP_GPS: StructLayout(
        "<ddf",
        ("latitude", "longitude", "accuracy"),
        convert={"accuracy": lambda v: round(v, 3)},
    ),
}


class RecordTypeDecoder:
    """Dispatches canonical payloads to their type's layout."""

    def __init__(self, layouts: dict | None = None):
        self.layouts = dict(LAYOUTS if layouts is None else layouts)

    def is_known(self, record_type: int) -> bool:
        return record_type in self.layouts

    def decode(self, record_type: int, payload: bytes, offset: int | None = None) -> DecodedRecord:
        layout = self.layouts.get(record_type)
        if layout is None:
            return DecodedRecord(type=record_type, value=bytes(payload), offset=offset, raw=True)
        return DecodedRecord(
            type=record_type,
            value=layout.decode(record_type, payload, offset),
            offset=offset,
        )


_default_decoder = RecordTypeDecoder()


def decode(record_type: int, payload: bytes, offset: int | None = None) -> DecodedRecord:
    return _default_decoder.decode(record_type, payload, offset)
