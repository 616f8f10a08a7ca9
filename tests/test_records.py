import math
import struct

import pytest

from djilog_core.errors import MalformedRecordError
from djilog_core.protocol import RecordType
from djilog_decode.records import LAYOUTS, RecordTypeDecoder, decode


def test_osd_fields():
    payload = struct.pack(
        "<ddhhhhhhhBBBBBH",
        math.radians(8.5), math.radians(47.25), 123, 10, -20, 5, 15, -15, 900,
        0x80 | 6, 2, 0b10101001, 12, 87, 345,
    )
    rec = decode(RecordType.OSD, payload, offset=100)
    v = rec.value
    assert not rec.raw
    assert rec.name == "OSD"
    assert v["longitude"] == pytest.approx(8.5)
    assert v["latitude"] == pytest.approx(47.25)
    assert v["height"] == pytest.approx(12.3)
    assert v["y_speed"] == pytest.approx(-2.0)
    assert v["yaw"] == pytest.approx(90.0)
    assert v["flyc_state"] == 6
    assert v["is_gps_used"] == 1
    assert v["can_ioc_work"] == 1
    assert v["ground_or_sky"] == 0
    assert v["is_motor_up"] == 1
    assert v["is_swave_work"] == 0
    assert v["go_home_status"] == 5
    assert v["gps_num"] == 12
    assert v["battery"] == 87
    assert v["fly_time"] == pytest.approx(34.5)
    assert "state" not in v and "flags" not in v


def test_rc_stick_centering():
    rec = decode(RecordType.RC, struct.pack("<HHHH", 1024, 1684, 364, 1024))
    assert rec.value == {"aileron": 0.0, "elevator": 100.0, "throttle": -100.0, "rudder": 0.0}


def test_text_record():
    rec = decode(RecordType.APP_WARN, b"Low battery\x00\x00garbage")
    assert rec.value == {"warn": "Low battery"}


def test_extra_bytes_ignored():
    rec = decode(RecordType.DEFORM, b"\x13\xaa\xbb")
    assert rec.value == {"is_deform_protected": 1, "deform_status": 1, "deform_mode": 1}


def test_short_payload_is_malformed():
    with pytest.raises(MalformedRecordError) as exc:
        decode(RecordType.HOME, b"\x00" * 5, offset=321)
    assert exc.value.expected == LAYOUTS[RecordType.HOME].size
    assert exc.value.actual == 5
    assert exc.value.offset == 321


@pytest.mark.parametrize("code", [0, 12, 57, 99, 255])
def test_unknown_type_is_raw(code):
    rec = decode(code, b"\x01\x02\x03")
    assert rec.raw
    assert rec.value == b"\x01\x02\x03"
    assert rec.name == f"UNKNOWN_{code}"


def test_every_known_type_has_a_layout():
    assert set(LAYOUTS) == set(RecordType)


def test_custom_layout_table():
    decoder = RecordTypeDecoder(layouts={})
    assert decoder.decode(1, b"\x00").raw
    assert not decoder.is_known(1)
