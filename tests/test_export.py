import json
import struct

import pyarrow.parquet as pq

from djilog_decode.export import records_to_dataframe, records_to_json, stats_to_dict, write_records_parquet
from djilog_decode.pipeline import decode_file

GIMBAL = struct.pack("<hhhB", 100, -50, 0, 0b10000000)


def _records(build):
    area = build.frame(3, GIMBAL) + build.frame(3, GIMBAL) + build.frame(77, b"\xab\xcd")
    return decode_file(build.container(area)).records


def test_json_renders_raw_as_hex(build):
    data = json.loads(records_to_json(_records(build)))
    assert len(data) == 3
    assert data[0]["type"] == "GIMBAL"
    assert data[0]["value"]["mode"] == 2
    assert data[2]["type"] == "UNKNOWN_77"
    assert data[2]["value"] == "abcd"


def test_pretty_json(build):
    text = records_to_json(_records(build), pretty=True)
    assert "\n" in text
    assert json.loads(text) == json.loads(records_to_json(_records(build)))


def test_stats_use_type_names(build):
    result = decode_file(build.container(build.frame(3, GIMBAL)))
    assert stats_to_dict(result.stats)["type_count"] == {"GIMBAL": 1}


def test_dataframe_columns(build):
    df = records_to_dataframe(_records(build))
    assert list(df["type"]) == ["GIMBAL", "GIMBAL", "UNKNOWN_77"]
    assert df.loc[0, "pitch"] == 10.0
    assert df.loc[2, "payload"] == "abcd"


def test_parquet(build, tmp_path):
    gimbals = [r for r in _records(build) if r.type == 3]
    out = tmp_path / "tables" / "gimbal.parquet"
    assert write_records_parquet(gimbals, out)
    table = pq.read_table(out)
    assert table.num_rows == 2
    assert "roll" in table.column_names
    assert not write_records_parquet([], tmp_path / "empty.parquet")
