"""JSON and parquet rendering of decoded records."""
from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Iterable

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from djilog_core.protocol import type_name

from .records import DecodedRecord
from .stats import ScanStats

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}


def _jsonable(value):
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return value


def record_to_dict(rec: DecodedRecord) -> dict:
    d = {
        "type": rec.name,
        "code": int(rec.type),
        "offset": rec.offset,
        "valid": rec.valid,
        "value": _jsonable(rec.value),
    }
    if rec.error is not None:
        d["error"] = rec.error
    return d


def records_to_json(records: Iterable[DecodedRecord], pretty: bool = False) -> str:
    data = [record_to_dict(r) for r in records]
    if pretty:
        return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)
    return json.dumps(data, **CANONICAL_JSON_KW)


def stats_to_dict(stats: ScanStats) -> dict:
    d = asdict(stats)
    d["type_count"] = {type_name(t): n for t, n in stats.type_count.items()}
    return d


def records_to_dataframe(records: Iterable[DecodedRecord]) -> pd.DataFrame:
    """One row per record; field layouts become columns, raw payloads a hex column."""
    rows: list[dict] = []
    for r in records:
        row = {"offset": r.offset, "type": r.name}
        if isinstance(r.value, dict):
            row.update(r.value)
        else:
            row["payload"] = bytes(r.value).hex()
        rows.append(row)
    return pd.DataFrame(rows)


def write_records_parquet(records: Iterable[DecodedRecord], path: Path) -> bool:
    """Write records to a parquet table. Returns False when there is nothing to write."""
    df = records_to_dataframe(records)
    if df.empty:
        return False
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pandas(df, preserve_index=False)
    pq.write_table(table, path)
    return True
