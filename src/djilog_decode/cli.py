"""djilog - flight log container decoder CLI."""
from __future__ import annotations

import json
from pathlib import Path

import click

from djilog_core.errors import DecodeError
from djilog_core.protocol import RecordType, type_name

from .export import CANONICAL_JSON_KW, records_to_json, stats_to_dict, write_records_parquet
from .header import FileHeader
from .pipeline import decode_file, file_info, filter_records, unscramble_file


def parse_type(value: str) -> int:
    """Record type from a name (``osd``) or a number (``1``)."""
    if value.isdigit():
        return int(value)
    try:
        return int(RecordType[value.upper()])
    except KeyError:
        raise click.BadParameter(f"Unknown record type {value!r}") from None


def _fatal(e: Exception) -> None:
    # One-line reason, no stack trace.
    click.echo(f"FATAL: {e}", err=True)
    raise SystemExit(1)


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")


def _header_dict(h: FileHeader) -> dict:
    return {
        "file_size": h.total_file_size,
        "header_size": h.header_size,
        "records_size": h.record_area_size,
        "details_size": h.details_area_size,
        "version": h.format_version,
    }


def _details_dict(h: FileHeader) -> dict:
    return {"offset": h.record_area_end, "size": h.details_area_size}


def _file_info_dict(file: Path, print_header: bool, print_records: bool,
                    details: bool, distrib: bool) -> dict:
    try:
        info = file_info(file.read_bytes())
    except DecodeError as e:
        _fatal(e)

    out: dict = {"file": str(file)}
    if print_header:
        out["header"] = _header_dict(info.header)
    if print_records:
        out["records"] = stats_to_dict(info.stats)
    if details:
        out["details"] = _details_dict(info.header)
    if distrib:
        total = sum(info.stats.type_count.values()) or 1
        out["distribution"] = {
            type_name(t): round(n / total, 4) for t, n in info.stats.type_count.items()
        }
    return out


@click.group()
def main():
    """Decode DJI-style flight log containers."""


@main.command("info")
@click.argument("files", nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--header", "print_header", is_flag=True, help="Print header area sizes")
@click.option("--records", "print_records", is_flag=True, help="Print record scan stats")
@click.option("--details", is_flag=True, help="Print details area offset and size")
@click.option("--distrib", is_flag=True, help="Print record type distribution")
def info_cmd(files: tuple[Path, ...], print_header: bool, print_records: bool,
             details: bool, distrib: bool):
    """Print area sizes and scan stats; one JSON object per file, a list for several."""
    if not (print_header or print_records or details or distrib):
        print_header = print_records = True

    infos = [_file_info_dict(f, print_header, print_records, details, distrib) for f in files]
    out = infos[0] if len(infos) == 1 else infos
    click.echo(json.dumps(out, indent=2, sort_keys=True))


@main.command("json")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--pretty", is_flag=True, help="Indent JSON output")
@click.option("--raw", is_flag=True, help="File is already unscrambled")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
def json_cmd(file: Path, pretty: bool, raw: bool, output: Path | None):
    try:
        result = decode_file(file.read_bytes(), descramble=not raw)
    except DecodeError as e:
        _fatal(e)

    _emit(records_to_json(result.records, pretty=pretty), output)
    for d in result.diagnostics:
        click.echo(f"{d.code} @{d.offset}: {d.message}", err=True)


@main.command("show")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("record_type")
@click.option("--parquet", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the selected records to a parquet table")
@click.option("--raw", is_flag=True, help="File is already unscrambled")
def show_cmd(file: Path, record_type: str, parquet: Path | None, raw: bool):
    code = parse_type(record_type)
    try:
        result = decode_file(file.read_bytes(), descramble=not raw)
    except DecodeError as e:
        _fatal(e)

    selected = [r for r in filter_records(result.records, code) if r.valid]
    if parquet is not None:
        if write_records_parquet(selected, parquet):
            click.echo(f"Wrote {len(selected)} {type_name(code)} records to {parquet}")
        else:
            click.echo(f"No {type_name(code)} records")
        return
    click.echo(records_to_json(selected, pretty=True))


@main.command("unscramble")
@click.argument("files", nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Output directory (defaults to the input's directory)")
def unscramble_cmd(files: tuple[Path, ...], output: Path | None):
    for file in files:
        try:
            data = unscramble_file(file.read_bytes())
        except DecodeError as e:
            _fatal(e)

        out_dir = output if output is not None else file.parent
        out_dir.mkdir(parents=True, exist_ok=True)
        dest = out_dir / (file.name + ".unscrambled")
        dest.write_bytes(data)
        click.echo(json.dumps({"written": str(dest), "size": len(data)}, **CANONICAL_JSON_KW))


if __name__ == "__main__":
    main()
