import math, random, struct
from pathlib import Path

from djilog_core.protocol import (
    HEADER_FMT,
    HEADER_LEN,
    FRAME_FMT,
    RECORD_MARKER,
    RecordType,
)
from djilog_decode.descramble import Descrambler

# --- CONFIGURATION ---
HZ = 10
HOME_LAT = 47.3977
HOME_LON = 8.5456
DETAILS = b"sample-details\x00" * 4


def pack_frame(descrambler, rtype, payload, marker=RECORD_MARKER):
    """Scramble (if the file version calls for it) and frame one record."""
    body = descrambler.scramble(rtype, payload)
    return struct.pack(FRAME_FMT, marker, int(rtype), len(body)) + body


def osd_payload(t, lat, lon, height):
    return struct.pack(
        "<ddhhhhhhhBBBBBH",
        math.radians(lon), math.radians(lat),
        int(height * 10), 12, -4, 0,
        int(math.sin(t) * 50), int(math.cos(t) * 30), int((t * 100) % 3600),
        0x80 | 6, 0, 0b00001010, 14, max(0, 100 - int(t)), int(t * 10),
    )


def generate_log(out_dir, version=6, seconds=5, corrupt=False, torn=False, seed=0):
    """Write a synthetic flight log and return its path.

    ``corrupt`` clears the marker of one mid-file record; ``torn`` appends a
    record whose declared length runs past the end of the record area.
    """
    rng = random.Random(seed)
    descrambler = Descrambler(version)
    records = bytearray()

    records += pack_frame(descrambler, RecordType.HOME, struct.pack(
        "<ddhBH", math.radians(HOME_LON), math.radians(HOME_LAT), 4880, 0b00000011, 300))

    ticks = seconds * HZ
    for tick in range(ticks):
        t = tick / HZ
        lat = HOME_LAT + 0.00001 * tick
        lon = HOME_LON + rng.uniform(-1e-6, 1e-6)
        height = min(t * 2.0, 60.0)

        marker = 0x00 if corrupt and tick == ticks // 2 else RECORD_MARKER
        records += pack_frame(descrambler, RecordType.OSD, osd_payload(t, lat, lon, height), marker)
        records += pack_frame(descrambler, RecordType.GIMBAL, struct.pack("<hhhB", -900, 0, 120, 0b01000000))
        records += pack_frame(descrambler, RecordType.RC, struct.pack("<HHHH", 1024, 1090, 1200, 1024))
        if tick % HZ == 0:
            records += pack_frame(descrambler, RecordType.CENTER_BATTERY, struct.pack(
                "<BHHHBHIH", 100 - tick // HZ, 15400, 4200, 4480, 98, 37, 0, 3200))
            records += pack_frame(descrambler, RecordType.CUSTOM, struct.pack(
                "<BBffQ", 0, 1, 3.5, 2.0 * t, 1700000000000 + tick * 100))

    records += pack_frame(descrambler, RecordType.APP_TIP, b"Aircraft returning home\x00")
    # Unknown type from a newer firmware
    records += pack_frame(descrambler, 200, bytes(rng.randrange(256) for _ in range(6)))

    if torn:
        records += struct.pack(FRAME_FMT, RECORD_MARKER, int(RecordType.OSD), 37) + b"\x00" * 5

    header = struct.pack(HEADER_FMT, HEADER_LEN + len(records), 0, 0, version)
    header += b"\x00" * (HEADER_LEN - len(header))

    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    name = f"FLY{seed:03d}_v{version}{'_corrupt' if corrupt else ''}{'_torn' if torn else ''}.txt"
    path = out / name
    path.write_bytes(header + bytes(records) + DETAILS)

    print(f"GENERATED: {path}")
    return path


if __name__ == "__main__":
    import sys

    # Usage:
    #   python tools/make_sample_log.py OUT_DIR [--version N] [--corrupt] [--torn]

    args = [a for a in sys.argv[1:] if a]

    def pop_flag(arg_list: list[str], flag: str) -> tuple[bool, list[str]]:
        """Remove a boolean flag from an argv-style list."""
        if flag in arg_list:
            return True, [a for a in arg_list if a != flag]
        return False, arg_list

    corrupt, args = pop_flag(args, "--corrupt")
    torn, args = pop_flag(args, "--torn")

    version = 6
    if "--version" in args:
        i = args.index("--version")
        if i + 1 >= len(args):
            raise SystemExit("--version requires a value")
        version = int(args[i + 1])
        args = args[:i] + args[i + 2:]

    out = args[0] if len(args) > 0 else "sample_logs"
    generate_log(out, version=version, corrupt=corrupt, torn=torn)
