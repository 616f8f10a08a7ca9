"""Query an exported OSD table - peak altitude and speed per flight state."""
from __future__ import annotations

import sys
from pathlib import Path

import duckdb


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python query.py <osd.parquet>")
        print("Example: djilog show FLY001.txt osd --parquet osd.parquet && python query.py osd.parquet")
        sys.exit(1)

    table = Path(sys.argv[1])

    con = duckdb.connect(":memory:")
    con.execute(f"CREATE VIEW osd AS SELECT * FROM '{table}'")

    sql = """
    SELECT
        flyc_state,
        COUNT(*) AS samples,
        MAX(height) AS max_height,
        MAX(sqrt(x_speed * x_speed + y_speed * y_speed)) AS max_h_speed
    FROM osd
    GROUP BY flyc_state
    ORDER BY flyc_state
    """

    print(f"--- OSD summary: {table} ---\n")

    df = con.execute(sql).fetchdf()
    if df.empty:
        print("No OSD records found.")
    else:
        for _, row in df.iterrows():
            print(f"STATE: {row['flyc_state']}")
            print(f"  Samples: {row['samples']}")
            print(f"  Max height: {row['max_height']} m")
            print(f"  Max horizontal speed: {row['max_h_speed']:.1f} m/s")
            print()


if __name__ == "__main__":
    main()
