"""Scan statistics aggregation."""
from __future__ import annotations

from dataclasses import dataclass, field

from .scanner import RawRecordFrame


@dataclass(frozen=True)
class ScanStats:
    record_area_size: int
    version: int
    record_count: int
    type_count: dict[int, int] = field(default_factory=dict)
    invalid_record_count: int = 0
    unconsumed_bytes: int = 0


class StatsAccumulator:
    """Single-writer accumulator fed one frame at a time.

    Every frame counts toward ``record_count``; invalid frames only toward
    ``invalid_record_count``, valid ones toward the type histogram.
    """

    def __init__(self, record_area_size: int = 0, version: int = 0):
        self.record_area_size = record_area_size
        self.version = version
        self.record_count = 0
        self.invalid_record_count = 0
        self.unconsumed_bytes = 0
        self.type_count: dict[int, int] = {}

    def observe(self, frame: RawRecordFrame) -> None:
        self.record_count += 1
        if not frame.valid:
            self.invalid_record_count += 1
            return
        self.type_count[frame.type] = self.type_count.get(frame.type, 0) + 1

    def merge(self, other: "StatsAccumulator") -> None:
        """Fold a partial accumulator (e.g. from another worker) into this one."""
        self.record_count += other.record_count
        self.invalid_record_count += other.invalid_record_count
        for t, n in other.type_count.items():
            self.type_count[t] = self.type_count.get(t, 0) + n

    def finalize(self) -> ScanStats:
        return ScanStats(
            record_area_size=self.record_area_size,
            version=self.version,
            record_count=self.record_count,
            type_count=dict(sorted(self.type_count.items())),
            invalid_record_count=self.invalid_record_count,
            unconsumed_bytes=self.unconsumed_bytes,
        )
