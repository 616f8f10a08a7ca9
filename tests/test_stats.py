from djilog_decode.scanner import RawRecordFrame
from djilog_decode.stats import StatsAccumulator


def _frame(rtype, marker=0xFF):
    return RawRecordFrame(marker=marker, type=rtype, length=0, payload=b"", offset=0)


def test_counts():
    acc = StatsAccumulator(record_area_size=40, version=6)
    for f in [_frame(1), _frame(1), _frame(2), _frame(3, marker=0), _frame(1, marker=0x7F)]:
        acc.observe(f)
    s = acc.finalize()
    assert s.record_count == 5
    assert s.type_count == {1: 2, 2: 1}
    assert s.invalid_record_count == 2
    assert s.record_count == sum(s.type_count.values()) + s.invalid_record_count
    assert s.record_area_size == 40
    assert s.version == 6


def test_invalid_frame_leaves_histogram_alone():
    acc = StatsAccumulator()
    acc.observe(_frame(4, marker=0))
    s = acc.finalize()
    assert s.type_count == {}
    assert s.invalid_record_count == 1


def test_merge_partials():
    a, b = StatsAccumulator(), StatsAccumulator()
    a.observe(_frame(1))
    b.observe(_frame(1))
    b.observe(_frame(2, marker=0))
    a.merge(b)
    s = a.finalize()
    assert s.record_count == 3
    assert s.type_count == {1: 2}
    assert s.invalid_record_count == 1


def test_finalized_stats_are_detached():
    acc = StatsAccumulator()
    acc.observe(_frame(1))
    s = acc.finalize()
    acc.observe(_frame(1))
    assert s.type_count == {1: 1}
