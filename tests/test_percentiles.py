import math
import random

import pytest

from filestats.config import HistogramConfig
from filestats.errors import IndexOutOfRange, InvalidRange
from filestats.percentiles import PercentileStats


def make_stats(values, config=None):
    stats = PercentileStats(config)
    stats.extend(values)
    stats.sort()
    stats.calculate_percentiles()
    return stats


def random_stats(seed, n=2_000):
    rng = random.Random(seed)
    return make_stats([int(rng.lognormvariate(8.0, 2.0)) for _ in range(n)])


def test_percentile_values_one_to_ten():
    stats = make_stats(range(1, 11))
    assert stats.percentile_value(0) == 1
    assert stats.percentile_value(50) == 5
    assert stats.percentile_value(100) == 10
    assert stats.percentile_boundary(50) == 5.5


def test_min_max_and_monotonic():
    stats = random_stats(1)
    data = list(stats)
    assert stats.percentile_value(0) == min(data)
    assert stats.percentile_value(100) == max(data)
    values = [stats.percentile_value(i) for i in range(101)]
    assert all(a <= b for a, b in zip(values, values[1:]))


def test_cumulative_totals():
    stats = random_stats(2)
    data = list(stats)
    assert stats.cumulative_count(100) == len(data)
    assert stats.cumulative_sum(100) == sum(data)
    counts = [stats.cumulative_count(i) for i in range(101)]
    sums = [stats.cumulative_sum(i) for i in range(101)]
    assert all(a <= b for a, b in zip(counts, counts[1:]))
    assert all(a <= b for a, b in zip(sums, sums[1:]))


def test_cumulative_count_is_samples_up_to_boundary():
    stats = random_stats(3, n=777)
    data = list(stats)
    assert stats.cumulative_count(0) == 0
    for i in range(1, 101):
        boundary = stats.percentile_boundary(i)
        assert stats.cumulative_count(i) == sum(1 for v in data if v <= boundary)
        assert stats.cumulative_sum(i) == sum(v for v in data if v <= boundary)


def test_percentile_counts_add_up():
    stats = random_stats(4)
    assert stats.percentile_count(0) == 0
    assert stats.percentile_sum(0) == 0
    assert sum(stats.percentile_count(i) for i in range(101)) == len(stats)
    assert sum(stats.percentile_sum(i) for i in range(101)) == stats.total()


def test_range_accessors():
    stats = make_stats(range(1, 101))
    # P10 = 10.9, P90 = 90.1 -> samples 11..90
    assert stats.percentile_count(10, 90) == 80
    assert stats.percentile_sum(10, 90) == sum(range(11, 91))
    assert stats.percentile_count(0, 100) == 100
    assert stats.percentile_count(49, 50) == stats.percentile_count(50)


def test_duplicates_collapse_percentiles():
    stats = make_stats([7] * 50)
    assert all(stats.percentile_value(i) == 7 for i in range(101))
    assert stats.cumulative_count(1) == 50
    assert stats.percentile_count(1) == 50
    assert stats.percentile_count(2) == 0
    assert stats.cumulative_sum(100) == 350


def test_table_has_101_entries():
    for values in ([], [1], [1, 2], list(range(1000))):
        stats = make_stats(values)
        assert len(stats.percentile_list()) == 101
        assert len(stats._cumulative_counts) == 101
        assert len(stats._cumulative_sums) == 101


def test_empty_table_reads_zero():
    stats = make_stats([])
    assert stats.percentile(50) == 0
    assert stats.percentile_value(30) == 0
    assert stats.cumulative_count(100) == 0
    assert stats.cumulative_sum(100) == 0
    assert stats.percentile_count(10) == 0
    assert stats.percentile_sum(0, 100) == 0


def test_uncalculated_table_reads_zero():
    stats = PercentileStats()
    stats.extend([3, 1, 2])
    stats.sort()
    assert not stats.percentiles_calculated
    assert stats.percentile_value(50) == 0
    assert stats.cumulative_count(100) == 0
    assert stats.percentile_count(20, 80) == 0


def test_calculate_percentiles_is_idempotent():
    stats = random_stats(5)
    first = (stats.percentile_list(), list(stats._cumulative_counts), list(stats._cumulative_sums))
    stats.calculate_percentiles()
    second = (stats.percentile_list(), list(stats._cumulative_counts), list(stats._cumulative_sums))
    assert first == second


@pytest.mark.parametrize("index", [-1, 101, 1000])
def test_index_out_of_range(index):
    stats = make_stats([1, 2, 3])
    with pytest.raises(IndexOutOfRange):
        stats.percentile_value(index)
    with pytest.raises(IndexOutOfRange):
        stats.cumulative_count(index)
    with pytest.raises(IndexOutOfRange):
        stats.percentile_sum(index)


def test_index_validation_applies_to_empty_table():
    stats = make_stats([])
    with pytest.raises(IndexError):
        stats.percentile_count(101)


@pytest.mark.parametrize("start,end", [(50, 50), (60, 40), (-1, 10), (0, 101)])
def test_invalid_ranges(start, end):
    stats = make_stats(range(10))
    with pytest.raises(InvalidRange):
        stats.percentile_count(start, end)
    with pytest.raises(InvalidRange):
        stats.percentile_sum(start, end)


def test_auto_percentile_range_cuts_outlier():
    # Samples 1..100 plus one huge outlier: P_i is the sample at index i
    stats = make_stats(list(range(1, 101)) + [10**9])
    assert stats.auto_percentile_range() == (0, 99)


def test_auto_percentile_range_uniform_keeps_everything():
    stats = make_stats(range(1, 101))
    assert stats.auto_percentile_range() == (0, 100)


def test_auto_percentile_range_respects_factor():
    cfg = HistogramConfig(auto_range_iqr_factor=0.0)
    stats = make_stats(range(1, 101), cfg)
    start, end = stats.auto_percentile_range()
    assert start == 25
    assert end == 75


def test_auto_percentile_range_empty():
    assert make_stats([]).auto_percentile_range() == (0, 100)


def test_percentile_value_rounds_down():
    stats = make_stats([0, 3])
    # P50 = 1.5
    assert stats.percentile_value(50) == math.floor(1.5)
