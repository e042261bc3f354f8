"""Percentile table, histogram buckets and skewness over a sample set.

PercentileStats extends SampleSet with

- quantile()/percentile(): R7 rank interpolation over the sorted samples,
- calculate_percentiles(): 101 boundaries plus cumulative counts and sums,
  built in one linear pass,
- fill_buckets(): a BucketSet for any percentile sub-range,
- read-only accessors used by tables and histograms.

The typical sequence is collect() many times, sort() once,
calculate_percentiles() once, then fill_buckets() whenever the visible range
or bucket count changes.

Boundaries that coincide with a sample keep the sample's exact value;
interpolated boundaries are exact Fractions, so the table stays ordered at any
magnitude (convert with float() for display). A sample belongs to percentile i
when it is no larger than boundary i and greater than boundary i-1.
"""
from __future__ import annotations

import math
from fractions import Fraction
from typing import List, Optional, Tuple

from . import buckets as _buckets
from .bounds import (
    MAX_PERCENTILE,
    MEDIAN,
    MIN_PERCENTILE,
    PERCENTILE_COUNT,
    QUARTILE_1,
    QUARTILE_3,
    validate_index,
    validate_index_range,
)
from .buckets import BucketSet
from .config import HistogramConfig
from .errors import InvalidArgument
from .logutil import get_logger
from .samples import Boundary, Number, SampleSet

MAX_QUANTILE_ORDER = 100


class PercentileStats(SampleSet):
    def __init__(self, config: Optional[HistogramConfig] = None) -> None:
        self.cfg = config or HistogramConfig()
        super().__init__(verbose_sort_threshold=self.cfg.verbose_sort_threshold)
        self._percentiles: List[Boundary] = []
        self._cumulative_counts: List[int] = []
        self._cumulative_sums: List[Number] = []
        self._buckets = BucketSet()

    # Contract checks, exposed for callers validating user input
    validate_index = staticmethod(validate_index)
    validate_index_range = staticmethod(validate_index_range)

    @staticmethod
    def min_percentile() -> int:
        return MIN_PERCENTILE

    @staticmethod
    def max_percentile() -> int:
        return MAX_PERCENTILE

    def _ensure_sorted(self) -> None:
        if not self.is_sorted:
            get_logger().debug("Percentile query on unsorted data; sorting now")
            self.sort()

    def quantile(self, order: int, number: int) -> Boundary:
        """Quantile no. 'number' of order 'order'.

        The median is quantile(2, 1), the minimum quantile(2, 0), the maximum
        quantile(2, 2); the first quartile is quantile(4, 1). Returns 0 for an
        empty set.
        """
        if order < 2 or order > MAX_QUANTILE_ORDER:
            raise InvalidArgument(f"Invalid quantile order {order}")
        if number < 0 or number > order:
            raise InvalidArgument(f"Cannot determine quantile #{number} for {order}-quantile")

        data = self._data
        if not data:
            return 0
        self._ensure_sorted()

        # Integer arithmetic keeps the rank exact, Fraction the interpolation
        index, remainder = divmod((len(data) - 1) * number, order)
        value = data[index]
        if remainder == 0 or index + 1 == len(data):
            return value
        lower = Fraction(value)
        return lower + (Fraction(data[index + 1]) - lower) * remainder / order

    def percentile(self, number: int) -> Boundary:
        return self.quantile(MAX_PERCENTILE, number)

    def median(self) -> Boundary:
        return self.quantile(2, 1)

    def quartile(self, number: int) -> Boundary:
        return self.quantile(4, number)

    def calculate_percentiles(self) -> None:
        """(Re)build the percentile boundaries and the cumulative count and sum lists."""
        self._ensure_sorted()
        self._percentiles = [self.percentile(i) for i in range(PERCENTILE_COUNT)]

        percentiles = self._percentiles
        counts: List[int] = [0]
        sums: List[Number] = [0]
        count = 0
        total: Number = 0
        index = 1
        for value in self._data:
            # Every sample is <= the maximum, so P100 is filled in below
            while index < MAX_PERCENTILE and value > percentiles[index]:
                counts.append(count)
                sums.append(total)
                index += 1
            count += 1
            total += value

        while len(counts) < PERCENTILE_COUNT:
            counts.append(count)
            sums.append(total)

        self._cumulative_counts = counts
        self._cumulative_sums = sums

    @property
    def percentiles_calculated(self) -> bool:
        return bool(self._percentiles)

    def percentile_list(self) -> Tuple[Boundary, ...]:
        return tuple(self._percentiles)

    def percentile_boundary(self, index: int) -> Boundary:
        """Exact boundary of percentile 'index': a sample or a Fraction."""
        validate_index(index)
        if not self._percentiles:
            return 0
        return self._percentiles[index]

    def percentile_value(self, index: int) -> int:
        """Largest integer value that belongs in percentile 'index'."""
        return math.floor(self.percentile_boundary(index))

    def cumulative_count(self, index: int) -> int:
        validate_index(index)
        if not self._cumulative_counts:
            return 0
        return self._cumulative_counts[index]

    def cumulative_sum(self, index: int) -> Number:
        validate_index(index)
        if not self._cumulative_sums:
            return 0
        return self._cumulative_sums[index]

    def percentile_count(self, index: int, end: Optional[int] = None) -> int:
        """Number of samples in percentile 'index', or between 'index' and 'end'.

        With an 'end', this is the number of samples greater than boundary
        'index' and no larger than boundary 'end'.
        """
        if end is not None:
            validate_index_range(index, end)
            return self._cumulative_difference(self._cumulative_counts, index, end)
        validate_index(index)
        if index == MIN_PERCENTILE:
            return 0
        return self._cumulative_difference(self._cumulative_counts, index - 1, index)

    def percentile_sum(self, index: int, end: Optional[int] = None) -> Number:
        if end is not None:
            validate_index_range(index, end)
            return self._cumulative_difference(self._cumulative_sums, index, end)
        validate_index(index)
        if index == MIN_PERCENTILE:
            return 0
        return self._cumulative_difference(self._cumulative_sums, index - 1, index)

    @staticmethod
    def _cumulative_difference(values: List, start: int, end: int) -> Number:
        if not values:
            return 0
        return values[end] - values[start]

    def auto_percentile_range(self, iqr_factor: Optional[float] = None) -> Tuple[int, int]:
        """Percentile range that leaves out outliers at either end.

        Outliers are values below q1 - k*IQR or above q3 + k*IQR. The start is
        searched from P0 up to Q1 and the end from P100 down to Q3, so the
        interquartile range is always visible.
        """
        k = self.cfg.auto_range_iqr_factor if iqr_factor is None else iqr_factor
        if not self._percentiles:
            return MIN_PERCENTILE, MAX_PERCENTILE

        q1 = self.percentile_boundary(QUARTILE_1)
        q3 = self.percentile_boundary(QUARTILE_3)
        fence = Fraction(k) * (Fraction(q3) - Fraction(q1))
        min_val = q1 - fence
        max_val = q3 + fence

        start = MIN_PERCENTILE
        while start < QUARTILE_1 and self._percentiles[start] < min_val:
            start += 1
        end = MAX_PERCENTILE
        while end > QUARTILE_3 and self._percentiles[end] > max_val:
            end -= 1
        return start, end

    def best_bucket_count(self, start_percentile: int, end_percentile: int) -> int:
        """Rice rule bucket count for the samples in a percentile range."""
        validate_index_range(start_percentile, end_percentile)
        n = round(len(self) * (end_percentile - start_percentile) / 100)
        return _buckets.best_bucket_count(n, self.cfg.max_buckets)

    def fill_buckets(
        self,
        log_widths: bool,
        bucket_count: int,
        start_percentile: int,
        end_percentile: int,
    ) -> BucketSet:
        """Replace the current buckets with a new set for the given range."""
        validate_index_range(start_percentile, end_percentile)
        if not self._percentiles:
            get_logger().debug("fill_buckets() before calculate_percentiles(); calculating now")
            self.calculate_percentiles()
        self._buckets = _buckets.fill_buckets(
            self._data,
            self._percentiles,
            log_widths,
            bucket_count,
            start_percentile,
            end_percentile,
        )
        return self._buckets

    @property
    def buckets(self) -> BucketSet:
        return self._buckets

    def buckets_count(self) -> int:
        return len(self._buckets)

    def bucket_start(self, index: int) -> int:
        return self._buckets.start(index)

    def bucket_end(self, index: int) -> int:
        return self._buckets.end(index)

    def bucket_count(self, index: int) -> int:
        return self._buckets.count(index)

    def bucket_width(self, index: int) -> float:
        return self._buckets.width(index)

    def skewness(self) -> float:
        return self._buckets.skewness()

    def log_heights(self) -> bool:
        """True when the current buckets are skewed enough for log bar heights."""
        return self.skewness() > self.cfg.log_heights_skewness


__all__ = ["PercentileStats", "MEDIAN", "QUARTILE_1", "QUARTILE_3"]
