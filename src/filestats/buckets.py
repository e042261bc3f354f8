"""Histogram buckets over a percentile sub-range of sorted samples.

Buckets cover the value range between two percentile boundaries. Widths are
either equal (linear) or grow geometrically (logarithmic), the latter giving
fine resolution at the low end of right-skewed data such as file sizes.

Membership follows the percentile table: a sample belongs to the range when it
is greater than the start boundary and no larger than the end boundary. The one
exception is a range starting at the minimum (P0), where samples equal to the
minimum are counted in bucket 0 as well.
"""
from __future__ import annotations

import bisect
import heapq
import math
from dataclasses import dataclass
from fractions import Fraction
from itertools import islice
from typing import List, Sequence, Tuple

from .bounds import MIN_PERCENTILE, validate_index_range
from .errors import IndexOutOfRange
from .samples import Boundary, Number


def log2(value: float) -> float:
    """Base-2 logarithm that degrades to value/2 for values up to 2.

    Continuous at 2 and defined for zero and negative values, so log-width
    calculations never see -inf.
    """
    if value <= 2:
        return value / 2
    return math.log2(value)


def best_bucket_count(n: int, max_buckets: int) -> int:
    """Rice rule bucket count for n data points, clamped to max_buckets."""
    if n <= 0:
        return 0
    # ceil(2 * cbrt(n)) is the smallest k with k**3 >= 8n; settle it exactly
    k = math.ceil(2 * math.cbrt(n))
    while k > 1 and (k - 1) ** 3 >= 8 * n:
        k -= 1
    while k ** 3 < 8 * n:
        k += 1
    return min(k, max_buckets)


@dataclass(frozen=True)
class BucketSet:
    """Immutable result of one fill_buckets() call.

    starts has one more entry than counts: starts[i] is the lower boundary of
    bucket i and starts[-1] is the end of the range.
    """

    starts: Tuple[Boundary, ...] = (0,)
    counts: Tuple[int, ...] = ()

    def __len__(self) -> int:
        return len(self.counts)

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self.counts):
            raise IndexOutOfRange(f"Bucket index {index} out of range 0..{len(self.counts) - 1}")

    def count(self, index: int) -> int:
        self._check(index)
        return self.counts[index]

    def width(self, index: int) -> float:
        self._check(index)
        return float(self.starts[index + 1] - self.starts[index])

    def start(self, index: int) -> int:
        """Smallest integer value that is counted in bucket 'index'."""
        self._check(index)
        return math.ceil(self.starts[index])

    def end(self, index: int) -> int:
        """Largest integer value that is counted in bucket 'index'."""
        self._check(index)
        start = math.ceil(self.starts[index])
        if index == len(self.counts) - 1:
            end = math.floor(self.starts[-1])
        else:
            end = math.ceil(self.starts[index + 1]) - 1
        return max(start, end)

    def total(self) -> int:
        return sum(self.counts)

    def skewness(self) -> float:
        return skewness(self.counts)


def _linear_boundaries(start: Boundary, end: Boundary, bucket_count: int) -> List[Boundary]:
    width = Fraction(end - start) / bucket_count
    boundaries = [start]
    for i in range(1, bucket_count):
        boundaries.append(min(max(start + i * width, boundaries[-1]), end))
    boundaries.append(end)
    return boundaries


def _log_boundaries(start: Boundary, end: Boundary, bucket_count: int) -> List[Boundary]:
    log_start = log2(start)
    log_end = log2(end)
    # A start near zero gets a bucket of its own before the geometric steps begin
    steps = bucket_count - 1 if log_start < 1 else bucket_count
    factor = 2.0 ** ((log_end - log_start) / max(steps, 1))
    boundaries = [start]
    for _ in range(1, bucket_count):
        next_start = boundaries[-1] * factor
        # Multiplying zero (or less) never gets anywhere
        if next_start <= 0 and factor > 1:
            next_start = 1.0
        boundaries.append(min(max(next_start, boundaries[-1]), end))
    boundaries.append(end)
    return boundaries


def fill_buckets(
    data: Sequence[Number],
    percentiles: Sequence[Boundary],
    log_widths: bool,
    bucket_count: int,
    start_percentile: int,
    end_percentile: int,
) -> BucketSet:
    """Count sorted samples into buckets between two percentile boundaries.

    'data' must be sorted ascending and 'percentiles' must be the 101 boundaries
    calculated from it. The bucket count is forced to 1 when the range has zero
    width, when bucket_count < 1, or when there are not enough value units in the
    range for the requested number of buckets.
    """
    validate_index_range(start_percentile, end_percentile)

    buckets_start = percentiles[start_percentile]
    buckets_end = percentiles[end_percentile]

    # Granules: a span of s covers s + 1 integer values
    if buckets_end == buckets_start or bucket_count < 1 or bucket_count > buckets_end - buckets_start:
        bucket_count = 1

    if log_widths:
        boundaries = _log_boundaries(buckets_start, buckets_end, bucket_count)
    else:
        boundaries = _linear_boundaries(buckets_start, buckets_end, bucket_count)

    counts = [0] * bucket_count
    if start_percentile == MIN_PERCENTILE:
        first = 0
    else:
        first = bisect.bisect_right(data, buckets_start)

    index = 0
    last = bucket_count - 1
    for value in islice(data, first, None):
        if value > buckets_end:
            break
        while index < last and value >= boundaries[index + 1]:
            index += 1
        counts[index] += 1

    return BucketSet(starts=tuple(boundaries), counts=tuple(counts))


def skewness(counts: Sequence[int]) -> float:
    """Ratio of the highest bucket to the bucket 15% up from the lowest.

    Returns 0 for fewer than 4 buckets. A large value means a few tall bars
    dwarf the rest, which is when log heights make a histogram readable.
    """
    n = len(counts)
    if n < 4:
        return 0.0
    rank = n * 15 // 100
    reference = heapq.nsmallest(rank + 1, counts)[-1]
    return max(counts) / max(reference, 1)


__all__ = ["BucketSet", "best_bucket_count", "fill_buckets", "log2", "skewness"]
