"""Raw sample storage for percentile statistics.

One value is stored per collected item (one number per file), so a set built
from a large tree is expensive in memory, and sorting it is O(n log n). The
set is filled by repeated collect() calls and sorted once afterwards.
"""
from __future__ import annotations

from fractions import Fraction
from typing import Iterable, Iterator, List, Union

from .logutil import get_logger

Number = Union[int, float]
# Percentile boundaries: samples, or exact fractions between two samples
Boundary = Union[int, float, Fraction]

DEFAULT_VERBOSE_SORT_THRESHOLD = 50000


class SampleSet:
    """Unordered bag of samples that becomes an ascending sequence after sort()."""

    def __init__(self, verbose_sort_threshold: int = DEFAULT_VERBOSE_SORT_THRESHOLD) -> None:
        self._data: List[Number] = []
        self._sorted = True
        self.verbose_sort_threshold = verbose_sort_threshold

    def collect(self, value: Number) -> None:
        """Append one sample. The set is unsorted afterwards."""
        self._data.append(value)
        self._sorted = False

    def extend(self, values: Iterable[Number]) -> None:
        self._data.extend(values)
        self._sorted = False

    def sort(self) -> None:
        n = len(self._data)
        log = get_logger()
        if n > self.verbose_sort_threshold:
            log.debug("Sorting %d elements", n)
        self._data.sort()
        self._sorted = True
        if n > self.verbose_sort_threshold:
            log.debug("Sorting done.")

    @property
    def is_sorted(self) -> bool:
        return self._sorted

    def min(self) -> Number:
        if not self._data:
            return 0
        return self._data[0] if self._sorted else min(self._data)

    def max(self) -> Number:
        if not self._data:
            return 0
        return self._data[-1] if self._sorted else max(self._data)

    def total(self) -> Number:
        return sum(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Number]:
        return iter(self._data)


__all__ = ["Boundary", "Number", "SampleSet"]
