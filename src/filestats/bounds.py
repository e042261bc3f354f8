"""Percentile index constants and contract checks shared by the engine."""
from __future__ import annotations

from .errors import IndexOutOfRange, InvalidRange

MIN_PERCENTILE = 0
QUARTILE_1 = 25
MEDIAN = 50
QUARTILE_3 = 75
MAX_PERCENTILE = 100

PERCENTILE_COUNT = MAX_PERCENTILE + 1


def validate_index(index: int) -> None:
    if not MIN_PERCENTILE <= index <= MAX_PERCENTILE:
        raise IndexOutOfRange(
            f"Percentile index {index} out of range {MIN_PERCENTILE}..{MAX_PERCENTILE}"
        )


def validate_index_range(start: int, end: int) -> None:
    if not MIN_PERCENTILE <= start <= MAX_PERCENTILE or not MIN_PERCENTILE <= end <= MAX_PERCENTILE:
        raise InvalidRange(
            f"Percentile range {start}..{end} outside {MIN_PERCENTILE}..{MAX_PERCENTILE}"
        )
    if start >= end:
        raise InvalidRange(f"Start percentile {start} must be less than end percentile {end}")


__all__ = [
    "MIN_PERCENTILE",
    "QUARTILE_1",
    "MEDIAN",
    "QUARTILE_3",
    "MAX_PERCENTILE",
    "PERCENTILE_COUNT",
    "validate_index",
    "validate_index_range",
]
