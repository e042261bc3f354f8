"""Human-readable formatting for sizes, counts and timestamps."""
from __future__ import annotations

import time
from typing import Union

_UNITS = (" kB", " MB", " GB", " TB", " PB", " EB", " ZB", " YB")


def format_size(size: Union[int, float], precision: int = 1) -> str:
    """Format a byte count with a 1024-based unit.

    Sizes below 1000 are shown exactly, without decimals. Larger sizes keep at
    most three digits before the decimal point where a unit allows it.
    """
    if size < 1000:
        size = int(size)
        return "1 byte" if size == 1 else f"{size} bytes"

    unit_index = 0
    value = size / 1024.0
    while value >= 1000.0 and unit_index < len(_UNITS) - 1:
        value /= 1024.0
        unit_index += 1
    return f"{value:.{precision}f}{_UNITS[unit_index]}"


def format_count(count: Union[int, float]) -> str:
    return f"{int(count):,}"


def format_time(timestamp: Union[int, float]) -> str:
    """Local time as 'YYYY-MM-DD HH:MM'; an empty string for 0 (unknown)."""
    if not timestamp:
        return ""
    return time.strftime("%Y-%m-%d %H:%M", time.localtime(timestamp))


__all__ = ["format_count", "format_size", "format_time"]
