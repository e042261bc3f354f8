"""Exception types for contract violations.

These are raised for impossible parameters supplied by the caller, never for
properties of the data itself: an empty sample set or a zero-width range has
well-defined degenerate results instead.
"""
from __future__ import annotations


class FileStatsError(Exception):
    """Base class for all filestats errors."""


class InvalidArgument(FileStatsError, ValueError):
    """Quantile order or number outside its valid range."""


class IndexOutOfRange(FileStatsError, IndexError):
    """Percentile index outside 0..100 or bucket index outside the bucket set."""


class InvalidRange(FileStatsError, ValueError):
    """Percentile range with start >= end or an endpoint outside 0..100."""


__all__ = ["FileStatsError", "InvalidArgument", "IndexOutOfRange", "InvalidRange"]
