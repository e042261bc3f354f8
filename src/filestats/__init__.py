"""Package metadata for filestats.

Expose a single source of truth for the version. Prefer reading from
importlib.metadata so that an editable install or wheel always reports
the version declared in pyproject.toml. Fallback to a hardcoded string
when metadata is unavailable (direct source usage without installation).
"""

from __future__ import annotations

from importlib import metadata as _metadata

from .buckets import BucketSet, best_bucket_count
from .config import HistogramConfig
from .errors import FileStatsError, IndexOutOfRange, InvalidArgument, InvalidRange
from .percentiles import PercentileStats
from .samples import SampleSet

__all__ = [
	"__version__",
	"BucketSet",
	"FileStatsError",
	"HistogramConfig",
	"IndexOutOfRange",
	"InvalidArgument",
	"InvalidRange",
	"PercentileStats",
	"SampleSet",
	"best_bucket_count",
]

_FALLBACK_VERSION = "0.1.0"  # MUST match pyproject.toml [project].version

try:  # pragma: no cover - success path covered indirectly via CLI test
	__version__ = _metadata.version("filestats")  # type: ignore[assignment]
except _metadata.PackageNotFoundError:  # pragma: no cover - source checkout without install
	__version__ = _FALLBACK_VERSION
