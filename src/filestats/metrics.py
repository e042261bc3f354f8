"""Snapshot helper for PercentileStats.

Provides a JSON-serializable view of the percentile table and the current
bucket set, suitable for writing to a file or logging. Avoids mutating the
stats: the percentile table must already be calculated.
"""
from __future__ import annotations

from typing import Any, Dict, List

from .bounds import MAX_PERCENTILE, MEDIAN, MIN_PERCENTILE
from .percentiles import PercentileStats


def percentile_rows(stats: PercentileStats) -> List[Dict[str, Any]]:
    rows = []
    for i in range(MIN_PERCENTILE, MAX_PERCENTILE + 1):
        rows.append(
            {
                "percentile": i,
                "boundary": float(stats.percentile_boundary(i)),
                "value": stats.percentile_value(i),
                "count": stats.percentile_count(i),
                "sum": stats.percentile_sum(i),
                "cumulative_count": stats.cumulative_count(i),
                "cumulative_sum": stats.cumulative_sum(i),
            }
        )
    return rows


def bucket_rows(stats: PercentileStats) -> List[Dict[str, Any]]:
    return [
        {
            "start": stats.bucket_start(i),
            "end": stats.bucket_end(i),
            "count": stats.bucket_count(i),
            "width": stats.bucket_width(i),
        }
        for i in range(stats.buckets_count())
    ]


def stats_metrics(stats: PercentileStats) -> Dict[str, Any]:
    return {
        "samples": len(stats),
        "total": stats.cumulative_sum(MAX_PERCENTILE),
        "min": stats.percentile_value(MIN_PERCENTILE),
        "max": stats.percentile_value(MAX_PERCENTILE),
        "median": stats.percentile_value(MEDIAN),
        "percentiles": percentile_rows(stats),
        "buckets": bucket_rows(stats),
        "skewness": stats.skewness(),
        "log_heights": stats.log_heights(),
        "config": {
            "max_buckets": stats.cfg.max_buckets,
            "log_heights_skewness": stats.cfg.log_heights_skewness,
            "auto_range_iqr_factor": stats.cfg.auto_range_iqr_factor,
        },
    }

__all__ = ["bucket_rows", "percentile_rows", "stats_metrics"]
