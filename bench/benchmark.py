"""Simple benchmarking harness for filestats.

Measures the cost of each engine phase (collect, sort, percentile table,
bucket filling) and approximate memory for synthetic file-size-like samples or
a real directory tree. Keeps dependencies minimal; for deeper profiling
integrate with py-spy or scalene externally.
"""
from __future__ import annotations

import argparse
import random
import time
import tracemalloc
from pathlib import Path
from typing import Iterable, List

from filestats.percentiles import PercentileStats
from filestats.walker import iter_files


def synthetic_samples(n: int, seed: int = 42) -> List[int]:
    """Log-normal integers resembling file sizes (median ~ 8 kB, long right tail)."""
    rng = random.Random(seed)
    return [int(rng.lognormvariate(9.0, 2.5)) for _ in range(n)]


def tree_samples(path: Path) -> List[int]:
    return [st.st_size for st in iter_files(str(path))]


def run(samples: Iterable[int], buckets: int, log_widths: bool, repeat: int = 1) -> None:
    stats = PercentileStats()

    tracemalloc.start()
    start = time.perf_counter()
    for value in samples:
        stats.collect(value)
    t_collect = time.perf_counter() - start

    start = time.perf_counter()
    stats.sort()
    t_sort = time.perf_counter() - start

    start = time.perf_counter()
    stats.calculate_percentiles()
    t_percentiles = time.perf_counter() - start

    start = time.perf_counter()
    for _ in range(max(1, repeat)):
        stats.fill_buckets(log_widths, buckets, 0, 100)
    t_fill = (time.perf_counter() - start) / max(1, repeat)
    current, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    n = len(stats)
    sps = n / t_sort if t_sort else float("inf")
    print(f"Processed {n} samples: collect {t_collect:.3f}s sort {t_sort:.3f}s -> {sps:,.0f} samples/sec")
    print(f"Percentile table {t_percentiles:.3f}s; fill_buckets({buckets}, log={log_widths}) {t_fill:.4f}s")
    print(f"Current mem ~{current/1024/1024:.2f} MB; Peak mem ~{peak/1024/1024:.2f} MB")
    print(f"Buckets: {stats.buckets_count()}  skewness: {stats.skewness():.2f}")


def main() -> int:
    ap = argparse.ArgumentParser(description="Benchmark filestats percentile and bucket calculation")
    ap.add_argument("--path", help="Optional directory tree to collect file sizes from")
    ap.add_argument("--samples", type=int, default=200000, help="Synthetic samples to generate if no path")
    ap.add_argument("--buckets", type=int, default=100, help="Bucket count for fill_buckets")
    ap.add_argument("--log-widths", action="store_true", help="Use logarithmic bucket widths")
    ap.add_argument("--repeat", type=int, default=5, help="Average fill_buckets over this many runs")
    ap.add_argument("--seed", type=int, default=42)
    args = ap.parse_args()

    if args.path:
        p = Path(args.path)
        if not p.exists():
            raise SystemExit(f"Path not found: {p}")
        run(tree_samples(p), args.buckets, args.log_widths, args.repeat)
    else:
        run(synthetic_samples(args.samples, args.seed), args.buckets, args.log_widths, args.repeat)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual use
    raise SystemExit(main())
