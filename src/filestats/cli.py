import argparse
import json
import math
import os
import sys
from typing import Callable, List, Optional, Tuple

from rich.console import Console
from rich.table import Table

from . import __version__
from .bounds import MAX_PERCENTILE, MEDIAN, MIN_PERCENTILE, QUARTILE_1, QUARTILE_3
from .config import HistogramConfig
from .errors import FileStatsError
from .format import format_count, format_size, format_time
from .logutil import set_verbose
from .metrics import stats_metrics
from .percentiles import PercentileStats
from .walker import FileMTimeStats, FileSizeStats

BAR_WIDTH = 40

Formatter = Callable[[float], str]


def build_config(args: argparse.Namespace) -> HistogramConfig:
    cfg = HistogramConfig()
    if getattr(args, "max_buckets", None) is not None:
        cfg.max_buckets = max(1, int(args.max_buckets))
    if getattr(args, "iqr_factor", None) is not None:
        cfg.auto_range_iqr_factor = float(args.iqr_factor)
    if getattr(args, "skew_threshold", None) is not None:
        cfg.log_heights_skewness = float(args.skew_threshold)
    if getattr(args, "step", None) is not None:
        cfg.table_step = max(1, int(args.step))
    if getattr(args, "margin", None) is not None:
        cfg.table_margin = max(0, int(args.margin))
    return cfg


def build_console(args: argparse.Namespace) -> Console:
    if getattr(args, "no_color", False):
        return Console(color_system=None, highlight=False)
    return Console(highlight=False)


def resolve_range(stats: PercentileStats, args: argparse.Namespace) -> Tuple[int, int]:
    """Percentile range from --start/--end, filling in missing ends automatically."""
    auto_start, auto_end = stats.auto_percentile_range()
    start = auto_start if args.start is None else args.start
    end = auto_end if args.end is None else args.end
    PercentileStats.validate_index_range(start, end)
    return start, end


def table_rows(cfg: HistogramConfig, show_all: bool) -> List[int]:
    if show_all:
        return list(range(MIN_PERCENTILE, MAX_PERCENTILE + 1))
    margin = cfg.table_margin
    return [
        i
        for i in range(MIN_PERCENTILE, MAX_PERCENTILE + 1)
        if i % cfg.table_step == 0 or i <= margin or i >= MAX_PERCENTILE - margin
    ]


def percentile_name(index: int) -> str:
    names = {
        MIN_PERCENTILE: "min",
        QUARTILE_1: "Q1",
        MEDIAN: "median",
        QUARTILE_3: "Q3",
        MAX_PERCENTILE: "max",
    }
    return names.get(index, "")


def percentile_table(stats: PercentileStats, fmt: Formatter, rows: List[int], sums: bool) -> Table:
    table = Table(title="Percentiles")
    table.add_column("P", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("", justify="center")
    table.add_column("Count", justify="right")
    table.add_column("Cum. count", justify="right")
    if sums:
        table.add_column("Sum", justify="right")
        table.add_column("Cum. sum", justify="right")
    for i in rows:
        name = percentile_name(i)
        cells = [f"P{i}", fmt(stats.percentile_value(i)), name]
        if i == MIN_PERCENTILE:
            # no counts or sums for P0
            cells += ["", ""] + (["", ""] if sums else [])
        else:
            cells += [format_count(stats.percentile_count(i)), format_count(stats.cumulative_count(i))]
            if sums:
                cells += [format_size(stats.percentile_sum(i)), format_size(stats.cumulative_sum(i))]
        style = "bold" if i % QUARTILE_1 == 0 else None
        table.add_row(*cells, style=style)
    return table


def bar(count: int, highest: int, log_heights: bool) -> str:
    if highest <= 0 or count <= 0:
        return ""
    if log_heights:
        fraction = math.log2(count + 1) / math.log2(highest + 1)
    else:
        fraction = count / highest
    return "#" * max(1, round(fraction * BAR_WIDTH))


def bucket_table(stats: PercentileStats, fmt: Formatter) -> Table:
    log_heights = stats.log_heights()
    title = "Buckets (log heights)" if log_heights else "Buckets"
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Files", justify="right")
    table.add_column("", justify="left")
    n = stats.buckets_count()
    highest = max((stats.bucket_count(i) for i in range(n)), default=0)
    for i in range(n):
        count = stats.bucket_count(i)
        table.add_row(
            str(i + 1),
            fmt(stats.bucket_start(i)),
            fmt(stats.bucket_end(i)),
            format_count(count),
            bar(count, highest, log_heights),
        )
    return table


def report(args: argparse.Namespace, stats: PercentileStats, fmt: Formatter, sums: bool) -> int:
    console = build_console(args)
    stats.calculate_percentiles()
    start, end = resolve_range(stats, args)
    if args.buckets is not None:
        bucket_count = args.buckets
    else:
        bucket_count = stats.best_bucket_count(start, end)
    stats.fill_buckets(args.log_widths, bucket_count, start, end)

    if args.json:
        with open(args.json, "w", encoding="utf-8") as oh:
            json.dump(stats_metrics(stats), oh, indent=2)
        print(f"Wrote statistics JSON to {args.json}")
        return 0

    console.print(f"Files: {format_count(len(stats))}")
    if len(stats) == 0:
        console.print("No files found.")
        return 0
    console.print(
        f"Min: {fmt(stats.percentile_value(MIN_PERCENTILE))}  "
        f"Median: {fmt(stats.percentile_value(MEDIAN))}  "
        f"Max: {fmt(stats.percentile_value(MAX_PERCENTILE))}"
    )
    console.print(percentile_table(stats, fmt, table_rows(stats.cfg, args.all), sums))
    console.print(
        f"Histogram P{start}..P{end}: {format_count(stats.percentile_count(start, end))} files "
        f"in {stats.buckets_count()} buckets, skewness {stats.skewness():.1f}"
    )
    console.print(bucket_table(stats, fmt))
    return 0


def _check_path(path: str) -> bool:
    if not os.path.exists(path):
        print(f"[filestats] path not found: {path}", file=sys.stderr)
        return False
    return True


def cmd_sizes(args: argparse.Namespace) -> int:
    if not _check_path(args.path):
        return 2
    stats = FileSizeStats(args.path, suffix=args.suffix, config=build_config(args))
    return report(args, stats, format_size, sums=True)


def cmd_mtimes(args: argparse.Namespace) -> int:
    if not _check_path(args.path):
        return 2
    stats = FileMTimeStats(args.path, config=build_config(args))
    return report(args, stats, format_time, sums=False)


def _add_report_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("path", help="Directory (or file) to collect statistics from")
    p.add_argument("--start", type=int, help="Start percentile of the histogram (default: automatic)")
    p.add_argument("--end", type=int, help="End percentile of the histogram (default: automatic)")
    p.add_argument("--buckets", type=int, help="Number of histogram buckets (default: Rice rule)")
    p.add_argument("--max-buckets", type=int, help="Upper limit for the automatic bucket count")
    p.add_argument("--log-widths", action="store_true", help="Use logarithmic bucket widths")
    p.add_argument("--iqr-factor", type=float, help="Outlier fence (times IQR) for the automatic range")
    p.add_argument("--skew-threshold", type=float, help="Skewness above which bars use log heights")
    p.add_argument("--step", type=int, help="Show every Nth percentile in the table")
    p.add_argument("--margin", type=int, help="Extra percentile rows shown at each end of the table")
    p.add_argument("--all", action="store_true", help="Show all 101 percentiles")
    p.add_argument("--json", help="Write the full statistics snapshot as JSON to this path")
    p.add_argument("--no-color", action="store_true", help="Disable colorized output")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="filestats", description="Percentile and histogram statistics for file trees")
    parser.add_argument("--version", action="version", version=f"filestats {__version__}")
    sub = parser.add_subparsers(dest="cmd")

    sizes_parser = sub.add_parser("sizes", help="File size percentiles and histogram")
    _add_report_options(sizes_parser)
    sizes_parser.add_argument("--suffix", help="Only files with this suffix, e.g. .jpg (case-insensitive)")
    sizes_parser.set_defaults(func=cmd_sizes)

    mtimes_parser = sub.add_parser("mtimes", help="File modification time percentiles and histogram")
    _add_report_options(mtimes_parser)
    mtimes_parser.set_defaults(func=cmd_mtimes)

    # Bench subcommand (lightweight wrapper around bench/benchmark.py)
    bench_parser = sub.add_parser("bench", help="Time sort, percentile and bucket calculation on synthetic samples")
    bench_parser.add_argument("--samples", type=int, default=100000, help="Synthetic samples to generate")
    bench_parser.add_argument("--buckets", type=int, default=100, help="Bucket count for fill_buckets")
    bench_parser.add_argument("--log-widths", action="store_true", help="Use logarithmic bucket widths")

    def _cmd_bench(a: argparse.Namespace) -> int:  # pragma: no cover - covered via integration test
        try:
            from bench.benchmark import run, synthetic_samples
        except ImportError as exc:
            print(f"[filestats] bench harness import failed: {exc}", file=sys.stderr)
            return 2
        run(synthetic_samples(a.samples), a.buckets, a.log_widths)
        return 0

    bench_parser.set_defaults(func=_cmd_bench)

    version_parser = sub.add_parser("version", help="Show version and exit")
    version_parser.set_defaults(func=lambda _: (print(f"filestats {__version__}"), 0)[1])

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "cmd", None):  # No subcommand provided
        parser.print_help()
        return 0
    if getattr(args, "verbose", False):
        set_verbose(True)
    try:
        return args.func(args)
    except FileStatsError as exc:
        print(f"[filestats] error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
