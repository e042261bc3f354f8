from dataclasses import dataclass


@dataclass
class HistogramConfig:
    # Upper clamp for the Rice rule bucket count (bars that still fit on screen)
    max_buckets: int = 100
    # Use logarithmic bar heights when the highest bucket exceeds the
    # reference bucket by more than this factor
    log_heights_skewness: float = 50.0
    # Outlier fence for the automatic percentile range: q1 - k*IQR .. q3 + k*IQR
    auto_range_iqr_factor: float = 3.0
    # Log sorting progress for sample sets larger than this
    verbose_sort_threshold: int = 50000
    # Percentile table filtering: show every Nth percentile plus N rows at each end
    table_step: int = 5
    table_margin: int = 5
