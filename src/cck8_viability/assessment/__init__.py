"""
Viability assessment: replicate statistics, outlier trimming, normalization.
"""

from .outliers import (
    filter_replicate_outliers,
    should_trim_extremes,
    split_replicate_outliers,
    trim_extremes,
)
from .statistics import population_std, replicate_mean
from .viability import (
    RESULT_COLUMNS,
    ViabilityResult,
    compute_viability,
    compute_viability_from_groups,
    results_to_frame,
)

__all__ = [
    "RESULT_COLUMNS",
    "ViabilityResult",
    "compute_viability",
    "compute_viability_from_groups",
    "filter_replicate_outliers",
    "population_std",
    "replicate_mean",
    "results_to_frame",
    "should_trim_extremes",
    "split_replicate_outliers",
    "trim_extremes",
]
