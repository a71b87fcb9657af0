"""
CCK-8 Viability - Cell Viability Assay Analysis Package

Data loading, replicate outlier trimming, blank/control normalization,
plotting, and PDF reporting for CCK-8 (OD450) cell-viability plates.
"""

from .assessment import (
    ViabilityResult,
    compute_viability,
    compute_viability_from_groups,
    filter_replicate_outliers,
    population_std,
    replicate_mean,
    results_to_frame,
)
from .data import (
    Reading,
    load_viability_data,
    parse_csv_plate,
    parse_excel_plate,
    readings_from_records,
    validate_readings,
)
from .exceptions import (
    InvalidDataFormatError,
    MissingRequiredGroupError,
    ViabilityAnalysisError,
)
from .processing import group_readings
from .report import build_viability_pdf
from .visualization import plot_viability_bar

__version__ = "0.1.0"

__all__ = [
    "InvalidDataFormatError",
    "MissingRequiredGroupError",
    "Reading",
    "ViabilityAnalysisError",
    "ViabilityResult",
    "build_viability_pdf",
    "compute_viability",
    "compute_viability_from_groups",
    "filter_replicate_outliers",
    "group_readings",
    "load_viability_data",
    "parse_csv_plate",
    "parse_excel_plate",
    "plot_viability_bar",
    "population_std",
    "readings_from_records",
    "replicate_mean",
    "results_to_frame",
    "validate_readings",
    "__version__",
]
