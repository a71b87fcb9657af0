"""
Blank- and control-normalized cell viability for CCK-8 plates.

For each non-blank treatment the retained replicates are blank-subtracted,
averaged, and expressed as a percentage of the blank-subtracted control mean.
The Control group is fixed at 100%.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import numpy as np
import pandas as pd

from cck8_viability.assessment.outliers import filter_replicate_outliers
from cck8_viability.assessment.statistics import population_std, replicate_mean
from cck8_viability.constants import (
    BLANK_GROUP,
    CONTROL_GROUP,
    CONTROL_VIABILITY,
    OD_DECIMALS,
    OUTLIER_SD_FRACTION,
    VIABILITY_DECIMALS,
)
from cck8_viability.data.readings import Reading
from cck8_viability.exceptions import MissingRequiredGroupError
from cck8_viability.processing.grouping import group_readings
from cck8_viability.utils.labels import (
    format_column_label,
    format_fixed,
    format_percent,
    format_values,
)

logger = logging.getLogger(__name__)

# Columns shown in the results table, in display order
RESULT_COLUMNS = (
    "treatment",
    "od_values",
    "blank_adjusted",
    "mean_od",
    "viability",
    "replicates",
    "sd",
)


@dataclass(frozen=True)
class ViabilityResult:
    """Viability summary for one treatment group."""

    treatment: str
    od_values: tuple[float, ...]  # retained after outlier trimming
    blank_adjusted: tuple[float, ...]
    mean_od: float  # mean of blank_adjusted
    viability: float  # percent of control
    replicates: int  # len(od_values)
    sd: float  # population SD of the untrimmed group
    n_raw: int
    outliers_removed: bool

    def to_display_dict(self) -> dict[str, Any]:
        """Return the table row with display rounding applied."""
        return {
            "treatment": self.treatment,
            "od_values": [format_fixed(v, OD_DECIMALS) for v in self.od_values],
            "blank_adjusted": [
                format_fixed(v, OD_DECIMALS) for v in self.blank_adjusted
            ],
            "mean_od": format_fixed(self.mean_od, OD_DECIMALS),
            "viability": format_percent(self.viability, VIABILITY_DECIMALS),
            "replicates": self.replicates,
            "sd": format_fixed(self.sd, OD_DECIMALS),
        }


def _require_groups(
    groups: Mapping[str, Sequence[float]], labels: Iterable[str]
) -> None:
    missing = [label for label in labels if len(groups.get(label, ())) == 0]
    if missing:
        raise MissingRequiredGroupError(missing)


def compute_viability_from_groups(
    groups: Mapping[str, Sequence[float]],
    *,
    blank_label: str = BLANK_GROUP,
    control_label: str = CONTROL_GROUP,
    outlier_threshold: float = OUTLIER_SD_FRACTION,
) -> list[ViabilityResult]:
    """
    Compute viability for every non-blank group.

    Blank and control means are taken from the raw (untrimmed) groups. Each
    treatment group, control included, is trimmed independently before blank
    subtraction. A control mean equal to the blank mean is not guarded: the
    resulting viabilities are inf or NaN.

    Args:
        groups: Treatment -> numeric OD values, in display order.
        blank_label: Background group name (excluded from the results).
        control_label: Reference group name (reported as 100%).
        outlier_threshold: SD-to-mean fraction above which min and max
            replicates are dropped.

    Returns:
        One ViabilityResult per non-blank group, in the order of ``groups``.

    Raises:
        MissingRequiredGroupError: If the blank or control group is absent or empty.
    """
    _require_groups(groups, (blank_label, control_label))

    blank_avg = replicate_mean(groups[blank_label])
    control_avg = replicate_mean(groups[control_label])
    control_signal = np.float64(control_avg) - np.float64(blank_avg)

    results: list[ViabilityResult] = []
    for treatment, raw in groups.items():
        if treatment == blank_label:
            continue

        raw = list(raw)
        sd = population_std(raw)
        od_values = filter_replicate_outliers(raw, threshold=outlier_threshold)
        blank_adjusted = [od - blank_avg for od in od_values]
        mean_od = replicate_mean(blank_adjusted)

        if treatment == control_label:
            viability = CONTROL_VIABILITY
        else:
            with np.errstate(divide="ignore", invalid="ignore"):
                viability = float(np.float64(mean_od) / control_signal * 100)
            if not np.isfinite(viability):
                logger.warning(
                    "Non-finite viability for '%s' (control minus blank = %s)",
                    treatment,
                    control_signal,
                )

        results.append(
            ViabilityResult(
                treatment=treatment,
                od_values=tuple(od_values),
                blank_adjusted=tuple(blank_adjusted),
                mean_od=mean_od,
                viability=viability,
                replicates=len(od_values),
                sd=sd,
                n_raw=len(raw),
                outliers_removed=len(od_values) < len(raw),
            )
        )
    return results


def compute_viability(
    readings: Iterable[Reading],
    *,
    blank_label: str = BLANK_GROUP,
    control_label: str = CONTROL_GROUP,
    outlier_threshold: float = OUTLIER_SD_FRACTION,
) -> list[ViabilityResult]:
    """
    Group readings by treatment and compute normalized viability.

    Args:
        readings: Parsed OD450 readings; malformed values are ignored.
        blank_label: Background group name.
        control_label: Reference group name.
        outlier_threshold: SD-to-mean fraction that triggers trimming.

    Returns:
        ViabilityResult list in treatment discovery order, blank excluded.

    Raises:
        MissingRequiredGroupError: If the blank or control group is missing.

    Example:
        >>> readings = [Reading("Blank", 0.10), Reading("Blank", 0.11),
        ...             Reading("Control", 0.50), Reading("Control", 0.52),
        ...             Reading("Drug", 0.30), Reading("Drug", 0.31)]
        >>> [round(r.viability, 1) for r in compute_viability(readings)]
        [100.0, 49.4]
    """
    groups = group_readings(
        readings, blank_label=blank_label, control_label=control_label
    )
    return compute_viability_from_groups(
        groups,
        blank_label=blank_label,
        control_label=control_label,
        outlier_threshold=outlier_threshold,
    )


def results_to_frame(
    results: Sequence[ViabilityResult],
    *,
    formatted: bool = True,
) -> pd.DataFrame:
    """
    Convert viability results to a table.

    Args:
        results: Output of compute_viability.
        formatted: If True, values are display strings (3 decimals for OD and
            SD, 1 decimal plus "%" for viability). If False, numeric values
            are kept, with replicate lists joined for CSV export.

    Returns:
        DataFrame with one row per treatment and labelled columns
        (Treatment, OD Values, Blank Adjusted, Mean OD, Viability,
        Replicates, SD).
    """
    labels = {col: format_column_label(col) for col in RESULT_COLUMNS}
    if formatted:
        rows = []
        for r in results:
            row = r.to_display_dict()
            row["od_values"] = ", ".join(row["od_values"])
            row["blank_adjusted"] = ", ".join(row["blank_adjusted"])
            rows.append(row)
    else:
        rows = [
            {
                "treatment": r.treatment,
                "od_values": format_values(r.od_values, OD_DECIMALS),
                "blank_adjusted": format_values(r.blank_adjusted, OD_DECIMALS),
                "mean_od": r.mean_od,
                "viability": r.viability,
                "replicates": r.replicates,
                "sd": r.sd,
            }
            for r in results
        ]
    return pd.DataFrame(rows, columns=list(RESULT_COLUMNS)).rename(columns=labels)

