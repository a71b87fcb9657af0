"""
Fixed record shape for OD450 readings at the parser boundary.

Loaders turn spreadsheet rows into Reading records; the viability core only
ever sees Readings, never arbitrary dict-shaped rows.

OD cells are converted with Python's float(): the whole cell must be a
number, so "0.45abc" is malformed rather than read as 0.45, and Python
numeric literals such as "1_0" or "1e-3" are accepted.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from cck8_viability.constants import OD_FIELD, TREATMENT_FIELD

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reading:
    """One OD450 measurement for a treatment well."""

    treatment: str
    optical_density: Any  # raw cell value; may be malformed


def parse_optical_density(value: Any) -> Optional[float]:
    """
    Convert a raw OD cell to a finite float.

    Args:
        value: Number or numeric string (surrounding whitespace allowed).

    Returns:
        The float value, or None if the value is missing, non-numeric,
        NaN, or infinite.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        od = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(od):
        return None
    return od


def readings_from_records(
    records: Iterable[Mapping[str, Any]],
    *,
    treatment_field: str = TREATMENT_FIELD,
    od_field: str = OD_FIELD,
) -> list[Reading]:
    """
    Build Readings from mapping records (e.g. rows of a long-format sheet).

    Only the treatment and OD fields are read; every other key is ignored.
    Records whose treatment is missing or blank are skipped.

    Args:
        records: Iterable of dict-like rows.
        treatment_field: Key holding the treatment name.
        od_field: Key holding the OD450 value.

    Returns:
        Readings in input order, treatment names trimmed.
    """
    readings: list[Reading] = []
    skipped = 0
    for rec in records:
        raw_treatment = rec.get(treatment_field)
        if raw_treatment is None or (
            isinstance(raw_treatment, float) and math.isnan(raw_treatment)
        ):
            skipped += 1
            continue
        treatment = str(raw_treatment).strip()
        if not treatment:
            skipped += 1
            continue
        readings.append(Reading(treatment, rec.get(od_field)))
    if skipped:
        logger.warning("Skipped %d record(s) with no treatment name", skipped)
    return readings


def readings_to_frame(readings: Iterable[Reading]) -> pd.DataFrame:
    """Return readings as a long DataFrame with Treatment and OD450 columns."""
    return pd.DataFrame(
        [{TREATMENT_FIELD: r.treatment, OD_FIELD: r.optical_density} for r in readings],
        columns=[TREATMENT_FIELD, OD_FIELD],
    )
