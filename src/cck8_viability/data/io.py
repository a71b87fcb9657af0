"""
CCK-8 plate data I/O for CSV and Excel exports.

Two layouts are recognised:

- Wide: the first row holds treatment names, each later row holds one
  replicate OD450 per column (the plate-reader copy/paste layout).
- Long: a header row containing ``Treatment`` and ``OD450`` columns, one
  reading per row. Other columns are ignored.

Loaders return Reading records in row-major order; the viability core does
the grouping.
"""

import io
import logging
import math
from pathlib import Path
from typing import Any, BinaryIO, Optional, TextIO, Union

import pandas as pd

from cck8_viability.constants import (
    BLANK_GROUP,
    CONTROL_GROUP,
    OD_FIELD,
    SUPPORTED_EXTENSIONS,
    TREATMENT_FIELD,
)
from cck8_viability.data.readings import (
    Reading,
    parse_optical_density,
    readings_from_records,
)
from cck8_viability.exceptions import InvalidDataFormatError

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes, BinaryIO, TextIO]


def _as_readable(source: Source) -> Any:
    """Wrap raw bytes in a buffer; pass paths and file objects through."""
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    if hasattr(source, "seek"):
        source.seek(0)
    return source


def _read_text(source: Source) -> str:
    """Return the whole source as text, decoding bytes as UTF-8 (BOM allowed)."""
    if isinstance(source, (str, Path)):
        data = Path(source).read_bytes()
    elif isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    else:
        data = _as_readable(source).read()
    if isinstance(data, bytes):
        return data.decode("utf-8-sig")
    return data.removeprefix("\ufeff")


def _is_empty_cell(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _clean_cell(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _table_to_readings(table: pd.DataFrame, source_name: str) -> list[Reading]:
    """
    Convert a headerless table (first row = header) into Readings.

    Args:
        table: DataFrame read with header=None.
        source_name: Used in error messages.

    Returns:
        Readings in row-major order.
    """
    rows = [list(r) for r in table.itertuples(index=False, name=None)]
    rows = [r for r in rows if not all(_is_empty_cell(v) for v in r)]
    if not rows:
        raise InvalidDataFormatError(f"No data found in {source_name}")

    header = ["" if _is_empty_cell(h) else str(h).strip() for h in rows[0]]
    body = rows[1:]

    if TREATMENT_FIELD in header and OD_FIELD in header:
        records = [
            {name: _clean_cell(v) for name, v in zip(header, row) if name}
            for row in body
        ]
        return readings_from_records(records)

    readings: list[Reading] = []
    for row in body:
        for name, value in zip(header, row):
            if not name or _is_empty_cell(value):
                continue
            readings.append(Reading(name, _clean_cell(value)))
    return readings


def parse_csv_plate(source: Source, *, source_name: str = "CSV input") -> list[Reading]:
    """
    Parse a CSV plate export into Readings.

    Args:
        source: Path, raw bytes, or file-like object.
        source_name: Display name for log and error messages.

    Returns:
        Readings in row-major order (wide) or row order (long).

    Raises:
        InvalidDataFormatError: If the CSV is empty or malformed.
    """
    read_kwargs = {
        "header": None,
        "dtype": str,
        "keep_default_na": False,
        "skip_blank_lines": True,
        "engine": "python",
    }
    try:
        text = _read_text(source)
        width = pd.read_csv(io.StringIO(text), nrows=1, **read_kwargs).shape[1]
        # cells beyond the header row are dropped, not rejected
        table = pd.read_csv(
            io.StringIO(text),
            on_bad_lines=lambda row: row[:width],
            **read_kwargs,
        )
    except (
        UnicodeDecodeError,
        pd.errors.EmptyDataError,
        pd.errors.ParserError,
    ) as e:
        raise InvalidDataFormatError(f"Could not read {source_name}: {e}") from e
    return _table_to_readings(table, source_name)


def parse_excel_plate(
    source: Source, *, source_name: str = "Excel input"
) -> list[Reading]:
    """
    Parse the first worksheet of an Excel workbook into Readings.

    Args:
        source: Path, raw bytes, or file-like object.
        source_name: Display name for log and error messages.

    Returns:
        Readings in row order (long) or row-major order (wide).

    Raises:
        InvalidDataFormatError: If the sheet has no data.
    """
    try:
        table = pd.read_excel(_as_readable(source), sheet_name=0, header=None)
    except ValueError as e:
        raise InvalidDataFormatError(f"Could not read {source_name}: {e}") from e
    return _table_to_readings(table, source_name)


def _resolve_name(source: Source, filename: Optional[str]) -> Optional[str]:
    if filename:
        return filename
    if isinstance(source, (str, Path)):
        return str(source)
    return getattr(source, "name", None)


def load_viability_data(
    source: Source,
    *,
    filename: Optional[str] = None,
) -> list[Reading]:
    """
    Load OD450 readings from a CSV or Excel file, choosing the parser by extension.

    Args:
        source: Path, raw bytes, or file-like object (e.g. a Streamlit upload).
        filename: Name used to pick the parser. Defaults to the path or the
            object's ``name`` attribute.

    Returns:
        Non-empty list of Readings.

    Raises:
        FileNotFoundError: If a path source does not exist.
        InvalidDataFormatError: If the extension is unsupported or no readings
            could be parsed.
    """
    name = _resolve_name(source, filename)
    if name is None:
        raise InvalidDataFormatError(
            "Cannot determine file type; pass filename explicitly."
        )
    if isinstance(source, (str, Path)) and not Path(source).exists():
        raise FileNotFoundError(f"File not found: {source}")

    suffix = Path(name).suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise InvalidDataFormatError(
            f"Unsupported file type '{suffix or name}'. "
            f"Use one of: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    display_name = Path(name).name
    if suffix == ".csv":
        readings = parse_csv_plate(source, source_name=display_name)
    else:
        readings = parse_excel_plate(source, source_name=display_name)

    if not readings:
        raise InvalidDataFormatError(f"No OD450 readings found in {display_name}")
    logger.info("Parsed %d readings from %s", len(readings), display_name)
    return readings


def validate_readings(
    readings: list[Reading],
    *,
    blank_label: str = BLANK_GROUP,
    control_label: str = CONTROL_GROUP,
) -> list[str]:
    """
    Check a dataset before analysis.

    Args:
        readings: Parsed readings.
        blank_label: Name of the background group.
        control_label: Name of the 100% reference group.

    Returns:
        Human-readable problems; empty when the dataset can be analysed.
    """
    if not readings:
        return ["Dataset contains no readings"]
    errors = []
    valid_treatments = {
        r.treatment.strip()
        for r in readings
        if parse_optical_density(r.optical_density) is not None
    }
    for label, role in ((blank_label, "blank"), (control_label, "control")):
        if label not in valid_treatments:
            errors.append(f"Missing {role} group '{label}' with numeric OD450 values")
    return errors
