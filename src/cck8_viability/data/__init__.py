"""
CCK-8 plate data loading (load_viability_data, parse_csv_plate, etc.).
"""

from .io import (
    load_viability_data,
    parse_csv_plate,
    parse_excel_plate,
    validate_readings,
)
from .readings import (
    Reading,
    parse_optical_density,
    readings_from_records,
    readings_to_frame,
)

__all__ = [
    "Reading",
    "load_viability_data",
    "parse_csv_plate",
    "parse_excel_plate",
    "parse_optical_density",
    "readings_from_records",
    "readings_to_frame",
    "validate_readings",
]
