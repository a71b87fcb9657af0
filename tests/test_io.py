import io

import pandas as pd
import pytest

from cck8_viability.assessment.viability import compute_viability
from cck8_viability.data.io import (
    load_viability_data,
    parse_csv_plate,
    parse_excel_plate,
    validate_readings,
)
from cck8_viability.data.readings import Reading, readings_from_records, readings_to_frame
from cck8_viability.exceptions import InvalidDataFormatError

WIDE_CSV = b"Blank,Control,Drug\n0.10,0.50,0.30\n0.11,0.52,0.31\n"


def _pairs(readings):
    return [(r.treatment, r.optical_density) for r in readings]


def test_wide_csv_is_read_row_major():
    readings = parse_csv_plate(WIDE_CSV)
    assert _pairs(readings) == [
        ("Blank", "0.10"),
        ("Control", "0.50"),
        ("Drug", "0.30"),
        ("Blank", "0.11"),
        ("Control", "0.52"),
        ("Drug", "0.31"),
    ]


def test_wide_csv_skips_empty_cells_and_blank_lines():
    data = b" Blank , Control ,Drug\n0.1,,0.3\n\n0.11,0.5\n"
    assert _pairs(parse_csv_plate(data)) == [
        ("Blank", "0.1"),
        ("Drug", "0.3"),
        ("Blank", "0.11"),
        ("Control", "0.5"),
    ]


def test_wide_csv_keeps_duplicate_headers():
    readings = parse_csv_plate(b"Blank,Control,Drug,Drug\n0.1,0.5,0.3,0.32\n")
    assert [r.treatment for r in readings].count("Drug") == 2


def test_wide_csv_ignores_cells_beyond_header_width():
    data = b"Blank,Control,Drug\n0.10,0.50,0.30,\n0.11,0.52,0.31,0.99\n"
    assert _pairs(parse_csv_plate(data)) == [
        ("Blank", "0.10"),
        ("Control", "0.50"),
        ("Drug", "0.30"),
        ("Blank", "0.11"),
        ("Control", "0.52"),
        ("Drug", "0.31"),
    ]


def test_long_csv_with_trailing_commas():
    data = b"Treatment,OD450\nBlank,0.1,\nControl,0.5,,\n"
    assert _pairs(parse_csv_plate(data)) == [("Blank", "0.1"), ("Control", "0.5")]


def test_csv_with_byte_order_mark():
    readings = parse_csv_plate(b"\xef\xbb\xbf" + WIDE_CSV)
    assert readings[0].treatment == "Blank"


def test_long_csv_uses_treatment_and_od_columns():
    data = "Well,Treatment,OD450\nA1,Blank,0.1\nA2, Control ,0.5\nA3,,0.3\n"
    readings = parse_csv_plate(io.StringIO(data))
    assert _pairs(readings) == [("Blank", "0.1"), ("Control", "0.5")]


def test_empty_csv_raises():
    with pytest.raises(InvalidDataFormatError):
        parse_csv_plate(b"")


def test_load_csv_from_path_and_compute(tmp_path):
    path = tmp_path / "plate.csv"
    path.write_bytes(WIDE_CSV)
    results = compute_viability(load_viability_data(path))
    assert round(results[1].viability, 1) == 49.4


def test_load_uses_name_attribute_of_file_objects():
    upload = io.BytesIO(WIDE_CSV)
    upload.name = "PLATE.CSV"
    assert len(load_viability_data(upload)) == 6


def test_load_rejects_unknown_extension():
    with pytest.raises(InvalidDataFormatError, match="Unsupported"):
        load_viability_data(WIDE_CSV, filename="plate.txt")


def test_load_requires_a_name_for_raw_bytes():
    with pytest.raises(InvalidDataFormatError):
        load_viability_data(WIDE_CSV)


def test_load_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_viability_data(tmp_path / "missing.csv")


def test_load_header_only_has_no_readings():
    with pytest.raises(InvalidDataFormatError, match="No OD450 readings"):
        load_viability_data(b"Blank,Control\n", filename="plate.csv")


def test_excel_long_format(tmp_path):
    path = tmp_path / "plate.xlsx"
    pd.DataFrame(
        {
            "Treatment": ["Blank", "Blank", "Control", "Control", "Drug", "Drug"],
            "OD450": [0.10, 0.11, 0.50, 0.52, 0.30, 0.31],
            "Notes": ["", "", "", "", "x", ""],
        }
    ).to_excel(path, index=False)

    readings = load_viability_data(path)
    assert [r.treatment for r in readings] == [
        "Blank",
        "Blank",
        "Control",
        "Control",
        "Drug",
        "Drug",
    ]
    results = compute_viability(readings)
    assert results[0].viability == 100.0
    assert round(results[1].viability, 1) == 49.4


def test_excel_wide_format_skips_empty_cells(tmp_path):
    path = tmp_path / "plate.xlsx"
    pd.DataFrame({"Blank": [0.1, 0.11], "Control": [0.5, None]}).to_excel(
        path, index=False
    )
    readings = parse_excel_plate(path)
    assert _pairs(readings) == [("Blank", 0.1), ("Control", 0.5), ("Blank", 0.11)]


def test_readings_from_records_ignores_other_fields():
    records = [
        {"Treatment": " Drug ", "OD450": "0.3", "Well": "A1"},
        {"Treatment": "", "OD450": "0.4"},
        {"OD450": "0.5"},
    ]
    assert readings_from_records(records) == [Reading("Drug", "0.3")]


def test_readings_to_frame():
    df = readings_to_frame([Reading("Blank", 0.1), Reading("Control", "0.5")])
    assert list(df.columns) == ["Treatment", "OD450"]
    assert len(df) == 2


def test_validate_readings(example_readings):
    assert validate_readings(example_readings) == []
    assert validate_readings([]) == ["Dataset contains no readings"]

    problems = validate_readings([r for r in example_readings if r.treatment != "Control"])
    assert len(problems) == 1
    assert "Control" in problems[0]

    problems = validate_readings([Reading("Blank", "x"), Reading("Control", 0.5)])
    assert len(problems) == 1
    assert "Blank" in problems[0]
