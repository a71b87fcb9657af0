import pytest

from cck8_viability.exceptions import MissingRequiredGroupError
from cck8_viability.processing.grouping import group_readings


def test_groups_in_discovery_order(make_readings):
    readings = make_readings(
        [("Drug", 0.3), ("Blank", 0.1), ("Control", 0.5), ("Drug", 0.31)]
    )
    groups = group_readings(readings)
    assert list(groups) == ["Drug", "Blank", "Control"]
    assert groups["Drug"] == [0.3, 0.31]


def test_treatment_names_are_trimmed(make_readings):
    readings = make_readings([(" Blank", 0.1), ("Control ", 0.5), ("  Drug  ", 0.3)])
    assert list(group_readings(readings)) == ["Blank", "Control", "Drug"]


def test_malformed_values_are_dropped(make_readings):
    readings = make_readings(
        [
            ("Blank", "0.1"),
            ("Control", 0.5),
            ("Drug", "n/a"),
            ("Drug", "  0.3 "),
            ("Drug", float("nan")),
            ("Drug", None),
            ("Drug", ""),
            ("Drug", "inf"),
        ]
    )
    groups = group_readings(readings)
    assert groups["Drug"] == [0.3]
    assert groups["Blank"] == [0.1]


def test_partial_numbers_are_malformed(make_readings):
    readings = make_readings(
        [("Blank", 0.1), ("Control", 0.5), ("Drug", "0.45abc"), ("Drug", "1e-1")]
    )
    assert group_readings(readings)["Drug"] == [0.1]


def test_malformed_first_reading_still_fixes_group_position(make_readings):
    readings = make_readings(
        [("Drug", "x"), ("Blank", 0.1), ("Control", 0.5), ("Drug", 0.3)]
    )
    groups = group_readings(readings)
    assert list(groups) == ["Drug", "Blank", "Control"]
    assert groups["Drug"] == [0.3]


def test_group_with_only_malformed_values_is_not_created(make_readings):
    readings = make_readings([("Blank", 0.1), ("Control", 0.5), ("Bad", "x")])
    assert "Bad" not in group_readings(readings)


def test_duplicates_are_kept(make_readings):
    readings = make_readings([("Blank", 0.1), ("Blank", 0.1), ("Control", 0.5)])
    assert group_readings(readings)["Blank"] == [0.1, 0.1]


@pytest.mark.parametrize(
    "pairs, missing",
    [
        ([("Control", 0.5), ("Drug", 0.3)], ["Blank"]),
        ([("Blank", 0.1), ("Drug", 0.3)], ["Control"]),
        ([("Drug", 0.3)], ["Blank", "Control"]),
        ([("Blank", "abc"), ("Control", 0.5)], ["Blank"]),
    ],
)
def test_missing_required_group(make_readings, pairs, missing):
    with pytest.raises(MissingRequiredGroupError) as exc_info:
        group_readings(make_readings(pairs))
    assert exc_info.value.missing == missing


def test_custom_group_labels(make_readings):
    readings = make_readings([("Medium", 0.1), ("Untreated", 0.5)])
    groups = group_readings(readings, blank_label="Medium", control_label="Untreated")
    assert set(groups) == {"Medium", "Untreated"}


def test_each_call_returns_a_new_mapping(example_readings):
    first = group_readings(example_readings)
    first["Drug"].append(99.0)
    assert group_readings(example_readings)["Drug"] == [0.30, 0.31]
