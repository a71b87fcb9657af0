"""String formatting utilities for result columns and display values."""

from typing import Any

from cck8_viability.constants import OD_DECIMALS, VIABILITY_DECIMALS

# Acronyms to display in all caps when they appear as whole words.
_LABEL_ACRONYMS = ("od", "sd", "cv", "id")


def format_column_label(col: str) -> str:
    """
    Convert a field name to a human-readable display label.

    Example: "blank_adjusted" -> "Blank Adjusted".
    Example: "mean_od" -> "Mean OD" (acronyms like od kept in caps).

    Args:
        col: Snake_case field name.

    Returns:
        Title-style label with underscores replaced by spaces.
    """
    words = [w for w in col.split("_") if w]
    return " ".join(w.upper() if w.lower() in _LABEL_ACRONYMS else w.title() for w in words)


def format_fixed(value: Any, decimals: int = OD_DECIMALS) -> str:
    """
    Format a number with a fixed count of decimals.

    Non-finite values render as "inf", "-inf" or "nan".
    """
    return f"{float(value):.{decimals}f}"


def format_percent(value: Any, decimals: int = VIABILITY_DECIMALS) -> str:
    """Format a percentage value, e.g. 49.38 -> "49.4%"."""
    return f"{format_fixed(value, decimals)}%"


def format_values(values: Any, decimals: int = OD_DECIMALS) -> str:
    """Join a sequence of numbers as "0.300, 0.310"."""
    return ", ".join(format_fixed(v, decimals) for v in values)
