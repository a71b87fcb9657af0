"""
Display formatting helpers shared by the table, chart and PDF report.
"""

from .labels import format_column_label, format_fixed, format_percent, format_values

__all__ = [
    "format_column_label",
    "format_fixed",
    "format_percent",
    "format_values",
]
