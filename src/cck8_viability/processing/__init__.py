"""
Treatment grouping of parsed OD450 readings.
"""

from .grouping import group_readings

__all__ = [
    "group_readings",
]
