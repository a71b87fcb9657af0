"""
Viability plotting.
"""

from .plots import plot_viability_bar

__all__ = [
    "plot_viability_bar",
]
