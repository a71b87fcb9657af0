"""
Replicate statistics shared by the outlier filter and the normalizer.

Standard deviation is the population form (divide by N), matching how plate
replicate spread is reported in the results table.
"""

from typing import Sequence

import numpy as np


def replicate_mean(values: Sequence[float]) -> float:
    """Arithmetic mean of replicate values; NaN for an empty sequence."""
    vals = np.asarray(values, dtype=float)
    if vals.size == 0:
        return np.nan
    return float(np.mean(vals))


def population_std(values: Sequence[float]) -> float:
    """
    Population standard deviation (ddof=0) of replicate values.

    Args:
        values: 1D numeric sequence.

    Returns:
        sqrt(mean((x - mean)^2)), or NaN for an empty sequence.
    """
    vals = np.asarray(values, dtype=float)
    if vals.size == 0:
        return np.nan
    return float(np.std(vals, ddof=0))

