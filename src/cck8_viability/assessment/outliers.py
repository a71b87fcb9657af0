"""
Replicate outlier trimming for OD450 treatment groups.

When the spread of a group is large relative to its mean, the lowest and the
highest replicate are discarded. Exactly one of each is removed, even when
several wells share the extreme value.
"""

import logging
from typing import Sequence

import numpy as np

from cck8_viability.assessment.statistics import population_std, replicate_mean
from cck8_viability.constants import MIN_REPLICATES_FOR_TRIMMING, OUTLIER_SD_FRACTION

logger = logging.getLogger(__name__)


def should_trim_extremes(
    values: Sequence[float],
    *,
    threshold: float = OUTLIER_SD_FRACTION,
) -> bool:
    """
    Decide whether a replicate group is noisy enough to trim.

    The test is ``sd > mean * threshold`` with the population SD, applied only
    to groups of at least three replicates. A zero or negative mean makes the
    limit zero or negative, so any spread triggers trimming.

    Args:
        values: Unfiltered OD values of one group.
        threshold: Allowed SD as a fraction of the mean (default 0.2).

    Returns:
        True if the min and max replicate should be dropped.
    """
    if len(values) < MIN_REPLICATES_FOR_TRIMMING:
        return False
    return population_std(values) > replicate_mean(values) * threshold


def trim_extremes(values: Sequence[float]) -> list[float]:
    """
    Sort ascending and drop the first and last element.

    Groups of two or fewer values are returned unchanged.
    """
    if len(values) < MIN_REPLICATES_FOR_TRIMMING:
        return list(values)
    ordered = np.sort(np.asarray(values, dtype=float))
    return ordered[1:-1].tolist()


def split_replicate_outliers(
    values: Sequence[float],
    *,
    threshold: float = OUTLIER_SD_FRACTION,
) -> tuple[list[float], list[float]]:
    """
    Split a replicate group into retained and removed values.

    Args:
        values: Unfiltered OD values of one group.
        threshold: Allowed SD as a fraction of the mean.

    Returns:
        Tuple of (retained, removed). When trimming is not triggered,
        retained is the input in its original order and removed is empty;
        otherwise retained is sorted ascending and removed is [min, max].
    """
    if not should_trim_extremes(values, threshold=threshold):
        return list(values), []
    ordered = np.sort(np.asarray(values, dtype=float)).tolist()
    return ordered[1:-1], [ordered[0], ordered[-1]]


def filter_replicate_outliers(
    values: Sequence[float],
    *,
    threshold: float = OUTLIER_SD_FRACTION,
) -> list[float]:
    """Return the replicate values kept after conditional min/max trimming."""
    retained, removed = split_replicate_outliers(values, threshold=threshold)
    if removed:
        logger.debug("Trimmed extreme replicates %s", removed)
    return retained
