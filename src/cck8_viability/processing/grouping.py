"""
Group OD450 readings by treatment.

Malformed OD values are dropped here, so downstream statistics only ever see
finite floats. Group order follows the first appearance of each treatment.
"""

import logging
from typing import Iterable

from cck8_viability.constants import BLANK_GROUP, CONTROL_GROUP
from cck8_viability.data.readings import Reading, parse_optical_density
from cck8_viability.exceptions import MissingRequiredGroupError

logger = logging.getLogger(__name__)


def group_readings(
    readings: Iterable[Reading],
    *,
    blank_label: str = BLANK_GROUP,
    control_label: str = CONTROL_GROUP,
) -> dict[str, list[float]]:
    """
    Partition readings into treatment groups of numeric OD values.

    A treatment takes its position from its first reading, valid or not.
    Readings whose OD does not convert to a finite number are skipped, and
    treatments left with no valid value are not returned.

    Args:
        readings: Readings in plate/row order.
        blank_label: Name of the background group that must be present.
        control_label: Name of the reference group that must be present.

    Returns:
        New dict of treatment -> OD values, in discovery order.

    Raises:
        MissingRequiredGroupError: If the blank or control group is absent.
    """
    groups: dict[str, list[float]] = {}
    dropped = 0
    for reading in readings:
        values = groups.setdefault(reading.treatment.strip(), [])
        od = parse_optical_density(reading.optical_density)
        if od is None:
            dropped += 1
            continue
        values.append(od)

    groups = {treatment: values for treatment, values in groups.items() if values}

    if dropped:
        logger.debug("Dropped %d reading(s) with non-numeric OD450", dropped)

    missing = [label for label in (blank_label, control_label) if label not in groups]
    if missing:
        raise MissingRequiredGroupError(missing)
    return groups
