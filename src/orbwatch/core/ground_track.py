"""Ground track sampling.

Each sample is an independent call to :func:`propagate`, so the track
carries no state between points.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta

from orbwatch.core.propagation import SatellitePosition, propagate
from orbwatch.core.tle import OrbitalElements

logger = logging.getLogger(__name__)


def calculate_ground_track(
    elements: OrbitalElements,
    start: datetime,
    duration_minutes: float,
    step_minutes: float = 1.0,
) -> list[SatellitePosition]:
    """Sample a satellite's path over a time window.

    Args:
        elements: Parsed orbital elements.
        start: UTC datetime of the first sample; naive values are taken to be UTC.
        duration_minutes: Window length in minutes.
        step_minutes: Spacing between samples in minutes.

    Returns:
        ``floor(duration / step) + 1`` positions, starting at ``start``.

    Raises:
        ValueError: If ``step_minutes`` is not a positive finite number, or
            ``duration_minutes`` is not finite (as for elements with an
            unreadable mean motion).
    """
    if not (math.isfinite(step_minutes) and step_minutes > 0):
        raise ValueError(f"Step must be positive and finite, got {step_minutes}")
    if not math.isfinite(duration_minutes):
        raise ValueError(f"Duration must be finite, got {duration_minutes}")

    steps = math.floor(duration_minutes / step_minutes)
    track = [
        propagate(elements, start + timedelta(minutes=i * step_minutes))
        for i in range(steps + 1)
    ]
    logger.debug("Ground track for %s: %d samples", elements.catalog_id, len(track))
    return track
