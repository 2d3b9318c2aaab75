from __future__ import annotations

from enum import Enum

from orbwatch.utils.constants import DANGER_DISTANCE_KM, PROXIMITY_DISTANCE_KM


class RiskLevel(str, Enum):
    """Qualitative closest-approach risk tier."""

    DANGER = "danger"
    PROXIMITY = "proximity"
    SAFE = "safe"

    @property
    def rank(self) -> int:
        """Sort key: danger first, safe last."""
        return _RANK[self]


_RANK = {RiskLevel.DANGER: 0, RiskLevel.PROXIMITY: 1, RiskLevel.SAFE: 2}


def classify_distance(min_distance_km: float) -> RiskLevel:
    """
    Classify a minimum separation into a risk tier.

    < 1 km is danger, < 10 km is proximity, anything else (including nan)
    is safe. The thresholds are fixed.
    """
    if min_distance_km < DANGER_DISTANCE_KM:
        return RiskLevel.DANGER
    elif min_distance_km < PROXIMITY_DISTANCE_KM:
        return RiskLevel.PROXIMITY
    else:
        return RiskLevel.SAFE
