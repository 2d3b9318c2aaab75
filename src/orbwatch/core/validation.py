"""Admission check for user-placed bodies."""
from __future__ import annotations

import math
from dataclasses import dataclass

from orbwatch.utils.constants import (
    EARTH_RADIUS_KM as RE,
    MAX_USER_ALTITUDE_KM,
    MIN_USER_ALTITUDE_KM,
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a placement check.

    Attributes:
        valid: Whether the position is admissible.
        error: Human-readable reason when it is not.
    """

    valid: bool
    error: str | None = None


def validate_satellite_position(x: float, y: float, z: float) -> ValidationResult:
    """Check that an ECI position lies between 160 km and 50,000 km altitude.

    Never raises; out-of-range positions come back with the computed
    altitude echoed in the reason.
    """
    distance = math.sqrt(x * x + y * y + z * z)
    altitude = distance - RE

    # Bounds are checked on the radius: ``R_earth + bound`` lands exactly on the bound.
    if distance < RE + MIN_USER_ALTITUDE_KM:
        return ValidationResult(
            valid=False,
            error=f"altitude too low ({altitude:.0f} km). minimum orbital altitude is 160 km.",
        )
    if distance > RE + MAX_USER_ALTITUDE_KM:
        return ValidationResult(
            valid=False,
            error=f"altitude too high ({altitude:.0f} km). maximum is 50,000 km.",
        )
    if math.isnan(distance):
        return ValidationResult(valid=False, error="position is not a number.")
    return ValidationResult(valid=True)
