"""Kepler's equation."""
from __future__ import annotations

import math

from orbwatch.utils.constants import KEPLER_MAX_ITERATIONS, KEPLER_TOLERANCE


def solve_kepler(
    mean_anomaly: float,
    eccentricity: float,
    max_iterations: int = KEPLER_MAX_ITERATIONS,
    tolerance: float = KEPLER_TOLERANCE,
) -> float:
    """Solve ``M = E - e sin E`` for the eccentric anomaly by Newton-Raphson.

    Starts from ``E = M`` and stops once the correction step drops below
    ``tolerance``. If that never happens within ``max_iterations`` the last
    estimate is returned as-is; no error is signalled.

    Args:
        mean_anomaly: Mean anomaly in radians (finite).
        eccentricity: Orbital eccentricity in [0, 1).
        max_iterations: Iteration cap.
        tolerance: Convergence threshold on the correction step.

    Returns:
        Eccentric anomaly in radians.
    """
    e_anom = mean_anomaly
    for _ in range(max_iterations):
        step = (e_anom - eccentricity * math.sin(e_anom) - mean_anomaly) / (
            1.0 - eccentricity * math.cos(e_anom)
        )
        e_anom -= step
        if abs(step) < tolerance:
            break
    return e_anom


def true_anomaly(eccentric_anomaly: float, eccentricity: float) -> float:
    """True anomaly in radians from the eccentric anomaly."""
    denom = 1.0 - eccentricity * math.cos(eccentric_anomaly)
    sin_nu = math.sqrt(1.0 - eccentricity * eccentricity) * math.sin(eccentric_anomaly) / denom
    cos_nu = (math.cos(eccentric_anomaly) - eccentricity) / denom
    return math.atan2(sin_nu, cos_nu)
