"""
OrbWatch — satellite and debris tracking core.

Parses two-line element records, propagates them with first-order J2
drift, models user-placed bodies on circular orbits, and screens every
pair of tracked objects for close approaches.
"""

from __future__ import annotations

__version__ = "0.1.0"

from orbwatch.core.time_system import julian_date, sidereal_time
from orbwatch.core.tle import (
    ElementRecord,
    Malformed,
    MalformedRecordError,
    OrbitalElements,
    Parsed,
    parse_elements,
    parse_records,
)
from orbwatch.core.kepler import solve_kepler
from orbwatch.core.propagation import SatellitePosition, eci_to_geodetic, propagate
from orbwatch.core.ground_track import calculate_ground_track
from orbwatch.core.user_orbit import OrbitState, UserSatellite, propagate_user_satellite
from orbwatch.core.risk import RiskLevel
from orbwatch.core.screening import (
    CollisionPrediction,
    TrackedObject,
    check_all_collisions,
    predict_collision,
    screen_collisions,
)
from orbwatch.core.validation import ValidationResult, validate_satellite_position
from orbwatch.core.simulator import AdmissionResult, Simulator, SimulatorConfig
from orbwatch.data.celestrak import CelestrakClient

__all__ = [
    "__version__",
    "julian_date",
    "sidereal_time",
    "ElementRecord",
    "Malformed",
    "MalformedRecordError",
    "OrbitalElements",
    "Parsed",
    "parse_elements",
    "parse_records",
    "solve_kepler",
    "SatellitePosition",
    "eci_to_geodetic",
    "propagate",
    "calculate_ground_track",
    "OrbitState",
    "UserSatellite",
    "propagate_user_satellite",
    "RiskLevel",
    "CollisionPrediction",
    "TrackedObject",
    "check_all_collisions",
    "predict_collision",
    "screen_collisions",
    "ValidationResult",
    "validate_satellite_position",
    "AdmissionResult",
    "Simulator",
    "SimulatorConfig",
    "CelestrakClient",
]
