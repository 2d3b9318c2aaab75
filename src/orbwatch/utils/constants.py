"""Physical constants and default thresholds for orbital mechanics.

Distances in km, velocities in km/s, times in seconds unless noted.
"""

from __future__ import annotations

import math

# --- Earth parameters (WGS-84 radius/flattening) ---
EARTH_RADIUS_KM: float = 6378.137
"""Equatorial radius of Earth in km."""

EARTH_MU_KM3_S2: float = 398600.4418
"""Earth gravitational parameter (GM) in km³/s²."""

EARTH_J2: float = 0.00108263
"""Earth J2 oblateness coefficient."""

EARTH_ECCENTRICITY_SQ: float = 0.00669437999014
"""Square of the first eccentricity of the reference ellipsoid."""

# --- Unit helpers ---
DEG_TO_RAD: float = math.pi / 180.0
RAD_TO_DEG: float = 180.0 / math.pi
TWO_PI: float = 2.0 * math.pi
MINUTES_PER_DAY: float = 1440.0
SECONDS_PER_DAY: float = 86400.0

# --- Time ---
J2000_JD: float = 2451545.0
"""Julian date of the J2000.0 epoch (2000-01-01 12:00 TT)."""

# --- Kepler solver ---
KEPLER_MAX_ITERATIONS: int = 10
KEPLER_TOLERANCE: float = 1e-10

GEODETIC_ITERATIONS: int = 5
"""Fixed number of geodetic latitude refinement passes."""

# --- Collision prediction ---
COLLISION_STEP_SECONDS: float = 10.0
"""Sampling step of the closest-approach scan in seconds."""

DANGER_DISTANCE_KM: float = 1.0
"""Closest approaches below this distance are classified as danger."""

PROXIMITY_DISTANCE_KM: float = 10.0
"""Closest approaches below this distance are classified as proximity."""

DEFAULT_HORIZON_SECONDS: float = 3600.0
"""Default look-ahead for a single pair prediction (1 hour)."""

# --- User satellite admission ---
MIN_USER_ALTITUDE_KM: float = 160.0
"""Lowest admissible altitude for a user-placed body in km."""

MAX_USER_ALTITUDE_KM: float = 50000.0
"""Highest admissible altitude for a user-placed body in km."""

DEFAULT_USER_MASS_KG: float = 1000.0
"""Mass assumed for user bodies when none is given, in kg."""

# --- Simulator defaults ---
SIMULATOR_TICK_SECONDS: float = 1.0
SIMULATOR_HORIZON_SECONDS: float = 7200.0
SIMULATOR_MAX_ALERTS: int = 20
GROUND_TRACK_STEP_MINUTES: float = 2.0

SATELLITE_COLORS: tuple[str, ...] = (
    "#ff6b6b", "#ffd93d", "#6bcb77", "#4d96ff", "#9d4edd",
    "#ff9f43", "#00d2d3", "#ff6b81", "#7bed9f", "#70a1ff",
)
"""Display palette for user-placed bodies."""
