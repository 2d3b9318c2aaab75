"""Circular-orbit model for user-placed bodies.

A user body keeps the distance from Earth's centre it was placed at and
sweeps a circle of constant ``z`` (a plane parallel to the equator) at a
speed given by the circular velocity scaled by a mass heuristic.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import numpy as np
from numpy.typing import NDArray

from orbwatch.core.propagation import eci_to_geodetic
from orbwatch.utils.constants import (
    EARTH_MU_KM3_S2 as MU,
    SATELLITE_COLORS,
    TWO_PI,
)


@dataclass(frozen=True)
class UserSatellite:
    """A body placed by the user.

    Attributes:
        id: Unique identifier.
        name: Display name.
        x: ECI x at creation in km from Earth's centre.
        y: ECI y at creation in km.
        z: ECI z at creation in km.
        mass_kg: Mass in kg.
        color: Display colour as a hex string.
        created_at: Creation time (UTC).
    """

    id: str
    name: str
    x: float
    y: float
    z: float
    mass_kg: float
    color: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def position_km(self) -> NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


@dataclass
class OrbitState:
    """State of a user body at some elapsed simulated time.

    ``altitude_km`` is the straight-line ``|r| - R_earth``, the same measure
    used for admission and collision distances.
    """

    latitude_deg: float
    longitude_deg: float
    altitude_km: float
    geodetic_altitude_km: float
    speed_km_s: float
    position_km: NDArray[np.float64]  # shape (3,)
    velocity_km_s: NDArray[np.float64]  # shape (3,)
    epoch: datetime

    @property
    def geocentric_altitude_km(self) -> float:
        return self.altitude_km


def mass_factor(mass_kg: float) -> float:
    """Speed multiplier for a body's mass, clamped to [0.8, 1.0].

    Simplified heuristic: heavier bodies move up to 20% slower, bodies from
    about 1e-47 kg up to 1000 kg are unaffected. The factor is
    ``1 / (1 + 0.02 log10(m / 1000))`` clamped; where that denominator reaches
    zero the factor is unbounded (1.0 after clamping), and below it the
    factor turns negative (0.8 after clamping).
    """
    denominator = 1.0 + 0.02 * math.log10(mass_kg / 1000.0)
    if denominator == 0.0:
        return 1.0
    if denominator < 0.0:
        return 0.8
    return max(0.8, min(1.0, 1.0 / denominator))


def circular_velocity(distance_km: float, mass_kg: float) -> float:
    """Circular orbit speed in km/s at a distance from Earth's centre."""
    return math.sqrt(MU / distance_km) * mass_factor(mass_kg)


def circular_period(distance_km: float) -> float:
    """Circular orbit period in seconds at a distance from Earth's centre."""
    return TWO_PI * math.sqrt(distance_km ** 3 / MU)


def propagate_user_satellite(
    satellite: UserSatellite,
    elapsed_seconds: float,
    when: datetime | None = None,
) -> OrbitState:
    """Advance a user body along its circle.

    The angle about the z axis grows linearly at ``v / r``; the in-plane
    radius ``sqrt(x0² + y0²)`` and ``z0`` stay fixed.

    Args:
        satellite: Body to propagate.
        elapsed_seconds: Simulated seconds since the body's initial state.
        when: Instant for the Earth rotation angle in the geodetic
            conversion. Defaults to ``created_at + elapsed_seconds``.

    Returns:
        The body's state after ``elapsed_seconds``.
    """
    x0, y0, z0 = satellite.x, satellite.y, satellite.z
    r = math.sqrt(x0 * x0 + y0 * y0 + z0 * z0)
    speed = circular_velocity(r, satellite.mass_kg)
    omega = speed / r

    plane_radius = math.sqrt(x0 * x0 + y0 * y0)
    angle = math.atan2(y0, x0) + omega * elapsed_seconds
    cos_a, sin_a = math.cos(angle), math.sin(angle)

    position = np.array([plane_radius * cos_a, plane_radius * sin_a, z0], dtype=np.float64)
    velocity = np.array([-speed * sin_a, speed * cos_a, 0.0], dtype=np.float64)

    if when is None:
        when = satellite.created_at + timedelta(seconds=elapsed_seconds)
    geo = eci_to_geodetic(position, when)

    return OrbitState(
        latitude_deg=geo.latitude_deg,
        longitude_deg=geo.longitude_deg,
        altitude_km=geo.geocentric_altitude_km,
        geodetic_altitude_km=geo.altitude_km,
        speed_km_s=speed,
        position_km=position,
        velocity_km_s=velocity,
        epoch=when,
    )


def generate_satellite_color(rng: random.Random | None = None) -> str:
    """Pick a display colour from the fixed palette."""
    return (rng or random).choice(SATELLITE_COLORS)
