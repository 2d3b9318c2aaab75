"""Orbital propagation with first-order J2 secular drift.

Mean elements are advanced analytically (mean motion, RAAN and argument of
perigee drift linearly with time), Kepler's equation gives the position on
the ellipse, and the perifocal state is rotated into the inertial frame.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime

import numpy as np
from numpy.typing import NDArray

from orbwatch.core.kepler import solve_kepler, true_anomaly
from orbwatch.core.time_system import as_utc, sidereal_time
from orbwatch.core.tle import OrbitalElements
from orbwatch.utils.constants import (
    DEG_TO_RAD,
    EARTH_ECCENTRICITY_SQ as E2,
    EARTH_J2 as J2,
    EARTH_MU_KM3_S2 as MU,
    EARTH_RADIUS_KM as RE,
    GEODETIC_ITERATIONS,
    MINUTES_PER_DAY,
    RAD_TO_DEG,
    TWO_PI,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Geodetic:
    """Geodetic coordinates of an ECI position at a given instant.

    Attributes:
        latitude_deg: Geodetic latitude in degrees.
        longitude_deg: Longitude in degrees, in [-180, 180).
        altitude_km: Height above the reference ellipsoid.
        geocentric_altitude_km: Straight-line ``|r| - R_earth``.
    """

    latitude_deg: float
    longitude_deg: float
    altitude_km: float
    geocentric_altitude_km: float


@dataclass
class SatellitePosition:
    """Position and velocity of a catalogued satellite at one instant.

    Attributes:
        latitude_deg: Geodetic latitude in degrees.
        longitude_deg: Longitude in degrees.
        altitude_km: Ellipsoidal (geodetic) altitude in km.
        geocentric_altitude_km: ``|r| - R_earth`` in km.
        speed_km_s: Magnitude of the inertial velocity.
        position_km: [x, y, z] ECI position in km.
        velocity_km_s: [vx, vy, vz] ECI velocity in km/s.
        epoch: Instant this state refers to.
    """

    latitude_deg: float
    longitude_deg: float
    altitude_km: float
    geocentric_altitude_km: float
    speed_km_s: float
    position_km: NDArray[np.float64]  # shape (3,)
    velocity_km_s: NDArray[np.float64]  # shape (3,)
    epoch: datetime

    @property
    def geodetic_altitude_km(self) -> float:
        return self.altitude_km


def eci_to_geodetic(position_km: NDArray[np.float64] | tuple[float, float, float], when: datetime) -> Geodetic:
    """Convert an ECI position to geodetic latitude, longitude and altitude.

    Longitude is the right ascension minus Greenwich sidereal time. Latitude
    is refined over a fixed number of passes on the reference ellipsoid.

    Args:
        position_km: [x, y, z] ECI position in km.
        when: Instant used for the Earth rotation angle.

    Returns:
        Geodetic coordinates carrying both the ellipsoidal and the
        geocentric altitude.
    """
    x, y, z = (float(c) for c in position_km)
    gmst = sidereal_time(when)

    longitude = math.atan2(y, x) * RAD_TO_DEG - gmst
    longitude = (longitude % 360.0 + 540.0) % 360.0 - 180.0

    rho = math.sqrt(x * x + y * y)
    latitude = math.atan2(z, rho)
    for _ in range(GEODETIC_ITERATIONS):
        sin_lat = math.sin(latitude)
        n = RE / math.sqrt(1.0 - E2 * sin_lat * sin_lat)
        latitude = math.atan2(z + E2 * n * sin_lat, rho)

    sin_lat = math.sin(latitude)
    n = RE / math.sqrt(1.0 - E2 * sin_lat * sin_lat)
    altitude = rho / math.cos(latitude) - n

    return Geodetic(
        latitude_deg=latitude * RAD_TO_DEG,
        longitude_deg=longitude,
        altitude_km=altitude,
        geocentric_altitude_km=math.sqrt(x * x + y * y + z * z) - RE,
    )


def perifocal_to_eci(raan: float, inclination: float, arg_perigee: float) -> NDArray[np.float64]:
    """Rotation matrix from the perifocal frame to ECI.

    Composed as ``Rz(raan) @ Rx(inclination) @ Rz(arg_perigee)``; all angles
    in radians.
    """
    cos_o, sin_o = math.cos(raan), math.sin(raan)
    cos_i, sin_i = math.cos(inclination), math.sin(inclination)
    cos_w, sin_w = math.cos(arg_perigee), math.sin(arg_perigee)
    return np.array(
        [
            [cos_o * cos_w - sin_o * sin_w * cos_i, -cos_o * sin_w - sin_o * cos_w * cos_i, sin_o * sin_i],
            [sin_o * cos_w + cos_o * sin_w * cos_i, -sin_o * sin_w + cos_o * cos_w * cos_i, -cos_o * sin_i],
            [sin_w * sin_i, cos_w * sin_i, cos_i],
        ],
        dtype=np.float64,
    )


def _minutes_since_epoch(elements: OrbitalElements, when: datetime) -> float:
    if elements.epoch is None:
        return math.nan
    return (when - elements.epoch).total_seconds() / 60.0


@dataclass(frozen=True)
class MeanState:
    """Mean angles after secular J2 drift, all in radians.

    Attributes:
        mean_anomaly: Mean anomaly, wrapped to [0, 2π).
        arg_perigee: Argument of perigee, wrapped to [0, 2π).
        raan: Right ascension of ascending node, wrapped to [0, 2π).
        mean_motion: Perturbed mean motion in rad/min.
    """

    mean_anomaly: float
    arg_perigee: float
    raan: float
    mean_motion: float


def secular_state(elements: OrbitalElements, when: datetime) -> MeanState:
    """Advance the mean angles to ``when`` with first-order J2 secular rates.

    Naive datetimes are taken to be UTC.
    """
    when = as_utc(when)
    dt_min = _minutes_since_epoch(elements, when)

    n0 = elements.mean_motion_rev_per_day * TWO_PI / MINUTES_PER_DAY  # rad/min
    e = elements.eccentricity
    inc = elements.inclination_deg * DEG_TO_RAD

    p = elements.semi_major_axis_km * (1.0 - e * e)
    k = J2 * (RE / p) ** 2 * n0
    sin_i = math.sin(inc)
    cos_i = math.cos(inc)
    n_dot = 1.5 * k * (1.0 - 1.5 * sin_i * sin_i)
    raan_dot = -1.5 * k * cos_i
    arg_perigee_dot = 0.75 * k * (5.0 * cos_i * cos_i - 1.0)

    return MeanState(
        mean_anomaly=(elements.mean_anomaly_deg * DEG_TO_RAD + (n0 + n_dot) * dt_min) % TWO_PI,
        arg_perigee=(elements.arg_perigee_deg * DEG_TO_RAD + arg_perigee_dot * dt_min) % TWO_PI,
        raan=(elements.raan_deg * DEG_TO_RAD + raan_dot * dt_min) % TWO_PI,
        mean_motion=n0 + n_dot,
    )


def propagate(elements: OrbitalElements, when: datetime) -> SatellitePosition:
    """Propagate mean elements to an absolute time.

    Applies first-order J2 secular rates to mean motion, RAAN and argument
    of perigee, solves Kepler's equation and rotates the perifocal state into
    ECI. Times before the epoch are allowed. Only elliptical orbits
    (``e < 1``) are meaningful.

    Args:
        elements: Parsed orbital elements.
        when: UTC datetime to propagate to; naive values are taken to be UTC.

    Returns:
        The satellite state at ``when``.
    """
    when = as_utc(when)
    mean = secular_state(elements, when)
    a = elements.semi_major_axis_km
    e = elements.eccentricity
    inc = elements.inclination_deg * DEG_TO_RAD
    p = a * (1.0 - e * e)

    ecc_anomaly = solve_kepler(mean.mean_anomaly, e)
    nu = true_anomaly(ecc_anomaly, e)
    r = a * (1.0 - e * math.cos(ecc_anomaly))

    h = math.sqrt(MU * p)
    v_radial = (MU / h) * e * math.sin(nu)
    v_transverse = (MU / h) * (1.0 + e * math.cos(nu))

    cos_nu, sin_nu = math.cos(nu), math.sin(nu)
    pos_pqw = np.array([r * cos_nu, r * sin_nu, 0.0])
    vel_pqw = np.array(
        [
            v_radial * cos_nu - v_transverse * sin_nu,
            v_radial * sin_nu + v_transverse * cos_nu,
            0.0,
        ]
    )

    rotation = perifocal_to_eci(mean.raan, inc, mean.arg_perigee)
    position = rotation @ pos_pqw
    velocity = rotation @ vel_pqw

    geo = eci_to_geodetic(position, when)

    return SatellitePosition(
        latitude_deg=geo.latitude_deg,
        longitude_deg=geo.longitude_deg,
        altitude_km=geo.altitude_km,
        geocentric_altitude_km=geo.geocentric_altitude_km,
        speed_km_s=float(np.linalg.norm(velocity)),
        position_km=position,
        velocity_km_s=velocity,
        epoch=when,
    )


def propagate_many(elements_list: list[OrbitalElements], when: datetime) -> list[SatellitePosition]:
    """Propagate several element sets to the same instant."""
    states = [propagate(elements, when) for elements in elements_list]
    logger.debug("Propagated %d element sets to %s", len(states), when.isoformat())
    return states


def orbital_velocity(altitude_km: float) -> float:
    """Circular orbital speed in km/s at an altitude above the equatorial radius."""
    return math.sqrt(MU / (RE + altitude_km))


def orbital_period(semi_major_axis_km: float) -> float:
    """Orbital period in minutes for a semi-major axis in km."""
    return TWO_PI * math.sqrt(semi_major_axis_km ** 3 / MU) / 60.0
