"""Julian date and Greenwich mean sidereal time."""
from __future__ import annotations

import math
from datetime import datetime, timezone

from sgp4.api import jday

from orbwatch.utils.constants import J2000_JD


def as_utc(when: datetime) -> datetime:
    """Return ``when`` as an aware UTC datetime; naive values are taken to be UTC."""
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc)


def julian_date(when: datetime) -> float:
    """Convert a UTC datetime to a Julian date.

    The fractional day carries hours, minutes, seconds and microseconds.
    Naive datetimes are taken to be UTC.

    Args:
        when: Instant to convert.

    Returns:
        Julian date (2451545.0 at 2000-01-01 12:00 UTC).
    """
    t = as_utc(when)
    jd, fr = jday(t.year, t.month, t.day, t.hour, t.minute, t.second + t.microsecond / 1e6)
    return jd + fr


def sidereal_time(when: datetime) -> float:
    """Greenwich mean sidereal time in degrees, normalized to [0, 360).

    Uses the IAU 1982 polynomial in Julian centuries since J2000.
    """
    jd = julian_date(when)
    d = jd - J2000_JD
    t = d / 36525.0
    gmst = 280.46061837 + 360.98564736629 * d + 3.87933e-4 * t * t - t * t * t / 38710000.0
    return gmst % 360.0


def gmst_rad(when: datetime) -> float:
    """Greenwich mean sidereal time in radians, in [0, 2π)."""
    return math.radians(sidereal_time(when))
