"""TLE (Two-Line Element) parsing.

Decodes the fixed-width columns of a two-line element record into an
:class:`OrbitalElements` set with the derived size and shape quantities
(semi-major axis, period, apogee and perigee altitude).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Union

from orbwatch.utils.constants import (
    EARTH_MU_KM3_S2 as MU,
    EARTH_RADIUS_KM as RE,
    MINUTES_PER_DAY,
    SECONDS_PER_DAY,
    TWO_PI,
)

logger = logging.getLogger(__name__)

TLE_LINE_LENGTH = 69


class MalformedRecordError(ValueError):
    """Raised when a two-line element record cannot be decoded."""


@dataclass(frozen=True)
class ElementRecord:
    """A raw two-line element record as delivered by a feed.

    Attributes:
        name: Satellite display name (line 0).
        line1: Raw TLE line 1.
        line2: Raw TLE line 2.
        catalog_id: NORAD catalog identifier as text.
    """

    name: str
    line1: str
    line2: str
    catalog_id: str = ""

    def __str__(self) -> str:
        header = f"{self.name}\n" if self.name else ""
        return f"{header}{self.line1}\n{self.line2}"


@dataclass(frozen=True)
class OrbitalElements:
    """Mean orbital elements decoded from a two-line record.

    Attributes:
        name: Satellite name.
        catalog_id: NORAD catalog identifier.
        epoch: Element epoch as a UTC datetime, or None if it could not be read.
        mean_motion_rev_per_day: Mean motion in revolutions per day.
        eccentricity: Orbital eccentricity in [0, 1).
        inclination_deg: Inclination in degrees.
        raan_deg: Right ascension of ascending node in degrees.
        arg_perigee_deg: Argument of perigee in degrees.
        mean_anomaly_deg: Mean anomaly at epoch in degrees.
        bstar: BSTAR drag term.
        semi_major_axis_km: Semi-major axis from Kepler's third law.
        period_minutes: Orbital period in minutes.
        apogee_km: Apogee altitude above the equatorial radius.
        perigee_km: Perigee altitude above the equatorial radius.
        record: The record these elements came from.
    """

    name: str
    catalog_id: str
    epoch: datetime | None
    mean_motion_rev_per_day: float
    eccentricity: float
    inclination_deg: float
    raan_deg: float
    arg_perigee_deg: float
    mean_anomaly_deg: float
    bstar: float
    semi_major_axis_km: float
    period_minutes: float
    apogee_km: float
    perigee_km: float
    record: ElementRecord = field(repr=False, compare=False)

    @classmethod
    def from_record(cls, record: ElementRecord, *, strict: bool = True) -> OrbitalElements:
        """Decode an element record.

        Args:
            record: Raw record to decode.
            strict: When True (default), reject records with the wrong line
                layout or unreadable fields. When False, no validation is
                done and unreadable fields come back as ``nan``.

        Returns:
            The decoded elements.

        Raises:
            MalformedRecordError: In strict mode, if the record is malformed.
        """
        line1 = record.line1.strip()
        line2 = record.line2.strip()

        if strict:
            if len(line1) != TLE_LINE_LENGTH or not line1.startswith("1"):
                logger.error("Invalid TLE line 1: %r", line1)
                raise MalformedRecordError(f"Invalid TLE line 1: {line1!r}")
            if len(line2) != TLE_LINE_LENGTH or not line2.startswith("2"):
                logger.error("Invalid TLE line 2: %r", line2)
                raise MalformedRecordError(f"Invalid TLE line 2: {line2!r}")

        year = _number(line1[18:20])
        day_of_year = _number(line1[20:32])
        bstar_mantissa = _number(line1[53:59]) / 1e5
        bstar_exponent = _number(line1[59:61])

        inclination = _number(line2[8:16])
        raan = _number(line2[17:25])
        eccentricity = _number("0." + line2[26:33].strip())
        arg_perigee = _number(line2[34:42])
        mean_anomaly = _number(line2[43:51])
        mean_motion = _number(line2[52:63])

        if strict:
            fields = {
                "epoch year": year,
                "epoch day": day_of_year,
                "bstar": bstar_mantissa,
                "bstar exponent": bstar_exponent,
                "inclination": inclination,
                "raan": raan,
                "eccentricity": eccentricity,
                "argument of perigee": arg_perigee,
                "mean anomaly": mean_anomaly,
                "mean motion": mean_motion,
            }
            for label, value in fields.items():
                if math.isnan(value):
                    logger.error("Unreadable %s field in record %r", label, record.name)
                    raise MalformedRecordError(f"Unreadable {label} field in record {record.name!r}")
            if not 0.0 <= eccentricity < 1.0:
                raise MalformedRecordError(f"Eccentricity {eccentricity} outside [0, 1)")
            if mean_motion <= 0.0:
                raise MalformedRecordError(f"Mean motion must be positive, got {mean_motion}")

        epoch = _epoch(year, day_of_year)
        bstar = bstar_mantissa * 10.0 ** bstar_exponent

        period, semi_major_axis = _period_and_axis(mean_motion)
        apogee = semi_major_axis * (1 + eccentricity) - RE
        perigee = semi_major_axis * (1 - eccentricity) - RE

        catalog_id = record.catalog_id or line1[2:7].strip()
        logger.debug("Parsed elements for %s (epoch %s)", catalog_id, epoch)

        return cls(
            name=record.name.strip(),
            catalog_id=catalog_id,
            epoch=epoch,
            mean_motion_rev_per_day=mean_motion,
            eccentricity=eccentricity,
            inclination_deg=inclination,
            raan_deg=raan,
            arg_perigee_deg=arg_perigee,
            mean_anomaly_deg=mean_anomaly,
            bstar=bstar,
            semi_major_axis_km=semi_major_axis,
            period_minutes=period,
            apogee_km=apogee,
            perigee_km=perigee,
            record=record,
        )


@dataclass(frozen=True)
class Parsed:
    """Successful decode of an element record."""

    elements: OrbitalElements
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Malformed:
    """Rejected element record with the reason it was rejected."""

    record: ElementRecord
    reason: str
    ok: bool = field(default=False, init=False)


ParseResult = Union[Parsed, Malformed]


def parse_elements(record: ElementRecord) -> ParseResult:
    """Decode a record without raising.

    Returns:
        ``Parsed`` wrapping the elements, or ``Malformed`` with a reason.
    """
    try:
        return Parsed(OrbitalElements.from_record(record))
    except MalformedRecordError as exc:
        return Malformed(record, str(exc))


def parse_records(text: str) -> list[ElementRecord]:
    """Split raw feed text into element records.

    Handles both 2-line and 3-line (with name) formats. The catalog id is
    read from columns 3-7 of line 1.

    Args:
        text: Raw TLE text, one or more records separated by newlines.

    Returns:
        A list of raw records, in feed order.
    """
    lines = [l.strip() for l in text.strip().splitlines() if l.strip()]
    records: list[ElementRecord] = []
    i = 0

    while i < len(lines):
        if lines[i].startswith("1 ") and i + 1 < len(lines) and lines[i + 1].startswith("2 "):
            records.append(_record("", lines[i], lines[i + 1]))
            i += 2
        elif (
            not lines[i].startswith("1 ")
            and not lines[i].startswith("2 ")
            and i + 2 < len(lines)
            and lines[i + 1].startswith("1 ")
            and lines[i + 2].startswith("2 ")
        ):
            records.append(_record(lines[i], lines[i + 1], lines[i + 2]))
            i += 3
        else:
            i += 1  # skip unrecognized lines

    logger.debug("Split %d element records from text", len(records))
    return records


def _record(name: str, line1: str, line2: str) -> ElementRecord:
    return ElementRecord(name=name, line1=line1, line2=line2, catalog_id=line1[2:7].strip())


def _number(text: str) -> float:
    """Read a fixed-width numeric field, ``nan`` if it is blank or garbage."""
    try:
        return float(text.strip())
    except ValueError:
        return math.nan


def _epoch(year: float, day_of_year: float) -> datetime | None:
    if not (math.isfinite(year) and math.isfinite(day_of_year)):
        return None
    full_year = int(year)
    full_year = full_year + 2000 if full_year < 57 else full_year + 1900
    try:
        return datetime(full_year, 1, 1, tzinfo=timezone.utc) + timedelta(
            seconds=(day_of_year - 1) * SECONDS_PER_DAY
        )
    except (ValueError, OverflowError):
        return None


def _period_and_axis(mean_motion: float) -> tuple[float, float]:
    """Period in minutes and semi-major axis in km from revs/day."""
    if mean_motion == 0.0:
        return math.inf, math.inf
    n_rad_per_sec = mean_motion * TWO_PI / SECONDS_PER_DAY
    return MINUTES_PER_DAY / mean_motion, (MU / n_rad_per_sec ** 2) ** (1.0 / 3.0)
