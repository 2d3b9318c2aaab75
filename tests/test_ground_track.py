"""Tests for ground track sampling."""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from orbwatch.core.ground_track import calculate_ground_track
from orbwatch.core.propagation import propagate
from orbwatch.core.tle import ElementRecord, OrbitalElements

ISS_LINE1 = "1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993"
ISS_LINE2 = "2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596"


@pytest.fixture
def iss() -> OrbitalElements:
    return OrbitalElements.from_record(ElementRecord("ISS (ZARYA)", ISS_LINE1, ISS_LINE2))


@pytest.mark.parametrize(
    "duration, step, expected",
    [(10.0, 1.0, 11), (10.0, 3.0, 4), (0.0, 1.0, 1), (92.93, 2.0, 47), (1.0, 2.0, 1)],
)
def test_sample_count(iss: OrbitalElements, duration: float, step: float, expected: int):
    track = calculate_ground_track(iss, iss.epoch, duration, step)
    assert len(track) == expected


def test_default_step_is_one_minute(iss: OrbitalElements):
    assert len(calculate_ground_track(iss, iss.epoch, 5.0)) == 6


def test_samples_are_independent_propagations(iss: OrbitalElements):
    start = iss.epoch + timedelta(hours=1)
    track = calculate_ground_track(iss, start, 20.0, 5.0)

    for i, sample in enumerate(track):
        expected_time = start + timedelta(minutes=5 * i)
        assert sample.epoch == expected_time
        np.testing.assert_array_equal(sample.position_km, propagate(iss, expected_time).position_km)


def test_restartable(iss: OrbitalElements):
    first = calculate_ground_track(iss, iss.epoch, 30.0, 2.0)
    second = calculate_ground_track(iss, iss.epoch, 30.0, 2.0)
    assert [s.longitude_deg for s in first] == [s.longitude_deg for s in second]


def test_full_period_track_stays_in_latitude_band(iss: OrbitalElements):
    track = calculate_ground_track(iss, iss.epoch, iss.period_minutes, 2.0)
    latitudes = [s.latitude_deg for s in track]
    assert max(latitudes) > 45.0
    assert min(latitudes) < -45.0
    assert all(abs(lat) < 52.0 for lat in latitudes)


@pytest.mark.parametrize("step", [0.0, -1.0])
def test_non_positive_step_raises(iss: OrbitalElements, step: float):
    with pytest.raises(ValueError, match="Step must be positive"):
        calculate_ground_track(iss, iss.epoch, 10.0, step)


def test_naive_start_is_utc(iss: OrbitalElements):
    aware = datetime(2024, 2, 14, 13, 0, 0, tzinfo=timezone.utc)
    naive_track = calculate_ground_track(iss, aware.replace(tzinfo=None), 10.0)
    aware_track = calculate_ground_track(iss, aware, 10.0)

    assert len(naive_track) == 11
    assert [s.epoch for s in naive_track] == [s.epoch for s in aware_track]
    assert [s.longitude_deg for s in naive_track] == [s.longitude_deg for s in aware_track]


@pytest.mark.parametrize("duration", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_duration_raises(iss: OrbitalElements, duration: float):
    with pytest.raises(ValueError, match="Duration must be finite"):
        calculate_ground_track(iss, iss.epoch, duration)


@pytest.mark.parametrize("step", [float("nan"), float("inf")])
def test_non_finite_step_raises(iss: OrbitalElements, step: float):
    with pytest.raises(ValueError, match="Step must be positive"):
        calculate_ground_track(iss, iss.epoch, 10.0, step)


def test_unreadable_mean_motion_period_raises(iss: OrbitalElements):
    broken = OrbitalElements.from_record(ElementRecord("x", ISS_LINE1, ISS_LINE2[:30]), strict=False)
    assert math.isnan(broken.period_minutes)
    with pytest.raises(ValueError, match="Duration must be finite"):
        calculate_ground_track(broken, iss.epoch, broken.period_minutes)
