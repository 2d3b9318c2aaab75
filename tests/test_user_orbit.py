"""Tests for the circular-orbit model of user-placed bodies."""
from __future__ import annotations

import math
import random
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from orbwatch.core.user_orbit import (
    OrbitState,
    UserSatellite,
    circular_period,
    circular_velocity,
    generate_satellite_color,
    mass_factor,
    propagate_user_satellite,
)
from orbwatch.utils.constants import EARTH_MU_KM3_S2 as MU, EARTH_RADIUS_KM as RE, SATELLITE_COLORS

CREATED = datetime(2024, 2, 14, 12, 0, 0, tzinfo=timezone.utc)


def _satellite(x: float, y: float, z: float, mass_kg: float = 1000.0) -> UserSatellite:
    return UserSatellite(
        id="user-test", name="test", x=x, y=y, z=z, mass_kg=mass_kg, color="#ff6b6b", created_at=CREATED
    )


class TestMassFactor:
    @pytest.mark.parametrize("mass", [1.0, 500.0, 1000.0])
    def test_light_bodies_unaffected(self, mass: float):
        assert mass_factor(mass) == 1.0

    def test_heavy_body_slower(self):
        assert mass_factor(1e6) == pytest.approx(1.0 / 1.06)

    def test_clamped_at_eighty_percent(self):
        assert mass_factor(1e20) == 0.8

    def test_monotonic(self):
        masses = [1e3, 1e4, 1e6, 1e9, 1e12]
        factors = [mass_factor(m) for m in masses]
        assert factors == sorted(factors, reverse=True)

    def test_vanishing_denominator_clamps_to_one(self):
        # 1 + 0.02 * log10(1e-50) == 0
        assert mass_factor(1e-47) == 1.0

    def test_negative_denominator_clamps_to_floor(self):
        assert mass_factor(1e-60) == 0.8

    @pytest.mark.parametrize("mass", [1e-30, 1e-46, 1e-48, 1e-300])
    def test_tiny_masses_stay_in_range(self, mass: float):
        assert 0.8 <= mass_factor(mass) <= 1.0

    def test_tiny_mass_velocity_finite(self):
        assert circular_velocity(7000.0, 1e-47) == pytest.approx(math.sqrt(MU / 7000.0))


def test_circular_velocity():
    assert circular_velocity(7000.0, 1000.0) == pytest.approx(math.sqrt(MU / 7000.0))
    assert circular_velocity(7000.0, 1e6) == pytest.approx(math.sqrt(MU / 7000.0) / 1.06)


def test_circular_period():
    assert circular_period(7000.0) == pytest.approx(2 * math.pi * math.sqrt(7000.0 ** 3 / MU))
    assert 5800 < circular_period(7000.0) < 5900  # ~97 minutes


class TestPropagateUserSatellite:
    def test_initial_state_matches_placement(self):
        sat = _satellite(5000.0, 4000.0, 3000.0)
        state = propagate_user_satellite(sat, 0.0)
        assert isinstance(state, OrbitState)
        np.testing.assert_allclose(state.position_km, [5000.0, 4000.0, 3000.0], atol=1e-9)
        assert state.epoch == CREATED

    def test_radius_and_z_held_fixed(self):
        sat = _satellite(5000.0, 4000.0, 3000.0)
        r0 = np.linalg.norm(sat.position_km)
        for t in (1.0, 60.0, 1234.5, 86400.0):
            state = propagate_user_satellite(sat, t)
            assert state.position_km[2] == 3000.0
            assert np.linalg.norm(state.position_km) == pytest.approx(r0, rel=1e-12)
            assert state.velocity_km_s[2] == 0.0

    def test_speed_and_tangent_velocity(self):
        sat = _satellite(7000.0, 0.0, 0.0, mass_kg=1e6)
        state = propagate_user_satellite(sat, 300.0)
        assert state.speed_km_s == pytest.approx(circular_velocity(7000.0, 1e6))
        assert np.linalg.norm(state.velocity_km_s) == pytest.approx(state.speed_km_s)
        assert np.dot(state.position_km, state.velocity_km_s) == pytest.approx(0.0, abs=1e-9)

    def test_angle_advances_linearly(self):
        sat = _satellite(7000.0, 0.0, 0.0)
        v = circular_velocity(7000.0, 1000.0)
        state = propagate_user_satellite(sat, 100.0)
        angle = math.atan2(state.position_km[1], state.position_km[0])
        assert angle == pytest.approx(v / 7000.0 * 100.0)

    def test_returns_after_one_revolution(self):
        sat = _satellite(7000.0, 0.0, 0.0)
        state = propagate_user_satellite(sat, circular_period(7000.0))
        np.testing.assert_allclose(state.position_km, [7000.0, 0.0, 0.0], atol=1e-6)

    def test_altitude_is_geocentric(self):
        sat = _satellite(5000.0, 4000.0, 3000.0)
        state = propagate_user_satellite(sat, 42.0)
        r = math.sqrt(5000.0 ** 2 + 4000.0 ** 2 + 3000.0 ** 2)
        assert state.altitude_km == pytest.approx(r - RE)
        assert state.geocentric_altitude_km == state.altitude_km
        # off the equator the ellipsoidal altitude differs
        assert state.geodetic_altitude_km != pytest.approx(state.altitude_km, abs=1.0)

    def test_explicit_time_for_geodetic_conversion(self):
        sat = _satellite(7000.0, 0.0, 0.0)
        later = CREATED + timedelta(hours=6)
        default = propagate_user_satellite(sat, 10.0)
        explicit = propagate_user_satellite(sat, 10.0, later)
        np.testing.assert_array_equal(default.position_km, explicit.position_km)
        assert explicit.epoch == later
        assert default.epoch == CREATED + timedelta(seconds=10)
        assert default.longitude_deg != pytest.approx(explicit.longitude_deg)


def test_generate_satellite_color():
    rng = random.Random(7)
    colors = {generate_satellite_color(rng) for _ in range(50)}
    assert colors <= set(SATELLITE_COLORS)
    assert generate_satellite_color() in SATELLITE_COLORS
