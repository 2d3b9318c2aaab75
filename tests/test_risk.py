from __future__ import annotations

import pytest

from orbwatch.core.risk import RiskLevel, classify_distance


class TestClassifyDistance:
    """Risk tiers from minimum separation."""

    @pytest.mark.parametrize(
        "distance, expected",
        [
            (0.0, RiskLevel.DANGER),
            (0.5, RiskLevel.DANGER),
            (0.999, RiskLevel.DANGER),
            (1.0, RiskLevel.PROXIMITY),
            (5.0, RiskLevel.PROXIMITY),
            (9.999, RiskLevel.PROXIMITY),
            (10.0, RiskLevel.SAFE),
            (10.5, RiskLevel.SAFE),
            (42164.0, RiskLevel.SAFE),
            (float("inf"), RiskLevel.SAFE),
        ],
    )
    def test_thresholds(self, distance: float, expected: RiskLevel):
        assert classify_distance(distance) is expected

    def test_nan_is_safe(self):
        assert classify_distance(float("nan")) is RiskLevel.SAFE


def test_rank_orders_danger_first():
    levels = sorted([RiskLevel.SAFE, RiskLevel.DANGER, RiskLevel.PROXIMITY], key=lambda r: r.rank)
    assert levels == [RiskLevel.DANGER, RiskLevel.PROXIMITY, RiskLevel.SAFE]


def test_values_are_lowercase_strings():
    assert RiskLevel.DANGER == "danger"
    assert RiskLevel("proximity") is RiskLevel.PROXIMITY
    assert [r.value for r in RiskLevel] == ["danger", "proximity", "safe"]
