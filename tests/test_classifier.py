import pytest

from backoffice.risk.assessment import RiskTier
from backoffice.risk.classifier import classify


@pytest.mark.parametrize(
    "ratio, tier",
    [
        (0, RiskTier.HIGH),
        (49.999, RiskTier.HIGH),
        (50, RiskTier.MEDIUM),
        (74.999, RiskTier.MEDIUM),
        (75, RiskTier.LOW),
        (100, RiskTier.LOW),
    ],
)
def test_thresholds(ratio, tier):
    assert classify(ratio) is tier


def test_absent_ratio_is_high_risk():
    assert classify(None) is RiskTier.HIGH
    assert classify(float("nan")) is RiskTier.HIGH


def test_tier_values_are_wire_strings():
    assert [t.value for t in RiskTier] == ["low", "medium", "high"]
