"""
Unit tests for risk scoring and portfolio-level risk metrics.
"""

import pytest

from portfolio_advisor.core.assets.base import GenericAsset
from portfolio_advisor.core.portfolio.risk import (
    RISK_TIERS,
    RiskProfile,
    calculate_portfolio_volatility,
    calculate_risk_adjusted_return,
    clamp_risk_score,
    tier_for_score,
)
from portfolio_advisor.utils.exceptions import ValidationError


def _asset(symbol, quantity, volatility, price=1.0):
    asset = GenericAsset(symbol, symbol, price, quantity)
    asset.volatility = volatility
    return asset


class TestRiskTiers:
    """Test mapping of scores to tiers."""

    def test_tier_allocations_sum_to_100(self):
        for tier in RISK_TIERS:
            assert sum(tier.allocation.values()) == pytest.approx(100.0)

    @pytest.mark.parametrize("score, name", [
        (0, "Low"),
        (29.99, "Low"),
        (30, "Medium"),
        (69.99, "Medium"),
        (70, "High"),
        (100, "High"),
    ])
    def test_tier_boundaries(self, score, name):
        assert tier_for_score(score).name == name

    def test_clamp(self):
        assert clamp_risk_score(-10) == 0.0
        assert clamp_risk_score(150) == 100.0
        assert clamp_risk_score(42) == 42.0


class TestRiskProfile:
    """Test RiskProfile."""

    def test_default_profile(self):
        profile = RiskProfile()

        assert profile.risk_score == 50.0
        assert profile.volatility_threshold == 15.0
        assert profile.risk_profile_label == "Moderate"

    def test_conservative_allocation(self):
        profile = RiskProfile(risk_score=25)

        assert profile.ideal_allocation == {
            "SIP": 60.0,
            "USD": 20.0,
            "XAU/USD": 10.0,
            "EUR/USD": 5.0,
            "BTC": 5.0,
        }
        assert profile.risk_profile_label == "Conservative"

    def test_moderate_allocation(self):
        profile = RiskProfile(risk_score=50)

        assert profile.ideal_allocation == {
            "SIP": 40.0,
            "EUR/USD": 20.0,
            "BTC": 15.0,
            "XAU/USD": 15.0,
            "USD": 10.0,
        }

    def test_aggressive_allocation(self):
        profile = RiskProfile(risk_score=75)

        assert profile.ideal_allocation == {
            "SIP": 20.0,
            "EUR/USD": 30.0,
            "BTC": 30.0,
            "XAU/USD": 10.0,
            "USD": 10.0,
        }
        assert profile.risk_profile_label == "Aggressive"

    def test_out_of_range_scores_are_clamped(self):
        high = RiskProfile(risk_score=150)
        top = RiskProfile(risk_score=100)
        low = RiskProfile(risk_score=-10)

        assert high.risk_score == 100.0
        assert high.ideal_allocation == top.ideal_allocation
        assert low.risk_score == 0.0
        assert low.risk_profile_label == "Conservative"

    def test_invalid_score(self):
        with pytest.raises(ValidationError):
            RiskProfile(risk_score="high")

    def test_ideal_allocation_is_a_copy(self):
        profile = RiskProfile(risk_score=25)
        allocation = profile.ideal_allocation
        allocation["SIP"] = 0.0

        assert profile.ideal_allocation["SIP"] == 60.0

    def test_set_risk_score_rederives_allocation(self):
        profile = RiskProfile(risk_score=25)

        assert profile.set_risk_score(80) == 80.0
        assert profile.ideal_allocation["BTC"] == 30.0

    def test_to_dict(self):
        data = RiskProfile(risk_score=25).to_dict()

        assert data["risk_score"] == 25.0
        assert data["risk_profile"] == "Conservative"
        assert data["ideal_allocation"]["SIP"] == 60.0


class TestMarketAdjustment:
    """Test market-driven risk score adjustment."""

    def test_high_vix_and_btc_volatility(self):
        profile = RiskProfile(risk_score=50)

        assert profile.adjust_risk_score_for_market_conditions(vix=35, btc_volatility=25) == 35.0
        assert profile.risk_score == 35.0

    def test_low_vix(self):
        profile = RiskProfile(risk_score=50)

        assert profile.adjust_risk_score_for_market_conditions(vix=10, btc_volatility=5) == 55.0

    def test_neutral_market_keeps_score(self):
        profile = RiskProfile(risk_score=50)

        assert profile.adjust_risk_score_for_market_conditions(vix=20, btc_volatility=10) == 50.0

    def test_adjustment_is_clamped(self):
        low = RiskProfile(risk_score=5)
        high = RiskProfile(risk_score=98)

        assert low.adjust_risk_score_for_market_conditions(vix=40, btc_volatility=30) == 0.0
        assert high.adjust_risk_score_for_market_conditions(vix=10, btc_volatility=0) == 100.0

    def test_adjustment_can_change_tier(self):
        profile = RiskProfile(risk_score=72)
        assert profile.risk_profile_label == "Aggressive"

        profile.adjust_risk_score_for_market_conditions(vix=35, btc_volatility=10)

        assert profile.risk_score == 62.0
        assert profile.risk_profile_label == "Moderate"
        assert profile.ideal_allocation["SIP"] == 40.0


class TestVolatilityChecks:
    """Test volatility threshold and portfolio metrics."""

    def test_is_asset_too_volatile(self):
        profile = RiskProfile(volatility_threshold=15)

        assert profile.is_asset_too_volatile(_asset("A", 1, 20.0))
        assert not profile.is_asset_too_volatile(_asset("B", 1, 15.0))

    def test_portfolio_volatility_is_value_weighted(self):
        assets = {"A": _asset("A", 600, 4.0), "B": _asset("B", 400, 20.0)}

        assert calculate_portfolio_volatility(assets) == pytest.approx(10.4)

    def test_risk_adjusted_return(self):
        assets = {"A": _asset("A", 600, 4.0), "B": _asset("B", 400, 20.0)}

        # no price movement, so the weighted return is zero
        assert calculate_risk_adjusted_return(assets) == pytest.approx(-0.5 / 10.4)
        assert calculate_risk_adjusted_return(assets, risk_free_rate=0.0) == pytest.approx(0.0)

    def test_risk_adjusted_return_with_gain(self):
        asset = _asset("A", 10, 5.0, price=100.0)
        asset.update_current_price(110.0)
        asset.volatility = 5.0

        assert calculate_risk_adjusted_return({"A": asset}) == pytest.approx((10.0 - 0.5) / 5.0)

    def test_zero_volatility_and_empty_portfolio(self):
        assets = {"A": _asset("A", 100, 0.0)}

        assert calculate_portfolio_volatility(assets) == 0.0
        assert calculate_risk_adjusted_return(assets) == 0.0
        assert calculate_portfolio_volatility({}) == 0.0
        assert calculate_risk_adjusted_return({}) == 0.0
