"""
Unit tests for the asset base module.
"""

from datetime import datetime, timedelta

import pandas as pd
import pytest

from portfolio_advisor.core.assets.base import (
    BASE_ANALYSIS_RULES,
    AnalysisRule,
    GenericAsset,
    PricePoint,
    RuleSet,
)
from portfolio_advisor.utils.exceptions import ValidationError


class TestRuleSet:
    """Test declarative analysis rules."""

    def test_all_matching_rules_are_rendered(self):
        rules = RuleSet(rules=(
            AnalysisRule(condition=lambda x: x > 0, message="positive"),
            AnalysisRule(condition=lambda x: x > 10, message=lambda x: f"big {x}"),
        ))

        assert rules.evaluate(20) == ["positive", "big 20"]
        assert rules.evaluate(-1) == []

    def test_first_match_stops_after_first_rule(self):
        rules = RuleSet(first_match=True, rules=(
            AnalysisRule(condition=lambda x: x < 5, message="low"),
            AnalysisRule(condition=lambda x: x < 15, message="medium"),
            AnalysisRule(condition=lambda x: True, message="high"),
        ))

        assert rules.evaluate(1) == ["low"]
        assert rules.evaluate(10) == ["medium"]
        assert rules.evaluate(50) == ["high"]


class TestAssetConstruction:
    """Test Asset initialization."""

    def test_initial_state(self):
        asset = GenericAsset("Test Asset", "TST", 100.0, quantity=2.0)

        assert asset.name == "Test Asset"
        assert asset.symbol == "TST"
        assert asset.current_price == 100.0
        assert asset.quantity == 2.0
        assert asset.initial_investment == 200.0
        assert asset.current_value == 200.0
        assert asset.volatility == 0.0
        assert len(asset.price_history) == 1
        assert asset.price_history[0].price == 100.0

    def test_invalid_price(self):
        with pytest.raises(ValidationError):
            GenericAsset("Bad", "BAD", 0.0)

        with pytest.raises(ValidationError):
            GenericAsset("Bad", "BAD", -10.0)

    def test_invalid_quantity(self):
        with pytest.raises(ValidationError):
            GenericAsset("Bad", "BAD", 10.0, quantity=-1.0)

    def test_invalid_symbol(self):
        with pytest.raises(ValidationError):
            GenericAsset("Bad", "", 10.0)

    def test_price_history_is_read_only_view(self):
        asset = GenericAsset("Test", "TST", 100.0)

        assert isinstance(asset.price_history, tuple)
        assert isinstance(asset.price_history[0], PricePoint)


class TestAssetTrading:
    """Test buy and sell."""

    def setup_method(self):
        self.asset = GenericAsset("Test", "TST", 50.0, quantity=0.0)

    def test_buy(self):
        bought = self.asset.buy(100.0)

        assert bought == pytest.approx(2.0)
        assert self.asset.quantity == pytest.approx(2.0)
        assert self.asset.initial_investment == pytest.approx(100.0)

    def test_buy_zero_is_noop(self):
        assert self.asset.buy(0.0) == 0.0
        assert self.asset.quantity == 0.0
        assert self.asset.initial_investment == 0.0

    def test_buy_negative_raises(self):
        with pytest.raises(ValidationError):
            self.asset.buy(-10.0)

        assert self.asset.quantity == 0.0

    def test_buy_then_sell_all(self):
        """Test that selling 100% right after a buy returns the full value."""
        self.asset.buy(250.0)
        quantity_after_buy = self.asset.quantity

        proceeds = self.asset.sell(100.0)

        assert proceeds == pytest.approx(quantity_after_buy * self.asset.current_price)
        assert self.asset.quantity == 0.0
        assert self.asset.initial_investment == 0.0

    def test_partial_sell_reduces_cost_basis_proportionally(self):
        self.asset.buy(1000.0)

        proceeds = self.asset.sell(25.0)

        assert proceeds == pytest.approx(250.0)
        assert self.asset.quantity == pytest.approx(15.0)
        assert self.asset.initial_investment == pytest.approx(750.0)

    @pytest.mark.parametrize("percentage", [0.0, -5.0, 100.01, 150.0, float("nan"), float("inf")])
    def test_out_of_range_sell_is_noop(self, percentage):
        self.asset.buy(500.0)

        assert self.asset.sell(percentage) == 0.0
        assert self.asset.quantity == pytest.approx(10.0)
        assert self.asset.initial_investment == pytest.approx(500.0)

    def test_non_numeric_sell_raises(self):
        self.asset.buy(500.0)

        with pytest.raises(ValidationError):
            self.asset.sell("half")

        assert self.asset.quantity == pytest.approx(10.0)


class TestAssetPriceUpdates:
    """Test price updates and derived statistics."""

    def setup_method(self):
        self.asset = GenericAsset("Bitcoin", "BTC", 40000.0, quantity=1.0)

    def test_update_appends_observation(self):
        self.asset.update_current_price(44000.0)

        assert self.asset.current_price == 44000.0
        assert len(self.asset.price_history) == 2
        assert self.asset.price_history[-1].price == 44000.0

    def test_volatility_recomputed_on_every_update(self):
        self.asset.update_current_price(44000.0)
        assert self.asset.volatility == 0.0

        self.asset.update_current_price(41800.0)
        assert self.asset.volatility == pytest.approx(7.5)

    def test_identical_prices_keep_zero_volatility(self):
        for _ in range(5):
            self.asset.update_current_price(40000.0)

        assert self.asset.volatility == 0.0

    @pytest.mark.parametrize("price", [0.0, -1.0, float("nan"), float("inf"), "abc"])
    def test_invalid_price_rejected(self, price):
        with pytest.raises(ValidationError):
            self.asset.update_current_price(price)

        assert self.asset.current_price == 40000.0
        assert len(self.asset.price_history) == 1

    def test_add_price_point_with_timestamp(self):
        timestamp = datetime(2024, 1, 1)
        self.asset.add_price_point(timestamp, 42000.0)

        assert self.asset.price_history[-1].timestamp == timestamp
        assert self.asset.current_price == 40000.0

    def test_return_percentage(self):
        self.asset.update_current_price(50000.0)

        assert self.asset.get_return_percentage() == pytest.approx(25.0)

    def test_return_percentage_without_investment(self):
        asset = GenericAsset("Empty", "EMP", 10.0)
        asset.update_current_price(20.0)

        assert asset.get_return_percentage() == 0.0

    def test_price_history_series(self):
        start = datetime(2024, 1, 1)
        self.asset.add_price_point(start + timedelta(days=1), 41000.0)

        series = self.asset.price_history_series()

        assert isinstance(series, pd.Series)
        assert series.name == "BTC"
        assert list(series.values) == [40000.0, 41000.0]


class TestAssetAnalysis:
    """Test the base analysis rules."""

    def setup_method(self):
        self.asset = GenericAsset("Test", "TST", 100.0, quantity=1.0)

    def test_single_observation(self):
        assert self.asset.get_analysis() == (
            "Analysis for Test (TST):\n"
            "  Low volatility: This asset has been stable recently.\n"
        )

    def test_price_increase(self):
        self.asset.update_current_price(110.0)

        assert self.asset.get_analysis_lines() == [
            "Price change since tracking: 10.000000%",
            "The price has increased since tracking began.",
            "Low volatility: This asset has been stable recently.",
        ]

    def test_price_decrease(self):
        self.asset.update_current_price(90.0)

        lines = self.asset.get_analysis_lines()
        assert lines[0] == "Price change since tracking: -10.000000%"
        assert lines[1] == "The price has decreased since tracking began."

    def test_price_stable(self):
        self.asset.update_current_price(100.0)

        assert "The price remains stable since tracking began." in self.asset.get_analysis_lines()

    def test_medium_volatility(self):
        # returns +10% and -10%: population deviation of 10%
        self.asset.update_current_price(110.0)
        self.asset.update_current_price(99.0)

        assert self.asset.volatility == pytest.approx(10.0)
        assert "Medium volatility: This asset shows moderate price movements." in self.asset.get_analysis_lines()

    def test_high_volatility(self):
        self.asset.update_current_price(200.0)
        self.asset.update_current_price(100.0)

        assert self.asset.volatility == pytest.approx(75.0)
        assert "High volatility: This asset has significant price fluctuations." in self.asset.get_analysis_lines()

    def test_base_rules_shared(self):
        assert len(BASE_ANALYSIS_RULES) == 3
        assert GenericAsset.ANALYSIS_RULES == ()


class TestAssetReporting:
    """Test display fields and serialization."""

    def test_display_fields(self):
        asset = GenericAsset("Test", "TST", 10.0, quantity=3.0)
        fields = asset.display_fields()

        assert fields["asset_type"] == "generic"
        assert fields["current_value"] == 30.0
        assert fields["return_percentage"] == 0.0

    def test_to_dict(self):
        asset = GenericAsset("Test", "TST", 10.0, quantity=3.0)
        asset.update_current_price(12.0)

        data = asset.to_dict()

        assert data["symbol"] == "TST"
        assert len(data["price_history"]) == 2
        assert isinstance(data["price_history"][0]["timestamp"], str)
