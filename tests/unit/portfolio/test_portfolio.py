"""
Unit tests for the Portfolio class.
"""

import threading
from datetime import datetime, timedelta

import pandas as pd
import pytest

from portfolio_advisor.core.assets.base import GenericAsset
from portfolio_advisor.core.assets.sip import SIP
from portfolio_advisor.core.portfolio.base import Portfolio, ValueSnapshot
from portfolio_advisor.core.portfolio.rebalancing import RebalancingInstruction, TradeDirection
from portfolio_advisor.core.portfolio.risk import RiskProfile
from portfolio_advisor.core.portfolio.sip import SIPPlan
from portfolio_advisor.utils.exceptions import PortfolioError, ValidationError


def _holding(symbol, value):
    """An asset priced at 1.0 so quantity equals value."""
    return GenericAsset(symbol, symbol, 1.0, value)


class TestPortfolioRegistry:
    """Test asset registry operations."""

    def setup_method(self):
        self.portfolio = Portfolio(initial_investment=10000)

    def test_initialization(self):
        assert self.portfolio.initial_investment == 10000.0
        assert self.portfolio.name == "Default Portfolio"
        assert len(self.portfolio) == 0
        assert self.portfolio.last_rebalance_date is None
        assert self.portfolio.risk_profile.risk_score == 50.0
        assert self.portfolio.historical_values[0].total_value == 10000.0

    def test_negative_initial_investment(self):
        with pytest.raises(ValidationError):
            Portfolio(initial_investment=-1)

    def test_add_and_get_asset(self):
        asset = _holding("A", 100)

        assert self.portfolio.add_asset(asset) == "A"
        assert "A" in self.portfolio
        assert self.portfolio.get_asset("A") is asset
        assert self.portfolio.symbols == ["A"]

    def test_add_asset_with_custom_key(self):
        fund = SIP("Vanguard Total Stock Market ETF", "VTI", 200.0, 30.0)
        self.portfolio.add_asset(fund, key="SIP")

        assert self.portfolio.get_asset("SIP") is fund
        assert self.portfolio.get_asset("VTI") is None

    def test_duplicate_symbol(self):
        self.portfolio.add_asset(_holding("A", 100))

        with pytest.raises(PortfolioError):
            self.portfolio.add_asset(_holding("A", 200))

        assert self.portfolio.get_asset("A").quantity == 100.0

    def test_remove_asset(self):
        self.portfolio.add_asset(_holding("A", 100))

        assert self.portfolio.remove_asset("A") is True
        assert self.portfolio.remove_asset("A") is False
        assert self.portfolio.get_asset("A") is None

    def test_assets_is_a_copy(self):
        self.portfolio.add_asset(_holding("A", 100))
        assets = self.portfolio.assets
        assets.clear()

        assert len(self.portfolio) == 1


class TestPortfolioPrices:
    """Test price updates and trading."""

    def setup_method(self):
        self.portfolio = Portfolio(initial_investment=1000)
        self.portfolio.add_asset(GenericAsset("Asset A", "A", 10.0, 50.0))
        self.portfolio.add_asset(GenericAsset("Asset B", "B", 20.0, 25.0))

    def test_update_prices(self):
        timestamp = datetime(2024, 1, 1)

        updated = self.portfolio.update_prices({"A": 11.0, "B": 18.0}, timestamp=timestamp)

        assert updated == ["A", "B"]
        assert self.portfolio.get_asset("A").current_price == 11.0
        assert self.portfolio.get_asset("B").price_history[-1].timestamp == timestamp
        assert self.portfolio.historical_values[-1] == ValueSnapshot(timestamp, 1000.0)

    def test_unknown_symbols_are_ignored(self):
        updated = self.portfolio.update_prices({"A": 12.0, "ZZZ": 5.0})

        assert updated == ["A"]
        assert "ZZZ" not in self.portfolio

    def test_invalid_snapshot_updates_nothing(self):
        with pytest.raises(ValidationError):
            self.portfolio.update_prices({"A": 12.0, "B": -5.0})

        assert self.portfolio.get_asset("A").current_price == 10.0
        assert len(self.portfolio.get_asset("A").price_history) == 1
        assert len(self.portfolio.historical_values) == 1

    def test_price_lookup_by_asset_symbol(self):
        portfolio = Portfolio(initial_investment=6000)
        portfolio.add_asset(SIP("Vanguard Total Stock Market ETF", "VTI", 200.0, 30.0), key="SIP")

        assert portfolio.update_prices({"VTI": 210.0}) == ["SIP"]
        assert portfolio.get_asset("SIP").current_price == 210.0

    def test_buy_and_sell(self):
        assert self.portfolio.buy("A", 100.0) == pytest.approx(10.0)
        assert self.portfolio.get_asset("A").quantity == pytest.approx(60.0)

        assert self.portfolio.sell("B", 50) == pytest.approx(250.0)
        assert self.portfolio.get_asset("B").quantity == pytest.approx(12.5)

    def test_trading_unknown_symbol(self):
        assert self.portfolio.buy("ZZZ", 100.0) == 0.0
        assert self.portfolio.sell("ZZZ", 50) == 0.0

    def test_concurrent_buys(self):
        def buy_many():
            for _ in range(100):
                self.portfolio.buy("A", 10.0)

        threads = [threading.Thread(target=buy_many) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert self.portfolio.get_asset("A").quantity == pytest.approx(50.0 + 8 * 100 * 1.0)


class TestPortfolioMetrics:
    """Test portfolio metrics."""

    def setup_method(self):
        self.portfolio = Portfolio(initial_investment=1000)
        self.portfolio.add_asset(_holding("A", 600))
        self.portfolio.add_asset(_holding("B", 400))

    def test_total_value_and_return(self):
        assert self.portfolio.get_total_value() == pytest.approx(1000.0)
        assert self.portfolio.get_total_return_percentage() == pytest.approx(0.0)

        self.portfolio.update_prices({"A": 1.5})

        assert self.portfolio.get_total_value() == pytest.approx(1300.0)
        assert self.portfolio.get_total_return_percentage() == pytest.approx(30.0)

    def test_composition(self):
        composition = self.portfolio.get_composition()

        assert composition == {"A": pytest.approx(60.0), "B": pytest.approx(40.0)}
        assert sum(composition.values()) == pytest.approx(100.0)

    def test_empty_composition(self):
        assert Portfolio(initial_investment=0).get_composition() == {}

    def test_zero_initial_investment_return(self):
        portfolio = Portfolio(initial_investment=0)
        portfolio.add_asset(_holding("A", 100))

        assert portfolio.get_total_return_percentage() == 0.0

    def test_volatility_metrics(self):
        self.portfolio.get_asset("A").volatility = 4.0
        self.portfolio.get_asset("B").volatility = 20.0

        assert self.portfolio.get_portfolio_volatility() == pytest.approx(10.4)
        assert self.portfolio.get_risk_adjusted_return() == pytest.approx(-0.5 / 10.4)
        assert self.portfolio.get_risk_adjusted_return(risk_free_rate=0.0) == pytest.approx(0.0)
        assert self.portfolio.get_too_volatile_assets() == ["B"]

    def test_value_history(self):
        start = datetime(2024, 1, 1)
        self.portfolio.update_prices({"A": 1.1}, timestamp=start)
        self.portfolio.update_prices({"A": 1.2}, timestamp=start + timedelta(days=1))

        history = self.portfolio.get_value_history()

        assert isinstance(history, pd.DataFrame)
        assert list(history.columns) == ["total_value"]
        assert len(history) == 3
        assert history["total_value"].iloc[-1] == pytest.approx(1120.0)
        assert history.index.name == "timestamp"

    def test_metrics_and_to_dict(self):
        metrics = self.portfolio.get_metrics()
        data = self.portfolio.to_dict()

        assert metrics["gain_loss"] == pytest.approx(0.0)
        assert set(metrics["composition"]) == {"A", "B"}
        assert data["name"] == "Default Portfolio"
        assert set(data["assets"]) == {"A", "B"}
        assert data["risk_profile"]["risk_profile"] == "Moderate"
        assert data["metrics"]["last_rebalance_date"] is None


class TestPortfolioRebalancing:
    """Test rebalancing through the portfolio."""

    def setup_method(self):
        self.portfolio = Portfolio(initial_investment=10000, risk_profile=RiskProfile(risk_score=25))
        for symbol, value in [
            ("SIP", 5000), ("USD", 2000), ("XAU/USD", 1000), ("EUR/USD", 500), ("BTC", 1500)
        ]:
            self.portfolio.add_asset(_holding(symbol, value))

    def test_recommend_rebalancing(self):
        instructions = self.portfolio.recommend_rebalancing()

        assert [(i.symbol, i.direction) for i in instructions] == [
            ("SIP", TradeDirection.BUY),
            ("BTC", TradeDirection.SELL),
        ]
        assert instructions[0].amount == pytest.approx(1000.0)
        assert instructions[1].sell_percentage == pytest.approx(10.0)

    def test_apply_rebalancing(self):
        applied = self.portfolio.apply_rebalancing()

        assert len(applied) == 2
        assert self.portfolio.get_asset("SIP").current_value == pytest.approx(6000.0)
        # 10% of the BTC holding
        assert self.portfolio.get_asset("BTC").current_value == pytest.approx(1350.0)
        assert self.portfolio.last_rebalance_date is not None

    def test_apply_rebalancing_when_balanced(self):
        portfolio = Portfolio(initial_investment=100, risk_profile=RiskProfile(risk_score=25))
        for symbol, value in [("SIP", 60), ("USD", 20), ("XAU/USD", 10), ("EUR/USD", 5), ("BTC", 5)]:
            portfolio.add_asset(_holding(symbol, value))

        assert portfolio.apply_rebalancing() == []
        assert portfolio.last_rebalance_date is None

    def test_zero_value_portfolio_is_not_rebalanced(self):
        portfolio = Portfolio(initial_investment=0, risk_profile=RiskProfile(risk_score=25))
        portfolio.add_asset(_holding("SIP", 0.0))

        assert portfolio.recommend_rebalancing() == []
        assert portfolio.apply_rebalancing() == []
        assert portfolio.last_rebalance_date is None

    def test_unknown_symbols_are_skipped(self):
        instructions = [
            RebalancingInstruction("ZZZ", TradeDirection.BUY, 100.0, 10.0),
            RebalancingInstruction("SIP", TradeDirection.BUY, 100.0, 10.0),
        ]

        applied = self.portfolio.apply_rebalancing(instructions)

        assert [i.symbol for i in applied] == ["SIP"]
        assert self.portfolio.get_asset("SIP").current_value == pytest.approx(5100.0)


class TestPortfolioSIP:
    """Test SIP execution through the portfolio."""

    def setup_method(self):
        self.start = datetime(2024, 1, 1)
        self.plan = SIPPlan(
            monthly_amount=1000,
            allocation={"A": 60, "B": 30, "ZZZ": 10},
            last_investment_date=self.start,
        )
        self.portfolio = Portfolio(initial_investment=1000, sip_plan=self.plan)
        self.portfolio.add_asset(_holding("A", 600))
        self.portfolio.add_asset(_holding("B", 400))

    def test_execute_when_due(self):
        executed = self.portfolio.execute_sip_investment(now=self.start + timedelta(days=30))

        assert executed == {"A": pytest.approx(600.0), "B": pytest.approx(300.0)}
        assert self.portfolio.get_asset("A").current_value == pytest.approx(1200.0)
        assert self.portfolio.get_total_value() == pytest.approx(1900.0)

    def test_not_due(self):
        executed = self.portfolio.execute_sip_investment(now=self.start + timedelta(days=5))

        assert executed == {}
        assert self.portfolio.get_total_value() == pytest.approx(1000.0)

    def test_auto_invest_disabled(self):
        self.plan.toggle_auto_invest()

        assert self.portfolio.execute_sip_investment(now=self.start + timedelta(days=30)) == {}
        assert self.portfolio.execute_sip_investment(force=True)["A"] == pytest.approx(600.0)
