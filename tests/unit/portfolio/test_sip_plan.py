"""
Unit tests for SIPPlan.
"""

from datetime import datetime, timedelta

import pytest

from portfolio_advisor.core.portfolio.sip import SIPPlan
from portfolio_advisor.utils.exceptions import ValidationError


class TestSIPPlanSetup:
    """Test SIP plan configuration."""

    def test_defaults(self):
        plan = SIPPlan()

        assert plan.monthly_amount == 0.0
        assert plan.allocation == {}
        assert plan.auto_invest is True
        assert plan.investment_interval_days == 30

    def test_negative_monthly_amount(self):
        with pytest.raises(ValidationError):
            SIPPlan(monthly_amount=-100)

        plan = SIPPlan(monthly_amount=500)
        with pytest.raises(ValidationError):
            plan.set_monthly_amount(-1)
        assert plan.monthly_amount == 500.0

    def test_allocation_is_normalized(self):
        plan = SIPPlan()
        allocation = plan.set_allocation({"A": 30, "B": 20})

        assert allocation == {"A": pytest.approx(60.0), "B": pytest.approx(40.0)}
        assert sum(plan.allocation.values()) == pytest.approx(100.0, abs=0.01)

    def test_allocation_within_tolerance_is_kept(self):
        plan = SIPPlan(allocation={"A": 60.005, "B": 40.0})

        assert plan.allocation == {"A": 60.005, "B": 40.0}

    def test_negative_allocation(self):
        with pytest.raises(ValidationError):
            SIPPlan(allocation={"A": -10, "B": 110})

    def test_zero_allocation(self):
        with pytest.raises(ValidationError):
            SIPPlan(allocation={"A": 0, "B": 0})


class TestSIPPlanExecution:
    """Test SIP execution and projections."""

    def setup_method(self):
        self.start = datetime(2024, 1, 1)
        self.plan = SIPPlan(
            monthly_amount=1000,
            allocation={"SIP": 60, "BTC": 40},
            last_investment_date=self.start,
        )

    def test_is_time_for_investment(self):
        assert not self.plan.is_time_for_investment(self.start + timedelta(days=29))
        assert self.plan.is_time_for_investment(self.start + timedelta(days=30))

    def test_execute_before_interval(self):
        assert self.plan.execute_investment(now=self.start + timedelta(days=10)) == {}
        assert self.plan.last_investment_date == self.start

    def test_execute_after_interval(self):
        now = self.start + timedelta(days=31)

        investments = self.plan.execute_investment(now=now)

        assert investments == {"SIP": pytest.approx(600.0), "BTC": pytest.approx(400.0)}
        assert self.plan.last_investment_date == now

    def test_forced_execution(self):
        now = self.start + timedelta(days=1)

        investments = self.plan.execute_investment(force=True, now=now)

        assert sum(investments.values()) == pytest.approx(1000.0)
        assert self.plan.last_investment_date == now

    def test_simulate_investments(self):
        simulated = self.plan.simulate_investments(3)

        assert simulated["SIP"] == [pytest.approx(600.0)] * 3
        assert simulated["BTC"] == [pytest.approx(400.0)] * 3

    def test_projected_growth(self):
        assert self.plan.calculate_projected_growth(12, 0.0) == pytest.approx(12000.0)

        monthly_rate = 0.10 / 12
        expected = 1000 * ((1 + monthly_rate) ** 12 - 1) / monthly_rate * (1 + monthly_rate)
        assert self.plan.calculate_projected_growth(12, 10.0) == pytest.approx(expected)

    def test_toggle_auto_invest(self):
        assert self.plan.toggle_auto_invest() is False
        assert self.plan.toggle_auto_invest() is True

    def test_to_dict(self):
        data = self.plan.to_dict()

        assert data["monthly_amount"] == 1000.0
        assert data["allocation"] == {"SIP": 60.0, "BTC": 40.0}
        assert data["last_investment_date"] == "2024-01-01T00:00:00"
