"""
Unit tests for the volatility module.
"""

import numpy as np
import pytest

from portfolio_advisor.core.analytics.volatility import (
    calculate_returns,
    calculate_volatility,
    percent_change,
)


class TestCalculateReturns:
    """Test period-over-period returns."""

    def test_simple_returns(self):
        """Test returns of a short price series."""
        returns = calculate_returns([40000, 44000, 41800])

        assert returns == pytest.approx([0.10, -0.05])

    def test_fewer_than_two_prices(self):
        """Test that one or zero prices give no returns."""
        assert calculate_returns([100.0]).size == 0
        assert calculate_returns([]).size == 0

    def test_zero_previous_price(self):
        """Test that a zero previous price yields a zero return."""
        returns = calculate_returns([0.0, 10.0, 20.0])

        assert returns[0] == 0.0
        assert returns[1] == pytest.approx(1.0)
        assert np.all(np.isfinite(returns))


class TestCalculateVolatility:
    """Test historical volatility."""

    def test_bitcoin_scenario(self):
        """Test the population standard deviation of returns, in percent."""
        assert calculate_volatility([40000, 44000, 41800]) == pytest.approx(7.5)

    def test_identical_prices_have_zero_volatility(self):
        """Test that a flat price history has exactly zero volatility."""
        assert calculate_volatility([100.0, 100.0, 100.0, 100.0]) == 0.0

    def test_insufficient_history(self):
        """Test that fewer than two observations give zero volatility."""
        assert calculate_volatility([]) == 0.0
        assert calculate_volatility([42.0]) == 0.0

    def test_population_not_sample_deviation(self):
        """Test that the deviation divides by n rather than n - 1."""
        prices = [100.0, 110.0, 99.0, 120.0]
        returns = np.diff(prices) / np.array(prices[:-1])

        assert calculate_volatility(prices) == pytest.approx(np.std(returns, ddof=0) * 100)
        assert calculate_volatility(prices) != pytest.approx(np.std(returns, ddof=1) * 100)

    def test_returns_python_float(self):
        """Test the result type."""
        assert isinstance(calculate_volatility([1.0, 2.0, 3.0]), float)


class TestPercentChange:
    """Test percent_change helper."""

    def test_percent_change(self):
        assert percent_change(100.0, 110.0) == pytest.approx(10.0)
        assert percent_change(100.0, 90.0) == pytest.approx(-10.0)

    def test_zero_old_value(self):
        assert percent_change(0.0, 50.0) == 0.0
