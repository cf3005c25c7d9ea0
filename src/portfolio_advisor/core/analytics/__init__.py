"""
Portfolio Advisor 分析模块。

提供波动率与收益计算，以及复利增长预测。两者都是纯函数，不修改任何状态。
"""

from .volatility import calculate_returns, calculate_volatility, percent_change
from .growth import (
    ScenarioAnalysis,
    future_value,
    future_value_years,
    sip_future_value,
    inflation_adjusted_value,
    simulate_market_scenarios,
    project_sip_scenarios,
    analyze_scenarios
)

__all__ = [
    'calculate_returns',
    'calculate_volatility',
    'percent_change',
    'ScenarioAnalysis',
    'future_value',
    'future_value_years',
    'sip_future_value',
    'inflation_adjusted_value',
    'simulate_market_scenarios',
    'project_sip_scenarios',
    'analyze_scenarios'
]
