"""
复利增长预测模块。

目的：
    提供一次性投入与定期追加投入的闭式复利预测，以及简单的情景分析。
    所有函数都是纯函数，不修改任何投资组合状态。

实现方案：
    1. 月利率 monthly_rate = annual_rate / 100 / 12
    2. 一次性投入：FV = current_value × (1 + monthly_rate)^months
    3. 期末追加：FV += c × ((1 + monthly_rate)^months - 1) / monthly_rate
    4. 定投（期初年金）：FV = P × ((1 + r)^n - 1) / r × (1 + r)
    5. 年收益率为0时不做除法，退化为本金 + 追加金额 × 月数

使用方法：
    from portfolio_advisor.core.analytics.growth import future_value, sip_future_value

    future_value(10000, annual_rate=12.0, months=36, contribution=500)
    sip_future_value(1000, annual_rate=10.0, months=60)
"""

from dataclasses import dataclass
from typing import Dict

from ...utils.exceptions import ValidationError

# 情景分析使用的市场涨跌幅
MARKET_SCENARIOS: Dict[str, float] = {
    "bull": 0.20,
    "bear": -0.30,
    "recession": -0.40,
}

# 定投情景使用的年化收益率（百分比）
SIP_SCENARIO_RATES: Dict[str, float] = {
    "conservative": 8.0,
    "moderate": 12.0,
    "aggressive": 15.0,
}


@dataclass
class ScenarioAnalysis:
    """情景分析结果。

    属性说明：
        current_value: 当前组合价值
        market: 各市场情景下的组合价值
        inflation_adjusted: 通胀调整后的实际价值，键为年数
        sip: 各定投情景下的预测价值（月定投金额为0时为空）
    """
    current_value: float
    market: Dict[str, float]
    inflation_adjusted: Dict[int, float]
    sip: Dict[str, float]


def _monthly_rate(annual_rate: float) -> float:
    return annual_rate / 100.0 / 12.0


def _validate_months(months: int) -> None:
    if months < 0:
        raise ValidationError(
            "预测月数不能为负数",
            field="months",
            value=months,
            expected=">= 0",
        )


def future_value(
    current_value: float,
    annual_rate: float,
    months: int,
    contribution: float = 0.0
) -> float:
    """
    计算一次性投入（可含每月追加）的未来价值。

    Args:
        current_value: 当前价值（本金）
        annual_rate: 年化收益率（百分比，如12表示12%）
        months: 预测月数
        contribution: 每月追加金额，期末投入

    Returns:
        float: 未来价值

    Raises:
        ValidationError: 月数为负
    """
    _validate_months(months)

    monthly_rate = _monthly_rate(annual_rate)
    if monthly_rate == 0:
        return current_value + contribution * months

    growth_factor = (1 + monthly_rate) ** months
    value = current_value * growth_factor

    if contribution != 0:
        value += contribution * (growth_factor - 1) / monthly_rate

    return value


def future_value_years(
    current_value: float,
    annual_rate: float,
    years: int,
    contribution: float = 0.0
) -> float:
    """按年数计算未来价值，等价于 future_value(months=years*12)。"""
    return future_value(current_value, annual_rate, years * 12, contribution)


def sip_future_value(monthly_amount: float, annual_rate: float, months: int) -> float:
    """
    计算定投（每月期初投入）的未来价值。

    Args:
        monthly_amount: 每月投入金额
        annual_rate: 年化收益率（百分比）
        months: 投入月数

    Returns:
        float: 未来价值，年化收益率为0时等于 monthly_amount × months

    Raises:
        ValidationError: 月数为负
    """
    _validate_months(months)

    monthly_rate = _monthly_rate(annual_rate)
    if monthly_rate == 0:
        return monthly_amount * months

    return monthly_amount * ((1 + monthly_rate) ** months - 1) / monthly_rate * (1 + monthly_rate)


def inflation_adjusted_value(value: float, inflation_rate: float, years: int) -> float:
    """
    计算若干年后按通胀折算的实际价值。

    Args:
        value: 名义价值
        inflation_rate: 年通胀率（百分比）
        years: 年数

    Returns:
        float: value / (1 + inflation_rate/100)^years
    """
    return value / (1 + inflation_rate / 100.0) ** years


def simulate_market_scenarios(current_value: float) -> Dict[str, float]:
    """计算牛市、熊市和衰退情景下的组合价值。"""
    return {name: current_value * (1 + change) for name, change in MARKET_SCENARIOS.items()}


def project_sip_scenarios(monthly_amount: float, months: int = 120) -> Dict[str, float]:
    """按保守、适中、激进三档年化收益率预测定投价值。"""
    return {
        name: sip_future_value(monthly_amount, rate, months)
        for name, rate in SIP_SCENARIO_RATES.items()
    }


def analyze_scenarios(
    current_value: float,
    monthly_amount: float = 0.0,
    inflation_rate: float = 8.0
) -> ScenarioAnalysis:
    """
    汇总市场情景、通胀影响和定投情景。

    Args:
        current_value: 当前组合价值
        monthly_amount: 每月定投金额
        inflation_rate: 通胀情景的年通胀率（百分比），默认8%

    Returns:
        ScenarioAnalysis: 情景分析结果
    """
    return ScenarioAnalysis(
        current_value=current_value,
        market=simulate_market_scenarios(current_value),
        inflation_adjusted={
            years: inflation_adjusted_value(current_value, inflation_rate, years)
            for years in (1, 5)
        },
        sip=project_sip_scenarios(monthly_amount) if monthly_amount > 0 else {},
    )


__all__ = [
    "MARKET_SCENARIOS",
    "SIP_SCENARIO_RATES",
    "ScenarioAnalysis",
    "future_value",
    "future_value_years",
    "sip_future_value",
    "inflation_adjusted_value",
    "simulate_market_scenarios",
    "project_sip_scenarios",
    "analyze_scenarios",
]
