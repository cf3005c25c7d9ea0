"""
法币资产模块。

法币（如美元现金）在基础资产之上记录所属国家的利率和通胀率，
用于计算实际收益和购买力变化。
"""

from typing import Any, Dict

from ...utils.formatting import format_decimal
from .base import Asset, AnalysisRule, RuleSet

# 实际收益低于该值视为勉强保值（百分比）
MIN_HEALTHY_REAL_RETURN = 1.0


class FiatCurrency(Asset):
    """法币资产。

    属性说明：
        country: 国家
        interest_rate: 该国当前利率（百分比）
        inflation_rate: 该国当前通胀率（百分比）
    """

    ASSET_TYPE = "fiat"

    ANALYSIS_RULES = (
        RuleSet(rules=(
            AnalysisRule(
                condition=lambda a: True,
                message=lambda a: (
                    f"{a.name} has an interest rate of {format_decimal(a.interest_rate)}% "
                    f"and inflation of {format_decimal(a.inflation_rate)}%."
                ),
            ),
        )),
        RuleSet(first_match=True, rules=(
            AnalysisRule(
                condition=lambda a: a.get_real_return() < 0,
                message="This currency has a negative real return, losing purchasing power over time.",
            ),
            AnalysisRule(
                condition=lambda a: a.get_real_return() < MIN_HEALTHY_REAL_RETURN,
                message="This currency is barely maintaining purchasing power.",
            ),
            AnalysisRule(
                condition=lambda a: True,
                message="This currency has a positive real return, which is favorable.",
            ),
        )),
        RuleSet(rules=(
            AnalysisRule(
                condition=lambda a: a.get_real_return() < 0,
                message="Consider alternatives for long-term holdings.",
            ),
        )),
    )

    def __init__(
        self,
        name: str,
        symbol: str,
        current_price: float,
        country: str,
        interest_rate: float = 0.0,
        inflation_rate: float = 0.0,
        quantity: float = 0.0
    ):
        super().__init__(name, symbol, current_price, quantity)
        self.country = country
        self.interest_rate = interest_rate
        self.inflation_rate = inflation_rate

    def get_real_return(self) -> float:
        """实际收益率 = 利率 - 通胀率（百分比）。"""
        return self.interest_rate - self.inflation_rate

    def calculate_purchasing_power(self, years: int) -> float:
        """
        计算若干年后的购买力。

        Args:
            years: 年数

        Returns:
            float: 当前市值 × (1 + 实际收益率)^years
        """
        real_rate = self.get_real_return() / 100.0
        return self.current_value * (1 + real_rate) ** years

    def update_economic_indicators(self, interest_rate: float, inflation_rate: float) -> None:
        """用外部提供的经济指标刷新利率和通胀率。"""
        self.interest_rate = interest_rate
        self.inflation_rate = inflation_rate

    def _variant_fields(self) -> Dict[str, Any]:
        return {
            "country": self.country,
            "interest_rate": self.interest_rate,
            "inflation_rate": self.inflation_rate,
            "real_return": self.get_real_return(),
            "purchasing_power_5y": self.calculate_purchasing_power(5),
        }
