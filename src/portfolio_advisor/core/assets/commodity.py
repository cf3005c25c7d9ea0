"""
商品（黄金）资产模块。
"""

from typing import Any, Dict

from .base import Asset, AnalysisRule, RuleSet

# 黄金被视为稳定的波动率上限（百分比）
STABLE_GOLD_VOLATILITY = 10.0


class Commodity(Asset):
    """商品资产，目前用于黄金。

    属性说明：
        grade: 成色（如 '24K'、'22K'）
        is_physical: True 表示实物持有，False 表示纸黄金（ETF 等）
    """

    ASSET_TYPE = "commodity"

    ANALYSIS_RULES = (
        RuleSet(rules=(
            AnalysisRule(
                condition=lambda a: True,
                message=lambda a: (
                    f"This {a.grade} gold is held as "
                    f"{'physical metal' if a.is_physical else 'a paper investment'}."
                ),
            ),
        )),
        RuleSet(first_match=True, rules=(
            AnalysisRule(
                condition=lambda a: a.volatility < STABLE_GOLD_VOLATILITY,
                message="Gold is currently showing relative stability, providing a good hedge.",
            ),
            AnalysisRule(
                condition=lambda a: True,
                message="Gold is showing higher than usual volatility. Monitor global macro events.",
            ),
        )),
    )

    def __init__(
        self,
        name: str,
        symbol: str,
        current_price: float,
        grade: str = "24K",
        is_physical: bool = False,
        quantity: float = 0.0
    ):
        super().__init__(name, symbol, current_price, quantity)
        self.grade = grade
        self.is_physical = is_physical

    def calculate_inflation_hedge(self, inflation_rate: float, years: int) -> float:
        """
        估算持有该商品相对现金在通胀下保住的价值。

        Args:
            inflation_rate: 年通胀率（百分比）
            years: 年数

        Returns:
            float: 当前市值 - 当前市值 × (1 - 通胀率)^years
        """
        annual_loss = inflation_rate / 100.0
        value_without_hedge = self.current_value * (1 - annual_loss) ** years
        return self.current_value - value_without_hedge

    def _variant_fields(self) -> Dict[str, Any]:
        return {
            "grade": self.grade,
            "is_physical": self.is_physical,
            "inflation_hedge_5y": self.calculate_inflation_hedge(5.0, 5),
        }
