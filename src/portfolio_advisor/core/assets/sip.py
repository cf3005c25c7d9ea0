"""
定投基金资产模块。

SIP（Systematic Investment Plan）资产代表通过定期投入购买的指数基金或共同基金，
在基础资产之上增加预期年化收益率、基金类型和费率，并提供复利增长预测。
"""

from typing import Any, Dict

from ...utils.formatting import format_decimal
from ..analytics.growth import future_value_years
from .base import Asset, AnalysisRule, RuleSet

# 费率偏高的阈值（百分比）
HIGH_EXPENSE_RATIO = 1.0
# 预期收益偏乐观的阈值（百分比）
OPTIMISTIC_RETURN = 15.0


class SIP(Asset):
    """定投基金资产。

    属性说明：
        expected_annual_return: 预期年化收益率（百分比），默认12
        fund_type: 基金类型（Index、Equity、Debt 等），默认 'Index'
        expense_ratio: 年费率（百分比），默认0.5
    """

    ASSET_TYPE = "sip"

    ANALYSIS_RULES = (
        RuleSet(rules=(
            AnalysisRule(
                condition=lambda a: True,
                message=lambda a: (
                    f"This is a {a.fund_type} fund with an expense ratio of {format_decimal(a.expense_ratio)}%."
                ),
            ),
        )),
        RuleSet(first_match=True, rules=(
            AnalysisRule(
                condition=lambda a: a.expense_ratio > HIGH_EXPENSE_RATIO,
                message="The expense ratio is relatively high. Consider lower-cost alternatives.",
            ),
            AnalysisRule(
                condition=lambda a: True,
                message="The expense ratio is reasonable for this type of fund.",
            ),
        )),
        RuleSet(rules=(
            AnalysisRule(
                condition=lambda a: a.expected_annual_return > OPTIMISTIC_RETURN,
                message=(
                    "The expected return seems optimistic. "
                    "Be prepared for potential underperformance."
                ),
            ),
        )),
    )

    def __init__(
        self,
        name: str,
        symbol: str,
        current_price: float,
        quantity: float = 0.0,
        expected_annual_return: float = 12.0,
        fund_type: str = "Index",
        expense_ratio: float = 0.5
    ):
        super().__init__(name, symbol, current_price, quantity)
        self.expected_annual_return = expected_annual_return
        self.fund_type = fund_type
        self.expense_ratio = expense_ratio

    def project_growth(self, years: int, monthly_contribution: float = 0.0) -> float:
        """
        按预期年化收益率预测未来价值。

        Args:
            years: 预测年数
            monthly_contribution: 每月追加金额

        Returns:
            float: 预测价值
        """
        return future_value_years(
            self.current_value,
            self.expected_annual_return,
            years,
            contribution=monthly_contribution,
        )

    def _variant_fields(self) -> Dict[str, Any]:
        return {
            "fund_type": self.fund_type,
            "expected_annual_return": self.expected_annual_return,
            "expense_ratio": self.expense_ratio,
            "projected_value": {years: self.project_growth(years) for years in (3, 5, 10)},
        }
