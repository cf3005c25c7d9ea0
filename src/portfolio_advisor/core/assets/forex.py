"""
外汇资产模块。

外汇货币对在基础资产之上增加基础货币、报价货币、点差和趋势。
趋势在每次价格更新后根据最近五次观测的均值重新判断。
"""

from enum import Enum
from typing import Any, Dict

from ...utils.logger import get_logger
from .base import Asset, AnalysisRule, RuleSet

logger = get_logger(__name__)

# 判断趋势所需的观测数
TREND_WINDOW = 5
# 当前价格相对均值超过该比例视为上涨趋势，低于其倒数侧视为下跌趋势
TREND_BAND = 0.02
# 外汇波动率警戒线（百分比）
FOREX_VOLATILITY_CAUTION = 10.0


class Trend(str, Enum):
    """货币对趋势。"""

    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"


def _pair_prefix(asset: "Forex") -> str:
    return f"This forex pair ({asset.base_currency}/{asset.quote_currency}) "


class Forex(Asset):
    """外汇货币对资产。

    属性说明：
        base_currency: 基础货币（如 'EUR'）
        quote_currency: 报价货币（如 'USD'）
        spread_percentage: 买卖点差（百分比），默认0.1
        trend: 当前趋势，初始为 Neutral
    """

    ASSET_TYPE = "forex"

    ANALYSIS_RULES = (
        RuleSet(first_match=True, rules=(
            AnalysisRule(
                condition=lambda a: a.trend == Trend.BULLISH,
                message=lambda a: _pair_prefix(a) + (
                    "is in an uptrend. Consider taking profit or trailing stops."
                ),
            ),
            AnalysisRule(
                condition=lambda a: a.trend == Trend.BEARISH,
                message=lambda a: _pair_prefix(a) + (
                    "is in a downtrend. Consider hedging or reducing exposure."
                ),
            ),
            AnalysisRule(
                condition=lambda a: True,
                message=lambda a: _pair_prefix(a) + (
                    "is in a neutral trend. Monitor for breakout opportunities."
                ),
            ),
        )),
        RuleSet(rules=(
            AnalysisRule(
                condition=lambda a: a.volatility > FOREX_VOLATILITY_CAUTION,
                message="High volatility in this pair suggests caution with position sizing.",
            ),
        )),
    )

    def __init__(
        self,
        name: str,
        symbol: str,
        current_price: float,
        base_currency: str,
        quote_currency: str,
        quantity: float = 0.0,
        spread_percentage: float = 0.1
    ):
        super().__init__(name, symbol, current_price, quantity)
        self.base_currency = base_currency
        self.quote_currency = quote_currency
        self.spread_percentage = spread_percentage
        self.trend = Trend.NEUTRAL

    def update_trend(self) -> Trend:
        """
        根据最近五次观测更新趋势。

        观测不足五次时为 Neutral；否则当前价格高于均值的 1.02 倍为 Bullish，
        低于均值的 0.98 倍为 Bearish，其余为 Neutral。

        Returns:
            Trend: 更新后的趋势
        """
        history = self.price_history
        if len(history) < TREND_WINDOW:
            self.trend = Trend.NEUTRAL
            return self.trend

        average = sum(point.price for point in history[-TREND_WINDOW:]) / TREND_WINDOW

        if self.current_price > average * (1 + TREND_BAND):
            self.trend = Trend.BULLISH
        elif self.current_price < average * (1 - TREND_BAND):
            self.trend = Trend.BEARISH
        else:
            self.trend = Trend.NEUTRAL

        logger.debug(f"{self.symbol} trend updated to {self.trend.value}")
        return self.trend

    def _on_price_update(self) -> None:
        self.update_trend()

    def _variant_fields(self) -> Dict[str, Any]:
        return {
            "pair": f"{self.base_currency}/{self.quote_currency}",
            "spread_percentage": self.spread_percentage,
            "trend": self.trend.value,
        }
