"""
加密货币资产模块。

加密货币在基础资产之上增加市值、网络状态和质押信息，
并提供质押收益估算和按价格变化重估市值的功能。
"""

from typing import Any, Dict

from ...utils.exceptions import ValidationError
from ...utils.formatting import format_currency, format_decimal
from ...utils.logger import get_logger
from .base import Asset, AnalysisRule, RuleSet

logger = get_logger(__name__)

# 极端波动阈值（百分比）
EXTREME_VOLATILITY = 20.0


class Cryptocurrency(Asset):
    """加密货币资产。

    属性说明：
        market_cap: 市值
        network_status: 网络状态，默认 'Healthy'
        is_staking: 是否参与质押
        staking_yield: 质押年化收益率（百分比）
    """

    ASSET_TYPE = "cryptocurrency"

    ANALYSIS_RULES = (
        RuleSet(rules=(
            AnalysisRule(
                condition=lambda a: True,
                message=lambda a: f"{a.name} has a market cap of {format_currency(a.market_cap)}.",
            ),
            AnalysisRule(
                condition=lambda a: a.volatility > EXTREME_VOLATILITY,
                message="This cryptocurrency shows extreme volatility. Consider reducing exposure.",
            ),
        )),
        RuleSet(first_match=True, rules=(
            AnalysisRule(
                condition=lambda a: a.is_staking,
                message=lambda a: (
                    f"You are earning {format_decimal(a.staking_yield)}% APY through staking, "
                    "which helps offset volatility."
                ),
            ),
            AnalysisRule(
                condition=lambda a: True,
                message="Consider staking options to earn passive income from your holdings.",
            ),
        )),
    )

    def __init__(
        self,
        name: str,
        symbol: str,
        current_price: float,
        market_cap: float,
        quantity: float = 0.0,
        is_staking: bool = False,
        staking_yield: float = 0.0
    ):
        super().__init__(name, symbol, current_price, quantity)
        self.market_cap = market_cap
        self.network_status = "Healthy"
        self.is_staking = is_staking
        self.staking_yield = staking_yield
        self._base_market_cap = market_cap

    def update_market_cap(self) -> float:
        """
        按价格变化重估市值。

        市值 = 创建时市值 × 当前价格 / 第一次观测价格。总供应量未知，这是简化估算。

        Returns:
            float: 更新后的市值
        """
        first_price = self.price_history[0].price
        self.market_cap = self._base_market_cap * (self.current_price / first_price)
        return self.market_cap

    def enable_staking(self, staking_yield: float) -> None:
        """开启质押。"""
        if staking_yield < 0:
            raise ValidationError(
                "质押收益率不能为负数",
                field="staking_yield",
                value=staking_yield,
                expected=">= 0",
            )
        self.is_staking = True
        self.staking_yield = staking_yield
        logger.info(f"Staking enabled for {self.symbol} at {staking_yield:.2f}% APY")

    def disable_staking(self) -> None:
        """关闭质押，收益率清零。"""
        self.is_staking = False
        self.staking_yield = 0.0
        logger.info(f"Staking disabled for {self.symbol}")

    def calculate_staking_rewards(self, days: int) -> float:
        """
        估算若干天的质押收益。

        Args:
            days: 天数

        Returns:
            float: 当前市值 × ((1 + 年化收益率/365/100)^days - 1)，未质押时为0
        """
        if not self.is_staking or self.staking_yield <= 0:
            return 0.0

        daily_rate = self.staking_yield / 365.0
        return self.current_value * ((1 + daily_rate / 100.0) ** days - 1)

    def _variant_fields(self) -> Dict[str, Any]:
        return {
            "market_cap": self.market_cap,
            "network_status": self.network_status,
            "is_staking": self.is_staking,
            "staking_yield": self.staking_yield,
            "staking_reward_30d": self.calculate_staking_rewards(30),
        }
