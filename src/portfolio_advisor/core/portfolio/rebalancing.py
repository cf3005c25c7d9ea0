"""
投资组合再平衡模块。

目的：
    比较当前配置与理想配置，生成带规模的买入/卖出指令。

实现方案：
    1. 遍历当前配置和理想配置中出现的所有资产代码，缺失的一方按0处理
    2. 计算偏差 diff = 理想比例 - 当前比例（百分点）
    3. 只有 |diff| >= 阈值（默认5个百分点）时才生成指令，避免频繁调仓
    4. diff > 0 生成 BUY，金额 = 组合总市值 × diff / 100
    5. diff < 0 生成 SELL，值为 |diff|，含义是卖出该资产自身持仓的百分比，
       而不是组合总市值的百分比（沿用既有调仓规则）

使用方法：
    rebalancer = Rebalancer(threshold=5.0)
    instructions = rebalancer.recommend(composition, ideal_allocation, total_value)
    portfolio.apply_rebalancing(instructions)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping

from ...utils.logger import get_logger
from ...utils.validation import Validator

logger = get_logger(__name__)

DEFAULT_REBALANCE_THRESHOLD = 5.0


class TradeDirection(str, Enum):
    """调仓方向。"""

    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class RebalancingInstruction:
    """再平衡指令。

    属性说明：
        symbol: 资产代码
        direction: BUY 或 SELL
        value: BUY 时为买入金额；SELL 时为卖出该资产持仓的百分比
        deviation: 理想比例与当前比例的偏差（百分点），BUY 为正，SELL 为负
    """
    symbol: str
    direction: TradeDirection
    value: float
    deviation: float

    @property
    def is_buy(self) -> bool:
        return self.direction == TradeDirection.BUY

    @property
    def amount(self) -> float:
        """买入金额，SELL 指令为 0.0。"""
        return self.value if self.is_buy else 0.0

    @property
    def sell_percentage(self) -> float:
        """卖出持仓百分比，BUY 指令为 0.0。"""
        return 0.0 if self.is_buy else self.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "direction": self.direction.value,
            "value": self.value,
            "deviation": self.deviation,
        }


class Rebalancer:
    """再平衡计算器。

    Args:
        threshold: 触发调仓的最小偏差（百分点），默认5
    """

    def __init__(self, threshold: float = DEFAULT_REBALANCE_THRESHOLD):
        self.threshold = Validator.validate_numeric(
            threshold, field="threshold", min_value=0.0, max_value=100.0
        )

    def recommend(
        self,
        current_composition: Mapping[str, float],
        ideal_allocation: Mapping[str, float],
        total_value: float
    ) -> List[RebalancingInstruction]:
        """
        生成再平衡指令。

        Args:
            current_composition: 当前配置，资产代码到百分比
            ideal_allocation: 理想配置，资产代码到百分比
            total_value: 组合总市值，用于计算 BUY 金额

        Returns:
            List[RebalancingInstruction]: 按理想配置中的顺序排列，
                之后是只出现在当前配置中的资产
        """
        symbols = list(ideal_allocation)
        symbols.extend(symbol for symbol in current_composition if symbol not in ideal_allocation)

        instructions = []
        for symbol in symbols:
            deviation = ideal_allocation.get(symbol, 0.0) - current_composition.get(symbol, 0.0)

            if abs(deviation) < self.threshold:
                continue

            if deviation > 0:
                instruction = RebalancingInstruction(
                    symbol=symbol,
                    direction=TradeDirection.BUY,
                    value=total_value * deviation / 100.0,
                    deviation=deviation,
                )
            else:
                instruction = RebalancingInstruction(
                    symbol=symbol,
                    direction=TradeDirection.SELL,
                    value=abs(deviation),
                    deviation=deviation,
                )
            instructions.append(instruction)

        logger.debug(
            f"Rebalancer produced {len(instructions)} instruction(s) "
            f"with threshold {self.threshold:.2f}"
        )
        return instructions

    def needs_rebalancing(
        self,
        current_composition: Mapping[str, float],
        ideal_allocation: Mapping[str, float]
    ) -> bool:
        """只要有一个资产的偏差达到阈值就需要再平衡。"""
        return bool(self.recommend(current_composition, ideal_allocation, total_value=0.0))


__all__ = [
    "DEFAULT_REBALANCE_THRESHOLD",
    "TradeDirection",
    "RebalancingInstruction",
    "Rebalancer",
]
