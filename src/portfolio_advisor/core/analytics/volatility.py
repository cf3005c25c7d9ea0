"""
波动率与收益计算模块。

目的：
    根据资产的价格观测序列计算逐期收益率和历史波动率。

实现方案：
    1. 逐期简单收益率 r_i = (p_i - p_{i-1}) / p_{i-1}
    2. 波动率为收益率的总体标准差（除以 n，而非 n-1）乘以100，单位为百分比
    3. 观测少于两个时波动率定义为0

使用方法：
    资产在每次追加价格观测后调用 calculate_volatility 重新计算，不做跨更新的缓存。

示例：
    >>> calculate_volatility([40000, 44000, 41800])
    7.5
"""

from typing import Sequence

import numpy as np

from ...utils.logger import get_logger

logger = get_logger(__name__)


def calculate_returns(prices: Sequence[float]) -> np.ndarray:
    """
    计算逐期简单收益率。

    Args:
        prices: 按时间顺序排列的价格序列

    Returns:
        np.ndarray: 长度为 len(prices) - 1 的收益率数组，少于两个价格时为空数组
    """
    values = np.asarray(prices, dtype=float)
    if values.size < 2:
        return np.array([], dtype=float)

    previous = values[:-1]
    # 前一期价格为0时该期收益率记为0
    with np.errstate(divide="ignore", invalid="ignore"):
        returns = np.where(previous != 0, (values[1:] - previous) / previous, 0.0)

    return returns


def calculate_volatility(prices: Sequence[float]) -> float:
    """
    计算历史波动率（百分比）。

    Args:
        prices: 按时间顺序排列的价格序列

    Returns:
        float: 收益率总体标准差 × 100，观测少于两个时返回 0.0
    """
    returns = calculate_returns(prices)
    if returns.size == 0:
        return 0.0

    return float(np.std(returns, ddof=0) * 100.0)


def percent_change(old_value: float, new_value: float) -> float:
    """
    计算百分比变化。

    Args:
        old_value: 原值
        new_value: 新值

    Returns:
        float: (new - old) / old × 100，原值为0时返回 0.0
    """
    if old_value == 0:
        return 0.0
    return (new_value - old_value) / old_value * 100.0


__all__ = [
    "calculate_returns",
    "calculate_volatility",
    "percent_change",
]
