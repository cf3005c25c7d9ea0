"""
Portfolio Advisor 数据验证模块。

这个模块提供了边界数据（价格快照、配置比例、金额）的验证和归一化功能。
核心模块假定收到的价格已经通过这里的验证。
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

import numpy as np

from .logger import logger
from .exceptions import ValidationError

# 配置比例之和允许的误差（百分点）
ALLOCATION_TOLERANCE = 0.01


class Validator:
    """数据验证器。"""

    @staticmethod
    def validate_numeric(
        value: Any,
        field: str = "value",
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        allow_nan: bool = False,
        allow_inf: bool = False,
    ) -> float:
        """
        验证数值。

        Args:
            value: 要验证的值
            field: 字段名称
            min_value: 最小值（包含）
            max_value: 最大值（包含）
            allow_nan: 是否允许 NaN
            allow_inf: 是否允许无穷大

        Returns:
            float: 验证后的数值

        Raises:
            ValidationError: 如果验证失败
        """
        try:
            if isinstance(value, bool):
                raise ValueError(f"布尔值不是有效的数值: {value}")
            if isinstance(value, (int, float, Decimal, np.number)):
                num = float(value)
            elif isinstance(value, str):
                num = float(value)
            else:
                raise ValueError(f"无法转换为数值: {value}")
        except (ValueError, TypeError, InvalidOperation) as e:
            raise ValidationError(
                f"字段 '{field}' 不是有效的数值",
                field=field,
                value=value,
                expected="有效的数值",
                details={"error": str(e)},
            )

        if np.isnan(num) and not allow_nan:
            raise ValidationError(
                f"字段 '{field}' 不能为 NaN",
                field=field,
                value=value,
                expected="非 NaN 数值",
            )

        if np.isinf(num) and not allow_inf:
            raise ValidationError(
                f"字段 '{field}' 不能为无穷大",
                field=field,
                value=value,
                expected="有限数值",
            )

        if min_value is not None and num < min_value:
            raise ValidationError(
                f"字段 '{field}' 必须大于等于 {min_value}",
                field=field,
                value=num,
                expected=f">= {min_value}",
            )

        if max_value is not None and num > max_value:
            raise ValidationError(
                f"字段 '{field}' 必须小于等于 {max_value}",
                field=field,
                value=num,
                expected=f"<= {max_value}",
            )

        return num

    @staticmethod
    def validate_positive(value: Any, field: str = "value") -> float:
        """
        验证严格为正的有限数值。

        Args:
            value: 要验证的值
            field: 字段名称

        Returns:
            float: 验证后的数值

        Raises:
            ValidationError: 如果值不是正数
        """
        num = Validator.validate_numeric(value, field=field)
        if num <= 0:
            raise ValidationError(
                f"字段 '{field}' 必须大于0",
                field=field,
                value=num,
                expected="> 0",
            )
        return num

    @staticmethod
    def validate_symbol(value: Any, field: str = "symbol") -> str:
        """
        验证资产代码。

        允许字母、数字以及 '/'、'.'、'-'、'_'，例如 'BTC'、'EUR/USD'、'XAU/USD'。

        Args:
            value: 要验证的值
            field: 字段名称

        Returns:
            str: 去除首尾空白后的资产代码

        Raises:
            ValidationError: 如果代码为空或包含非法字符
        """
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(
                f"字段 '{field}' 必须是非空字符串",
                field=field,
                value=value,
                expected="非空字符串",
            )

        symbol = value.strip()
        if not re.match(r"^[A-Za-z0-9][A-Za-z0-9/._\-]*$", symbol):
            raise ValidationError(
                f"字段 '{field}' 包含非法字符",
                field=field,
                value=symbol,
                expected="字母、数字或 / . _ -",
            )
        return symbol


def validate_price_snapshot(prices: Mapping[str, Any]) -> Dict[str, float]:
    """
    验证一次价格更新快照。

    快照中的每个价格都必须是有限的正数，否则整个快照被拒绝，
    不会有任何价格进入资产。

    Args:
        prices: 资产代码到价格的映射

    Returns:
        Dict[str, float]: 验证后的价格字典

    Raises:
        ValidationError: 快照格式错误或包含非正价格
    """
    if not isinstance(prices, Mapping):
        raise ValidationError(
            "价格快照必须是映射类型",
            field="prices",
            value=type(prices).__name__,
            expected="Mapping[str, float]",
        )

    validated = {}
    for symbol, price in prices.items():
        clean_symbol = Validator.validate_symbol(symbol)
        validated[clean_symbol] = Validator.validate_positive(price, field=f"prices[{clean_symbol}]")

    return validated


def normalize_allocation(allocation: Mapping[str, float]) -> Dict[str, float]:
    """
    将配置比例归一化为合计100。

    如果比例之和与100的差距不超过 ALLOCATION_TOLERANCE，原样返回；
    否则按原比例缩放并记录警告。空配置返回空字典。

    Args:
        allocation: 资产代码到百分比的映射

    Returns:
        Dict[str, float]: 合计为100的配置

    Raises:
        ValidationError: 含有负数比例，或比例之和为0
    """
    if not allocation:
        return {}

    cleaned = {}
    for symbol, percentage in allocation.items():
        cleaned[symbol] = Validator.validate_numeric(
            percentage, field=f"allocation[{symbol}]", min_value=0.0
        )

    total = sum(cleaned.values())
    if total <= 0:
        raise ValidationError(
            "配置比例之和必须大于0",
            field="allocation",
            value=total,
            expected="> 0",
        )

    if abs(total - 100.0) <= ALLOCATION_TOLERANCE:
        return cleaned

    logger.warning(f"Allocation percentages sum to {total:.4f}, not 100. Adjusting proportionally")
    return {symbol: percentage / total * 100.0 for symbol, percentage in cleaned.items()}


__all__ = [
    "Validator",
    "validate_price_snapshot",
    "normalize_allocation",
    "ALLOCATION_TOLERANCE",
]
