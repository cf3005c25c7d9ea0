"""
数值格式化工具。

分析规则生成的文字中会出现金额，这里统一金额的写法。
"""


def format_currency(amount: float, precision: int = 2) -> str:
    """
    将金额格式化为带千分位的美元字符串。

    Args:
        amount: 金额
        precision: 小数位数

    Returns:
        str: 例如 '$1,234.50' 或 '-$12.00'
    """
    if amount < 0:
        return f"-${abs(amount):,.{precision}f}"
    return f"${amount:,.{precision}f}"


def format_decimal(value: float) -> str:
    """固定六位小数，分析文字中的比率都使用这种写法。"""
    return f"{value:.6f}"
