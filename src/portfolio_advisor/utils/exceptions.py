"""
Portfolio Advisor 异常定义。

所有异常都携带一个 details 字典，记录出错时的上下文（字段、组合名称、
资产代码、数据源等），字符串表示中会附带这些上下文，便于在日志中定位问题。
"""

from typing import Any, Dict, Optional


class AdvisorError(Exception):
    """Portfolio Advisor 异常基类。"""

    # 消息前缀，子类覆盖
    prefix = ""

    def __init__(self, message: str, details: Optional[dict] = None, **context: Any):
        """
        Args:
            message: 错误消息
            details: 额外的错误详情
            **context: 出错时的上下文，值为 None 的项被忽略
        """
        self.message = f"{self.prefix}: {message}" if self.prefix else message
        self.details: Dict[str, Any] = dict(details or {})
        self.details.update({key: value for key, value in context.items() if value is not None})
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} [{context}]"


class ValidationError(AdvisorError):
    """价格、金额、配置比例等输入不合法。"""

    prefix = "验证错误"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        expected: Any = None,
        details: Optional[dict] = None,
    ):
        super().__init__(
            message,
            details,
            field=field,
            actual_value=value,
            expected_value=expected,
        )


class PortfolioError(AdvisorError):
    """
    投资组合操作失败，例如重复注册资产或创建组合时缺少价格。

    Args:
        portfolio: 组合名称
        symbol: 相关的资产代码
        operation: 失败的操作
    """

    prefix = "投资组合错误"

    def __init__(
        self,
        message: str,
        portfolio: Optional[str] = None,
        symbol: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details, portfolio=portfolio, symbol=symbol, operation=operation)


class ConfigurationError(AdvisorError):
    """配置文件加载、解析或校验失败。"""

    prefix = "配置错误"

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        section: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details, config_file=config_file, section=section)


class MarketDataError(AdvisorError):
    """行情来源无法提供价格或市场指标。"""

    prefix = "行情数据错误"

    def __init__(
        self,
        message: str,
        data_source: Optional[str] = None,
        symbol: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, details, data_source=data_source, symbol=symbol)
