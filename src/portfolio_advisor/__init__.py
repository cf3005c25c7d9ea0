"""
Portfolio Advisor - risk-driven allocation, rebalancing and growth projection for
multi-instrument investment portfolios.

Portfolio Advisor models a portfolio of index funds, forex pairs, cryptocurrencies,
gold and cash, and computes ideal allocations, rebalancing instructions,
volatility/return statistics and compound-growth projections.
"""

__version__ = "0.1.0"

import importlib.util
from typing import Optional

from .utils.logger import LOG_LEVELS, get_logger, setup_logger

# 包级日志器
logger = get_logger(__name__)

from .core.assets import (
    Asset,
    SIP,
    Forex,
    Cryptocurrency,
    Commodity,
    FiatCurrency,
    GenericAsset,
)
from .core.portfolio import (
    Portfolio,
    RiskProfile,
    Rebalancer,
    SIPPlan,
    InvestorProfile,
    create_portfolio,
    create_portfolio_from_profile,
)
from .core.advisor import AdvisorEngine, AdvisorReport

# 导出主要模块
__all__ = [
    # 资产
    "Asset",
    "SIP",
    "Forex",
    "Cryptocurrency",
    "Commodity",
    "FiatCurrency",
    "GenericAsset",
    # 投资组合
    "Portfolio",
    "RiskProfile",
    "Rebalancer",
    "SIPPlan",
    "InvestorProfile",
    "create_portfolio",
    "create_portfolio_from_profile",
    # 顾问引擎
    "AdvisorEngine",
    "AdvisorReport",
    # 版本信息
    "__version__",
    "logger",
    "set_log_level",
    "configure_logging",
    "check_dependencies",
]

REQUIRED_DEPENDENCIES = ("numpy", "pandas", "loguru", "pydantic", "pydantic_settings", "yaml")


# 配置日志级别
def set_log_level(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    设置全局日志级别。

    Args:
        level: 日志级别，可选值：TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
        log_file: 日志文件路径（可选）
    """
    if level.upper() not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level}")

    setup_logger(level=level, log_file=log_file)
    logger.info(f"Log level set to: {level}")


def configure_logging() -> None:
    """按环境设置（PORTFOLIO_ADVISOR_LOG_LEVEL / PORTFOLIO_ADVISOR_LOG_FILE）配置日志。"""
    from .utils.config import Settings

    settings = Settings()
    set_log_level(settings.log_level, log_file=settings.log_file)


# 初始化检查
def check_dependencies() -> bool:
    """
    检查必要的依赖是否已安装。

    Returns:
        bool: 所有依赖是否可用
    """
    missing = [name for name in REQUIRED_DEPENDENCIES if importlib.util.find_spec(name) is None]
    if missing:
        logger.error(f"Missing dependencies: {', '.join(missing)}")
        return False

    logger.debug("All core dependencies are available")
    return True
