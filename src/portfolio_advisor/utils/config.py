"""
Portfolio Advisor 配置管理模块。

这个模块提供了统一的配置加载、验证和管理功能。
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
import pydantic
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logger import logger
from .exceptions import ConfigurationError


class RiskConfig(BaseModel):
    """风险配置模型。"""

    default_risk_score: float = Field(50.0, ge=0.0, le=100.0, description="默认风险评分")
    volatility_threshold: float = Field(15.0, ge=0.0, description="资产波动率警戒线（百分比）")
    risk_free_rate: float = Field(0.5, description="无风险利率（百分比）")


class RebalancingConfig(BaseModel):
    """再平衡配置模型。"""

    threshold: float = Field(5.0, gt=0.0, le=100.0, description="触发调仓的最小偏差（百分点）")


class SIPConfig(BaseModel):
    """定投计划配置模型。"""

    monthly_amount: float = Field(0.0, ge=0.0, description="每月定投金额")
    auto_invest: bool = Field(True, description="是否自动定投")
    investment_interval_days: int = Field(30, ge=1, description="两次定投之间的天数")
    allocation: Dict[str, float] = Field(default_factory=dict, description="定投配置比例")

    @field_validator("allocation")
    @classmethod
    def validate_allocation(cls, v):
        """验证配置比例非负。"""
        for symbol, percentage in v.items():
            if percentage < 0:
                raise ValueError(f"配置比例不能为负数: {symbol}={percentage}")
        return v


class MarketDataConfig(BaseModel):
    """模拟行情配置模型。"""

    seed: Optional[int] = Field(None, description="随机种子，None 表示不固定")
    volatility_factor: float = Field(0.02, ge=0.0, le=1.0, description="价格扰动的标准差")


class AdvisorConfig(BaseModel):
    """顾问整体配置模型。"""

    initial_capital: float = Field(10000.0, ge=0.0, description="初始投资金额")
    risk: RiskConfig = Field(default_factory=RiskConfig, description="风险配置")
    rebalancing: RebalancingConfig = Field(
        default_factory=RebalancingConfig, description="再平衡配置"
    )
    sip: SIPConfig = Field(default_factory=SIPConfig, description="定投配置")
    market_data: MarketDataConfig = Field(
        default_factory=MarketDataConfig, description="模拟行情配置"
    )


class Settings(BaseSettings):
    """应用设置模型。"""

    model_config = SettingsConfigDict(
        env_prefix="PORTFOLIO_ADVISOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # 日志配置
    log_level: str = Field("INFO", description="日志级别")
    log_file: Optional[str] = Field(None, description="日志文件路径")

    # 配置目录
    config_dir: str = Field("./configs", description="配置文件目录")


class ConfigManager:
    """配置管理器。"""

    def __init__(self, config_dir: Optional[str] = None):
        """
        初始化配置管理器。

        Args:
            config_dir: 配置文件目录，如果为 None 则使用环境设置中的目录
        """
        self.settings = Settings()
        self.config_dir = Path(config_dir or self.settings.config_dir)

        # 缓存已加载的配置
        self._config_cache: Dict[str, AdvisorConfig] = {}

        logger.debug(f"配置管理器初始化完成，配置目录: {self.config_dir}")

    def load_config(self, config_file: str) -> AdvisorConfig:
        """
        加载配置文件。

        支持 YAML（.yaml/.yml）和 JSON（.json）。文件中可以直接是配置内容，
        也可以放在顶层的 'advisor' 键下。

        Args:
            config_file: 配置文件路径或名称

        Returns:
            AdvisorConfig: 配置对象

        Raises:
            ConfigurationError: 如果配置加载或验证失败
        """
        if config_file in self._config_cache:
            logger.debug(f"从缓存加载配置: {config_file}")
            return self._config_cache[config_file]

        config_path = self._get_config_path(config_file)

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if config_path.suffix.lower() == ".json":
                    config_data = json.load(f)
                else:
                    config_data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"加载配置文件失败: {config_path}",
                config_file=str(config_path),
                details={"error": str(e)},
            ) from e

        config = self.parse_config(config_data or {}, config_file=str(config_path))
        self._config_cache[config_file] = config

        logger.info(f"成功加载配置: {config_path}")
        return config

    @staticmethod
    def parse_config(config_data: Dict[str, Any], config_file: Optional[str] = None) -> AdvisorConfig:
        """
        将配置字典解析为 AdvisorConfig。

        Args:
            config_data: 配置字典
            config_file: 配置来源，仅用于错误信息

        Returns:
            AdvisorConfig: 配置对象

        Raises:
            ConfigurationError: 如果配置验证失败
        """
        if not isinstance(config_data, dict):
            raise ConfigurationError(
                "配置内容必须是字典",
                config_file=config_file,
                details={"type": type(config_data).__name__},
            )

        advisor_data = config_data.get("advisor", config_data)

        try:
            return AdvisorConfig(**advisor_data)
        except pydantic.ValidationError as e:
            raise ConfigurationError(
                "配置验证失败",
                config_file=config_file,
                details={"validation_errors": str(e)},
            ) from e

    def save_config(self, config: AdvisorConfig, config_file: str) -> Path:
        """
        保存配置到 YAML 文件。

        Args:
            config: 配置对象
            config_file: 配置文件路径或名称

        Returns:
            Path: 实际写入的路径
        """
        config_path = self._get_config_path(config_file)

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(config.model_dump(), f, default_flow_style=False, allow_unicode=True)
        except OSError as e:
            raise ConfigurationError(
                f"保存配置文件失败: {config_path}",
                config_file=str(config_path),
                details={"error": str(e)},
            ) from e

        self._config_cache[config_file] = config
        logger.info(f"成功保存配置: {config_path}")
        return config_path

    def clear_cache(self) -> None:
        """清除配置缓存。"""
        self._config_cache.clear()
        logger.debug("配置缓存已清除")

    def _get_config_path(self, config_file: str) -> Path:
        """
        获取配置文件的完整路径。

        Args:
            config_file: 配置文件路径或名称

        Returns:
            Path: 完整配置文件路径
        """
        config_path = Path(config_file)

        if not config_path.suffix:
            config_path = config_path.with_suffix(".yaml")

        if not config_path.is_absolute() and not config_path.exists():
            config_path = self.config_dir / config_path

        return config_path


__all__ = [
    "RiskConfig",
    "RebalancingConfig",
    "SIPConfig",
    "MarketDataConfig",
    "AdvisorConfig",
    "Settings",
    "ConfigManager",
]
