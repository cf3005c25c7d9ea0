"""
投资组合风险评分模块。

本模块把一个0到100的风险评分映射为理想资产配置，并提供组合层面的风险指标。

目的：
    风险评分决定目标配置（理想配置），再平衡模块据此计算调仓指令。
    评分可以根据市场信号（VIX、比特币波动率）做加法调整。

实现方案：
    1. RISK_TIERS 声明式规则表：评分上限 → 风险档位名称和理想配置
    2. MARKET_ADJUSTMENT_RULES 声明式规则表：市场条件 → 评分增量，多条规则可同时生效
    3. RiskProfile 保存评分并在每次评分变化后重新推导理想配置
    4. calculate_portfolio_volatility / calculate_risk_adjusted_return
       以资产市值占比加权计算组合波动率和风险调整收益

使用方法：
    profile = RiskProfile(risk_score=25)
    profile.ideal_allocation  # {'SIP': 60.0, 'USD': 20.0, ...}
    profile.adjust_risk_score_for_market_conditions(vix=35, btc_volatility=25)
"""

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Tuple

from ...utils.logger import get_logger
from ...utils.validation import Validator
from ..assets.base import Asset

logger = get_logger(__name__)

MIN_RISK_SCORE = 0.0
MAX_RISK_SCORE = 100.0
DEFAULT_RISK_SCORE = 50.0
DEFAULT_VOLATILITY_THRESHOLD = 15.0
DEFAULT_RISK_FREE_RATE = 0.5


@dataclass(frozen=True)
class RiskTier:
    """风险档位。

    属性说明：
        upper_bound: 评分上限（不含），最后一档为无穷大
        name: 档位名称（Low / Medium / High）
        label: 风险偏好描述（Conservative / Moderate / Aggressive）
        allocation: 理想配置，资产代码到百分比
    """
    upper_bound: float
    name: str
    label: str
    allocation: Mapping[str, float]


RISK_TIERS: Tuple[RiskTier, ...] = (
    RiskTier(
        upper_bound=30.0,
        name="Low",
        label="Conservative",
        allocation={"SIP": 60.0, "USD": 20.0, "XAU/USD": 10.0, "EUR/USD": 5.0, "BTC": 5.0},
    ),
    RiskTier(
        upper_bound=70.0,
        name="Medium",
        label="Moderate",
        allocation={"SIP": 40.0, "EUR/USD": 20.0, "BTC": 15.0, "XAU/USD": 15.0, "USD": 10.0},
    ),
    RiskTier(
        upper_bound=float("inf"),
        name="High",
        label="Aggressive",
        allocation={"SIP": 20.0, "EUR/USD": 30.0, "BTC": 30.0, "XAU/USD": 10.0, "USD": 10.0},
    ),
)


@dataclass(frozen=True)
class MarketAdjustment:
    """市场条件对风险评分的加法调整。

    属性说明：
        name: 规则名称，用于日志
        condition: 参数为 (vix, btc_volatility) 的判断函数
        delta: 规则生效时的评分增量
    """
    name: str
    condition: Callable[[float, float], bool]
    delta: float


MARKET_ADJUSTMENT_RULES: Tuple[MarketAdjustment, ...] = (
    MarketAdjustment("high_vix", lambda vix, btc_vol: vix > 30.0, -10.0),
    MarketAdjustment("low_vix", lambda vix, btc_vol: vix < 15.0, 5.0),
    MarketAdjustment("high_btc_volatility", lambda vix, btc_vol: btc_vol > 20.0, -5.0),
)


def tier_for_score(risk_score: float) -> RiskTier:
    """返回评分所属的风险档位。"""
    for tier in RISK_TIERS:
        if risk_score < tier.upper_bound:
            return tier
    return RISK_TIERS[-1]


def clamp_risk_score(value: float) -> float:
    """把评分限制在 [0, 100]。"""
    return min(MAX_RISK_SCORE, max(MIN_RISK_SCORE, value))


class RiskProfile:
    """风险画像。

    目的：
        保存风险评分和由它推导的理想配置，评分一旦变化立即重新推导。

    属性说明：
        risk_score: 风险评分，0为最低风险，100为最高风险
        volatility_threshold: 资产被视为过度波动的阈值（百分比）
    """

    def __init__(
        self,
        risk_score: float = DEFAULT_RISK_SCORE,
        volatility_threshold: float = DEFAULT_VOLATILITY_THRESHOLD
    ):
        self.volatility_threshold = Validator.validate_numeric(
            volatility_threshold, field="volatility_threshold", min_value=0.0
        )
        self._risk_score = DEFAULT_RISK_SCORE
        self._ideal_allocation: Dict[str, float] = {}
        self.set_risk_score(risk_score)

    @property
    def risk_score(self) -> float:
        return self._risk_score

    @property
    def ideal_allocation(self) -> Dict[str, float]:
        """理想配置的副本，非空时合计为100。"""
        return dict(self._ideal_allocation)

    @property
    def tier(self) -> RiskTier:
        return tier_for_score(self._risk_score)

    @property
    def risk_profile_label(self) -> str:
        """风险偏好描述：Conservative、Moderate 或 Aggressive。"""
        return self.tier.label

    def set_risk_score(self, value: float) -> float:
        """
        设置风险评分并重新推导理想配置。

        Args:
            value: 新评分，超出 [0, 100] 时被截断

        Returns:
            float: 截断后的评分

        Raises:
            ValidationError: 评分不是有效数值
        """
        value = Validator.validate_numeric(value, field="risk_score")
        self._risk_score = clamp_risk_score(value)
        self._update_ideal_allocation()
        logger.debug(f"Risk score set to {self._risk_score:.1f} ({self.tier.name} tier)")
        return self._risk_score

    def _update_ideal_allocation(self) -> None:
        self._ideal_allocation = dict(self.tier.allocation)

    def adjust_risk_score_for_market_conditions(self, vix: float, btc_volatility: float) -> float:
        """
        根据市场条件调整风险评分。

        从当前评分出发，累加所有生效规则的增量，再截断到 [0, 100] 并重新推导配置。

        Args:
            vix: 市场波动率指数
            btc_volatility: 比特币波动率（百分比）

        Returns:
            float: 调整后的评分
        """
        applied = [rule for rule in MARKET_ADJUSTMENT_RULES if rule.condition(vix, btc_volatility)]
        adjustment = sum(rule.delta for rule in applied)

        if applied:
            logger.info(
                f"Adjusting risk score by {adjustment:+.1f} "
                f"({', '.join(rule.name for rule in applied)})"
            )

        return self.set_risk_score(self._risk_score + adjustment)

    def is_asset_too_volatile(self, asset: Asset) -> bool:
        """资产波动率超过阈值时返回 True。"""
        return asset.volatility > self.volatility_threshold

    def to_dict(self) -> Dict[str, object]:
        return {
            "risk_score": self._risk_score,
            "risk_profile": self.risk_profile_label,
            "volatility_threshold": self.volatility_threshold,
            "ideal_allocation": self.ideal_allocation,
        }

    def __repr__(self) -> str:
        return f"RiskProfile(risk_score={self._risk_score}, profile={self.risk_profile_label!r})"


def _value_weights(assets: Mapping[str, Asset]) -> Tuple[float, Dict[str, float]]:
    total_value = sum(asset.current_value for asset in assets.values())
    if total_value <= 0:
        return total_value, {}
    return total_value, {
        symbol: asset.current_value / total_value for symbol, asset in assets.items()
    }


def calculate_portfolio_volatility(assets: Mapping[str, Asset]) -> float:
    """
    计算组合波动率。

    组合波动率 = Σ 市值占比 × 资产波动率。不考虑资产间相关性。

    Args:
        assets: 资产代码到资产的映射

    Returns:
        float: 组合波动率（百分比），总市值为0时返回 0.0
    """
    total_value, weights = _value_weights(assets)
    if total_value <= 0:
        return 0.0

    return sum(weights[symbol] * asset.volatility for symbol, asset in assets.items())


def calculate_risk_adjusted_return(
    assets: Mapping[str, Asset],
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
) -> float:
    """
    计算风险调整收益。

    (Σ 市值占比 × 资产收益率 - 无风险利率) / 组合波动率

    Args:
        assets: 资产代码到资产的映射
        risk_free_rate: 无风险利率（百分比），默认0.5

    Returns:
        float: 风险调整收益，总市值或组合波动率不大于0时返回 0.0
    """
    total_value, weights = _value_weights(assets)
    if total_value <= 0:
        return 0.0

    portfolio_volatility = calculate_portfolio_volatility(assets)
    if portfolio_volatility <= 0:
        return 0.0

    weighted_return = sum(
        weights[symbol] * asset.get_return_percentage() for symbol, asset in assets.items()
    )
    return (weighted_return - risk_free_rate) / portfolio_volatility


__all__ = [
    "RiskTier",
    "RISK_TIERS",
    "MarketAdjustment",
    "MARKET_ADJUSTMENT_RULES",
    "RiskProfile",
    "tier_for_score",
    "clamp_risk_score",
    "calculate_portfolio_volatility",
    "calculate_risk_adjusted_return",
]
