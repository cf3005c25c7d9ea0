"""
投资顾问引擎模块。

目的：
    根据投资组合状态和市场数据生成提醒（alerts）和建议（recommendations），
    并汇总月度报告所需的数据。引擎只产生数据，不做任何终端输出。

实现方案：
    1. 所有阈值集中在声明式规则表中，每条规则由条件和文字组成，
       复用资产分析使用的 AnalysisRule / RuleSet
    2. 规则的评估对象是轻量的上下文数据类：
       AssetContext（单个资产）、MarketContext（市场数据）、
       AllocationContext（单个资产的市值占比）、PortfolioContext（组合指标）
    3. 分析顺序：资产 → 市场 → 配置平衡 → 风险指标 → 交易信号
    4. 数值在文字中按整数截断显示

使用方法：
    engine = AdvisorEngine(portfolio, price_source)
    report = engine.analyze()
    report.alerts, report.recommendations
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..data.base import PriceSource
from ..utils.exceptions import MarketDataError
from ..utils.logger import get_logger
from .analytics.growth import ScenarioAnalysis, analyze_scenarios
from .assets.base import AnalysisRule, Asset, RuleSet
from .portfolio.base import Portfolio

logger = get_logger(__name__)

# 月度报告中定投预测使用的年化收益率（百分比）
REPORT_SIP_RATE = 10.0
REPORT_SIP_HORIZONS = (12, 60)
TOP_PERFORMERS = 3

BTC_SYMBOL = "BTC"
GOLD_SYMBOL = "XAU/USD"
USD_INR_SYMBOL = "USD/INR"


@dataclass(frozen=True)
class AssetContext:
    symbol: str
    volatility: float
    return_percentage: float

    @classmethod
    def from_asset(cls, symbol: str, asset: Asset) -> "AssetContext":
        return cls(symbol, asset.volatility, asset.get_return_percentage())


@dataclass(frozen=True)
class MarketContext:
    vix: float
    usd_inr: Optional[float] = None
    btc_price: Optional[float] = None


@dataclass(frozen=True)
class AllocationContext:
    symbol: str
    percentage: float


@dataclass(frozen=True)
class PortfolioContext:
    volatility: float
    risk_adjusted_return: float
    needs_rebalancing: bool


@dataclass
class AdvisorReport:
    """分析结果。

    属性说明：
        alerts: 需要立即关注的提醒
        recommendations: 操作建议
        generated_at: 生成时间
    """
    alerts: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_healthy(self) -> bool:
        """没有任何提醒和建议。"""
        return not self.alerts and not self.recommendations

    def to_dict(self) -> Dict[str, Any]:
        return {
            "alerts": list(self.alerts),
            "recommendations": list(self.recommendations),
            "generated_at": self.generated_at.isoformat(),
        }


@dataclass
class MonthlyReport:
    """月度报告数据。

    属性说明：
        report_date: 报告时间
        total_value: 组合总市值
        total_return_percentage: 总收益率（百分比）
        monthly_investment: 每月定投金额
        sip_projections: 月数到按10%年化收益率预测的定投价值
        portfolio_volatility: 组合波动率（百分比）
        top_performers: 收益率最高的资产（最多三个），按收益率降序
    """
    report_date: datetime
    total_value: float
    total_return_percentage: float
    monthly_investment: float
    sip_projections: Dict[int, float]
    portfolio_volatility: float
    top_performers: List[Tuple[str, float]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_date": self.report_date.isoformat(),
            "total_value": self.total_value,
            "total_return_percentage": self.total_return_percentage,
            "monthly_investment": self.monthly_investment,
            "sip_projections": dict(self.sip_projections),
            "portfolio_volatility": self.portfolio_volatility,
            "top_performers": [list(item) for item in self.top_performers],
        }


def _always(context: Any) -> bool:
    return True


# ----------------------------------------------------------------------
# 规则表
# ----------------------------------------------------------------------

ASSET_ALERT_RULES = RuleSet(rules=(
    AnalysisRule(
        condition=lambda c: c.volatility > 25.0,
        message=lambda c: f"HIGH VOLATILITY ALERT: {c.symbol} showing {int(c.volatility)}% volatility",
    ),
))

ASSET_RECOMMENDATION_RULES = RuleSet(first_match=True, rules=(
    AnalysisRule(
        condition=lambda c: c.return_percentage > 20.0,
        message=lambda c: (
            f"PROFIT TAKING: Consider taking profits on {c.symbol} (+{int(c.return_percentage)}%)"
        ),
    ),
    AnalysisRule(
        condition=lambda c: c.return_percentage < -15.0,
        message=lambda c: (
            f"REVIEW POSITION: {c.symbol} is down {int(abs(c.return_percentage))}%. "
            "Consider averaging down or cutting losses"
        ),
    ),
))

MARKET_ALERT_RULES = RuleSet(rules=(
    AnalysisRule(
        condition=lambda m: m.vix > 30.0,
        message=lambda m: f"MARKET VOLATILITY HIGH: VIX at {int(m.vix)}. Consider reducing risk exposure",
    ),
))

MARKET_RECOMMENDATION_RULES: Tuple[RuleSet, ...] = (
    RuleSet(first_match=True, rules=(
        AnalysisRule(
            condition=lambda m: m.vix > 30.0,
            message="Increase allocation to defensive assets (Gold, USD)",
        ),
        AnalysisRule(
            condition=lambda m: m.vix < 15.0,
            message=lambda m: f"MARKET CALM: VIX low at {int(m.vix)}. Good time to increase risk exposure",
        ),
    )),
    RuleSet(rules=(
        AnalysisRule(
            condition=lambda m: m.vix > 30.0,
            message="Reduce crypto and forex exposure temporarily",
        ),
        AnalysisRule(
            condition=lambda m: m.usd_inr is not None and m.usd_inr > 80.0,
            message="USD/INR HIGH: Consider reducing USD exposure and increasing INR assets",
        ),
    )),
    RuleSet(first_match=True, rules=(
        AnalysisRule(
            condition=lambda m: m.btc_price is not None and m.btc_price > 50000.0,
            message="BITCOIN OVERBOUGHT: Consider taking profits or reducing BTC allocation",
        ),
        AnalysisRule(
            condition=lambda m: m.btc_price is not None and m.btc_price < 30000.0,
            message="BITCOIN OVERSOLD: Good opportunity to increase BTC allocation",
        ),
    )),
)

CONCENTRATION_THRESHOLD = 40.0

CONCENTRATION_ALERT_RULES = RuleSet(rules=(
    AnalysisRule(
        condition=lambda a: a.percentage > CONCENTRATION_THRESHOLD,
        message=lambda a: f"CONCENTRATION RISK: {a.symbol} represents {int(a.percentage)}% of portfolio",
    ),
))

CONCENTRATION_RECOMMENDATION_RULES = RuleSet(rules=(
    AnalysisRule(
        condition=lambda a: a.percentage > CONCENTRATION_THRESHOLD,
        message=lambda a: f"Consider rebalancing to reduce {a.symbol} concentration",
    ),
))

PORTFOLIO_ALERT_RULES = RuleSet(rules=(
    AnalysisRule(
        condition=lambda p: p.volatility > 20.0,
        message=lambda p: f"HIGH PORTFOLIO VOLATILITY: {int(p.volatility)}%",
    ),
))

REBALANCING_RECOMMENDATION_RULES = RuleSet(rules=(
    AnalysisRule(
        condition=lambda p: p.needs_rebalancing,
        message="REBALANCING NEEDED: Portfolio allocation has drifted from target",
    ),
))

RISK_RECOMMENDATION_RULES = RuleSet(rules=(
    AnalysisRule(
        condition=lambda p: p.volatility > 20.0,
        message="Consider adding more stable assets to reduce overall volatility",
    ),
    AnalysisRule(
        condition=lambda p: p.risk_adjusted_return < 0.5,
        message="LOW RISK-ADJUSTED RETURN: Review asset allocation for better efficiency",
    ),
))

BTC_SIGNAL_RULES = RuleSet(first_match=True, rules=(
    AnalysisRule(
        condition=lambda c: c.return_percentage > 15.0 and c.volatility > 20.0,
        message="BTC SIGNAL: SELL - High gains with high volatility suggest profit-taking",
    ),
    AnalysisRule(
        condition=lambda c: c.return_percentage < -10.0 and c.volatility < 15.0,
        message="BTC SIGNAL: BUY - Oversold with stabilizing volatility",
    ),
    AnalysisRule(
        condition=_always,
        message="BTC SIGNAL: HOLD - Wait for clearer trend",
    ),
))

GOLD_SIGNAL_RULES = RuleSet(first_match=True, rules=(
    AnalysisRule(
        condition=lambda c: c.volatility < 5.0 and c.return_percentage < 5.0,
        message="GOLD SIGNAL: BUY - Stable and underperforming, good hedge opportunity",
    ),
    AnalysisRule(
        condition=lambda c: c.return_percentage > 10.0,
        message="GOLD SIGNAL: HOLD - Good performance, maintain position",
    ),
))

FOREX_SIGNAL_RULES = RuleSet(first_match=True, rules=(
    AnalysisRule(
        condition=lambda c: c.volatility > 15.0,
        message=lambda c: f"{c.symbol} SIGNAL: REDUCE - High forex volatility, reduce exposure",
    ),
    AnalysisRule(
        condition=lambda c: c.return_percentage > 8.0,
        message=lambda c: f"{c.symbol} SIGNAL: HOLD - Good forex performance, maintain position",
    ),
))


def signal_rules_for(symbol: str) -> Optional[RuleSet]:
    """资产代码对应的交易信号规则，没有信号规则时返回 None。"""
    if symbol == BTC_SYMBOL:
        return BTC_SIGNAL_RULES
    if symbol == GOLD_SYMBOL:
        return GOLD_SIGNAL_RULES
    if "/" in symbol:
        return FOREX_SIGNAL_RULES
    return None


class AdvisorEngine:
    """投资顾问引擎。

    Args:
        portfolio: 要分析的投资组合
        price_source: 行情来源，analyze() 未传入市场数据时使用
    """

    def __init__(self, portfolio: Portfolio, price_source: Optional[PriceSource] = None):
        self.portfolio = portfolio
        self.price_source = price_source

    def _market_context(
        self,
        vix: Optional[float],
        prices: Optional[Mapping[str, float]]
    ) -> MarketContext:
        if vix is None or prices is None:
            if self.price_source is None:
                raise MarketDataError("未提供市场数据，也没有可用的行情来源")
            if vix is None:
                vix = self.price_source.get_vix()
            if prices is None:
                prices = self.price_source.get_prices([USD_INR_SYMBOL, BTC_SYMBOL])

        return MarketContext(
            vix=vix,
            usd_inr=prices.get(USD_INR_SYMBOL),
            btc_price=prices.get(BTC_SYMBOL),
        )

    def analyze(
        self,
        vix: Optional[float] = None,
        prices: Optional[Mapping[str, float]] = None
    ) -> AdvisorReport:
        """
        分析投资组合和市场条件。

        Args:
            vix: 市场波动率指数，默认从行情来源获取
            prices: 市场价格，用于 USD/INR 和 BTC 规则，默认从行情来源获取

        Returns:
            AdvisorReport: 提醒和建议

        Raises:
            MarketDataError: 未提供市场数据且没有行情来源
        """
        market = self._market_context(vix, prices)
        report = AdvisorReport()

        assets = self.portfolio.assets
        asset_contexts = [AssetContext.from_asset(symbol, asset) for symbol, asset in assets.items()]

        # 单个资产
        for context in asset_contexts:
            report.alerts.extend(ASSET_ALERT_RULES.evaluate(context))
            report.recommendations.extend(ASSET_RECOMMENDATION_RULES.evaluate(context))

        # 市场条件
        report.alerts.extend(MARKET_ALERT_RULES.evaluate(market))
        for rule_set in MARKET_RECOMMENDATION_RULES:
            report.recommendations.extend(rule_set.evaluate(market))

        # 配置平衡
        for symbol, percentage in self.portfolio.get_composition().items():
            allocation = AllocationContext(symbol, percentage)
            report.alerts.extend(CONCENTRATION_ALERT_RULES.evaluate(allocation))
            report.recommendations.extend(CONCENTRATION_RECOMMENDATION_RULES.evaluate(allocation))

        portfolio_context = PortfolioContext(
            volatility=self.portfolio.get_portfolio_volatility(),
            risk_adjusted_return=self.portfolio.get_risk_adjusted_return(),
            needs_rebalancing=bool(self.portfolio.recommend_rebalancing()),
        )
        report.recommendations.extend(REBALANCING_RECOMMENDATION_RULES.evaluate(portfolio_context))

        # 风险指标
        report.alerts.extend(PORTFOLIO_ALERT_RULES.evaluate(portfolio_context))
        report.recommendations.extend(RISK_RECOMMENDATION_RULES.evaluate(portfolio_context))

        # 交易信号
        for context in asset_contexts:
            rules = signal_rules_for(context.symbol)
            if rules is not None:
                report.recommendations.extend(rules.evaluate(context))

        logger.info(
            f"Advisor analysis complete: {len(report.alerts)} alert(s), "
            f"{len(report.recommendations)} recommendation(s)"
        )
        return report

    def adjust_risk_for_market(self, vix: Optional[float] = None) -> float:
        """
        按当前市场条件调整组合的风险评分。

        比特币波动率取组合中 BTC 资产的波动率，组合中没有 BTC 时按0处理。

        Returns:
            float: 调整后的风险评分
        """
        if vix is None:
            vix = self._market_context(None, {}).vix

        btc = self.portfolio.get_asset(BTC_SYMBOL)
        btc_volatility = btc.volatility if btc is not None else 0.0
        return self.portfolio.risk_profile.adjust_risk_score_for_market_conditions(vix, btc_volatility)

    def monthly_report(self) -> MonthlyReport:
        """汇总月度报告数据。"""
        sip_plan = self.portfolio.sip_plan
        returns = sorted(
            ((symbol, asset.get_return_percentage()) for symbol, asset in self.portfolio.assets.items()),
            key=lambda item: item[1],
            reverse=True,
        )

        return MonthlyReport(
            report_date=datetime.now(),
            total_value=self.portfolio.get_total_value(),
            total_return_percentage=self.portfolio.get_total_return_percentage(),
            monthly_investment=sip_plan.monthly_amount,
            sip_projections={
                months: sip_plan.calculate_projected_growth(months, REPORT_SIP_RATE)
                for months in REPORT_SIP_HORIZONS
            },
            portfolio_volatility=self.portfolio.get_portfolio_volatility(),
            top_performers=returns[:TOP_PERFORMERS],
        )

    def simulate_scenarios(self, inflation_rate: float = 8.0) -> ScenarioAnalysis:
        """市场情景、通胀影响和定投情景分析。"""
        return analyze_scenarios(
            self.portfolio.get_total_value(),
            monthly_amount=self.portfolio.sip_plan.monthly_amount,
            inflation_rate=inflation_rate,
        )


__all__ = [
    "AdvisorReport",
    "MonthlyReport",
    "AdvisorEngine",
    "signal_rules_for",
]
