"""
投资组合工厂模块。

本文件提供从配置比例、价格快照和初始资金创建投资组合的工厂函数。

实现方案概述：
1. 按配置中的代码选择资产类型：
   - 'SIP' → 定投基金（Vanguard Total Stock Market ETF，代码 VTI）
   - 'BTC' → 加密货币
   - 'XAU/USD' → 黄金
   - 'USD' → 美元现金，价格固定为1，数量等于投入金额
   - 'XXX/YYY' → 外汇货币对
   - 其他 → 普通资产
2. 每个资产的投入金额 = 初始资金 × 配置比例 / 100
3. 资产以配置中的代码注册，创建完成后记录一次估值

主要函数：
- create_asset(): 按代码创建单个资产
- create_portfolio(): 从配置比例和价格快照创建投资组合
- create_portfolio_from_profile(): 从投资者画像和行情来源创建投资组合
- create_portfolio_from_config(): 从 AdvisorConfig 和行情来源创建投资组合
"""

from typing import Callable, Dict, Mapping, Optional

from ...data.base import DEFAULT_COUNTRY, PriceSource
from ...utils.config import AdvisorConfig
from ...utils.exceptions import MarketDataError, PortfolioError, ValidationError
from ...utils.logger import get_logger
from ...utils.validation import Validator, normalize_allocation
from ..assets.base import Asset, GenericAsset
from ..assets.commodity import Commodity
from ..assets.crypto import Cryptocurrency
from ..assets.fiat import FiatCurrency
from ..assets.forex import Forex
from ..assets.sip import SIP
from .base import Portfolio
from .profile import InvestorProfile
from .rebalancing import Rebalancer
from .risk import RiskProfile
from .sip import SIPPlan

logger = get_logger(__name__)

SIP_FUND_NAME = "Vanguard Total Stock Market ETF"
SIP_FUND_SYMBOL = "VTI"
BITCOIN_MARKET_CAP = 1_000_000_000_000.0
CASH_SYMBOL = "USD"

# 配置代码到行情代码的映射，未列出的代码直接使用配置代码
PRICE_SYMBOLS: Dict[str, str] = {
    "SIP": SIP_FUND_SYMBOL,
}


def _build_sip(symbol: str, price: float, amount: float, **rates) -> Asset:
    return SIP(SIP_FUND_NAME, SIP_FUND_SYMBOL, price, amount / price)


def _build_bitcoin(symbol: str, price: float, amount: float, **rates) -> Asset:
    return Cryptocurrency("Bitcoin", "BTC", price, BITCOIN_MARKET_CAP, amount / price)


def _build_gold(symbol: str, price: float, amount: float, **rates) -> Asset:
    return Commodity("Gold", "XAU/USD", price, grade="24K", is_physical=False, quantity=amount / price)


def _build_cash(symbol: str, price: float, amount: float, **rates) -> Asset:
    return FiatCurrency(
        "US Dollar",
        CASH_SYMBOL,
        1.0,
        "United States",
        interest_rate=rates.get("interest_rate", 0.0),
        inflation_rate=rates.get("inflation_rate", 0.0),
        quantity=amount,
    )


def _build_forex(symbol: str, price: float, amount: float, **rates) -> Asset:
    base_currency = symbol[:3]
    quote_currency = symbol[4:7]
    return Forex(
        f"{base_currency} to {quote_currency}",
        symbol,
        price,
        base_currency,
        quote_currency,
        quantity=amount / price,
    )


def _build_generic(symbol: str, price: float, amount: float, **rates) -> Asset:
    return GenericAsset(symbol, symbol, price, amount / price)


_ASSET_BUILDERS: Dict[str, Callable[..., Asset]] = {
    "SIP": _build_sip,
    "BTC": _build_bitcoin,
    "XAU/USD": _build_gold,
    CASH_SYMBOL: _build_cash,
}


def price_symbol_for(symbol: str) -> str:
    """配置代码对应的行情代码。"""
    return PRICE_SYMBOLS.get(symbol, symbol)


def create_asset(
    symbol: str,
    price: float,
    amount: float,
    interest_rate: float = 0.0,
    inflation_rate: float = 0.0
) -> Asset:
    """
    按配置代码创建资产。

    Args:
        symbol: 配置代码
        price: 当前价格，美元现金忽略该值
        amount: 投入金额
        interest_rate: 美元现金使用的利率（百分比）
        inflation_rate: 美元现金使用的通胀率（百分比）

    Returns:
        Asset: 新建的资产

    Raises:
        ValidationError: 价格不是正数或金额为负数
    """
    amount = Validator.validate_numeric(amount, field="amount", min_value=0.0)
    if symbol != CASH_SYMBOL:
        price = Validator.validate_positive(price, field=f"prices[{symbol}]")

    builder = _ASSET_BUILDERS.get(symbol)
    if builder is None:
        builder = _build_forex if "/" in symbol else _build_generic

    return builder(symbol, price, amount, interest_rate=interest_rate, inflation_rate=inflation_rate)


def create_portfolio(
    allocation: Mapping[str, float],
    prices: Mapping[str, float],
    capital: float,
    risk_profile: Optional[RiskProfile] = None,
    sip_plan: Optional[SIPPlan] = None,
    rebalancer: Optional[Rebalancer] = None,
    interest_rate: float = 0.0,
    inflation_rate: float = 0.0,
    risk_free_rate: float = 0.5,
    name: str = "Default Portfolio"
) -> Portfolio:
    """
    从配置比例和价格快照创建投资组合。

    Args:
        allocation: 配置比例，合计不为100时被归一化
        prices: 价格快照，按配置代码或行情代码查找（'SIP' 也可用 'VTI' 的价格）
        capital: 初始资金
        risk_profile: 风险画像，默认评分50
        sip_plan: 定投计划，默认使用同一配置、金额为0
        rebalancer: 再平衡计算器，默认阈值5
        interest_rate: 美元现金的利率（百分比）
        inflation_rate: 美元现金的通胀率（百分比）
        risk_free_rate: 无风险利率（百分比）
        name: 组合名称

    Returns:
        Portfolio: 投资组合

    Raises:
        PortfolioError: 缺少某个资产的价格
        ValidationError: 配置、价格或资金无效

    使用示例：
        portfolio = create_portfolio(
            allocation={'SIP': 60, 'USD': 20, 'XAU/USD': 10, 'EUR/USD': 5, 'BTC': 5},
            prices={'VTI': 200, 'XAU/USD': 1800, 'EUR/USD': 1.1, 'BTC': 40000},
            capital=10000,
        )
    """
    capital = Validator.validate_numeric(capital, field="capital", min_value=0.0)
    allocation = normalize_allocation(allocation)

    portfolio = Portfolio(
        capital,
        risk_profile=risk_profile,
        sip_plan=sip_plan or SIPPlan(allocation=allocation),
        rebalancer=rebalancer,
        risk_free_rate=risk_free_rate,
        name=name,
    )

    for symbol, percentage in allocation.items():
        price = prices.get(symbol, prices.get(price_symbol_for(symbol)))
        if price is None and symbol != CASH_SYMBOL:
            raise PortfolioError(
                f"缺少资产价格: {symbol}",
                portfolio=name,
                symbol=symbol,
                operation="create_portfolio",
                details={"available": sorted(prices)},
            )

        asset = create_asset(
            symbol,
            price if price is not None else 1.0,
            capital * percentage / 100.0,
            interest_rate=interest_rate,
            inflation_rate=inflation_rate,
        )
        portfolio.add_asset(asset, key=symbol)

    portfolio.record_value()

    logger.info(f"成功创建投资组合 '{name}'，包含 {len(portfolio)} 个资产，初始资金: {capital:,.2f}")
    return portfolio


def _fetch_prices(allocation: Mapping[str, float], price_source: PriceSource) -> Dict[str, float]:
    symbols = [price_symbol_for(symbol) for symbol in allocation if symbol != CASH_SYMBOL]
    try:
        return price_source.get_prices(symbols)
    except MarketDataError:
        raise
    except ValidationError as e:
        raise MarketDataError(
            "行情来源返回了无效价格",
            data_source=price_source.name,
            details={"error": str(e)},
        ) from e


def create_portfolio_from_profile(
    profile: InvestorProfile,
    price_source: PriceSource,
    config: Optional[AdvisorConfig] = None
) -> Portfolio:
    """
    从投资者画像创建投资组合。

    风险评分由风险偏好决定（低25、中50、高75），配置比例取该评分对应的理想配置，
    定投金额取画像中的每月定投金额。

    Args:
        profile: 投资者画像
        price_source: 行情来源
        config: 顾问配置，提供再平衡阈值、波动率阈值和无风险利率

    Returns:
        Portfolio: 投资组合
    """
    config = config or AdvisorConfig()

    risk_profile = RiskProfile(profile.risk_score, config.risk.volatility_threshold)
    allocation = risk_profile.ideal_allocation

    sip_plan = SIPPlan(
        monthly_amount=profile.monthly_investment,
        allocation=allocation,
        auto_invest=config.sip.auto_invest,
        investment_interval_days=config.sip.investment_interval_days,
    )

    return create_portfolio(
        allocation,
        _fetch_prices(allocation, price_source),
        profile.investment_capital,
        risk_profile=risk_profile,
        sip_plan=sip_plan,
        rebalancer=Rebalancer(config.rebalancing.threshold),
        interest_rate=price_source.get_interest_rate(DEFAULT_COUNTRY),
        inflation_rate=price_source.get_inflation_rate(DEFAULT_COUNTRY),
        risk_free_rate=config.risk.risk_free_rate,
        name=profile.name or "Default Portfolio",
    )


def create_portfolio_from_config(config: AdvisorConfig, price_source: PriceSource) -> Portfolio:
    """
    从顾问配置创建投资组合。

    风险评分取 config.risk.default_risk_score；定投配置为空时使用该评分的理想配置。

    Args:
        config: 顾问配置
        price_source: 行情来源

    Returns:
        Portfolio: 投资组合
    """
    risk_profile = RiskProfile(config.risk.default_risk_score, config.risk.volatility_threshold)
    allocation = config.sip.allocation or risk_profile.ideal_allocation

    sip_plan = SIPPlan(
        monthly_amount=config.sip.monthly_amount,
        allocation=allocation,
        auto_invest=config.sip.auto_invest,
        investment_interval_days=config.sip.investment_interval_days,
    )

    return create_portfolio(
        allocation,
        _fetch_prices(allocation, price_source),
        config.initial_capital,
        risk_profile=risk_profile,
        sip_plan=sip_plan,
        rebalancer=Rebalancer(config.rebalancing.threshold),
        interest_rate=price_source.get_interest_rate(DEFAULT_COUNTRY),
        inflation_rate=price_source.get_inflation_rate(DEFAULT_COUNTRY),
        risk_free_rate=config.risk.risk_free_rate,
    )


__all__ = [
    "SIP_FUND_NAME",
    "SIP_FUND_SYMBOL",
    "BITCOIN_MARKET_CAP",
    "CASH_SYMBOL",
    "PRICE_SYMBOLS",
    "price_symbol_for",
    "create_asset",
    "create_portfolio",
    "create_portfolio_from_profile",
    "create_portfolio_from_config",
]
