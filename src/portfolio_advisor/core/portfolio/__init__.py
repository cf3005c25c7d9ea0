"""
Portfolio Advisor 投资组合管理模块。

这个模块提供了完整的投资组合管理功能，包括：
1. 拥有全部资产的投资组合和估值历史
2. 风险评分到理想配置的映射及市场条件调整
3. 带死区的再平衡指令计算
4. 定投计划
5. 工厂函数，支持从配置比例、投资者画像或配置文件创建投资组合

主要组件：
- Portfolio: 投资组合
- RiskProfile: 风险画像，保存风险评分和理想配置
- Rebalancer: 再平衡计算器
- SIPPlan: 定投计划
- InvestorProfile: 投资者画像

使用示例：
    from portfolio_advisor.core.portfolio import create_portfolio

    portfolio = create_portfolio(
        allocation={'SIP': 60, 'USD': 20, 'XAU/USD': 10, 'EUR/USD': 5, 'BTC': 5},
        prices={'VTI': 200, 'XAU/USD': 1800, 'EUR/USD': 1.1, 'BTC': 40000},
        capital=10000,
    )
    portfolio.update_prices({'BTC': 42000, 'EUR/USD': 1.12})
    portfolio.apply_rebalancing(portfolio.recommend_rebalancing())
"""

# 基础类和数据结构
from .base import ValueSnapshot, Portfolio

# 风险评分
from .risk import (
    RiskTier,
    RISK_TIERS,
    RiskProfile,
    calculate_portfolio_volatility,
    calculate_risk_adjusted_return
)

# 再平衡
from .rebalancing import TradeDirection, RebalancingInstruction, Rebalancer

# 定投计划
from .sip import SIPPlan

# 投资者画像
from .profile import (
    RiskAppetite,
    InvestmentGoal,
    TimeHorizon,
    InvestorProfile,
    risk_score_for_appetite
)

# 工厂函数
from .factory import (
    create_asset,
    create_portfolio,
    create_portfolio_from_profile,
    create_portfolio_from_config
)

# 导出列表
__all__ = [
    # 基础类
    'ValueSnapshot',
    'Portfolio',

    # 风险评分
    'RiskTier',
    'RISK_TIERS',
    'RiskProfile',
    'calculate_portfolio_volatility',
    'calculate_risk_adjusted_return',

    # 再平衡
    'TradeDirection',
    'RebalancingInstruction',
    'Rebalancer',

    # 定投计划
    'SIPPlan',

    # 投资者画像
    'RiskAppetite',
    'InvestmentGoal',
    'TimeHorizon',
    'InvestorProfile',
    'risk_score_for_appetite',

    # 工厂函数
    'create_asset',
    'create_portfolio',
    'create_portfolio_from_profile',
    'create_portfolio_from_config'
]
