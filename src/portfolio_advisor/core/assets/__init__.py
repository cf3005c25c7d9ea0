"""
Portfolio Advisor 资产模块。

主要组件：
- Asset: 资产抽象基类，定义买卖、价格更新、收益和波动率计算
- SIP: 定投基金
- Forex: 外汇货币对
- Cryptocurrency: 加密货币
- Commodity: 商品（黄金）
- FiatCurrency: 法币
- GenericAsset: 无附加规则的普通资产
"""

from .base import (
    PricePoint,
    AnalysisRule,
    RuleSet,
    BASE_ANALYSIS_RULES,
    Asset,
    GenericAsset
)
from .sip import SIP
from .forex import Forex, Trend
from .crypto import Cryptocurrency
from .commodity import Commodity
from .fiat import FiatCurrency

__all__ = [
    # 基础类
    'PricePoint',
    'AnalysisRule',
    'RuleSet',
    'BASE_ANALYSIS_RULES',
    'Asset',
    'GenericAsset',

    # 资产类型
    'SIP',
    'Forex',
    'Trend',
    'Cryptocurrency',
    'Commodity',
    'FiatCurrency'
]
