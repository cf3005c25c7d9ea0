"""
模拟行情来源。

目的：
    在没有网络行情的情况下为演示和测试提供价格。每个资产从基准价格出发做随机游走，
    每次取价都在上一次价格的基础上乘以 (1 + ε)，ε 服从 N(0, volatility_factor)。

实现方案：
    1. 使用 numpy 的 Generator，传入 seed 时结果可复现
    2. 未知资产的基准价格为 100
    3. 通胀率和利率来自固定表，未知国家使用默认值
    4. VIX 与普通资产一样做随机游走

使用方法：
    source = SimulatedPriceSource(seed=42)
    source.get_prices(["BTC", "EUR/USD"])
"""

from typing import Dict, Optional

import numpy as np

from ...utils.config import MarketDataConfig
from ...utils.logger import get_logger
from ...utils.validation import Validator
from ..base import DEFAULT_COUNTRY, PriceSource

logger = get_logger(__name__)

BASE_PRICES: Dict[str, float] = {
    "BTC": 40000.0,
    "ETH": 2000.0,
    "EUR/USD": 1.10,
    "USD/INR": 75.0,
    "GBP/USD": 1.35,
    "XAU/USD": 1800.0,
    "USD": 1.0,
    "VTI": 200.0,
    "VOO": 380.0,
}
DEFAULT_BASE_PRICE = 100.0

INFLATION_RATES: Dict[str, float] = {
    "US": 2.5,
    "EU": 2.0,
    "UK": 3.0,
    "IN": 5.5,
    "JP": 0.5,
}
DEFAULT_INFLATION_RATE = 2.0

INTEREST_RATES: Dict[str, float] = {
    "US": 0.5,
    "EU": 0.0,
    "UK": 0.75,
    "IN": 4.5,
    "JP": -0.1,
}
DEFAULT_INTEREST_RATE = 0.5

# 单次冲击后价格相对上一次价格的最低比例，保证价格始终为正
MIN_PRICE_RATIO = 0.01


class SimulatedPriceSource(PriceSource):
    """基于正态冲击的模拟行情来源。"""

    def __init__(
        self,
        seed: Optional[int] = None,
        volatility_factor: float = 0.02,
        base_prices: Optional[Dict[str, float]] = None,
    ):
        """
        初始化模拟行情来源。

        Args:
            seed: 随机种子，None 表示不固定
            volatility_factor: 单次冲击的标准差，默认0.02
            base_prices: 覆盖默认基准价格
        """
        super().__init__("simulated")
        self.volatility_factor = Validator.validate_numeric(
            volatility_factor, field="volatility_factor", min_value=0.0
        )
        self.base_prices = dict(BASE_PRICES)
        if base_prices:
            self.base_prices.update(base_prices)

        self._rng = np.random.default_rng(seed)
        self._last_prices: Dict[str, float] = {}

    @classmethod
    def from_config(cls, config: MarketDataConfig) -> "SimulatedPriceSource":
        return cls(seed=config.seed, volatility_factor=config.volatility_factor)

    def simulate_volatility(self, base_price: float) -> float:
        """对价格施加一次正态冲击。"""
        shock = self._rng.normal(0.0, self.volatility_factor)
        return base_price * max(1.0 + shock, MIN_PRICE_RATIO)

    def get_price(self, symbol: str) -> float:
        """
        获取模拟价格。

        第一次取价以基准价格为起点，之后以上一次价格为起点。
        """
        start = self._last_prices.get(symbol, self.base_prices.get(symbol, DEFAULT_BASE_PRICE))
        price = self.simulate_volatility(start)
        self._last_prices[symbol] = price

        logger.debug(f"Simulated price for {symbol}: {price:,.4f}")
        return price

    def get_vix(self) -> float:
        return self.get_price("VIX")

    def get_inflation_rate(self, country: str = DEFAULT_COUNTRY) -> float:
        return INFLATION_RATES.get(country, DEFAULT_INFLATION_RATE)

    def get_interest_rate(self, country: str = DEFAULT_COUNTRY) -> float:
        return INTEREST_RATES.get(country, DEFAULT_INTEREST_RATE)


__all__ = [
    "BASE_PRICES",
    "INFLATION_RATES",
    "INTEREST_RATES",
    "SimulatedPriceSource",
]
