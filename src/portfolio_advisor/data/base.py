"""
Portfolio Advisor 行情来源基类。

这个模块定义了价格和经济指标来源的抽象基类。核心模块只消费价格快照，
不关心价格来自实时接口、缓存还是模拟生成器。
"""

import abc
from typing import Dict, Iterable, Mapping, Optional

from ..utils.exceptions import MarketDataError
from ..utils.logger import logger
from ..utils.validation import validate_price_snapshot

DEFAULT_COUNTRY = "US"


class PriceSource(abc.ABC):
    """行情来源抽象基类。"""

    def __init__(self, name: str):
        self.name = name
        logger.info(f"初始化行情来源: {name}")

    @abc.abstractmethod
    def get_price(self, symbol: str) -> float:
        """
        获取单个资产的价格。

        Args:
            symbol: 资产代码

        Returns:
            float: 价格，必须大于0

        Raises:
            MarketDataError: 无法获取价格
        """

    def get_prices(self, symbols: Iterable[str]) -> Dict[str, float]:
        """
        获取一组资产的价格快照。

        Args:
            symbols: 资产代码

        Returns:
            Dict[str, float]: 已验证的价格快照
        """
        return validate_price_snapshot({symbol: self.get_price(symbol) for symbol in symbols})

    @abc.abstractmethod
    def get_vix(self) -> float:
        """获取市场波动率指数。"""

    @abc.abstractmethod
    def get_inflation_rate(self, country: str = DEFAULT_COUNTRY) -> float:
        """获取通胀率（百分比）。"""

    @abc.abstractmethod
    def get_interest_rate(self, country: str = DEFAULT_COUNTRY) -> float:
        """获取利率（百分比）。"""


class StaticPriceSource(PriceSource):
    """固定价格快照来源，适合测试和离线计算。"""

    def __init__(
        self,
        prices: Mapping[str, float],
        vix: float = 20.0,
        inflation_rates: Optional[Mapping[str, float]] = None,
        interest_rates: Optional[Mapping[str, float]] = None,
        name: str = "static",
    ):
        """
        初始化固定价格来源。

        Args:
            prices: 资产代码到价格的映射
            vix: 市场波动率指数
            inflation_rates: 国家到通胀率的映射，缺失国家返回0
            interest_rates: 国家到利率的映射，缺失国家返回0
            name: 来源名称
        """
        super().__init__(name)
        self._prices = validate_price_snapshot(prices)
        self._vix = vix
        self._inflation_rates = dict(inflation_rates or {})
        self._interest_rates = dict(interest_rates or {})

    def get_price(self, symbol: str) -> float:
        if symbol not in self._prices:
            raise MarketDataError(
                f"没有该资产的价格: {symbol}",
                data_source=self.name,
                symbol=symbol,
            )
        return self._prices[symbol]

    def set_price(self, symbol: str, price: float) -> None:
        """替换单个资产的价格。"""
        self._prices.update(validate_price_snapshot({symbol: price}))

    def get_vix(self) -> float:
        return self._vix

    def get_inflation_rate(self, country: str = DEFAULT_COUNTRY) -> float:
        return self._inflation_rates.get(country, 0.0)

    def get_interest_rate(self, country: str = DEFAULT_COUNTRY) -> float:
        return self._interest_rates.get(country, 0.0)


__all__ = [
    "DEFAULT_COUNTRY",
    "PriceSource",
    "StaticPriceSource",
]
