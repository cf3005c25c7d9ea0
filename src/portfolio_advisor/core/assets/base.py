"""
资产基础类模块。

本模块定义了投资组合中各类金融资产共享的抽象基类及相关数据结构。

目的：
    提供资产的统一契约：身份（名称、代码）、当前价格、持有数量、累计成本、
    只追加的价格观测序列，以及由该序列派生的波动率。
    各类资产（定投基金、外汇、加密货币、商品、法币）在此基础上扩展自己的字段、
    分析规则和价格更新钩子。

实现方案：
    1. PricePoint 数据类封装一次价格观测，创建后不可修改
    2. AnalysisRule / RuleSet 以声明式规则表描述分析文字，
       阈值集中在表中，便于独立测试和跨资产复用
    3. Asset 抽象基类实现买入、卖出、价格更新和收益计算，
       每次追加价格观测都会立即重新计算波动率
    4. 子类通过 ANALYSIS_RULES、_variant_fields() 和 _on_price_update() 定制行为

使用方法：
    1. 继承 Asset 并实现 _variant_fields()
    2. 在 ANALYSIS_RULES 中声明该类资产的附加分析规则
    3. 需要在价格更新后重新计算派生状态时覆盖 _on_price_update()
"""

import abc
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pandas as pd

from ...utils.exceptions import ValidationError
from ...utils.formatting import format_decimal
from ...utils.logger import get_logger
from ...utils.validation import Validator
from ..analytics.volatility import calculate_volatility, percent_change

logger = get_logger(__name__)

# 波动率分档阈值（百分比）
LOW_VOLATILITY_THRESHOLD = 5.0
MEDIUM_VOLATILITY_THRESHOLD = 15.0


@dataclass(frozen=True)
class PricePoint:
    """单次价格观测。

    属性说明：
        timestamp: 观测时间
        price: 观测价格
    """
    timestamp: datetime
    price: float


@dataclass(frozen=True)
class AnalysisRule:
    """分析规则。

    属性说明：
        condition: 判断规则是否适用的函数，参数为资产
        message: 规则适用时输出的文字，可以是固定字符串或以资产为参数的函数
    """
    condition: Callable[[Any], bool]
    message: Union[str, Callable[[Any], str]]

    def applies(self, asset: "Asset") -> bool:
        return bool(self.condition(asset))

    def render(self, asset: "Asset") -> str:
        if callable(self.message):
            return self.message(asset)
        return self.message


@dataclass(frozen=True)
class RuleSet:
    """一组分析规则。

    属性说明：
        rules: 按顺序排列的规则
        first_match: 为 True 时只输出第一条适用规则（分档判断），
            否则输出所有适用规则
    """
    rules: Tuple[AnalysisRule, ...]
    first_match: bool = False

    def evaluate(self, asset: "Asset") -> List[str]:
        messages = []
        for rule in self.rules:
            if rule.applies(asset):
                messages.append(rule.render(asset))
                if self.first_match:
                    break
        return messages


def _always(asset: "Asset") -> bool:
    return True


# 所有资产共享的分析规则
PRICE_CHANGE_RULES = RuleSet(rules=(
    AnalysisRule(
        condition=lambda a: a.has_price_trend,
        message=lambda a: (
            f"Price change since tracking: {format_decimal(a.price_change_since_tracking)}%"
        ),
    ),
))

PRICE_TREND_RULES = RuleSet(first_match=True, rules=(
    AnalysisRule(
        condition=lambda a: a.has_price_trend and a.price_change_since_tracking > 0,
        message="The price has increased since tracking began.",
    ),
    AnalysisRule(
        condition=lambda a: a.has_price_trend and a.price_change_since_tracking < 0,
        message="The price has decreased since tracking began.",
    ),
    AnalysisRule(
        condition=lambda a: a.has_price_trend,
        message="The price remains stable since tracking began.",
    ),
))

VOLATILITY_TIER_RULES = RuleSet(first_match=True, rules=(
    AnalysisRule(
        condition=lambda a: a.volatility < LOW_VOLATILITY_THRESHOLD,
        message="Low volatility: This asset has been stable recently.",
    ),
    AnalysisRule(
        condition=lambda a: a.volatility < MEDIUM_VOLATILITY_THRESHOLD,
        message="Medium volatility: This asset shows moderate price movements.",
    ),
    AnalysisRule(
        condition=_always,
        message="High volatility: This asset has significant price fluctuations.",
    ),
))

BASE_ANALYSIS_RULES: Tuple[RuleSet, ...] = (
    PRICE_CHANGE_RULES,
    PRICE_TREND_RULES,
    VOLATILITY_TIER_RULES,
)


class Asset(abc.ABC):
    """投资组合资产抽象基类。

    目的：
        定义所有资产共享的数据和操作，包括买卖、价格更新、收益与波动率计算以及规则化分析。

    主要功能：
        1. buy/sell：按金额买入、按百分比卖出，并同步调整累计成本
        2. update_current_price：更新价格、追加观测、重新计算波动率并调用子类钩子
        3. get_return_percentage：基于累计成本计算收益率
        4. get_analysis：按规则表生成分析文字

    使用方法：
        继承此类并实现 _variant_fields()，在 ANALYSIS_RULES 中声明附加规则。
    """

    #: 资产类别名称，子类覆盖
    ASSET_TYPE = "asset"

    #: 子类附加的分析规则，在基础规则之后评估
    ANALYSIS_RULES: Tuple[RuleSet, ...] = ()

    def __init__(
        self,
        name: str,
        symbol: str,
        current_price: float,
        quantity: float = 0.0
    ):
        """初始化资产。

        参数说明：
            name: 资产名称（如 'Bitcoin'）
            symbol: 资产代码（如 'BTC'），在一个投资组合内唯一
            current_price: 当前价格，必须大于0
            quantity: 初始持有数量，默认0

        实现方案：
            累计成本初始化为 current_price × quantity，
            并把当前价格作为第一条价格观测写入历史。
        """
        self.name = name
        self.symbol = Validator.validate_symbol(symbol)
        self.current_price = Validator.validate_positive(current_price, field="current_price")
        self.quantity = Validator.validate_numeric(quantity, field="quantity", min_value=0.0)
        self.initial_investment = self.current_price * self.quantity

        self._price_history: List[PricePoint] = [PricePoint(datetime.now(), self.current_price)]
        self.volatility = 0.0

    # ------------------------------------------------------------------
    # 派生属性
    # ------------------------------------------------------------------

    @property
    def current_value(self) -> float:
        """当前市值（数量 × 当前价格）。"""
        return self.current_price * self.quantity

    @property
    def price_history(self) -> Tuple[PricePoint, ...]:
        """价格观测序列的只读视图。"""
        return tuple(self._price_history)

    @property
    def has_price_trend(self) -> bool:
        """至少有两次价格观测时才可以判断价格走势。"""
        return len(self._price_history) >= 2

    @property
    def price_change_since_tracking(self) -> float:
        """从第一次观测到最新观测的价格变化百分比。"""
        return percent_change(self._price_history[0].price, self._price_history[-1].price)

    def get_return_percentage(self) -> float:
        """
        计算收益率。

        Returns:
            float: (当前市值 - 累计成本) / 累计成本 × 100，累计成本为0时返回 0.0
        """
        if self.initial_investment == 0:
            return 0.0
        return (self.current_value - self.initial_investment) / self.initial_investment * 100.0

    # ------------------------------------------------------------------
    # 交易操作
    # ------------------------------------------------------------------

    def buy(self, amount: float) -> float:
        """
        按金额买入。

        Args:
            amount: 投入金额，0 表示不操作

        Returns:
            float: 本次买入的数量

        Raises:
            ValidationError: 金额为负数或不是有效数值
        """
        amount = Validator.validate_numeric(amount, field="amount")
        if amount < 0:
            raise ValidationError(
                "买入金额不能为负数",
                field="amount",
                value=amount,
                expected=">= 0",
            )
        if amount == 0:
            return 0.0

        additional_quantity = amount / self.current_price
        self.quantity += additional_quantity
        self.initial_investment += amount

        logger.debug(
            f"Bought {additional_quantity:.6f} {self.symbol} for {amount:,.2f} @ {self.current_price:,.4f}"
        )
        return additional_quantity

    def sell(self, percentage: float) -> float:
        """
        按持仓百分比卖出。

        仅当 0 < percentage <= 100 时执行；超出范围返回0且不修改任何状态。
        累计成本按卖出比例等比例减少。

        Args:
            percentage: 卖出比例（百分比）

        Returns:
            float: 卖出所得金额

        Raises:
            ValidationError: 如果 percentage 不是数值
        """
        percentage = Validator.validate_numeric(
            percentage, field="percentage", allow_nan=True, allow_inf=True
        )
        if not (0 < percentage <= 100):
            logger.debug(f"Ignoring sell of {percentage}% for {self.symbol}: out of range (0, 100]")
            return 0.0

        fraction = percentage / 100.0
        quantity_to_sell = self.quantity * fraction
        proceeds = quantity_to_sell * self.current_price

        self.quantity -= quantity_to_sell
        self.initial_investment *= (1.0 - fraction)

        logger.debug(f"Sold {percentage:.2f}% of {self.symbol} for {proceeds:,.2f}")
        return proceeds

    # ------------------------------------------------------------------
    # 价格更新
    # ------------------------------------------------------------------

    def add_price_point(self, timestamp: datetime, price: float) -> None:
        """
        追加一次价格观测并重新计算波动率。

        Args:
            timestamp: 观测时间
            price: 观测价格，必须大于0
        """
        price = Validator.validate_positive(price, field="price")
        self._price_history.append(PricePoint(timestamp, price))
        self.update_volatility()

    def update_current_price(self, new_price: float, timestamp: Optional[datetime] = None) -> None:
        """
        更新当前价格。

        设置当前价格，追加观测，重新计算波动率，然后调用子类的价格更新钩子。

        Args:
            new_price: 新价格，必须大于0
            timestamp: 观测时间，默认为当前时间

        Raises:
            ValidationError: 价格不是正数
        """
        new_price = Validator.validate_positive(new_price, field="new_price")
        self.current_price = new_price
        self.add_price_point(timestamp or datetime.now(), new_price)
        self._on_price_update()

    def update_volatility(self) -> float:
        """根据完整价格历史重新计算波动率。"""
        self.volatility = calculate_volatility([point.price for point in self._price_history])
        return self.volatility

    def _on_price_update(self) -> None:
        """价格更新后的子类钩子，默认不做任何事。"""

    # ------------------------------------------------------------------
    # 报告与分析
    # ------------------------------------------------------------------

    def get_analysis_lines(self) -> List[str]:
        """
        按规则表生成分析语句。

        Returns:
            List[str]: 先是基础规则，再是子类规则
        """
        lines = []
        for rule_set in BASE_ANALYSIS_RULES + self.ANALYSIS_RULES:
            lines.extend(rule_set.evaluate(self))
        return lines

    def get_analysis(self) -> str:
        """
        生成完整的分析文字。

        Returns:
            str: 以 'Analysis for 名称 (代码):' 开头，每条规则一行
        """
        analysis = f"Analysis for {self.name} ({self.symbol}):\n"
        for line in self.get_analysis_lines():
            analysis += f"  {line}\n"
        return analysis

    @abc.abstractmethod
    def _variant_fields(self) -> Dict[str, Any]:
        """子类特有的展示字段。"""

    def display_fields(self) -> Dict[str, Any]:
        """
        返回供报告层展示的字段。

        Returns:
            Dict[str, Any]: 基础字段加上子类特有字段
        """
        fields = {
            "name": self.name,
            "symbol": self.symbol,
            "asset_type": self.ASSET_TYPE,
            "price": self.current_price,
            "quantity": self.quantity,
            "current_value": self.current_value,
            "initial_investment": self.initial_investment,
            "return_percentage": self.get_return_percentage(),
            "volatility": self.volatility,
        }
        fields.update(self._variant_fields())
        return fields

    def price_history_series(self) -> pd.Series:
        """以时间为索引的价格序列。"""
        return pd.Series(
            [point.price for point in self._price_history],
            index=pd.DatetimeIndex([point.timestamp for point in self._price_history], name="timestamp"),
            name=self.symbol,
        )

    def to_dict(self) -> Dict[str, Any]:
        """序列化资产，时间转换为 ISO 格式字符串。"""
        data = self.display_fields()
        data["price_history"] = [
            {"timestamp": point.timestamp.isoformat(), "price": point.price}
            for point in self._price_history
        ]
        return data

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(symbol={self.symbol!r}, price={self.current_price}, "
            f"quantity={self.quantity})"
        )


class GenericAsset(Asset):
    """没有附加字段和规则的普通资产，用于无法识别类别的代码。"""

    ASSET_TYPE = "generic"

    def _variant_fields(self) -> Dict[str, Any]:
        return {}
