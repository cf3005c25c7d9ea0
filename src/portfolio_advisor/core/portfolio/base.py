"""
投资组合模块。

本模块定义了拥有全部资产的 Portfolio 类及其估值快照。

目的：
    Portfolio 独占持有一组资产（键为资产代码），记录估值历史，
    并把风险画像、再平衡计算器和定投计划组合在一起：
    价格快照 → 资产追加观测并重算波动率 → 风险画像给出理想配置 →
    再平衡计算器比较当前配置和理想配置 → 调用方执行买卖指令。

实现方案：
    1. ValueSnapshot 数据类记录一次估值事件（时间、总市值），只追加
    2. 所有修改状态的操作在同一个可重入锁内完成，保证单次操作的原子性
    3. 价格快照在进入任何资产之前统一验证，快照中的未知代码被忽略
    4. 查询不存在的资产返回 None / False / 0.0，不抛出异常

使用方法：
    portfolio = Portfolio(initial_investment=10000)
    portfolio.add_asset(Cryptocurrency("Bitcoin", "BTC", 40000, 1e12, quantity=0.1))
    portfolio.update_prices({"BTC": 42000})
    portfolio.apply_rebalancing(portfolio.recommend_rebalancing())
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from ...utils.exceptions import PortfolioError
from ...utils.logger import get_logger
from ...utils.validation import Validator, validate_price_snapshot
from ..assets.base import Asset
from .rebalancing import Rebalancer, RebalancingInstruction
from .risk import (
    DEFAULT_RISK_FREE_RATE,
    RiskProfile,
    calculate_portfolio_volatility,
    calculate_risk_adjusted_return,
)
from .sip import SIPPlan

logger = get_logger(__name__)


@dataclass(frozen=True)
class ValueSnapshot:
    """投资组合估值快照。

    属性说明：
        timestamp: 估值时间
        total_value: 当时的组合总市值
    """
    timestamp: datetime
    total_value: float


class Portfolio:
    """投资组合。

    目的：
        管理资产注册表、估值历史以及与风险画像、再平衡、定投计划的协作。

    主要功能：
        1. 资产管理：add_asset / remove_asset / get_asset
        2. 价格更新：update_prices 接收已验证的价格快照
        3. 交易：buy / sell / apply_rebalancing / execute_sip_investment
        4. 指标：总市值、总收益率、配置比例、组合波动率、风险调整收益

    属性说明：
        name: 组合名称
        initial_investment: 创建时的初始投入，之后不再变化
        risk_profile: 风险画像
        sip_plan: 定投计划
        rebalancer: 再平衡计算器
        risk_free_rate: 计算风险调整收益时使用的无风险利率（百分比）
        last_rebalance_date: 最近一次执行再平衡的时间
    """

    def __init__(
        self,
        initial_investment: float,
        risk_profile: Optional[RiskProfile] = None,
        sip_plan: Optional[SIPPlan] = None,
        rebalancer: Optional[Rebalancer] = None,
        risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
        name: str = "Default Portfolio"
    ):
        self.name = name
        self.initial_investment = Validator.validate_numeric(
            initial_investment, field="initial_investment", min_value=0.0
        )
        self.risk_profile = risk_profile or RiskProfile()
        self.sip_plan = sip_plan or SIPPlan()
        self.rebalancer = rebalancer or Rebalancer()
        self.risk_free_rate = risk_free_rate
        self.created_date = datetime.now()
        self.last_rebalance_date: Optional[datetime] = None

        self._assets: Dict[str, Asset] = {}
        self._lock = threading.RLock()
        self.historical_values: List[ValueSnapshot] = [
            ValueSnapshot(self.created_date, self.initial_investment)
        ]

        logger.info(f"Initialized portfolio '{name}' with {self.initial_investment:,.2f}")

    # ------------------------------------------------------------------
    # 资产注册表
    # ------------------------------------------------------------------

    @property
    def assets(self) -> Dict[str, Asset]:
        """资产注册表的浅拷贝，键为资产代码。"""
        with self._lock:
            return dict(self._assets)

    @property
    def symbols(self) -> List[str]:
        with self._lock:
            return list(self._assets)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._assets

    def __len__(self) -> int:
        return len(self._assets)

    def add_asset(self, asset: Asset, key: Optional[str] = None) -> str:
        """
        添加资产。

        Args:
            asset: 资产
            key: 注册表中的代码，默认使用 asset.symbol

        Returns:
            str: 实际使用的代码

        Raises:
            PortfolioError: 代码已存在
        """
        key = Validator.validate_symbol(key if key is not None else asset.symbol, field="key")

        with self._lock:
            if key in self._assets:
                raise PortfolioError(
                    f"资产代码已存在: {key}",
                    portfolio=self.name,
                    symbol=key,
                    operation="add_asset",
                )
            self._assets[key] = asset

        logger.info(f"Added {asset.ASSET_TYPE} asset {key} ({asset.name}) to '{self.name}'")
        return key

    def remove_asset(self, symbol: str) -> bool:
        """移除资产，代码不存在时返回 False。"""
        with self._lock:
            if symbol not in self._assets:
                logger.warning(f"Cannot remove {symbol}: not in portfolio '{self.name}'")
                return False
            del self._assets[symbol]

        logger.info(f"Removed {symbol} from '{self.name}'")
        return True

    def get_asset(self, symbol: str) -> Optional[Asset]:
        """按代码查找资产，不存在时返回 None。"""
        with self._lock:
            return self._assets.get(symbol)

    # ------------------------------------------------------------------
    # 价格与交易
    # ------------------------------------------------------------------

    def update_prices(
        self,
        prices: Dict[str, float],
        timestamp: Optional[datetime] = None
    ) -> List[str]:
        """
        用价格快照更新资产价格并记录一次估值。

        先按注册表代码查找价格，找不到时再按资产自身代码查找
        （例如注册为 'SIP' 的资产自身代码是 'VTI'）。快照中的其他代码被忽略。

        Args:
            prices: 资产代码到价格的映射
            timestamp: 观测时间，默认为当前时间

        Returns:
            List[str]: 价格被更新的注册表代码

        Raises:
            ValidationError: 快照中含有非数值或非正价格，此时不更新任何资产
        """
        validated = validate_price_snapshot(prices)
        timestamp = timestamp or datetime.now()

        updated = []
        with self._lock:
            for key, asset in self._assets.items():
                price = validated.get(key, validated.get(asset.symbol))
                if price is None:
                    continue
                asset.update_current_price(price, timestamp=timestamp)
                updated.append(key)

            ignored = set(validated) - set(self._assets) - {a.symbol for a in self._assets.values()}
            if ignored:
                logger.debug(f"Ignoring prices for unknown symbols: {sorted(ignored)}")

            self.record_value(timestamp)

        logger.debug(f"Updated prices for {len(updated)} asset(s) in '{self.name}'")
        return updated

    def buy(self, symbol: str, amount: float) -> float:
        """
        按金额买入指定资产。

        Returns:
            float: 买入数量，资产不存在时为 0.0

        Raises:
            ValidationError: 金额为负数
        """
        with self._lock:
            asset = self._assets.get(symbol)
            if asset is None:
                logger.warning(f"Cannot buy {symbol}: not in portfolio '{self.name}'")
                return 0.0
            return asset.buy(amount)

    def sell(self, symbol: str, percentage: float) -> float:
        """
        按持仓百分比卖出指定资产。

        Returns:
            float: 卖出所得，资产不存在或百分比超出 (0, 100] 时为 0.0
        """
        with self._lock:
            asset = self._assets.get(symbol)
            if asset is None:
                logger.warning(f"Cannot sell {symbol}: not in portfolio '{self.name}'")
                return 0.0
            return asset.sell(percentage)

    # ------------------------------------------------------------------
    # 指标
    # ------------------------------------------------------------------

    def get_total_value(self) -> float:
        with self._lock:
            return sum(asset.current_value for asset in self._assets.values())

    def get_total_return_percentage(self) -> float:
        """相对初始投入的总收益率，初始投入不大于0时返回 0.0。"""
        if self.initial_investment <= 0:
            return 0.0
        return (self.get_total_value() - self.initial_investment) / self.initial_investment * 100.0

    def get_composition(self) -> Dict[str, float]:
        """
        当前配置比例。

        Returns:
            Dict[str, float]: 资产代码到市值占比（百分比），总市值不大于0时为空字典
        """
        with self._lock:
            total_value = self.get_total_value()
            if total_value <= 0:
                return {}
            return {
                symbol: asset.current_value / total_value * 100.0
                for symbol, asset in self._assets.items()
            }

    def get_portfolio_volatility(self) -> float:
        with self._lock:
            return calculate_portfolio_volatility(self._assets)

    def get_risk_adjusted_return(self, risk_free_rate: Optional[float] = None) -> float:
        rate = self.risk_free_rate if risk_free_rate is None else risk_free_rate
        with self._lock:
            return calculate_risk_adjusted_return(self._assets, risk_free_rate=rate)

    def get_too_volatile_assets(self) -> List[str]:
        """波动率超过风险画像阈值的资产代码。"""
        with self._lock:
            return [
                symbol for symbol, asset in self._assets.items()
                if self.risk_profile.is_asset_too_volatile(asset)
            ]

    # ------------------------------------------------------------------
    # 再平衡与定投
    # ------------------------------------------------------------------

    def recommend_rebalancing(self) -> List[RebalancingInstruction]:
        """
        比较当前配置和风险画像的理想配置，生成再平衡指令。

        组合总市值不大于0时没有可比较的配置，返回空列表。
        """
        with self._lock:
            total_value = self.get_total_value()
            if total_value <= 0:
                logger.debug(f"Portfolio '{self.name}' has no value. Skipping rebalancing")
                return []

            return self.rebalancer.recommend(
                self.get_composition(),
                self.risk_profile.ideal_allocation,
                total_value,
            )

    def apply_rebalancing(
        self,
        instructions: Optional[Iterable[RebalancingInstruction]] = None
    ) -> List[RebalancingInstruction]:
        """
        执行再平衡指令。

        BUY 指令按金额买入，SELL 指令按持仓百分比卖出。
        组合中不存在的代码被跳过并记录警告。执行后记录再平衡时间和一次估值。

        Args:
            instructions: 再平衡指令，默认使用 recommend_rebalancing() 的结果

        Returns:
            List[RebalancingInstruction]: 实际执行的指令
        """
        with self._lock:
            if instructions is None:
                instructions = self.recommend_rebalancing()
            instructions = list(instructions)

            if not instructions:
                logger.info(f"Portfolio '{self.name}' is well-balanced. No rebalancing needed")
                return []

            applied = []
            for instruction in instructions:
                asset = self._assets.get(instruction.symbol)
                if asset is None:
                    logger.warning(f"Skipping rebalancing of {instruction.symbol}: not in portfolio")
                    continue

                if instruction.is_buy:
                    asset.buy(instruction.amount)
                else:
                    asset.sell(instruction.sell_percentage)
                applied.append(instruction)

                logger.info(
                    f"Rebalance {instruction.direction.value} {instruction.symbol}: "
                    f"{instruction.value:,.2f} (deviation {instruction.deviation:+.1f}%)"
                )

            self.last_rebalance_date = datetime.now()
            self.record_value(self.last_rebalance_date)

        return applied

    def execute_sip_investment(
        self,
        force: bool = False,
        now: Optional[datetime] = None
    ) -> Dict[str, float]:
        """
        执行定投计划。

        自动定投关闭且未强制时不做任何事。否则按定投计划拆分金额，
        买入组合中存在的资产，然后记录一次估值。

        Returns:
            Dict[str, float]: 实际买入的资产代码到金额
        """
        with self._lock:
            if not self.sip_plan.auto_invest and not force:
                logger.debug("SIP auto-invest disabled, skipping")
                return {}

            executed = {}
            for symbol, amount in self.sip_plan.execute_investment(force=force, now=now).items():
                asset = self._assets.get(symbol)
                if asset is None or amount <= 0:
                    continue
                asset.buy(amount)
                executed[symbol] = amount
                logger.info(f"SIP Investment: Bought {amount:,.2f} worth of {symbol}")

            self.record_value(now)

        return executed

    # ------------------------------------------------------------------
    # 估值历史与报告
    # ------------------------------------------------------------------

    def record_value(self, timestamp: Optional[datetime] = None) -> ValueSnapshot:
        """记录一次估值快照。"""
        with self._lock:
            snapshot = ValueSnapshot(timestamp or datetime.now(), self.get_total_value())
            self.historical_values.append(snapshot)
        return snapshot

    def get_value_history(self) -> pd.DataFrame:
        """
        估值历史。

        Returns:
            pd.DataFrame: 以时间为索引，列为 total_value
        """
        with self._lock:
            snapshots = list(self.historical_values)

        return pd.DataFrame(
            {"total_value": [snapshot.total_value for snapshot in snapshots]},
            index=pd.DatetimeIndex([snapshot.timestamp for snapshot in snapshots], name="timestamp"),
        )

    def get_metrics(self) -> Dict[str, Any]:
        """供报告层使用的组合指标。"""
        with self._lock:
            total_value = self.get_total_value()
            return {
                "total_value": total_value,
                "initial_investment": self.initial_investment,
                "gain_loss": total_value - self.initial_investment,
                "total_return_percentage": self.get_total_return_percentage(),
                "portfolio_volatility": self.get_portfolio_volatility(),
                "risk_adjusted_return": self.get_risk_adjusted_return(),
                "composition": self.get_composition(),
                "last_rebalance_date": self.last_rebalance_date,
            }

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            metrics = self.get_metrics()
            if metrics["last_rebalance_date"] is not None:
                metrics["last_rebalance_date"] = metrics["last_rebalance_date"].isoformat()
            return {
                "name": self.name,
                "metrics": metrics,
                "assets": {symbol: asset.to_dict() for symbol, asset in self._assets.items()},
                "risk_profile": self.risk_profile.to_dict(),
                "sip_plan": self.sip_plan.to_dict(),
                "historical_values": [
                    {"timestamp": s.timestamp.isoformat(), "total_value": s.total_value}
                    for s in self.historical_values
                ],
            }

    def __repr__(self) -> str:
        return f"Portfolio(name={self.name!r}, assets={len(self._assets)})"


__all__ = [
    "ValueSnapshot",
    "Portfolio",
]
