"""
定投计划模块。

SIPPlan 保存每月定投金额、定投配置比例、上次定投时间和自动定投开关，
按配置把每月金额拆分到各个资产。配置比例合计不为100时按比例归一化并记录警告。
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional

from ...utils.logger import get_logger
from ...utils.validation import Validator, normalize_allocation
from ..analytics.growth import sip_future_value

logger = get_logger(__name__)

DEFAULT_INVESTMENT_INTERVAL_DAYS = 30


class SIPPlan:
    """定投计划。

    属性说明：
        monthly_amount: 每月定投金额，不小于0
        allocation: 定投配置比例，非空时合计为100
        last_investment_date: 上次定投时间，创建时为当前时间
        auto_invest: 是否自动定投
        investment_interval_days: 两次定投之间的天数，默认30（按30天近似一个月）
    """

    def __init__(
        self,
        monthly_amount: float = 0.0,
        allocation: Optional[Mapping[str, float]] = None,
        auto_invest: bool = True,
        investment_interval_days: int = DEFAULT_INVESTMENT_INTERVAL_DAYS,
        last_investment_date: Optional[datetime] = None
    ):
        self.monthly_amount = 0.0
        self.allocation: Dict[str, float] = {}
        self.auto_invest = auto_invest
        self.investment_interval_days = int(
            Validator.validate_numeric(
                investment_interval_days, field="investment_interval_days", min_value=1
            )
        )
        self.last_investment_date = last_investment_date or datetime.now()

        self.set_monthly_amount(monthly_amount)
        if allocation:
            self.set_allocation(allocation)

    def set_monthly_amount(self, amount: float) -> None:
        """
        设置每月定投金额。

        Raises:
            ValidationError: 金额为负数或不是有效数值
        """
        self.monthly_amount = Validator.validate_numeric(amount, field="monthly_amount", min_value=0.0)

    def set_allocation(self, allocation: Mapping[str, float]) -> Dict[str, float]:
        """
        设置定投配置比例。

        合计与100相差超过0.01时按原比例缩放到100。

        Args:
            allocation: 资产代码到百分比的映射

        Returns:
            Dict[str, float]: 实际使用的配置

        Raises:
            ValidationError: 含有负数比例，或比例之和为0
        """
        self.allocation = normalize_allocation(allocation)
        logger.debug(f"SIP allocation set for {len(self.allocation)} symbol(s)")
        return dict(self.allocation)

    def is_time_for_investment(self, now: Optional[datetime] = None) -> bool:
        """距上次定投是否已满一个定投周期。"""
        now = now or datetime.now()
        return now - self.last_investment_date >= timedelta(days=self.investment_interval_days)

    def execute_investment(
        self,
        force: bool = False,
        now: Optional[datetime] = None
    ) -> Dict[str, float]:
        """
        执行一次定投，按配置拆分金额。

        Args:
            force: 为 True 时忽略定投周期
            now: 当前时间，默认 datetime.now()

        Returns:
            Dict[str, float]: 资产代码到投入金额；未到定投时间时为空字典
        """
        now = now or datetime.now()
        if not force and not self.is_time_for_investment(now):
            logger.debug("SIP investment skipped: interval not reached")
            return {}

        investments = {
            symbol: self.monthly_amount * percentage / 100.0
            for symbol, percentage in self.allocation.items()
        }
        self.last_investment_date = now

        logger.info(f"SIP investment of {self.monthly_amount:,.2f} split across {len(investments)} symbol(s)")
        return investments

    def simulate_investments(self, months: int) -> Dict[str, List[float]]:
        """
        模拟连续若干个月的定投。

        每个月都强制执行一次定投，会更新 last_investment_date。

        Returns:
            Dict[str, List[float]]: 资产代码到每月投入金额列表
        """
        simulated: Dict[str, List[float]] = {}
        for _ in range(months):
            for symbol, amount in self.execute_investment(force=True).items():
                simulated.setdefault(symbol, []).append(amount)
        return simulated

    def calculate_projected_growth(self, months: int, annual_rate: float) -> float:
        """按期初年金公式预测定投价值。"""
        return sip_future_value(self.monthly_amount, annual_rate, months)

    def toggle_auto_invest(self) -> bool:
        """切换自动定投开关，返回切换后的状态。"""
        self.auto_invest = not self.auto_invest
        logger.info(f"SIP auto-invest {'enabled' if self.auto_invest else 'disabled'}")
        return self.auto_invest

    def to_dict(self) -> Dict[str, Any]:
        return {
            "monthly_amount": self.monthly_amount,
            "allocation": dict(self.allocation),
            "auto_invest": self.auto_invest,
            "investment_interval_days": self.investment_interval_days,
            "last_investment_date": self.last_investment_date.isoformat(),
        }


__all__ = [
    "DEFAULT_INVESTMENT_INTERVAL_DAYS",
    "SIPPlan",
]
