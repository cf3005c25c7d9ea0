"""
投资者画像模块。

投资者画像只保存创建投资组合所需的数据，交互式收集这些数据不在本包范围内。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from ...utils.exceptions import ValidationError


class RiskAppetite(Enum):
    """风险偏好。"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return f"{self.value.capitalize()} Risk"


class InvestmentGoal(Enum):
    """投资目标。"""

    WEALTH_GROWTH = "wealth_growth"
    STABILITY = "stability"
    HIGH_RETURNS = "high_returns"


class TimeHorizon(Enum):
    """投资期限。"""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


# 风险偏好到风险评分的映射
RISK_APPETITE_SCORES: Dict[RiskAppetite, float] = {
    RiskAppetite.LOW: 25.0,
    RiskAppetite.MEDIUM: 50.0,
    RiskAppetite.HIGH: 75.0,
}

TIME_HORIZON_LABELS: Dict[TimeHorizon, str] = {
    TimeHorizon.SHORT: "Short Term (1-3 years)",
    TimeHorizon.MEDIUM: "Medium Term (3-7 years)",
    TimeHorizon.LONG: "Long Term (7+ years)",
}


def risk_score_for_appetite(appetite: RiskAppetite) -> float:
    """把风险偏好转换为风险评分，未知值按中等风险处理。"""
    return RISK_APPETITE_SCORES.get(appetite, RISK_APPETITE_SCORES[RiskAppetite.MEDIUM])


@dataclass
class InvestorProfile:
    """投资者画像。

    属性说明：
        name: 姓名
        age: 年龄
        investment_capital: 初始投资金额
        risk_appetite: 风险偏好，默认中等
        investment_goal: 投资目标，默认财富增长
        time_horizon: 投资期限，默认中期
        monthly_investment: 每月定投金额
    """
    name: str = ""
    age: int = 0
    investment_capital: float = 0.0
    risk_appetite: RiskAppetite = RiskAppetite.MEDIUM
    investment_goal: InvestmentGoal = InvestmentGoal.WEALTH_GROWTH
    time_horizon: TimeHorizon = TimeHorizon.MEDIUM
    monthly_investment: float = 0.0

    def __post_init__(self):
        if self.investment_capital < 0:
            raise ValidationError(
                "初始投资金额不能为负数",
                field="investment_capital",
                value=self.investment_capital,
                expected=">= 0",
            )
        if self.monthly_investment < 0:
            raise ValidationError(
                "每月定投金额不能为负数",
                field="monthly_investment",
                value=self.monthly_investment,
                expected=">= 0",
            )

    @property
    def risk_score(self) -> float:
        return risk_score_for_appetite(self.risk_appetite)

    @property
    def time_horizon_label(self) -> str:
        return TIME_HORIZON_LABELS[self.time_horizon]


__all__ = [
    "RiskAppetite",
    "InvestmentGoal",
    "TimeHorizon",
    "RISK_APPETITE_SCORES",
    "InvestorProfile",
    "risk_score_for_appetite",
]
