"""
投资组合顾问基础使用示例。

本示例演示了 Portfolio Advisor 的基本使用方法，包括：
1. 从投资者画像创建投资组合
2. 用模拟行情更新价格
3. 查看资产分析和组合指标
4. 生成并执行再平衡指令
5. 执行定投并查看月度报告

演示场景：
一位中等风险偏好的投资者投入10,000美元，每月定投500美元。
我们用带固定种子的模拟行情连续运行12个月，每个月更新价格、
按市场条件调整风险评分、执行定投，并在需要时再平衡。

注意：本示例使用模拟数据，实际应用中需要实现自己的 PriceSource。
"""

from datetime import datetime, timedelta

from portfolio_advisor import AdvisorEngine, InvestorProfile, create_portfolio_from_profile
from portfolio_advisor.core.portfolio.factory import CASH_SYMBOL, price_symbol_for
from portfolio_advisor.core.portfolio.profile import RiskAppetite, TimeHorizon
from portfolio_advisor.data.providers import SimulatedPriceSource

SIMULATION_MONTHS = 12


def print_section(title: str) -> None:
    print()
    print("=" * 80)
    print(title)
    print("=" * 80)


def run_basic_advisor_example():
    """
    运行基础投资组合顾问示例。
    """
    # 步骤1: 创建投资者画像和投资组合
    print_section("步骤1: 创建投资组合")

    profile = InvestorProfile(
        name="示例投资者",
        age=35,
        investment_capital=10000.0,
        risk_appetite=RiskAppetite.MEDIUM,
        time_horizon=TimeHorizon.LONG,
        monthly_investment=500.0,
    )
    source = SimulatedPriceSource(seed=42)
    portfolio = create_portfolio_from_profile(profile, source)
    engine = AdvisorEngine(portfolio, source)

    print(f"风险偏好: {profile.risk_appetite.label}, 投资期限: {profile.time_horizon_label}")
    print(f"风险画像: {portfolio.risk_profile.risk_profile_label}")
    for symbol, percentage in portfolio.get_composition().items():
        print(f"  {symbol:<8} {percentage:6.2f}%")

    # 步骤2: 按月模拟价格变化
    print_section("步骤2: 模拟12个月")

    month = datetime.now()
    for index in range(1, SIMULATION_MONTHS + 1):
        month += timedelta(days=30)
        symbols = [price_symbol_for(symbol) for symbol in portfolio.symbols if symbol != CASH_SYMBOL]
        prices = source.get_prices(symbols)
        portfolio.update_prices(prices, timestamp=month)

        risk_score = engine.adjust_risk_for_market()
        invested = portfolio.execute_sip_investment(now=month)

        instructions = portfolio.recommend_rebalancing()
        if instructions:
            portfolio.apply_rebalancing(instructions)

        print(
            f"第{index:2d}个月: 总市值 {portfolio.get_total_value():>12,.2f}  "
            f"风险评分 {risk_score:5.1f}  定投 {sum(invested.values()):>8,.2f}  "
            f"调仓 {len(instructions)} 笔"
        )

    # 步骤3: 资产分析
    print_section("步骤3: 资产分析")
    for asset in portfolio.assets.values():
        print(asset.get_analysis())

    # 步骤4: 顾问建议
    print_section("步骤4: 顾问建议")
    report = engine.analyze()
    for alert in report.alerts:
        print(f"[ALERT] {alert}")
    for recommendation in report.recommendations:
        print(f"[ADVICE] {recommendation}")

    # 步骤5: 月度报告
    print_section("步骤5: 月度报告")
    monthly = engine.monthly_report()
    print(f"总市值: {monthly.total_value:,.2f}")
    print(f"总收益率: {monthly.total_return_percentage:.2f}%")
    print(f"组合波动率: {monthly.portfolio_volatility:.2f}%")
    for months, projection in monthly.sip_projections.items():
        print(f"定投 {months} 个月预测价值: {projection:,.2f}")
    for symbol, return_percentage in monthly.top_performers:
        print(f"  {symbol:<8} {return_percentage:+.2f}%")

    history = portfolio.get_value_history()
    print()
    print(history.tail())


if __name__ == "__main__":
    run_basic_advisor_example()
