"""CLI report — prints journal analytics to the console."""

import math

from fxjournal.analytics.breakdowns import GroupPerformance
from fxjournal.analytics.calendar_heatmap import MonthSummary
from fxjournal.analytics.equity import EquityCurve
from fxjournal.analytics.stats import PerformanceSummary, TradeStats
from fxjournal.analytics.streaks import StreakReport


def _money(value: float | None) -> str:
    if value is None:
        return "N/A"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def _ratio(value: float | None) -> str:
    if value is None:
        return "—"
    if math.isinf(value):
        return "∞"
    return f"{value:.2f}"


def format_report(
    stats: TradeStats,
    summary: PerformanceSummary,
    equity: EquityCurve,
    streaks: StreakReport,
    month: MonthSummary,
    sessions: list[GroupPerformance],
    setups: list[GroupPerformance],
) -> str:
    """Format a journal report as plain text."""
    break_even = (
        f"{summary.break_even_win_rate:.0f}%"
        if summary.break_even_win_rate is not None else "—"
    )
    edge = f"{summary.edge:+.1f}%" if summary.edge is not None else "—"
    streak_start = (
        streaks.current_streak_start.isoformat()
        if streaks.current_streak_start else "N/A"
    )

    lines = [
        "──────────────── FxJournal Report ────────────────",
        f"  Trades:          {stats.total_trades}",
        f"  Win Rate:        {stats.win_rate:.1f}%",
        f"  Net P/L:         {_money(stats.total_pnl)}",
        f"  Profit Factor:   {_ratio(stats.profit_factor)}",
        f"  Expectancy:      {_money(stats.expectancy)}",
        f"  Avg Win / Loss:  {_money(stats.avg_win)} / {_money(stats.avg_loss)}",
        f"  Best / Worst:    {_money(stats.best_trade)} / {_money(stats.worst_trade)}",
        f"  Risk/Reward:     {_ratio(summary.risk_reward)}:1",
        f"  Break-Even WR:   {break_even}",
        f"  Edge:            {edge}",
        "",
        f"  Balance:         {_money(equity.starting_balance)} → {_money(equity.final_balance)}",
        f"  Max Drawdown:    {_money(equity.max_drawdown)}",
    ]
    if equity.clean_final_balance is not None:
        lines += [
            f"  Clean Balance:   {_money(equity.clean_final_balance)}",
            f"  Emotion Cost:    {_money(equity.emotion_cost)}",
        ]
    lines += [
        "",
        f"  Current Streak:  {streaks.current_streak} ({streaks.current_streak_type}) "
        f"since {streak_start}",
        f"  Longest Win:     {streaks.longest_win_streak} day(s)",
        f"  Longest Loss:    {streaks.longest_loss_streak} day(s)",
        "",
        f"  {month.year}-{month.month:02d}:         {_money(month.pnl)} over "
        f"{month.trades} trade(s), {month.trading_days} day(s), "
        f"{month.win_rate:.0f}% wins",
    ]
    for title, groups in (("Sessions", sessions), ("Setups", setups)):
        if not groups:
            continue
        lines += ["", f"  {title}:"]
        for g in groups:
            lines.append(
                f"    {g.key:<20} {_money(g.pnl):>12}  "
                f"{g.trades:>3} trade(s)  {g.win_rate:.0f}%"
            )
    lines.append("──────────────────────────────────────────────────")
    return "\n".join(lines)


def print_report(**sections) -> str:
    """Format and print the journal report.

    Returns:
        The formatted string (also printed to stdout).
    """
    output = format_report(**sections)
    print(output)
    return output
