"""Streak tracker — consecutive profitable / losing trading days.

Trades are grouped by the calendar day they were *entered*, so a streak
reflects decision days.  The calendar view groups by exit day instead.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from fxjournal.metrics.trade_metrics import round_half_up, settled_trades, trade_pnl
from fxjournal.models.trade import Trade

PROFIT = "profit"
LOSS = "loss"
NEUTRAL = "neutral"


@dataclass
class DayResult:
    """Net result of all trades entered on one day."""

    day: date
    pnl: float = 0.0
    trades: int = 0

    @property
    def outcome(self) -> str:
        if self.pnl > 0:
            return PROFIT
        if self.pnl < 0:
            return LOSS
        return NEUTRAL

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "pnl": round_half_up(self.pnl, 2),
            "trades": self.trades,
            "outcome": self.outcome,
        }


@dataclass(frozen=True)
class StreakReport:
    """Current and record streaks plus the per-day series behind them."""

    current_streak: int = 0
    current_streak_type: str = NEUTRAL
    current_streak_start: Optional[date] = None
    longest_win_streak: int = 0
    longest_loss_streak: int = 0
    total_profitable_days: int = 0
    total_losing_days: int = 0
    daily_results: list[DayResult] = field(default_factory=list)

    def recent(self, days: int = 14) -> list[DayResult]:
        """The last *days* trading days, oldest first."""
        if days <= 0:
            return []
        return self.daily_results[-days:]

    def to_dict(self, recent: Optional[int] = None) -> dict:
        days = self.daily_results if recent is None else self.recent(recent)
        return {
            "current_streak": self.current_streak,
            "current_streak_type": self.current_streak_type,
            "current_streak_start": (
                self.current_streak_start.isoformat()
                if self.current_streak_start else None
            ),
            "longest_win_streak": self.longest_win_streak,
            "longest_loss_streak": self.longest_loss_streak,
            "total_profitable_days": self.total_profitable_days,
            "total_losing_days": self.total_losing_days,
            "daily_results": [d.to_dict() for d in days],
        }


def daily_results(trades: Iterable[Trade]) -> list[DayResult]:
    """Sum settled trades by entry day, oldest day first."""
    days: dict[date, DayResult] = {}
    for trade in settled_trades(trades):
        key = trade.entry_time.date()
        bucket = days.get(key)
        if bucket is None:
            bucket = days[key] = DayResult(day=key)
        bucket.pnl += trade_pnl(trade)
        bucket.trades += 1
    return [days[k] for k in sorted(days)]


def track_streaks(trades: Iterable[Trade]) -> StreakReport:
    """Scan the day series for current and longest win/loss streaks.

    A break-even day ends any running streak without starting a new one.
    """
    days = daily_results(trades)
    if not days:
        return StreakReport()

    longest_win = longest_loss = 0
    run_win = run_loss = 0
    profitable_days = losing_days = 0

    for day in days:
        outcome = day.outcome
        if outcome == PROFIT:
            profitable_days += 1
            run_win += 1
            run_loss = 0
            longest_win = max(longest_win, run_win)
        elif outcome == LOSS:
            losing_days += 1
            run_loss += 1
            run_win = 0
            longest_loss = max(longest_loss, run_loss)
        else:
            run_win = run_loss = 0

    current, current_type, current_start = _current_streak(days)

    return StreakReport(
        current_streak=current,
        current_streak_type=current_type,
        current_streak_start=current_start,
        longest_win_streak=longest_win,
        longest_loss_streak=longest_loss,
        total_profitable_days=profitable_days,
        total_losing_days=losing_days,
        daily_results=days,
    )


def _current_streak(days: list[DayResult]) -> tuple[int, str, Optional[date]]:
    """Walk back from the latest day while the outcome repeats."""
    latest = days[-1].outcome
    if latest == NEUTRAL:
        return 0, NEUTRAL, None

    length = 0
    start: Optional[date] = None
    for day in reversed(days):
        if day.outcome != latest:
            break
        length += 1
        start = day.day
    return length, latest, start
