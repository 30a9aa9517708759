"""Calendar heatmap — daily P/L bucketed by exit day.

Bucketing is done once per journal (``bucket_by_exit_day``); month
summaries and navigation reuse the buckets.  The displayed month is always
passed in, never held here.
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from fxjournal.metrics.trade_metrics import round_half_up, settled_trades, trade_pnl
from fxjournal.models.trade import Trade

logger = logging.getLogger("fxjournal.analytics")

# Day used for closed trades that never recorded an exit time
EPOCH_DAY = date(1970, 1, 1)


@dataclass
class DayBucket:
    """All trades that closed on one calendar day."""

    day: date
    pnl: float = 0.0
    trades: int = 0
    wins: int = 0
    losses: int = 0  # P/L <= 0, break-even included

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "pnl": round_half_up(self.pnl, 2),
            "trades": self.trades,
            "wins": self.wins,
            "losses": self.losses,
        }


@dataclass(frozen=True)
class MonthSummary:
    """Roll-up of the buckets falling inside one month."""

    year: int
    month: int
    pnl: float = 0.0
    trades: int = 0
    win_rate: float = 0.0
    trading_days: int = 0

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "pnl": self.pnl,
            "trades": self.trades,
            "win_rate": self.win_rate,
            "trading_days": self.trading_days,
        }


@dataclass(frozen=True)
class CalendarBuckets:
    """Per-day buckets for the whole journal.

    ``max_pnl`` / ``min_pnl`` span every bucket (not just one month) and
    start from zero, so a journal of only losses has ``max_pnl == 0``.
    """

    days: dict[date, DayBucket] = field(default_factory=dict)
    max_pnl: float = 0.0
    min_pnl: float = 0.0

    def get(self, day: date) -> DayBucket | None:
        return self.days.get(day)

    def in_month(self, year: int, month: int) -> list[DayBucket]:
        """Buckets inside *year*/*month*, in date order."""
        return [
            self.days[d] for d in sorted(self.days)
            if d.year == year and d.month == month
        ]

    def intensity(self, pnl: float) -> float:
        """Colour intensity in [0, 1] relative to the largest day.

        The divisor never drops below 1 so tiny or all-zero journals do
        not divide by zero.
        """
        scale = max(abs(self.max_pnl), abs(self.min_pnl), 1.0)
        return min(abs(pnl) / scale, 1.0)

    def shade(self, pnl: float) -> int:
        """Heat level: 0 for a flat day, ±1..±4 by intensity quartile."""
        if pnl == 0:
            return 0
        intensity = self.intensity(pnl)
        if intensity > 0.75:
            level = 4
        elif intensity > 0.5:
            level = 3
        elif intensity > 0.25:
            level = 2
        else:
            level = 1
        return level if pnl > 0 else -level

    @property
    def total_pnl(self) -> float:
        return round_half_up(sum(b.pnl for b in self.days.values()), 2)


@dataclass(frozen=True)
class CalendarView:
    """One month of the heatmap, ready to render."""

    buckets: CalendarBuckets
    summary: MonthSummary
    days: list[DayBucket]
    start_padding: int

    def to_dict(self) -> dict:
        prev_year, prev_month = shift_month(self.summary.year, self.summary.month, -1)
        next_year, next_month = shift_month(self.summary.year, self.summary.month, 1)
        return {
            "summary": self.summary.to_dict(),
            "days": [
                {
                    **b.to_dict(),
                    "intensity": round_half_up(self.buckets.intensity(b.pnl), 4),
                    "shade": self.buckets.shade(b.pnl),
                }
                for b in self.days
            ],
            "start_padding": self.start_padding,
            "max_pnl": round_half_up(self.buckets.max_pnl, 2),
            "min_pnl": round_half_up(self.buckets.min_pnl, 2),
            "previous": {"year": prev_year, "month": prev_month},
            "next": {"year": next_year, "month": next_month},
        }


def bucket_by_exit_day(trades: Iterable[Trade]) -> CalendarBuckets:
    """Group settled trades by the calendar day they closed.

    A closed trade with no exit time lands on ``EPOCH_DAY`` so the buckets
    always add up to the journal total.
    """
    days: dict[date, DayBucket] = {}
    undated = 0
    for trade in settled_trades(trades):
        if trade.exit_time is None:
            undated += 1
            key = EPOCH_DAY
        else:
            key = trade.exit_time.date()
        pnl = trade_pnl(trade)
        bucket = days.get(key)
        if bucket is None:
            bucket = days[key] = DayBucket(day=key)
        bucket.pnl += pnl
        bucket.trades += 1
        if pnl > 0:
            bucket.wins += 1
        else:
            bucket.losses += 1

    if undated:
        logger.debug("Calendar placed %d closed trade(s) without exit time on %s",
                     undated, EPOCH_DAY)

    max_pnl = 0.0
    min_pnl = 0.0
    for bucket in days.values():
        if bucket.pnl > max_pnl:
            max_pnl = bucket.pnl
        if bucket.pnl < min_pnl:
            min_pnl = bucket.pnl

    return CalendarBuckets(days=days, max_pnl=max_pnl, min_pnl=min_pnl)


def summarize_month(buckets: CalendarBuckets, year: int, month: int) -> MonthSummary:
    """Month roll-up: P/L, trade count, win rate (whole %), trading days."""
    _check_month(month)
    in_month = buckets.in_month(year, month)
    pnl = sum(b.pnl for b in in_month)
    trades = sum(b.trades for b in in_month)
    wins = sum(b.wins for b in in_month)
    win_rate = round_half_up(wins / trades * 100) if trades > 0 else 0.0
    return MonthSummary(
        year=year,
        month=month,
        pnl=round_half_up(pnl, 2),
        trades=trades,
        win_rate=win_rate,
        trading_days=len(in_month),
    )


def month_grid(year: int, month: int) -> tuple[list[date], int]:
    """Dates of *month* and the blank cells before day 1 in a Sunday-first grid."""
    _check_month(month)
    first = date(year, month, 1)
    length = calendar.monthrange(year, month)[1]
    days = [first + timedelta(days=i) for i in range(length)]
    # date.weekday(): Monday=0 … Sunday=6
    start_padding = (first.weekday() + 1) % 7
    return days, start_padding


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move *delta* months from *year*/*month* (negative goes back)."""
    _check_month(month)
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_view(buckets: CalendarBuckets, year: int, month: int) -> CalendarView:
    """Render one month from prebuilt buckets."""
    _, start_padding = month_grid(year, month)
    return CalendarView(
        buckets=buckets,
        summary=summarize_month(buckets, year, month),
        days=buckets.in_month(year, month),
        start_padding=start_padding,
    )


def build_calendar(trades: Iterable[Trade], year: int, month: int) -> CalendarView:
    """Bucket *trades* and render *year*/*month* in one call."""
    return month_view(bucket_by_exit_day(trades), year, month)


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1-12, got {month}")
