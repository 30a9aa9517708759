"""Equity curve — running account balance, one point per closed trade.

Optionally tracks a second "clean" balance that skips trades tagged with
excluded emotions, so the chart can show what the mistakes cost.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional

from fxjournal.analytics.stats import max_drawdown
from fxjournal.metrics.trade_metrics import round_half_up, settled_trades, trade_pnl
from fxjournal.models.trade import Trade

logger = logging.getLogger("fxjournal.analytics")

DEFAULT_STARTING_BALANCE = 10_000.0
FLAG_MARKER = " [flagged]"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class EquityPoint:
    """A single point on the curve.  Index 0 is the synthetic start."""

    index: int
    date_label: str
    balance: float
    pnl: float = 0.0
    label: str = "Starting Balance"
    flagged: bool = False
    clean_balance: Optional[float] = None


@dataclass(frozen=True)
class EquityCurve:
    """Curve points plus the end-of-series summary."""

    points: list[EquityPoint] = field(default_factory=list)
    starting_balance: float = DEFAULT_STARTING_BALANCE
    final_balance: float = DEFAULT_STARTING_BALANCE
    clean_final_balance: Optional[float] = None
    emotion_cost: float = 0.0
    max_drawdown: float = 0.0

    @property
    def trade_points(self) -> list[EquityPoint]:
        """Points excluding the synthetic start."""
        return self.points[1:]

    @property
    def is_positive(self) -> bool:
        """``True`` when the account finished at or above where it started."""
        return self.final_balance >= self.starting_balance

    @property
    def comparison(self) -> bool:
        return self.clean_final_balance is not None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["is_positive"] = self.is_positive
        return data


def build_equity_curve(
    trades: Iterable[Trade],
    starting_balance: float = DEFAULT_STARTING_BALANCE,
    excluded_emotions: Iterable[str] = (),
) -> EquityCurve:
    """Build the equity curve from a journal.

    Trades are ordered by exit time; a settled trade with no exit time
    sorts to the front.  When *excluded_emotions* is non-empty, each point
    also carries the balance the account would have had without the
    flagged trades.

    Args:
        trades: Journal trades in any order.
        starting_balance: Balance before the first trade.
        excluded_emotions: Emotion tags treated as mistakes.

    Returns:
        ``EquityCurve`` whose ``points`` hold the start point followed by
        one point per closed trade.
    """
    excluded = tuple(excluded_emotions)
    comparison = bool(excluded)

    ordered = sorted(settled_trades(trades), key=_exit_sort_key)

    balance = starting_balance
    clean = starting_balance
    pnls: list[float] = []
    points = [
        EquityPoint(
            index=0,
            date_label="Start",
            balance=round_half_up(starting_balance, 2),
            clean_balance=round_half_up(starting_balance, 2) if comparison else None,
        )
    ]

    for i, trade in enumerate(ordered, start=1):
        pnl = trade_pnl(trade)
        flagged = comparison and trade.has_any_emotion(excluded)
        balance += pnl
        if not flagged:
            clean += pnl
        pnls.append(pnl)

        sign = "+" if pnl >= 0 else ""
        label = f"Trade {i}: {sign}${pnl:.2f}"
        if flagged:
            label += FLAG_MARKER

        points.append(EquityPoint(
            index=i,
            date_label=_date_label(trade.exit_time),
            balance=round_half_up(balance, 2),
            pnl=pnl,
            label=label,
            flagged=flagged,
            clean_balance=round_half_up(clean, 2) if comparison else None,
        ))

    final = round_half_up(balance, 2)
    clean_final = round_half_up(clean, 2) if comparison else None
    cost = round_half_up(clean - balance, 2) if comparison else 0.0

    logger.debug(
        "Equity curve: %d point(s), final %.2f, emotion cost %.2f",
        len(ordered), final, cost,
    )

    return EquityCurve(
        points=points,
        starting_balance=starting_balance,
        final_balance=final,
        clean_final_balance=clean_final,
        emotion_cost=cost,
        max_drawdown=round_half_up(max_drawdown(pnls), 2),
    )


# ── Helpers ──────────────────────────────────────────────────────────────


def _exit_sort_key(trade: Trade) -> datetime:
    exit_time = trade.exit_time
    if exit_time is None:
        return _EPOCH
    if exit_time.tzinfo is None:
        # naive values are UTC everywhere in the journal
        return exit_time.replace(tzinfo=timezone.utc)
    return exit_time


def _date_label(exit_time: Optional[datetime]) -> str:
    if exit_time is None:
        return ""
    return exit_time.strftime("%b %d")
