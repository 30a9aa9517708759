"""Journal statistics — pure functions over a list of trades."""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from fxjournal.metrics.trade_metrics import (
    round_half_up,
    settled_trades,
    trade_pnl,
    trade_r_multiple,
)
from fxjournal.models.trade import Trade

logger = logging.getLogger("fxjournal.analytics")


@dataclass(frozen=True)
class TradeStats:
    """Summary statistics for a set of settled trades.

    ``profit_factor`` is ``math.inf`` when there are wins but no losses.
    """

    total_trades: int = 0
    win_rate: float = 0.0
    profit_factor: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    total_pnl: float = 0.0
    expectancy: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    winning_trades: int = 0
    losing_trades: int = 0
    breakeven_trades: int = 0
    avg_r_multiple: float = 0.0

    def to_dict(self, json_safe: bool = False) -> dict:
        """Return the stats as a dict.

        With *json_safe*, an infinite profit factor becomes the string
        ``"Infinity"`` so strict JSON encoders accept it.
        """
        data = asdict(self)
        if json_safe and math.isinf(self.profit_factor):
            data["profit_factor"] = "Infinity"
        return data


@dataclass(frozen=True)
class PerformanceSummary:
    """Derived ratios shown next to the headline stats."""

    expectancy: float
    risk_reward: Optional[float]
    break_even_win_rate: Optional[float]
    edge: Optional[float]

    def to_dict(self) -> dict:
        return asdict(self)


def compute_stats(
    trades: Iterable[Trade],
    excluded_emotions: Iterable[str] = (),
) -> TradeStats:
    """Compute summary statistics from a journal.

    Only closed trades with an exit price are counted.  Trades tagged with
    any of *excluded_emotions* are dropped first, which gives the
    "without mistakes" view.

    Returns:
        ``TradeStats``; every field is zero when nothing qualifies.
    """
    excluded = tuple(excluded_emotions)
    settled = settled_trades(trades)
    eligible = settled
    if excluded:
        eligible = [t for t in settled if not t.has_any_emotion(excluded)]

    if not eligible:
        return TradeStats()

    pnls = [trade_pnl(t) for t in eligible]
    r_multiples = [trade_r_multiple(t) for t in eligible]
    total = len(pnls)

    winners = [p for p in pnls if p > 0]
    losers = [p for p in pnls if p < 0]

    gross_profit = sum(winners)
    gross_loss = abs(sum(losers))

    win_rate = len(winners) / total * 100
    profit_factor = _profit_factor(gross_profit, gross_loss)
    avg_win = gross_profit / len(winners) if winners else 0.0
    avg_loss = gross_loss / len(losers) if losers else 0.0

    # Expected P/L per trade under the observed distribution
    loss_rate = (100 - win_rate) / 100
    expectancy = (win_rate / 100 * avg_win) - (loss_rate * avg_loss)

    logger.debug(
        "Stats over %d trade(s) (%d excluded by emotion filter)",
        total, len(settled) - total,
    )

    return TradeStats(
        total_trades=total,
        win_rate=round_half_up(win_rate, 1),
        profit_factor=(
            profit_factor if math.isinf(profit_factor)
            else round_half_up(profit_factor, 2)
        ),
        avg_win=round_half_up(avg_win, 2),
        avg_loss=round_half_up(avg_loss, 2),
        total_pnl=round_half_up(sum(pnls), 2),
        expectancy=round_half_up(expectancy, 2),
        best_trade=round_half_up(max(pnls), 2),
        worst_trade=round_half_up(min(pnls), 2),
        winning_trades=len(winners),
        losing_trades=len(losers),
        breakeven_trades=total - len(winners) - len(losers),
        avg_r_multiple=round_half_up(sum(r_multiples) / total, 2),
    )


def performance_summary(stats: TradeStats) -> PerformanceSummary:
    """Risk/reward, break-even win rate and edge for a stats snapshot.

    Ratios that would divide by zero are ``None`` ("—" on screen).
    """
    risk_reward: Optional[float] = None
    if stats.avg_loss > 0:
        risk_reward = round_half_up(stats.avg_win / stats.avg_loss, 2)

    break_even: Optional[float] = None
    edge: Optional[float] = None
    denominator = stats.avg_win + stats.avg_loss
    if denominator > 0:
        raw_break_even = stats.avg_loss / denominator * 100
        break_even = round_half_up(raw_break_even, 0)
        edge = round_half_up(stats.win_rate - raw_break_even, 1)

    return PerformanceSummary(
        expectancy=stats.expectancy,
        risk_reward=risk_reward,
        break_even_win_rate=break_even,
        edge=edge,
    )


# ── Helpers ──────────────────────────────────────────────────────────────


def _profit_factor(gross_profit: float, gross_loss: float) -> float:
    """Gross profit over gross loss.

    ``inf`` when there are profits but no losses, 0.0 when both are zero.
    """
    if gross_loss > 0:
        return gross_profit / gross_loss
    if gross_profit > 0:
        return math.inf
    return 0.0


def max_drawdown(pnls: Iterable[float]) -> float:
    """Maximum drawdown from the cumulative P&L curve.

    Returns the largest peak-to-trough decline as a positive number.
    """
    cumulative = 0.0
    peak = 0.0
    max_dd = 0.0
    for p in pnls:
        cumulative += p
        if cumulative > peak:
            peak = cumulative
        dd = peak - cumulative
        if dd > max_dd:
            max_dd = dd
    return max_dd
