"""Performance breakdowns — P/L and win rate grouped by session, setup,
emotion or pair.

Setup and emotion groups fan out: a trade carrying two setups counts in
full towards both, so group totals can add up to more than the journal's
net P/L.

Usage::

    for group in setup_breakdown(trades):
        print(group.key, group.pnl, group.win_rate)
"""

import logging
from collections import Counter
from dataclasses import asdict, dataclass
from typing import Callable, Iterable

from fxjournal.metrics.trade_metrics import (
    round_half_up,
    settled_trades,
    trade_pnl,
    trading_session,
)
from fxjournal.models.catalog import NEGATIVE_EMOTIONS, TRADING_SESSIONS
from fxjournal.models.trade import Trade

logger = logging.getLogger("fxjournal.analytics")

KeyFunc = Callable[[Trade], Iterable[str]]


@dataclass
class _GroupAccumulator:
    """Running totals for one group."""

    trades: int = 0
    wins: int = 0
    losses: int = 0
    breakeven: int = 0
    pnl: float = 0.0

    def record(self, pnl: float) -> None:
        self.trades += 1
        self.pnl += pnl
        if pnl > 0:
            self.wins += 1
        elif pnl < 0:
            self.losses += 1
        else:
            self.breakeven += 1


@dataclass(frozen=True)
class GroupPerformance:
    """Results for one group key."""

    key: str
    trades: int
    wins: int
    losses: int
    breakeven: int
    pnl: float
    avg_pnl: float
    win_rate: float  # whole percent of decided (non break-even) trades

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class EmotionWhatIf:
    """Net P/L with and without trades tagged with negative emotions."""

    negative_pnl: float
    negative_trades: int
    clean_pnl: float
    clean_trades: int
    delta: float  # clean − negative

    def to_dict(self) -> dict:
        return asdict(self)


def group_performance(trades: Iterable[Trade], key_fn: KeyFunc) -> list[GroupPerformance]:
    """Group settled trades by the keys *key_fn* yields for each trade.

    Returns:
        One ``GroupPerformance`` per key seen, highest P/L first.
    """
    groups: dict[str, _GroupAccumulator] = {}
    for trade in settled_trades(trades):
        pnl = trade_pnl(trade)
        for key in key_fn(trade):
            acc = groups.get(key)
            if acc is None:
                acc = groups[key] = _GroupAccumulator()
            acc.record(pnl)

    results = [_finish(key, acc) for key, acc in groups.items()]
    # sorted() is stable, so equal P/L keeps first-seen order
    results = sorted(results, key=lambda g: g.pnl, reverse=True)
    logger.debug("Grouped into %d bucket(s)", len(results))
    return results


def session_breakdown(
    trades: Iterable[Trade],
    sessions: Iterable[tuple[str, int, int]] = TRADING_SESSIONS,
) -> list[GroupPerformance]:
    """Performance by the session each trade was entered in."""
    table = tuple(sessions)
    return group_performance(
        trades, lambda t: (trading_session(t.entry_time, table),),
    )


def setup_breakdown(trades: Iterable[Trade]) -> list[GroupPerformance]:
    """Performance per setup tag."""
    return group_performance(trades, lambda t: t.setups)


def emotion_breakdown(trades: Iterable[Trade]) -> list[GroupPerformance]:
    """Performance per emotion tag."""
    return group_performance(trades, lambda t: t.emotions)


def pair_breakdown(trades: Iterable[Trade]) -> list[GroupPerformance]:
    """Performance per currency pair."""
    return group_performance(trades, lambda t: (t.pair,))


BREAKDOWNS: dict[str, Callable[[Iterable[Trade]], list[GroupPerformance]]] = {
    "session": session_breakdown,
    "setup": setup_breakdown,
    "emotion": emotion_breakdown,
    "pair": pair_breakdown,
}


def emotion_what_if(
    trades: Iterable[Trade],
    negative_emotions: Iterable[str] = NEGATIVE_EMOTIONS,
) -> EmotionWhatIf:
    """Split net P/L between trades with and without negative emotions."""
    negative = frozenset(negative_emotions)
    negative_pnl = clean_pnl = 0.0
    negative_count = clean_count = 0
    for trade in settled_trades(trades):
        pnl = trade_pnl(trade)
        if trade.has_any_emotion(negative):
            negative_pnl += pnl
            negative_count += 1
        else:
            clean_pnl += pnl
            clean_count += 1

    return EmotionWhatIf(
        negative_pnl=round_half_up(negative_pnl, 2),
        negative_trades=negative_count,
        clean_pnl=round_half_up(clean_pnl, 2),
        clean_trades=clean_count,
        delta=round_half_up(clean_pnl - negative_pnl, 2),
    )


def pair_distribution(trades: Iterable[Trade], limit: int = 8) -> list[dict]:
    """How often each pair was traded, open trades included.

    Returns:
        ``[{"pair": str, "count": int}, ...]``, most traded first.
    """
    counts = Counter(t.pair for t in trades)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [{"pair": pair, "count": count} for pair, count in ranked[:limit]]


# ── Helpers ──────────────────────────────────────────────────────────────


def _finish(key: str, acc: _GroupAccumulator) -> GroupPerformance:
    decided = acc.wins + acc.losses
    win_rate = round_half_up(acc.wins / decided * 100) if decided > 0 else 0.0
    return GroupPerformance(
        key=key,
        trades=acc.trades,
        wins=acc.wins,
        losses=acc.losses,
        breakeven=acc.breakeven,
        pnl=round_half_up(acc.pnl, 2),
        avg_pnl=round_half_up(acc.pnl / acc.trades, 2),
        win_rate=win_rate,
    )
