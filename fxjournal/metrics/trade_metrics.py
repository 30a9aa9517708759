"""Per-trade metrics — pure functions, no I/O.

Pips, profit/loss, R-multiple and trading-session classification for a
single trade.  Every aggregate in ``fxjournal.analytics`` is built from
these.
"""

import math
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Union

from fxjournal.models.catalog import OFF_HOURS, TRADING_SESSIONS
from fxjournal.models.trade import Trade, parse_timestamp

# Pip multiplier / pip value per standard lot (account currency).
# Fixed table: JPY-quoted pairs vs everything else, metals included.
JPY_PIP_MULTIPLIER = 100
STANDARD_PIP_MULTIPLIER = 10_000
JPY_PIP_VALUE = 1000.0
STANDARD_PIP_VALUE = 10.0


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round half toward positive infinity (``Math.round`` semantics).

    Python's ``round`` uses banker's rounding; journal figures must round
    .5 upward so the same input always shows the same cents.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def _is_jpy(pair: str) -> bool:
    return "JPY" in pair


def pips(pair: str, entry_price: float, exit_price: float, direction: str) -> float:
    """Price move in pips, positive when the move favoured *direction*.

    JPY pairs count the 2nd decimal as a pip (×100); all other symbols,
    metals included, use the 4th decimal (×10 000).  Rounded to 1 dp.
    """
    multiplier = JPY_PIP_MULTIPLIER if _is_jpy(pair) else STANDARD_PIP_MULTIPLIER
    if direction == "long":
        diff = exit_price - entry_price
    else:
        diff = entry_price - exit_price
    return round_half_up(diff * multiplier, 1)


def profit_loss(
    pair: str,
    entry_price: float,
    exit_price: float,
    lot_size: float,
    direction: str,
    commission: float = 0.0,
) -> float:
    """Net profit/loss in account currency, rounded to 2 dp.

    Formula::

        gross = pips × pip_value × lot_size
        net   = gross − commission

    ``pip_value`` is 1000 per standard lot for JPY pairs and 10 otherwise.
    """
    pip_value = JPY_PIP_VALUE if _is_jpy(pair) else STANDARD_PIP_VALUE
    gross = pips(pair, entry_price, exit_price, direction) * pip_value * lot_size
    return round_half_up(gross - commission, 2)


def r_multiple(
    entry_price: float,
    exit_price: float,
    stop_loss: float,
    direction: str,
) -> float:
    """Realised reward as a multiple of the planned risk, rounded to 2 dp.

    Returns 0.0 when the stop sits exactly at entry (zero risk).
    Take-profit is not considered.
    """
    if direction == "long":
        risk = entry_price - stop_loss
        reward = exit_price - entry_price
    else:
        risk = stop_loss - entry_price
        reward = entry_price - exit_price
    if risk == 0:
        return 0.0
    return round_half_up(reward / risk, 2)


def _in_window(start: int, end: int) -> Callable[[int], bool]:
    return lambda hour: start <= hour < end


def trading_session(
    entry_time: Union[datetime, str],
    sessions: Iterable[tuple[str, int, int]] = TRADING_SESSIONS,
) -> str:
    """Classify a timestamp into a trading session by UTC hour.

    Session windows overlap, so they are checked in table order and the
    first match wins: 08:xx UTC is "Asian", not "London".
    """
    if isinstance(entry_time, str):
        entry_time = parse_timestamp(entry_time, "entry_time")
    if entry_time.tzinfo is not None:
        entry_time = entry_time.astimezone(timezone.utc)
    hour = entry_time.hour

    checks = [(_in_window(start, end), label) for label, start, end in sessions]
    for matches, label in checks:
        if matches(hour):
            return label
    return OFF_HOURS


# ── Trade-level helpers ──────────────────────────────────────────────────


def settled_trades(trades: Iterable[Trade]) -> list[Trade]:
    """Trades eligible for financial aggregation (closed with an exit)."""
    return [t for t in trades if t.is_settled]


def trade_pips(trade: Trade) -> Optional[float]:
    """Pips for *trade*, or ``None`` if it has no exit price."""
    if trade.exit_price is None:
        return None
    return pips(trade.pair, trade.entry_price, trade.exit_price, trade.direction)


def trade_pnl(trade: Trade) -> Optional[float]:
    """Net P/L for *trade*, or ``None`` if it has no exit price."""
    if trade.exit_price is None:
        return None
    return profit_loss(
        trade.pair,
        trade.entry_price,
        trade.exit_price,
        trade.lot_size,
        trade.direction,
        trade.commission,
    )


def trade_r_multiple(trade: Trade) -> Optional[float]:
    """R-multiple for *trade*, or ``None`` if it has no exit price."""
    if trade.exit_price is None:
        return None
    return r_multiple(
        trade.entry_price, trade.exit_price, trade.stop_loss, trade.direction,
    )


def trade_session(trade: Trade) -> str:
    """Session in which *trade* was entered."""
    return trading_session(trade.entry_time)
