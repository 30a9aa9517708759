"""Trade data model — the journal record consumed by the analytics.

Records arrive from the storage layer as plain dicts (snake_case keys,
ISO-8601 timestamps).  ``trade_from_dict`` validates them the same way the
entry form does and returns an immutable ``Trade``.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

PAIR_FORMAT = re.compile(r"^[A-Z]{2,5}/[A-Z]{2,5}$")

DIRECTIONS = ("long", "short")
STATUSES = ("open", "closed")


@dataclass(frozen=True)
class Trade:
    """A single journal entry.

    Pips, P/L, R-multiple and session are derived on demand by
    ``fxjournal.metrics.trade_metrics`` and never stored here.
    """

    id: str
    pair: str
    direction: str  # "long" or "short"
    entry_price: float
    stop_loss: float
    lot_size: float
    entry_time: datetime
    user_id: str = ""
    exit_price: Optional[float] = None
    take_profit: Optional[float] = None
    commission: float = 0.0
    exit_time: Optional[datetime] = None
    status: str = "open"  # "open" or "closed"
    setups: tuple[str, ...] = ()
    emotions: tuple[str, ...] = ()
    notes: Optional[str] = None
    before_screenshot: Optional[str] = None
    after_screenshot: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_settled(self) -> bool:
        """``True`` when the trade can take part in financial aggregates.

        Status and exit price are checked separately because the store
        does not enforce that they agree.
        """
        return self.status == "closed" and self.exit_price is not None

    def has_any_emotion(self, tags: Iterable[str]) -> bool:
        """Return True if the trade is tagged with any of *tags*."""
        wanted = set(tags)
        return any(e in wanted for e in self.emotions)

    def to_dict(self) -> dict:
        """Serialise back to the storage record shape."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "pair": self.pair,
            "direction": self.direction,
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "stop_loss": self.stop_loss,
            "take_profit": self.take_profit,
            "lot_size": self.lot_size,
            "commission": self.commission,
            "entry_time": _iso(self.entry_time),
            "exit_time": _iso(self.exit_time),
            "status": self.status,
            "setups": list(self.setups),
            "emotions": list(self.emotions),
            "notes": self.notes,
            "before_screenshot": self.before_screenshot,
            "after_screenshot": self.after_screenshot,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


# ── Parsing ──────────────────────────────────────────────────────────────


def parse_timestamp(value: Any, field_name: str = "timestamp") -> Optional[datetime]:
    """Parse an ISO-8601 string (or pass through a ``datetime``).

    A trailing ``Z`` is accepted.  Naive values are taken as UTC.

    Raises:
        ValueError: If *value* is not a recognisable timestamp.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"{field_name} is not an ISO-8601 timestamp: {value!r}")
    else:
        raise ValueError(f"{field_name} is not an ISO-8601 timestamp: {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def trade_from_dict(data: dict) -> Trade:
    """Build a validated ``Trade`` from a storage record.

    A closed trade without an exit price or exit time is accepted as-is;
    the analytics skip it rather than reject it.

    Raises:
        ValueError: Naming the first offending field.
    """
    if not isinstance(data, dict):
        raise ValueError("trade record must be an object")
    for key in ("id", "pair", "direction", "entry_price", "stop_loss",
                "lot_size", "entry_time"):
        if data.get(key) in (None, ""):
            raise ValueError(f"trade is missing required field '{key}'")

    pair = str(data["pair"])
    if not PAIR_FORMAT.match(pair):
        raise ValueError(f"pair must look like XXX/XXX, got {pair!r}")

    direction = data["direction"]
    if direction not in DIRECTIONS:
        raise ValueError(f"direction must be 'long' or 'short', got {direction!r}")

    status = data.get("status") or "open"
    if status not in STATUSES:
        raise ValueError(f"status must be 'open' or 'closed', got {status!r}")

    entry_price = _positive(data, "entry_price")
    stop_loss = _positive(data, "stop_loss")
    lot_size = _positive(data, "lot_size")
    exit_price = _positive(data, "exit_price", optional=True)
    take_profit = _positive(data, "take_profit", optional=True)

    commission = _number(data, "commission", default=0.0)
    if commission < 0:
        raise ValueError(f"commission cannot be negative, got {commission}")

    return Trade(
        id=str(data["id"]),
        user_id=str(data.get("user_id") or ""),
        pair=pair,
        direction=direction,
        entry_price=entry_price,
        exit_price=exit_price,
        stop_loss=stop_loss,
        take_profit=take_profit,
        lot_size=lot_size,
        commission=commission,
        entry_time=parse_timestamp(data["entry_time"], "entry_time"),
        exit_time=parse_timestamp(data.get("exit_time"), "exit_time"),
        status=status,
        setups=_tags(data.get("setups")),
        emotions=_tags(data.get("emotions")),
        notes=data.get("notes"),
        before_screenshot=data.get("before_screenshot"),
        after_screenshot=data.get("after_screenshot"),
        created_at=parse_timestamp(data.get("created_at"), "created_at"),
        updated_at=parse_timestamp(data.get("updated_at"), "updated_at"),
    )


def trades_from_dicts(rows: Iterable[dict]) -> list[Trade]:
    """Parse a list of storage records, rejecting duplicate ids."""
    trades: list[Trade] = []
    seen: set[str] = set()
    for i, row in enumerate(rows):
        try:
            trade = trade_from_dict(row)
        except ValueError as exc:
            raise ValueError(f"trade #{i}: {exc}") from exc
        if trade.id in seen:
            raise ValueError(f"trade #{i}: duplicate id '{trade.id}'")
        seen.add(trade.id)
        trades.append(trade)
    return trades


# ── Helpers ──────────────────────────────────────────────────────────────


def _number(data: dict, key: str, default: Optional[float] = None) -> Optional[float]:
    value = data.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a number, got {value!r}")


def _positive(data: dict, key: str, optional: bool = False) -> Optional[float]:
    value = _number(data, key)
    if value is None:
        if optional:
            return None
        raise ValueError(f"trade is missing required field '{key}'")
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {value}")
    return value


def _tags(value: Any) -> tuple[str, ...]:
    """Normalise a tag array to a tuple, dropping repeats but keeping order."""
    if not value:
        return ()
    if isinstance(value, str):
        value = [value]
    return tuple(dict.fromkeys(str(v) for v in value))


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt is not None else None
