"""Internal API routers — /stats, /equity, /streaks, /calendar, /breakdowns.

No business logic.  Pulls the journal from the injected trade repo and
delegates to ``fxjournal.analytics``.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query

from fxjournal.analytics.breakdowns import (
    BREAKDOWNS,
    emotion_what_if,
    pair_distribution,
)
from fxjournal.analytics.calendar_heatmap import build_calendar
from fxjournal.analytics.equity import DEFAULT_STARTING_BALANCE, build_equity_curve
from fxjournal.analytics.stats import compute_stats, performance_summary
from fxjournal.analytics.streaks import track_streaks
from fxjournal.models.trade import Trade, trades_from_dicts

logger = logging.getLogger("fxjournal")
router = APIRouter()

# ── Shared state (set during app startup) ────────────────────────────────

_trade_repo = None  # Set via configure_routers()
_settings: dict = {
    "starting_balance": DEFAULT_STARTING_BALANCE,
    "excluded_emotions": (),
}


def configure_routers(
    trade_repo,
    starting_balance: Optional[float] = None,
    excluded_emotions: Optional[tuple[str, ...]] = None,
) -> None:
    """Inject dependencies from the application startup.

    Args:
        trade_repo: Anything with ``get_trades() -> list[Trade]``
            (``TradeFileRepo`` or a duck-type for tests).
        starting_balance: Default balance for the equity curve.
        excluded_emotions: Default mistake filter when a request gives none.
    """
    global _trade_repo  # noqa: PLW0603
    _trade_repo = trade_repo
    _settings["starting_balance"] = (
        starting_balance if starting_balance is not None else DEFAULT_STARTING_BALANCE
    )
    _settings["excluded_emotions"] = tuple(excluded_emotions or ())


def _journal() -> list[Trade]:
    if _trade_repo is None:
        return []
    return _trade_repo.get_trades()


def _exclusions(exclude: Optional[list[str]]) -> tuple[str, ...]:
    # None means "use the configured filter"; an empty list means no filter
    if exclude is None:
        return _settings["excluded_emotions"]
    return tuple(exclude)


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get("/stats")
async def get_stats(exclude: Optional[list[str]] = Query(default=None)):
    """Headline statistics, optionally without mistake-tagged trades."""
    stats = compute_stats(_journal(), _exclusions(exclude))
    return {
        **stats.to_dict(json_safe=True),
        "summary": performance_summary(stats).to_dict(),
    }


@router.get("/equity")
async def get_equity(
    starting_balance: Optional[float] = Query(default=None, gt=0),
    exclude: Optional[list[str]] = Query(default=None),
):
    """Equity curve, with a clean comparison series when filtering."""
    balance = starting_balance or _settings["starting_balance"]
    return build_equity_curve(_journal(), balance, _exclusions(exclude)).to_dict()


@router.get("/streaks")
async def get_streaks(recent: Optional[int] = Query(default=None, ge=1, le=366)):
    """Current and longest day streaks."""
    return track_streaks(_journal()).to_dict(recent=recent)


@router.get("/calendar")
async def get_calendar(
    year: Optional[int] = Query(default=None, ge=1970, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
):
    """Heatmap data for one month (defaults to the current UTC month)."""
    today = datetime.now(timezone.utc)
    return build_calendar(
        _journal(), year or today.year, month or today.month,
    ).to_dict()


@router.get("/breakdowns/{kind}")
async def get_breakdown(kind: str):
    """Per-group performance for session, setup, emotion or pair."""
    fn = BREAKDOWNS.get(kind)
    if fn is None:
        return {"error": f"Unknown breakdown: {kind}"}
    return {"kind": kind, "groups": [g.to_dict() for g in fn(_journal())]}


@router.get("/emotions/what-if")
async def get_emotion_what_if():
    """Net P/L split by negative-emotion tagging."""
    return emotion_what_if(_journal()).to_dict()


@router.get("/pairs/distribution")
async def get_pair_distribution(limit: int = Query(default=8, ge=1, le=50)):
    """Most traded pairs."""
    return {"pairs": pair_distribution(_journal(), limit=limit)}


@router.post("/analyze")
async def post_analyze(body: dict):
    """Run every analysis over an ad-hoc trade list.

    Body: ``{"trades": [...], "starting_balance": float, "exclude": [...]}``.
    """
    errors: list[str] = []
    rows = body.get("trades", [])
    if not isinstance(rows, list):
        errors.append("trades must be a list")
        rows = []

    try:
        trades = trades_from_dicts(rows)
    except ValueError as exc:
        errors.append(str(exc))
        trades = []

    balance = body.get("starting_balance", _settings["starting_balance"])
    try:
        balance = float(balance)
        if balance <= 0:
            errors.append("starting_balance must be positive")
    except (TypeError, ValueError):
        errors.append("starting_balance must be a number")

    exclude = body.get("exclude")
    if exclude is not None and (
        not isinstance(exclude, list)
        or not all(isinstance(tag, str) for tag in exclude)
    ):
        errors.append("exclude must be a list of emotion tags")

    if errors:
        logger.warning("Rejected /analyze request: %s", errors)
        return {"status": "error", "errors": errors}

    exclude = _exclusions(exclude)
    stats = compute_stats(trades, exclude)
    return {
        "status": "ok",
        "stats": stats.to_dict(json_safe=True),
        "summary": performance_summary(stats).to_dict(),
        "equity": build_equity_curve(trades, balance, exclude).to_dict(),
        "streaks": track_streaks(trades).to_dict(),
        "breakdowns": {
            kind: [g.to_dict() for g in fn(trades)]
            for kind, fn in BREAKDOWNS.items()
        },
        "emotion_what_if": emotion_what_if(trades).to_dict(),
    }
