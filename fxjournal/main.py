"""FxJournal — application entry point.

Boots the FastAPI internal server and provides the CLI entry point for
the console report and serve modes.
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI

from fxjournal.api.routers import router

app = FastAPI(title="FxJournal Analytics API", version="0.1.0")
app.include_router(router)

logger = logging.getLogger("fxjournal")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


def parse_month(value: str | None) -> tuple[int, int]:
    """Parse ``YYYY-MM``; ``None`` means the current UTC month.

    Raises:
        ValueError: If *value* is not a valid year-month.
    """
    if not value:
        now = datetime.now(timezone.utc)
        return now.year, now.month
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except ValueError:
        raise ValueError(f"month must be YYYY-MM, got {value!r}")
    return parsed.year, parsed.month


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate mode."""
    import argparse

    from fxjournal.config import load_config
    from fxjournal.repos.trade_file_repo import TradeFileRepo

    parser = argparse.ArgumentParser(description="FxJournal trade analytics")
    parser.add_argument(
        "--mode",
        choices=["report", "serve"],
        default="report",
        help="Print a console report or serve the API (default: report)",
    )
    parser.add_argument("--trades", help="Path to the trades JSON file")
    parser.add_argument("--month", help="Calendar month to summarise (YYYY-MM)")
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        help="Emotion tag to treat as a mistake (repeatable)",
    )
    parser.add_argument(
        "--starting-balance",
        type=float,
        help="Balance before the first trade",
    )
    args = parser.parse_args(argv)

    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    repo = TradeFileRepo(args.trades or config.trades_path)
    starting_balance = args.starting_balance or config.starting_balance
    excluded = tuple(args.exclude) if args.exclude else config.excluded_emotions

    if args.mode == "serve":
        _run_server(repo, starting_balance, excluded, config.api_port)
    else:
        _run_report(repo, starting_balance, excluded, parse_month(args.month))


def _run_report(repo, starting_balance, excluded, month) -> str:
    """Load the journal and print every analysis."""
    from fxjournal.analytics.breakdowns import session_breakdown, setup_breakdown
    from fxjournal.analytics.calendar_heatmap import bucket_by_exit_day, summarize_month
    from fxjournal.analytics.equity import build_equity_curve
    from fxjournal.analytics.stats import compute_stats, performance_summary
    from fxjournal.analytics.streaks import track_streaks
    from fxjournal.cli.report import print_report

    trades = repo.get_trades()
    stats = compute_stats(trades, excluded)
    year, month_num = month
    return print_report(
        stats=stats,
        summary=performance_summary(stats),
        equity=build_equity_curve(trades, starting_balance, excluded),
        streaks=track_streaks(trades),
        month=summarize_month(bucket_by_exit_day(trades), year, month_num),
        sessions=session_breakdown(trades),
        setups=setup_breakdown(trades),
    )


def _run_server(repo, starting_balance, excluded, port: int) -> None:
    """Serve the analytics API with uvicorn."""
    import uvicorn

    from fxjournal.api.routers import configure_routers

    configure_routers(
        trade_repo=repo,
        starting_balance=starting_balance,
        excluded_emotions=excluded,
    )
    logger.info("FxJournal API available at http://localhost:%d", port)
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")


if __name__ == "__main__":
    _run_cli()
