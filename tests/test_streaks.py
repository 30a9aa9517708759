"""Tests for fxjournal.analytics.streaks — day streaks."""

from datetime import date, datetime, timezone

from fxjournal.analytics.streaks import LOSS, NEUTRAL, PROFIT, daily_results, track_streaks
from fxjournal.models.trade import Trade

_WIN = 1.1050    # +500
_LOSS = 1.0950   # -500
_FLAT = 1.1000   # 0


def _make_trade(trade_id, day, exit_price, hour=10, exit_day=None, **overrides):
    fields = dict(
        id=trade_id,
        pair="EUR/USD",
        direction="long",
        entry_price=1.1000,
        stop_loss=1.0950,
        lot_size=1.0,
        entry_time=datetime(2025, 3, day, hour, tzinfo=timezone.utc),
        exit_price=exit_price,
        exit_time=datetime(2025, 3, exit_day or day, 20, tzinfo=timezone.utc),
        status="closed",
    )
    fields.update(overrides)
    return Trade(**fields)


def _days(*outcomes):
    """One trade per consecutive day starting 3 March."""
    return [
        _make_trade(f"t{i}", 3 + i, price)
        for i, price in enumerate(outcomes)
    ]


class TestTrackStreaks:

    def test_breakeven_resets_both_counters(self):
        report = track_streaks(_days(_WIN, _WIN, _FLAT, _LOSS))
        assert report.longest_win_streak == 2
        assert report.longest_loss_streak == 1
        assert report.current_streak == 1
        assert report.current_streak_type == LOSS
        assert report.current_streak_start == date(2025, 3, 6)

    def test_current_profit_streak_walks_back(self):
        report = track_streaks(_days(_LOSS, _WIN, _WIN, _WIN))
        assert report.current_streak == 3
        assert report.current_streak_type == PROFIT
        assert report.current_streak_start == date(2025, 3, 4)
        assert report.longest_win_streak == 3

    def test_latest_breakeven_is_neutral(self):
        report = track_streaks(_days(_WIN, _WIN, _FLAT))
        assert report.current_streak == 0
        assert report.current_streak_type == NEUTRAL
        assert report.current_streak_start is None

    def test_longest_loss_streak(self):
        report = track_streaks(_days(_LOSS, _LOSS, _LOSS, _WIN, _LOSS))
        assert report.longest_loss_streak == 3
        assert report.total_losing_days == 4
        assert report.total_profitable_days == 1

    def test_input_order_irrelevant(self):
        trades = _days(_WIN, _WIN, _FLAT, _LOSS)
        assert track_streaks(list(reversed(trades))) == track_streaks(trades)

    def test_empty(self):
        report = track_streaks([])
        assert report.current_streak == 0
        assert report.current_streak_type == NEUTRAL
        assert report.daily_results == []
        assert report.longest_win_streak == 0

    def test_recent_slice(self):
        report = track_streaks(_days(_WIN, _LOSS, _WIN, _WIN))
        recent = report.recent(2)
        assert [d.day for d in recent] == [date(2025, 3, 5), date(2025, 3, 6)]
        assert report.recent(0) == []

    def test_to_dict(self):
        data = track_streaks(_days(_WIN, _LOSS)).to_dict(recent=1)
        assert data["current_streak_type"] == "loss"
        assert data["current_streak_start"] == "2025-03-04"
        assert data["daily_results"] == [
            {"date": "2025-03-04", "pnl": -500.0, "trades": 1, "outcome": "loss"},
        ]


class TestDailyResults:

    def test_grouped_by_entry_day_not_exit_day(self):
        trades = [
            _make_trade("a", 3, _WIN, exit_day=5),
            _make_trade("b", 3, _LOSS, hour=15, exit_day=4),
        ]
        days = daily_results(trades)
        assert len(days) == 1
        assert days[0].day == date(2025, 3, 3)
        assert days[0].trades == 2
        assert days[0].pnl == 0.0

    def test_day_sign_uses_net_pnl(self):
        trades = [
            _make_trade("a", 3, _WIN),
            _make_trade("b", 3, 1.0980, hour=12),  # -200
        ]
        report = track_streaks(trades)
        assert report.current_streak_type == PROFIT
        assert report.daily_results[0].pnl == 300.0

    def test_unsettled_trades_skipped(self):
        trades = [
            _make_trade("a", 3, _WIN),
            _make_trade("b", 4, None, status="open", exit_time=None),
        ]
        assert len(daily_results(trades)) == 1
