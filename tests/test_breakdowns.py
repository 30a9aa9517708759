"""Tests for fxjournal.analytics.breakdowns — grouped performance."""

from datetime import datetime, timezone

import pytest

from fxjournal.analytics.breakdowns import (
    emotion_breakdown,
    emotion_what_if,
    group_performance,
    pair_breakdown,
    pair_distribution,
    session_breakdown,
    setup_breakdown,
)
from fxjournal.analytics.stats import compute_stats
from fxjournal.models.trade import Trade


def _make_trade(trade_id, exit_price, hour=10, setups=(), emotions=(), **overrides):
    fields = dict(
        id=trade_id,
        pair="EUR/USD",
        direction="long",
        entry_price=1.1000,
        stop_loss=1.0950,
        lot_size=1.0,
        entry_time=datetime(2025, 4, 7, hour, tzinfo=timezone.utc),
        exit_price=exit_price,
        exit_time=datetime(2025, 4, 7, 23, tzinfo=timezone.utc),
        status="closed",
        setups=tuple(setups),
        emotions=tuple(emotions),
    )
    fields.update(overrides)
    return Trade(**fields)


def _by_key(groups):
    return {g.key: g for g in groups}


class TestSetupBreakdown:

    def test_fan_out_counts_full_pnl_per_tag(self):
        trades = [_make_trade("a", 1.1050, setups=("Breakout", "FVG"))]
        groups = _by_key(setup_breakdown(trades))
        assert groups["Breakout"].pnl == 500.0
        assert groups["FVG"].pnl == 500.0
        # group totals exceed the journal's net P/L
        assert sum(g.pnl for g in groups.values()) == 2 * compute_stats(trades).total_pnl

    def test_sorted_by_pnl_descending(self):
        trades = [
            _make_trade("a", 1.0950, setups=("Reversal",)),
            _make_trade("b", 1.1050, setups=("Breakout",)),
            _make_trade("c", 1.1020, setups=("ICT",)),
        ]
        assert [g.key for g in setup_breakdown(trades)] == ["Breakout", "ICT", "Reversal"]

    def test_win_rate_ignores_breakeven(self):
        trades = [
            _make_trade("a", 1.1050, setups=("SMC",)),
            _make_trade("b", 1.0950, setups=("SMC",)),
            _make_trade("c", 1.1000, setups=("SMC",)),
        ]
        group = setup_breakdown(trades)[0]
        assert group.trades == 3
        assert group.breakeven == 1
        assert group.win_rate == 50

    def test_all_breakeven_group_has_zero_win_rate(self):
        group = setup_breakdown([_make_trade("a", 1.1000, setups=("FVG",))])[0]
        assert group.win_rate == 0
        assert group.pnl == 0.0

    def test_untagged_trades_form_no_group(self):
        assert setup_breakdown([_make_trade("a", 1.1050)]) == []

    def test_unsettled_trades_skipped(self):
        trades = [_make_trade("a", None, setups=("FVG",), status="open", exit_time=None)]
        assert setup_breakdown(trades) == []


class TestSessionBreakdown:

    def test_groups_by_entry_session(self):
        trades = [
            _make_trade("a", 1.1050, hour=3),    # Asian
            _make_trade("b", 1.0950, hour=8),    # Asian (overlap)
            _make_trade("c", 1.1020, hour=14),   # London
            _make_trade("d", 1.1010, hour=18),   # New York
            _make_trade("e", 1.0990, hour=23),   # Off-Hours
        ]
        groups = _by_key(session_breakdown(trades))
        assert groups["Asian"].trades == 2
        assert groups["Asian"].pnl == 0.0
        assert groups["London"].pnl == 200.0
        assert groups["New York"].pnl == 100.0
        assert groups["Off-Hours"].pnl == -100.0

    def test_avg_pnl(self):
        trades = [
            _make_trade("a", 1.1050, hour=14),
            _make_trade("b", 1.1020, hour=15),
        ]
        assert session_breakdown(trades)[0].avg_pnl == 350.0

    def test_custom_session_table(self):
        table = (("Early", 0, 12), ("Late", 12, 24))
        groups = session_breakdown([_make_trade("a", 1.1050, hour=14)], sessions=table)
        assert [g.key for g in groups] == ["Late"]


class TestEmotionAndPairBreakdown:

    def test_emotion_fan_out(self):
        trades = [
            _make_trade("a", 1.0950, emotions=("FOMO", "Greedy")),
            _make_trade("b", 1.1050, emotions=("Disciplined",)),
        ]
        groups = _by_key(emotion_breakdown(trades))
        assert groups["FOMO"].pnl == -500.0
        assert groups["Greedy"].pnl == -500.0
        assert groups["Disciplined"].win_rate == 100

    def test_pair_breakdown(self):
        trades = [
            _make_trade("a", 1.1050),
            _make_trade("b", 150.50, pair="USD/JPY", entry_price=150.00, stop_loss=149.50,
                        lot_size=0.01),
        ]
        groups = pair_breakdown(trades)
        assert [g.key for g in groups] == ["EUR/USD", "USD/JPY"]
        assert groups[1].pnl == 500.0

    def test_generic_key_function(self):
        trades = [
            _make_trade("a", 1.1050, direction="long"),
            _make_trade("b", 1.1050, direction="short", stop_loss=1.1100),
        ]
        groups = _by_key(group_performance(trades, lambda t: (t.direction,)))
        assert groups["long"].pnl == 500.0
        assert groups["short"].pnl == -500.0


class TestEmotionWhatIf:

    def test_split_and_delta(self):
        trades = [
            _make_trade("a", 1.0950, emotions=("Revenge Trading",)),
            _make_trade("b", 1.1050, emotions=("Patient",)),
            _make_trade("c", 1.1020),
        ]
        result = emotion_what_if(trades)
        assert result.negative_pnl == -500.0
        assert result.negative_trades == 1
        assert result.clean_pnl == 700.0
        assert result.clean_trades == 2
        assert result.delta == 1200.0

    def test_custom_negative_list(self):
        trades = [_make_trade("a", 1.1050, emotions=("Confident",))]
        result = emotion_what_if(trades, negative_emotions=["Confident"])
        assert result.negative_pnl == 500.0
        assert result.clean_trades == 0

    def test_empty(self):
        result = emotion_what_if([])
        assert result.to_dict() == {
            "negative_pnl": 0.0,
            "negative_trades": 0,
            "clean_pnl": 0.0,
            "clean_trades": 0,
            "delta": 0.0,
        }


class TestPairDistribution:

    def test_counts_open_trades_too(self):
        trades = [
            _make_trade("a", 1.1050),
            _make_trade("b", None, status="open", exit_time=None),
            _make_trade("c", 1.2700, pair="GBP/USD", entry_price=1.2650, stop_loss=1.2600),
        ]
        assert pair_distribution(trades) == [
            {"pair": "EUR/USD", "count": 2},
            {"pair": "GBP/USD", "count": 1},
        ]

    def test_limit(self):
        pairs = ["EUR/USD", "GBP/USD", "USD/JPY"]
        trades = [_make_trade(f"t{i}", 1.1050, pair=p) for i, p in enumerate(pairs)]
        assert len(pair_distribution(trades, limit=2)) == 2


@pytest.mark.parametrize("fn", [session_breakdown, setup_breakdown, emotion_breakdown, pair_breakdown])
def test_empty_journal(fn):
    assert fn([]) == []
