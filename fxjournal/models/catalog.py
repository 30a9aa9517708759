"""Journal catalogs — named constant tables shared by forms and analytics.

Aggregators take these as keyword arguments so callers can substitute
their own lists.
"""

CURRENCY_PAIRS: tuple[str, ...] = (
    "EUR/USD", "GBP/USD", "USD/JPY", "USD/CHF",
    "AUD/USD", "USD/CAD", "NZD/USD", "EUR/GBP",
    "EUR/JPY", "GBP/JPY", "AUD/JPY", "EUR/AUD",
    "EUR/CAD", "GBP/AUD", "GBP/CAD", "XAU/USD",
)

SETUPS: tuple[str, ...] = (
    "Breakout", "FVG", "Order Block", "Trend Continuation",
    "Reversal", "Support/Resistance", "Fibonacci", "Supply/Demand",
    "Liquidity Grab", "ICT", "SMC", "Elliott Wave",
)

EMOTIONS: tuple[str, ...] = (
    "Disciplined", "Confident", "Patient",
    "FOMO", "Greedy", "Fearful", "Revenge Trading",
    "Overconfident", "Impulsive", "Rule Break",
)

# Tags counted as trading mistakes in the what-if views
NEGATIVE_EMOTIONS: frozenset[str] = frozenset({
    "FOMO",
    "Greedy",
    "Fearful",
    "Revenge Trading",
    "Overconfident",
    "Impulsive",
    "Rule Break",
})

# ── Sessions ─────────────────────────────────────────────────────────────
# (label, start hour inclusive, end hour exclusive), UTC.  Windows overlap;
# the first matching entry wins, so order is significant.

TRADING_SESSIONS: tuple[tuple[str, int, int], ...] = (
    ("Asian", 0, 9),
    ("London", 8, 17),
    ("New York", 13, 22),
)

OFF_HOURS = "Off-Hours"


def is_negative_emotion(
    tag: str,
    negative: frozenset[str] | tuple[str, ...] = NEGATIVE_EMOTIONS,
) -> bool:
    """Return True if *tag* is one of the *negative* emotion labels."""
    return tag in negative
