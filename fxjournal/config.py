"""FxJournal — application configuration.

Loads .env variables into a typed config object.
Validates numeric variables on startup.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    trades_path: str
    starting_balance: float
    excluded_emotions: tuple[str, ...]
    log_level: str
    api_port: int


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` with a message naming the variable when a value
    cannot be parsed.
    """
    load_dotenv(dotenv_path=env_path)

    raw_balance = os.environ.get("STARTING_BALANCE", "10000")
    try:
        starting_balance = float(raw_balance)
    except ValueError:
        raise ValueError(f"STARTING_BALANCE must be a number, got {raw_balance!r}")
    if starting_balance <= 0:
        raise ValueError(f"STARTING_BALANCE must be positive, got {starting_balance}")

    raw_port = os.environ.get("API_PORT", "8080")
    try:
        api_port = int(raw_port)
    except ValueError:
        raise ValueError(f"API_PORT must be an integer, got {raw_port!r}")

    return Config(
        trades_path=os.environ.get("JOURNAL_TRADES_PATH", "data/trades.json"),
        starting_balance=starting_balance,
        excluded_emotions=parse_tag_list(os.environ.get("EXCLUDED_EMOTIONS", "")),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        api_port=api_port,
    )


def parse_tag_list(raw: str) -> tuple[str, ...]:
    """Split a comma-separated tag list, trimming blanks."""
    return tuple(tag.strip() for tag in raw.split(",") if tag.strip())
