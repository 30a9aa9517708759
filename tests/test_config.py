"""Tests for fxjournal.config — environment variable loading and validation."""

import pytest

from fxjournal.config import load_config, parse_tag_list


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Ensure journal env vars are cleared between tests."""
    for var in [
        "JOURNAL_TRADES_PATH",
        "STARTING_BALANCE",
        "EXCLUDED_EMOTIONS",
        "LOG_LEVEL",
        "API_PORT",
    ]:
        monkeypatch.delenv(var, raising=False)


def _no_dotenv(tmp_path):
    # Point load_dotenv at a missing file so a developer's .env can't leak in
    return str(tmp_path / "nonexistent.env")


class TestLoadConfig:
    def test_defaults(self, tmp_path):
        cfg = load_config(env_path=_no_dotenv(tmp_path))
        assert cfg.trades_path == "data/trades.json"
        assert cfg.starting_balance == 10_000.0
        assert cfg.excluded_emotions == ()
        assert cfg.log_level == "INFO"
        assert cfg.api_port == 8080

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("JOURNAL_TRADES_PATH", "/tmp/journal.json")
        monkeypatch.setenv("STARTING_BALANCE", "25000")
        monkeypatch.setenv("EXCLUDED_EMOTIONS", "FOMO, Rule Break")
        monkeypatch.setenv("API_PORT", "9000")
        cfg = load_config(env_path=_no_dotenv(tmp_path))
        assert cfg.trades_path == "/tmp/journal.json"
        assert cfg.starting_balance == 25_000.0
        assert cfg.excluded_emotions == ("FOMO", "Rule Break")
        assert cfg.api_port == 9000

    def test_reads_dotenv_file(self, monkeypatch, tmp_path):
        # Registers the variable so monkeypatch removes what load_dotenv sets
        monkeypatch.setenv("STARTING_BALANCE", "1")
        monkeypatch.delenv("STARTING_BALANCE")
        env_file = tmp_path / ".env"
        env_file.write_text("STARTING_BALANCE=5000\n", encoding="utf-8")
        cfg = load_config(env_path=str(env_file))
        assert cfg.starting_balance == 5_000.0

    def test_bad_starting_balance(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STARTING_BALANCE", "lots")
        with pytest.raises(ValueError, match="STARTING_BALANCE"):
            load_config(env_path=_no_dotenv(tmp_path))

    def test_non_positive_starting_balance(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STARTING_BALANCE", "0")
        with pytest.raises(ValueError, match="STARTING_BALANCE"):
            load_config(env_path=_no_dotenv(tmp_path))

    def test_bad_port(self, monkeypatch, tmp_path):
        monkeypatch.setenv("API_PORT", "eighty")
        with pytest.raises(ValueError, match="API_PORT"):
            load_config(env_path=_no_dotenv(tmp_path))


class TestParseTagList:
    def test_blank_entries_dropped(self):
        assert parse_tag_list(" FOMO ,, Greedy ,") == ("FOMO", "Greedy")

    def test_empty(self):
        assert parse_tag_list("") == ()
