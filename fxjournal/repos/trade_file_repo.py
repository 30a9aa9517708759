"""Trade file repository — read-only JSON source for journal trades."""

import json
import logging
import pathlib

from fxjournal.models.trade import Trade, trades_from_dicts

logger = logging.getLogger("fxjournal")


class TradeFileRepo:
    """Loads the journal from a JSON export.

    The file holds either a list of trade records or an object with a
    ``"trades"`` list, in the storage record shape.

    Args:
        path: Path to the JSON file.
    """

    def __init__(self, path: str) -> None:
        self._path = pathlib.Path(path)

    @property
    def path(self) -> pathlib.Path:
        return self._path

    def get_trades(self) -> list[Trade]:
        """Read and parse every trade in the file.

        A missing file is an empty journal.

        Raises:
            ValueError: If the file is not valid JSON or a record is malformed.
        """
        if not self._path.exists():
            logger.warning("Trade file %s not found; journal is empty.", self._path)
            return []

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"{self._path} is not valid JSON: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("trades", [])
        if not isinstance(data, list):
            raise ValueError(f"{self._path} must contain a list of trades")

        trades = trades_from_dicts(data)
        logger.info("Loaded %d trade(s) from %s", len(trades), self._path)
        return trades
