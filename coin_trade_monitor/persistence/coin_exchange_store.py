"""Persistent storage for tracked coin/exchange pairs."""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..exceptions import PersistenceError
from ..models import CoinExchange
from .file_io import read_json, write_json

logger = logging.getLogger(__name__)


class CoinExchangeStore:
    """
    Stores every tracked pair in a single JSON document keyed by pair id.

    Upserts are serialised by a lock so concurrent writes for distinct pairs
    never lose each other's updates.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the pair store.

        Args:
            config: Configuration dictionary containing:
                - data_dir: Directory holding the store files
                - pairs_file: File name of the pair document
        """
        self.path = Path(config.get("data_dir", "data")) / config.get(
            "pairs_file", "coin_exchanges.json"
        )
        self._lock = threading.Lock()
        logger.info(f"Coin exchange store initialized at {self.path}")

    def _load(self) -> Dict[str, Dict[str, Any]]:
        data = read_json(self.path, default={})
        if not isinstance(data, dict):
            raise PersistenceError(f"{self.path} does not hold a pair mapping")
        return data

    def get_all(self) -> List[CoinExchange]:
        with self._lock:
            records = self._load()
        return [CoinExchange.from_dict(record) for record in records.values()]

    def get(self, coin_exchange_id: str) -> Optional[CoinExchange]:
        with self._lock:
            record = self._load().get(coin_exchange_id)
        return CoinExchange.from_dict(record) if record else None

    def upsert(self, coin_exchange: CoinExchange) -> None:
        with self._lock:
            records = self._load()
            records[coin_exchange.id] = coin_exchange.to_dict()
            write_json(self.path, records)
        logger.debug(f"Coin exchange saved: {coin_exchange.id}")
