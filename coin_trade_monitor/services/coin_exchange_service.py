"""Source and sink of tracked coin/exchange pairs."""

import asyncio
import logging
from typing import List

from ..models import CoinExchange, utc_now_iso
from ..persistence import CoinExchangeStore

logger = logging.getLogger(__name__)


class CoinExchangeService:
    """Loads the pairs to trade and persists their state after each check."""

    def __init__(self, store: CoinExchangeStore):
        self.store = store

    async def get_coins_to_trade(self) -> List[CoinExchange]:
        pairs = await asyncio.to_thread(self.store.get_all)
        logger.info(f"Loaded {len(pairs)} tracked pair(s) from store")
        return pairs

    async def save_coin_exchange(self, coin_exchange: CoinExchange) -> None:
        coin_exchange.updated_at = utc_now_iso()
        await asyncio.to_thread(self.store.upsert, coin_exchange)
