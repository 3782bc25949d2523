"""
Price Service

Refreshes current prices for every symbol held in trades or listed on the
watchlist. Calls are sequential with a fixed delay between them to stay under
the upstream rate limit; one symbol failing never aborts the batch.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from phoenixapi.config import Settings
from phoenixapi.providers.prices.yahoo_finance import YahooFinanceClient
from phoenixapi.repositories.portfolio_repository import TradeRepository
from phoenixapi.repositories.watchlist_repository import WatchlistEntryRepository
from phoenixapi.schemas.market import PriceQuote, PriceUpdateResult

logger = logging.getLogger(__name__)


class PriceService:
    def __init__(self, db: Session, settings: Settings, price_client: YahooFinanceClient):
        self.db = db
        self.settings = settings
        self.price_client = price_client
        self.trade_repo = TradeRepository(db)
        self.entry_repo = WatchlistEntryRepository(db)

    async def fetch_price(self, symbol: str) -> PriceQuote:
        symbol = symbol.strip().upper()
        return PriceQuote(symbol=symbol, price=await self.price_client.fetch_price(symbol))

    def tracked_symbols(self) -> List[str]:
        """Distinct symbols across trades and watchlist entries, sorted"""
        symbols = set(self.trade_repo.distinct_symbols())
        symbols.update(self.entry_repo.distinct_symbols())
        return sorted(s.upper() for s in symbols if s)

    async def update_prices(self, symbols: Optional[List[str]] = None) -> PriceUpdateResult:
        if symbols is None:
            symbols = self.tracked_symbols()

        updated: List[str] = []
        failed: List[str] = []
        delay = self.settings.PRICE_FETCH_DELAY_SECONDS

        for index, symbol in enumerate(symbols):
            if index and delay > 0:
                await asyncio.sleep(delay)

            price = await self.price_client.fetch_price(symbol)
            if price is None:
                failed.append(symbol)
                continue

            try:
                self.trade_repo.set_price_for_symbol(symbol, price, commit=False)
                self.entry_repo.set_price_for_symbol(symbol, price, commit=False)
                self.db.commit()
            except Exception as e:
                self.db.rollback()
                logger.error(f"Failed to store price for {symbol}: {e}")
                failed.append(symbol)
                continue
            updated.append(symbol)

        logger.info(f"Price update: {len(updated)} updated, {len(failed)} failed {failed}")
        return PriceUpdateResult(
            updated=updated, failed=failed, timestamp=datetime.now(timezone.utc)
        )
