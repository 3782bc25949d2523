import asyncio
import logging
from datetime import date, datetime
from typing import Any, Optional

import yfinance as yf

from phoenixapi.utils.yf_cache import configure_yfinance_cache

logger = logging.getLogger(__name__)


def _first_future_date(values: Any, today: date) -> Optional[date]:
    if values is None:
        return None
    if not isinstance(values, (list, tuple)):
        values = [values]
    candidates = []
    for value in values:
        if isinstance(value, datetime):
            value = value.date()
        elif hasattr(value, "date") and callable(value.date):
            # pandas Timestamp
            value = value.date()
        if isinstance(value, date) and value >= today:
            candidates.append(value)
    return min(candidates) if candidates else None


class YahooFinanceClient:
    """Quotes and earnings dates through yfinance.

    yfinance is blocking, so calls run in the default executor.
    """

    def __init__(self, max_concurrency: int = 5):
        configure_yfinance_cache()
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def _run(self, fn):
        loop = asyncio.get_running_loop()
        async with self._semaphore:
            return await loop.run_in_executor(None, fn)

    async def fetch_price(self, symbol: str) -> Optional[float]:
        """Latest regular-market price, or None when unavailable"""

        def fetch():
            ticker = yf.Ticker(symbol)
            price = None
            try:
                price = ticker.fast_info.get("lastPrice")
            except (KeyError, AttributeError):
                price = None
            if price is None:
                info = ticker.info or {}
                price = info.get("regularMarketPrice") or info.get("currentPrice")
            return price

        try:
            price = await self._run(fetch)
        except Exception as e:
            logger.warning(f"Price lookup failed for {symbol}: {e}")
            return None

        if price is None:
            logger.warning(f"No price data for {symbol}")
            return None
        return float(price)

    async def fetch_earnings_date(
        self, symbol: str, today: Optional[date] = None
    ) -> Optional[date]:
        """Next earnings date on or after ``today``; None when unknown"""
        today = today or date.today()

        def fetch():
            calendar = yf.Ticker(symbol).calendar
            if isinstance(calendar, dict):
                return calendar.get("Earnings Date")
            if calendar is not None and "Earnings Date" in getattr(calendar, "index", []):
                return list(calendar.loc["Earnings Date"])
            return None

        raw = await self._run(fetch)
        return _first_future_date(raw, today)
