import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from phoenixapi.core.exceptions import UpstreamError
from phoenixapi.providers.prices.yahoo_finance import YahooFinanceClient
from phoenixapi.repositories.watchlist_repository import WatchlistEntryRepository
from phoenixapi.schemas.market import (
    CalendarLink,
    CalendarResource,
    EarningsDate,
    WatchlistEarnings,
)

logger = logging.getLogger(__name__)

CALENDAR_RESOURCES = [
    CalendarResource(
        title="Economic Calendar",
        description="Track key economic events, data releases, and central bank meetings",
        links=[
            CalendarLink(name="Investing.com Economic Calendar", url="https://www.investing.com/economic-calendar/"),
            CalendarLink(name="Forex Factory Calendar", url="https://www.forexfactory.com/calendar"),
            CalendarLink(name="Trading Economics Calendar", url="https://tradingeconomics.com/calendar"),
            CalendarLink(name="MarketWatch Economic Calendar", url="https://www.marketwatch.com/economy-politics/calendar"),
        ],
    ),
    CalendarResource(
        title="Earnings Calendar",
        description="Stay updated on corporate earnings reports and conference calls",
        links=[
            CalendarLink(name="Yahoo Finance Earnings Calendar", url="https://finance.yahoo.com/calendar/earnings"),
            CalendarLink(name="Earnings Whispers", url="https://www.earningswhispers.com/calendar"),
            CalendarLink(name="Nasdaq Earnings Calendar", url="https://www.nasdaq.com/market-activity/earnings"),
            CalendarLink(name="Seeking Alpha Earnings Calendar", url="https://seekingalpha.com/earnings/earnings-calendar"),
        ],
    ),
    CalendarResource(
        title="Market Events",
        description="Monitor IPOs, dividends, and other important market events",
        links=[
            CalendarLink(name="MarketBeat Dividend Calendar", url="https://www.marketbeat.com/dividends/calendar/"),
            CalendarLink(name="IPO Calendar - Nasdaq", url="https://www.nasdaq.com/market-activity/ipos"),
            CalendarLink(name="Stock Splits Calendar", url="https://www.marketbeat.com/stock-splits/"),
            CalendarLink(name="Ex-Dividend Calendar", url="https://www.thestreet.com/dividends/calendar"),
        ],
    ),
]


class CalendarService:
    def __init__(self, db: Session, price_client: YahooFinanceClient):
        self.db = db
        self.price_client = price_client
        self.entry_repo = WatchlistEntryRepository(db)

    def calendar_resources(self) -> List[CalendarResource]:
        return CALENDAR_RESOURCES

    async def earnings_date(self, symbol: str) -> EarningsDate:
        symbol = symbol.strip().upper()
        try:
            next_date = await self.price_client.fetch_earnings_date(symbol)
        except Exception as e:
            logger.error(f"Earnings lookup failed for {symbol}: {e}")
            raise UpstreamError("Earnings lookup failed", {"symbol": symbol})
        return EarningsDate(symbol=symbol, earnings_date=next_date)

    async def watchlist_earnings(self) -> WatchlistEarnings:
        earnings: List[EarningsDate] = []
        failed: List[str] = []
        for symbol in self.entry_repo.distinct_symbols():
            try:
                next_date: Optional[date] = await self.price_client.fetch_earnings_date(symbol)
            except Exception as e:
                logger.warning(f"Earnings lookup failed for {symbol}: {e}")
                failed.append(symbol)
                continue
            earnings.append(EarningsDate(symbol=symbol, earnings_date=next_date))

        # Known dates first, soonest first
        earnings.sort(key=lambda e: (e.earnings_date is None, e.earnings_date or date.min, e.symbol))
        return WatchlistEarnings(earnings=earnings, failed=failed)
