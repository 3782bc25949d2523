import asyncio
from datetime import date, datetime

import pytest

from phoenixapi.core.exceptions import UpstreamError
from phoenixapi.models import WatchlistEntry
from phoenixapi.models.watchlist import TermEnum
from phoenixapi.providers.prices.yahoo_finance import _first_future_date
from phoenixapi.services.calendar_service import CALENDAR_RESOURCES, CalendarService


class FakeEarningsClient:
    def __init__(self, dates, failing=()):
        self.dates = dates
        self.failing = set(failing)

    async def fetch_earnings_date(self, symbol, today=None):
        if symbol in self.failing:
            raise RuntimeError("yfinance exploded")
        return self.dates.get(symbol)


def test_first_future_date_picks_soonest_upcoming():
    today = date(2024, 5, 1)
    values = [date(2024, 4, 25), datetime(2024, 7, 30, 16, 0), date(2024, 5, 2)]

    assert _first_future_date(values, today) == date(2024, 5, 2)
    assert _first_future_date(date(2024, 5, 1), today) == date(2024, 5, 1)
    assert _first_future_date([date(2023, 1, 1)], today) is None
    assert _first_future_date(None, today) is None


def test_calendar_resources(db):
    resources = CalendarService(db, FakeEarningsClient({})).calendar_resources()

    assert [r.title for r in resources] == [
        "Economic Calendar",
        "Earnings Calendar",
        "Market Events",
    ]
    assert all(r.links for r in CALENDAR_RESOURCES)


def test_earnings_date_for_symbol(db):
    client = FakeEarningsClient({"AAPL": date(2024, 8, 1)})

    result = asyncio.run(CalendarService(db, client).earnings_date(" aapl"))

    assert result.symbol == "AAPL"
    assert result.earnings_date == date(2024, 8, 1)


def test_earnings_lookup_failure_is_upstream_error(db):
    client = FakeEarningsClient({}, failing={"AAPL"})

    with pytest.raises(UpstreamError):
        asyncio.run(CalendarService(db, client).earnings_date("AAPL"))


def test_watchlist_earnings_sorted_with_failures(db, admin):
    for symbol in ("NVDA", "AAPL", "XOM", "BAD"):
        db.add(
            WatchlistEntry(
                symbol=symbol,
                company_name=symbol,
                sector="Technology",
                term=TermEnum.LONG,
                added_by=admin.id,
            )
        )
    db.commit()
    client = FakeEarningsClient(
        {"NVDA": date(2024, 8, 20), "AAPL": date(2024, 8, 1)}, failing={"BAD"}
    )

    result = asyncio.run(CalendarService(db, client).watchlist_earnings())

    assert [e.symbol for e in result.earnings] == ["AAPL", "NVDA", "XOM"]
    assert result.earnings[-1].earnings_date is None
    assert result.failed == ["BAD"]
