import asyncio
import time
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import select

from phoenixapi.config import settings
from phoenixapi.models import Trade, WatchlistEntry
from phoenixapi.models.portfolio import TradeTypeEnum
from phoenixapi.models.watchlist import TermEnum
from phoenixapi.providers.prices import yahoo_finance
from phoenixapi.services.price_service import PriceService


class FakePriceClient:
    def __init__(self, prices):
        self.prices = prices
        self.calls = []

    async def fetch_price(self, symbol):
        self.calls.append(symbol)
        return self.prices.get(symbol)


@pytest.fixture
def holdings(db, admin, alice):
    db.add_all(
        [
            Trade(
                user_id=alice.id,
                trade_type=TradeTypeEnum.STOCK,
                symbol="AAPL",
                company_name="Apple",
                quantity=Decimal("10"),
                cost_basis=Decimal("150"),
                current_price=Decimal("150"),
                added_by=admin.id,
            ),
            WatchlistEntry(
                symbol="AAPL",
                company_name="Apple",
                sector="Technology",
                term=TermEnum.LONG,
                added_by=admin.id,
            ),
            WatchlistEntry(
                symbol="BADSYM",
                company_name="Nothing",
                sector="Technology",
                term=TermEnum.SHORT,
                added_by=admin.id,
            ),
        ]
    )
    db.commit()


def _price_of(db, model, symbol):
    # Column select bypasses the identity map
    return db.execute(select(model.current_price).where(model.symbol == symbol)).scalar()


def test_tracked_symbols_are_distinct_and_sorted(db, holdings):
    service = PriceService(db, settings, FakePriceClient({}))

    assert service.tracked_symbols() == ["AAPL", "BADSYM"]


def test_update_prices_records_failures_without_aborting(db, holdings):
    client = FakePriceClient({"AAPL": 187.5})
    service = PriceService(db, settings, client)

    result = asyncio.run(service.update_prices())

    assert result.updated == ["AAPL"]
    assert result.failed == ["BADSYM"]
    assert result.total == 2
    assert client.calls == ["AAPL", "BADSYM"]
    assert float(_price_of(db, Trade, "AAPL")) == pytest.approx(187.5)
    assert float(_price_of(db, WatchlistEntry, "AAPL")) == pytest.approx(187.5)
    assert _price_of(db, WatchlistEntry, "BADSYM") is None


def test_update_prices_with_explicit_symbols(db, holdings):
    client = FakePriceClient({"TSLA": 250.0})
    service = PriceService(db, settings, client)

    result = asyncio.run(service.update_prices(["TSLA"]))

    # No rows hold TSLA, but the fetch itself succeeded
    assert result.updated == ["TSLA"]
    assert client.calls == ["TSLA"]


def test_fetch_price_normalizes_symbol(db):
    service = PriceService(db, settings, FakePriceClient({"AAPL": 190.0}))

    quote = asyncio.run(service.fetch_price(" aapl "))

    assert quote.symbol == "AAPL"
    assert quote.price == 190.0


class TimedPriceClient(FakePriceClient):
    def __init__(self, prices):
        super().__init__(prices)
        self.called_at = []

    async def fetch_price(self, symbol):
        self.called_at.append(time.monotonic())
        return await super().fetch_price(symbol)


def test_update_prices_waits_between_calls(db, holdings):
    client = TimedPriceClient({"AAPL": 187.5, "MSFT": 410.0})
    paced = settings.model_copy(update={"PRICE_FETCH_DELAY_SECONDS": 0.2})

    result = asyncio.run(PriceService(db, paced, client).update_prices(["AAPL", "BADSYM", "MSFT"]))

    assert result.failed == ["BADSYM"]
    gaps = [b - a for a, b in zip(client.called_at, client.called_at[1:])]
    assert len(gaps) == 2
    # asyncio timers may fire within one clock tick of the deadline
    assert all(gap >= 0.19 for gap in gaps)


def test_yfinance_error_is_recorded_as_failure(db, holdings, monkeypatch, tmp_path):
    def fake_ticker(symbol):
        if symbol == "BADSYM":
            raise RuntimeError("No data found, symbol may be delisted")
        ticker = MagicMock()
        ticker.fast_info = {"lastPrice": 190.0}
        return ticker

    monkeypatch.setenv("YFINANCE_CACHE_DIR", str(tmp_path))
    monkeypatch.setattr(yahoo_finance.yf, "Ticker", fake_ticker)
    service = PriceService(db, settings, yahoo_finance.YahooFinanceClient())

    result = asyncio.run(service.update_prices())

    assert result.updated == ["AAPL"]
    assert result.failed == ["BADSYM"]
    assert float(_price_of(db, Trade, "AAPL")) == pytest.approx(190.0)
