from datetime import date, datetime, timezone

import pytest
from dependency_injector import providers

from phoenixapi.models import WatchlistEntry
from phoenixapi.models.watchlist import TermEnum
from phoenixapi.schemas.market import Article


class FakePriceClient:
    async def fetch_price(self, symbol):
        return {"AAPL": 191.25}.get(symbol)

    async def fetch_earnings_date(self, symbol, today=None):
        return date(2024, 8, 1)


class FakeNewsClient:
    async def general_headlines(self):
        return [
            Article(
                title="Markets open higher",
                url="https://news.example.com/open",
                published_at=datetime(2024, 1, 2, 14, 30, tzinfo=timezone.utc),
            )
        ]

    async def symbol_headlines(self, symbol):
        return []


@pytest.fixture(autouse=True)
def fake_clients(api):
    clients = api.container.clients
    clients.price_client.override(providers.Object(FakePriceClient()))
    clients.news_client.override(providers.Object(FakeNewsClient()))
    yield
    clients.price_client.reset_override()
    clients.news_client.reset_override()


def test_price_lookup(client, alice, auth_headers):
    res = client.get("/api/v1/market/prices/aapl", headers=auth_headers(alice))

    assert res.status_code == 200
    assert res.json()["data"] == {"symbol": "AAPL", "price": 191.25}


def test_unknown_price_is_null(client, alice, auth_headers):
    res = client.get("/api/v1/market/prices/NOPE", headers=auth_headers(alice))

    assert res.json()["data"]["price"] is None


def test_price_update_is_admin_only(client, admin, alice, auth_headers):
    assert client.post("/api/v1/market/prices/update", headers=auth_headers(alice)).status_code == 403

    res = client.post("/api/v1/market/prices/update", headers=auth_headers(admin))

    assert res.status_code == 200
    assert res.json()["meta"] == {"updated_count": 0, "failed_count": 0}


def test_price_update_reports_failed_symbol(client, db, admin, auth_headers):
    db.add_all(
        [
            WatchlistEntry(
                symbol=symbol,
                company_name=symbol,
                sector="Technology",
                term=TermEnum.LONG,
                added_by=admin.id,
            )
            for symbol in ("AAPL", "BADSYM")
        ]
    )
    db.commit()

    res = client.post("/api/v1/market/prices/update", headers=auth_headers(admin))

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["meta"] == {"updated_count": 1, "failed_count": 1}
    assert body["data"]["updated"] == ["AAPL"]
    assert body["data"]["failed"] == ["BADSYM"]


def test_news(client, alice, auth_headers):
    res = client.get("/api/v1/market/news", headers=auth_headers(alice))

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["count"] == 1
    assert data["articles"][0]["url"] == "https://news.example.com/open"


def test_calendar(client, alice, auth_headers):
    resources = client.get("/api/v1/market/calendar").json()["data"]
    assert len(resources) == 3

    res = client.get("/api/v1/market/calendar/earnings/msft", headers=auth_headers(alice))
    assert res.json()["data"] == {"symbol": "MSFT", "earnings_date": "2024-08-01"}
