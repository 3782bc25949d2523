import pytest
from dependency_injector import providers


class FakePlaidClient:
    async def create_link_token(self, user_id):
        return {"link_token": "link-sandbox-abc", "expiration": "2024-01-01T00:00:00Z"}

    async def exchange_public_token(self, public_token):
        return {"access_token": "access-sandbox-1", "item_id": "item-1"}

    async def get_item(self, access_token):
        return {"item": {"institution_id": "ins_3"}}

    async def get_institution_name(self, institution_id):
        return "Chase"

    async def get_holdings(self, access_token):
        return {
            "holdings": [{"security_id": "s1", "quantity": 3, "cost_basis": 300}],
            "securities": [
                {"security_id": "s1", "ticker_symbol": "VTI", "name": "Vanguard", "close_price": 250}
            ],
        }


@pytest.fixture(autouse=True)
def fake_plaid(api):
    api.container.clients.plaid_client.override(providers.Object(FakePlaidClient()))
    yield
    api.container.clients.plaid_client.reset_override()


def test_link_exchange_sync(client, alice, auth_headers):
    headers = auth_headers(alice)

    link = client.post("/api/v1/plaid/link-token", headers=headers)
    assert link.json()["data"]["link_token"] == "link-sandbox-abc"

    item = client.post("/api/v1/plaid/exchange", json={"public_token": "public-1"}, headers=headers)
    assert item.status_code == 200
    assert item.json()["data"]["institution_name"] == "Chase"
    assert "access_token" not in item.json()["data"]

    dup = client.post("/api/v1/plaid/exchange", json={"public_token": "public-1"}, headers=headers)
    assert dup.status_code == 409

    sync = client.post("/api/v1/plaid/sync", headers=headers)
    assert sync.json()["meta"]["synced_items"] == 1

    holdings = client.get("/api/v1/plaid/holdings", headers=headers).json()["data"]
    assert [h["symbol"] for h in holdings] == ["VTI"]
