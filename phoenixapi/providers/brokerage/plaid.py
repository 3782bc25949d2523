"""
Plaid REST client

Covers the calls used to link a brokerage account and read investment
holdings: link token creation, public token exchange, item and institution
lookup, and holdings retrieval.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from phoenixapi.config import Settings
from phoenixapi.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

PLAID_BASE_URLS = {
    "sandbox": "https://sandbox.plaid.com",
    "development": "https://development.plaid.com",
    "production": "https://production.plaid.com",
}


class PlaidClient:
    def __init__(self, settings: Settings):
        self.client_id = settings.PLAID_CLIENT_ID
        self.secret = settings.PLAID_SECRET
        self.client_name = settings.PLAID_CLIENT_NAME
        self.timeout = settings.PLAID_TIMEOUT_SECONDS
        self.base_url = PLAID_BASE_URLS.get(
            settings.PLAID_ENV, PLAID_BASE_URLS["sandbox"]
        )

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = {"client_id": self.client_id, "secret": self.secret, **payload}
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=body)
        except httpx.TimeoutException:
            logger.error(f"Plaid {path} timeout")
            raise UpstreamError("Brokerage provider timeout", {"endpoint": path})
        except httpx.HTTPError as e:
            logger.error(f"Plaid {path} request failed: {e}")
            raise UpstreamError("Brokerage provider unavailable", {"endpoint": path})

        if response.status_code != 200:
            error: Dict[str, Any] = {}
            try:
                error = response.json()
            except ValueError:
                pass
            logger.error(f"Plaid {path} failed ({response.status_code}): {response.text}")
            raise UpstreamError(
                error.get("error_message") or "Brokerage provider error",
                {
                    "endpoint": path,
                    "status": response.status_code,
                    "plaid_error_code": error.get("error_code"),
                },
            )
        return response.json()

    async def create_link_token(self, user_id: int) -> Dict[str, Any]:
        return await self._post(
            "/link/token/create",
            {
                "client_name": self.client_name,
                "user": {"client_user_id": str(user_id)},
                "products": ["investments"],
                "country_codes": ["US"],
                "language": "en",
            },
        )

    async def exchange_public_token(self, public_token: str) -> Dict[str, Any]:
        return await self._post(
            "/item/public_token/exchange", {"public_token": public_token}
        )

    async def get_item(self, access_token: str) -> Dict[str, Any]:
        return await self._post("/item/get", {"access_token": access_token})

    async def get_institution_name(self, institution_id: Optional[str]) -> Optional[str]:
        if not institution_id:
            return None
        data = await self._post(
            "/institutions/get_by_id",
            {"institution_id": institution_id, "country_codes": ["US"]},
        )
        return (data.get("institution") or {}).get("name")

    async def get_holdings(self, access_token: str) -> Dict[str, Any]:
        return await self._post(
            "/investments/holdings/get", {"access_token": access_token}
        )
