import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from phoenixapi.core.exceptions import ConflictError, UpstreamError
from phoenixapi.providers.brokerage.plaid import PlaidClient
from phoenixapi.repositories.portfolio_repository import (
    HoldingRepository,
    PlaidItemRepository,
)
from phoenixapi.schemas.portfolio import (
    HoldingsSyncResult,
    HoldingSchema,
    LinkTokenResponse,
    PlaidItemSchema,
)

logger = logging.getLogger(__name__)


def holdings_rows(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Join Plaid holdings to their securities into Holding column values"""
    securities = {s.get("security_id"): s for s in payload.get("securities") or []}
    rows = []
    for holding in payload.get("holdings") or []:
        security = securities.get(holding.get("security_id")) or {}
        rows.append(
            {
                "security_id": holding.get("security_id") or "",
                "symbol": security.get("ticker_symbol") or "UNKNOWN",
                "name": security.get("name") or "Unknown Security",
                "quantity": holding.get("quantity") or 0,
                "cost_basis": holding.get("cost_basis") or 0,
                "current_price": security.get("close_price") or 0,
                "institution_value": holding.get("institution_value"),
            }
        )
    return rows


class PlaidService:
    """Brokerage linking and holdings sync"""

    def __init__(self, db: Session, plaid_client: PlaidClient):
        self.db = db
        self.plaid_client = plaid_client
        self.item_repo = PlaidItemRepository(db)
        self.holding_repo = HoldingRepository(db)

    async def create_link_token(self, user_id: int) -> LinkTokenResponse:
        data = await self.plaid_client.create_link_token(user_id)
        if not data.get("link_token"):
            raise UpstreamError("Brokerage provider returned no link token")
        return LinkTokenResponse(link_token=data["link_token"], expiration=data.get("expiration"))

    async def exchange_public_token(self, user_id: int, public_token: str) -> PlaidItemSchema:
        exchange = await self.plaid_client.exchange_public_token(public_token)
        access_token = exchange.get("access_token")
        item_id = exchange.get("item_id")
        if not access_token or not item_id:
            raise UpstreamError("Brokerage provider returned an incomplete token exchange")

        if self.item_repo.exists({"item_id": item_id}):
            raise ConflictError("Brokerage account already linked", {"item_id": item_id})

        item = await self.plaid_client.get_item(access_token)
        institution_id = (item.get("item") or {}).get("institution_id")
        institution_name = await self.plaid_client.get_institution_name(institution_id)

        linked = self.item_repo.create(
            user_id=user_id,
            access_token=access_token,
            item_id=item_id,
            institution_id=institution_id,
            institution_name=institution_name,
        )
        logger.info(f"User {user_id} linked brokerage item {item_id} ({institution_name})")
        return linked

    def list_items(self, user_id: int) -> List[PlaidItemSchema]:
        return self.item_repo.list_for_user(user_id)

    def list_holdings(self, user_id: int) -> List[HoldingSchema]:
        return self.holding_repo.list_for_user(user_id)

    async def sync_holdings(self, user_id: int) -> HoldingsSyncResult:
        """Replace each linked item's holdings; a failing item is logged and skipped"""
        synced = 0
        failed: List[str] = []
        for item in self.item_repo.list_credentials(user_id):
            try:
                payload = await self.plaid_client.get_holdings(item.access_token)
            except UpstreamError as e:
                logger.error(f"Holdings sync failed for item {item.item_id}: {e.message}")
                failed.append(item.item_id)
                continue

            self.holding_repo.replace_for_item(user_id, item.id, holdings_rows(payload))
            self.item_repo.touch_sync(item.id)
            synced += 1

        return HoldingsSyncResult(
            holdings=self.holding_repo.list_for_user(user_id),
            synced_items=synced,
            failed_items=failed,
        )
