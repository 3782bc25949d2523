import logging
from typing import Any

from dependency_injector.wiring import inject
from fastapi import APIRouter, Depends

from phoenixapi.core.auth_middleware import get_current_user
from phoenixapi.deps import get_plaid_service
from phoenixapi.schemas.auth import BaseResponse
from phoenixapi.schemas.portfolio import PublicTokenExchange
from phoenixapi.schemas.user import User as UserSchema
from phoenixapi.services.plaid_service import PlaidService

router = APIRouter(prefix="/plaid", tags=["brokerage"])
logger = logging.getLogger(__name__)


@router.post("/link-token", response_model=BaseResponse)
@inject
async def create_link_token(
    current_user: UserSchema = Depends(get_current_user),
    plaid_service: PlaidService = Depends(get_plaid_service),
) -> Any:
    token = await plaid_service.create_link_token(current_user.id)
    return BaseResponse(success=True, data=token.model_dump())


@router.post("/exchange", response_model=BaseResponse)
@inject
async def exchange_public_token(
    payload: PublicTokenExchange,
    current_user: UserSchema = Depends(get_current_user),
    plaid_service: PlaidService = Depends(get_plaid_service),
) -> Any:
    """Store the brokerage item behind a Link public token."""
    item = await plaid_service.exchange_public_token(current_user.id, payload.public_token)
    return BaseResponse(success=True, data=item.model_dump())


@router.get("/items", response_model=BaseResponse)
@inject
def list_items(
    current_user: UserSchema = Depends(get_current_user),
    plaid_service: PlaidService = Depends(get_plaid_service),
) -> Any:
    items = plaid_service.list_items(current_user.id)
    return BaseResponse(success=True, data=[i.model_dump() for i in items])


@router.post("/sync", response_model=BaseResponse)
@inject
async def sync_holdings(
    current_user: UserSchema = Depends(get_current_user),
    plaid_service: PlaidService = Depends(get_plaid_service),
) -> Any:
    result = await plaid_service.sync_holdings(current_user.id)
    return BaseResponse(
        success=True,
        data=result.model_dump(),
        meta={"synced_items": result.synced_items, "failed_items": result.failed_items},
    )


@router.get("/holdings", response_model=BaseResponse)
@inject
def list_holdings(
    current_user: UserSchema = Depends(get_current_user),
    plaid_service: PlaidService = Depends(get_plaid_service),
) -> Any:
    holdings = plaid_service.list_holdings(current_user.id)
    return BaseResponse(success=True, data=[h.model_dump() for h in holdings])
