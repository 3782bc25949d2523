"""
Market Router

News headlines, price lookups and refreshes, and the market calendar.
"""

import logging
from typing import Any

from dependency_injector.wiring import inject
from fastapi import APIRouter, Depends

from phoenixapi.core.auth_middleware import get_current_user, require_admin
from phoenixapi.deps import get_calendar_service, get_news_service, get_price_service
from phoenixapi.schemas.auth import BaseResponse
from phoenixapi.schemas.user import User as UserSchema
from phoenixapi.services.calendar_service import CalendarService
from phoenixapi.services.news_service import NewsService
from phoenixapi.services.price_service import PriceService

router = APIRouter(prefix="/market", tags=["market"])
logger = logging.getLogger(__name__)


@router.get("/news", response_model=BaseResponse)
@inject
async def get_news(
    current_user: UserSchema = Depends(get_current_user),
    news_service: NewsService = Depends(get_news_service),
) -> Any:
    feed = await news_service.fetch_headlines()
    return BaseResponse(
        success=True,
        data=feed.model_dump(),
        meta={"count": feed.count, "failed_symbols": feed.failed_symbols},
    )


@router.get("/prices/{symbol}", response_model=BaseResponse)
@inject
async def get_price(
    symbol: str,
    current_user: UserSchema = Depends(get_current_user),
    price_service: PriceService = Depends(get_price_service),
) -> Any:
    quote = await price_service.fetch_price(symbol)
    return BaseResponse(success=True, data=quote.model_dump())


@router.post("/prices/update", response_model=BaseResponse)
@inject
async def update_prices(
    admin: UserSchema = Depends(require_admin),
    price_service: PriceService = Depends(get_price_service),
) -> Any:
    """Refresh every tracked symbol; failures are reported, not raised."""
    result = await price_service.update_prices()
    logger.info(f"Admin {admin.id} refreshed prices: {len(result.updated)} ok, {len(result.failed)} failed")
    return BaseResponse(
        success=True,
        data=result.model_dump(),
        meta={"updated_count": len(result.updated), "failed_count": len(result.failed)},
    )


@router.get("/calendar", response_model=BaseResponse)
@inject
def get_calendar_resources(
    calendar_service: CalendarService = Depends(get_calendar_service),
) -> Any:
    resources = calendar_service.calendar_resources()
    return BaseResponse(success=True, data=[r.model_dump() for r in resources])


@router.get("/calendar/earnings", response_model=BaseResponse)
@inject
async def get_watchlist_earnings(
    current_user: UserSchema = Depends(get_current_user),
    calendar_service: CalendarService = Depends(get_calendar_service),
) -> Any:
    result = await calendar_service.watchlist_earnings()
    return BaseResponse(success=True, data=result.model_dump())


@router.get("/calendar/earnings/{symbol}", response_model=BaseResponse)
@inject
async def get_earnings_date(
    symbol: str,
    current_user: UserSchema = Depends(get_current_user),
    calendar_service: CalendarService = Depends(get_calendar_service),
) -> Any:
    result = await calendar_service.earnings_date(symbol)
    return BaseResponse(success=True, data=result.model_dump())
