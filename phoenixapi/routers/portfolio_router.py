"""
Portfolio Router

A user's admin-recorded trades, summary and growth goal, plus the admin
endpoints that manage those trades.
"""

import logging
from typing import Any, Optional

from dependency_injector.wiring import inject
from fastapi import APIRouter, Depends, Query

from phoenixapi.core.auth_middleware import get_current_user, require_admin
from phoenixapi.deps import get_portfolio_service
from phoenixapi.schemas.auth import BaseResponse
from phoenixapi.schemas.portfolio import TradeCreate, TradeUpdate
from phoenixapi.schemas.user import User as UserSchema
from phoenixapi.services.portfolio_service import PortfolioService

router = APIRouter(prefix="/portfolio", tags=["portfolio"])
logger = logging.getLogger(__name__)


@router.get("/trades", response_model=BaseResponse)
@inject
def get_my_trades(
    current_user: UserSchema = Depends(get_current_user),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> Any:
    trades = portfolio_service.my_trades(current_user.id)
    return BaseResponse(
        success=True, data=[t.model_dump() for t in trades], meta={"count": len(trades)}
    )


@router.get("/summary", response_model=BaseResponse)
@inject
def get_summary(
    current_user: UserSchema = Depends(get_current_user),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> Any:
    return BaseResponse(
        success=True, data=portfolio_service.portfolio_summary(current_user.id).model_dump()
    )


@router.get("/goal", response_model=BaseResponse)
@inject
def get_goal_progress(
    current_user: UserSchema = Depends(get_current_user),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> Any:
    """Goal (created with defaults on first access) and progress toward it."""
    progress = portfolio_service.goal_progress(current_user.id)
    return BaseResponse(success=True, data=progress.model_dump())


# Admin


@router.get("/admin/trades", response_model=BaseResponse)
@inject
def admin_list_trades(
    user_id: Optional[int] = Query(None, description="Only this user's trades"),
    admin: UserSchema = Depends(require_admin),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> Any:
    trades = portfolio_service.list_trades(admin, user_id)
    return BaseResponse(
        success=True, data=[t.model_dump() for t in trades], meta={"count": len(trades)}
    )


@router.post("/admin/trades", response_model=BaseResponse)
@inject
def admin_add_trade(
    payload: TradeCreate,
    admin: UserSchema = Depends(require_admin),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> Any:
    trade = portfolio_service.add_trade(payload, admin)
    return BaseResponse(success=True, data=trade.model_dump())


@router.patch("/admin/trades/{trade_id}", response_model=BaseResponse)
@inject
def admin_update_trade(
    trade_id: int,
    payload: TradeUpdate,
    admin: UserSchema = Depends(require_admin),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> Any:
    trade = portfolio_service.update_trade(trade_id, payload, admin)
    return BaseResponse(success=True, data=trade.model_dump())


@router.delete("/admin/trades/{trade_id}", response_model=BaseResponse)
@inject
def admin_delete_trade(
    trade_id: int,
    admin: UserSchema = Depends(require_admin),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> Any:
    portfolio_service.delete_trade(trade_id, admin)
    return BaseResponse(success=True, data={"trade_id": trade_id})
