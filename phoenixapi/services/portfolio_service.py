"""
Portfolio Service

Admin-managed trades per user, the portfolio summary and the growth goal.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from phoenixapi.config import Settings
from phoenixapi.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from phoenixapi.repositories.portfolio_repository import GoalRepository, TradeRepository
from phoenixapi.repositories.user_repository import UserRepository
from phoenixapi.schemas.portfolio import (
    GoalProgress,
    GoalSchema,
    PortfolioSummary,
    TradeCreate,
    TradeSchema,
    TradeType,
    TradeUpdate,
)
from phoenixapi.schemas.user import User as UserSchema

logger = logging.getLogger(__name__)

# Option contracts cover 100 shares
OPTION_MULTIPLIER = Decimal("100")


def position_value(trade: TradeSchema) -> Decimal:
    multiplier = OPTION_MULTIPLIER if trade.trade_type == TradeType.OPTION else Decimal("1")
    return trade.quantity * trade.current_price * multiplier


def position_cost(trade: TradeSchema) -> Decimal:
    multiplier = OPTION_MULTIPLIER if trade.trade_type == TradeType.OPTION else Decimal("1")
    return trade.quantity * trade.cost_basis * multiplier


def goal_progress_pct(goal: GoalSchema, current_value: float) -> float:
    """Share of the way from starting to target amount, clamped to [0, 100]"""
    span = float(goal.target_amount - goal.starting_amount)
    if span <= 0:
        return 100.0 if current_value >= float(goal.target_amount) else 0.0
    pct = (current_value - float(goal.starting_amount)) / span * 100
    return round(max(0.0, min(100.0, pct)), 2)


def _require_admin(user: UserSchema) -> None:
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required")


class PortfolioService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.trade_repo = TradeRepository(db)
        self.goal_repo = GoalRepository(db)
        self.user_repo = UserRepository(db)

    # Admin trade management

    def list_trades(self, admin: UserSchema, user_id: Optional[int] = None) -> List[TradeSchema]:
        _require_admin(admin)
        return self.trade_repo.list_trades(user_id)

    def add_trade(self, data: TradeCreate, admin: UserSchema) -> TradeSchema:
        _require_admin(admin)
        if self.user_repo.get_by_id(data.user_id) is None:
            raise NotFoundError(f"User not found: {data.user_id}", {"user_id": data.user_id})
        if data.trade_type == TradeType.OPTION and None in (
            data.option_expiration,
            data.option_type,
            data.strike_price,
            data.break_even_price,
        ):
            raise ValidationError(
                "Option trades require expiration, type, strike and break-even price"
            )

        fields = data.model_dump()
        if data.trade_type == TradeType.STOCK:
            for name in ("option_expiration", "option_type", "strike_price", "break_even_price"):
                fields[name] = None
        trade = self.trade_repo.create(added_by=admin.id, **fields)
        logger.info(f"Admin {admin.id} recorded {data.trade_type.value} trade {data.symbol} for user {data.user_id}")
        return trade

    def update_trade(self, trade_id: int, data: TradeUpdate, admin: UserSchema) -> TradeSchema:
        _require_admin(admin)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        trade = self.trade_repo.update(trade_id, **changes) if changes else self.trade_repo.get_by_id(trade_id)
        if trade is None:
            raise NotFoundError(f"Trade not found: {trade_id}", {"trade_id": trade_id})
        return trade

    def delete_trade(self, trade_id: int, admin: UserSchema) -> None:
        _require_admin(admin)
        if not self.trade_repo.delete(trade_id):
            raise NotFoundError(f"Trade not found: {trade_id}", {"trade_id": trade_id})

    # User views

    def my_trades(self, user_id: int) -> List[TradeSchema]:
        return self.trade_repo.list_trades(user_id)

    def portfolio_summary(self, user_id: int) -> PortfolioSummary:
        trades = self.my_trades(user_id)
        total_value = sum((position_value(t) for t in trades), Decimal("0"))
        total_cost = sum((position_cost(t) for t in trades), Decimal("0"))
        gain = total_value - total_cost
        gain_pct = float(gain / total_cost * 100) if total_cost > 0 else 0.0
        return PortfolioSummary(
            user_id=user_id,
            total_value=round(float(total_value), 2),
            total_cost=round(float(total_cost), 2),
            total_gain=round(float(gain), 2),
            total_gain_pct=round(gain_pct, 2),
            position_count=len(trades),
        )

    def get_goal(self, user_id: int) -> GoalSchema:
        """The user's goal, creating the default one on first read"""
        goal = self.goal_repo.get_for_user(user_id)
        if goal is None:
            goal = self.goal_repo.create(
                user_id=user_id,
                starting_amount=Decimal(str(self.settings.DEFAULT_GOAL_STARTING_AMOUNT)),
                target_amount=Decimal(str(self.settings.DEFAULT_GOAL_TARGET_AMOUNT)),
                target_date=date.fromisoformat(self.settings.DEFAULT_GOAL_TARGET_DATE),
            )
        return goal

    def goal_progress(self, user_id: int, current_value: Optional[float] = None) -> GoalProgress:
        goal = self.get_goal(user_id)
        if current_value is None:
            current_value = self.portfolio_summary(user_id).total_value
        return GoalProgress(
            goal=goal,
            current_value=current_value,
            progress_pct=goal_progress_pct(goal, current_value),
        )
