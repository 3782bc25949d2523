from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from phoenixapi.models.portfolio import (
    Holding as HoldingModel,
    PlaidItem as PlaidItemModel,
    PortfolioGoal as PortfolioGoalModel,
    Trade as TradeModel,
)
from phoenixapi.schemas.portfolio import (
    GoalSchema,
    HoldingSchema,
    PlaidItemCredentials,
    PlaidItemSchema,
    TradeSchema,
)
from phoenixapi.repositories.base import BaseRepository


class TradeRepository(BaseRepository[TradeModel, TradeSchema]):
    def __init__(self, db: Session):
        super().__init__(TradeModel, TradeSchema, db)

    def list_trades(self, user_id: Optional[int] = None) -> List[TradeSchema]:
        self._ensure_clean_session()
        query = self.db.query(self.model_class)
        if user_id is not None:
            query = query.filter(self.model_class.user_id == user_id)
        model_instances = query.order_by(
            self.model_class.created_at.desc(), self.model_class.id.desc()
        ).all()
        return self._to_schemas(model_instances)

    def distinct_symbols(self) -> List[str]:
        self._ensure_clean_session()
        rows = self.db.query(self.model_class.symbol).distinct().all()
        return [row[0] for row in rows]

    def set_price_for_symbol(self, symbol: str, price: float, commit: bool = True) -> int:
        self._ensure_clean_session()
        result = self.db.execute(
            update(self.model_class)
            .where(self.model_class.symbol == symbol)
            .values(current_price=price)
            .execution_options(synchronize_session="fetch")
        )
        if commit:
            self.db.commit()
        return result.rowcount or 0


class GoalRepository(BaseRepository[PortfolioGoalModel, GoalSchema]):
    def __init__(self, db: Session):
        super().__init__(PortfolioGoalModel, GoalSchema, db)

    def get_for_user(self, user_id: int) -> Optional[GoalSchema]:
        return self.get_by_field("user_id", user_id)


class PlaidItemRepository(BaseRepository[PlaidItemModel, PlaidItemSchema]):
    def __init__(self, db: Session):
        super().__init__(PlaidItemModel, PlaidItemSchema, db)

    def list_credentials(self, user_id: int) -> List[PlaidItemCredentials]:
        """Items with their access tokens, for server-side sync only"""
        self._ensure_clean_session()
        model_instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(self.model_class.id)
            .all()
        )
        return [PlaidItemCredentials.model_validate(m) for m in model_instances]

    def list_for_user(self, user_id: int) -> List[PlaidItemSchema]:
        return self.find_all(filters={"user_id": user_id}, order_by="id")

    def touch_sync(self, item_pk: int) -> Optional[PlaidItemSchema]:
        return self.update(item_pk, last_sync=datetime.now(timezone.utc))


class HoldingRepository(BaseRepository[HoldingModel, HoldingSchema]):
    def __init__(self, db: Session):
        super().__init__(HoldingModel, HoldingSchema, db)

    def list_for_user(self, user_id: int) -> List[HoldingSchema]:
        return self.find_all(filters={"user_id": user_id}, order_by="symbol")

    def replace_for_item(
        self, user_id: int, plaid_item_id: int, rows: List[dict]
    ) -> List[HoldingSchema]:
        """Swap an item's holdings for ``rows`` in one transaction"""
        self._ensure_clean_session()
        try:
            self.db.query(self.model_class).filter(
                self.model_class.plaid_item_id == plaid_item_id
            ).delete(synchronize_session="fetch")
            instances = [
                self.model_class(user_id=user_id, plaid_item_id=plaid_item_id, **row)
                for row in rows
            ]
            self.db.add_all(instances)
            self.db.flush()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return self._to_schemas(instances)
