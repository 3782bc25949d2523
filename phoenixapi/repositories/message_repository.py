from typing import List

from sqlalchemy import and_, or_, update
from sqlalchemy.orm import Session

from phoenixapi.models.social import Message as MessageModel
from phoenixapi.schemas.messaging import MessageSchema
from phoenixapi.repositories.base import BaseRepository


class MessageRepository(BaseRepository[MessageModel, MessageSchema]):
    def __init__(self, db: Session):
        super().__init__(MessageModel, MessageSchema, db)

    def _between(self, user_a: int, user_b: int):
        return or_(
            and_(
                self.model_class.sender_id == user_a,
                self.model_class.receiver_id == user_b,
            ),
            and_(
                self.model_class.sender_id == user_b,
                self.model_class.receiver_id == user_a,
            ),
        )

    def conversation(self, user_a: int, user_b: int) -> List[MessageSchema]:
        """Messages in either direction, oldest first"""
        self._ensure_clean_session()
        model_instances = (
            self.db.query(self.model_class)
            .filter(self._between(user_a, user_b))
            .order_by(self.model_class.created_at, self.model_class.id)
            .all()
        )
        return self._to_schemas(model_instances)

    def involving(self, user_id: int) -> List[MessageSchema]:
        """Every message sent or received by ``user_id``, newest first"""
        self._ensure_clean_session()
        model_instances = (
            self.db.query(self.model_class)
            .filter(
                or_(
                    self.model_class.sender_id == user_id,
                    self.model_class.receiver_id == user_id,
                )
            )
            .order_by(self.model_class.created_at.desc(), self.model_class.id.desc())
            .all()
        )
        return self._to_schemas(model_instances)

    def mark_read(self, receiver_id: int, sender_id: int) -> int:
        """Flip every unread message from sender to receiver; returns the count"""
        self._ensure_clean_session()
        try:
            result = self.db.execute(
                update(self.model_class)
                .where(
                    self.model_class.receiver_id == receiver_id,
                    self.model_class.sender_id == sender_id,
                    self.model_class.read.is_(False),
                )
                .values(read=True)
                .execution_options(synchronize_session="fetch")
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return result.rowcount or 0

    def unread_count(self, receiver_id: int) -> int:
        return self.count({"receiver_id": receiver_id, "read": False})
