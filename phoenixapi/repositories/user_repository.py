from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from phoenixapi.models.user import User as UserModel
from phoenixapi.schemas.user import User as UserSchema
from phoenixapi.schemas.user import UserCredentials
from phoenixapi.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserModel, UserSchema]):
    """User accounts; password hashes are only exposed via ``get_credentials``."""

    def __init__(self, db: Session):
        super().__init__(UserModel, UserSchema, db)

    def get_by_username(self, username: str) -> Optional[UserSchema]:
        """Case-insensitive username lookup"""
        self._ensure_clean_session()
        model_instance = (
            self.db.query(self.model_class)
            .filter(func.lower(self.model_class.username) == username.lower())
            .first()
        )
        return self._to_schema(model_instance)

    def get_credentials(self, username: str) -> Optional[UserCredentials]:
        self._ensure_clean_session()
        model_instance = (
            self.db.query(self.model_class)
            .filter(func.lower(self.model_class.username) == username.lower())
            .first()
        )
        if model_instance is None:
            return None
        return UserCredentials.model_validate(model_instance)

    def create_user(
        self, username: str, password_hash: str, display_name: str
    ) -> Optional[UserSchema]:
        return self.create(
            username=username,
            password_hash=password_hash,
            display_name=display_name,
            is_admin=False,
            is_active=True,
        )

    def update_last_login(
        self, user_id: int, login_time: Optional[datetime] = None
    ) -> Optional[UserSchema]:
        if login_time is None:
            login_time = datetime.now(timezone.utc)

        return self.update(user_id, last_login_at=login_time)

    def set_admin(self, user_id: int, is_admin: bool = True) -> Optional[UserSchema]:
        return self.update(user_id, is_admin=is_admin)

    def search_by_username(self, pattern: str, limit: int = 20) -> List[UserSchema]:
        """Username or display name containing ``pattern``"""
        self._ensure_clean_session()
        needle = pattern.lower()
        model_instances = (
            self.db.query(self.model_class)
            .filter(
                self.model_class.is_active.is_(True),
                (func.lower(self.model_class.username).contains(needle, autoescape=True))
                | (func.lower(self.model_class.display_name).contains(needle, autoescape=True)),
            )
            .order_by(self.model_class.username)
            .limit(limit)
            .all()
        )
        return self._to_schemas(model_instances)

    def get_many(self, user_ids: List[int]) -> List[UserSchema]:
        if not user_ids:
            return []
        self._ensure_clean_session()
        model_instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.id.in_(user_ids))
            .all()
        )
        return self._to_schemas(model_instances)
