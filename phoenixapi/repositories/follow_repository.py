from typing import List, Optional

from sqlalchemy.orm import Session

from phoenixapi.models.social import Follow as FollowModel
from phoenixapi.schemas.user import FollowSchema
from phoenixapi.repositories.base import BaseRepository


class FollowRepository(BaseRepository[FollowModel, FollowSchema]):
    """Directed follow edges"""

    def __init__(self, db: Session):
        super().__init__(FollowModel, FollowSchema, db)

    def get_edge(self, follower_id: int, following_id: int) -> Optional[FollowSchema]:
        self._ensure_clean_session()
        model_instance = (
            self.db.query(self.model_class)
            .filter(
                self.model_class.follower_id == follower_id,
                self.model_class.following_id == following_id,
            )
            .first()
        )
        return self._to_schema(model_instance)

    def follows(self, follower_id: int, following_id: int) -> bool:
        return self.exists(
            {"follower_id": follower_id, "following_id": following_id}
        )

    def add(self, follower_id: int, following_id: int) -> Optional[FollowSchema]:
        return self.create(follower_id=follower_id, following_id=following_id)

    def remove(self, follower_id: int, following_id: int) -> bool:
        edge = self.get_edge(follower_id, following_id)
        if edge is None:
            return False
        return self.delete(edge.id)

    def count_followers(self, user_id: int) -> int:
        return self.count({"following_id": user_id})

    def count_following(self, user_id: int) -> int:
        return self.count({"follower_id": user_id})

    def following_ids(self, user_id: int) -> List[int]:
        self._ensure_clean_session()
        rows = (
            self.db.query(self.model_class.following_id)
            .filter(self.model_class.follower_id == user_id)
            .all()
        )
        return [row[0] for row in rows]
