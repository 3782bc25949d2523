from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from phoenixapi.models.community import (
    Comment as CommentModel,
    Like as LikeModel,
    Post as PostModel,
    Vote as VoteModel,
)
from phoenixapi.schemas.community import CommentSchema, LikeSchema, PostSchema
from phoenixapi.repositories.base import BaseRepository


class PostRepository(BaseRepository[PostModel, PostSchema]):
    def __init__(self, db: Session):
        super().__init__(PostModel, PostSchema, db)

    def list_posts(
        self, symbol: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> Tuple[List[PostSchema], int]:
        """Newest first, optionally for one symbol; returns (page, total)"""
        self._ensure_clean_session()
        query = self.db.query(self.model_class)
        if symbol:
            query = query.filter(self.model_class.symbol == symbol.upper())
        total = query.count()
        model_instances = (
            query.order_by(self.model_class.created_at.desc(), self.model_class.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return self._to_schemas(model_instances), total

    def symbol_counts(self, limit: Optional[int] = None) -> List[Tuple[str, int]]:
        """Distinct post symbols with post counts, most discussed first"""
        self._ensure_clean_session()
        post_count = func.count(self.model_class.id)
        query = (
            self.db.query(self.model_class.symbol, post_count)
            .group_by(self.model_class.symbol)
            .order_by(post_count.desc(), self.model_class.symbol)
        )
        if limit:
            query = query.limit(limit)
        return [(row[0], row[1]) for row in query.all()]

    def delete_with_children(self, post_id: int) -> bool:
        """Remove a post together with its comments, likes and votes"""
        self._ensure_clean_session()
        try:
            for child in (CommentModel, LikeModel, VoteModel):
                self.db.query(child).filter(child.post_id == post_id).delete(
                    synchronize_session="fetch"
                )
            deleted = (
                self.db.query(self.model_class)
                .filter(self.model_class.id == post_id)
                .delete(synchronize_session="fetch")
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return deleted > 0


class CommentRepository(BaseRepository[CommentModel, CommentSchema]):
    def __init__(self, db: Session):
        super().__init__(CommentModel, CommentSchema, db)

    def list_for_post(self, post_id: int) -> List[CommentSchema]:
        """Oldest first"""
        self._ensure_clean_session()
        model_instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.post_id == post_id)
            .order_by(self.model_class.created_at, self.model_class.id)
            .all()
        )
        return self._to_schemas(model_instances)


class LikeRepository(BaseRepository[LikeModel, LikeSchema]):
    def __init__(self, db: Session):
        super().__init__(LikeModel, LikeSchema, db)

    def get_like(self, post_id: int, user_id: int) -> Optional[LikeSchema]:
        self._ensure_clean_session()
        model_instance = (
            self.db.query(self.model_class)
            .filter(
                self.model_class.post_id == post_id,
                self.model_class.user_id == user_id,
            )
            .first()
        )
        return self._to_schema(model_instance)
