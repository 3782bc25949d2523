from typing import Dict, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from phoenixapi.models.community import SentimentEnum, Vote as VoteModel
from phoenixapi.schemas.community import VoteSchema
from phoenixapi.repositories.base import BaseRepository


class VoteRepository(BaseRepository[VoteModel, VoteSchema]):
    """One sentiment vote per (post, user), updated in place on re-vote."""

    def __init__(self, db: Session):
        super().__init__(VoteModel, VoteSchema, db)

    def _find(self, post_id: int, user_id: int) -> Optional[VoteModel]:
        return (
            self.db.query(self.model_class)
            .filter(
                self.model_class.post_id == post_id,
                self.model_class.user_id == user_id,
            )
            .first()
        )

    def get_vote(self, post_id: int, user_id: int) -> Optional[VoteSchema]:
        self._ensure_clean_session()
        return self._to_schema(self._find(post_id, user_id))

    def upsert(
        self,
        post_id: int,
        user_id: int,
        short_term: SentimentEnum,
        long_term: SentimentEnum,
    ) -> VoteSchema:
        """Insert or overwrite the caller's vote.

        A concurrent insert for the same pair trips the unique constraint; the
        loser rolls back and applies its values as an update instead.
        """
        self._ensure_clean_session()
        existing = self._find(post_id, user_id)
        if existing is None:
            instance = self.model_class(
                post_id=post_id,
                user_id=user_id,
                short_term_sentiment=short_term,
                long_term_sentiment=long_term,
            )
            self.db.add(instance)
            try:
                self.db.flush()
                self.db.commit()
                self.db.refresh(instance)
                return self._to_schema(instance)
            except IntegrityError:
                self.db.rollback()
                existing = self._find(post_id, user_id)
                if existing is None:
                    raise

        existing.short_term_sentiment = short_term
        existing.long_term_sentiment = long_term
        try:
            self.db.flush()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(existing)
        return self._to_schema(existing)

    def tally(self, post_id: int) -> Dict[str, Dict[str, int]]:
        """Raw counts per horizon: {"short_term": {"bullish": n, ...}, "long_term": {...}}"""
        self._ensure_clean_session()
        result: Dict[str, Dict[str, int]] = {}
        for horizon, column in (
            ("short_term", self.model_class.short_term_sentiment),
            ("long_term", self.model_class.long_term_sentiment),
        ):
            counts = {sentiment.value: 0 for sentiment in SentimentEnum}
            rows = (
                self.db.query(column, func.count(self.model_class.id))
                .filter(self.model_class.post_id == post_id)
                .group_by(column)
                .all()
            )
            for sentiment, n in rows:
                key = sentiment.value if isinstance(sentiment, SentimentEnum) else str(sentiment)
                counts[key] = n
            result[horizon] = counts
        return result
