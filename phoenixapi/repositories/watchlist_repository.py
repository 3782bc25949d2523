"""
Watchlist Repository

Published entries plus the submission queue. The review transition is a
conditional UPDATE guarded on ``status = pending`` so two concurrent reviews
cannot both succeed.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from phoenixapi.models.watchlist import (
    SubmissionStatusEnum,
    WatchlistEntry as WatchlistEntryModel,
    WatchlistSubmission as WatchlistSubmissionModel,
)
from phoenixapi.schemas.watchlist import SubmissionSchema, WatchlistEntrySchema
from phoenixapi.repositories.base import BaseRepository


class WatchlistEntryRepository(BaseRepository[WatchlistEntryModel, WatchlistEntrySchema]):
    def __init__(self, db: Session):
        super().__init__(WatchlistEntryModel, WatchlistEntrySchema, db)

    def list_ordered(self) -> List[WatchlistEntrySchema]:
        """All entries ordered by sector then symbol"""
        self._ensure_clean_session()
        model_instances = (
            self.db.query(self.model_class)
            .order_by(self.model_class.sector, self.model_class.symbol, self.model_class.id)
            .all()
        )
        return self._to_schemas(model_instances)

    def get_by_submission(self, submission_id: int) -> Optional[WatchlistEntrySchema]:
        return self.get_by_field("submission_id", submission_id)

    def distinct_symbols(self) -> List[str]:
        self._ensure_clean_session()
        rows = (
            self.db.query(self.model_class.symbol)
            .distinct()
            .order_by(self.model_class.symbol)
            .all()
        )
        return [row[0] for row in rows]

    def set_price_for_symbol(self, symbol: str, price: float, commit: bool = True) -> int:
        """Update current_price on every entry for ``symbol``; returns rows touched"""
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


class SubmissionRepository(BaseRepository[WatchlistSubmissionModel, SubmissionSchema]):
    def __init__(self, db: Session):
        super().__init__(WatchlistSubmissionModel, SubmissionSchema, db)

    def list_by_status(
        self, status: Optional[SubmissionStatusEnum] = None
    ) -> List[SubmissionSchema]:
        """Newest first; every status when ``status`` is None"""
        self._ensure_clean_session()
        query = self.db.query(self.model_class)
        if status is not None:
            query = query.filter(self.model_class.status == status)
        model_instances = query.order_by(
            self.model_class.submitted_at.desc(), self.model_class.id.desc()
        ).all()
        return self._to_schemas(model_instances)

    def list_by_submitter(self, user_id: int) -> List[SubmissionSchema]:
        self._ensure_clean_session()
        model_instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.submitted_by == user_id)
            .order_by(self.model_class.submitted_at.desc(), self.model_class.id.desc())
            .all()
        )
        return self._to_schemas(model_instances)

    def transition_if_pending(
        self,
        submission_id: int,
        new_status: SubmissionStatusEnum,
        reviewer_id: int,
        admin_notes: Optional[str] = None,
    ) -> bool:
        """Move a pending submission to ``new_status``.

        Returns True only when this call performed the transition. Does not
        commit; the caller finishes the transaction (so an approval can insert
        its entry atomically with the status change).
        """
        self._ensure_clean_session()
        result = self.db.execute(
            update(self.model_class)
            .where(
                self.model_class.id == submission_id,
                self.model_class.status == SubmissionStatusEnum.PENDING,
            )
            .values(
                status=new_status,
                reviewed_by=reviewer_id,
                reviewed_at=datetime.now(timezone.utc),
                admin_notes=admin_notes,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def refresh_one(self, submission_id: int) -> Optional[SubmissionSchema]:
        """Re-read a row bypassing the identity map"""
        model_instance = (
            self.db.query(self.model_class)
            .filter(self.model_class.id == submission_id)
            .populate_existing()
            .first()
        )
        return self._to_schema(model_instance)
