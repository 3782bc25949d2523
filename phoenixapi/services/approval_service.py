"""
Approval Service

Submission queue for the watchlist. A submission starts pending and moves
exactly once to approved or denied; approving publishes exactly one entry.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from phoenixapi.core.exceptions import (
    AlreadyReviewedError,
    NotFoundError,
    PermissionDeniedError,
)
from phoenixapi.models.watchlist import SubmissionStatusEnum
from phoenixapi.repositories.watchlist_repository import (
    SubmissionRepository,
    WatchlistEntryRepository,
)
from phoenixapi.schemas.user import User as UserSchema
from phoenixapi.schemas.watchlist import EntryDraft, ReviewResult, SubmissionSchema
from phoenixapi.services.watchlist_service import validate_draft

logger = logging.getLogger(__name__)


class ApprovalService:
    def __init__(self, db: Session):
        self.db = db
        self.submission_repo = SubmissionRepository(db)
        self.entry_repo = WatchlistEntryRepository(db)

    def submit(self, draft: EntryDraft, submitter_id: int) -> SubmissionSchema:
        validate_draft(draft)
        submission = self.submission_repo.create(
            symbol=draft.symbol,
            company_name=draft.company_name,
            sector=draft.sector,
            term=draft.term,
            notes=draft.notes,
            status=SubmissionStatusEnum.PENDING,
            submitted_by=submitter_id,
        )
        logger.info(f"User {submitter_id} submitted {draft.symbol} for review")
        return submission

    def _check_reviewable(self, submission_id: int, reviewer: UserSchema) -> SubmissionSchema:
        if not reviewer.is_admin:
            raise PermissionDeniedError("Only admins can review submissions")
        submission = self.submission_repo.get_by_id(submission_id)
        if submission is None:
            raise NotFoundError(
                f"Submission not found: {submission_id}", {"submission_id": submission_id}
            )
        if submission.status != SubmissionStatusEnum.PENDING:
            raise AlreadyReviewedError(submission_id, submission.status.value)
        return submission

    def _lost_race(self, submission_id: int) -> AlreadyReviewedError:
        self.db.rollback()
        current = self.submission_repo.refresh_one(submission_id)
        if current is None:
            raise NotFoundError(
                f"Submission not found: {submission_id}", {"submission_id": submission_id}
            )
        return AlreadyReviewedError(submission_id, current.status.value)

    def approve(
        self, submission_id: int, reviewer: UserSchema, notes: Optional[str] = None
    ) -> ReviewResult:
        """Publish the submission as a watchlist entry.

        The status flip is a conditional update on ``status = pending``; the
        entry insert shares its transaction, so a concurrent reviewer that
        loses the update creates nothing.
        """
        submission = self._check_reviewable(submission_id, reviewer)

        try:
            if not self.submission_repo.transition_if_pending(
                submission_id, SubmissionStatusEnum.APPROVED, reviewer.id, notes
            ):
                raise self._lost_race(submission_id)

            entry = self.entry_repo.create(
                commit=False,
                symbol=submission.symbol,
                company_name=submission.company_name,
                sector=submission.sector,
                term=submission.term,
                notes=submission.notes,
                added_by=reviewer.id,
                submission_id=submission.id,
            )
            self.db.commit()
        except IntegrityError:
            # unique submission_id: an entry for this submission already exists
            raise self._lost_race(submission_id)

        logger.info(
            f"Admin {reviewer.id} approved submission {submission_id} ({submission.symbol})"
        )
        return ReviewResult(
            submission=self.submission_repo.refresh_one(submission_id), entry=entry
        )

    def deny(
        self, submission_id: int, reviewer: UserSchema, notes: Optional[str] = None
    ) -> ReviewResult:
        self._check_reviewable(submission_id, reviewer)

        if not self.submission_repo.transition_if_pending(
            submission_id, SubmissionStatusEnum.DENIED, reviewer.id, notes
        ):
            raise self._lost_race(submission_id)
        self.db.commit()

        logger.info(f"Admin {reviewer.id} denied submission {submission_id}")
        return ReviewResult(submission=self.submission_repo.refresh_one(submission_id))

    def list_submissions(
        self, reviewer: UserSchema, status: Optional[SubmissionStatusEnum] = None
    ) -> List[SubmissionSchema]:
        if not reviewer.is_admin:
            raise PermissionDeniedError("Only admins can list all submissions")
        return self.submission_repo.list_by_status(status)

    def my_submissions(self, user_id: int) -> List[SubmissionSchema]:
        return self.submission_repo.list_by_submitter(user_id)
