"""
Watchlist Router

Published watchlist, admin entry management and the submission/review flow.
"""

import logging
from typing import Any, Optional

from dependency_injector.wiring import inject
from fastapi import APIRouter, Depends, Query

from phoenixapi.core.auth_middleware import get_current_user, require_admin
from phoenixapi.deps import get_approval_service, get_watchlist_service
from phoenixapi.schemas.auth import BaseResponse
from phoenixapi.schemas.user import User as UserSchema
from phoenixapi.schemas.watchlist import (
    SECTORS,
    AdminEntryCreate,
    EntryDraft,
    EntryUpdate,
    ReviewRequest,
    SubmissionStatus,
)
from phoenixapi.services.approval_service import ApprovalService
from phoenixapi.services.watchlist_service import WatchlistService

router = APIRouter(prefix="/watchlist", tags=["watchlist"])
logger = logging.getLogger(__name__)


@router.get("", response_model=BaseResponse)
@inject
def get_watchlist(
    current_user: UserSchema = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
) -> Any:
    """Entries grouped by sector, then long/short term."""
    grouped = watchlist_service.grouped()
    return BaseResponse(
        success=True, data=grouped.model_dump(), meta={"total_count": grouped.total_count}
    )


@router.get("/sectors", response_model=BaseResponse)
def get_sectors() -> Any:
    return BaseResponse(success=True, data={"sectors": SECTORS})


@router.get("/entries", response_model=BaseResponse)
@inject
def list_entries(
    current_user: UserSchema = Depends(get_current_user),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
) -> Any:
    entries = watchlist_service.list_entries()
    return BaseResponse(
        success=True,
        data=[e.model_dump() for e in entries],
        meta={"count": len(entries)},
    )


@router.post("/entries", response_model=BaseResponse)
@inject
def add_entry(
    draft: AdminEntryCreate,
    admin: UserSchema = Depends(require_admin),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
) -> Any:
    entry = watchlist_service.add_entry(draft, admin)
    return BaseResponse(success=True, data=entry.model_dump())


@router.patch("/entries/{entry_id}", response_model=BaseResponse)
@inject
def update_entry(
    entry_id: int,
    update: EntryUpdate,
    admin: UserSchema = Depends(require_admin),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
) -> Any:
    entry = watchlist_service.update_entry(entry_id, update, admin)
    return BaseResponse(success=True, data=entry.model_dump())


@router.delete("/entries/{entry_id}", response_model=BaseResponse)
@inject
def delete_entry(
    entry_id: int,
    admin: UserSchema = Depends(require_admin),
    watchlist_service: WatchlistService = Depends(get_watchlist_service),
) -> Any:
    watchlist_service.delete_entry(entry_id, admin)
    return BaseResponse(success=True, data={"entry_id": entry_id})


# Submissions


@router.post("/submissions", response_model=BaseResponse)
@inject
def submit_stock(
    draft: EntryDraft,
    current_user: UserSchema = Depends(get_current_user),
    approval_service: ApprovalService = Depends(get_approval_service),
) -> Any:
    """Propose a stock for the watchlist; it stays pending until reviewed."""
    submission = approval_service.submit(draft, current_user.id)
    return BaseResponse(success=True, data=submission.model_dump())


@router.get("/submissions/me", response_model=BaseResponse)
@inject
def get_my_submissions(
    current_user: UserSchema = Depends(get_current_user),
    approval_service: ApprovalService = Depends(get_approval_service),
) -> Any:
    submissions = approval_service.my_submissions(current_user.id)
    return BaseResponse(
        success=True,
        data=[s.model_dump() for s in submissions],
        meta={"count": len(submissions)},
    )


@router.get("/submissions", response_model=BaseResponse)
@inject
def list_submissions(
    status: Optional[SubmissionStatus] = Query(None, description="Filter by status"),
    current_user: UserSchema = Depends(get_current_user),
    approval_service: ApprovalService = Depends(get_approval_service),
) -> Any:
    submissions = approval_service.list_submissions(current_user, status)
    return BaseResponse(
        success=True,
        data=[s.model_dump() for s in submissions],
        meta={"count": len(submissions), "status": status.value if status else None},
    )


@router.post("/submissions/{submission_id}/approve", response_model=BaseResponse)
@inject
def approve_submission(
    submission_id: int,
    review: Optional[ReviewRequest] = None,
    current_user: UserSchema = Depends(get_current_user),
    approval_service: ApprovalService = Depends(get_approval_service),
) -> Any:
    result = approval_service.approve(
        submission_id, current_user, review.notes if review else None
    )
    return BaseResponse(success=True, data=result.model_dump())


@router.post("/submissions/{submission_id}/deny", response_model=BaseResponse)
@inject
def deny_submission(
    submission_id: int,
    review: Optional[ReviewRequest] = None,
    current_user: UserSchema = Depends(get_current_user),
    approval_service: ApprovalService = Depends(get_approval_service),
) -> Any:
    result = approval_service.deny(
        submission_id, current_user, review.notes if review else None
    )
    return BaseResponse(success=True, data=result.model_dump())
