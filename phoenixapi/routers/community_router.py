"""
Community Router

Discussion feed: posts, comments, likes and sentiment votes.
"""

import logging
from typing import Any, Optional

from dependency_injector.wiring import inject
from fastapi import APIRouter, Depends, Query

from phoenixapi.core.auth_middleware import get_current_user
from phoenixapi.deps import get_community_service
from phoenixapi.schemas.auth import BaseResponse
from phoenixapi.schemas.community import CommentCreate, PostCreate, VoteRequest
from phoenixapi.schemas.user import User as UserSchema
from phoenixapi.services.community_service import CommunityService

router = APIRouter(prefix="/community", tags=["community"])
logger = logging.getLogger(__name__)


@router.get("/posts", response_model=BaseResponse)
@inject
def list_posts(
    symbol: Optional[str] = Query(None, max_length=16),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    result = community_service.list_posts(symbol=symbol, limit=limit, offset=offset)
    return BaseResponse(
        success=True,
        data=result.model_dump(),
        meta={
            "limit": limit,
            "offset": offset,
            "total_count": result.total_count,
            "has_next": (offset + limit) < result.total_count,
        },
    )


@router.post("/posts", response_model=BaseResponse)
@inject
def create_post(
    payload: PostCreate,
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    post = community_service.create_post(current_user.id, payload)
    return BaseResponse(success=True, data=post.model_dump())


@router.get("/posts/{post_id}", response_model=BaseResponse)
@inject
def get_post(
    post_id: int,
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    """Post with like/comment counts, vote tallies and the caller's own vote."""
    detail = community_service.get_post_detail(post_id, viewer_id=current_user.id)
    return BaseResponse(success=True, data=detail.model_dump())


@router.delete("/posts/{post_id}", response_model=BaseResponse)
@inject
def delete_post(
    post_id: int,
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    community_service.delete_post(post_id, current_user)
    return BaseResponse(success=True, data={"post_id": post_id})


@router.get("/posts/{post_id}/comments", response_model=BaseResponse)
@inject
def list_comments(
    post_id: int,
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    comments = community_service.list_comments(post_id)
    return BaseResponse(
        success=True,
        data=[c.model_dump() for c in comments],
        meta={"count": len(comments)},
    )


@router.post("/posts/{post_id}/comments", response_model=BaseResponse)
@inject
def add_comment(
    post_id: int,
    payload: CommentCreate,
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    comment = community_service.add_comment(post_id, current_user.id, payload)
    return BaseResponse(success=True, data=comment.model_dump())


@router.delete("/comments/{comment_id}", response_model=BaseResponse)
@inject
def delete_comment(
    comment_id: int,
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    community_service.delete_comment(comment_id, current_user)
    return BaseResponse(success=True, data={"comment_id": comment_id})


@router.post("/posts/{post_id}/like", response_model=BaseResponse)
@inject
def like_post(
    post_id: int,
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    community_service.like(post_id, current_user.id)
    return BaseResponse(
        success=True,
        data={"post_id": post_id, "liked": True, "like_count": community_service.like_count(post_id)},
    )


@router.delete("/posts/{post_id}/like", response_model=BaseResponse)
@inject
def unlike_post(
    post_id: int,
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    community_service.unlike(post_id, current_user.id)
    return BaseResponse(
        success=True,
        data={"post_id": post_id, "liked": False, "like_count": community_service.like_count(post_id)},
    )


@router.put("/posts/{post_id}/vote", response_model=BaseResponse)
@inject
def vote_on_post(
    post_id: int,
    payload: VoteRequest,
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    """Cast or replace the caller's short- and long-term sentiment vote."""
    vote = community_service.vote(post_id, current_user.id, payload.short_term, payload.long_term)
    counts = community_service.count_votes(post_id)
    return BaseResponse(
        success=True, data={"vote": vote.model_dump(), "counts": counts.model_dump()}
    )


@router.get("/posts/{post_id}/votes", response_model=BaseResponse)
@inject
def get_vote_counts(
    post_id: int,
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    community_service.get_post(post_id)
    counts = community_service.count_votes(post_id)
    return BaseResponse(success=True, data=counts.model_dump())


@router.get("/symbols", response_model=BaseResponse)
@inject
def get_community_symbols(
    limit: int = Query(20, ge=1, le=100),
    current_user: UserSchema = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service),
) -> Any:
    symbols = community_service.community_symbols(limit=limit)
    return BaseResponse(success=True, data=[s.model_dump() for s in symbols])
