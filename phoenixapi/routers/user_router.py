"""
User Router

Profiles, user search and the follow graph.
"""

import logging
from typing import Any

from dependency_injector.wiring import inject
from fastapi import APIRouter, Depends, Query

from phoenixapi.core.auth_middleware import get_current_user
from phoenixapi.deps import get_user_service
from phoenixapi.schemas.auth import BaseResponse
from phoenixapi.schemas.user import ProfileUpdate, User as UserSchema
from phoenixapi.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.get("/me", response_model=BaseResponse)
@inject
def get_my_profile(
    current_user: UserSchema = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> Any:
    profile = user_service.get_profile(current_user.id)
    return BaseResponse(success=True, data=profile.model_dump())


@router.put("/me", response_model=BaseResponse)
@inject
def update_my_profile(
    update: ProfileUpdate,
    current_user: UserSchema = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> Any:
    profile = user_service.update_profile(current_user.id, update)
    return BaseResponse(success=True, data=profile.model_dump())


@router.get("/search", response_model=BaseResponse)
@inject
def search_users(
    q: str = Query(..., min_length=1, max_length=50, description="Username fragment"),
    limit: int = Query(20, ge=1, le=100),
    current_user: UserSchema = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> Any:
    result = user_service.search_users(q, limit=limit, exclude_user_id=current_user.id)
    return BaseResponse(success=True, data=result.model_dump(), meta={"query": q})


@router.get("/{user_id}", response_model=BaseResponse)
@inject
def get_user_profile(
    user_id: int,
    current_user: UserSchema = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> Any:
    profile = user_service.get_profile(user_id)
    return BaseResponse(success=True, data=profile.model_dump())


@router.post("/{user_id}/follow", response_model=BaseResponse)
@inject
def follow_user(
    user_id: int,
    current_user: UserSchema = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> Any:
    user_service.follow(current_user.id, user_id)
    status = user_service.follow_status(current_user.id, user_id)
    return BaseResponse(success=True, data=status.model_dump())


@router.delete("/{user_id}/follow", response_model=BaseResponse)
@inject
def unfollow_user(
    user_id: int,
    current_user: UserSchema = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> Any:
    user_service.unfollow(current_user.id, user_id)
    status = user_service.follow_status(current_user.id, user_id)
    return BaseResponse(success=True, data=status.model_dump())


@router.get("/{user_id}/follow-status", response_model=BaseResponse)
@inject
def get_follow_status(
    user_id: int,
    current_user: UserSchema = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> Any:
    status = user_service.follow_status(current_user.id, user_id)
    return BaseResponse(success=True, data=status.model_dump())
