import logging
from typing import Any

from dependency_injector.wiring import inject
from fastapi import APIRouter, Depends

from phoenixapi.core.auth_middleware import get_current_user
from phoenixapi.deps import get_messaging_service
from phoenixapi.schemas.auth import BaseResponse
from phoenixapi.schemas.messaging import MessageCreate
from phoenixapi.schemas.user import User as UserSchema
from phoenixapi.services.messaging_service import MessagingService

router = APIRouter(prefix="/messages", tags=["messages"])
logger = logging.getLogger(__name__)


@router.get("/conversations", response_model=BaseResponse)
@inject
def list_conversations(
    current_user: UserSchema = Depends(get_current_user),
    messaging_service: MessagingService = Depends(get_messaging_service),
) -> Any:
    conversations = messaging_service.list_conversations(current_user.id)
    return BaseResponse(
        success=True,
        data=[c.model_dump() for c in conversations],
        meta={"count": len(conversations)},
    )


@router.get("/unread-count", response_model=BaseResponse)
@inject
def get_unread_count(
    current_user: UserSchema = Depends(get_current_user),
    messaging_service: MessagingService = Depends(get_messaging_service),
) -> Any:
    return BaseResponse(
        success=True, data=messaging_service.unread_count(current_user.id).model_dump()
    )


@router.get("/can-message/{partner_id}", response_model=BaseResponse)
@inject
def can_message(
    partner_id: int,
    current_user: UserSchema = Depends(get_current_user),
    messaging_service: MessagingService = Depends(get_messaging_service),
) -> Any:
    allowed = messaging_service.can_message(current_user.id, partner_id)
    return BaseResponse(success=True, data={"partner_id": partner_id, "can_message": allowed})


@router.get("/{partner_id}", response_model=BaseResponse)
@inject
def get_conversation(
    partner_id: int,
    current_user: UserSchema = Depends(get_current_user),
    messaging_service: MessagingService = Depends(get_messaging_service),
) -> Any:
    """Full thread with one partner; their unread messages are marked read."""
    conversation = messaging_service.conversation(current_user.id, partner_id)
    return BaseResponse(success=True, data=conversation.model_dump())


@router.post("/{partner_id}", response_model=BaseResponse)
@inject
def send_message(
    partner_id: int,
    payload: MessageCreate,
    current_user: UserSchema = Depends(get_current_user),
    messaging_service: MessagingService = Depends(get_messaging_service),
) -> Any:
    message = messaging_service.send(current_user.id, partner_id, payload.body)
    return BaseResponse(success=True, data=message.model_dump())


@router.post("/{partner_id}/read", response_model=BaseResponse)
@inject
def mark_conversation_read(
    partner_id: int,
    current_user: UserSchema = Depends(get_current_user),
    messaging_service: MessagingService = Depends(get_messaging_service),
) -> Any:
    marked = messaging_service.mark_read(current_user.id, partner_id)
    return BaseResponse(success=True, data={"partner_id": partner_id, "marked_read": marked})
