"""
Messaging Service

Direct messages between users who follow each other.
"""

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from phoenixapi.core.exceptions import NotFoundError, NotMutualError, ValidationError
from phoenixapi.repositories.follow_repository import FollowRepository
from phoenixapi.repositories.message_repository import MessageRepository
from phoenixapi.repositories.user_repository import UserRepository
from phoenixapi.schemas.messaging import (
    ConversationResponse,
    ConversationSummary,
    MessageSchema,
    UnreadCount,
)

logger = logging.getLogger(__name__)


class MessagingService:
    def __init__(self, db: Session):
        self.db = db
        self.message_repo = MessageRepository(db)
        self.follow_repo = FollowRepository(db)
        self.user_repo = UserRepository(db)

    def can_message(self, user_a: int, user_b: int) -> bool:
        """True iff both directed follow edges exist; symmetric in its arguments"""
        if user_a == user_b:
            return False
        return self.follow_repo.follows(user_a, user_b) and self.follow_repo.follows(
            user_b, user_a
        )

    def send(self, sender_id: int, receiver_id: int, body: str) -> MessageSchema:
        body = (body or "").strip()
        if not body:
            raise ValidationError("Message body cannot be empty", {"field": "body"})
        if self.user_repo.get_by_id(receiver_id) is None:
            raise NotFoundError(f"User not found: {receiver_id}", {"user_id": receiver_id})
        if not self.can_message(sender_id, receiver_id):
            raise NotMutualError(details={"receiver_id": receiver_id})

        message = self.message_repo.create(
            sender_id=sender_id, receiver_id=receiver_id, body=body, read=False
        )
        logger.info(f"Message {message.id} sent {sender_id} -> {receiver_id}")
        return message

    def mark_read(self, receiver_id: int, sender_id: int) -> int:
        return self.message_repo.mark_read(receiver_id, sender_id)

    def unread_count(self, user_id: int) -> UnreadCount:
        return UnreadCount(
            user_id=user_id, unread_count=self.message_repo.unread_count(user_id)
        )

    def conversation(
        self, user_id: int, partner_id: int, mark_read: bool = True
    ) -> ConversationResponse:
        """Both directions, oldest first; opening it marks the partner's messages read"""
        if mark_read:
            self.mark_read(user_id, partner_id)
        return ConversationResponse(
            partner_id=partner_id,
            messages=self.message_repo.conversation(user_id, partner_id),
        )

    def list_conversations(self, user_id: int) -> List[ConversationSummary]:
        """One summary per partner, most recent conversation first"""
        latest: Dict[int, MessageSchema] = {}
        unread: Dict[int, int] = {}
        for message in self.message_repo.involving(user_id):
            partner = (
                message.receiver_id if message.sender_id == user_id else message.sender_id
            )
            latest.setdefault(partner, message)
            if message.receiver_id == user_id and not message.read:
                unread[partner] = unread.get(partner, 0) + 1

        partners = {u.id: u for u in self.user_repo.get_many(list(latest))}
        summaries = []
        for partner_id, message in latest.items():
            partner = partners.get(partner_id)
            if partner is None:
                logger.warning(f"Conversation partner {partner_id} missing for user {user_id}")
                continue
            summaries.append(
                ConversationSummary(
                    user_id=partner_id,
                    username=partner.username,
                    display_name=partner.display_name,
                    last_message=message.body,
                    last_message_at=message.created_at,
                    unread_count=unread.get(partner_id, 0),
                )
            )
        return summaries
