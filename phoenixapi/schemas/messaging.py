from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, field_validator


class MessageCreate(BaseModel):
    body: str = Field(..., max_length=5000)

    @field_validator("body")
    @classmethod
    def strip_body(cls, v: str) -> str:
        return v.strip()


class MessageSchema(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    body: str
    read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ConversationSummary(BaseModel):
    user_id: int
    username: str
    display_name: str
    last_message: str
    last_message_at: datetime
    unread_count: int


class ConversationResponse(BaseModel):
    partner_id: int
    messages: List[MessageSchema]


class UnreadCount(BaseModel):
    user_id: int
    unread_count: int
