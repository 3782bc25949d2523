from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class User(BaseModel):
    id: int
    username: str
    display_name: str
    is_admin: bool = False
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    last_login_at: Optional[datetime] = None
    is_active: bool = True

    class Config:
        from_attributes = True


class UserCredentials(User):
    """User row including the password hash; never leaves the service layer."""

    password_hash: str


class UserProfile(BaseModel):
    user_id: int
    username: str
    display_name: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    is_admin: bool = False
    created_at: datetime
    followers: int = 0
    following: int = 0


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=1000)
    avatar_url: Optional[str] = Field(None, max_length=2048)

    @field_validator("display_name")
    @classmethod
    def display_name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v.strip() == "":
            raise ValueError("Display name cannot be empty")
        return v.strip() if v is not None else v


class FollowSchema(BaseModel):
    id: int
    follower_id: int
    following_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class FollowStatus(BaseModel):
    user_id: int
    target_user_id: int
    is_following: bool
    is_followed_by: bool
    is_mutual: bool


class UserSearchItem(BaseModel):
    id: int
    username: str
    display_name: str
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class UserSearchResult(BaseModel):
    users: List[UserSearchItem]
    count: int
