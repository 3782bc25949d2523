from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from phoenixapi.schemas.user import User


class Error(BaseModel):
    code: str
    message: str
    details: Optional[dict] = None


class BaseResponse(BaseModel):
    success: bool = True
    data: Optional[Any] = None
    error: Optional[Error] = None
    meta: Optional[dict] = None


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(..., min_length=1, max_length=128)
    display_name: Optional[str] = Field(None, max_length=100)

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return v.strip()


class LoginRequest(BaseModel):
    username: str
    password: str


class SessionToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    expires_at_ms: int

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.expires_at_ms / 1000)


class UserSession(BaseModel):
    """Explicit per-request session: decoded claims plus the loaded user."""

    user_id: int
    expires_at_ms: int
    user: User

    @property
    def is_admin(self) -> bool:
        return self.user.is_admin
