import logging
import re
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from phoenixapi.config import Settings
from phoenixapi.core.exceptions import (
    AuthenticationError,
    ConflictError,
    PermissionDeniedError,
    ValidationError,
)
from phoenixapi.core.security import (
    PASSWORD_MAX_BYTES,
    SessionClaims,
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)
from phoenixapi.repositories.user_repository import UserRepository
from phoenixapi.schemas.auth import SessionToken, UserSession
from phoenixapi.schemas.user import User as UserSchema

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,50}$")


class AuthService:
    """Signup, login and session token handling"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.user_repo = UserRepository(db)
        self.settings = settings

    def _issue(self, user_id: int) -> SessionToken:
        token, claims = create_session_token(user_id)
        return SessionToken(
            access_token=token,
            user_id=user_id,
            expires_at_ms=claims.expires_at_ms,
        )

    def _validate_credentials(self, username: str, password: str) -> str:
        username = (username or "").strip()
        if not username:
            raise ValidationError("Username is required", {"field": "username"})
        if not USERNAME_PATTERN.match(username):
            raise ValidationError(
                "Username must be 3-50 letters, digits, '.', '_' or '-'",
                {"field": "username"},
            )
        if len(password or "") < self.settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {self.settings.PASSWORD_MIN_LENGTH} characters",
                {"field": "password"},
            )
        if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValidationError(
                f"Password must be at most {PASSWORD_MAX_BYTES} bytes",
                {"field": "password", "max_bytes": PASSWORD_MAX_BYTES},
            )
        return username

    def signup(
        self, username: str, password: str, display_name: Optional[str] = None
    ) -> SessionToken:
        username = self._validate_credentials(username, password)

        if self.user_repo.get_by_username(username):
            raise ConflictError("Username already taken", {"username": username})

        try:
            user = self.user_repo.create_user(
                username=username,
                password_hash=hash_password(password),
                display_name=(display_name or "").strip() or username,
            )
        except IntegrityError:
            # Lost a race with a concurrent signup for the same name
            raise ConflictError("Username already taken", {"username": username})

        if user is None:
            raise ConflictError("Failed to create user", {"username": username})

        logger.info(f"New user signed up: {user.id} ({username})")
        return self._issue(user.id)

    def login(self, username: str, password: str) -> SessionToken:
        credentials = self.user_repo.get_credentials((username or "").strip())
        if credentials is None or not verify_password(password or "", credentials.password_hash):
            raise AuthenticationError("Invalid username or password")
        if not credentials.is_active:
            raise AuthenticationError("Account is deactivated")

        self.user_repo.update_last_login(credentials.id)
        return self._issue(credentials.id)

    def verify(self, token: str) -> Optional[SessionClaims]:
        return decode_session_token(token)

    def get_session(self, token: str) -> UserSession:
        """Resolve a bearer token into an explicit session; raises when invalid"""
        claims = self.verify(token)
        if claims is None:
            raise AuthenticationError("Invalid or expired session")

        user = self.user_repo.get_by_id(claims.user_id)
        if user is None or not user.is_active:
            raise AuthenticationError("User not found or inactive")

        return UserSession(
            user_id=claims.user_id, expires_at_ms=claims.expires_at_ms, user=user
        )

    def refresh(self, token: str) -> SessionToken:
        session = self.get_session(token)
        return self._issue(session.user_id)

    @staticmethod
    def require_admin(session: UserSession) -> UserSchema:
        if not session.user.is_admin:
            raise PermissionDeniedError("Admin access required")
        return session.user
