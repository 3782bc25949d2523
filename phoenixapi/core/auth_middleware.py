from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from phoenixapi.config import settings
from phoenixapi.core.exceptions import AuthenticationError
from phoenixapi.database.session import get_db
from phoenixapi.schemas.auth import UserSession
from phoenixapi.schemas.user import User as UserSchema
from phoenixapi.services.auth_service import AuthService

# JWT Bearer scheme; missing headers are reported as AuthenticationError
security = HTTPBearer(auto_error=False)


def get_user_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> UserSession:
    """Resolve the bearer token into the request's explicit session"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")
    return AuthService(db, settings=settings).get_session(credentials.credentials)


def get_user_session_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[UserSession]:
    """Session when a valid token is present, otherwise None"""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return AuthService(db, settings=settings).get_session(credentials.credentials)
    except AuthenticationError:
        return None


def get_current_user(
    session: UserSession = Depends(get_user_session),
) -> UserSchema:
    return session.user


def require_admin(
    session: UserSession = Depends(get_user_session),
) -> UserSchema:
    """Admin-only endpoints"""
    return AuthService.require_admin(session)
