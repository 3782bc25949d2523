import logging
from typing import Any

from dependency_injector.wiring import inject
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials

from phoenixapi.core.auth_middleware import get_user_session, security
from phoenixapi.core.exceptions import AuthenticationError
from phoenixapi.deps import get_auth_service
from phoenixapi.schemas.auth import BaseResponse, LoginRequest, SignupRequest, UserSession
from phoenixapi.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])
logger = logging.getLogger(__name__)


@router.post("/signup", response_model=BaseResponse)
@inject
def signup(
    payload: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> Any:
    """Create an account and return a session token."""
    token = auth_service.signup(payload.username, payload.password, payload.display_name)
    return BaseResponse(success=True, data=token.model_dump())


@router.post("/login", response_model=BaseResponse)
@inject
def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> Any:
    token = auth_service.login(payload.username, payload.password)
    logger.info(f"User {token.user_id} logged in")
    return BaseResponse(success=True, data=token.model_dump())


@router.post("/refresh", response_model=BaseResponse)
@inject
def refresh(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> Any:
    """Re-issue a token for a session that has not expired yet."""
    if credentials is None:
        raise AuthenticationError("Authentication required")
    token = auth_service.refresh(credentials.credentials)
    return BaseResponse(success=True, data=token.model_dump())


@router.get("/session", response_model=BaseResponse)
def current_session(session: UserSession = Depends(get_user_session)) -> Any:
    return BaseResponse(success=True, data=session.model_dump())
