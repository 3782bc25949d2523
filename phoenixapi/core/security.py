import time
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import bcrypt
from jose import jwt, JWTError
from pydantic import BaseModel, ValidationError

from phoenixapi.config import settings

# bcrypt only hashes the first 72 bytes; bcrypt>=5 rejects anything longer
PASSWORD_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Salted bcrypt hash of ``password``."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def now_ms() -> int:
    return int(time.time() * 1000)


class SessionClaims(BaseModel):
    """Decoded session token payload."""

    user_id: int
    expires_at_ms: int

    def is_valid(self, at_ms: Optional[int] = None) -> bool:
        return self.expires_at_ms > (now_ms() if at_ms is None else at_ms)


def create_session_token(
    user_id: int, expires_delta: Optional[timedelta] = None
) -> Tuple[str, SessionClaims]:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.SESSION_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    claims = SessionClaims(
        user_id=user_id, expires_at_ms=int(expire.timestamp() * 1000)
    )
    to_encode = {
        "sub": str(user_id),
        "user_id": user_id,
        "exp_ms": claims.expires_at_ms,
        "exp": expire,
    }
    encoded_jwt = jwt.encode(
        to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )
    return encoded_jwt, claims


def decode_session_token(token: str) -> Optional[SessionClaims]:
    """Return the claims of a valid, unexpired token, else None."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        claims = SessionClaims(
            user_id=payload.get("user_id"), expires_at_ms=payload.get("exp_ms")
        )
    except (JWTError, ValidationError):
        return None

    if not claims.is_valid():
        return None
    return claims
