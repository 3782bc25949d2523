from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class BaseAPIException(HTTPException):
    """Domain error rendered as ``{"success": false, "error": {...}}``.

    Subclasses set ``default_status``, ``default_code`` and
    ``default_message``; callers usually pass only a message and details.
    """

    default_status: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "ERROR_001"
    default_message: str = "Request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.error_code = error_code or self.default_code
        self.message = message or self.default_message
        self.details = details or {}

        super().__init__(
            status_code=status_code or self.default_status,
            detail={
                "success": False,
                "error": {
                    "code": self.error_code,
                    "message": self.message,
                    "details": self.details,
                },
            },
        )

    def __str__(self) -> str:
        return self.message


class AuthenticationError(BaseAPIException):
    """Missing, invalid or expired session token"""

    default_status = status.HTTP_401_UNAUTHORIZED
    default_code = "AUTH_001"
    default_message = "Authentication failed"


class PermissionDeniedError(BaseAPIException):
    """Authenticated user may not perform the action (e.g. non-admin review)"""

    default_status = status.HTTP_403_FORBIDDEN
    default_code = "AUTH_002"
    default_message = "Access forbidden"


class NotMutualError(BaseAPIException):
    """Direct message attempted without a mutual follow"""

    default_status = status.HTTP_403_FORBIDDEN
    default_code = "MESSAGING_001"
    default_message = "Users must follow each other to exchange messages"


class ValidationError(BaseAPIException):
    default_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = "VALIDATION_001"
    default_message = "Validation failed"


class NotFoundError(BaseAPIException):
    default_status = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND_001"
    default_message = "Resource not found"


class ConflictError(BaseAPIException):
    """Duplicate follow/like/username, or a state that no longer allows the change"""

    default_status = status.HTTP_409_CONFLICT
    default_code = "CONFLICT_001"
    default_message = "Resource conflict"


class AlreadyReviewedError(ConflictError):
    """Submission is no longer pending"""

    default_code = "CONFLICT_002"

    def __init__(self, submission_id: int, current_status: str):
        super().__init__(
            f"Submission {submission_id} was already {current_status}",
            {"submission_id": submission_id, "status": current_status},
        )


class UpstreamError(BaseAPIException):
    """News, price or brokerage call failed or timed out"""

    default_status = status.HTTP_502_BAD_GATEWAY
    default_code = "UPSTREAM_001"
    default_message = "Upstream service error"


class InternalServerError(BaseAPIException):
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "INTERNAL_001"
    default_message = "Internal server error"
