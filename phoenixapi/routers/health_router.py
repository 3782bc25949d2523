import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from phoenixapi.config import settings
from phoenixapi.database.session import get_db
from phoenixapi.schemas.health import HealthCheckResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthCheckResponse)
def health_check(db: Session = Depends(get_db)) -> HealthCheckResponse:
    """Health check endpoint."""
    response = HealthCheckResponse(
        environment=settings.ENVIRONMENT, checked_at=datetime.now(timezone.utc)
    )
    try:
        db.execute(text("SELECT 1"))
        response.database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Health check database probe failed: {e}")
        response.status = "degraded"
        response.database = "unavailable"
        response.error = str(e)
    return response
