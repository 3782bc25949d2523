import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from phoenixapi.database.connection import SessionLocal

logger = logging.getLogger(__name__)


def get_db() -> Iterator[Session]:
    """Request-scoped session. Services commit their own work."""
    session = SessionLocal()
    try:
        yield session
    except Exception:
        # A handler raised mid-transaction; drop whatever was flushed
        if session.in_transaction():
            logger.debug("Rolling back request session after error")
            session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_db_context() -> Iterator[Session]:
    """Unit of work for scripts: commit on success, roll back on error."""
    with SessionLocal() as session:
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        session.commit()
