import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure project root is on path for `phoenixapi` imports
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Must be set before phoenixapi.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("PRICE_FETCH_DELAY_SECONDS", "0")

from phoenixapi.models import Base, User  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    """Insert a user row directly and return its schema"""
    from phoenixapi.schemas.user import User as UserSchema

    def _make(username: str, is_admin: bool = False) -> UserSchema:
        user = User(
            username=username,
            display_name=username.title(),
            password_hash="not-a-real-hash",
            is_admin=is_admin,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return UserSchema.model_validate(user)

    return _make


@pytest.fixture
def admin(make_user):
    return make_user("admin", is_admin=True)


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")




@pytest.fixture
def api(db):
    """The app with every request bound to the test session"""
    from phoenixapi.database.session import get_db
    from phoenixapi.main import app

    app.dependency_overrides[get_db] = lambda: db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(api):
    from fastapi.testclient import TestClient

    return TestClient(api)


@pytest.fixture
def auth_headers():
    from phoenixapi.core.security import create_session_token

    def _headers(user):
        token, _ = create_session_token(user.id)
        return {"Authorization": f"Bearer {token}"}

    return _headers
