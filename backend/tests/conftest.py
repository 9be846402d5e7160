# backend/tests/conftest.py
"""
Shared fixtures.

The app runs against a single in-memory SQLite database (StaticPool), so the
request sessions, the real-time message store and the test's own session all
see the same data. Tables are rebuilt for every test.
"""

import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-agora")

from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Callable, Dict, Optional  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from agora import models  # noqa: E402,F401
from agora.auth import create_access_token, get_password_hash  # noqa: E402
from agora.database import Base, SessionLocal, engine  # noqa: E402
from agora.main import app  # noqa: E402
from agora.models.message import PrivateMessage  # noqa: E402
from agora.models.user import User  # noqa: E402

TEST_PASSWORD = "password123"
# bcrypt is slow on purpose; hash once for every fixture user
_TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture(autouse=True)
def _fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function")
def db():
    """A session on the shared test database. Tests commit what they create."""
    session = SessionLocal()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def client():
    """
    Test client with the app lifespan running.

    Every websocket opened from this client shares one event loop and one
    messaging hub, which is what lets tests observe cross-connection delivery.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def test_password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    def _make_user(username: str, email: Optional[str] = None, **fields) -> User:
        user = User(
            username=username,
            email=email or f"{username.lower()}@example.com",
            hashed_password=_TEST_PASSWORD_HASH,
            **fields,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def alice(make_user) -> User:
    return make_user("alice", profile_picture="/img/alice.png")


@pytest.fixture
def bob(make_user) -> User:
    return make_user("bob")


@pytest.fixture
def carol(make_user) -> User:
    return make_user("carol")


def _token_for(user: User) -> str:
    return create_access_token(data={"sub": user.id})


@pytest.fixture
def token_for() -> Callable[[User], str]:
    return _token_for


@pytest.fixture
def headers_for() -> Callable[[User], Dict[str, str]]:
    def _headers_for(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {_token_for(user)}"}

    return _headers_for


@pytest.fixture
def auth_headers(alice: User, headers_for) -> Dict[str, str]:
    """Auth headers for alice (default caller)."""
    return headers_for(alice)


@pytest.fixture
def make_private_message(db: Session) -> Callable[..., PrivateMessage]:
    """Insert a private message with an explicit timestamp so ordering is deterministic."""
    base_time = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(sender: User, receiver: User, content: str, is_read: bool = False) -> PrivateMessage:
        counter["n"] += 1
        message = PrivateMessage(
            sender_id=sender.id,
            receiver_id=receiver.id,
            content=content,
            is_read=is_read,
            timestamp=base_time + timedelta(minutes=counter["n"]),
        )
        db.add(message)
        db.commit()
        return message

    return _make
