"""
Shared fixtures.

The environment is pinned before ``linkup`` is imported: an in-memory
SQLite database, no log file and HS256 tokens signed with a test secret.
Every test starts from an empty schema.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["AUTH_VERIFY_MODE"] = "hs256"
os.environ["AUTH_JWT_SECRET"] = "test-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from linkup.core import init_db  # noqa: E402,F401  (registers every model)
from linkup.core.auth import issue_token  # noqa: E402
from linkup.core.db import Base, SessionLocal, engine  # noqa: E402
from linkup.main import app  # noqa: E402
from linkup.modules.profiles.service import upsert_profile  # noqa: E402


class FakeHandle:
    """Channel handle that records what it was sent."""

    def __init__(self, name: str = "handle"):
        self.name = name
        self.events = []
        self.broken = False

    async def send(self, event: dict) -> None:
        if self.broken:
            raise RuntimeError(f"{self.name} is gone")
        self.events.append(event)

    def of_type(self, event_type: str):
        return [e for e in self.events if e["type"] == event_type]

    def __repr__(self) -> str:
        return f"FakeHandle({self.name})"


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db):
    """alice, bob, carol and dave with overlapping interests."""
    upsert_profile(db, "alice", "Alice", ["hiking", "chess"])
    upsert_profile(db, "bob", "Bob", ["chess", "jazz"])
    upsert_profile(db, "carol", "Carol", ["hiking", "chess", "jazz"])
    upsert_profile(db, "dave", "Dave", ["cooking"])
    return ["alice", "bob", "carol", "dave"]


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_handle():
    """Factory for recording channel handles."""
    return FakeHandle


@pytest.fixture
def auth_headers():
    def _headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {issue_token(user_id)}"}
    return _headers
