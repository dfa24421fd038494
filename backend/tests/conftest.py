"""Pytest fixtures: file-backed SQLite database, recreated for every test."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("ARCHIVER_ENABLED", "false")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from eventflow.database import Base, get_db  # noqa: E402
from eventflow.main import app  # noqa: E402
from eventflow.models.user import User, UserRole  # noqa: E402

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # WAL for concurrency; enforce foreign keys like PostgreSQL does
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session bound to the per-test engine."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: create users and events via the API
# ---------------------------------------------------------------------------
def register_user(client: TestClient, name: str = "Test User", email: str = "user@example.com",
                  password: str = "secret123") -> dict:
    """Helper: POST /auth/register and return response JSON (includes ``token``).

    The session cookie is dropped so each request authenticates with the
    bearer header of whichever user the test picks.
    """
    resp = client.post("/auth/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    client.cookies.clear()
    return resp.json()


def auth_headers(user: dict) -> dict:
    return {"Authorization": f"Bearer {user['token']}"}


def make_admin(db, user: dict) -> None:
    db.query(User).filter(User.id == user["id"]).update({User.role: UserRole.admin})
    db.commit()


def future(days: int = 7) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def past(days: int = 7) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


def create_test_event(client: TestClient, owner: dict, **fields) -> dict:
    """Helper: POST /events and return response JSON. Defaults to a future DRAFT."""
    payload = {"title": "Test Event", "date": future(), "time": "19:00", "location": "Centro"}
    payload.update(fields)
    resp = client.post("/events", json=payload, headers=auth_headers(owner))
    assert resp.status_code == 201, resp.text
    return resp.json()


def add_guest(client: TestClient, owner: dict, event_id: str, email: str) -> dict:
    resp = client.post(f"/events/{event_id}/guests", json={"emails": [email]}, headers=auth_headers(owner))
    assert resp.status_code == 201, resp.text
    return resp.json()["guests"][0]
