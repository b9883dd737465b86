"""Pytest fixtures — SQLite database for fast, isolated tests."""
import jwt
import pytest
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from tabletop_scheduler.config import settings
from tabletop_scheduler.database import Base, get_db, make_engine
from tabletop_scheduler.main import app

# Import all models so they register with Base.metadata
from tabletop_scheduler.models.user import User                                   # noqa: F401
from tabletop_scheduler.models.availability import Availability, DateRangeSettings  # noqa: F401
from tabletop_scheduler.models.game import Game, GameSubscription, GameSessionDay  # noqa: F401
from tabletop_scheduler.models.time_range import TimeRange                        # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = make_engine(SQLITE_URL)

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session for service-level tests."""
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
# Helpers: tokens are normally minted by the external auth service
# ---------------------------------------------------------------------------
def make_token(user_id: str, email: str = "someone@example.com", secret: str = None) -> str:
    payload = {"user_id": user_id, "email": email}
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers(user: dict) -> dict:
    return {"Authorization": f"Bearer {make_token(user['user_id'], user['email'])}"}


def create_test_user(client: TestClient, name: str = "Test User", email: str = None) -> dict:
    """Helper — POST /api/users and return the user dict."""
    resp = client.post("/api/users/", json={
        "display_name": name,
        "email": email or f"{name.lower().replace(' ', '.')}@example.com",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["user"]


def create_test_game(client: TestClient, dm: dict, name: str = "Test Game", **fields) -> dict:
    """Helper — POST /api/games as ``dm`` and return the game dict."""
    payload = {"name": name, "start_date": "2024-03-01", "end_date": "2024-03-31"}
    payload.update(fields)
    resp = client.post("/api/games/", json=payload, headers=auth_headers(dm))
    assert resp.status_code == 201, resp.text
    return resp.json()["game"]
