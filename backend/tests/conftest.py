import os
from datetime import datetime, timezone

# Ensure JWT_SECRET exists before importing app.main (it calls require_jwt_secret() at import time).
os.environ.setdefault("JWT_SECRET", "test_jwt_secret")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.identity import Identity
from app.core import clock
from app.core import config as app_config
from app.core.base import Base

# Import models so they register with SQLAlchemy metadata.
from app.models.interview import Interview
from app.models.user import User

from app.core.database import get_db
from app.dependencies.auth import get_identity

# Scheduled start used by the lifecycle scenarios.
T = datetime(2030, 1, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # Important: because we use an in-memory SQLite DB with StaticPool, the DB
    # persists across tests. Reset schema per test to avoid cross-test coupling.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Tests sometimes tweak global settings (app_config.settings.*). Because that object is
    process-global, we must restore values after each test to avoid cross-test coupling.
    """
    keys = [
        "LIVE_WINDOW_MINUTES",
        "STRICT_STATUS_TRANSITIONS",
        "JWT_ISSUER",
        "JWT_AUDIENCE",
    ]
    original = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)


@pytest.fixture()
def set_now(monkeypatch):
    """
    Freeze the wall clock used by the lifecycle/early-start code.

    Usage:
        set_now(T - timedelta(minutes=5))
    """

    def _set(value: datetime) -> datetime:
        monkeypatch.setattr(clock, "utcnow", lambda: value)
        return value

    return _set


@pytest.fixture()
def app(db_session):
    app_config.settings.JWT_SECRET = app_config.settings.JWT_SECRET or "test_jwt_secret"

    import app.main as main

    fastapi_app = main.app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def users(db_session):
    """
    One candidate and two interviewers, keyed by external id.
    """
    candidate = User(external_id="user_c1", name="Casey Candidate", email="c1@example.com", role="candidate")
    interviewer_1 = User(external_id="user_i1", name="Ivy Interviewer", email="i1@example.com", role="interviewer")
    interviewer_2 = User(external_id="user_i2", name="Ian Interviewer", email="i2@example.com", role="interviewer")
    db_session.add_all([candidate, interviewer_1, interviewer_2])
    db_session.commit()
    return candidate, interviewer_1, interviewer_2


@pytest.fixture()
def make_interview(db_session):
    """
    Insert an interview row directly (bypassing the lifecycle service).
    """
    counter = {"n": 0}

    def _make(
        *,
        candidate_id: str = "user_c1",
        interviewer_ids: list[str] | None = None,
        start_time: datetime = T,
        status: str = "scheduled",
        is_started: bool = False,
        actual_start_time: datetime | None = None,
        title: str = "Backend interview",
    ) -> Interview:
        counter["n"] += 1
        iv = Interview(
            title=title,
            start_time=start_time,
            status=status,
            is_started=is_started,
            actual_start_time=actual_start_time,
            stream_call_id=f"call-{counter['n']}",
            candidate_id=candidate_id,
            interviewer_ids=interviewer_ids if interviewer_ids is not None else ["user_i1", "user_i2"],
        )
        db_session.add(iv)
        db_session.commit()
        db_session.refresh(iv)
        return iv

    return _make


@pytest.fixture()
def client_for(app):
    """
    Context manager to create a client authenticated as an arbitrary external id.

    Usage:
        with client_for("user_i1") as c:
            ...
    """

    @contextmanager
    def _client_for(subject: str):
        app.dependency_overrides[get_identity] = lambda: Identity.for_subject(subject)
        with TestClient(app) as c:
            yield c
        app.dependency_overrides.pop(get_identity, None)

    return _client_for


@pytest.fixture()
def anon_client(app):
    """Client with no Authorization header (real get_identity dependency)."""
    with TestClient(app) as c:
        yield c
