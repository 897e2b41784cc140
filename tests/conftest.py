"""Shared fixtures for the notification service tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_TIMEZONE", "UTC")

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.domain.entities import NotificationPreferences, User
from app.infrastructure.database import create_session_factory, initialize_database
from app.infrastructure.repositories import UserRepository


@pytest.fixture()
def settings():
    return get_settings()


@pytest.fixture()
def engine():
    """Return an isolated in-memory database shared across connections."""

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_user(session):
    """Create users directly through the repository, bypassing the welcome flow."""

    counter = {"value": 0}

    def _make_user(preferences: NotificationPreferences | None = None, **overrides) -> User:
        counter["value"] += 1
        index = counter["value"]
        user = User(
            id=None,
            username=overrides.pop("username", f"artist{index}"),
            email=overrides.pop("email", f"artist{index}@example.com"),
            notification_preferences=preferences or NotificationPreferences.default(),
            **overrides,
        )
        return UserRepository(session).create(user)

    return _make_user
