"""Database configuration and session management."""

from __future__ import annotations

from collections.abc import Generator

import logging

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


def create_database_engine(settings: Settings, **engine_options) -> Engine:
    """Build the SQLAlchemy engine described by ``settings.database_url``."""

    database_url = settings.database_url
    if database_url.startswith("sqlite"):
        connect_args = engine_options.setdefault("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
    else:
        engine_options.setdefault("pool_pre_ping", True)
    logger.debug("Creating database engine for %s", database_url.split("://", 1)[0])
    return create_engine(database_url, **engine_options)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to ``engine``."""

    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database(engine: Engine) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from app.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=engine, checkfirst=True)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a database session from the application's factory and close it afterwards."""

    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "Base",
    "create_database_engine",
    "create_session_factory",
    "get_db",
    "initialize_database",
]
