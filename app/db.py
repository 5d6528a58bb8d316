"""Engine and session lifecycle for the PayHub database."""
from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.config import get_settings
from app.models.base import Base

engine: Engine | None = None
SessionLocal: sessionmaker[Session] | None = None


def _connect_args(database_url: str) -> dict[str, object]:
    # Route handlers run in the threadpool; SQLite connections must be shareable.
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


def init_engine() -> Engine:
    """Create the engine and session factory on first use."""

    global engine, SessionLocal
    if engine is None:
        database_url = get_settings().database_url
        engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=not database_url.startswith("sqlite"),
            connect_args=_connect_args(database_url),
        )
        SessionLocal = sessionmaker(
            bind=engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )
    return engine


def get_engine() -> Engine:
    return engine if engine is not None else init_engine()


def get_sessionmaker() -> sessionmaker[Session]:
    if SessionLocal is None:
        init_engine()
    assert SessionLocal is not None
    return SessionLocal


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for work outside a request (scheduler jobs).

    Commits stay with the caller; the session is always closed.
    """

    session = get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


def create_all() -> None:
    """Create the tables directly, bypassing Alembic (dev/test only)."""

    Base.metadata.create_all(bind=get_engine())


def close_engine() -> None:
    global engine, SessionLocal
    if engine is not None:
        engine.dispose()
    engine = None
    SessionLocal = None


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session."""

    with session_scope() as session:
        yield session


__all__ = [
    "SessionLocal",
    "close_engine",
    "create_all",
    "engine",
    "get_db",
    "get_engine",
    "get_sessionmaker",
    "init_engine",
    "session_scope",
]
