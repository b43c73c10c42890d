"""Lazily built engine plus the session helpers used by repositories and routes.

The engine is created on first use from :func:`get_settings`, so tests can
point ``LESSON_DATABASE_URL`` at an in-memory sqlite database and call
:func:`dispose_engine` to start over.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import Settings, get_settings
from .base import Base

logger = logging.getLogger(__name__)

_IN_MEMORY_SQLITE_URLS = {"sqlite://", "sqlite:///:memory:"}

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker[Session]] = None


def _engine_options(database_url: str, settings: Settings) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.database_echo, "future": True, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options.update(pool_size=settings.database_pool_size, max_overflow=settings.database_max_overflow)
        return options

    options["connect_args"] = {"check_same_thread": False}
    if database_url in _IN_MEMORY_SQLITE_URLS:
        # One shared connection, otherwise every checkout sees an empty database.
        options["poolclass"] = StaticPool
    return options


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _record) -> None:  # type: ignore[no-untyped-def]
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _open_engine(settings: Settings) -> Engine:
    database_url = settings.database_url
    if not database_url:
        raise RuntimeError("LESSON_DATABASE_URL must be configured before the catalog or saved plans can be used.")
    engine = create_engine(database_url, **_engine_options(database_url, settings))
    if engine.dialect.name == "sqlite":
        _enable_sqlite_foreign_keys(engine)
    logger.debug("Opened %s engine for lesson storage", engine.dialect.name)
    return engine


def get_engine() -> Engine:
    global _engine, _session_factory
    if _engine is not None:
        return _engine

    settings = get_settings()
    _engine = _open_engine(settings)
    _session_factory = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False, future=True)
    if settings.database_auto_create:
        create_schema(_engine)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    if _session_factory is None:
        get_engine()
    assert _session_factory is not None
    return _session_factory


def create_schema(engine: Optional[Engine] = None) -> None:
    """Create the catalog and plan tables without running migrations."""
    from . import models  # noqa: F401

    target = engine or get_engine()
    Base.metadata.create_all(target)
    logger.info("Lesson tables ensured on %s", target.url.render_as_string(hide_password=True))


@contextmanager
def session_scope(*, commit: bool = True) -> Generator[Session, None, None]:
    """Yield a session; commit on success, roll back and re-raise on error."""
    session = get_session_factory()()
    try:
        yield session
        if commit:
            session.commit()
    except Exception:  # noqa: BLE001
        session.rollback()
        raise
    finally:
        session.close()


def get_session_dependency() -> Generator[Session, None, None]:
    """FastAPI dependency: one committed session per request."""
    with session_scope() as session:
        yield session


def dispose_engine() -> None:
    global _engine, _session_factory
    engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        engine.dispose()


__all__ = [
    "create_schema",
    "dispose_engine",
    "get_engine",
    "get_session_dependency",
    "get_session_factory",
    "session_scope",
]
