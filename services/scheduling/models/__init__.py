from contextlib import contextmanager
from threading import Lock
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from services.scheduling.models.base import Base as Base
from services.scheduling.models.calendar import Employee as Employee
from services.scheduling.models.calendar import Meeting as Meeting
from services.scheduling.models.calendar import (
    meeting_participants as meeting_participants,
)
from services.scheduling.settings import get_settings

# Global engine and session factory - created once and reused
_engine: Engine | None = None
_session_maker: sessionmaker | None = None

# Thread-safe initialization locks
_engine_lock = Lock()
_session_maker_lock = Lock()


def _create_engine(db_url: str) -> Engine:
    if db_url.startswith("sqlite"):
        engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
        )

        @event.listens_for(engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        db_url,
        echo=False,
        future=True,
        # Connection pool settings to prevent connection exhaustion
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=3600,
        pool_pre_ping=True,
    )


def get_engine() -> Engine:
    """Get or create the shared database engine in a thread-safe manner."""
    global _engine
    if _engine is None:
        with _engine_lock:
            # Double-check pattern to prevent race conditions
            if _engine is None:
                _engine = _create_engine(get_settings().db_url_scheduling)
    return _engine


def get_sessionmaker() -> sessionmaker:
    """Get or create the shared session maker in a thread-safe manner.

    Acquire locks in sessionmaker -> engine order to avoid races with reset/close.
    """
    global _session_maker
    if _session_maker is None:
        with _session_maker_lock:
            if _session_maker is None:
                _session_maker = sessionmaker(
                    bind=get_engine(),
                    autoflush=False,
                    future=True,
                    expire_on_commit=False,
                )
    return _session_maker


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Yield a session that commits on success and rolls back on error."""
    session_factory = get_sessionmaker()
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_all_tables_for_testing() -> None:
    """Create all database tables for testing only. Use Alembic migrations in production."""
    Base.metadata.create_all(get_engine())


def close_db() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _session_maker
    engine_to_dispose: Engine | None = None

    with _session_maker_lock:
        _session_maker = None
        with _engine_lock:
            if _engine is not None:
                engine_to_dispose = _engine
                _engine = None

    # Dispose outside of locks
    if engine_to_dispose is not None:
        engine_to_dispose.dispose()


def reset_db() -> None:
    """Reset database connections without disposing (useful for testing)."""
    global _engine, _session_maker
    with _session_maker_lock:
        with _engine_lock:
            _session_maker = None
            _engine = None
