"""
SQLAlchemy base configuration and session management.

Uses SQLAlchemy 2.0 style with type hints and declarative base.
Designed to be portable between SQLite (dev) and PostgreSQL (prod).
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from balloon_tracker.config import config


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


engine_kwargs = {
    'echo': config.debug,  # Log SQL in debug mode
}

if config.database.is_sqlite:
    # Weather lookups write from worker threads
    engine_kwargs['connect_args'] = {'check_same_thread': False}

if config.database.is_memory:
    # One shared connection, otherwise every connection sees an empty database
    engine_kwargs['poolclass'] = StaticPool

engine = create_engine(config.database.url, **engine_kwargs)


if config.database.is_sqlite and not config.database.is_memory:
    @event.listens_for(engine, 'connect')
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """
        Configure SQLite for concurrent cache access.

        WAL mode lets readers proceed while a weather worker writes.
        """
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA journal_mode=WAL')
        cursor.execute('PRAGMA synchronous=NORMAL')
        cursor.close()


# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,  # Avoid lazy loading issues
)


@contextmanager
def get_session(factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Usage:
        with get_session() as session:
            session.get(...)

    Automatically handles commit/rollback and session cleanup.
    """
    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """
    Initialize database schema.

    Creates all tables if they don't exist.
    """
    Base.metadata.create_all(bind=engine)
