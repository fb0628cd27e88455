"""
SQLAlchemy base configuration and session management.

Uses SQLAlchemy 2.0 style with type hints and declarative base.
Designed to be portable between SQLite (dev) and PostgreSQL (prod).
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.types import TypeDecorator

from flightboard.config import config


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp column.

    SQLite has no native timezone support, so values are stored as naive
    UTC and re-attached to UTC on load. Naive values coming in are taken
    to already be UTC.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.replace(tzinfo=None)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine with configuration appropriate for the database type."""
    engine_kwargs = {
        'echo': echo,  # Log SQL in debug mode
    }

    is_sqlite = url.startswith('sqlite')
    if is_sqlite:
        # Flask serves requests on multiple threads
        engine_kwargs['connect_args'] = {'check_same_thread': False}

    new_engine = create_engine(url, **engine_kwargs)

    if is_sqlite:
        @event.listens_for(new_engine, 'connect')
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """
            Configure SQLite for concurrent request handling.

            WAL mode allows concurrent reads while a write is committing.
            """
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA journal_mode=WAL')
            cursor.execute('PRAGMA synchronous=NORMAL')
            # Wait on a locked database instead of failing immediately
            cursor.execute('PRAGMA busy_timeout=5000')
            cursor.execute('PRAGMA foreign_keys=ON')
            cursor.close()

    return new_engine


def create_session_factory(bind: Engine) -> sessionmaker:
    """Session factory bound to the given engine."""
    return sessionmaker(
        bind=bind,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,  # Snapshots stay readable after the session closes
    )


engine = create_db_engine(config.database.url, echo=config.debug)

SessionLocal = create_session_factory(engine)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Initialize database schema.

    Creates all tables if they don't exist. For production,
    use Alembic migrations instead.
    """
    # Make sure every model is registered on the metadata
    import flightboard.models.flight  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
