"""
Database connection and session management.
SQLite only: WAL journal and foreign keys enforced on every connection.
File databases use SQLAlchemy's default pool, so each session runs on its
own connection and SQLite's file locking isolates concurrent transactions.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from pathlib import Path
from typing import Generator, Optional
import logging

from zeo_api.core.config import settings, resolve_path
from zeo_api.db.models import Base

logger = logging.getLogger(__name__)


def _is_memory(url: URL) -> bool:
    return not url.database or url.database == ":memory:"


def _resolve_sqlite_url(url: str) -> URL:
    """Anchor relative SQLite paths at the backend directory."""
    parsed = make_url(url)
    if _is_memory(parsed) or Path(parsed.database).is_absolute():
        return parsed
    return parsed.set(database=str(resolve_path(parsed.database)))


def create_db_engine(url: Optional[str] = None) -> Engine:
    """Build an engine for the SQLite `url` (defaults to settings.database_url)."""
    url = url or settings.database_url
    if not url.startswith("sqlite"):
        raise ValueError(f"Unsupported database URL {url!r}: only SQLite is supported")

    sqlite_url = _resolve_sqlite_url(url)
    options = {"connect_args": {"check_same_thread": False}, "echo": False}
    if _is_memory(sqlite_url):
        # every connection to :memory: is a separate empty database
        options["poolclass"] = StaticPool
    engine = create_engine(sqlite_url, **options)

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def create_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


engine = create_db_engine()

# Create session factory
SessionLocal = create_session_factory(engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency injection for a request-scoped database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Optional[Engine] = None) -> None:
    """Create all tables that do not exist yet."""
    logger.info("Initializing database schema...")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database schema initialized")
