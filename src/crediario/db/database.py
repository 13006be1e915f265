"""Database engine, session factory and declarative base."""

import logging
import time
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import DatabaseConfig, get_config

# Query performance logger
query_logger = logging.getLogger("sqlalchemy.query_performance")

SLOW_QUERY_SECONDS = 0.1

_IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def _is_sqlite_url(url: str) -> bool:
    return url.startswith("sqlite:")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ships with foreign keys off; turn them on for every connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def _time_queries(engine: Engine) -> None:
    """Log every statement's duration, slow ones as warnings."""

    @event.listens_for(engine, "before_cursor_execute")
    def start_timer(conn, cursor, statement, parameters, context, executemany):
        context._crediario_started = time.perf_counter()

    @event.listens_for(engine, "after_cursor_execute")
    def log_duration(conn, cursor, statement, parameters, context, executemany):
        elapsed = time.perf_counter() - context._crediario_started
        if elapsed > SLOW_QUERY_SECONDS:
            query_logger.warning(f"Slow query ({elapsed:.3f}s): {statement[:200]}")
        else:
            query_logger.debug(f"Query ({elapsed:.3f}s): {statement[:100]}")


def create_database_engine(
    database_url: Optional[str] = None, settings: Optional[DatabaseConfig] = None
) -> Engine:
    """Create an engine for the configured (or given) database URL."""
    settings = settings or get_config().database
    url = database_url or settings.url

    if _is_sqlite_url(url):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in _IN_MEMORY_SQLITE_URLS:
            # One shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=settings.echo, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(url, echo=settings.echo, pool_pre_ping=settings.pool_pre_ping)

    if settings.log_queries:
        _time_queries(engine)

    return engine


# Base class for models
Base = declarative_base()

engine = create_database_engine()

# Session factory
SessionLocal = sessionmaker(autoflush=False, bind=engine)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create all tables that do not exist yet."""
    from . import models  # noqa: F401  (registers the tables on Base)

    Base.metadata.create_all(bind=bind or engine)


def get_db():
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
