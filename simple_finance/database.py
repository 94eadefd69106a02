# simple_finance/database.py
"""
Database connection and session management.

- SQLite (development/test): StaticPool for in-memory databases so every
  session sees the same data; default pool for file databases
- PostgreSQL (production): QueuePool sized from DB_POOL_* settings

`init_db()` creates the tables; there are four of them and no migrations.
"""

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool, QueuePool

from .config import settings
from .models import Base

logger = logging.getLogger(__name__)


def _create_engine():
    """Create the SQLAlchemy engine for the configured database."""
    if settings.is_sqlite:
        logger.info(f"Configuring SQLite database ({settings.environment} mode)")
        kwargs = {"connect_args": {"check_same_thread": False}, "echo": settings.debug}
        if ":memory:" in settings.database_url:
            kwargs["poolclass"] = StaticPool
        return create_engine(settings.database_url, **kwargs)

    logger.info(
        f"Configuring PostgreSQL database pool: "
        f"size={settings.db_pool_size}, max_overflow={settings.db_pool_max_overflow}"
    )
    return create_engine(
        settings.database_url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_pool_max_overflow,
        pool_pre_ping=True,
        pool_timeout=30,
        echo=settings.debug,
    )


engine = _create_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency that provides a database session.

    Yields:
        Session: A SQLAlchemy database session that auto-closes after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_database_health() -> dict:
    """
    Check database connectivity.

    Returns:
        dict: {"status": "healthy", "database": ...} or {"status": "unhealthy", "error": ...}
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        return {
            "status": "healthy",
            "database": "sqlite" if settings.is_sqlite else "postgresql",
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "unhealthy",
            "error": str(e),
        }
