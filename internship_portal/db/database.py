from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from contextlib import contextmanager
import structlog

from internship_portal.core.config import get_settings

settings = get_settings()
logger = structlog.get_logger(__name__)

Base = declarative_base()

# SQLite (local dev and tests) needs cross-thread access and a busy timeout;
# server databases get a connection pool.
if settings.sqlalchemy_url.startswith("sqlite"):
    engine = create_engine(
        settings.sqlalchemy_url,
        connect_args={"check_same_thread": False, "timeout": 30},
        echo=settings.debug
    )
else:
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    engine = create_engine(
        settings.sqlalchemy_url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        echo=settings.debug  # Log SQL queries in debug mode
    )

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM accounts"))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_schema() -> None:
    """Create all tables from the declarative models (no-op for existing ones)."""
    from internship_portal.db import models  # noqa: F401  registers tables on Base

    Base.metadata.create_all(bind=engine)


def test_store_connection() -> bool:
    """
    Test if the relational store is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        logger.warning("store_connection_failed", error=str(e))
        return False


def execute_raw_sql(sql: str, params: dict = None) -> list:
    """
    Execute raw SQL and return results as list of dicts.
    This is useful for listing and aggregate queries.
    """
    with get_db_session() as db:
        result = db.execute(text(sql), params or {})
        return [dict(row) for row in result.mappings().all()]
