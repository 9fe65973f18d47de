"""
Engine, session factory and schema bootstrap.
"""

import logging
import time
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool

from floodwatch.core.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.database_url,
    poolclass=QueuePool,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    pool_pre_ping=True,
    echo=settings.debug,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; rolled back if the request fails."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(max_retries: int = 30, retry_interval: int = 2) -> None:
    """
    Create missing tables, waiting for the database to accept connections.

    Only a refused connection is retried; any other OperationalError means a
    misconfiguration and is raised at once.
    """
    from floodwatch.models import DailySummary, SensorReading  # noqa: F401

    tables = ", ".join(Base.metadata.tables)
    for attempt in range(1, max_retries + 1):
        try:
            Base.metadata.create_all(bind=engine, checkfirst=True)
            logger.info(f"Database ready (tables: {tables})")
            return
        except OperationalError as e:
            if "connection refused" not in str(e).lower():
                logger.error(f"Database initialization failed: {e}")
                raise
            logger.warning(
                f"Database not accepting connections ({attempt}/{max_retries}), "
                f"retrying in {retry_interval}s"
            )
            time.sleep(retry_interval)

    raise RuntimeError(f"Database unreachable after {max_retries} attempts")
