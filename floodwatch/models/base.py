"""
Base model with common functionality.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel:
    """Base model with common fields."""

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
