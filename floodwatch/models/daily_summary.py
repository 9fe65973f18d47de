"""
Per-day aggregates of sensor readings.
"""

from sqlalchemy import Column, Date, DateTime, Float, Index, Integer, String

from floodwatch.core.database import Base
from floodwatch.models.base import BaseModel


class DailySummary(Base, BaseModel):
    """One row per civil calendar day, overwritten on every recompute."""

    __tablename__ = "daily_summaries"

    summary_date = Column(Date, primary_key=True)

    avg_right_level = Column(Float, nullable=False, default=0.0)
    avg_left_level = Column(Float, nullable=False, default=0.0)
    avg_right_flow = Column(Float, nullable=False, default=0.0)
    avg_left_flow = Column(Float, nullable=False, default=0.0)
    sample_count = Column(Integer, nullable=False, default=0)

    status = Column(String(20), nullable=False, default="SAFE")
    flood_flag = Column(Integer, nullable=False, default=0)

    # Mirrors of status/flood_flag for consumers that diff against prior state
    last_status = Column(String(20), nullable=False, default="SAFE")
    last_flood_flag = Column(Integer, nullable=False, default=0)

    computed_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_summary_flood_flag", "flood_flag"),)
