"""
Raw sensor readings.
"""

from sqlalchemy import BigInteger, Column, DateTime, Float, Index

from floodwatch.core.database import Base
from floodwatch.models.base import BaseModel


class SensorReading(Base, BaseModel):
    """One water level / flow sample from the right and left sensors."""

    __tablename__ = "sensor_readings"

    id = Column(BigInteger, primary_key=True)

    # Levels in cm, flows in L/s
    right_level = Column(Float, nullable=False)
    left_level = Column(Float, nullable=False)
    right_flow = Column(Float, nullable=False)
    left_flow = Column(Float, nullable=False)

    # Civil time of receipt, stored as timestamptz
    captured_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_reading_captured_at", "captured_at"),)

    def __repr__(self) -> str:
        return f"<SensorReading id={self.id} captured_at={self.captured_at}>"
