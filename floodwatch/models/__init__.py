"""
Database models for the flood monitoring service.
"""

from .base import BaseModel
from .daily_summary import DailySummary
from .reading import SensorReading

__all__ = [
    "BaseModel",
    "SensorReading",
    "DailySummary",
]
