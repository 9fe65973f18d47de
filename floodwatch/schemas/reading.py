"""
Pydantic schemas for sensor readings and risk verdicts.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)


class RiskStatus(str, Enum):
    """Flood risk levels, lowest to highest."""

    SAFE = "SAFE"
    WATCH = "WATCH"
    FLOOD = "FLOOD"
    DANGER = "DANGER"


class VerdictSource(str, Enum):
    """Where a verdict came from."""

    REMOTE = "REMOTE"
    FALLBACK = "FALLBACK"


FLOOD_STATUSES = frozenset({RiskStatus.FLOOD.value, RiskStatus.DANGER.value})

# Labels emitted by the deployed prediction model
STATUS_ALIASES = {
    "AMAN": RiskStatus.SAFE.value,
    "WASPADA": RiskStatus.WATCH.value,
    "BANJIR": RiskStatus.FLOOD.value,
    "BAHAYA": RiskStatus.DANGER.value,
}

KNOWN_STATUSES = frozenset(s.value for s in RiskStatus)


def normalize_status(raw: Optional[str]) -> str:
    """Upper-case and translate a status label. Unknown labels pass through."""
    value = str(raw or "").strip().upper()
    return STATUS_ALIASES.get(value, value)


def flood_flag_for(status: str) -> int:
    return 1 if status in FLOOD_STATUSES else 0


class ReadingValues(BaseModel):
    """The four numeric fields of a reading."""

    right_level: float = Field(
        ...,
        allow_inf_nan=False,
        validation_alias=AliasChoices("right_level", "h_kanan"),
        description="Right-side water level (cm)",
    )
    left_level: float = Field(
        ...,
        allow_inf_nan=False,
        validation_alias=AliasChoices("left_level", "h_kiri"),
        description="Left-side water level (cm)",
    )
    right_flow: float = Field(
        ...,
        allow_inf_nan=False,
        validation_alias=AliasChoices("right_flow", "q_kanan"),
        description="Right-side flow (L/s)",
    )
    left_flow: float = Field(
        ...,
        allow_inf_nan=False,
        validation_alias=AliasChoices("left_flow", "q_kiri"),
        description="Left-side flow (L/s)",
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("right_level", "left_level", "right_flow", "left_flow", mode="before")
    @classmethod
    def reject_booleans(cls, v):
        if isinstance(v, bool):
            raise ValueError("must be a number, not a boolean")
        return v


class ReadingResponse(BaseModel):
    id: int
    right_level: float
    left_level: float
    right_flow: float
    left_flow: float
    captured_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Verdict(BaseModel):
    """Classification outcome for one reading."""

    status: str
    confidence: float = Field(default=0.0, ge=0, le=100)
    recommendation: str = ""
    source: VerdictSource

    @computed_field
    @property
    def flood_flag(self) -> int:
        return flood_flag_for(self.status)

    @property
    def recognized(self) -> bool:
        return self.status in KNOWN_STATUSES


class IngestResponse(BaseModel):
    success: bool = True
    message: str = "Data received and processed"
    reading: ReadingResponse
    verdict: Verdict
    alert_attempted: bool
    alert_sent: bool


class CurrentStatusResponse(BaseModel):
    success: bool = True
    status: str
    flood_flag: int
    verdict: Optional[Verdict] = None
    current_reading: Optional[ReadingResponse] = None
    last_updated: datetime


class LatestReadingsResponse(BaseModel):
    success: bool = True
    count: int
    data: List[ReadingResponse]
    timestamp: datetime


class ChartPoint(BaseModel):
    right_level: float
    left_level: float
    captured_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ChartDataResponse(BaseModel):
    success: bool = True
    hours: int
    data: List[ChartPoint]
    timestamp: datetime


class PredictionResponse(BaseModel):
    success: bool = True
    verdict: Verdict
    timestamp: datetime
