"""Schemas for progress and trigger endpoints"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime


class ChartPoint(BaseModel):
    """One day on the progress chart"""
    label: str  # "D1", "D50"
    date: date
    value: int = Field(..., ge=0, le=100)  # completion percentage
    raw_count: int  # habits completed that day
    day_number: int


class CountEntry(BaseModel):
    name: str
    count: int


class TopEntry(BaseModel):
    name: str
    count: int
    percentage: int


class TriggerInsight(BaseModel):
    """What drove the cravings in the window"""
    total_logs: int
    top_emotion: Optional[TopEntry] = None
    top_context: Optional[TopEntry] = None
    ranking: List[CountEntry] = []


class ProgressResponse(BaseModel):
    """Chart data and summary for the progress screen"""
    window_size: int
    streak_start: date
    points: List[ChartPoint]
    average: int = Field(..., ge=0, le=100)
    perfect_days: int = Field(..., ge=0)
    trigger_insight: TriggerInsight


class TriggerLogCreate(BaseModel):
    """Log a craving"""
    emotion: str = Field(..., min_length=1, max_length=100)
    context: str = Field(..., min_length=1, max_length=100)

    @field_validator("emotion", "context")
    @classmethod
    def strip_and_require(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class TriggerLogResponse(BaseModel):
    id: str
    emotion: str
    context: str
    timestamp: datetime
