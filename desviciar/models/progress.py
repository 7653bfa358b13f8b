"""Daily history and trigger log models"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel

DAILY_HISTORY_COLLECTION = "daily_history"
TRIGGER_LOGS_COLLECTION = "trigger_logs"


class DailyRecord(BaseModel):
    """Habit completion for one calendar day (users/{uid}/daily_history/{date})"""
    date: str  # YYYY-MM-DD
    completed_count: int = 0
    total_habits: Optional[int] = None

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "DailyRecord":
        return cls(
            date=data["date"],
            completed_count=data.get("completed_count") or 0,
            total_habits=data.get("total_habits"),
        )


class TriggerLog(BaseModel):
    """A logged craving (users/{uid}/trigger_logs/{id}), append-only"""
    emotion: str
    context: str
    timestamp: datetime

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "TriggerLog":
        return cls(
            emotion=data.get("emotion", ""),
            context=data.get("context", ""),
            timestamp=data["timestamp"],
        )
