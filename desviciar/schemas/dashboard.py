"""Schemas for the dashboard endpoint"""
from pydantic import BaseModel
from typing import Optional
from datetime import date


class DashboardResponse(BaseModel):
    """Streak summary and recovered time"""
    streak_start: Optional[date] = None
    streak_days: int
    hours_saved: int
    vital_message: str
    subscription_status: Optional[str] = None
    is_subscriber: bool
