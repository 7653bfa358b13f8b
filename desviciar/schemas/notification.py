"""Notification schemas"""
from pydantic import BaseModel, Field


class RegisterFCMTokenRequest(BaseModel):
    """Register FCM token for push notifications"""
    fcm_token: str = Field(..., min_length=10, max_length=500)


class RegisterFCMTokenResponse(BaseModel):
    """FCM token registration response"""
    message: str


class InactivityReport(BaseModel):
    """Counts from one inactivity notification run"""
    scanned: int = 0
    sent: int = 0
    skipped: int = 0
    tokens_removed: int = 0
    failed: int = 0
