"""Schemas for the billing webhook"""
from pydantic import BaseModel
from typing import Optional


class WebhookAck(BaseModel):
    """Acknowledgement returned to Stripe"""
    received: bool
    outcome: Optional[str] = None  # handled, ignored, skipped
