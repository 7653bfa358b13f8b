"""User account model (Firestore users/{uid})"""
import enum
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel

USERS_COLLECTION = "users"


class SubscriptionStatus(str, enum.Enum):
    """Subscription states as reported by Stripe"""
    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    UNPAID = "unpaid"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    PAUSED = "paused"


class UserAccount(BaseModel):
    """
    Identity plus subscription state.

    Only the reconciler writes the subscription fields; the rest of the
    profile (onboarding answers, streak start, push token) is owned by the
    client and must survive every reconciler write.
    """
    uid: str
    email: Optional[str] = None
    subscription_status: Optional[str] = None  # None for users with no billing events yet
    stripe_customer_id: Optional[str] = None
    current_streak_start: Optional[Any] = None
    daily_addiction_minutes: Optional[int] = None
    fcm_token: Optional[str] = None
    last_active_at: Optional[datetime] = None
    last_notification_sent_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, uid: str, data: Optional[Dict[str, Any]]) -> "UserAccount":
        """Build from a Firestore snapshot dict, ignoring unknown fields"""
        data = data or {}
        fields = {k: v for k, v in data.items() if k in cls.model_fields}
        fields["uid"] = uid
        return cls(**fields)

    @property
    def is_subscriber(self) -> bool:
        """Active or trialing subscriptions unlock the app"""
        return self.subscription_status in (
            SubscriptionStatus.ACTIVE.value,
            SubscriptionStatus.TRIALING.value,
        )
