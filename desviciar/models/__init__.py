"""Firestore document models"""
from desviciar.models.user import UserAccount, SubscriptionStatus, USERS_COLLECTION
from desviciar.models.progress import (
    DailyRecord,
    TriggerLog,
    DAILY_HISTORY_COLLECTION,
    TRIGGER_LOGS_COLLECTION,
)

__all__ = [
    "UserAccount",
    "SubscriptionStatus",
    "DailyRecord",
    "TriggerLog",
    "USERS_COLLECTION",
    "DAILY_HISTORY_COLLECTION",
    "TRIGGER_LOGS_COLLECTION",
]
