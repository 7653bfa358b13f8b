"""Firebase Cloud Messaging service"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from firebase_admin import exceptions, firestore, messaging
from google.cloud.firestore_v1.base_query import FieldFilter

from desviciar.config import settings
from desviciar.core.firebase import FirebaseContext
from desviciar.models.user import USERS_COLLECTION
from desviciar.schemas.notification import InactivityReport
from desviciar.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

INACTIVITY_TITLE = "⚠️ Alerta de Disciplina"
INACTIVITY_BODY = "Sua ofensiva está em risco! Você não registra atividade há 24h. Volte ao comando."


class FCMService:
    """Service for push tokens and inactivity reminders"""

    def __init__(self, firebase: FirebaseContext):
        self.firebase = firebase

    def _users(self):
        return self.firebase.db.collection(USERS_COLLECTION)

    def register_token(self, uid: str, fcm_token: str) -> None:
        """Store the device token and mark the user as active"""
        self._users().document(uid).set({
            "fcm_token": fcm_token,
            "last_active_at": firestore.SERVER_TIMESTAMP,
        }, merge=True)
        logger.info(f"Registered FCM token for user {uid}")

    def remove_token(self, uid: str) -> None:
        self._users().document(uid).set({"fcm_token": firestore.DELETE_FIELD}, merge=True)
        logger.info(f"Removed FCM token for user {uid}")

    def build_inactivity_message(self, token: str) -> messaging.Message:
        return messaging.Message(
            notification=messaging.Notification(
                title=INACTIVITY_TITLE,
                body=INACTIVITY_BODY,
            ),
            token=token,
            webpush=messaging.WebpushConfig(
                fcm_options=messaging.WebpushFCMOptions(link=settings.DASHBOARD_URL),
                notification=messaging.WebpushNotification(icon=settings.NOTIFICATION_ICON_URL),
            ),
        )

    def notify_inactive_users(self, now: Optional[datetime] = None) -> InactivityReport:
        """
        Send a reminder to users with no activity in the last day

        Users reminded within the cooldown window are skipped. Tokens FCM
        reports as unregistered or invalid are deleted from the profile.
        Called by scheduler
        """
        now = now or utc_now()
        inactive_before = now - timedelta(hours=settings.INACTIVITY_THRESHOLD_HOURS)
        cooldown_start = now - timedelta(hours=settings.NOTIFICATION_COOLDOWN_HOURS)

        query = (
            self._users()
            .where(filter=FieldFilter("last_active_at", "<", inactive_before))
            .limit(settings.INACTIVITY_BATCH_LIMIT)
        )

        report = InactivityReport()
        for doc in query.stream():
            report.scanned += 1
            data = doc.to_dict() or {}

            token = data.get("fcm_token")
            if not token:
                report.skipped += 1
                continue

            last_sent = data.get("last_notification_sent_at")
            if last_sent is not None:
                if last_sent.tzinfo is None:
                    last_sent = last_sent.replace(tzinfo=timezone.utc)
                if last_sent > cooldown_start:
                    report.skipped += 1
                    continue

            try:
                self.firebase.send_message(self.build_inactivity_message(token))
            except (messaging.UnregisteredError, exceptions.InvalidArgumentError):
                doc.reference.update({"fcm_token": firestore.DELETE_FIELD})
                report.tokens_removed += 1
                logger.info(f"Removed stale FCM token for user {doc.id}")
                continue
            except Exception as e:
                report.failed += 1
                logger.error(f"Failed to send inactivity reminder to {doc.id}: {str(e)}")
                continue

            doc.reference.update({"last_notification_sent_at": firestore.SERVER_TIMESTAMP})
            report.sent += 1

        logger.info(
            f"Inactivity check: scanned {report.scanned}, sent {report.sent}, "
            f"skipped {report.skipped}, removed {report.tokens_removed} tokens, "
            f"failed {report.failed}"
        )
        return report
