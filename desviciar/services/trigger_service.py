"""Trigger (craving) logging service"""
import logging

from desviciar.core.firebase import FirebaseContext
from desviciar.models.progress import TRIGGER_LOGS_COLLECTION
from desviciar.models.user import USERS_COLLECTION
from desviciar.schemas.progress import TriggerLogCreate, TriggerLogResponse
from desviciar.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


class TriggerService:
    """Append-only store of trigger logs"""

    def __init__(self, firebase: FirebaseContext):
        self.firebase = firebase

    def log_trigger(self, uid: str, data: TriggerLogCreate) -> TriggerLogResponse:
        """
        Record a craving with the current UTC time

        Args:
            uid: Firebase uid
            data: Emotion and context

        Returns:
            The stored log with its document id
        """
        timestamp = utc_now()
        doc_ref = (
            self.firebase.db.collection(USERS_COLLECTION)
            .document(uid)
            .collection(TRIGGER_LOGS_COLLECTION)
            .document()
        )
        doc_ref.set({
            "emotion": data.emotion,
            "context": data.context,
            "timestamp": timestamp,
        })

        logger.info(f"Trigger logged for user {uid}")

        return TriggerLogResponse(
            id=doc_ref.id,
            emotion=data.emotion,
            context=data.context,
            timestamp=timestamp,
        )
