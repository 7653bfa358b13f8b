"""Progress screen data: windowed reads plus aggregation"""
import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from google.cloud.firestore_v1.base_query import FieldFilter

from desviciar.config import settings
from desviciar.core.firebase import FirebaseContext
from desviciar.models.progress import (
    DAILY_HISTORY_COLLECTION,
    TRIGGER_LOGS_COLLECTION,
    DailyRecord,
    TriggerLog,
)
from desviciar.models.user import USERS_COLLECTION
from desviciar.schemas.progress import ProgressResponse
from desviciar.services.progress_aggregator import WINDOW_SIZES, build_chart, summarize_triggers
from desviciar.utils.time_utils import date_key, local_today, to_calendar_day

logger = logging.getLogger(__name__)


class ProgressService:
    """Service for the progress chart and trigger insights"""

    def __init__(self, firebase: FirebaseContext):
        self.firebase = firebase

    def _user_ref(self, uid: str):
        return self.firebase.db.collection(USERS_COLLECTION).document(uid)

    def get_streak_start(self, uid: str, today: date) -> date:
        """Recovery streak start from the profile, today if unset"""
        snapshot = self._user_ref(uid).get()
        if snapshot.exists:
            start = to_calendar_day((snapshot.to_dict() or {}).get("current_streak_start"))
            if start is not None:
                return start
        return today

    def get_daily_records(self, uid: str, since: date) -> List[DailyRecord]:
        query = (
            self._user_ref(uid)
            .collection(DAILY_HISTORY_COLLECTION)
            .where(filter=FieldFilter("date", ">=", date_key(since)))
        )
        return [DailyRecord.from_document(doc.to_dict()) for doc in query.stream()]

    def get_trigger_logs(self, uid: str, since: date) -> List[TriggerLog]:
        window_start = datetime.combine(since, time.min, tzinfo=ZoneInfo(settings.APP_TIMEZONE))
        query = (
            self._user_ref(uid)
            .collection(TRIGGER_LOGS_COLLECTION)
            .where(filter=FieldFilter("timestamp", ">=", window_start))
            .order_by("timestamp")
        )
        return [TriggerLog.from_document(doc.to_dict()) for doc in query.stream()]

    def get_progress(
        self,
        uid: str,
        window_size: int,
        today: Optional[date] = None
    ) -> ProgressResponse:
        """
        Get chart points, stats and trigger insight for the last window_size days

        Raises:
            ValueError: If window_size is not supported
        """
        if window_size not in WINDOW_SIZES:
            raise ValueError(f"window_size must be one of {WINDOW_SIZES}")

        today = today or local_today()
        since = today - timedelta(days=window_size - 1)

        streak_start = self.get_streak_start(uid, today)
        records = self.get_daily_records(uid, since)
        logs = self.get_trigger_logs(uid, since)

        points, average, perfect_days = build_chart(streak_start, today, window_size, records)

        logger.info(
            f"Progress for {uid}: {len(points)}/{window_size} days, "
            f"{len(records)} records, {len(logs)} trigger logs"
        )

        return ProgressResponse(
            window_size=window_size,
            streak_start=streak_start,
            points=points,
            average=average,
            perfect_days=perfect_days,
            trigger_insight=summarize_triggers(logs),
        )
