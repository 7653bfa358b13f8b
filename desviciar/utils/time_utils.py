"""Date and time helpers"""
import logging
from datetime import date, datetime, time, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

from desviciar.config import settings

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def local_today(tz_name: Optional[str] = None) -> date:
    """Current calendar day in the app timezone"""
    return datetime.now(ZoneInfo(tz_name or settings.APP_TIMEZONE)).date()


def date_key(day: date) -> str:
    """Format a day as the YYYY-MM-DD key used by daily_history documents"""
    return day.isoformat()


def parse_streak_start(value: Any, tz_name: Optional[str] = None) -> Optional[datetime]:
    """
    Read a stored current_streak_start as an aware datetime.

    Accepts ISO strings (date or datetime), datetimes (Firestore timestamps
    come back as datetime subclasses) and dates. Naive values and plain dates
    are taken as app-timezone wall time, so a date means local midnight.
    Returns None for empty or unparseable values.
    """
    if value is None or value == "":
        return None

    tz = ZoneInfo(tz_name or settings.APP_TIMEZONE)
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Unparseable current_streak_start: {value!r}")
            return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=tz)

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=tz)

    return None


def to_calendar_day(value: Any, tz_name: Optional[str] = None) -> Optional[date]:
    """Calendar day of a stored streak start in the app timezone"""
    start = parse_streak_start(value, tz_name)
    if start is None:
        return None
    return start.astimezone(ZoneInfo(tz_name or settings.APP_TIMEZONE)).date()
