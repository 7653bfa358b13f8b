"""
Progress aggregation over a user's daily history and trigger logs.

Pure functions over data already in memory; fetching lives in
ProgressService. Rounding matches the front end's Math.round (halves up).
"""
import math
from collections import Counter
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from desviciar.config import settings
from desviciar.models.progress import DailyRecord, TriggerLog
from desviciar.schemas.progress import ChartPoint, CountEntry, TopEntry, TriggerInsight

WINDOW_SIZES = (7, 15, 30, 90)
RANKING_SIZE = 3


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def completion_percentage(completed_count: int, total_habits: Optional[int]) -> int:
    """Completion percentage clamped to [0, 100]; missing or zero totals use the default"""
    total = total_habits or settings.DEFAULT_TOTAL_HABITS
    value = round_half_up(completed_count / total * 100)
    return max(0, min(value, 100))


def build_chart(
    streak_start: date,
    today: date,
    window_size: int,
    records: Iterable[DailyRecord]
) -> Tuple[List[ChartPoint], int, int]:
    """
    Build one chart point per day of the window, oldest first

    Days before the streak started are left out entirely, so a fresh streak
    yields fewer than window_size points.

    Returns:
        (points, average percentage, perfect day count)
    """
    if window_size not in WINDOW_SIZES:
        raise ValueError(f"window_size must be one of {WINDOW_SIZES}")

    by_date: Dict[str, DailyRecord] = {r.date: r for r in records}

    points: List[ChartPoint] = []
    total_percentage = 0
    perfect_days = 0

    for offset in range(window_size - 1, -1, -1):
        target = today - timedelta(days=offset)
        day_number = (target - streak_start).days + 1
        if day_number < 1:
            continue

        record = by_date.get(target.isoformat())
        count = record.completed_count if record else 0
        value = completion_percentage(count, record.total_habits if record else None)

        total_percentage += value
        if value == 100:
            perfect_days += 1

        points.append(ChartPoint(
            label=f"D{day_number}",
            date=target,
            value=value,
            raw_count=count,
            day_number=day_number,
        ))

    average = round_half_up(total_percentage / len(points)) if points else 0
    return points, average, perfect_days


def _top(counts: Counter, total: int) -> TopEntry:
    # Counter keeps first-seen order and max() returns the first maximum
    name, count = max(counts.items(), key=lambda item: item[1])
    return TopEntry(name=name, count=count, percentage=round_half_up(count / total * 100))


def summarize_triggers(logs: Sequence[TriggerLog]) -> TriggerInsight:
    """
    Rank craving causes

    Ties go to the value that appears first in logs, both for the top entries
    and within the ranking.
    """
    if not logs:
        return TriggerInsight(total_logs=0, top_emotion=None, top_context=None, ranking=[])

    emotions = Counter(log.emotion for log in logs)
    contexts = Counter(log.context for log in logs)
    total = len(logs)

    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(emotions.items(), key=lambda item: item[1], reverse=True)

    return TriggerInsight(
        total_logs=total,
        top_emotion=_top(emotions, total),
        top_context=_top(contexts, total),
        ranking=[CountEntry(name=name, count=count) for name, count in ranked[:RANKING_SIZE]],
    )
