"""Progress aggregation tests: chart points, stats and trigger insight."""

from datetime import date, datetime, timedelta, timezone

import pytest

from desviciar.models.progress import DailyRecord, TriggerLog
from desviciar.services.progress_aggregator import (
    WINDOW_SIZES,
    build_chart,
    completion_percentage,
    round_half_up,
    summarize_triggers,
)

TODAY = date(2026, 3, 20)


def _log(emotion: str, context: str = "home") -> TriggerLog:
    return TriggerLog(emotion=emotion, context=context, timestamp=datetime(2026, 3, 19, tzinfo=timezone.utc))


class TestCompletionPercentage:

    def test_half_done(self):
        assert completion_percentage(3, 6) == 50

    def test_all_done(self):
        assert completion_percentage(6, 6) == 100

    def test_over_completion_is_clamped(self):
        assert completion_percentage(9, 6) == 100

    def test_missing_total_uses_default_of_six(self):
        assert completion_percentage(3, None) == 50
        assert completion_percentage(3, 0) == 50

    def test_halves_round_up(self):
        # 1/8 = 12.5%
        assert completion_percentage(1, 8) == 13
        assert round_half_up(2.5) == 3


class TestBuildChart:

    @pytest.mark.parametrize("window_size", WINDOW_SIZES)
    def test_long_streak_fills_window(self, window_size):
        points, _, _ = build_chart(TODAY - timedelta(days=200), TODAY, window_size, [])
        assert len(points) == window_size
        assert points[-1].date == TODAY
        assert points[0].date == TODAY - timedelta(days=window_size - 1)

    @pytest.mark.parametrize("window_size", WINDOW_SIZES)
    def test_days_before_streak_are_skipped(self, window_size):
        streak_start = TODAY - timedelta(days=3)
        points, _, _ = build_chart(streak_start, TODAY, window_size, [])

        assert len(points) == min(window_size, 4)
        assert all(p.day_number >= 1 for p in points)
        assert [p.label for p in points] == ["D1", "D2", "D3", "D4"][-len(points):]

    def test_streak_starting_today(self):
        points, average, perfect = build_chart(TODAY, TODAY, 7, [])
        assert [p.label for p in points] == ["D1"]
        assert average == 0
        assert perfect == 0

    def test_future_streak_start_yields_no_points(self):
        points, average, perfect = build_chart(TODAY + timedelta(days=1), TODAY, 7, [])
        assert points == []
        assert average == 0
        assert perfect == 0

    def test_values_average_and_perfect_days(self):
        streak_start = TODAY - timedelta(days=10)
        records = [
            DailyRecord(date=(TODAY - timedelta(days=1)).isoformat(), completed_count=3, total_habits=6),
            DailyRecord(date=TODAY.isoformat(), completed_count=6, total_habits=6),
        ]

        points, average, perfect = build_chart(streak_start, TODAY, 7, records)

        by_date = {p.date: p for p in points}
        assert by_date[TODAY].value == 100
        assert by_date[TODAY].raw_count == 6
        assert by_date[TODAY - timedelta(days=1)].value == 50
        # Five empty days, one 50, one 100 -> 150 / 7 = 21.4
        assert average == 21
        assert perfect == 1

    def test_labels_count_from_streak_start(self):
        streak_start = TODAY - timedelta(days=49)
        points, _, _ = build_chart(streak_start, TODAY, 7, [])
        assert points[-1].label == "D50"
        assert points[0].label == "D44"

    def test_percentages_always_in_range(self):
        records = [
            DailyRecord(date=(TODAY - timedelta(days=i)).isoformat(), completed_count=i * 2, total_habits=6)
            for i in range(7)
        ]
        points, average, _ = build_chart(TODAY - timedelta(days=30), TODAY, 7, records)
        assert all(0 <= p.value <= 100 for p in points)
        assert 0 <= average <= 100

    def test_unsupported_window_rejected(self):
        with pytest.raises(ValueError):
            build_chart(TODAY, TODAY, 10, [])


class TestSummarizeTriggers:

    def test_empty_window(self):
        insight = summarize_triggers([])
        assert insight.total_logs == 0
        assert insight.top_emotion is None
        assert insight.top_context is None
        assert insight.ranking == []

    def test_top_emotion_and_ranking(self):
        logs = (
            [_log("anxiety", "work")] * 5
            + [_log("boredom", "night")] * 3
            + [_log("anger", "night")] * 3
        )

        insight = summarize_triggers(logs)

        assert insight.total_logs == 11
        assert (insight.top_emotion.name, insight.top_emotion.count, insight.top_emotion.percentage) == ("anxiety", 5, 45)
        assert insight.top_context.name == "night"
        assert insight.top_context.count == 6
        assert insight.top_context.percentage == 55
        assert [(e.name, e.count) for e in insight.ranking] == [("anxiety", 5), ("boredom", 3), ("anger", 3)]

    def test_ties_go_to_first_seen(self):
        logs = [_log("anger", "car"), _log("boredom", "bed"), _log("boredom", "car"), _log("anger", "bed")]

        insight = summarize_triggers(logs)

        assert insight.top_emotion.name == "anger"
        assert insight.top_context.name == "car"
        assert [e.name for e in insight.ranking] == ["anger", "boredom"]

    def test_ranking_keeps_top_three(self):
        logs = [_log(name) for name in ["a", "b", "b", "c", "c", "c", "d", "d", "d", "d"]]
        insight = summarize_triggers(logs)
        assert [e.name for e in insight.ranking] == ["d", "c", "b"]
