from datetime import datetime, timedelta, timezone

from moodlens.model import MoodHistoryEntry
from moodlens.mood.history import average_mood, mood_score, summarize

NOW = datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)


def _entry(mood: str, ts: datetime, confidence: float = 0.7) -> MoodHistoryEntry:
    return MoodHistoryEntry(mood=mood, confidence=confidence, timestamp=ts)


def test_summarize_empty_history():
    summary = summarize([], now=NOW)

    assert summary.total_moods == 0
    assert summary.mood_distribution == {}
    assert summary.average_mood == "reflective"
    assert len(summary.weekly_trends) == 7
    assert all(day.total_events == 0 and day.mood_counts == {} for day in summary.weekly_trends)


def test_weekly_buckets_end_today_oldest_first():
    summary = summarize([], now=NOW)
    dates = [day.date for day in summary.weekly_trends]
    assert dates == [
        "2026-03-04", "2026-03-05", "2026-03-06", "2026-03-07",
        "2026-03-08", "2026-03-09", "2026-03-10",
    ]


def test_distribution_and_daily_counts():
    entries = [
        _entry("happy", NOW - timedelta(hours=1)),
        _entry("happy", NOW.replace(hour=0, minute=0)),
        _entry("sad", NOW - timedelta(days=1)),
        _entry("calm", NOW - timedelta(days=6)),
        _entry("calm", NOW - timedelta(days=9)),  # outside the week
    ]

    summary = summarize(entries, now=NOW)

    assert summary.total_moods == 5
    assert summary.mood_distribution == {"happy": 2, "sad": 1, "calm": 2}
    today = summary.weekly_trends[-1]
    assert today.mood_counts == {"happy": 2}
    assert today.total_events == 2
    assert summary.weekly_trends[-2].mood_counts == {"sad": 1}
    assert summary.weekly_trends[0].total_events == 1
    assert sum(day.total_events for day in summary.weekly_trends) == 4


def test_day_window_is_inclusive_until_last_millisecond():
    late = datetime(2026, 3, 9, 23, 59, 59, 999000, tzinfo=timezone.utc)
    summary = summarize([_entry("calm", late)], now=NOW)
    assert summary.weekly_trends[-2].total_events == 1
    assert summary.weekly_trends[-1].total_events == 0


def test_naive_timestamps_are_treated_as_utc():
    summary = summarize([_entry("happy", datetime(2026, 3, 10, 9, 0))], now=NOW)
    assert summary.weekly_trends[-1].total_events == 1


def test_only_most_recent_window_counts():
    entries = [_entry("sad", NOW - timedelta(days=30, minutes=i)) for i in range(5)]
    entries += [_entry("happy", NOW - timedelta(minutes=i)) for i in range(100)]

    summary = summarize(entries, now=NOW)

    assert summary.total_moods == 100
    assert summary.mood_distribution == {"happy": 100}
    assert summary.average_mood == "happy"


def test_average_mood_buckets():
    ts = NOW
    assert average_mood([_entry("happy", ts), _entry("energetic", ts)]) == "happy"  # 4.5
    assert average_mood([_entry("peaceful", ts)]) == "peaceful"  # 3
    assert average_mood([_entry("happy", ts), _entry("sad", ts)]) == "peaceful"  # 2.5
    assert average_mood([_entry("calm", ts)]) == "calm"  # 2
    assert average_mood([_entry("reflective", ts)]) == "calm"  # 1
    assert average_mood([_entry("sad", ts), _entry("reflective", ts)]) == "reflective"  # 0.5


def test_unknown_moods_weigh_zero():
    assert mood_score("angry") == 0
    assert mood_score("neutral") == 0
    assert average_mood([_entry("angry", NOW), _entry("fear", NOW)]) == "reflective"


def test_to_dict_uses_wire_field_names():
    summary = summarize([_entry("happy", NOW)], now=NOW).to_dict()
    assert set(summary) == {"totalMoods", "moodDistribution", "weeklyTrends", "averageMood"}
    assert set(summary["weeklyTrends"][0]) == {"date", "moodCounts", "totalEvents"}
    assert summary["weeklyTrends"][-1]["moodCounts"] == {"happy": 1}
