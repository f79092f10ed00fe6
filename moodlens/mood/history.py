from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, time, timedelta, timezone

from moodlens.defaults import HISTORY_WINDOW, TREND_DAYS
from moodlens.model import DailyTrend, MoodHistoryEntry, MoodStatsSummary

# Ordinal weights over the product mood vocabulary (wider than EmotionLabel).
MOOD_SCORES: dict[str, int] = {
    "happy": 5,
    "energetic": 4,
    "peaceful": 3,
    "calm": 2,
    "reflective": 1,
    "sad": 0,
}

# (minimum average score, bucket), checked top-down.
AVERAGE_MOOD_THRESHOLDS: list[tuple[float, str]] = [
    (4.0, "happy"),
    (2.5, "peaceful"),
    (1.0, "calm"),
]
LOWEST_MOOD_BUCKET = "reflective"


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def mood_score(mood: str) -> int:
    return MOOD_SCORES.get(mood, 0)


def average_mood(entries: list[MoodHistoryEntry]) -> str:
    if not entries:
        return LOWEST_MOOD_BUCKET
    average = sum(mood_score(e.mood) for e in entries) / len(entries)
    for minimum, bucket in AVERAGE_MOOD_THRESHOLDS:
        if average >= minimum:
            return bucket
    return LOWEST_MOOD_BUCKET


def weekly_trends(entries: list[MoodHistoryEntry], now: datetime) -> list[DailyTrend]:
    """One bucket per calendar day, oldest first, ending with ``now``'s day."""
    now = _as_utc(now)
    tz = now.tzinfo
    buckets: list[DailyTrend] = []
    for offset in range(TREND_DAYS - 1, -1, -1):
        day = (now - timedelta(days=offset)).date()
        day_start = datetime.combine(day, time.min, tzinfo=tz)
        day_end = datetime.combine(day, time.max, tzinfo=tz)

        counts: dict[str, int] = {}
        total = 0
        for entry in entries:
            ts = _as_utc(entry.timestamp)
            if day_start <= ts <= day_end:
                counts[entry.mood] = counts.get(entry.mood, 0) + 1
                total += 1
        buckets.append(DailyTrend(date=day.isoformat(), mood_counts=counts, total_events=total))
    return buckets


def summarize(
    entries: Iterable[MoodHistoryEntry],
    *,
    now: datetime | None = None,
    window: int = HISTORY_WINDOW,
) -> MoodStatsSummary:
    """Recompute distribution, dominant mood and 7-day trend from scratch.

    Only the ``window`` most recent entries are considered.
    """
    recent = sorted(entries, key=lambda e: _as_utc(e.timestamp), reverse=True)[:window]

    distribution: dict[str, int] = {}
    for entry in recent:
        distribution[entry.mood] = distribution.get(entry.mood, 0) + 1

    return MoodStatsSummary(
        total_moods=len(recent),
        mood_distribution=distribution,
        weekly_trends=weekly_trends(recent, now or datetime.now(timezone.utc)),
        average_mood=average_mood(recent),
    )
