import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from moodlens.journal.storage import MoodEventJournal
from moodlens.model import ClassificationDetails, ClassificationResult
from moodlens.mood.history import summarize
from moodlens.pipeline.events import MOOD_RECORDED, EventBus


def test_journal_record_and_read_newest_first(tmp_path):
    async def scenario() -> None:
        journal = MoodEventJournal(db_path=tmp_path / "test.db")

        await journal.record("me", "calm", 0.6, timestamp="2026-02-28T10:00:00+00:00")
        await journal.record("me", "happy", 0.9, timestamp="2026-02-28T10:01:00+00:00")
        await journal.record("other", "sad", 0.4, timestamp="2026-02-28T10:02:00+00:00")

        events = await journal.list_events("me", limit=10)
        assert [e.mood for e in events] == ["happy", "calm"]
        assert events[0].source == "classifier"

        entries = await journal.recent("me")
        assert entries[0].mood == "happy"
        assert entries[0].timestamp == datetime(2026, 2, 28, 10, 1, tzinfo=timezone.utc)

    asyncio.run(scenario())


def test_journal_limit_applies(tmp_path):
    async def scenario() -> None:
        journal = MoodEventJournal(db_path=tmp_path / "test.db")
        start = datetime(2026, 3, 1, tzinfo=timezone.utc)
        for i in range(5):
            await journal.record("me", "calm", 0.5, timestamp=start + timedelta(hours=i))

        entries = await journal.recent("me", limit=3)
        assert len(entries) == 3
        assert entries[0].timestamp == start + timedelta(hours=4)

    asyncio.run(scenario())


def test_record_result_stores_history_mood_and_source(tmp_path):
    async def scenario() -> None:
        bus = EventBus()
        recorded = []
        bus.subscribe(MOOD_RECORDED, lambda event: recorded.append(event.payload["mood"]))
        journal = MoodEventJournal(db_path=tmp_path / "test.db", event_bus=bus)
        result = ClassificationResult(
            emotion="sad",
            confidence=0.6,
            details=ClassificationDetails(primary="sad", intensity="medium"),
            source="heuristic",
        )

        event = await journal.record_result("me", result, "reflective")

        assert event.mood == "reflective"
        assert event.confidence == 0.6
        assert event.source == "heuristic"
        assert recorded == ["reflective"]

    asyncio.run(scenario())


def test_journal_feeds_history_summary(tmp_path):
    async def scenario() -> None:
        journal = MoodEventJournal(db_path=tmp_path / "test.db")
        now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
        await journal.record("me", "happy", 0.9, timestamp=now - timedelta(hours=2))
        await journal.record("me", "peaceful", 0.7, timestamp=now - timedelta(days=1))

        summary = summarize(await journal.recent("me"), now=now)

        assert summary.total_moods == 2
        assert summary.average_mood == "happy"
        assert summary.weekly_trends[-1].mood_counts == {"happy": 1}
        assert summary.weekly_trends[-2].mood_counts == {"peaceful": 1}

    asyncio.run(scenario())


def test_unparseable_timestamp_is_rejected_at_write(tmp_path):
    async def scenario() -> None:
        journal = MoodEventJournal(db_path=tmp_path / "test.db")
        await journal.record("me", "calm", 0.5, timestamp="2026-03-10T08:00:00+00:00")

        with pytest.raises(ValueError):
            await journal.record("me", "happy", 0.9, timestamp="yesterday")

        entries = await journal.recent("me")
        assert [e.mood for e in entries] == ["calm"]

    asyncio.run(scenario())


def test_offset_timestamps_are_stored_in_utc_and_ordered_by_instant(tmp_path):
    async def scenario() -> None:
        journal = MoodEventJournal(db_path=tmp_path / "test.db")
        # 12:00+05:00 is 07:00Z, an hour before the second event.
        older = await journal.record("me", "sad", 0.4, timestamp="2026-03-10T12:00:00+05:00")
        await journal.record("me", "happy", 0.9, timestamp="2026-03-10T08:00:00+00:00")

        assert older.timestamp == "2026-03-10T07:00:00.000000+00:00"
        latest = await journal.recent("me", limit=1)
        assert [e.mood for e in latest] == ["happy"]
        assert latest[0].timestamp == datetime(2026, 3, 10, 8, 0, tzinfo=timezone.utc)

    asyncio.run(scenario())


def test_naive_and_zulu_strings_are_read_as_utc(tmp_path):
    async def scenario() -> None:
        journal = MoodEventJournal(db_path=tmp_path / "test.db")
        naive = await journal.record("me", "calm", 0.5, timestamp="2026-03-10T09:00:00")
        zulu = await journal.record("me", "calm", 0.5, timestamp="2026-03-10T10:00:00Z")

        assert naive.timestamp == "2026-03-10T09:00:00.000000+00:00"
        assert zulu.timestamp == "2026-03-10T10:00:00.000000+00:00"

    asyncio.run(scenario())
