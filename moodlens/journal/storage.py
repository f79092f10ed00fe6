from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from moodlens.defaults import HISTORY_WINDOW
from moodlens.model import ClassificationResult, MoodHistoryEntry
from moodlens.pipeline.events import MOOD_RECORDED, EventBus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MoodEvent:
    id: int
    user_id: str
    mood: str
    confidence: float
    timestamp: str
    source: str

    def to_history_entry(self) -> MoodHistoryEntry:
        ts = datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return MoodHistoryEntry(mood=self.mood, confidence=self.confidence, timestamp=ts)


def _to_utc_iso(timestamp: datetime | str | None) -> str:
    """Stored timestamps are UTC ISO-8601 with microseconds so text order is time order."""
    if timestamp is None:
        ts = datetime.now(timezone.utc)
    elif isinstance(timestamp, datetime):
        ts = timestamp
    else:
        ts = datetime.fromisoformat(timestamp.strip().replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat(timespec="microseconds")


class MoodEventJournal:
    """Append-only log of mood events per user, the source for history stats."""

    def __init__(self, db_path: str | Path = "data/moodlens.db", event_bus: EventBus | None = None) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.event_bus = event_bus
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @asynccontextmanager
    async def _connect(self):
        async with aiosqlite.connect(str(self.db_path)) as conn:
            conn.row_factory = aiosqlite.Row
            yield conn

    async def _ensure_initialized(self) -> None:
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return

            async with self._connect() as conn:
                await conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS mood_events (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        user_id TEXT NOT NULL,
                        mood TEXT NOT NULL,
                        confidence REAL NOT NULL,
                        timestamp TEXT NOT NULL,
                        source TEXT NOT NULL
                    )
                    """
                )
                await conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_mood_events_user_ts ON mood_events (user_id, timestamp)"
                )
                await conn.commit()
            self._initialized = True

    async def record(
        self,
        user_id: str,
        mood: str,
        confidence: float,
        *,
        timestamp: datetime | str | None = None,
        source: str = "classifier",
    ) -> MoodEvent:
        # Raises ValueError for unparseable strings before anything is written.
        ts = _to_utc_iso(timestamp)
        await self._ensure_initialized()

        async with self._connect() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO mood_events (user_id, mood, confidence, timestamp, source)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, mood, float(confidence), ts, source),
            )
            await conn.commit()
            event_id = int(cursor.lastrowid)

        event = MoodEvent(
            id=event_id, user_id=user_id, mood=mood,
            confidence=float(confidence), timestamp=ts, source=source,
        )
        logger.info("Mood event recorded: user=%s mood=%s confidence=%.2f", user_id, mood, event.confidence)
        if self.event_bus is not None:
            self.event_bus.publish(MOOD_RECORDED, {"user_id": user_id, "mood": mood, "id": event_id})
        return event

    async def record_result(
        self,
        user_id: str,
        result: ClassificationResult,
        mood: str,
        *,
        source: str | None = None,
    ) -> MoodEvent:
        """Store ``mood`` (history vocabulary) with the classification's confidence and source."""
        return await self.record(
            user_id,
            mood,
            result.confidence,
            source=source or result.source,
        )

    async def list_events(self, user_id: str, limit: int = HISTORY_WINDOW) -> list[MoodEvent]:
        await self._ensure_initialized()

        async with self._connect() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM mood_events
                WHERE user_id = ?
                ORDER BY timestamp DESC, id DESC
                LIMIT ?
                """,
                (user_id, limit),
            )
            rows = await cursor.fetchall()
        return [
            MoodEvent(
                id=row["id"],
                user_id=row["user_id"],
                mood=row["mood"],
                confidence=float(row["confidence"]),
                timestamp=row["timestamp"],
                source=row["source"],
            )
            for row in rows
        ]

    async def recent(self, user_id: str, limit: int = HISTORY_WINDOW) -> list[MoodHistoryEntry]:
        """Newest-first history entries, ready for ``history.summarize``."""
        return [event.to_history_entry() for event in await self.list_events(user_id, limit=limit)]
