from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal, get_args


EmotionLabel = Literal[
    "happy",
    "sad",
    "angry",
    "fear",
    "disgust",
    "surprise",
    "neutral",
]

Intensity = Literal["low", "medium", "high"]

EMOTION_LABELS: frozenset[str] = frozenset(get_args(EmotionLabel))
INTENSITY_TIERS: tuple[str, ...] = get_args(Intensity)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True, frozen=True)
class RawProviderEmotion:
    """One label/score pair in the provider's (or heuristic's) vocabulary."""

    label: str
    score: float

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "score": self.score}


@dataclass(slots=True)
class NormalizedEmotion:
    primary: EmotionLabel
    secondary: list[EmotionLabel]
    confidence: float
    intensity: Intensity


@dataclass(slots=True)
class ClassificationDetails:
    primary: EmotionLabel
    secondary: list[EmotionLabel] = field(default_factory=list)
    intensity: Intensity = "medium"
    keywords: list[str] = field(default_factory=list)
    raw_analysis: Any | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "primary": self.primary,
            "secondary": list(self.secondary),
            "intensity": self.intensity,
            "keywords": list(self.keywords),
            "rawAnalysis": self.raw_analysis,
        }


@dataclass(slots=True)
class ClassificationResult:
    emotion: EmotionLabel
    confidence: float
    details: ClassificationDetails
    source: str = "default"  # "provider" | "heuristic" | "default"

    def to_dict(self) -> dict[str, Any]:
        return {
            "emotion": self.emotion,
            "confidence": self.confidence,
            "details": self.details.to_dict(),
        }


@dataclass(slots=True)
class MoodHistoryEntry:
    # History moods use the wider product vocabulary (energetic, peaceful, ...),
    # not only EmotionLabel.
    mood: str
    confidence: float
    timestamp: datetime


@dataclass(slots=True)
class DailyTrend:
    date: str
    mood_counts: dict[str, int] = field(default_factory=dict)
    total_events: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "moodCounts": dict(self.mood_counts),
            "totalEvents": self.total_events,
        }


@dataclass(slots=True)
class MoodStatsSummary:
    total_moods: int
    mood_distribution: dict[str, int]
    weekly_trends: list[DailyTrend]
    average_mood: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalMoods": self.total_moods,
            "moodDistribution": dict(self.mood_distribution),
            "weeklyTrends": [day.to_dict() for day in self.weekly_trends],
            "averageMood": self.average_mood,
        }
