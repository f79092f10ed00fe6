from __future__ import annotations

from collections.abc import Sequence

from moodlens.defaults import (
    DEFAULT_CONFIDENCE,
    INTENSITY_HIGH_ABOVE,
    INTENSITY_LOW_BELOW,
    MAX_SECONDARY,
)
from moodlens.model import EmotionLabel, Intensity, NormalizedEmotion, RawProviderEmotion

# Provider (GoEmotions) and heuristic vocabulary → closed taxonomy.
# Anything not listed here is treated as neutral.
EMOTION_MAPPING: dict[str, EmotionLabel] = {
    # happy
    "joy": "happy",
    "excitement": "happy",
    "amusement": "happy",
    "pride": "happy",
    "relief": "happy",
    "optimism": "happy",
    # sad
    "sadness": "sad",
    "grief": "sad",
    "disappointment": "sad",
    "embarrassment": "sad",
    "remorse": "sad",
    # angry
    "anger": "angry",
    "annoyance": "angry",
    "contempt": "angry",
    # disgust
    "disgust": "disgust",
    # fear
    "fear": "fear",
    "nervousness": "fear",
    "confusion": "fear",
    # surprise
    "surprise": "surprise",
    "realization": "surprise",
    "curiosity": "surprise",
    # neutral
    "neutral": "neutral",
    "approval": "neutral",
    "caring": "neutral",
    "desire": "neutral",
    # taxonomy labels emitted by the keyword heuristic
    "happy": "happy",
    "sad": "sad",
    "angry": "angry",
}


def map_label(label: str) -> EmotionLabel:
    return EMOTION_MAPPING.get(str(label).strip().lower(), "neutral")


def intensity_for(confidence: float) -> Intensity:
    if confidence > INTENSITY_HIGH_ABOVE:
        return "high"
    if confidence < INTENSITY_LOW_BELOW:
        return "low"
    return "medium"


def normalize(raw_results: Sequence[RawProviderEmotion]) -> NormalizedEmotion:
    """Collapse a ranked raw result list onto the taxonomy.

    Primary comes from the top-scored entry, its score is the confidence
    as-is.  Secondary holds the mapped labels of ranks 2 and 3, minus the
    primary and minus repeats.
    """
    if not raw_results:
        return NormalizedEmotion(
            primary="neutral",
            secondary=[],
            confidence=DEFAULT_CONFIDENCE,
            intensity=intensity_for(DEFAULT_CONFIDENCE),
        )

    ranked = sorted(raw_results, key=lambda r: r.score, reverse=True)
    top = ranked[0]
    primary = map_label(top.label)

    secondary: list[EmotionLabel] = []
    for raw in ranked[1:1 + MAX_SECONDARY]:
        mapped = map_label(raw.label)
        if mapped != primary and mapped not in secondary:
            secondary.append(mapped)

    confidence = float(top.score)
    return NormalizedEmotion(
        primary=primary,
        secondary=secondary,
        confidence=confidence,
        intensity=intensity_for(confidence),
    )
