"""Keyword heuristic: lexicon-based fallback classifier and keyword extraction.

Used whenever the external provider cannot answer.  Deterministic and
dependency-free; the lexicons are fixed at import time.
"""

from __future__ import annotations

from moodlens.defaults import (
    HEURISTIC_BASE_CONFIDENCE,
    HEURISTIC_MAX_CONFIDENCE,
    HEURISTIC_STEP,
    KEYWORD_LIMIT,
    KEYWORD_MIN_LENGTH,
)
from moodlens.model import RawProviderEmotion

# Declaration order is the tie-break order.  There is no disgust lexicon:
# disgust is only reachable through the provider mapping table.
LEXICONS: dict[str, frozenset[str]] = {
    "happy": frozenset({
        "happy", "joy", "excited", "great", "wonderful", "amazing",
        "love", "good", "nice", "beautiful", "fantastic", "awesome",
    }),
    "sad": frozenset({
        "sad", "depressed", "lonely", "hurt", "pain", "cry",
        "tears", "miss", "lost", "alone", "broken", "heart",
    }),
    "angry": frozenset({
        "angry", "mad", "furious", "hate", "rage", "frustrated",
        "annoyed", "irritated", "upset", "disgusted",
    }),
    "fear": frozenset({
        "afraid", "scared", "fear", "anxious", "worried", "nervous",
        "terrified", "panic", "stress", "concerned",
    }),
    "surprise": frozenset({
        "surprised", "shocked", "amazed", "wow", "incredible",
        "unbelievable", "astonished", "stunned",
    }),
}

STOP_WORDS: frozenset[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "can", "this", "that", "these",
    "those", "i", "you", "he", "she", "it", "we", "they", "me", "him",
    "her", "us", "them",
})


def _tokens(text: str) -> list[str]:
    return (text or "").lower().split()


def lexicon_scores(text: str) -> dict[str, int]:
    """Count tokens hitting each lexicon (repeated tokens count again)."""
    words = _tokens(text)
    return {
        label: sum(1 for word in words if word in lexicon)
        for label, lexicon in LEXICONS.items()
    }


def heuristic_confidence(hits: int) -> float:
    return min(HEURISTIC_MAX_CONFIDENCE, round(hits * HEURISTIC_STEP + HEURISTIC_BASE_CONFIDENCE, 4))


def classify_heuristically(text: str) -> list[RawProviderEmotion]:
    """Return a single best guess in the same shape as the provider output."""
    scores = lexicon_scores(text)
    best_label = next(iter(LEXICONS))
    for label, count in scores.items():
        if count > scores[best_label]:
            best_label = label
    return [RawProviderEmotion(label=best_label, score=heuristic_confidence(scores[best_label]))]


def extract_keywords(text: str) -> list[str]:
    """First ``KEYWORD_LIMIT`` content words, de-duplicated in order."""
    candidates = [
        word
        for word in _tokens(text)
        if len(word) >= KEYWORD_MIN_LENGTH and word not in STOP_WORDS
    ][:KEYWORD_LIMIT]
    return list(dict.fromkeys(candidates))
