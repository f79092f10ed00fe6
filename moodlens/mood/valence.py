"""Board mood from text valence, in the history vocabulary.

Each token's lexicon valence is summed (sign flipped right after a
negation word), and the total is bucketed into happy / calm / peaceful /
reflective / sad.  This is separate from the emotion taxonomy produced
by ``MoodClassifier``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Literal

from vaderSentiment.vaderSentiment import NEGATE, SentimentIntensityAnalyzer

HistoryMood = Literal["happy", "calm", "peaceful", "reflective", "sad"]

_TOKEN_RE = re.compile(r"[a-z][a-z']*")
_NEGATIONS = frozenset(NEGATE)


def score_to_mood(score: float) -> HistoryMood:
    if score > 3:
        return "happy"
    if score > 1:
        return "calm"
    if score < -3:
        return "sad"
    if score < -1:
        return "reflective"
    return "peaceful"


class ValenceScorer:
    def __init__(self, lexicon: Mapping[str, float] | None = None) -> None:
        if lexicon is None:
            lexicon = SentimentIntensityAnalyzer().lexicon
        self.lexicon = lexicon

    def score(self, text: str) -> float:
        tokens = _TOKEN_RE.findall((text or "").lower())
        total = 0.0
        for i, token in enumerate(tokens):
            valence = self.lexicon.get(token)
            if valence is None:
                continue
            if i > 0 and tokens[i - 1] in _NEGATIONS:
                valence = -valence
            total += valence
        return round(total, 4)

    def mood(self, text: str) -> HistoryMood:
        return score_to_mood(self.score(text))
