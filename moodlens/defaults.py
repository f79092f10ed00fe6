"""Centralised algorithm constants for moodlens.

Thresholds and weights that downstream consumers rely on live here so
that every module reads the same values.  None of them is tunable at
runtime.
"""

from __future__ import annotations

# ── Neutral default (empty text / internal failure) ──────────────
DEFAULT_CONFIDENCE: float = 0.5

# ── Intensity tiers (moodlens/pipeline/normalizer.py) ────────────
INTENSITY_HIGH_ABOVE: float = 0.8
INTENSITY_LOW_BELOW: float = 0.4
MAX_SECONDARY: int = 2

# ── Keyword heuristic (moodlens/pipeline/keywords.py) ────────────
HEURISTIC_BASE_CONFIDENCE: float = 0.3
HEURISTIC_STEP: float = 0.3
HEURISTIC_MAX_CONFIDENCE: float = 0.9
KEYWORD_MIN_LENGTH: int = 4
KEYWORD_LIMIT: int = 10

# ── External provider (moodlens/inference_client.py) ────────────
PROVIDER_TOP_K: int = 5

# ── History aggregation (moodlens/mood/history.py) ───────────────
HISTORY_WINDOW: int = 100
TREND_DAYS: int = 7
