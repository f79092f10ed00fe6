from __future__ import annotations

import os


DB_PATH = os.getenv("DB_PATH", "data/moodlens.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", os.getenv("MOODLENS_LOG_LEVEL", "INFO")).upper()
MAX_TEXT_LENGTH = int(os.getenv("MAX_TEXT_LENGTH", "10000"))

# ── External inference provider (Hugging Face text classification) ──
HF_MODEL_ID = os.getenv("HF_EMOTION_MODEL", "SamLowe/roberta-base-go_emotions")
HF_BASE_URL = os.getenv("HF_INFERENCE_URL", "https://api-inference.huggingface.co/models")
PROVIDER_TIMEOUT = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "10"))
USE_PROVIDER = bool(int(os.getenv("MOODLENS_USE_PROVIDER", "1")))
