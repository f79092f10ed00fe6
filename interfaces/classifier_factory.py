from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from config import (
    DB_PATH as _DEFAULT_DB_PATH,
    HF_BASE_URL,
    HF_MODEL_ID,
    MAX_TEXT_LENGTH,
    PROVIDER_TIMEOUT,
    USE_PROVIDER,
)
from moodlens.inference_client import (
    HuggingFaceEmotionClient,
    InferenceClient,
    UnavailableInferenceClient,
)
from moodlens.journal.storage import MoodEventJournal
from moodlens.mood.valence import ValenceScorer
from moodlens.pipeline.classifier import MoodClassifier
from moodlens.pipeline.events import EventBus

logger = logging.getLogger(__name__)


def _read_api_key() -> str:
    load_dotenv()
    return os.getenv("HUGGING_FACE_API_KEY") or os.getenv("HUGGINGFACE_API_KEY") or ""


def build_inference_client(api_key: str | None = None, *, use_provider: bool | None = None) -> InferenceClient:
    enabled = USE_PROVIDER if use_provider is None else use_provider
    if not enabled:
        logger.info("External provider disabled by configuration, heuristic only")
        return UnavailableInferenceClient()
    return HuggingFaceEmotionClient(
        api_key=_read_api_key() if api_key is None else api_key,
        model_id=HF_MODEL_ID,
        base_url=HF_BASE_URL,
        timeout=PROVIDER_TIMEOUT,
        max_text_length=MAX_TEXT_LENGTH,
    )


def build_classifier(
    api_key: str | None = None,
    *,
    use_provider: bool | None = None,
    event_bus: EventBus | None = None,
) -> MoodClassifier:
    client = build_inference_client(api_key, use_provider=use_provider)
    return MoodClassifier(inference_client=client, event_bus=event_bus or EventBus())


def build_journal(db_path: str | None = None, *, event_bus: EventBus | None = None) -> MoodEventJournal:
    return MoodEventJournal(db_path=db_path or _DEFAULT_DB_PATH, event_bus=event_bus)


def build_mood_scorer() -> ValenceScorer:
    return ValenceScorer()
