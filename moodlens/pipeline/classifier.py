"""Classification orchestrator: text → ClassificationResult.

Sequence per call:

1. blank text short-circuits to the neutral default;
2. the external provider is tried once;
3. on any provider failure the keyword heuristic answers instead;
4. keywords always come from the original text;
5. the result is assembled and a ``mood.classified`` event is published.

``classify`` never raises.  Provider failures show up only in
``source_counts`` and the log.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from moodlens.defaults import DEFAULT_CONFIDENCE, PROVIDER_TOP_K
from moodlens.inference_client import InferenceClient, InferenceError, UnavailableInferenceClient
from moodlens.model import ClassificationDetails, ClassificationResult
from moodlens.pipeline import extractor_text, keywords, normalizer
from moodlens.pipeline.events import MOOD_CLASSIFIED, EventBus

logger = logging.getLogger(__name__)

SOURCE_PROVIDER = "provider"
SOURCE_HEURISTIC = "heuristic"
SOURCE_DEFAULT = "default"


def neutral_result() -> ClassificationResult:
    return ClassificationResult(
        emotion="neutral",
        confidence=DEFAULT_CONFIDENCE,
        details=ClassificationDetails(
            primary="neutral",
            secondary=[],
            intensity=normalizer.intensity_for(DEFAULT_CONFIDENCE),
            keywords=[],
            raw_analysis=None,
        ),
        source=SOURCE_DEFAULT,
    )


class MoodClassifier:
    def __init__(
        self,
        inference_client: InferenceClient | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.inference_client = inference_client or UnavailableInferenceClient()
        self.event_bus = event_bus or EventBus()
        self.source_counts: Counter[str] = Counter()

    async def classify(self, text: str) -> ClassificationResult:
        text = text if isinstance(text, str) else ""
        if not text.strip():
            return self._finish(neutral_result())

        try:
            result = await self._classify_text(text)
        except Exception:
            logger.exception("Classification failed, returning neutral default")
            result = neutral_result()
        return self._finish(result)

    async def classify_record(self, record: Any) -> ClassificationResult:
        try:
            text = extractor_text.extract(record)
        except Exception:
            logger.exception("Text extraction failed, returning neutral default")
            return self._finish(neutral_result())
        return await self.classify(text)

    async def classify_batch(self, texts: Iterable[str]) -> list[ClassificationResult]:
        """Classify concurrently; results line up with the input order."""
        return list(await asyncio.gather(*(self.classify(text) for text in texts)))

    async def classify_records(self, records: Iterable[Any]) -> list[ClassificationResult]:
        return list(await asyncio.gather(*(self.classify_record(record) for record in records)))

    async def annotate_records(self, records: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        """Copy each record with ``detectedEmotion`` / ``emotionConfidence`` added."""
        records = list(records)
        results = await self.classify_records(records)
        return [
            {
                **dict(record),
                "detectedEmotion": result.emotion,
                "emotionConfidence": result.confidence,
            }
            for record, result in zip(records, results, strict=True)
        ]

    async def _classify_text(self, text: str) -> ClassificationResult:
        raw_analysis: list[dict[str, Any]] | None
        try:
            raw = await self.inference_client.classify(text)
            source = SOURCE_PROVIDER
            raw_analysis = [item.to_dict() for item in raw[:PROVIDER_TOP_K]]
        except InferenceError as exc:
            logger.warning("Provider unavailable (%s: %s), using keyword heuristic", type(exc).__name__, exc)
            raw = keywords.classify_heuristically(text)
            source = SOURCE_HEURISTIC
            raw_analysis = None

        mapped = normalizer.normalize(raw)
        return ClassificationResult(
            emotion=mapped.primary,
            confidence=mapped.confidence,
            details=ClassificationDetails(
                primary=mapped.primary,
                secondary=mapped.secondary,
                intensity=mapped.intensity,
                keywords=keywords.extract_keywords(text),
                raw_analysis=raw_analysis,
            ),
            source=source,
        )

    def _finish(self, result: ClassificationResult) -> ClassificationResult:
        self.source_counts[result.source] += 1
        logger.info(
            "Classified via %s: emotion=%s confidence=%.2f",
            result.source,
            result.emotion,
            result.confidence,
        )
        try:
            self.event_bus.publish(
                MOOD_CLASSIFIED,
                {"source": result.source, "emotion": result.emotion, "confidence": result.confidence},
            )
        except Exception:
            logger.exception("mood.classified subscriber failed")
        return result
