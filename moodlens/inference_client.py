from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Protocol

import httpx

from config import HF_BASE_URL, HF_MODEL_ID, MAX_TEXT_LENGTH, PROVIDER_TIMEOUT
from moodlens.model import RawProviderEmotion

logger = logging.getLogger(__name__)


class InferenceError(Exception):
    """Base class for every external-provider failure."""


class ProviderUnavailable(InferenceError):
    """No credential configured; no request was attempted."""


class ProviderError(InferenceError):
    """Transport, HTTP status or payload failure."""


class ProviderTimeout(ProviderError):
    """The request exceeded its time bound."""


class InferenceClient(Protocol):
    async def classify(self, text: str) -> list[RawProviderEmotion]: ...


class UnavailableInferenceClient:
    """Stand-in used when the provider is switched off by configuration."""

    async def classify(self, text: str) -> list[RawProviderEmotion]:
        raise ProviderUnavailable("external provider disabled")


def parse_provider_payload(data: Any) -> list[RawProviderEmotion]:
    """Turn a text-classification response into a ranked list.

    Accepts both ``[[{label, score}, ...]]`` (one list per input) and a
    flat ``[{label, score}, ...]``.  Raises ``ProviderError`` for anything
    else, including scores outside [0, 1].
    """
    if isinstance(data, list) and data and isinstance(data[0], list):
        data = data[0]
    if not isinstance(data, list) or not data:
        raise ProviderError(f"unexpected payload shape: {type(data).__name__}")

    results: list[RawProviderEmotion] = []
    for item in data:
        if not isinstance(item, dict) or "label" not in item or "score" not in item:
            raise ProviderError(f"malformed entry in payload: {item!r}")
        try:
            score = float(item["score"])
        except (TypeError, ValueError) as exc:
            raise ProviderError(f"non-numeric score: {item['score']!r}") from exc
        if not math.isfinite(score) or not 0.0 <= score <= 1.0:
            raise ProviderError(f"score out of range: {score!r}")
        results.append(RawProviderEmotion(label=str(item["label"]), score=score))

    results.sort(key=lambda r: r.score, reverse=True)
    return results


class HuggingFaceEmotionClient:
    """Remote emotion classifier on the Hugging Face inference API.

    ``api_key`` is the only credential; leaving it empty is a valid state
    in which every call raises ``ProviderUnavailable`` without touching
    the network.  A single request is made per call, bounded by
    ``timeout`` seconds; there are no retries.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model_id: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_text_length: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or ""
        self.model_id = model_id or HF_MODEL_ID
        self.base_url = (base_url or HF_BASE_URL).rstrip("/")
        self.timeout = PROVIDER_TIMEOUT if timeout is None else timeout
        self.max_text_length = max_text_length or MAX_TEXT_LENGTH
        self._transport = transport
        self._warned_unavailable = False

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model_id}"

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def _post(self, payload: dict[str, Any], headers: dict[str, str]) -> Any:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.endpoint, json=payload, headers=headers)
            response.raise_for_status()
            return response.json()

    async def classify(self, text: str) -> list[RawProviderEmotion]:
        if not self.available:
            if not self._warned_unavailable:
                logger.warning("HuggingFaceEmotionClient: API key is not set, provider disabled")
                self._warned_unavailable = True
            raise ProviderUnavailable("Hugging Face API key is not set")

        payload = {"inputs": text[: self.max_text_length]}
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        # httpx bounds each connect/read/write step; wait_for bounds the whole call.
        try:
            data = await asyncio.wait_for(self._post(payload, headers), timeout=self.timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            logger.info("Provider request timed out after %.1fs: %s", self.timeout, self.endpoint)
            raise ProviderTimeout(f"request exceeded {self.timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Provider returned HTTP %s for %s: %s",
                exc.response.status_code,
                self.model_id,
                exc.response.text[:200],
            )
            raise ProviderError(f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.error("Provider transport error for %s: %s", self.model_id, exc)
            raise ProviderError(str(exc)) from exc
        except ValueError as exc:
            logger.error("Provider returned non-JSON body for %s: %s", self.model_id, exc)
            raise ProviderError("response is not JSON") from exc

        try:
            return parse_provider_payload(data)
        except ProviderError as exc:
            logger.error("Provider payload rejected for %s: %s", self.model_id, exc)
            raise
