import asyncio
import os
from unittest.mock import patch

from interfaces.classifier_factory import (
    build_classifier,
    build_inference_client,
    build_journal,
    build_mood_scorer,
)
from moodlens.inference_client import HuggingFaceEmotionClient, UnavailableInferenceClient
from moodlens.journal.storage import MoodEventJournal
from moodlens.mood.valence import ValenceScorer


def test_factory_passes_explicit_key_to_client():
    client = build_inference_client("hf_secret", use_provider=True)
    assert isinstance(client, HuggingFaceEmotionClient)
    assert client.available is True
    assert client.api_key == "hf_secret"


def test_factory_reads_key_from_environment():
    with patch("interfaces.classifier_factory.load_dotenv"), patch.dict(
        "os.environ", {"HUGGING_FACE_API_KEY": "", "HUGGINGFACE_API_KEY": "hf_env"}
    ):
        client = build_inference_client(use_provider=True)
    assert client.api_key == "hf_env"


def test_factory_without_key_builds_unavailable_provider():
    with patch("interfaces.classifier_factory.load_dotenv"), patch.dict(
        "os.environ", {"HUGGING_FACE_API_KEY": "", "HUGGINGFACE_API_KEY": ""}
    ):
        classifier = build_classifier(use_provider=True)

    assert classifier.inference_client.available is False
    result = asyncio.run(classifier.classify("so angry and furious"))
    assert result.emotion == "angry"
    assert result.source == "heuristic"


def test_factory_can_disable_provider():
    classifier = build_classifier("hf_secret", use_provider=False)
    assert isinstance(classifier.inference_client, UnavailableInferenceClient)


def test_factory_builds_journal(tmp_path):
    journal = build_journal(str(tmp_path / "j.db"))
    assert isinstance(journal, MoodEventJournal)
    assert journal.db_path == tmp_path / "j.db"


def test_factory_reads_key_after_loading_dotenv():
    def fake_load_dotenv():
        os.environ["HUGGING_FACE_API_KEY"] = "hf_from_dotenv"

    with patch("interfaces.classifier_factory.load_dotenv", side_effect=fake_load_dotenv), patch.dict(
        "os.environ", {"HUGGING_FACE_API_KEY": "", "HUGGINGFACE_API_KEY": ""}
    ):
        client = build_inference_client(use_provider=True)
    assert client.api_key == "hf_from_dotenv"


def test_factory_builds_mood_scorer():
    scorer = build_mood_scorer()
    assert isinstance(scorer, ValenceScorer)
    assert scorer.mood("") == "peaceful"
