from __future__ import annotations

import asyncio
import json
import logging

from config import LOG_LEVEL
from interfaces.classifier_factory import build_classifier, build_journal, build_mood_scorer
from moodlens.journal.storage import MoodEventJournal
from moodlens.mood import history
from moodlens.mood.valence import ValenceScorer
from moodlens.pipeline.classifier import MoodClassifier

EXIT_COMMANDS = {"exit", "quit", "q"}


async def handle_line(
    line: str,
    classifier: MoodClassifier,
    journal: MoodEventJournal,
    scorer: ValenceScorer,
    user_id: str = "me",
) -> str | None:
    """Process one prompt line; returns the text to print or ``None`` to stop."""
    text = line.strip()
    if text.lower() in EXIT_COMMANDS:
        return None
    if not text:
        return ""
    if text.lower() == "stats":
        entries = await journal.recent(user_id)
        return json.dumps(history.summarize(entries).to_dict(), ensure_ascii=False, indent=2)

    result = await classifier.classify(text)
    mood = scorer.mood(text)
    await journal.record_result(user_id, result, mood)
    return json.dumps({**result.to_dict(), "mood": mood}, ensure_ascii=False)


async def run_cli(db_path: str | None = None) -> None:
    classifier = build_classifier()
    journal = build_journal(db_path, event_bus=classifier.event_bus)
    scorer = build_mood_scorer()
    print("moodlens CLI. Type text to classify, 'stats' for history, 'exit' to leave.")

    while True:
        output = await handle_line(input("> "), classifier, journal, scorer)
        if output is None:
            print("Bye.")
            break
        if output:
            print(output)


if __name__ == "__main__":
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
    asyncio.run(run_cli())
