"""
Main async loop — ties the classifier, trait store and event bus together.

Architecture:
  0. Config loads, trait store starts (opens its database)
  1. Terminal UI subscribes to personality events on the bus
  2. User types a line
  3. Classifier labels it, the pipeline nudges and saves the traits
  4. The pipeline publishes the new snapshot → UI renders it
  5. Loop until "quit" or Ctrl+C
  6. Store shuts down gracefully
"""

from __future__ import annotations

import asyncio
import logging
import sys

from companion.core.bus import EventBus
from companion.core.config import AppConfig, load_config
from companion.core.terminal_ui import TerminalUI
from companion.emotion.classifier import EmotionClassifier
from companion.emotion.keywords import KeywordTables, default_tables, load_keyword_tables
from companion.personality.pipeline import PersonalityPipeline
from companion.store.base import TraitStore
from companion.store.nudge import NudgeRule
from companion.store.providers import get_store_provider

log = logging.getLogger(__name__)


# ── Wiring ───────────────────────────────────────────────────────────────

def build_store(config: AppConfig, tables: KeywordTables | None = None) -> TraitStore:
    """Instantiate the configured trait store provider."""
    store_cls = get_store_provider(config.store.provider)
    return store_cls(config.store.provider_config, NudgeRule(config.nudge, tables))


def build_classifier(config: AppConfig) -> EmotionClassifier:
    if config.classifier.keywords_file:
        return EmotionClassifier(load_keyword_tables(config.classifier.keywords_file))
    return EmotionClassifier(default_tables())


# ── Input handling ───────────────────────────────────────────────────────

async def _get_user_input(user_name: str) -> str:
    """Read one line from the keyboard without blocking the loop."""
    loop = asyncio.get_running_loop()
    line = await loop.run_in_executor(None, lambda: input(f"{user_name}: "))
    return line.strip()


# ── Chat loop ────────────────────────────────────────────────────────────

async def _chat_loop(config: AppConfig, bus: EventBus, pipeline: PersonalityPipeline) -> None:
    """Inner chat loop — store already running at this point."""
    store = pipeline.store
    character = await store.get_selected_character() if store else config.persona.default_character

    ui = TerminalUI(character=character)
    ui.attach(bus)
    ui.print_header()

    try:
        while True:
            try:
                user_input = await _get_user_input(ui.user_name)
            except EOFError:
                break

            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit"):
                ui.print_goodbye()
                break
            if user_input == "/diag":
                records = bus.get_diagnostics()
                state = "on" if bus.diagnostics_enabled else "off"
                ui.print_info(f"diagnostics {state}: {len(records)} recorded events")
                continue

            emotion, traits = await pipeline.process_text(
                user_input, config.classifier.language, character
            )
            ui.print_emotion(emotion)
            if traits is None:
                ui.print_error("Traits were not updated (see companion_debug.log)")

    except KeyboardInterrupt:
        ui.print_interrupted()
    finally:
        ui.detach()


# ── Entry points ─────────────────────────────────────────────────────────

async def main_loop() -> None:
    """Top-level entry: start the store, then run the chat loop."""
    config = load_config()
    bus = EventBus(
        diagnostics=config.bus.diagnostics,
        capacity=config.bus.diagnostics_capacity,
    )

    try:
        classifier = build_classifier(config)
        store = build_store(config, classifier.tables)
    except (OSError, ValueError) as e:
        log.error("Startup failed: %s", e)
        print(f"\n[STARTUP ERROR] {e}")
        return

    pipeline = PersonalityPipeline(bus, store, classifier)
    async with store:
        await _chat_loop(config, bus, pipeline)
    log.info("Trait store shut down.")


def run() -> None:
    """Configure logging and start the async loop."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler("companion_debug.log", encoding="utf-8"),
            logging.StreamHandler(sys.stderr),
        ],
    )
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    asyncio.run(main_loop())
