"""
Trait simulation harness for tuning the nudge rule.

Feeds a sequence of ``{emotion?, text}`` steps through the update pipeline
and tabulates the resulting traits. Steps without an emotion are classified
from their text first.

Usage:
    companion-sim steps.yaml [--character kimi] [--provider memory]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from companion.core.bus import EventBus
from companion.core.config import load_config
from companion.emotion.classifier import EmotionClassifier
from companion.emotion.keywords import load_keyword_tables
from companion.personality.aggregator import validate_emotion
from companion.personality.pipeline import PersonalityPipeline
from companion.store.nudge import NudgeRule
from companion.store.providers import get_store_provider

log = logging.getLogger(__name__)


async def run_simulation(
    steps: list[dict[str, Any]],
    pipeline: PersonalityPipeline,
    classifier: EmotionClassifier | None = None,
    character_id: str | None = None,
) -> list[dict[str, Any]]:
    """Run *steps* in order. Returns one ``{emotion, text, traits}`` row per step."""
    if pipeline.store is None:
        log.warning("Trait store not ready — simulation skipped")
        return []

    classifier = classifier or pipeline.classifier
    results: list[dict[str, Any]] = []
    for step in steps:
        text = step.get("text") or ""
        raw = step.get("emotion")
        emotion = validate_emotion(raw) if raw else classifier.classify(text)
        traits = await pipeline.update_from_emotion(emotion, text, character_id)
        results.append({
            "emotion": str(emotion),
            "text": text,
            "traits": dict(traits or {}),
        })
    return results


def format_table(results: list[dict[str, Any]]) -> str:
    """Render simulation rows as a fixed-width text table."""
    if not results:
        return "(no results)"

    trait_names: list[str] = []
    for row in results:
        for name in row["traits"]:
            if name not in trait_names:
                trait_names.append(name)

    headers = ["#", "emotion", *trait_names]
    rows = [
        [str(i), row["emotion"], *(str(row["traits"].get(n, "")) for n in trait_names)]
        for i, row in enumerate(results)
    ]
    widths = [max(len(h), *(len(r[col]) for r in rows)) for col, h in enumerate(headers)]

    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths))]
    lines.append("  ".join("-" * w for w in widths))
    for r in rows:
        lines.append("  ".join(cell.ljust(w) for cell, w in zip(r, widths)))
    return "\n".join(lines)


def load_steps(path: Path) -> list[dict[str, Any]]:
    """Read a YAML list of steps. Bare strings become ``{"text": ...}``."""
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or []
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of steps, got {type(raw).__name__}")

    steps: list[dict[str, Any]] = []
    for item in raw:
        if isinstance(item, str):
            steps.append({"text": item})
        elif isinstance(item, dict):
            steps.append(item)
        else:
            raise ValueError(f"{path}: invalid step {item!r}")
    return steps


async def _main(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    steps = load_steps(args.steps)

    store_cls = get_store_provider(args.provider)
    tables = load_keyword_tables(config.classifier.keywords_file or None)
    store = store_cls(config.store.provider_config, NudgeRule(config.nudge, tables))
    classifier = EmotionClassifier(tables)
    pipeline = PersonalityPipeline(EventBus(), store, classifier)

    async with store:
        results = await run_simulation(steps, pipeline, classifier, args.character)

    print(format_table(results))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="companion-sim",
        description="Run a sequence of emotion steps through the trait pipeline.",
    )
    parser.add_argument("steps", type=Path, help="YAML file with a list of {emotion?, text} steps")
    parser.add_argument("--character", default=None, help="character id (default: selected character)")
    parser.add_argument(
        "--provider",
        default="memory",
        help="trait store provider; 'memory' leaves the real database untouched",
    )
    parser.add_argument("--config", type=Path, default=None, help="path to config.yaml")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return asyncio.run(_main(args))
    except (OSError, ValueError, yaml.YAMLError) as e:
        log.error("Simulation failed: %s", e)
        print(f"[SIM ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
