"""
Keyword tables for emotion classification.

Tables are loaded from YAML (``language → category → [keywords]``) and
validated once at construction. Lookups never fail: a missing language or
category falls back to English, then to a small built-in list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from companion.emotion.labels import EMOTION_CHECK_ORDER, SENTIMENT_CATEGORIES, Emotion

log = logging.getLogger(__name__)

DEFAULT_KEYWORDS_FILE = Path(__file__).resolve().parent / "keywords.yaml"
FALLBACK_LANGUAGE = "en"

# Last resort when neither the language nor English define a category
BUILTIN_KEYWORDS: dict[str, list[str]] = {
    "kiss": ["kiss", "embrace"],
    "dancing": ["dance", "dancing"],
    "romantic": ["love", "romantic"],
    "flirtatious": ["flirt", "tease"],
    "laughing": ["laugh", "funny"],
    "surprise": ["wow", "surprise"],
    "confident": ["confident", "strong"],
    "shy": ["shy", "embarrassed"],
    "goodbye": ["goodbye", "bye"],
    "positive": ["happy", "good", "great", "love"],
    "negative": ["sad", "bad", "angry", "hate"],
}

KNOWN_CATEGORIES = frozenset(
    [emotion.value for emotion in EMOTION_CHECK_ORDER] + list(SENTIMENT_CATEGORIES)
)


@dataclass(frozen=True)
class KeywordTables:
    """Read-only ``language → category → keywords`` lookup."""
    languages: dict[str, dict[str, tuple[str, ...]]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for lang, categories in self.languages.items():
            if not isinstance(categories, dict):
                raise ValueError(f"Keyword table for {lang!r} must be a mapping")
            unknown = set(categories) - KNOWN_CATEGORIES
            if unknown:
                raise ValueError(
                    f"Unknown keyword categories for {lang!r}: {', '.join(sorted(unknown))}"
                )

    @classmethod
    def from_mapping(cls, raw: dict[str, Any]) -> KeywordTables:
        """Build tables from a parsed YAML mapping, validating its shape."""
        if not isinstance(raw, dict):
            raise ValueError("Keyword configuration must be a mapping of languages")
        languages: dict[str, dict[str, tuple[str, ...]]] = {}
        for lang, categories in raw.items():
            if not isinstance(categories, dict):
                raise ValueError(f"Keyword table for {lang!r} must be a mapping")
            table: dict[str, tuple[str, ...]] = {}
            for category, words in categories.items():
                if not isinstance(words, list):
                    raise ValueError(
                        f"Keywords for {lang!r}/{category!r} must be a list"
                    )
                table[str(category)] = tuple(str(w) for w in words if str(w).strip())
            languages[str(lang)] = table
        return cls(languages=languages)

    def words(self, language: str, category: str) -> tuple[str, ...]:
        """Keywords for one category, following the fallback chain."""
        for lang in (language, FALLBACK_LANGUAGE):
            words = self.languages.get(lang, {}).get(category)
            if words:
                return words
        return tuple(BUILTIN_KEYWORDS.get(category, ()))

    def emotion_checks(self, language: str) -> list[tuple[Emotion, tuple[str, ...]]]:
        """Ordered ``(emotion, keywords)`` pairs in precedence order."""
        return [
            (emotion, self.words(language, emotion.value))
            for emotion in EMOTION_CHECK_ORDER
        ]


def load_keyword_tables(path: Path | str | None = None) -> KeywordTables:
    """Load keyword tables from YAML. ``None`` selects the packaged file."""
    keywords_path = Path(path) if path else DEFAULT_KEYWORDS_FILE
    with open(keywords_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    tables = KeywordTables.from_mapping(raw)
    log.info(
        "Keyword tables loaded from %s (%s)",
        keywords_path,
        ", ".join(sorted(tables.languages)),
    )
    return tables


@lru_cache(maxsize=1)
def default_tables() -> KeywordTables:
    """The packaged tables, loaded once."""
    return load_keyword_tables()
