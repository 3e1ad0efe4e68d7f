"""
Emotion classifier — maps chat text to one emotion label.

Classification is a total, side-effect free function:
  1. Empty or non-string text → neutral
  2. Resolve the language (``"auto"`` guesses from the character set)
  3. First emotion in precedence order with a keyword hit wins
  4. Otherwise sentiment: only positive words → positive,
     only negative words → negative, anything else → neutral
"""

from __future__ import annotations

import logging
import re
from typing import Any

from companion.emotion.keywords import KeywordTables, default_tables
from companion.emotion.labels import Emotion

log = logging.getLogger(__name__)

AUTO_LANGUAGE = "auto"

# Checked in order, first match wins. The French class also covers German
# umlauts and the Japanese class covers most CJK ideographs.
_LANGUAGE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("fr", re.compile(r"[àâäéèêëîïôöùûüÿç]", re.IGNORECASE)),
    ("de", re.compile(r"[äöüß]", re.IGNORECASE)),
    ("es", re.compile(r"[ñáéíóúü]", re.IGNORECASE)),
    ("it", re.compile(r"[àèìòù]", re.IGNORECASE)),
    ("ja", re.compile(r"[\u3040-\u309f\u30a0-\u30ff\u4e00-\u9faf]")),
    ("zh", re.compile(r"[\u4e00-\u9fff]")),
)

_APOSTROPHES = re.compile(r"[\u2018\u2019\u201a\u201b\u2032\u2035]")


def _fold(text: str) -> str:
    """Lowercase and unify apostrophes for substring matching."""
    return _APOSTROPHES.sub("'", text).casefold()


def detect_language(text: str, hint: str = AUTO_LANGUAGE) -> str:
    """Return *hint* unless it is ``"auto"``, else guess from *text*."""
    if hint != AUTO_LANGUAGE:
        return hint
    for lang, pattern in _LANGUAGE_PATTERNS:
        if pattern.search(text):
            return lang
    return "en"


def _contains_any(folded_text: str, words: tuple[str, ...]) -> bool:
    return any(_fold(word) in folded_text for word in words)


def keyword_hit(text: str, words: tuple[str, ...]) -> bool:
    """Case-insensitive substring test of *words* against *text*."""
    return _contains_any(_fold(text), words)


class EmotionClassifier:
    """Keyword + sentiment classifier bound to one set of keyword tables."""

    def __init__(self, tables: KeywordTables | None = None) -> None:
        self._tables = tables if tables is not None else default_tables()

    @property
    def tables(self) -> KeywordTables:
        return self._tables

    def classify(self, text: Any, language: str = AUTO_LANGUAGE) -> Emotion:
        """Classify *text* into an :class:`Emotion`."""
        if not isinstance(text, str) or not text:
            return Emotion.NEUTRAL

        lang = detect_language(text, language if isinstance(language, str) else AUTO_LANGUAGE)
        folded = _fold(text)

        for emotion, words in self._tables.emotion_checks(lang):
            if _contains_any(folded, words):
                log.debug("Classified %r as %s (lang=%s)", text[:40], emotion, lang)
                return emotion

        has_positive = _contains_any(folded, self._tables.words(lang, "positive"))
        has_negative = _contains_any(folded, self._tables.words(lang, "negative"))

        if has_positive and not has_negative:
            return Emotion.POSITIVE
        if has_negative and not has_positive:
            return Emotion.NEGATIVE
        return Emotion.NEUTRAL


def classify(
    text: Any,
    language: str = AUTO_LANGUAGE,
    tables: KeywordTables | None = None,
) -> Emotion:
    """Classify with the given tables (packaged tables by default)."""
    return EmotionClassifier(tables).classify(text, language)
