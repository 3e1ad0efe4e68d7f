"""Emotion classification — labels, keyword tables and the classifier."""

from .labels import Emotion, EMOTION_CHECK_ORDER
from .keywords import KeywordTables, load_keyword_tables, default_tables
from .classifier import EmotionClassifier, classify, detect_language

__all__ = [
    "Emotion",
    "EMOTION_CHECK_ORDER",
    "KeywordTables",
    "load_keyword_tables",
    "default_tables",
    "EmotionClassifier",
    "classify",
    "detect_language",
]
