"""
Personality aggregation — the single place a trait summary is computed.

All helpers are total: malformed input degrades to neutral defaults
instead of raising.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from companion.emotion.labels import Emotion

log = logging.getLogger(__name__)

NEUTRAL_AVERAGE = 50

TRAIT_DEFAULTS: dict[str, float] = {
    "affection": 55,
    "playfulness": 55,
    "intelligence": 70,
    "empathy": 75,
    "humor": 60,
    "romance": 50,
    "trust": 50,
    "intimacy": 45,
}

# Highest stage first: (name, min affection, min romance)
RELATIONSHIP_STAGES: tuple[tuple[str, float, float], ...] = (
    ("deep_bond", 92, 75),
    ("intimate", 82, 55),
    ("romantic", 70, 35),
    ("close_friend", 60, 10),
    ("friend", 40, 0),
    ("acquaintance", 0, 0),
)

MOOD_POSITIVE_THRESHOLD = 80
MOOD_NEUTRAL_THRESHOLD = 35


def is_score(value: Any) -> bool:
    """True for finite int/float values (bools excluded)."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def average(traits: Any) -> int:
    """Mean of the numeric traits rounded half up, or 50 when there are none."""
    if not isinstance(traits, dict):
        return NEUTRAL_AVERAGE
    scores = [v for v in traits.values() if is_score(v)]
    if not scores:
        return NEUTRAL_AVERAGE
    return math.floor(sum(scores) / len(scores) + 0.5)


def mood_category(traits: Any) -> str:
    """Coarse mood bucket derived from the trait average."""
    avg = average(traits)
    if avg >= MOOD_POSITIVE_THRESHOLD:
        return "speakingPositive"
    if avg >= MOOD_NEUTRAL_THRESHOLD:
        return "neutral"
    return "speakingNegative"


def relationship_stage(traits: Any) -> str:
    """Relationship stage reached by the affection and romance scores."""
    traits = traits if isinstance(traits, dict) else {}
    affection = traits.get("affection")
    romance = traits.get("romance")
    affection = affection if is_score(affection) else TRAIT_DEFAULTS["affection"]
    romance = romance if is_score(romance) else TRAIT_DEFAULTS["romance"]

    for stage, min_affection, min_romance in RELATIONSHIP_STAGES:
        if affection >= min_affection and romance >= min_romance:
            return stage
    return "acquaintance"


def validate_emotion(value: Any) -> Emotion:
    """Coerce *value* to an :class:`Emotion`, falling back to neutral."""
    try:
        return Emotion(value)
    except ValueError:
        log.warning("Invalid emotion %r, falling back to neutral", value)
        return Emotion.NEUTRAL
