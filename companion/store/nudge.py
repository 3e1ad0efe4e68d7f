"""
Default nudge rule — moves stored traits in the direction an emotion implies.

The rule belongs to the trait store: the update pipeline only calls
``TraitStore.nudge`` and never inspects magnitudes itself.

Pipeline per call:
  1. Base deltas for the emotion, scaled by message intensity
  2. Gains through ``adjust_up`` (slower near 100), losses through
     ``adjust_down`` (faster when high, protected near 0)
  3. Content boosts for romantic or humorous wording in the message
  4. Cross-trait synergy rules
  5. Clamp to [0, 100], round to 2 decimals
  6. Damp the total movement of the relational traits
"""

from __future__ import annotations

import logging
import re
from typing import Any

from companion.core.config import NudgeConfig
from companion.emotion.classifier import detect_language, keyword_hit
from companion.emotion.keywords import KeywordTables, default_tables
from companion.emotion.labels import Emotion
from companion.personality.aggregator import TRAIT_DEFAULTS, is_score

log = logging.getLogger(__name__)

# Base per-event deltas (before intensity and gain scaling)
EMOTION_TRAIT_EFFECTS: dict[str, dict[str, float]] = {
    "positive": {"affection": 0.35, "empathy": 0.18, "playfulness": 0.2, "humor": 0.22},
    "negative": {"affection": -0.55, "empathy": 0.22},
    "romantic": {"romance": 0.55, "affection": 0.45, "empathy": 0.14},
    "flirtatious": {"romance": 0.45, "playfulness": 0.38, "affection": 0.2},
    "laughing": {"humor": 0.6, "playfulness": 0.4, "affection": 0.2},
    "dancing": {"playfulness": 0.55, "affection": 0.35},
    "surprise": {"intelligence": 0.1, "empathy": 0.1},
    "shy": {"romance": -0.25, "affection": -0.1},
    "confident": {"intelligence": 0.13, "affection": 0.45},
    "kiss": {"romance": 0.65, "affection": 0.55},
    "goodbye": {"affection": -0.12, "empathy": 0.08},
}

UP_EXPONENT = 1.2
DOWN_EXPONENT = 1.1
MIN_GAIN_FACTOR = 0.25
MIN_LOSS_FACTOR = 0.35
MAX_LOSS_FACTOR = 1.15

DAMP_FOCUS = ("affection", "romance", "trust", "intimacy")
DAMP_SOFT_THRESHOLD = 3.5
DAMP_MAX_TOTAL = 6.0

# Message words that add gains on top of the emotion (unscaled by config)
CONTENT_BOOSTS: tuple[tuple[str, dict[str, float]], ...] = (
    ("romantic", {"romance": 0.5, "affection": 0.5}),
    ("laughing", {"humor": 2.0, "playfulness": 1.0}),
)

_EMPHASIS = re.compile(r"[!?]{2,}|❤️|💖|😍")


def adjust_up(value: float, amount: float) -> float:
    """Gain scaled by headroom: full speed at 0, floor factor near 100."""
    headroom = max(0.0, 100 - value) / 100
    factor = max(MIN_GAIN_FACTOR, headroom ** UP_EXPONENT)
    return value + amount * factor


def adjust_down(value: float, amount: float) -> float:
    """Loss scaled by level: larger when high, capped near 0."""
    level = max(0.0, min(100.0, value)) / 100
    factor = (level ** DOWN_EXPONENT) * MAX_LOSS_FACTOR
    if level < 0.2:
        factor = min(factor, MIN_LOSS_FACTOR)
    return value - amount * factor


def message_intensity(text: Any) -> float:
    """Intensity multiplier from message length and emphasis markers."""
    if not isinstance(text, str) or not text:
        return 1.0
    word_count = len(text.split())
    intensity = 1.0
    if word_count >= 60:
        intensity = 1.18
    elif word_count >= 25:
        intensity = 1.12
    elif word_count >= 8:
        intensity = 1.05
    emphasis = len(_EMPHASIS.findall(text))
    if emphasis:
        intensity += min(0.12, 0.04 * emphasis)
    return intensity


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


class NudgeRule:
    """Emotion → trait update rule with configurable gains."""

    def __init__(
        self,
        config: NudgeConfig | None = None,
        tables: KeywordTables | None = None,
    ) -> None:
        self._cfg = config or NudgeConfig()
        self._tables = tables

    @property
    def tables(self) -> KeywordTables:
        if self._tables is None:
            self._tables = default_tables()
        return self._tables

    def _scale(self, trait: str, delta: float) -> float:
        return delta * self._cfg.global_gain * self._cfg.trait_gain.get(trait, 1.0)

    def _gain(self, trait: str, delta: float, emotion: str) -> float:
        return self._scale(trait, delta) * self._cfg.emotion_gain.get(emotion, 1.0)

    def _loss(self, trait: str, delta: float) -> float:
        return delta * self._cfg.global_loss * self._cfg.trait_loss.get(trait, 1.0)

    def apply(self, traits: dict[str, Any], emotion: Emotion | str, text: str = "") -> dict[str, Any]:
        """Return a new trait set nudged by *emotion*. Keys never change."""
        emotion = str(emotion)
        effects = EMOTION_TRAIT_EFFECTS.get(emotion)
        updated = dict(traits)
        if not effects:
            return updated

        before: dict[str, float] = {}
        values: dict[str, float] = {}

        def get(trait: str) -> float | None:
            if trait not in updated:
                return None
            if trait in values:
                return values[trait]
            current = updated[trait]
            return current if is_score(current) else TRAIT_DEFAULTS.get(trait, 50)

        def move(trait: str, value: float) -> float:
            before.setdefault(trait, get(trait))
            values[trait] = min(100.0, value)
            return values[trait]

        intensity = message_intensity(text)
        for trait, base_delta in effects.items():
            current = get(trait)
            if current is None:
                continue
            delta = base_delta * intensity
            if delta > 0:
                move(trait, adjust_up(current, self._gain(trait, delta, emotion)))
            else:
                move(trait, adjust_down(current, self._loss(trait, abs(delta))))

        self._content_boosts(text, get, move)
        self._cross_trait(get, move)

        for trait, value in values.items():
            updated[trait] = round(_clamp(value), 2)
        self._damp(updated, before)

        changed = {k: (before[k], updated[k]) for k in before if before[k] != updated[k]}
        if changed:
            log.debug("Nudge %s: %s", emotion, changed)
        return updated

    def _content_boosts(self, text: Any, get, move) -> None:
        """Extra gains when the message itself uses romantic or humorous words."""
        if not isinstance(text, str) or not text:
            return
        language = detect_language(text)
        for category, boosts in CONTENT_BOOSTS:
            if not keyword_hit(text, self.tables.words(language, category)):
                continue
            for trait, amount in boosts.items():
                current = get(trait)
                if current is not None:
                    move(trait, adjust_up(current, amount))

    def _cross_trait(self, get, move) -> None:
        """Synergy rules between traits, applied after the direct changes."""

        def boost(trait: str, amount: float) -> float:
            return move(trait, adjust_up(get(trait), self._scale(trait, amount)))

        affection = get("affection")
        romance = get("romance")
        empathy = get("empathy")
        playfulness = get("playfulness")
        humor = get("humor")
        intelligence = get("intelligence")

        if affection is not None:
            # Strong empathy or romance pulls a lagging affection up
            if empathy is not None and empathy >= 80 and affection < empathy - 8:
                affection = boost("affection", 0.08)
            if romance is not None and romance >= 80 and affection < romance - 5:
                affection = boost("affection", 0.06)
            if romance is not None and affection >= 90 and romance < 70:
                romance = boost("romance", 0.05)

        if intelligence is not None and intelligence >= 85:
            if empathy is not None and empathy < intelligence - 12:
                empathy = boost("empathy", 0.04)
            if humor is not None and humor < 75:
                humor = boost("humor", 0.04)

        if humor is not None and playfulness is not None:
            if humor >= 70 and playfulness < humor - 10:
                playfulness = boost("playfulness", 0.05)
            if playfulness >= 70 and humor < playfulness - 10:
                humor = boost("humor", 0.05)

    def _damp(self, updated: dict[str, Any], before: dict[str, float]) -> None:
        """Scale back relational movement beyond the soft threshold."""
        deltas = {k: updated[k] - before[k] for k in DAMP_FOCUS if k in before}
        total = sum(abs(d) for d in deltas.values())
        if total <= DAMP_SOFT_THRESHOLD:
            return
        limit = DAMP_MAX_TOTAL if total > DAMP_MAX_TOTAL else DAMP_SOFT_THRESHOLD
        scale = limit / total
        for trait, delta in deltas.items():
            updated[trait] = round(_clamp(before[trait] + delta * scale), 2)
