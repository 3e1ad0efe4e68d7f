"""Closed set of emotion labels produced by the classifier."""

from __future__ import annotations

from enum import Enum


class Emotion(str, Enum):
    """Emotion label. Compares equal to its plain string value."""

    DANCING = "dancing"
    ROMANTIC = "romantic"
    LAUGHING = "laughing"
    SURPRISE = "surprise"
    CONFIDENT = "confident"
    SHY = "shy"
    FLIRTATIOUS = "flirtatious"
    KISS = "kiss"
    GOODBYE = "goodbye"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    def __str__(self) -> str:
        return self.value


# Keyword precedence: the first emotion with a matching keyword wins.
# Never iterate a mapping in place of this list.
EMOTION_CHECK_ORDER: tuple[Emotion, ...] = (
    Emotion.KISS,
    Emotion.DANCING,
    Emotion.ROMANTIC,
    Emotion.FLIRTATIOUS,
    Emotion.LAUGHING,
    Emotion.SURPRISE,
    Emotion.CONFIDENT,
    Emotion.SHY,
    Emotion.GOODBYE,
)

# Polarity buckets used by the sentiment fallback
SENTIMENT_CATEGORIES = ("positive", "negative")
