import logging
import math

import pytest

from companion.emotion.labels import Emotion
from companion.personality.aggregator import (
    TRAIT_DEFAULTS,
    average,
    mood_category,
    relationship_stage,
    validate_emotion,
)


def test_average_of_empty_is_neutral():
    assert average({}) == 50


def test_average_ignores_non_numeric():
    assert average({"a": 10, "b": "x", "c": 30}) == 20


def test_average_ignores_nan_inf_and_bools():
    assert average({"a": 40, "b": math.nan, "c": math.inf, "d": True}) == 40


def test_average_all_invalid_is_neutral():
    assert average({"a": None, "b": math.nan}) == 50


@pytest.mark.parametrize("value", [None, [10, 20], "traits", 7])
def test_average_of_non_mapping_is_neutral(value):
    assert average(value) == 50


def test_average_rounds():
    assert average({"a": 10, "b": 11, "c": 11}) == 11


@pytest.mark.parametrize(
    "traits, expected",
    [
        ({"a": 10, "b": 11}, 11),
        ({"a": 11, "b": 12}, 12),
        ({"a": 0, "b": 1}, 1),
        ({"a": 34, "b": 35}, 35),
    ],
)
def test_average_rounds_halves_up(traits, expected):
    assert average(traits) == expected


def test_mood_category_uses_half_up_average():
    # mean 34.5 rounds to 35
    assert mood_category({"a": 34, "b": 35}) == "neutral"


def test_average_of_defaults():
    assert average(TRAIT_DEFAULTS) == 58


@pytest.mark.parametrize(
    "traits, expected",
    [
        ({"a": 90}, "speakingPositive"),
        ({"a": 80}, "speakingPositive"),
        ({"a": 50}, "neutral"),
        ({"a": 10}, "speakingNegative"),
        ({}, "neutral"),
    ],
)
def test_mood_category(traits, expected):
    assert mood_category(traits) == expected


@pytest.mark.parametrize(
    "traits, expected",
    [
        ({"affection": 95, "romance": 80}, "deep_bond"),
        ({"affection": 85, "romance": 60}, "intimate"),
        ({"affection": 72, "romance": 40}, "romantic"),
        ({"affection": 65, "romance": 20}, "close_friend"),
        ({"affection": 95, "romance": 5}, "friend"),
        ({"affection": 20, "romance": 90}, "acquaintance"),
        ({}, "friend"),
        ({"affection": "high", "romance": None}, "friend"),
        (None, "friend"),
    ],
)
def test_relationship_stage(traits, expected):
    assert relationship_stage(traits) == expected


def test_validate_emotion_accepts_labels():
    assert validate_emotion("kiss") is Emotion.KISS
    assert validate_emotion(Emotion.SHY) is Emotion.SHY


def test_validate_emotion_degrades_to_neutral(caplog):
    with caplog.at_level(logging.WARNING):
        assert validate_emotion("grumpy") is Emotion.NEUTRAL
    assert "Invalid emotion" in caplog.text
