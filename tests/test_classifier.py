import pytest

from companion.emotion.classifier import EmotionClassifier, classify, detect_language
from companion.emotion.keywords import KeywordTables
from companion.emotion.labels import Emotion


def test_keyword_beats_sentiment():
    assert classify("I love dancing tonight", "en") == "dancing"


def test_result_is_emotion_enum():
    assert classify("I love dancing tonight", "en") is Emotion.DANCING


@pytest.mark.parametrize("text", ["", None, 42, ["hi"]])
def test_empty_or_non_string_is_neutral(text):
    assert classify(text, "en") is Emotion.NEUTRAL


def test_precedence_dancing_before_romantic():
    assert classify("my love, let's dance", "en") is Emotion.DANCING


def test_precedence_kiss_before_romantic():
    assert classify("kiss me my love", "en") is Emotion.KISS


def test_matching_is_case_insensitive():
    assert classify("HAHA that was good", "en") is Emotion.LAUGHING


def test_curly_apostrophe_matches_ascii_keyword():
    assert classify("you’re kidding", "en") is Emotion.LAUGHING


def test_sentiment_positive_only():
    assert classify("great!", "en") is Emotion.POSITIVE


def test_sentiment_negative_only():
    assert classify("I am so sad", "en") is Emotion.NEGATIVE


def test_sentiment_mixed_is_neutral():
    assert classify("happy but sad", "en") is Emotion.NEUTRAL


def test_no_match_is_neutral():
    assert classify("the train leaves at nine", "en") is Emotion.NEUTRAL


def test_unaccented_french_resolves_to_english_tables():
    # No diacritics → "en"; "terrible" is not in the English lists
    assert detect_language("c'est terrible") == "en"
    assert classify("c'est terrible", "auto") is Emotion.NEUTRAL


def test_accented_french_uses_french_tables():
    assert classify("je suis très déçu", "auto") is Emotion.NEGATIVE


def test_explicit_language_hint_is_used_as_is():
    assert detect_language("café", "de") == "de"
    assert classify("haha", "xx") is Emotion.LAUGHING


@pytest.mark.parametrize(
    "text, expected",
    [
        ("hello there", "en"),
        ("café", "fr"),
        ("straße", "de"),
        ("mañana", "es"),
        ("così", "it"),
        ("ありがとう", "ja"),
    ],
)
def test_detect_language(text, expected):
    assert detect_language(text) == expected


def test_custom_tables():
    tables = KeywordTables.from_mapping({"en": {"shy": ["eep"], "positive": ["yay"]}})
    clf = EmotionClassifier(tables)
    assert clf.classify("eep!", "en") is Emotion.SHY
    assert clf.classify("yay", "en") is Emotion.POSITIVE
    assert clf.tables is tables


def test_deterministic():
    clf = EmotionClassifier()
    results = {clf.classify("wow that is amazing", "en") for _ in range(5)}
    assert results == {Emotion.SURPRISE}


@pytest.mark.parametrize(
    "text, expected",
    [
        # The French class also holds ä/ö/ü, so umlaut-only German reads as fr
        ("schön", "fr"),
        ("müde", "fr"),
        ("groß", "de"),
        # Common ideographs sit in the Japanese range; zh starts past U+9FAF
        ("你好", "ja"),
        ("漢字", "ja"),
        (chr(0x9FC3), "zh"),
        (chr(0x9FB0) + chr(0x9FFF), "zh"),
    ],
)
def test_detect_language_precedence(text, expected):
    assert detect_language(text) == expected
