"""Tests for StylometricAnalyzer.

These tests pin the metric definitions: if one fails, the fingerprint the
refinement loop optimizes against has changed.
"""

import math
import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from humanizer.style.analyzer import StylometricAnalyzer
from humanizer.style.cache import ProfileCache
from humanizer.style.profile import EMPTY_PROFILE


@pytest.fixture
def analyzer():
    return StylometricAnalyzer(cache=ProfileCache())


def _all_numbers(profile):
    values = list(profile.scalar_fields().values()) + list(profile.punctuation.values())
    return values


@pytest.mark.parametrize("text", ["", "   ", "\n\t", "?!...", "a", ".", "I", "--", "42"])
def test_degenerate_input_never_nan(analyzer, text):
    """Contract: analyze never raises and never returns NaN or infinity."""
    profile = analyzer.analyze(text)
    for value in _all_numbers(profile):
        assert not math.isnan(value), f"NaN in profile for {text!r}"
        assert not math.isinf(value), f"inf in profile for {text!r}"
    assert 0.0 <= profile.flesch_reading_ease <= 100.0


@pytest.mark.parametrize("text", ["", "   ", "?!..."])
def test_empty_text_gives_all_zero_profile(analyzer, text):
    profile = analyzer.analyze(text)
    assert all(value == 0 for value in profile.scalar_fields().values())
    assert dict(profile.punctuation) == {}
    assert profile == EMPTY_PROFILE


def test_basic_metrics(analyzer):
    profile = analyzer.analyze("The cat sat. The cat ran away quickly!")

    assert profile.word_count == 8
    assert profile.sentence_count == 2
    assert profile.type_token_ratio == pytest.approx(6 / 8)
    assert profile.hapax_ratio == pytest.approx(4 / 6)
    # sum f^2 = 12, N = 8 -> 10000 * 4 / 64
    assert profile.yules_k == pytest.approx(625.0)
    assert profile.average_word_length == pytest.approx(29 / 8)
    assert profile.sentence_length_mean == pytest.approx(4.0)
    assert profile.sentence_length_stddev == pytest.approx(1.0)
    assert profile.sentence_length_min == 3
    assert profile.sentence_length_max == 5
    assert profile.short_sentence_pct == pytest.approx(100.0)
    assert profile.long_sentence_pct == 0.0
    assert profile.punctuation["exclamation"] == pytest.approx(50.0)
    assert profile.punctuation["question"] == 0.0


def test_long_sentence_percentage(analyzer):
    long_sentence = " ".join(["word"] * 30) + "."
    profile = analyzer.analyze(f"Short one here. {long_sentence}")
    assert profile.long_sentence_pct == pytest.approx(50.0)
    assert profile.short_sentence_pct == pytest.approx(50.0)
    assert profile.sentence_length_max == 30


def test_questions_and_conjunction_openers(analyzer):
    profile = analyzer.analyze("Is it? Yes. And so?")
    assert profile.question_pct == pytest.approx(200 / 3)
    assert profile.conjunction_start_pct == pytest.approx(100 / 3)


def test_quoted_questions_and_exclamations_are_counted(analyzer):
    profile = analyzer.analyze('He asked, "Is it ready?" She laughed! "Not yet!" Done.')
    assert profile.sentence_count == 4
    assert profile.question_pct == pytest.approx(25.0)
    assert profile.punctuation["question"] == pytest.approx(25.0)
    assert profile.punctuation["exclamation"] == pytest.approx(50.0)


def test_contraction_ratio(analyzer):
    profile = analyzer.analyze("I don't know. It's fine.")
    assert profile.contraction_ratio == pytest.approx(2 / 5)


def test_punctuation_per_hundred_words(analyzer):
    profile = analyzer.analyze("One, two, three; four — five.")
    assert profile.punctuation["comma"] == pytest.approx(40.0)
    assert profile.punctuation["semicolon"] == pytest.approx(20.0)
    assert profile.punctuation["dash"] == pytest.approx(20.0)


def test_passive_voice_ratio(analyzer):
    profile = analyzer.analyze("The letter was written by hand. We read it twice.")
    assert profile.passive_voice_pct == pytest.approx(50.0)


def test_flesch_is_clamped(analyzer):
    hard = "Incomprehensibility characterizes institutionalization internationally."
    easy = "I go. We run. It is."
    assert analyzer.analyze(hard).flesch_reading_ease == 0.0
    assert analyzer.analyze(easy).flesch_reading_ease == 100.0


def test_analyze_is_cached_and_reference_stable():
    cache = ProfileCache()
    analyzer = StylometricAnalyzer(cache=cache)
    first = analyzer.analyze("Some text to profile. Another sentence.")
    second = analyzer.analyze("Some text to profile. Another sentence.")
    assert first is second
    assert cache.size() == 1


def test_profile_round_trips_through_dict(analyzer):
    profile = analyzer.analyze("A small sample, with commas. Does it work?")
    data = profile.to_dict()
    assert isinstance(data["punctuation"], dict)
    assert type(profile).from_dict(data) == profile
