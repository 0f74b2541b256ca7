"""Tests for ProfileComparator similarity scoring and deviation ranking."""

import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from humanizer.style.analyzer import StylometricAnalyzer
from humanizer.style.cache import ProfileCache
from humanizer.style.comparator import ProfileComparator, classify_severity, compare_profiles
from humanizer.style.profile import EMPTY_PROFILE, StylometricProfile


def _profile(ttr=0.5, stddev=10.0, yules=100.0, hapax=0.5, comma=5.0):
    return StylometricProfile(
        type_token_ratio=ttr,
        sentence_length_stddev=stddev,
        yules_k=yules,
        hapax_ratio=hapax,
        punctuation={"comma": comma},
        word_count=100,
        sentence_count=5,
    )


def test_identical_profiles_score_100():
    profile = _profile()
    result = ProfileComparator().compare(profile, profile)
    assert result.similarity == 100.0
    assert result.deviations == []


def test_identical_analyzed_texts_score_100():
    analyzer = StylometricAnalyzer(cache=ProfileCache())
    text = "We shipped it late. Nobody minded, honestly. The fix was small, and it held."
    result = compare_profiles(analyzer.analyze(text), analyzer.analyze(text))
    assert result.similarity == 100.0
    assert result.deviations == []


def test_weighted_deviations_and_similarity():
    target = _profile()
    actual = _profile(ttr=0.55, stddev=15.0, hapax=0.6)

    result = ProfileComparator().compare(target, actual)

    # stddev: 50% * 1.2, hapax: 20% * 0.8, ttr: 10% * 1.0 -> mean of [10, 60, 0, 16, 0]
    assert result.similarity == pytest.approx(82.8)
    assert [d.metric for d in result.deviations] == ["sentence_length_stddev", "hapax_ratio", "type_token_ratio"]
    assert result.deviations[0].deviation_pct == pytest.approx(60.0)
    assert [d.severity for d in result.deviations] == ["high", "medium", "low"]
    assert result.deviations[0].direction == "higher"


def test_top_n_limits_deviations_sorted_descending():
    target = _profile()
    actual = _profile(ttr=0.6, stddev=12.0, yules=150.0, hapax=0.45, comma=9.0)

    result = ProfileComparator(top_n=3).compare(target, actual)
    assert len(result.deviations) == 3
    pcts = [d.deviation_pct for d in result.deviations]
    assert pcts == sorted(pcts, reverse=True)

    wide = ProfileComparator(top_n=10).compare(target, actual)
    assert len(wide.deviations) == 5


def test_similarity_floors_at_zero():
    target = _profile(ttr=0.1, stddev=1.0, yules=10.0, hapax=0.1, comma=1.0)
    actual = _profile(ttr=0.9, stddev=30.0, yules=500.0, hapax=0.9, comma=20.0)
    assert ProfileComparator().compare(target, actual).similarity == 0.0


def test_zero_expected_value_does_not_divide_by_zero():
    """An all-zero target uses epsilon in the denominator."""
    result = ProfileComparator().compare(EMPTY_PROFILE, _profile())
    assert result.similarity == 0.0
    assert all(d.deviation_pct > 0 for d in result.deviations)


@pytest.mark.parametrize(
    "pct,expected",
    [(0.0, "low"), (14.9, "low"), (15.0, "medium"), (40.0, "medium"), (40.1, "high"), (300.0, "high")],
)
def test_classify_severity(pct, expected):
    assert classify_severity(pct) == expected


def test_feedback_lines_mention_metric_and_direction():
    result = ProfileComparator().compare(_profile(), _profile(stddev=4.0))
    feedback = result.to_feedback()
    assert len(feedback) == 1
    assert "sentence length stddev" in feedback[0]
    assert "lower" in feedback[0]
