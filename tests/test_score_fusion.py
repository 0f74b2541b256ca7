"""Tests for internal/external score fusion."""

import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from humanizer.critic.analysis import DetectorResult
from humanizer.critic.fusion import ScoreFusion, fuse_scores, round_half_up


def test_live_external_verdict_dominates():
    # 70 * 0.2 + 90 * 0.8 = 86
    assert fuse_scores(70, DetectorResult(fake_percentage=10)) == 86


def test_no_external_uses_internal_score():
    assert fuse_scores(70, None) == 70
    assert fuse_scores(70, None, None) == 70


def test_stale_verdict_is_discounted():
    # 70 * 0.4 + 80 * 0.6 = 76
    assert fuse_scores(70, None, DetectorResult(fake_percentage=20)) == 76


def test_failed_detector_falls_back_to_stale_verdict():
    failed = DetectorResult(error="HTTP 503")
    assert fuse_scores(70, failed, DetectorResult(fake_percentage=20)) == 76


def test_failed_detector_without_history_uses_internal():
    assert fuse_scores(70, DetectorResult(error="timeout"), None) == 70


def test_live_verdict_beats_stale_one():
    live = DetectorResult(fake_percentage=0)
    stale = DetectorResult(fake_percentage=100)
    # 50 * 0.2 + 100 * 0.8
    assert fuse_scores(50, live, stale) == 90


def test_result_is_clamped():
    assert fuse_scores(150, None) == 100
    assert fuse_scores(-5, None) == 0


@pytest.mark.parametrize("value,expected", [(50.5, 51), (85.5, 86), (85.49, 85), (0.5, 1), (99.999, 100)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_custom_weights():
    fusion = ScoreFusion(live_internal_weight=0.5, stale_internal_weight=0.5)
    assert fusion.fuse(60, DetectorResult(fake_percentage=20)) == 70
    assert fusion.fuse(60, None, DetectorResult(fake_percentage=60)) == 50
