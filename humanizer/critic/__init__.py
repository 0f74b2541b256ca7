"""Scoring: analysis results, score fusion and the external detector."""

from .analysis import (
    AnalysisResult,
    DetectionRisk,
    DetectorResult,
    ScoreNote,
    default_analysis,
    parse_analysis,
    risk_level,
)
from .fusion import ScoreFusion, fuse_scores
from .detector import ZeroGPTDetector

__all__ = [
    "AnalysisResult",
    "DetectionRisk",
    "DetectorResult",
    "ScoreNote",
    "default_analysis",
    "parse_analysis",
    "risk_level",
    "ScoreFusion",
    "fuse_scores",
    "ZeroGPTDetector",
]
