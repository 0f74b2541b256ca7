"""Analysis result types and schema validation for analyzer replies."""

import json
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from ..exceptions import ParseError
from ..style.profile import ProfileComparison

LEVEL_EXCELLENT = "Excellent"
LEVEL_LOW = "Low"
LEVEL_MODERATE = "Moderate"
LEVEL_HIGH = "High"

DEFAULT_INTERNAL_SCORE = 70
REAL_TEXT_MAX_FAKE_PCT = 20


def risk_level(score: float) -> str:
    """Map a 0-100 humanness score to a detection-risk level."""
    if score >= 90:
        return LEVEL_EXCELLENT
    if score >= 75:
        return LEVEL_LOW
    if score >= 50:
        return LEVEL_MODERATE
    return LEVEL_HIGH


@dataclass(frozen=True)
class DetectionRisk:
    level: str
    score: int


@dataclass(frozen=True)
class ScoreNote:
    """Opaque 0-100 heuristic score from the analyzer, higher = more human."""
    score: int
    analysis: str = ""


@dataclass(frozen=True)
class DetectorResult:
    """External judge verdict. error set means the detector failed this round."""
    fake_percentage: float = 0.0
    ai_words: int = 0
    feedback: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_real(self) -> bool:
        return self.ok and self.fake_percentage < REAL_TEXT_MAX_FAKE_PCT

    @property
    def human_score(self) -> float:
        return 100.0 - self.fake_percentage


@dataclass(frozen=True)
class AnalysisResult:
    detection_risk: DetectionRisk
    perplexity: ScoreNote
    burstiness: ScoreNote
    flagged_sentences: List[str] = field(default_factory=list)
    external: Optional[DetectorResult] = None
    stylometric_match: Optional[ProfileComparison] = None
    degraded: bool = False

    @property
    def score(self) -> int:
        return self.detection_risk.score

    def with_score(self, score: int) -> "AnalysisResult":
        return replace(self, detection_risk=DetectionRisk(level=risk_level(score), score=score))

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "detectionRisk": {"level": self.detection_risk.level, "score": self.detection_risk.score},
            "perplexity": {"score": self.perplexity.score, "analysis": self.perplexity.analysis},
            "burstiness": {"score": self.burstiness.score, "analysis": self.burstiness.analysis},
            "flaggedSentences": list(self.flagged_sentences),
            "degraded": self.degraded,
        }
        if self.external is not None:
            data["external"] = {
                "fakePercentage": self.external.fake_percentage,
                "aiWords": self.external.ai_words,
                "feedback": self.external.feedback,
                "error": self.external.error,
            }
        if self.stylometric_match is not None:
            data["stylometricMatch"] = self.stylometric_match.to_dict()
        return data


def default_analysis(reason: str = "Analysis unavailable") -> AnalysisResult:
    """Substitute result used when the analyzer branch fails or is not configured."""
    return AnalysisResult(
        detection_risk=DetectionRisk(level=LEVEL_MODERATE, score=DEFAULT_INTERNAL_SCORE),
        perplexity=ScoreNote(score=DEFAULT_INTERNAL_SCORE, analysis=reason),
        burstiness=ScoreNote(score=DEFAULT_INTERNAL_SCORE, analysis=reason),
        flagged_sentences=[],
        degraded=True,
    )


def _require(data: Dict, key: str, expected_type, raw: str):
    if key not in data:
        raise ParseError(f"Analyzer response missing '{key}'", raw_response=raw)
    value = data[key]
    if not isinstance(value, expected_type) or isinstance(value, bool) and expected_type is not bool:
        raise ParseError(f"Analyzer field '{key}' has wrong type {type(value).__name__}", raw_response=raw)
    return value


def _score(data: Dict, key: str, raw: str) -> int:
    value = _require(data, key, (int, float), raw)
    if not 0 <= value <= 100:
        raise ParseError(f"Analyzer field '{key}' out of range: {value}", raw_response=raw)
    return int(round(value))


def _note(data: Dict, key: str, raw: str) -> ScoreNote:
    section = _require(data, key, dict, raw)
    analysis = section.get("analysis", "")
    return ScoreNote(score=_score(section, "score", raw), analysis=str(analysis))


def parse_analysis(response_text: str) -> AnalysisResult:
    """Parse and validate an analyzer reply.

    Accepts bare JSON or JSON wrapped in a Markdown code fence.

    Raises:
        ParseError: If the reply is not JSON or does not match the schema.
    """
    raw = response_text or ""
    body = raw.strip()
    fenced = re.match(r"^```(?:json)?\s*(.*?)\s*```$", body, re.DOTALL)
    if fenced:
        body = fenced.group(1)

    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        json_match = re.search(r"\{.*\}", body, re.DOTALL)
        if not json_match:
            raise ParseError("Analyzer response is not JSON", raw_response=raw)
        try:
            data = json.loads(json_match.group())
        except json.JSONDecodeError as e:
            raise ParseError(f"Analyzer response is not JSON: {e}", raw_response=raw)

    if not isinstance(data, dict):
        raise ParseError("Analyzer response is not a JSON object", raw_response=raw)

    risk = _require(data, "detectionRisk", dict, raw)
    score = _score(risk, "score", raw)
    level = risk.get("level")
    level = str(level) if level else risk_level(score)

    flagged = _require(data, "flaggedSentences", list, raw)
    if not all(isinstance(s, str) for s in flagged):
        raise ParseError("Analyzer field 'flaggedSentences' must be a list of strings", raw_response=raw)

    return AnalysisResult(
        detection_risk=DetectionRisk(level=level, score=score),
        perplexity=_note(data, "perplexity", raw),
        burstiness=_note(data, "burstiness", raw),
        flagged_sentences=list(flagged),
    )
