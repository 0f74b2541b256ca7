"""Stylometric profile value objects."""

from dataclasses import dataclass, field, fields, asdict
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

PUNCTUATION_KEYS = ("comma", "semicolon", "dash", "question", "exclamation")

SEVERITY_LOW = "low"
SEVERITY_MEDIUM = "medium"
SEVERITY_HIGH = "high"


@dataclass(frozen=True)
class StylometricProfile:
    """Quantitative fingerprint of a text.

    Punctuation ratios: comma, semicolon and dash are per 100 words;
    question and exclamation are per 100 sentences.
    """
    # Lexical
    type_token_ratio: float = 0.0
    average_word_length: float = 0.0
    hapax_ratio: float = 0.0
    yules_k: float = 0.0
    # Sentence
    sentence_length_mean: float = 0.0
    sentence_length_stddev: float = 0.0
    sentence_length_min: int = 0
    sentence_length_max: int = 0
    short_sentence_pct: float = 0.0
    long_sentence_pct: float = 0.0
    # Punctuation
    punctuation: Mapping[str, float] = field(default_factory=dict)
    # Readability
    flesch_reading_ease: float = 0.0
    avg_syllables_per_word: float = 0.0
    # Linguistic patterns
    contraction_ratio: float = 0.0
    conjunction_start_pct: float = 0.0
    question_pct: float = 0.0
    passive_voice_pct: float = 0.0
    # Size
    word_count: int = 0
    sentence_count: int = 0

    def __post_init__(self):
        object.__setattr__(self, "punctuation", MappingProxyType(dict(self.punctuation)))

    def __hash__(self):
        return hash(tuple(
            tuple(sorted(self.punctuation.items())) if f.name == "punctuation" else getattr(self, f.name)
            for f in fields(self)
        ))

    @property
    def is_empty(self) -> bool:
        return self.word_count == 0

    def punctuation_ratio(self, key: str) -> float:
        return float(self.punctuation.get(key, 0.0))

    def scalar_fields(self) -> Dict[str, float]:
        """All numeric fields except punctuation, keyed by name."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "punctuation"}

    def to_dict(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["punctuation"] = dict(self.punctuation)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StylometricProfile":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class Deviation:
    """One metric that drifted from the target."""
    metric: str
    expected: float
    actual: float
    deviation_pct: float
    severity: str

    @property
    def direction(self) -> str:
        return "higher" if self.actual > self.expected else "lower"


@dataclass(frozen=True)
class ProfileComparison:
    """Similarity score (0-100) and the worst deviations, most severe first."""
    similarity: float
    deviations: List[Deviation] = field(default_factory=list)

    def to_feedback(self) -> List[str]:
        """Render deviations as short instructions for the refiner."""
        lines = []
        for d in self.deviations:
            lines.append(
                f"{d.metric.replace('_', ' ')} is {d.direction} than the reference "
                f"({d.actual:.2f} vs {d.expected:.2f}, {d.deviation_pct:.0f}% off, {d.severity})"
            )
        return lines

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


EMPTY_PROFILE = StylometricProfile()
