"""Merge reference-document profiles into a single target profile."""

from typing import List, Optional, Sequence

from ..utils.logging import get_logger
from .analyzer import StylometricAnalyzer
from .profile import EMPTY_PROFILE, PUNCTUATION_KEYS, StylometricProfile

logger = get_logger(__name__)

# Fields that are not averaged
_BOUND_FIELDS = {"sentence_length_min", "sentence_length_max"}
_COUNT_FIELDS = {"word_count", "sentence_count"}


class CompositeProfileBuilder:
    """Build one target profile from a set of reference texts.

    Scalars are (weighted) means; sentence-length min and max are the global
    min and max so the composite keeps the widest observed range.
    """

    def __init__(self, analyzer: Optional[StylometricAnalyzer] = None):
        self.analyzer = analyzer or StylometricAnalyzer()

    def build(self, texts: Sequence[str], weights: Optional[Sequence[float]] = None) -> StylometricProfile:
        """Profile every text and merge the results.

        Args:
            texts: Reference texts.
            weights: Optional relative weights, one per text. Equal weights if omitted.

        Returns:
            Composite StylometricProfile (all-zero for an empty list).
        """
        if weights is not None and len(weights) != len(texts):
            raise ValueError("weights must have one entry per text")

        profiles: List[StylometricProfile] = []
        profile_weights: List[float] = []
        for index, text in enumerate(texts):
            profile = self.analyzer.analyze(text)
            weight = float(weights[index]) if weights is not None else 1.0
            if profile.is_empty or weight <= 0:
                continue
            profiles.append(profile)
            profile_weights.append(weight)

        if not profiles:
            return EMPTY_PROFILE

        logger.info(f"Building composite profile from {len(profiles)} of {len(texts)} documents")
        return self.merge(profiles, profile_weights)

    def merge(self, profiles: Sequence[StylometricProfile], weights: Sequence[float]) -> StylometricProfile:
        total_weight = sum(weights)

        def mean_of(getter) -> float:
            return sum(getter(p) * w for p, w in zip(profiles, weights)) / total_weight

        values = {}
        for name in profiles[0].scalar_fields():
            if name in _BOUND_FIELDS or name in _COUNT_FIELDS:
                continue
            values[name] = mean_of(lambda p, n=name: getattr(p, n))

        keys = set(PUNCTUATION_KEYS)
        for p in profiles:
            keys.update(p.punctuation)
        values["punctuation"] = {key: mean_of(lambda p, k=key: p.punctuation_ratio(k)) for key in sorted(keys)}

        values["sentence_length_min"] = min(p.sentence_length_min for p in profiles)
        values["sentence_length_max"] = max(p.sentence_length_max for p in profiles)
        values["word_count"] = sum(p.word_count for p in profiles)
        values["sentence_count"] = sum(p.sentence_count for p in profiles)
        return StylometricProfile(**values)


def create_composite_profile(texts: Sequence[str], weights: Optional[Sequence[float]] = None) -> StylometricProfile:
    """Convenience function to build a composite profile."""
    return CompositeProfileBuilder().build(texts, weights)
