"""Profile comparator: scores how closely a text's profile matches a target.

This is the stylometric half of the critic. The refinement loop turns the
deviations it reports into rewrite instructions.
"""

from typing import Callable, List, Optional, Tuple

from .profile import (
    SEVERITY_HIGH,
    SEVERITY_LOW,
    SEVERITY_MEDIUM,
    Deviation,
    ProfileComparison,
    StylometricProfile,
)

EPSILON = 1e-6

# Severity thresholds on the weighted deviation percentage
LOW_SEVERITY_MAX = 15.0
MEDIUM_SEVERITY_MAX = 40.0

DEFAULT_TOP_N = 3

# (metric name, accessor, sensitivity weight), in reporting order
METRICS: List[Tuple[str, Callable[[StylometricProfile], float], float]] = [
    ("type_token_ratio", lambda p: p.type_token_ratio, 1.0),
    ("sentence_length_stddev", lambda p: p.sentence_length_stddev, 1.2),
    ("yules_k", lambda p: p.yules_k, 0.8),
    ("hapax_ratio", lambda p: p.hapax_ratio, 0.8),
    ("comma_ratio", lambda p: p.punctuation_ratio("comma"), 0.6),
]


def classify_severity(deviation_pct: float) -> str:
    if deviation_pct < LOW_SEVERITY_MAX:
        return SEVERITY_LOW
    if deviation_pct <= MEDIUM_SEVERITY_MAX:
        return SEVERITY_MEDIUM
    return SEVERITY_HIGH


class ProfileComparator:
    """Compare an actual profile against a target profile."""

    def __init__(self, top_n: int = DEFAULT_TOP_N, metrics: Optional[list] = None):
        """Initialize the comparator.

        Args:
            top_n: Maximum number of deviations to report.
            metrics: Optional override of (name, accessor, weight) triples.
        """
        self.top_n = top_n
        self.metrics = metrics or METRICS

    def compare(self, target: StylometricProfile, actual: StylometricProfile) -> ProfileComparison:
        """Diff actual against target.

        Returns:
            ProfileComparison with similarity in [0, 100] and at most top_n
            deviations, largest first. Identical profiles give 100 and no deviations.
        """
        deviations = []
        for name, accessor, weight in self.metrics:
            expected = float(accessor(target))
            value = float(accessor(actual))
            deviation_pct = abs(value - expected) / max(expected, EPSILON) * 100.0 * weight
            deviations.append(Deviation(
                metric=name,
                expected=expected,
                actual=value,
                deviation_pct=deviation_pct,
                severity=classify_severity(deviation_pct),
            ))

        mean_deviation = sum(d.deviation_pct for d in deviations) / len(deviations) if deviations else 0.0
        similarity = round(max(0.0, 100.0 - mean_deviation), 1)

        ranked = sorted(
            (d for d in deviations if d.deviation_pct > 0),
            key=lambda d: d.deviation_pct,
            reverse=True,
        )
        return ProfileComparison(similarity=similarity, deviations=ranked[:self.top_n])


def compare_profiles(target: StylometricProfile, actual: StylometricProfile, top_n: int = DEFAULT_TOP_N) -> ProfileComparison:
    """Convenience function for a one-off comparison."""
    return ProfileComparator(top_n=top_n).compare(target, actual)
