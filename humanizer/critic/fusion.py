"""Fuse the internal analyzer score with the external judge verdict."""

import math
from typing import Optional

from .analysis import DetectorResult

# Live external verdict: the judge dominates.
LIVE_INTERNAL_WEIGHT = 0.2
LIVE_EXTERNAL_WEIGHT = 0.8
# Stale verdict from an earlier round: discounted.
STALE_INTERNAL_WEIGHT = 0.4
STALE_EXTERNAL_WEIGHT = 0.6


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ScoreFusion:
    """Combine internal and external humanness scores into one 0-100 score."""

    def __init__(
        self,
        live_internal_weight: float = LIVE_INTERNAL_WEIGHT,
        stale_internal_weight: float = STALE_INTERNAL_WEIGHT,
    ):
        self.live_internal_weight = live_internal_weight
        self.live_external_weight = 1.0 - live_internal_weight
        self.stale_internal_weight = stale_internal_weight
        self.stale_external_weight = 1.0 - stale_internal_weight

    def fuse(
        self,
        internal_score: float,
        external: Optional[DetectorResult],
        previous_external: Optional[DetectorResult] = None,
    ) -> int:
        """Fuse scores, preferring a live external verdict over a stale one.

        Args:
            internal_score: Analyzer score (0-100, higher = more human).
            external: This round's detector result, None if not applicable.
            previous_external: Last successful detector result from an earlier round.

        Returns:
            Fused score clamped to [0, 100].
        """
        if external is not None and external.ok:
            fused = internal_score * self.live_internal_weight + external.human_score * self.live_external_weight
        elif previous_external is not None and previous_external.ok:
            fused = internal_score * self.stale_internal_weight + previous_external.human_score * self.stale_external_weight
        else:
            fused = internal_score
        return max(0, min(100, round_half_up(fused)))


def fuse_scores(
    internal_score: float,
    external: Optional[DetectorResult],
    previous_external: Optional[DetectorResult] = None,
) -> int:
    """Fuse with the default weights."""
    return ScoreFusion().fuse(internal_score, external, previous_external)
