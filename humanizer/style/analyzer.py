"""Compute stylometric profiles from raw text.

Every ratio guards its denominator, so empty, whitespace-only or
punctuation-only input produces the all-zero profile instead of raising.
"""

from collections import Counter
from typing import List, Optional

import numpy as np

from ..utils.logging import get_logger
from ..utils.text_processing import (
    count_dashes,
    count_syllables,
    is_contraction,
    is_passive,
    split_sentences,
    starts_with_conjunction,
    terminal_mark,
    tokenize_words,
)
from .cache import ProfileCache, default_cache
from .profile import EMPTY_PROFILE, StylometricProfile

logger = get_logger(__name__)

SHORT_SENTENCE_WORDS = 10
LONG_SENTENCE_WORDS = 25


def _ratio(numerator: float, denominator: float) -> float:
    return float(numerator) / denominator if denominator else 0.0


class StylometricAnalyzer:
    """Extract a StylometricProfile from text, memoized through a ProfileCache."""

    def __init__(self, cache: Optional[ProfileCache] = None):
        self.cache = cache if cache is not None else default_cache

    def analyze(self, text: str) -> StylometricProfile:
        """Return the profile for text, from cache when available."""
        text = text or ""
        cached = self.cache.get(text)
        if cached is not None:
            logger.debug(f"Profile cache hit ({len(text)} chars)")
            return cached

        profile = self.compute(text)
        self.cache.set(text, profile)
        logger.debug(
            f"Profiled {profile.word_count} words / {profile.sentence_count} sentences "
            f"(TTR {profile.type_token_ratio:.3f}, stddev {profile.sentence_length_stddev:.1f})"
        )
        return profile

    def compute(self, text: str) -> StylometricProfile:
        """Compute a profile without touching the cache."""
        words = tokenize_words(text)
        sentences = split_sentences(text)
        if not words or not sentences:
            return EMPTY_PROFILE

        word_count = len(words)
        sentence_count = len(sentences)
        lowered = [w.lower() for w in words]
        frequencies = Counter(lowered)
        unique_count = len(frequencies)

        # Lexical
        hapax_count = sum(1 for count in frequencies.values() if count == 1)
        sum_sq = sum(count * count for count in frequencies.values())
        yules_k = 10000.0 * (sum_sq - word_count) / (word_count * word_count)

        # Sentence lengths
        lengths = self._sentence_lengths(sentences)
        short = sum(1 for n in lengths if n < SHORT_SENTENCE_WORDS)
        long_ = sum(1 for n in lengths if n > LONG_SENTENCE_WORDS)

        # Punctuation
        questions = sum(1 for s in sentences if terminal_mark(s) == "?")
        exclamations = sum(1 for s in sentences if terminal_mark(s) == "!")
        punctuation = {
            "comma": _ratio(text.count(",") * 100, word_count),
            "semicolon": _ratio(text.count(";") * 100, word_count),
            "dash": _ratio(count_dashes(text) * 100, word_count),
            "question": _ratio(questions * 100, sentence_count),
            "exclamation": _ratio(exclamations * 100, sentence_count),
        }

        # Readability
        syllables = sum(count_syllables(w) for w in words)
        avg_syllables = _ratio(syllables, word_count)
        flesch = 206.835 - 1.015 * _ratio(word_count, sentence_count) - 84.6 * avg_syllables
        flesch = min(100.0, max(0.0, flesch))

        # Linguistic patterns
        contractions = sum(1 for w in words if is_contraction(w))
        conjunction_starts = sum(1 for s in sentences if starts_with_conjunction(s))
        passives = sum(1 for s in sentences if is_passive(s))

        return StylometricProfile(
            type_token_ratio=_ratio(unique_count, word_count),
            average_word_length=_ratio(sum(len(w) for w in words), word_count),
            hapax_ratio=_ratio(hapax_count, unique_count),
            yules_k=float(yules_k),
            sentence_length_mean=float(np.mean(lengths)),
            sentence_length_stddev=float(np.std(lengths)),
            sentence_length_min=int(min(lengths)),
            sentence_length_max=int(max(lengths)),
            short_sentence_pct=_ratio(short * 100, sentence_count),
            long_sentence_pct=_ratio(long_ * 100, sentence_count),
            punctuation=punctuation,
            flesch_reading_ease=float(flesch),
            avg_syllables_per_word=avg_syllables,
            contraction_ratio=_ratio(contractions, word_count),
            conjunction_start_pct=_ratio(conjunction_starts * 100, sentence_count),
            question_pct=_ratio(questions * 100, sentence_count),
            passive_voice_pct=_ratio(passives * 100, sentence_count),
            word_count=word_count,
            sentence_count=sentence_count,
        )

    def _sentence_lengths(self, sentences: List[str]) -> List[int]:
        return [len(tokenize_words(s)) for s in sentences]


def analyze_text(text: str, cache: Optional[ProfileCache] = None) -> StylometricProfile:
    """Convenience function to profile a single text."""
    return StylometricAnalyzer(cache=cache).analyze(text)
