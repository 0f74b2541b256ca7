"""Text processing utilities shared by the profiler and the generation loop."""

import re
from typing import List

# Letters with optional internal apostrophes or single hyphens ("don't", "well-known").
# A double hyphen is a dash, not a word joiner.
WORD_PATTERN = re.compile(r"[^\W\d_]+(?:['’\-][^\W\d_]+)*")

# Sentence boundary: terminal punctuation run, up to two closing quotes or
# brackets, then whitespace. Runs like "?!" or "..." stay attached to their sentence.
TERMINAL_CLOSERS = "\"')]”’"
SENTENCE_BOUNDARY = re.compile(
    r"(?:(?<=[.!?])|(?<=[.!?][\"')\]”’])|(?<=[.!?][\"')\]”’]{2}))\s+"
)

DASH_PATTERN = re.compile(r"—|–|--|\s-\s")

CONTRACTION_PATTERN = re.compile(r"^[^\W\d_]+['’](?:t|s|re|ve|ll|d|m)$")

COORDINATING_CONJUNCTIONS = frozenset({"and", "but", "or", "nor", "for", "so", "yet"})

IRREGULAR_PARTICIPLES = (
    "been", "begun", "bitten", "broken", "brought", "built", "bought", "caught",
    "chosen", "done", "drawn", "driven", "eaten", "fallen", "felt", "found",
    "forgotten", "given", "gone", "grown", "held", "hidden", "kept", "known",
    "laid", "led", "left", "lost", "made", "meant", "met", "paid", "put",
    "read", "ridden", "run", "said", "seen", "sent", "set", "shown", "shut",
    "sold", "spent", "spoken", "stolen", "taken", "taught", "thought", "told",
    "thrown", "understood", "won", "worn", "written",
)

# Auxiliary "be" form, optional adverb, then a past participle.
PASSIVE_PATTERN = re.compile(
    r"\b(?:am|is|are|was|were|be|been|being)\s+(?:\w+ly\s+)?(?:\w+ed|"
    + "|".join(IRREGULAR_PARTICIPLES)
    + r")\b",
    re.IGNORECASE,
)

_SYLLABLE_SUFFIX = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_VOWEL_GROUP = re.compile(r"[aeiouy]{1,2}")


def tokenize_words(text: str) -> List[str]:
    """Split text into words (letters, apostrophes and hyphens)."""
    if not text:
        return []
    return WORD_PATTERN.findall(text)


def split_sentences(text: str) -> List[str]:
    """Split text into sentences on '.', '!' or '?' followed by whitespace or end.

    Up to two closing quotes or brackets after the mark stay with the sentence.

    Segments without a single word (e.g. "...") are dropped. A trailing
    segment with no terminal punctuation still counts as a sentence.
    """
    if not text or not text.strip():
        return []
    segments = SENTENCE_BOUNDARY.split(text.strip())
    return [s.strip() for s in segments if WORD_PATTERN.search(s)]


def terminal_mark(sentence: str) -> str:
    """Final '.', '!' or '?' of a sentence, looking past closing quotes and brackets."""
    stripped = sentence.rstrip().rstrip(TERMINAL_CLOSERS)
    return stripped[-1] if stripped and stripped[-1] in ".!?" else ""


def count_syllables(word: str) -> int:
    """Estimate syllables from vowel clusters. Always at least 1 for a real word."""
    word = word.lower()
    if len(word) <= 3:
        return 1
    word = _SYLLABLE_SUFFIX.sub("", word)
    word = re.sub(r"^y", "", word)
    return max(1, len(_VOWEL_GROUP.findall(word)))


def count_dashes(text: str) -> int:
    """Count em dashes, en dashes, double hyphens and spaced hyphens."""
    return len(DASH_PATTERN.findall(text)) if text else 0


def is_contraction(word: str) -> bool:
    return bool(CONTRACTION_PATTERN.match(word.lower()))


def starts_with_conjunction(sentence: str) -> bool:
    words = tokenize_words(sentence)
    return bool(words) and words[0].lower() in COORDINATING_CONJUNCTIONS


def is_passive(sentence: str) -> bool:
    return bool(PASSIVE_PATTERN.search(sentence))


def clean_generated_text(response: str) -> str:
    """Strip Markdown code fences, wrapping quotes and chatter lines from an LLM reply.

    Args:
        response: Raw model output.

    Returns:
        The text body, or an empty string if nothing is left.
    """
    if not response or not response.strip():
        return ""

    lines = response.strip().splitlines()
    if lines and lines[0].startswith("```"):
        lines = lines[1:]
    if lines and lines[-1].startswith("```"):
        lines = lines[:-1]

    # Drop a leading "Here is the rewritten text:" style line
    if lines:
        first = lines[0].strip().lower()
        if first.startswith("here is") or first.startswith("here's"):
            if first.endswith(":"):
                lines = lines[1:]

    text = "\n".join(lines).strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"“”'":
        text = text[1:-1].strip()
    elif len(text) >= 2 and text[0] == "“" and text[-1] == "”":
        text = text[1:-1].strip()
    return text


def calculate_length_ratio(text1: str, text2: str) -> float:
    """Character length ratio of text1 to text2. Returns 1.0 if text2 is empty."""
    if not text2:
        return 1.0
    return len(text1 or "") / len(text2)
