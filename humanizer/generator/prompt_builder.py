"""Prompt assembly for generation, refinement and analysis."""

import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..critic.analysis import AnalysisResult
from ..style.profile import StylometricProfile

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

# Phrases that detectors associate with model output
AI_PATTERNS_TO_AVOID = [
    "In conclusion", "It is important to note", "In summary", "Let's dive into",
    "tapestry", "delve", "landscape", "symphony", "crucial", "foster", "nuance",
    "In today's world", "It is worth highlighting", "Overall",
]

CONTEXT_SAMPLE_CHARS = 1500


def _load_prompt_template(template_name: str) -> str:
    """Load a prompt template from the prompts directory.

    Args:
        template_name: Name of the template file (e.g., 'generation_system.md')

    Returns:
        Template content as string.
    """
    template_path = PROMPTS_DIR / template_name
    if not template_path.exists():
        raise FileNotFoundError(f"Prompt template not found: {template_path}")
    return template_path.read_text(encoding="utf-8").strip()


def format_profile(profile: StylometricProfile) -> str:
    """Render a profile as bullet-point targets for the model."""
    return "\n".join([
        f"- Lexical diversity (type-token ratio): about {profile.type_token_ratio:.3f}. Avoid repeating words.",
        f"- Average word length: about {profile.average_word_length:.2f} characters.",
        f"- Sentence length: mean {profile.sentence_length_mean:.1f} words, standard deviation "
        f"{profile.sentence_length_stddev:.1f}, from {profile.sentence_length_min} to {profile.sentence_length_max} words.",
        f"- Short sentences (<10 words): {profile.short_sentence_pct:.0f}%. Long sentences (>25 words): {profile.long_sentence_pct:.0f}%.",
        f"- Readability (Flesch): about {profile.flesch_reading_ease:.0f}.",
        f"- Punctuation: about {profile.punctuation_ratio('comma'):.1f} commas, "
        f"{profile.punctuation_ratio('semicolon'):.1f} semicolons and {profile.punctuation_ratio('dash'):.1f} dashes per 100 words.",
        f"- Contractions: {profile.contraction_ratio * 100:.1f}% of words. "
        f"Sentences opening with and/but/so: {profile.conjunction_start_pct:.0f}%. "
        f"Questions: {profile.question_pct:.0f}% of sentences.",
    ])


def build_style_context(documents: Sequence[Tuple[str, str, float]]) -> str:
    """Render reference samples as prompt context.

    Args:
        documents: (source name, text, weight percent) triples.
    """
    sections = []
    for name, text, weight in documents:
        if not text or weight <= 0:
            continue
        sections.append(f"---\nSOURCE: {name} (weight {weight:.0f}%)\n{text[:CONTEXT_SAMPLE_CHARS]}\n---")
    return "\n".join(sections) if sections else "(no reference writing provided)"


def _dedupe(items: List[str]) -> List[str]:
    seen = set()
    unique = []
    for item in items:
        key = re.sub(r"\s+", " ", item.strip().lower())
        if key and key not in seen:
            seen.add(key)
            unique.append(item.strip())
    return unique


def build_feedback(analysis: AnalysisResult) -> str:
    """Turn an analysis into numbered action items for the refiner."""
    items = []
    external = analysis.external
    if external is not None and external.ok and not external.is_real:
        message = f"The external detector rates this text {external.fake_percentage:.0f}% AI-generated."
        if external.feedback:
            message += f" Detector note: {external.feedback}"
        items.append(message)
    elif external is None or not external.ok:
        items.append(f"Overall humanness score is {analysis.score}%, which is too low.")

    for sentence in analysis.flagged_sentences[:5]:
        items.append(f'Rewrite this machine-sounding sentence: "{sentence}"')

    if analysis.stylometric_match is not None:
        items.extend(analysis.stylometric_match.to_feedback())

    if len(items) <= 1 and not analysis.flagged_sentences:
        items.append("The text lacks a human voice: vary rhythm, add concrete detail and a personal angle.")

    items = _dedupe(items)
    return "ACTION ITEMS TO FIX:\n" + "\n".join(f"{i}. {item}" for i, item in enumerate(items, 1))


class PromptAssembler:
    """Builds (system, user) prompt pairs from templates, a target profile and style context."""

    def __init__(self, target_profile: StylometricProfile, style_context: str = ""):
        self.target_profile = target_profile
        self.style_context = style_context or "(no reference writing provided)"
        self._profile_text = format_profile(target_profile)

    def generation_prompts(self, topic: str) -> Tuple[str, str]:
        system = _load_prompt_template("generation_system.md").format(
            stylometric_profile=self._profile_text,
            style_context=self.style_context,
            avoid_phrases=", ".join(AI_PATTERNS_TO_AVOID),
        )
        user = _load_prompt_template("generation_user.md").format(topic=topic)
        return system, user

    def refinement_prompts(self, text: str, feedback: str, attempt: Optional[int] = None) -> Tuple[str, str]:
        system = _load_prompt_template("refinement_system.md").format(
            stylometric_profile=self._profile_text,
            style_context=self.style_context,
            analysis_feedback=feedback,
            avoid_phrases=", ".join(AI_PATTERNS_TO_AVOID),
        )
        user = _load_prompt_template("refinement_user.md").format(
            attempt=attempt if attempt is not None else 1,
            text=text,
        )
        return system, user

    @staticmethod
    def analysis_system_prompt() -> str:
        return _load_prompt_template("analysis_system.md")
