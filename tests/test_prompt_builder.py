"""Tests for prompt assembly and refinement feedback."""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from humanizer.critic.analysis import AnalysisResult, DetectorResult, default_analysis
from humanizer.generator import prompt_builder
from humanizer.generator.prompt_builder import (
    AI_PATTERNS_TO_AVOID,
    CONTEXT_SAMPLE_CHARS,
    PromptAssembler,
    build_feedback,
    build_style_context,
    format_profile,
)
from humanizer.style.comparator import ProfileComparator
from humanizer.style.profile import StylometricProfile

PROFILE = StylometricProfile(
    type_token_ratio=0.62,
    sentence_length_mean=14.5,
    sentence_length_stddev=8.0,
    sentence_length_min=2,
    sentence_length_max=41,
    punctuation={"comma": 6.0, "semicolon": 0.5, "dash": 1.2},
    word_count=500,
    sentence_count=34,
)


def test_templates_ship_inside_the_package():
    package_dir = Path(prompt_builder.__file__).resolve().parent.parent
    prompts_dir = prompt_builder.PROMPTS_DIR.resolve()
    assert prompts_dir.parent == package_dir
    for name in ("analysis_system.md", "generation_system.md", "generation_user.md",
                 "refinement_system.md", "refinement_user.md"):
        assert (prompts_dir / name).is_file()

    pyproject = (project_root / "pyproject.toml").read_text(encoding="utf-8")
    assert 'humanizer = ["prompts/*.md"]' in pyproject


def test_format_profile_lists_targets():
    text = format_profile(PROFILE)
    assert "0.620" in text
    assert "standard deviation 8.0" in text
    assert "from 2 to 41 words" in text
    assert "6.0 commas" in text


def test_style_context_truncates_and_skips_unweighted():
    long_text = "word " * 1000
    context = build_style_context([
        ("user/a.txt", long_text, 60.0),
        ("user/b.txt", "Ignored text.", 0.0),
        ("marketing/c.txt", "Buy now!", 40.0),
    ])
    assert "SOURCE: user/a.txt (weight 60%)" in context
    assert "Ignored text." not in context
    assert "Buy now!" in context
    assert context.count("word") <= CONTEXT_SAMPLE_CHARS // 5 + 1


def test_style_context_placeholder_when_empty():
    assert build_style_context([]) == "(no reference writing provided)"


def test_generation_prompts_fill_templates():
    system, user = PromptAssembler(PROFILE, "SOURCE: sample").generation_prompts("remote work")
    assert "standard deviation 8.0" in system
    assert "SOURCE: sample" in system
    assert AI_PATTERNS_TO_AVOID[0] in system
    assert "remote work" in user


def test_refinement_prompts_include_feedback_and_attempt():
    system, user = PromptAssembler(PROFILE).refinement_prompts(
        "Original draft {with braces}.", "ACTION ITEMS TO FIX:\n1. Vary rhythm.", attempt=2
    )
    assert "1. Vary rhythm." in system
    assert "Original draft {with braces}." in user
    assert "2" in user


def test_analysis_prompt_describes_schema():
    prompt = PromptAssembler.analysis_system_prompt()
    assert "detectionRisk" in prompt
    assert "flaggedSentences" in prompt


def test_feedback_from_detector_and_flags():
    analysis = default_analysis()
    analysis = AnalysisResult(
        detection_risk=analysis.detection_risk,
        perplexity=analysis.perplexity,
        burstiness=analysis.burstiness,
        flagged_sentences=["It is important to note that teams matter.", "It is important to note that teams matter."],
        external=DetectorResult(fake_percentage=64, feedback="Uniform rhythm"),
        stylometric_match=ProfileComparator().compare(PROFILE, StylometricProfile(
            type_token_ratio=0.62, sentence_length_stddev=2.0, punctuation={"comma": 6.0},
        )),
    )

    feedback = build_feedback(analysis)

    assert feedback.startswith("ACTION ITEMS TO FIX:")
    assert "64% AI-generated" in feedback
    assert "Uniform rhythm" in feedback
    assert feedback.count("It is important to note") == 1
    assert "sentence length stddev is lower" in feedback
    assert "1." in feedback and "2." in feedback


def test_feedback_without_detector_mentions_score():
    feedback = build_feedback(default_analysis().with_score(55))
    assert "55%" in feedback
    assert "human voice" in feedback
