"""Generation: LLM client and prompt assembly."""

from .llm_provider import LLMProvider, RoleModel
from .prompt_builder import PromptAssembler, build_feedback, build_style_context, format_profile

__all__ = [
    "LLMProvider",
    "RoleModel",
    "PromptAssembler",
    "build_feedback",
    "build_style_context",
    "format_profile",
]
