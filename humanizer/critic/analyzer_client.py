"""LLM-backed analyzer capability: asks a model to judge a text and validates its JSON."""

from ..generator.llm_provider import RoleModel
from ..utils.logging import get_logger
from .analysis import AnalysisResult, parse_analysis

logger = get_logger(__name__)


class LLMAnalyzer:
    """Analyzer capability over a chat model in JSON mode."""

    def __init__(self, model: RoleModel):
        self.model = model

    @property
    def name(self) -> str:
        return self.model.name

    def analyze(self, system_prompt: str, user_prompt: str) -> AnalysisResult:
        """Judge user_prompt (the text) and return a validated AnalysisResult.

        Raises:
            ParseError: Reply is not valid JSON matching the analysis schema.
            ProviderError: Transport failure.
        """
        response_text = self.model.complete_json(system_prompt, user_prompt)
        result = parse_analysis(response_text)
        logger.debug(f"Analyzer {self.name} scored {result.score} ({result.detection_risk.level})")
        return result
