"""Chat-completion client used for generation, refinement and analysis.

Talks to any OpenAI-compatible /chat/completions endpoint (DeepSeek,
OpenRouter, a local server) configured in config.json.
"""

from typing import Any, Dict, Optional

import requests

from ..config import DEFAULT_CONFIG_PATH, resolve_config
from ..exceptions import ProviderError, RequestTimeoutError, ValidationError
from ..utils.logging import get_logger
from ..utils.text_processing import clean_generated_text

logger = get_logger(__name__)

DEFAULT_API_URLS = {
    "deepseek": "https://api.deepseek.com/chat/completions",
    "openrouter": "https://openrouter.ai/api/v1/chat/completions",
}

ROLE_GENERATOR = "generator"
ROLE_REFINER = "refiner"
ROLE_ANALYZER = "analyzer"

DEFAULT_ROLE_TEMPERATURES = {
    ROLE_GENERATOR: 1.0,
    ROLE_REFINER: 1.0,
    ROLE_ANALYZER: 0.1,
}


class LLMProvider:
    """Thin HTTP client over a chat-completion endpoint."""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        config_path: str = DEFAULT_CONFIG_PATH,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the provider.

        Args:
            config: Parsed configuration; loaded from config_path if omitted.
            config_path: Path to configuration file.
            session: Optional requests session (injected in tests).
        """
        self.config = resolve_config(config, config_path)
        self.provider = self.config.get("provider", "deepseek")
        provider_config = self.config.get(self.provider, {})
        self.api_key = provider_config.get("api_key")
        self.api_url = provider_config.get("api_url") or DEFAULT_API_URLS.get(self.provider)
        self.default_model = provider_config.get("editor_model")
        self.request_timeout = provider_config.get("timeout", 60)
        self.max_tokens = provider_config.get("max_tokens", 4000)
        self.session = session or requests.Session()

    def call(
        self,
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
        temperature: float = 1.0,
        max_tokens: Optional[int] = None,
        require_json: bool = False,
    ) -> str:
        """Send one chat completion request and return the message content.

        Raises:
            ValidationError: No API key, URL or model configured.
            RequestTimeoutError: The HTTP request timed out.
            ProviderError: Transport failure, HTTP error status or empty reply.
        """
        model = model or self.default_model
        if not model:
            raise ValidationError(f"No model assigned for provider '{self.provider}'")
        if not self.api_key or not self.api_url:
            raise ValidationError(f"API key or URL not found in config for provider '{self.provider}'")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }
        if require_json:
            payload["response_format"] = {"type": "json_object"}

        try:
            response = self.session.post(self.api_url, headers=headers, json=payload, timeout=self.request_timeout)
        except requests.Timeout as e:
            raise RequestTimeoutError(f"{self.provider} request timed out after {self.request_timeout}s: {e}")
        except requests.RequestException as e:
            raise ProviderError(f"{self.provider} request failed: {e}")

        if response.status_code >= 400:
            raise ProviderError(
                f"{self.provider} returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise ProviderError(f"{self.provider} returned a non-JSON body: {e}")

        choices = result.get("choices") if isinstance(result, dict) else None
        first = choices[0] if isinstance(choices, list) and choices else None
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict):
            raise ProviderError(f"{self.provider} returned a malformed completion")

        content = message.get("content") or ""
        if not isinstance(content, str) or not content:
            raise ProviderError(f"{self.provider} returned an empty completion")
        return content

    def for_role(self, role: str) -> Optional["RoleModel"]:
        """Bind the model assigned to a role, or None if the role is disabled/unassigned."""
        role_config = self.config.get("models", {}).get(role)
        if role_config is None:
            if role == ROLE_GENERATOR and self.default_model:
                return RoleModel(self, self.default_model, DEFAULT_ROLE_TEMPERATURES[role])
            return None
        if not role_config.get("enabled", True):
            return None
        return RoleModel(
            self,
            role_config.get("model") or self.default_model,
            role_config.get("temperature", DEFAULT_ROLE_TEMPERATURES.get(role, 1.0)),
        )


class RoleModel:
    """A provider bound to one model and a default temperature.

    Satisfies the generator/refiner capability: generate(system, user, temperature).
    """

    def __init__(self, provider: LLMProvider, model: Optional[str], temperature: float):
        self.provider = provider
        self.model = model
        self.temperature = temperature

    @property
    def name(self) -> str:
        return self.model or "unassigned"

    def generate(self, system_prompt: str, user_prompt: str, temperature: Optional[float] = None) -> str:
        if not self.model:
            raise ValidationError("No model assigned to this role")
        text = self.provider.call(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            model=self.model,
            temperature=self.temperature if temperature is None else temperature,
        )
        return clean_generated_text(text)

    def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        if not self.model:
            raise ValidationError("No model assigned to this role")
        return self.provider.call(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            model=self.model,
            temperature=self.temperature,
            require_json=True,
        )
