"""External AI-text detector (ZeroGPT) used as the adversarial judge."""

from typing import Any, Dict, Optional

import requests

from ..config import DEFAULT_CONFIG_PATH, resolve_config
from ..utils.logging import get_logger
from .analysis import DetectorResult

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.zerogpt.com/api/detect/detectText"
DEFAULT_MIN_CHARS = 50


class ZeroGPTDetector:
    """Detector capability: detect(text) -> DetectorResult | None.

    None means "not applicable" (text too short or no API key); a failed
    request is a DetectorResult with error set, never an exception.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        config_path: str = DEFAULT_CONFIG_PATH,
        session: Optional[requests.Session] = None,
    ):
        zerogpt_config = resolve_config(config, config_path).get("zerogpt", {})
        self.api_key = (zerogpt_config.get("api_key") or "").strip()
        self.api_url = zerogpt_config.get("api_url", DEFAULT_API_URL)
        self.min_chars = zerogpt_config.get("min_chars", DEFAULT_MIN_CHARS)
        self.timeout = zerogpt_config.get("timeout", 30)
        self.session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def detect(self, text: str) -> Optional[DetectorResult]:
        if not text or len(text.strip()) < self.min_chars:
            return None
        if not self.enabled:
            logger.debug("ZeroGPT disabled: no API key")
            return None

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "ApiKey": self.api_key,
        }
        try:
            response = self.session.post(self.api_url, headers=headers, json={"input_text": text}, timeout=self.timeout)
            if response.status_code == 401:
                return DetectorResult(error="ZeroGPT API key invalid or expired")
            if response.status_code == 403:
                return DetectorResult(error="ZeroGPT access denied")
            if response.status_code >= 400:
                return DetectorResult(error=f"ZeroGPT HTTP {response.status_code}")
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"ZeroGPT request failed: {e}")
            return DetectorResult(error=str(e) or type(e).__name__)

        return self._parse(data)

    def _parse(self, data: Dict[str, Any]) -> DetectorResult:
        if not isinstance(data, dict):
            return DetectorResult(error="ZeroGPT response is not a JSON object")
        payload = data.get("data") if isinstance(data.get("data"), dict) else {}
        fake = payload.get("fakePercentage", data.get("fakePercentage"))
        if not isinstance(fake, (int, float)) or isinstance(fake, bool):
            return DetectorResult(error="ZeroGPT response has no fakePercentage")

        fake = max(0.0, min(100.0, float(fake)))
        ai_words = payload.get("aiWords") or 0
        feedback = data.get("message") or ("Validated as human" if fake < 20 else "Strong AI signal")
        logger.info(f"ZeroGPT verdict: {fake:.0f}% AI")
        return DetectorResult(fake_percentage=fake, ai_words=int(ai_words), feedback=str(feedback))
