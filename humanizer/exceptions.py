"""Error taxonomy for the refinement pipeline.

ValidationError is fatal and stops a run. ProviderError and
RequestTimeoutError are retried by the controller before they surface.
ParseError only ever fails the analyzer branch of a round.
"""

from typing import Optional


class HumanizerError(Exception):
    """Base class for all pipeline errors."""
    pass


class ValidationError(HumanizerError):
    """Raised when a capability is missing or misconfigured (no model, no API key)."""
    pass


class ProviderError(HumanizerError):
    """Raised on transport or HTTP failure from an external capability."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RequestTimeoutError(ProviderError, TimeoutError):
    """Raised when a call or the shared analysis deadline runs out."""
    pass


class ParseError(HumanizerError):
    """Raised when the analyzer reply is not JSON matching the analysis schema."""

    def __init__(self, message: str, raw_response: str = ""):
        super().__init__(message)
        self.raw_response = raw_response
