"""
AI service errors.

Validation failures are caller mistakes (400-class). Configuration and
upstream failures mean no answer could be produced (5xx-class). Unparseable
model output is not an error: it degrades to a fallback result instead.
"""
from typing import Iterable, List


class AIServiceError(Exception):
    """Base exception for the AI assistance layer."""
    pass


class ValidationError(AIServiceError):
    """Raised when required input fields are missing or have the wrong type."""

    def __init__(self, fields: Iterable[str], message: str = None):
        self.fields: List[str] = list(fields)
        if message is None:
            message = f"Missing or invalid required field(s): {', '.join(self.fields)}"
        super().__init__(message)


class ConfigurationError(AIServiceError):
    """Raised when the completion client has no usable API credential."""
    pass


class UpstreamError(AIServiceError):
    """Raised when the remote completion call fails or times out."""
    pass
