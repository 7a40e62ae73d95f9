"""
Exception hierarchy for the conversation engine.
"""
from typing import Optional


class AIFrameworkError(Exception):
    """Base exception for all conversation engine errors."""
    pass


class AIConfigError(AIFrameworkError):
    """Raised for invalid or incomplete configuration. Never retried."""

    def __init__(self, message: str, config_name: Optional[str] = None):
        super().__init__(message)
        self.config_name = config_name


class AIProviderError(AIFrameworkError):
    """Raised when a provider API call fails."""

    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code

    def __str__(self) -> str:
        base = super().__str__()
        if self.provider:
            return f"[{self.provider}] {base}"
        return base


class AIAuthenticationError(AIProviderError):
    """Authentication or permission failure at the provider."""
    pass


class AIRateLimitError(AIProviderError):
    """Provider rate limit exceeded."""
    pass


class ModelNotFoundError(AIProviderError):
    """Requested model does not exist or is not accessible."""

    def __init__(self, message: str, model_id: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.model_id = model_id


class InvalidRequestError(AIProviderError):
    """Provider rejected the request payload."""
    pass


class AITimeoutError(AIProviderError):
    """Provider call (or run polling) timed out."""
    pass


class ContentModerationError(AIProviderError):
    """Provider refused the prompt or the response on safety grounds."""

    def __init__(self, message: str, reason: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.reason = reason


class AIToolError(AIFrameworkError):
    """Raised for function handler misconfiguration."""

    def __init__(self, message: str, tool_name: Optional[str] = None):
        super().__init__(message)
        self.tool_name = tool_name
