"""
Shared OpenAI provider plumbing: client creation and error mapping.
"""
from typing import Dict, Any, Type

import openai
from openai import AsyncOpenAI

from ...exceptions import (
    AIProviderError, AIAuthenticationError, AIRateLimitError, ModelNotFoundError,
    InvalidRequestError, AITimeoutError,
)
from .base_provider import BaseProvider


class OpenAIProvider(BaseProvider):
    """Base for the OpenAI Chat Completions, Responses and Assistants adapters."""

    provider_name = "openai"

    def _create_client(self, api_key: str, provider_settings: Dict[str, Any]) -> AsyncOpenAI:
        client_kwargs: Dict[str, Any] = {"api_key": api_key}
        if provider_settings.get("base_url"):
            client_kwargs["base_url"] = provider_settings["base_url"]
        if provider_settings.get("organization"):
            client_kwargs["organization"] = provider_settings["organization"]
        if provider_settings.get("timeout"):
            client_kwargs["timeout"] = provider_settings["timeout"]
        # Callers own retries
        client_kwargs["max_retries"] = 0
        return AsyncOpenAI(**client_kwargs)

    def _get_error_map(self) -> Dict[Type[Exception], Type[AIProviderError]]:
        """Returns the specific error mapping for OpenAI."""
        return {
            openai.AuthenticationError: AIAuthenticationError,
            openai.PermissionDeniedError: AIAuthenticationError,
            openai.RateLimitError: AIRateLimitError,
            openai.NotFoundError: ModelNotFoundError,
            openai.BadRequestError: InvalidRequestError,
            openai.UnprocessableEntityError: InvalidRequestError,
            # APITimeoutError subclasses APIConnectionError, so it must come first
            openai.APITimeoutError: AITimeoutError,
            openai.APIConnectionError: AIProviderError,
            openai.InternalServerError: AIProviderError,
            openai.APIStatusError: AIProviderError,
        }
