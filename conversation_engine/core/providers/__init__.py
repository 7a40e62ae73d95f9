"""
Provider adapters, one per supported provider API.
"""
from .base_provider import BaseProvider
from .openai_provider import OpenAIProvider
from .openai_chat_provider import OpenAIChatProvider
from .openai_responses_provider import OpenAIResponsesProvider
from .openai_assistants_provider import OpenAIAssistantsProvider
from .anthropic_provider import AnthropicProvider
from .gemini_provider import GeminiProvider
from .tool_formatter import ToolFormatter

__all__ = [
    'BaseProvider',
    'OpenAIProvider',
    'OpenAIChatProvider',
    'OpenAIResponsesProvider',
    'OpenAIAssistantsProvider',
    'AnthropicProvider',
    'GeminiProvider',
    'ToolFormatter',
]
