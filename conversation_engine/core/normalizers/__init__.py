"""
Response normalizers, one per provider API.
"""
from .base import parse_json_arguments
from .openai_chat import normalize_chat_completion
from .openai_responses import normalize_response
from .openai_assistants import normalize_assistant_run
from .anthropic_messages import normalize_message
from .google_gemini import normalize_gemini_response

__all__ = [
    'parse_json_arguments',
    'normalize_chat_completion',
    'normalize_response',
    'normalize_assistant_run',
    'normalize_message',
    'normalize_gemini_response',
]
