"""
Closed set of supported provider API variants.
"""
from enum import Enum
from typing import Optional


class ApiType(str, Enum):
    """A (provider, api) pair the engine can talk to."""
    OPENAI_CHAT_COMPLETIONS = "openai_chat_completions"
    OPENAI_RESPONSES = "openai_responses"
    OPENAI_ASSISTANTS = "openai_assistants"
    ANTHROPIC_MESSAGES = "anthropic_messages"
    GOOGLE_GEMINI = "google_gemini"

    @property
    def provider(self) -> str:
        return _PAIRS[self][0]

    @property
    def api(self) -> str:
        return _PAIRS[self][1]

    @classmethod
    def from_config(cls, provider: Optional[str], api: Optional[str]) -> Optional["ApiType"]:
        """Resolve a (provider, api) pair, or ``None`` if the pair is unsupported."""
        if not provider or not api:
            return None
        key = (str(provider).lower(), str(api).lower())
        for api_type, pair in _PAIRS.items():
            if pair == key:
                return api_type
        return None


_PAIRS = {
    ApiType.OPENAI_CHAT_COMPLETIONS: ("openai", "chat_completions"),
    ApiType.OPENAI_RESPONSES: ("openai", "responses"),
    ApiType.OPENAI_ASSISTANTS: ("openai", "assistants"),
    ApiType.ANTHROPIC_MESSAGES: ("anthropic", "messages"),
    ApiType.GOOGLE_GEMINI: ("google", "gemini"),
}
