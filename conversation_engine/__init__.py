"""
Conversation execution engine: runs simulated multi-turn conversations
against LLM provider APIs and returns a provider-agnostic result.
"""
from .core import (
    ApiType, ProviderConfig, ConversationParams, ConversationResult, ConversationRunner,
)
from .config import EngineConfig

__version__ = "0.1.0"

__all__ = [
    'ApiType',
    'ProviderConfig',
    'ConversationParams',
    'ConversationResult',
    'ConversationRunner',
    'EngineConfig',
]
