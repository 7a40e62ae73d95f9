"""
Core conversation engine components.
"""
from .api_types import ApiType
from .models import (
    TokenUsage, NormalizedResponse, Message, ConversationInput, ConversationState,
    TurnResult, ProviderConfig, ConversationParams, ConversationResult,
)
from .provider_factory import ProviderFactory
from .function_call_loop import FunctionCallLoop, MAX_ITERATIONS
from .interlocutor_simulator import InterlocutorSimulator, END_MARKER
from .usage_aggregator import UsageAggregator, ToolResultExtractor
from .output_builder import OutputBuilder
from .conversation_runner import ConversationRunner

__all__ = [
    'ApiType',
    'TokenUsage',
    'NormalizedResponse',
    'Message',
    'ConversationInput',
    'ConversationState',
    'TurnResult',
    'ProviderConfig',
    'ConversationParams',
    'ConversationResult',
    'ProviderFactory',
    'FunctionCallLoop',
    'MAX_ITERATIONS',
    'InterlocutorSimulator',
    'END_MARKER',
    'UsageAggregator',
    'ToolResultExtractor',
    'OutputBuilder',
    'ConversationRunner',
]
