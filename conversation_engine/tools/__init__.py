"""
Function calling support: tool call models and the executor that answers them.
"""
from .models import ToolCall, FunctionOutput, FunctionDefinition
from .function_executor import FunctionExecutor

__all__ = [
    'ToolCall',
    'FunctionOutput',
    'FunctionDefinition',
    'FunctionExecutor',
]
