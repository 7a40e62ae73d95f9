"""
Shared helpers for response normalizers.

Normalizers are pure functions: they read a raw provider response (a plain
dict, SDK objects are converted with ``model_dump()`` before they get here)
and return a new ``NormalizedResponse`` without touching the input.
"""
from typing import Any, Dict, List, Optional
import json

from ...tools.models import ToolCall
from ..models import TokenUsage


def parse_json_arguments(arguments: Any) -> Dict[str, Any]:
    """
    Parse function call arguments.

    ``None`` and malformed JSON become ``{}``. Dicts pass through unchanged.
    """
    if arguments is None:
        return {}
    if isinstance(arguments, dict):
        return arguments
    try:
        parsed = json.loads(arguments)
    except (TypeError, ValueError):
        return {}
    return parsed if isinstance(parsed, dict) else {}


def as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def usage_from(prompt: Optional[int], completion: Optional[int], total: Optional[int] = None) -> TokenUsage:
    """Build usage, computing the total when the provider omits it."""
    prompt = prompt or 0
    completion = completion or 0
    return TokenUsage(
        prompt_tokens=prompt,
        completion_tokens=completion,
        total_tokens=total if total is not None else prompt + completion,
    )


def function_tool_call(call_id: Optional[str], name: Optional[str], arguments: Any) -> ToolCall:
    return ToolCall(
        id=call_id or "",
        function_name=name or "",
        arguments=parse_json_arguments(arguments),
    )
