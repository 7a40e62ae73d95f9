"""
Normalizer for OpenAI Chat Completions responses.
"""
from typing import Any, Dict

from ..models import NormalizedResponse
from .base import as_dict, as_list, usage_from, function_tool_call


def normalize_chat_completion(raw: Dict[str, Any]) -> NormalizedResponse:
    """Convert a ``chat.completions.create`` response dict into a NormalizedResponse."""
    choices = as_list(raw.get("choices"))
    first_choice = as_dict(choices[0]) if choices else {}
    message = as_dict(first_choice.get("message"))

    tool_calls = []
    for tc in as_list(message.get("tool_calls")):
        tc = as_dict(tc)
        if tc.get("type", "function") != "function":
            continue
        function = as_dict(tc.get("function"))
        tool_calls.append(function_tool_call(tc.get("id"), function.get("name"), function.get("arguments")))

    usage = as_dict(raw.get("usage"))
    return NormalizedResponse(
        text=message.get("content") or "",
        usage=usage_from(usage.get("prompt_tokens"), usage.get("completion_tokens"), usage.get("total_tokens")),
        model=raw.get("model"),
        tool_calls=tool_calls,
        response_id=None,
        api_metadata={
            "completion_id": raw.get("id"),
            "finish_reason": first_choice.get("finish_reason"),
        },
        raw=raw,
    )
