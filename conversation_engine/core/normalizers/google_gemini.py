"""
Normalizer for Google Gemini ``generate_content`` responses.

Gemini function calls carry no id, so ids are derived from the call's position
in the candidate. The continuation sends results back by function name.
"""
from typing import Any, Dict, List

from ..models import NormalizedResponse
from .base import as_dict, as_list, usage_from, function_tool_call


def gemini_call_id(position: int, name: str) -> str:
    return f"gemini-call-{position}-{name}"


def normalize_gemini_response(raw: Dict[str, Any]) -> NormalizedResponse:
    """Convert a ``GenerateContentResponse.to_dict()`` payload into a NormalizedResponse."""
    candidates = as_list(raw.get("candidates"))
    candidate = as_dict(candidates[0]) if candidates else {}
    parts = [as_dict(p) for p in as_list(as_dict(candidate.get("content")).get("parts"))]

    texts = []
    tool_calls = []
    for position, part in enumerate(parts):
        if part.get("text"):
            texts.append(part["text"])
        function_call = as_dict(part.get("function_call"))
        if function_call:
            name = function_call.get("name") or ""
            tool_calls.append(function_tool_call(gemini_call_id(position, name), name, function_call.get("args")))

    usage = as_dict(raw.get("usage_metadata"))
    return NormalizedResponse(
        text="".join(texts),
        usage=usage_from(
            usage.get("prompt_token_count"),
            usage.get("candidates_token_count"),
            usage.get("total_token_count"),
        ),
        model=raw.get("model_version"),
        tool_calls=tool_calls,
        web_search_results=_grounding_results(candidate),
        response_id=None,
        api_metadata={
            "response_id": raw.get("response_id"),
            "finish_reason": candidate.get("finish_reason"),
        },
        raw=raw,
    )


def _grounding_results(candidate: Dict[str, Any]) -> List[Dict[str, Any]]:
    grounding = as_dict(candidate.get("grounding_metadata"))
    if not grounding:
        return []
    sources = [
        {"title": as_dict(c.get("web")).get("title"), "url": as_dict(c.get("web")).get("uri"), "snippet": None}
        for c in (as_dict(chunk) for chunk in as_list(grounding.get("grounding_chunks")))
        if c.get("web")
    ]
    return [{
        "id": None,
        "status": "completed",
        "query": ", ".join(str(q) for q in as_list(grounding.get("web_search_queries"))) or None,
        "sources": sources,
        "citations": [],
    }]
