"""
Normalizer for Anthropic Messages API responses.
"""
from typing import Any, Dict, List

from ..models import NormalizedResponse
from .base import as_dict, as_list, usage_from, function_tool_call


def normalize_message(raw: Dict[str, Any]) -> NormalizedResponse:
    """Convert a ``messages.create`` response dict into a NormalizedResponse."""
    blocks = [as_dict(block) for block in as_list(raw.get("content"))]
    usage = as_dict(raw.get("usage"))
    input_tokens = usage.get("input_tokens") or 0
    output_tokens = usage.get("output_tokens") or 0

    return NormalizedResponse(
        text="\n".join(b["text"] for b in blocks if b.get("type") == "text" and b.get("text")),
        usage=usage_from(input_tokens, output_tokens, input_tokens + output_tokens),
        model=raw.get("model"),
        tool_calls=[
            function_tool_call(b.get("id"), b.get("name"), b.get("input"))
            for b in blocks
            if b.get("type") == "tool_use"
        ],
        web_search_results=_web_search_results(blocks),
        response_id=None,
        api_metadata={
            "message_id": raw.get("id"),
            "stop_reason": raw.get("stop_reason"),
        },
        raw=raw,
    )


def _web_search_results(blocks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    citations = []
    for b in blocks:
        if b.get("type") != "text":
            continue
        for citation in as_list(b.get("citations")):
            citation = as_dict(citation)
            if citation.get("type") == "web_search_result_location":
                citations.append({
                    "title": citation.get("title"),
                    "url": citation.get("url"),
                    "cited_text": citation.get("cited_text"),
                })
    queries = {
        b.get("id"): as_dict(b.get("input")).get("query")
        for b in blocks
        if b.get("type") == "server_tool_use" and b.get("name") == "web_search"
    }

    results = []
    for b in blocks:
        if b.get("type") != "web_search_tool_result":
            continue
        content = b.get("content")
        is_error = isinstance(content, dict)
        results.append({
            "id": b.get("tool_use_id"),
            "status": "failed" if is_error else "completed",
            "query": queries.get(b.get("tool_use_id")),
            "sources": [] if is_error else [
                {"title": as_dict(s).get("title"), "url": as_dict(s).get("url"), "snippet": None}
                for s in as_list(content)
                if as_dict(s).get("type") == "web_search_result"
            ],
            "citations": list(citations),
        })
    return results
