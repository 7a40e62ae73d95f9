"""
Normalizer for OpenAI Responses API responses.

Only ``function_call`` output items become tool calls. Built-in tool items
(``web_search_call``, ``file_search_call``, ``code_interpreter_call``) are
routed to their own result lists.
"""
from typing import Any, Dict, List, Optional

from ..models import NormalizedResponse
from .base import as_dict, as_list, usage_from, function_tool_call


def normalize_response(raw: Dict[str, Any]) -> NormalizedResponse:
    """Convert a ``responses.create`` response dict into a NormalizedResponse."""
    output = [as_dict(item) for item in as_list(raw.get("output"))]
    usage = as_dict(raw.get("usage"))
    input_tokens = usage.get("input_tokens") or 0
    output_tokens = usage.get("output_tokens") or 0

    return NormalizedResponse(
        text=_extract_text(raw, output),
        usage=usage_from(input_tokens, output_tokens, input_tokens + output_tokens),
        model=raw.get("model"),
        tool_calls=[
            function_tool_call(item.get("call_id") or item.get("id"), item.get("name"), item.get("arguments"))
            for item in output
            if item.get("type") == "function_call"
        ],
        web_search_results=_extract_web_search_results(output),
        code_interpreter_results=_extract_code_interpreter_results(output),
        file_search_results=_extract_file_search_results(output),
        response_id=raw.get("id"),
        api_metadata={"response_id": raw.get("id"), "status": raw.get("status")},
        raw=raw,
    )


def _extract_text(raw: Dict[str, Any], output: List[Dict[str, Any]]) -> str:
    parts = []
    for item in output:
        if item.get("type") != "message":
            continue
        for content in as_list(item.get("content")):
            content = as_dict(content)
            if content.get("type") == "output_text" and content.get("text"):
                parts.append(content["text"])
    text = "\n".join(parts)
    return text or raw.get("output_text") or _plain_text(raw.get("text")) or ""


def _plain_text(value: Any) -> Optional[str]:
    # ``text`` is a format config object on real responses, a string only on hand-built ones
    return value if isinstance(value, str) else None


def _extract_url_citations(output: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    citations = []
    for item in output:
        if item.get("type") != "message":
            continue
        for content in as_list(item.get("content")):
            for annotation in as_list(as_dict(content).get("annotations")):
                annotation = as_dict(annotation)
                if annotation.get("type") != "url_citation":
                    continue
                citations.append({
                    "title": annotation.get("title"),
                    "url": annotation.get("url"),
                    "start_index": annotation.get("start_index"),
                    "end_index": annotation.get("end_index"),
                })
    return citations


def _extract_web_search_results(output: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    citations = _extract_url_citations(output)
    results = []
    for item in output:
        if item.get("type") != "web_search_call":
            continue
        action = as_dict(item.get("action"))
        queries = as_list(action.get("queries"))
        results.append({
            "id": item.get("id"),
            "status": item.get("status"),
            "query": action.get("query") or (queries[0] if queries else None) or item.get("query"),
            "sources": [
                {
                    "title": as_dict(source).get("title"),
                    "url": as_dict(source).get("url"),
                    "snippet": as_dict(source).get("snippet"),
                }
                for source in as_list(action.get("sources"))
            ],
            "citations": list(citations),
        })
    return results


def _extract_file_search_results(output: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    results = []
    for item in output:
        if item.get("type") != "file_search_call":
            continue
        hits = [as_dict(hit) for hit in as_list(item.get("results"))]
        queries = as_list(item.get("queries"))
        results.append({
            "query": item.get("query") or (queries[0] if queries else None),
            "files": [hit.get("filename") for hit in hits],
            "scores": [hit.get("score") for hit in hits],
        })
    return results


def _extract_code_interpreter_results(output: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    results = []
    for item in output:
        if item.get("type") != "code_interpreter_call":
            continue
        # Older payloads nest details under "code_interpreter"
        details = as_dict(item.get("code_interpreter")) or item
        code = details.get("code") or item.get("code")
        results.append({
            "id": item.get("id"),
            "status": item.get("status"),
            "code": code,
            "language": details.get("language") or detect_code_language(code),
            "output": _code_output(details),
            "files_created": list(as_list(details.get("files_created"))),
            "error": details.get("error"),
        })
    return results


def _code_output(details: Dict[str, Any]) -> str:
    value = details.get("output", details.get("outputs"))
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        pieces = []
        for entry in value:
            entry = as_dict(entry)
            piece = entry.get("text") or entry.get("logs")
            if piece:
                pieces.append(piece)
        return "\n".join(pieces)
    return str(value)


def detect_code_language(code: Optional[str]) -> Optional[str]:
    """Best-effort language guess for code interpreter snippets."""
    if not code:
        return None
    if "import " in code or "def " in code or "print(" in code:
        return "python"
    if "const " in code or "let " in code or "function " in code:
        return "javascript"
    return None
