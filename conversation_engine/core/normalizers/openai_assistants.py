"""
Normalizer for OpenAI Assistants API runs.

The assistants adapter assembles one dict per run::

    {
        "thread_id": ..., "run_id": ..., "assistant_id": ..., "model": ...,
        "status": "completed" | "requires_action",
        "content": "<latest assistant message text>",
        "annotations": [...],
        "usage": {...},
        "run_steps": {"data": [...]},
        "required_action": {...} or None,
    }

Pending function calls come from ``required_action``. Function calls in the
run steps of a completed run were already answered, so they are reported in
``api_metadata`` only.
"""
from typing import Any, Dict, List

from ..models import NormalizedResponse
from .base import as_dict, as_list, usage_from, function_tool_call


def normalize_assistant_run(raw: Dict[str, Any]) -> NormalizedResponse:
    usage = as_dict(raw.get("usage"))
    steps = [as_dict(step) for step in as_list(as_dict(raw.get("run_steps")).get("data"))]
    step_tool_calls = [
        as_dict(tc)
        for step in steps
        if step.get("type") == "tool_calls"
        for tc in as_list(as_dict(step.get("step_details")).get("tool_calls"))
    ]

    return NormalizedResponse(
        text=raw.get("content") or "",
        usage=usage_from(usage.get("prompt_tokens"), usage.get("completion_tokens"), usage.get("total_tokens")),
        model=raw.get("model") or raw.get("assistant_id"),
        tool_calls=_pending_function_calls(raw),
        code_interpreter_results=_code_interpreter_results(step_tool_calls),
        file_search_results=_file_search_results(step_tool_calls),
        response_id=raw.get("thread_id"),
        api_metadata={
            "thread_id": raw.get("thread_id"),
            "run_id": raw.get("run_id"),
            "status": raw.get("status"),
            "annotations": list(as_list(raw.get("annotations"))),
            "executed_functions": [
                as_dict(tc.get("function")).get("name")
                for tc in step_tool_calls
                if tc.get("type") == "function"
            ],
        },
        raw=raw,
    )


def _pending_function_calls(raw: Dict[str, Any]):
    required = as_dict(raw.get("required_action"))
    submit = as_dict(required.get("submit_tool_outputs"))
    calls = []
    for tc in as_list(submit.get("tool_calls")):
        tc = as_dict(tc)
        if tc.get("type", "function") != "function":
            continue
        function = as_dict(tc.get("function"))
        calls.append(function_tool_call(tc.get("id"), function.get("name"), function.get("arguments")))
    return calls


def _file_search_results(step_tool_calls: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    results = []
    for tc in step_tool_calls:
        if tc.get("type") != "file_search":
            continue
        for hit in as_list(as_dict(tc.get("file_search")).get("results")):
            hit = as_dict(hit)
            results.append({
                "file_id": hit.get("file_id"),
                "file_name": hit.get("file_name"),
                "score": hit.get("score"),
                "content": hit.get("content"),
            })
    return results


def _code_interpreter_results(step_tool_calls: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    results = []
    for tc in step_tool_calls:
        if tc.get("type") != "code_interpreter":
            continue
        details = as_dict(tc.get("code_interpreter"))
        outputs = [as_dict(o) for o in as_list(details.get("outputs"))]
        results.append({
            "id": tc.get("id"),
            "code": details.get("input"),
            "output": "\n".join(o["logs"] for o in outputs if o.get("type") == "logs" and o.get("logs")),
            "files_created": [
                as_dict(o.get("image")).get("file_id") for o in outputs if o.get("type") == "image"
            ],
        })
    return results
