"""
Formats the configured tool list for each provider API.

Tools are configured as names (``"web_search"``, ``"file_search"``,
``"code_interpreter"``, ``"functions"``) or as ready-made dicts. The
``"functions"`` entry expands every definition in ``tool_config["functions"]``.
"""
from typing import Any, Dict, List, Union

from ...tools.models import FunctionDefinition

ToolSpec = Union[str, Dict[str, Any]]

WEB_SEARCH_NAMES = ("web_search", "web_search_preview")
MAX_VECTOR_STORES = 2
ANTHROPIC_WEB_SEARCH_TYPE = "web_search_20250305"


class ToolFormatter:
    """Builds the ``tools`` payload for one provider API."""

    def __init__(self, tools: List[ToolSpec], tool_config: Dict[str, Any]):
        self.tools = list(tools or [])
        self.tool_config = dict(tool_config or {})

    def has_web_search(self) -> bool:
        for tool in self.tools:
            if isinstance(tool, dict):
                if tool.get("type") in WEB_SEARCH_NAMES or str(tool.get("type", "")).startswith("web_search"):
                    return True
            elif str(tool) in WEB_SEARCH_NAMES:
                return True
        return False

    def function_definitions(self) -> List[FunctionDefinition]:
        return [FunctionDefinition(**func) for func in self.tool_config.get("functions", []) or []]

    def for_responses(self) -> List[Dict[str, Any]]:
        formatted: List[Dict[str, Any]] = []
        for tool in self.tools:
            if isinstance(tool, dict):
                formatted.append(tool)
            elif tool == "web_search":
                formatted.append({"type": "web_search_preview"})
            elif tool == "file_search":
                formatted.append(self._responses_file_search())
            elif tool == "code_interpreter":
                formatted.append({"type": "code_interpreter", "container": {"type": "auto"}})
            elif tool == "functions":
                for func in self.function_definitions():
                    entry = {
                        "type": "function",
                        "name": func.name,
                        "description": func.description,
                        "parameters": func.parameters,
                    }
                    if func.strict is not None:
                        entry["strict"] = func.strict
                    formatted.append(entry)
            else:
                formatted.append({"type": str(tool)})
        return formatted

    def for_chat_completions(self) -> List[Dict[str, Any]]:
        formatted: List[Dict[str, Any]] = []
        for tool in self.tools:
            if isinstance(tool, dict):
                formatted.append(tool)
            elif tool == "functions":
                for func in self.function_definitions():
                    function: Dict[str, Any] = {
                        "name": func.name,
                        "description": func.description,
                        "parameters": func.parameters,
                    }
                    if func.strict is not None:
                        function["strict"] = func.strict
                    formatted.append({"type": "function", "function": function})
            # Built-in tools are not available on Chat Completions
        return formatted

    def for_anthropic(self) -> List[Dict[str, Any]]:
        formatted: List[Dict[str, Any]] = []
        for tool in self.tools:
            if isinstance(tool, dict):
                formatted.append(tool)
            elif tool == "functions":
                for func in self.function_definitions():
                    formatted.append({
                        "name": func.name,
                        "description": func.description,
                        "input_schema": func.parameters,
                    })
            elif tool == "web_search":
                formatted.append({"type": ANTHROPIC_WEB_SEARCH_TYPE, "name": "web_search"})
        return formatted

    def for_gemini(self) -> List[Dict[str, Any]]:
        formatted: List[Dict[str, Any]] = []
        declarations: List[Dict[str, Any]] = []
        for tool in self.tools:
            if isinstance(tool, dict):
                formatted.append(tool)
            elif tool == "functions":
                declarations.extend(
                    {"name": func.name, "description": func.description, "parameters": func.parameters}
                    for func in self.function_definitions()
                )
        # All declarations travel in a single tool entry
        if declarations:
            formatted.append({"function_declarations": declarations})
        return formatted

    def _responses_file_search(self) -> Dict[str, Any]:
        file_search_config = self.tool_config.get("file_search", {}) or {}
        vector_store_ids = list(file_search_config.get("vector_store_ids", []) or [])[:MAX_VECTOR_STORES]
        entry: Dict[str, Any] = {"type": "file_search"}
        if vector_store_ids:
            entry["vector_store_ids"] = vector_store_ids
        return entry
