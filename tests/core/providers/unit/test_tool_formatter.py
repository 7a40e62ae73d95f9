# tests/core/providers/unit/test_tool_formatter.py
"""
Unit tests for ToolFormatter.
"""
import pytest

from conversation_engine.core.providers.tool_formatter import ToolFormatter


@pytest.fixture
def functions(weather_function):
    return {"functions": [weather_function, dict(weather_function, name="get_time", strict=True)]}


class TestResponsesFormat:

    def test_builtin_tools(self):
        formatter = ToolFormatter(
            ["web_search", "file_search", "code_interpreter"],
            {"file_search": {"vector_store_ids": ["vs_1", "vs_2", "vs_3"]}},
        )

        assert formatter.for_responses() == [
            {"type": "web_search_preview"},
            {"type": "file_search", "vector_store_ids": ["vs_1", "vs_2"]},
            {"type": "code_interpreter", "container": {"type": "auto"}},
        ]

    def test_functions_are_flat(self, functions):
        tools = ToolFormatter(["functions"], functions).for_responses()

        assert tools[0]["type"] == "function"
        assert tools[0]["name"] == "get_weather"
        assert tools[0]["parameters"]["required"] == ["city"]
        assert "strict" not in tools[0]
        assert tools[1]["strict"] is True

    def test_dicts_pass_through_and_unknown_names_become_types(self):
        raw_tool = {"type": "image_generation", "size": "1024x1024"}

        assert ToolFormatter([raw_tool, "mcp"], {}).for_responses() == [raw_tool, {"type": "mcp"}]


class TestChatCompletionsFormat:

    def test_only_functions_are_sent(self, functions):
        tools = ToolFormatter(["web_search", "functions"], functions).for_chat_completions()

        assert [t["type"] for t in tools] == ["function", "function"]
        assert tools[0]["function"]["name"] == "get_weather"
        assert tools[1]["function"]["strict"] is True


class TestAnthropicFormat:

    def test_functions_and_web_search(self, functions):
        tools = ToolFormatter(["functions", "web_search", "code_interpreter"], functions).for_anthropic()

        assert tools[0] == {
            "name": "get_weather",
            "description": "Get the weather for a city",
            "input_schema": functions["functions"][0]["parameters"],
        }
        assert tools[2] == {"type": "web_search_20250305", "name": "web_search"}
        assert len(tools) == 3


def test_has_web_search():
    assert ToolFormatter(["web_search"], {}).has_web_search()
    assert ToolFormatter([{"type": "web_search_preview"}], {}).has_web_search()
    assert not ToolFormatter(["functions"], {}).has_web_search()


def test_gemini_declarations_share_one_tool(functions):
    tools = ToolFormatter(["web_search", "functions"], functions).for_gemini()

    assert len(tools) == 1
    assert [d["name"] for d in tools[0]["function_declarations"]] == ["get_weather", "get_time"]
    assert "strict" not in tools[0]["function_declarations"][1]
