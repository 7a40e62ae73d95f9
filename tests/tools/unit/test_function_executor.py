# tests/tools/unit/test_function_executor.py
"""
Unit tests for the FunctionExecutor.
"""
import asyncio
import json
import pytest

from conversation_engine.exceptions import AIToolError
from conversation_engine.tools.function_executor import FunctionExecutor
from conversation_engine.tools.models import ToolCall


# --- Handlers ---
def lookup_city(city):
    return {"city": city, "population": 1000}


async def async_lookup_city(city):
    return f"{city} is lovely"


def failing_handler(**kwargs):
    raise ValueError("database offline")


async def slow_handler(**kwargs):
    await asyncio.sleep(5)
    return "too late"


@pytest.fixture
def tool_call():
    return ToolCall(id="call_1", function_name="lookup_city", arguments={"city": "Porto"})


@pytest.mark.asyncio
async def test_default_mock_output(tool_call, mock_logger):
    output = await FunctionExecutor(logger=mock_logger).execute(tool_call)

    assert json.loads(output) == {
        "success": True,
        "message": "Mock result for lookup_city",
        "data": {"city": "Porto"},
    }


@pytest.mark.asyncio
async def test_string_mock_output_is_used_verbatim(tool_call, mock_logger):
    executor = FunctionExecutor(mock_function_outputs={"lookup_city": "Porto: 230k"}, logger=mock_logger)

    assert await executor.execute(tool_call) == "Porto: 230k"


@pytest.mark.asyncio
async def test_structured_mock_output_is_serialized(tool_call, mock_logger):
    executor = FunctionExecutor(mock_function_outputs={"lookup_city": {"population": 5}}, logger=mock_logger)

    assert json.loads(await executor.execute(tool_call)) == {"population": 5}


@pytest.mark.asyncio
async def test_mock_output_takes_precedence_over_handler(tool_call, mock_logger):
    executor = FunctionExecutor(
        mock_function_outputs={"lookup_city": "mocked"},
        handlers={"lookup_city": lookup_city},
        logger=mock_logger,
    )

    assert await executor.execute(tool_call) == "mocked"


@pytest.mark.asyncio
async def test_sync_handler(tool_call, mock_logger):
    executor = FunctionExecutor(handlers={"lookup_city": lookup_city}, logger=mock_logger)

    assert json.loads(await executor.execute(tool_call)) == {"city": "Porto", "population": 1000}


@pytest.mark.asyncio
async def test_async_handler(tool_call, mock_logger):
    executor = FunctionExecutor(handlers={"lookup_city": async_lookup_city}, logger=mock_logger)

    assert await executor.execute(tool_call) == "Porto is lovely"


@pytest.mark.asyncio
async def test_handler_error_is_reported_to_model(tool_call, mock_logger):
    executor = FunctionExecutor(handlers={"lookup_city": failing_handler}, logger=mock_logger)

    output = json.loads(await executor.execute(tool_call))

    assert output == {"success": False, "error": "ValueError: database offline"}
    mock_logger.error.assert_called_once()


@pytest.mark.asyncio
async def test_handler_timeout(tool_call, mock_logger):
    executor = FunctionExecutor(handlers={"lookup_city": slow_handler}, timeout=0.01, logger=mock_logger)

    output = json.loads(await executor.execute(tool_call))

    assert output["success"] is False
    assert "timed out" in output["error"]


@pytest.mark.asyncio
async def test_execute_all_keeps_order_and_ids(mock_logger):
    calls = [
        ToolCall(id="call_b", function_name="second", arguments={}),
        ToolCall(id="call_a", function_name="first", arguments={"x": 1}),
    ]

    outputs = await FunctionExecutor(logger=mock_logger).execute_all(calls)

    assert [o.call_id for o in outputs] == ["call_b", "call_a"]
    assert [o.function_name for o in outputs] == ["second", "first"]


def test_non_callable_handler_is_rejected(mock_logger):
    with pytest.raises(AIToolError) as exc_info:
        FunctionExecutor(handlers={"broken": "not a function"}, logger=mock_logger)

    assert exc_info.value.tool_name == "broken"
