# tests/core/unit/test_conversation_runner.py
"""
Unit tests for the ConversationRunner, all in mock mode.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from conversation_engine.core.conversation_runner import ConversationRunner
from conversation_engine.core.interfaces import InterlocutorInterface
from conversation_engine.core.models import ConversationParams, ProviderConfig
from conversation_engine.core.providers import OpenAIChatProvider, OpenAIResponsesProvider
from conversation_engine.exceptions import AIConfigError


def _runner(provider_config, engine_config, mock_logger, **kwargs):
    return ConversationRunner(provider_config, config=engine_config, logger=mock_logger, **kwargs)


@pytest.mark.asyncio
async def test_single_turn_responses(responses_config, engine_config, mock_logger):
    runner = _runner(responses_config, engine_config, mock_logger)

    result = await runner.run(ConversationParams(
        system_prompt="You are helpful.",
        first_user_message="Hello",
        max_turns=1,
    ))

    assert [m.role for m in result.messages] == ["user", "assistant"]
    assert result.messages[0].content == "Hello"
    assert result.messages[1].content == "Mock Response API response for testing (1)"
    assert result.total_turns == 1
    assert result.status == "completed"
    assert result.tokens.total_tokens == 30
    assert result.previous_response_id == "resp_mock_1"
    assert result.tools_used == ["web_search", "functions"]
    assert result.rendered_prompt == "[System]\nYou are helpful.\n\n[User]\nHello"
    assert result.response_time_ms >= 0


@pytest.mark.asyncio
async def test_multi_turn_chat_completions(chat_config, engine_config, mock_logger):
    runner = _runner(chat_config, engine_config, mock_logger)

    result = await runner.run(ConversationParams(
        system_prompt="sys",
        first_user_message="Hi",
        interlocutor_prompt="Act as a curious customer.",
        max_turns=3,
    ))

    assert [m.role for m in result.messages] == ["user", "assistant"] * 3
    assert [m.turn for m in result.messages] == [1, 1, 2, 2, 3, 3]
    assert result.messages[2].content == "I have another question."
    assert result.messages[5].content == "Mock LLM response for testing (turn 3)"
    assert result.total_turns == 3
    assert result.tokens.total_tokens == 90
    # Stateless APIs have no continuation handle
    assert result.previous_response_id is None


@pytest.mark.asyncio
async def test_stateless_history_is_replayed(chat_config, engine_config, mock_logger):
    provider = OpenAIChatProvider(chat_config, config=engine_config, logger=mock_logger)
    runner = _runner(chat_config, engine_config, mock_logger, provider=provider)
    seen_inputs = []
    original_call = provider.call

    async def recording_call(conversation_input, state=None):
        seen_inputs.append(conversation_input)
        return await original_call(conversation_input, state)

    with patch.object(provider, "call", side_effect=recording_call):
        await runner.run(ConversationParams(
            first_user_message="First", interlocutor_prompt="persona", max_turns=2,
        ))

    second_turn_messages = seen_inputs[1].messages
    assert [m["role"] for m in second_turn_messages] == ["user", "assistant", "user"]
    assert second_turn_messages[0]["content"] == "First"
    assert second_turn_messages[2]["content"] == "I have another question."


@pytest.mark.asyncio
async def test_stateful_turns_send_previous_response_id(responses_config, engine_config, mock_logger):
    provider = OpenAIResponsesProvider(responses_config, config=engine_config, logger=mock_logger)
    runner = _runner(responses_config, engine_config, mock_logger, provider=provider)
    seen_inputs = []
    original_call = provider.call

    async def recording_call(conversation_input, state=None):
        seen_inputs.append(conversation_input)
        return await original_call(conversation_input, state)

    with patch.object(provider, "call", side_effect=recording_call):
        result = await runner.run(ConversationParams(
            system_prompt="sys", first_user_message="One", interlocutor_prompt="persona", max_turns=2,
        ))

    assert seen_inputs[0].previous_response_id is None
    assert seen_inputs[0].system_prompt == "sys"
    assert seen_inputs[1].previous_response_id == "resp_mock_1"
    assert seen_inputs[1].system_prompt is None
    assert result.previous_response_id == "resp_mock_2"


@pytest.mark.asyncio
async def test_early_termination(chat_config, engine_config, mock_logger):
    interlocutor = MagicMock(spec=InterlocutorInterface)
    interlocutor.next_message = AsyncMock(side_effect=["Tell me more", None])
    runner = _runner(chat_config, engine_config, mock_logger, interlocutor=interlocutor)

    result = await runner.run(ConversationParams(
        first_user_message="Start", interlocutor_prompt="persona", max_turns=5,
    ))

    assert result.total_turns == 2
    assert result.max_turns == 5
    assert interlocutor.next_message.await_count == 2
    assert [m.content for m in result.messages if m.role == "user"] == ["Start", "Tell me more"]


@pytest.mark.asyncio
async def test_mock_function_outputs_flow_through(responses_config, engine_config, mock_logger, function_call_raw):
    provider = OpenAIResponsesProvider(responses_config, config=engine_config, logger=mock_logger)
    runner = _runner(responses_config, engine_config, mock_logger, provider=provider)
    original_mock = provider._mock_raw_response

    def first_call_asks_for_function(conversation_input, index):
        return function_call_raw(index) if index == 1 else original_mock(conversation_input, index)

    with patch.object(provider, "_mock_raw_response", side_effect=first_call_asks_for_function):
        result = await runner.run(ConversationParams(
            first_user_message="Weather in Paris?",
            mock_function_outputs={"get_weather": "18C and cloudy"},
        ))

    assistant = result.last_assistant_message
    assert assistant.content == "Mock response after function call"
    assert [tc.function_name for tc in assistant.tool_calls] == ["get_weather"]
    assert assistant.usage.total_tokens == 42
    assert result.tokens.total_tokens == 42
    assert len(result.all_tool_calls) == 1


@pytest.mark.asyncio
async def test_mock_ids_restart_for_each_conversation(responses_config, engine_config, mock_logger):
    runner = _runner(responses_config, engine_config, mock_logger)
    params = ConversationParams(first_user_message="Hello")

    first = await runner.run(params)
    second = await runner.run(params)

    assert first.previous_response_id == second.previous_response_id == "resp_mock_1"
    assert first.messages[1].content == second.messages[1].content


@pytest.mark.asyncio
async def test_missing_first_user_message_ends_with_empty_transcript(chat_config, engine_config, mock_logger):
    provider = MagicMock()
    provider.stateful = False
    provider.call = AsyncMock()
    runner = _runner(chat_config, engine_config, mock_logger, provider=provider)

    result = await runner.run(ConversationParams(first_user_message=None))

    assert result.messages == []
    assert result.total_turns == 0
    assert result.tokens is None
    assert result.status == "completed"
    provider.call.assert_not_awaited()


@pytest.mark.asyncio
async def test_multi_turn_without_interlocutor_prompt_fails(chat_config, engine_config, mock_logger):
    runner = _runner(chat_config, engine_config, mock_logger)

    with pytest.raises(AIConfigError) as exc_info:
        await runner.run(ConversationParams(first_user_message="Hi", max_turns=2))

    assert exc_info.value.config_name == "interlocutor_prompt"


@pytest.mark.asyncio
async def test_unsupported_api_fails_before_any_call(engine_config, mock_logger):
    runner = _runner(
        ProviderConfig(provider="openai", api="completions", model="gpt-4o"),
        engine_config, mock_logger,
    )

    with pytest.raises(AIConfigError, match="Unsupported provider API"):
        await runner.run(ConversationParams(first_user_message="Hi"))


@pytest.mark.asyncio
async def test_anthropic_single_turn(anthropic_config, engine_config, mock_logger):
    result = await _runner(anthropic_config, engine_config, mock_logger).run(
        ConversationParams(system_prompt="sys", first_user_message="Hi")
    )

    assert result.provider == "anthropic"
    assert result.api == "messages"
    assert result.messages[1].content == "Mock Anthropic Messages API response"
    assert result.tokens.total_tokens == 30


@pytest.mark.asyncio
async def test_assistants_single_turn(assistants_config, engine_config, mock_logger):
    result = await _runner(assistants_config, engine_config, mock_logger).run(
        ConversationParams(first_user_message="Hi")
    )

    assert result.messages[1].content == "Mock Assistants API response for testing (1)"
    assert result.previous_response_id == "thread_mock_1"
    assert result.messages[1].api_metadata["run_id"] == "run_mock_1"


def test_run_sync(chat_config, engine_config, mock_logger):
    result = _runner(chat_config, engine_config, mock_logger).run_sync(
        ConversationParams(first_user_message="Hi")
    )

    assert result.total_turns == 1


@pytest.mark.asyncio
async def test_next_turn_chains_from_final_response_not_tool_round_trip(
        responses_config, engine_config, mock_logger, function_call_raw):
    provider = OpenAIResponsesProvider(responses_config, config=engine_config, logger=mock_logger)
    runner = _runner(responses_config, engine_config, mock_logger, provider=provider)
    original_mock = provider._mock_raw_response
    seen_inputs = []

    def first_call_asks_for_function(conversation_input, index):
        seen_inputs.append(conversation_input)
        return function_call_raw(index) if index == 1 else original_mock(conversation_input, index)

    with patch.object(provider, "_mock_raw_response", side_effect=first_call_asks_for_function):
        result = await runner.run(ConversationParams(
            first_user_message="Weather?", interlocutor_prompt="persona", max_turns=2,
        ))

    # Calls: turn 1 (function call), turn 1 continuation, turn 2
    assert len(seen_inputs) == 3
    assert seen_inputs[1].previous_response_id == "resp_tool_1"
    assert seen_inputs[2].previous_response_id == "resp_mock_2"
    assert seen_inputs[2].is_continuation is False
    assert result.messages[1].response_id == "resp_mock_2"
