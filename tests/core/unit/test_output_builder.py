# tests/core/unit/test_output_builder.py
"""
Unit tests for OutputBuilder, UsageAggregator and ToolResultExtractor.
"""
from conversation_engine.core.models import (
    ConversationParams, ConversationState, Message, NormalizedResponse, ProviderConfig, TokenUsage,
)
from conversation_engine.core.output_builder import OutputBuilder, render_prompt
from conversation_engine.core.usage_aggregator import UsageAggregator, ToolResultExtractor
from conversation_engine.tools.models import ToolCall


PROVIDER_CONFIG = ProviderConfig(
    provider="openai", api="responses", model="gpt-4o", tools=["web_search", {"type": "file_search"}],
)


def _state(messages, responses=(), previous_response_id=None):
    return ConversationState(
        messages=list(messages),
        accumulated_responses=list(responses),
        previous_response_id=previous_response_id,
    )


class TestRenderPrompt:

    def test_both_parts(self):
        assert render_prompt("sys", "hi") == "[System]\nsys\n\n[User]\nhi"

    def test_user_only(self):
        assert render_prompt(None, "hi") == "[User]\nhi"


class TestUsageAggregator:

    def test_aggregate_responses(self):
        responses = [
            NormalizedResponse(usage=TokenUsage(prompt_tokens=1, completion_tokens=2, total_tokens=3)),
            NormalizedResponse(usage=TokenUsage(prompt_tokens=10, completion_tokens=20, total_tokens=30)),
        ]

        assert UsageAggregator.aggregate(responses) == TokenUsage(
            prompt_tokens=11, completion_tokens=22, total_tokens=33
        )

    def test_aggregate_messages_ignores_user_messages(self):
        messages = [
            Message(role="user", content="q", turn=1, usage=TokenUsage(total_tokens=999)),
            Message(role="assistant", content="a", turn=1, usage=TokenUsage(total_tokens=5)),
            Message(role="assistant", content="b", turn=2),
        ]

        assert UsageAggregator.aggregate_messages(messages).total_tokens == 5

    def test_aggregate_messages_without_usage_is_none(self):
        messages = [Message(role="user", content="q", turn=1), Message(role="assistant", content="a", turn=1)]

        assert UsageAggregator.aggregate_messages(messages) is None


class TestOutputBuilder:

    def test_build_counts_turns_from_transcript(self):
        messages = [
            Message(role="user", content="q1", turn=1),
            Message(role="assistant", content="a1", turn=1, usage=TokenUsage(total_tokens=30)),
            Message(role="user", content="q2", turn=2),
            Message(role="assistant", content="a2", turn=2, usage=TokenUsage(total_tokens=30)),
        ]
        params = ConversationParams(
            system_prompt="sys", first_user_message="q1", interlocutor_prompt="p", max_turns=4,
        )

        result = OutputBuilder.build(_state(messages, previous_response_id="resp_2"), params, PROVIDER_CONFIG,
                                     response_time_ms=12, stateful=True)

        assert result.total_turns == 2
        assert result.max_turns == 4
        assert result.tokens.total_tokens == 60
        assert result.tools_used == ["web_search", "file_search"]
        assert result.previous_response_id == "resp_2"
        assert result.rendered_system_prompt == "sys"
        assert result.rendered_user_prompt == "q1"
        assert result.interlocutor_prompt == "p"
        assert [m.content for m in result.messages_for_turn(2)] == ["q2", "a2"]

    def test_tokens_none_when_no_usage(self):
        messages = [Message(role="user", content="q", turn=1), Message(role="assistant", content="a", turn=1)]

        result = OutputBuilder.build(_state(messages), ConversationParams(first_user_message="q"),
                                     PROVIDER_CONFIG, response_time_ms=0)

        assert result.tokens is None
        assert result.to_output_data()["tokens"] is None

    def test_stateless_drops_previous_response_id(self):
        result = OutputBuilder.build(_state([], previous_response_id="resp_1"),
                                     ConversationParams(first_user_message="q"),
                                     PROVIDER_CONFIG, response_time_ms=0, stateful=False)

        assert result.previous_response_id is None

    def test_tool_results_flattened_across_responses(self):
        responses = [
            NormalizedResponse(web_search_results=[{"query": "a"}]),
            NormalizedResponse(web_search_results=[{"query": "b"}], file_search_results=[{"query": "c"}]),
        ]
        messages = [
            Message(role="user", content="q", turn=1),
            Message(role="assistant", content="a", turn=1,
                    tool_calls=[ToolCall(id="call_1", function_name="f")]),
        ]

        result = OutputBuilder.build(_state(messages, responses), ConversationParams(first_user_message="q"),
                                     PROVIDER_CONFIG, response_time_ms=0)

        assert result.web_search_results == [{"query": "a"}, {"query": "b"}]
        assert result.file_search_results == [{"query": "c"}]
        assert result.code_interpreter_results == []
        assert [tc.id for tc in result.all_tool_calls] == ["call_1"]
        assert ToolResultExtractor(responses).all_results()["web_search_results"] == result.web_search_results
