"""
Assembles the standardized conversation result.
"""
from typing import Optional

from .models import ConversationParams, ConversationResult, ConversationState, ProviderConfig
from .usage_aggregator import UsageAggregator, ToolResultExtractor


def render_prompt(system_prompt: Optional[str], user_prompt: Optional[str]) -> str:
    """Display form of the prompt pair: ``[System]`` and ``[User]`` blocks."""
    parts = []
    if system_prompt:
        parts.append(f"[System]\n{system_prompt}")
    if user_prompt:
        parts.append(f"[User]\n{user_prompt}")
    return "\n\n".join(parts)


class OutputBuilder:
    """Pure assembly of a ConversationResult from a finished conversation."""

    @staticmethod
    def build(state: ConversationState,
              params: ConversationParams,
              provider_config: ProviderConfig,
              response_time_ms: int,
              stateful: bool = False) -> ConversationResult:
        messages = list(state.messages)
        extractor = ToolResultExtractor(state.accumulated_responses)

        return ConversationResult(
            rendered_system_prompt=params.system_prompt,
            rendered_user_prompt=params.first_user_message,
            rendered_prompt=render_prompt(params.system_prompt, params.first_user_message),
            model=provider_config.model,
            provider=provider_config.provider,
            api=provider_config.api,
            messages=messages,
            # Recounted from the transcript rather than taken from the turn counter
            total_turns=sum(1 for m in messages if m.role == "assistant"),
            status="completed",
            max_turns=params.max_turns,
            interlocutor_prompt=params.interlocutor_prompt,
            response_time_ms=response_time_ms,
            tokens=UsageAggregator.aggregate_messages(messages),
            tools_used=provider_config.tool_names,
            previous_response_id=state.previous_response_id if stateful else None,
            **extractor.all_results(),
        )
