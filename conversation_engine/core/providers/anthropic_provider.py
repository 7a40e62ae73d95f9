"""
Anthropic Messages API adapter.

Stateless: every call replays the whole message history. Tool round-trips
append an assistant message with ``tool_use`` blocks and a user message with
the matching ``tool_result`` blocks.
"""
from typing import List, Dict, Any, Optional, Type

import anthropic
from anthropic import AsyncAnthropic

from ..models import ConversationInput, ConversationState, NormalizedResponse
from ..normalizers import normalize_message
from ...tools.models import FunctionOutput
from ...exceptions import (
    AIProviderError, AIAuthenticationError, AIRateLimitError, ModelNotFoundError,
    InvalidRequestError, AITimeoutError,
)
from .base_provider import BaseProvider, MOCK_USAGE, MOCK_FUNCTION_REPLY

DEFAULT_MAX_TOKENS = 4096


class AnthropicProvider(BaseProvider):
    """Provider implementation for the Anthropic Messages API."""

    provider_name = "anthropic"
    stateful = False

    def _create_client(self, api_key: str, provider_settings: Dict[str, Any]) -> AsyncAnthropic:
        client_kwargs: Dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if provider_settings.get("base_url"):
            client_kwargs["base_url"] = provider_settings["base_url"]
        if provider_settings.get("timeout"):
            client_kwargs["timeout"] = provider_settings["timeout"]
        return AsyncAnthropic(**client_kwargs)

    def _get_error_map(self) -> Dict[Type[Exception], Type[AIProviderError]]:
        """Returns the specific error mapping for Anthropic."""
        return {
            anthropic.AuthenticationError: AIAuthenticationError,
            anthropic.PermissionDeniedError: AIAuthenticationError,
            anthropic.RateLimitError: AIRateLimitError,
            anthropic.NotFoundError: ModelNotFoundError,
            anthropic.BadRequestError: InvalidRequestError,
            anthropic.UnprocessableEntityError: InvalidRequestError,
            anthropic.APITimeoutError: AITimeoutError,
            anthropic.APIConnectionError: AIProviderError,
            anthropic.InternalServerError: AIProviderError,
            anthropic.APIStatusError: AIProviderError,
            anthropic.APIError: AIProviderError,
        }

    @property
    def max_tokens(self) -> int:
        return int(
            self.provider_config.max_tokens
            or self.config.get("anthropic.max_tokens", DEFAULT_MAX_TOKENS)
        )

    def normalize(self, raw: Dict[str, Any]) -> NormalizedResponse:
        return normalize_message(raw)

    def build_turn_input(self,
                         state: ConversationState,
                         user_text: str,
                         system_prompt: Optional[str]) -> ConversationInput:
        return ConversationInput(
            system_prompt=system_prompt,
            messages=list(state.history) + [{"role": "user", "content": user_text}],
            turn=state.turn,
        )

    def build_continuation_input(self,
                                 previous_input: ConversationInput,
                                 response: NormalizedResponse,
                                 function_outputs: List[FunctionOutput]) -> ConversationInput:
        assistant_content: List[Dict[str, Any]] = []
        if response.text:
            assistant_content.append({"type": "text", "text": response.text})
        for tc in response.tool_calls:
            assistant_content.append({
                "type": "tool_use",
                "id": tc.id,
                "name": tc.function_name,
                "input": tc.arguments,
            })
        tool_results = [
            {"type": "tool_result", "tool_use_id": fo.call_id, "content": fo.output}
            for fo in function_outputs
        ]
        return ConversationInput(
            system_prompt=previous_input.system_prompt,
            messages=list(previous_input.messages) + [
                {"role": "assistant", "content": assistant_content},
                {"role": "user", "content": tool_results},
            ],
            function_outputs=function_outputs,
            is_continuation=True,
            turn=previous_input.turn,
        )

    def extend_history(self,
                       final_input: ConversationInput,
                       final_response: NormalizedResponse) -> List[Dict[str, Any]]:
        return list(final_input.messages) + [{"role": "assistant", "content": final_response.text}]

    def _prepare_request_payload(self, conversation_input: ConversationInput) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model_id,
            "messages": list(conversation_input.messages),
            "max_tokens": self.max_tokens,
        }
        if conversation_input.system_prompt:
            payload["system"] = conversation_input.system_prompt
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        tools = self.tool_formatter.for_anthropic()
        if tools:
            payload["tools"] = tools
        return payload

    async def _make_api_request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.messages.create(**payload)
        return self._to_dict(response)

    def _mock_raw_response(self, conversation_input: ConversationInput, index: int) -> Dict[str, Any]:
        text = MOCK_FUNCTION_REPLY if conversation_input.is_continuation else "Mock Anthropic Messages API response"
        return {
            "id": f"msg_mock_{index}",
            "type": "message",
            "role": "assistant",
            "model": self.model_id,
            "content": [{"type": "text", "text": text}],
            "stop_reason": "end_turn",
            "usage": {
                "input_tokens": MOCK_USAGE["prompt_tokens"],
                "output_tokens": MOCK_USAGE["completion_tokens"],
            },
        }
