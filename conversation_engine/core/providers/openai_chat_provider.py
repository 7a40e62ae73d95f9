"""
OpenAI Chat Completions adapter.

Stateless: every call replays the whole message history.
"""
from typing import List, Dict, Any, Optional
import json

from ..models import ConversationInput, ConversationState, NormalizedResponse
from ..normalizers import normalize_chat_completion
from ...tools.models import FunctionOutput
from .base_provider import MOCK_USAGE, MOCK_FUNCTION_REPLY
from .openai_provider import OpenAIProvider


class OpenAIChatProvider(OpenAIProvider):
    """Provider implementation for the OpenAI Chat Completions API."""

    stateful = False

    def normalize(self, raw: Dict[str, Any]) -> NormalizedResponse:
        return normalize_chat_completion(raw)

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
        assistant_message = {
            "role": "assistant",
            "content": response.text or None,
            "tool_calls": [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.function_name, "arguments": json.dumps(tc.arguments)},
                }
                for tc in response.tool_calls
            ],
        }
        tool_messages = [
            {"role": "tool", "tool_call_id": fo.call_id, "content": fo.output}
            for fo in function_outputs
        ]
        return ConversationInput(
            system_prompt=previous_input.system_prompt,
            messages=list(previous_input.messages) + [assistant_message] + tool_messages,
            function_outputs=function_outputs,
            is_continuation=True,
            turn=previous_input.turn,
        )

    def extend_history(self,
                       final_input: ConversationInput,
                       final_response: NormalizedResponse) -> List[Dict[str, Any]]:
        return list(final_input.messages) + [{"role": "assistant", "content": final_response.text}]

    def _prepare_request_payload(self, conversation_input: ConversationInput) -> Dict[str, Any]:
        messages = []
        if conversation_input.system_prompt:
            messages.append({"role": "system", "content": conversation_input.system_prompt})
        messages.extend(conversation_input.messages)

        payload: Dict[str, Any] = {"model": self.model_id, "messages": messages}
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        if self.provider_config.max_tokens:
            payload["max_tokens"] = self.provider_config.max_tokens
        tools = self.tool_formatter.for_chat_completions()
        if tools:
            payload["tools"] = tools
        return payload

    async def _make_api_request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.chat.completions.create(**payload)
        return self._to_dict(response)

    def _mock_raw_response(self, conversation_input: ConversationInput, index: int) -> Dict[str, Any]:
        if conversation_input.is_continuation:
            text = MOCK_FUNCTION_REPLY
        else:
            text = f"Mock LLM response for testing (turn {conversation_input.turn})"
        return {
            "id": f"chatcmpl_mock_{index}",
            "object": "chat.completion",
            "model": self.model_id,
            "choices": [{
                "index": 0,
                "message": {"role": "assistant", "content": text, "tool_calls": None},
                "finish_reason": "stop",
            }],
            "usage": dict(MOCK_USAGE),
        }
