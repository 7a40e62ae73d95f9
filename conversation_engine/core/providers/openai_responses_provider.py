"""
OpenAI Responses API adapter.

Stateful: turns after the first send only the new input plus the
``previous_response_id`` returned by the last response.
"""
from typing import List, Dict, Any, Optional
import json

from ..models import ConversationInput, ConversationState, NormalizedResponse
from ..normalizers import normalize_response
from ...tools.models import FunctionOutput
from .base_provider import MOCK_USAGE, MOCK_FUNCTION_REPLY
from .openai_provider import OpenAIProvider

WEB_SEARCH_INCLUDE = "web_search_call.action.sources"


class OpenAIResponsesProvider(OpenAIProvider):
    """Provider implementation for the OpenAI Responses API."""

    stateful = True

    def normalize(self, raw: Dict[str, Any]) -> NormalizedResponse:
        return normalize_response(raw)

    def build_turn_input(self,
                         state: ConversationState,
                         user_text: str,
                         system_prompt: Optional[str]) -> ConversationInput:
        return ConversationInput(
            system_prompt=system_prompt,
            input=user_text,
            previous_response_id=state.previous_response_id,
            turn=state.turn,
        )

    def build_continuation_input(self,
                                 previous_input: ConversationInput,
                                 response: NormalizedResponse,
                                 function_outputs: List[FunctionOutput]) -> ConversationInput:
        outputs_by_id = {fo.call_id: fo for fo in function_outputs}
        items: List[Dict[str, Any]] = []
        for tc in response.tool_calls:
            items.append({
                "type": "function_call",
                "call_id": tc.id,
                "name": tc.function_name,
                "arguments": json.dumps(tc.arguments),
            })
            output = outputs_by_id.get(tc.id)
            if output is not None:
                items.append({"type": "function_call_output", "call_id": tc.id, "output": output.output})
        return ConversationInput(
            input=items,
            previous_response_id=response.response_id,
            function_outputs=function_outputs,
            is_continuation=True,
            turn=previous_input.turn,
        )

    def _prepare_request_payload(self, conversation_input: ConversationInput) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"model": self.model_id, "input": conversation_input.input}
        if conversation_input.system_prompt:
            payload["instructions"] = conversation_input.system_prompt

        tools = self.tool_formatter.for_responses()
        if tools:
            # Tools are not inherited through previous_response_id
            payload["tools"] = tools

        if conversation_input.previous_response_id:
            payload["previous_response_id"] = conversation_input.previous_response_id
        else:
            if self.temperature is not None:
                payload["temperature"] = self.temperature
            if self.provider_config.max_tokens:
                payload["max_output_tokens"] = self.provider_config.max_tokens
            if self.tool_formatter.has_web_search():
                payload["include"] = [WEB_SEARCH_INCLUDE]
        return payload

    async def _make_api_request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.responses.create(**payload)
        return self._to_dict(response)

    def _mock_raw_response(self, conversation_input: ConversationInput, index: int) -> Dict[str, Any]:
        if conversation_input.is_continuation:
            text = MOCK_FUNCTION_REPLY
        else:
            text = f"Mock Response API response for testing ({index})"
        return {
            "id": f"resp_mock_{index}",
            "object": "response",
            "status": "completed",
            "model": self.model_id,
            "output": [{
                "type": "message",
                "id": f"msg_mock_{index}",
                "role": "assistant",
                "status": "completed",
                "content": [{"type": "output_text", "text": text, "annotations": []}],
            }],
            "usage": {
                "input_tokens": MOCK_USAGE["prompt_tokens"],
                "output_tokens": MOCK_USAGE["completion_tokens"],
                "total_tokens": MOCK_USAGE["total_tokens"],
            },
        }
