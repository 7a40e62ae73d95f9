"""
Google Gemini adapter.

Stateless: every call replays the whole ``contents`` history. The system
prompt travels as ``system_instruction``. Function results go back as
``function_response`` parts keyed by function name.
"""
from typing import List, Dict, Any, Optional, Type
import json

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from ..models import ConversationInput, ConversationState, NormalizedResponse
from ..normalizers import normalize_gemini_response
from ...tools.models import FunctionOutput
from ...exceptions import (
    AIProviderError, AIAuthenticationError, AIRateLimitError, ModelNotFoundError,
    InvalidRequestError, AITimeoutError, ContentModerationError,
)
from .base_provider import BaseProvider, MOCK_USAGE, MOCK_FUNCTION_REPLY

UNBLOCKED_REASONS = (None, "", 0, "BLOCK_REASON_UNSPECIFIED")


class GeminiProvider(BaseProvider):
    """Provider implementation for Google's Gemini API."""

    provider_name = "google"
    stateful = False

    def _create_client(self, api_key: str, provider_settings: Dict[str, Any]) -> Any:
        genai.configure(api_key=api_key)
        return genai

    def _get_error_map(self) -> Dict[Type[Exception], Type[AIProviderError]]:
        """Returns the specific error mapping for Gemini."""
        return {
            google_exceptions.Unauthenticated: AIAuthenticationError,
            google_exceptions.PermissionDenied: AIAuthenticationError,
            google_exceptions.ResourceExhausted: AIRateLimitError,
            google_exceptions.NotFound: ModelNotFoundError,
            google_exceptions.InvalidArgument: InvalidRequestError,
            google_exceptions.DeadlineExceeded: AITimeoutError,
            google_exceptions.GoogleAPIError: AIProviderError,
        }

    def normalize(self, raw: Dict[str, Any]) -> NormalizedResponse:
        return normalize_gemini_response(raw)

    def build_turn_input(self,
                         state: ConversationState,
                         user_text: str,
                         system_prompt: Optional[str]) -> ConversationInput:
        return ConversationInput(
            system_prompt=system_prompt,
            messages=list(state.history) + [{"role": "user", "parts": [{"text": user_text}]}],
            turn=state.turn,
        )

    def build_continuation_input(self,
                                 previous_input: ConversationInput,
                                 response: NormalizedResponse,
                                 function_outputs: List[FunctionOutput]) -> ConversationInput:
        model_parts: List[Dict[str, Any]] = []
        if response.text:
            model_parts.append({"text": response.text})
        for tc in response.tool_calls:
            model_parts.append({"function_call": {"name": tc.function_name, "args": tc.arguments}})
        response_parts = [
            {"function_response": {"name": fo.function_name, "response": _response_payload(fo.output)}}
            for fo in function_outputs
        ]
        return ConversationInput(
            system_prompt=previous_input.system_prompt,
            messages=list(previous_input.messages) + [
                {"role": "model", "parts": model_parts},
                {"role": "user", "parts": response_parts},
            ],
            function_outputs=function_outputs,
            is_continuation=True,
            turn=previous_input.turn,
        )

    def extend_history(self,
                       final_input: ConversationInput,
                       final_response: NormalizedResponse) -> List[Dict[str, Any]]:
        return list(final_input.messages) + [{"role": "model", "parts": [{"text": final_response.text}]}]

    def _prepare_request_payload(self, conversation_input: ConversationInput) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"model": self.model_id, "contents": list(conversation_input.messages)}
        if conversation_input.system_prompt:
            payload["system_instruction"] = conversation_input.system_prompt

        generation_config: Dict[str, Any] = {}
        if self.temperature is not None:
            generation_config["temperature"] = self.temperature
        if self.provider_config.max_tokens:
            generation_config["max_output_tokens"] = self.provider_config.max_tokens
        if generation_config:
            payload["generation_config"] = generation_config

        tools = self.tool_formatter.for_gemini()
        if tools:
            payload["tools"] = tools
        return payload

    async def _make_api_request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        model = self.client.GenerativeModel(
            model_name=payload["model"],
            system_instruction=payload.get("system_instruction"),
            generation_config=payload.get("generation_config"),
            tools=payload.get("tools"),
        )
        response = await model.generate_content_async(payload["contents"])
        raw = self._to_dict(response)

        block_reason = (raw.get("prompt_feedback") or {}).get("block_reason")
        if block_reason not in UNBLOCKED_REASONS:
            self.logger.error(f"Gemini request blocked due to prompt feedback. Reason: {block_reason}")
            raise ContentModerationError(
                f"Gemini prompt blocked by safety filter: {block_reason}",
                reason=str(block_reason),
                provider=self.provider_name,
            )
        return raw

    def _mock_raw_response(self, conversation_input: ConversationInput, index: int) -> Dict[str, Any]:
        if conversation_input.is_continuation:
            text = MOCK_FUNCTION_REPLY
        else:
            text = f"Mock LLM response for testing (turn {conversation_input.turn})"
        return {
            "response_id": f"gemini_mock_{index}",
            "model_version": self.model_id,
            "candidates": [{
                "index": 0,
                "content": {"role": "model", "parts": [{"text": text}]},
                "finish_reason": "STOP",
            }],
            "usage_metadata": {
                "prompt_token_count": MOCK_USAGE["prompt_tokens"],
                "candidates_token_count": MOCK_USAGE["completion_tokens"],
                "total_token_count": MOCK_USAGE["total_tokens"],
            },
        }


def _response_payload(output: str) -> Dict[str, Any]:
    # function_response.response must be an object
    try:
        parsed = json.loads(output)
    except (TypeError, ValueError):
        return {"content": output}
    return parsed if isinstance(parsed, dict) else {"content": parsed}
