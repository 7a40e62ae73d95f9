"""
OpenAI Assistants API adapter.

The thread id is the continuation handle. One call adds the user message,
starts a run and polls it until it settles. Runs that stop in
``requires_action`` are returned as pending function calls. The follow-up
call submits the function outputs to the same run and polls again. A run
left waiting when the function-call loop gives up is cancelled.
"""
from typing import List, Dict, Any, Optional
import asyncio

from ..models import ConversationInput, ConversationState, NormalizedResponse
from ..normalizers import normalize_assistant_run
from ...tools.models import FunctionOutput
from ...exceptions import AIConfigError, AIFrameworkError, AIProviderError, AITimeoutError
from .base_provider import MOCK_USAGE, MOCK_FUNCTION_REPLY
from .openai_provider import OpenAIProvider

PENDING_STATUSES = ("queued", "in_progress", "cancelling")
FAILED_STATUSES = ("failed", "cancelled", "expired", "incomplete")
SETTLED_STATUSES = ("completed", "requires_action")


class OpenAIAssistantsProvider(OpenAIProvider):
    """Provider implementation for the OpenAI Assistants API."""

    stateful = True

    def _initialize_credentials(self) -> None:
        if not self.provider_config.assistant_id:
            raise AIConfigError("assistant_id is required for the OpenAI Assistants API", config_name="assistant_id")
        super()._initialize_credentials()

    @property
    def poll_interval(self) -> float:
        return float(self.config.get("assistants.poll_interval", 1.0))

    @property
    def poll_timeout(self) -> float:
        return float(self.config.get("assistants.poll_timeout", 60))

    def normalize(self, raw: Dict[str, Any]) -> NormalizedResponse:
        return normalize_assistant_run(raw)

    def build_turn_input(self,
                         state: ConversationState,
                         user_text: str,
                         system_prompt: Optional[str]) -> ConversationInput:
        # The assistant carries its own instructions
        return ConversationInput(
            input=user_text,
            previous_response_id=state.previous_response_id,
            turn=state.turn,
        )

    def build_continuation_input(self,
                                 previous_input: ConversationInput,
                                 response: NormalizedResponse,
                                 function_outputs: List[FunctionOutput]) -> ConversationInput:
        return ConversationInput(
            previous_response_id=response.response_id,
            run_id=response.api_metadata.get("run_id"),
            function_outputs=function_outputs,
            is_continuation=True,
            turn=previous_input.turn,
        )

    def _prepare_request_payload(self, conversation_input: ConversationInput) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model_id,
            "assistant_id": self.provider_config.assistant_id,
            "thread_id": conversation_input.previous_response_id,
        }
        if conversation_input.run_id:
            payload["run_id"] = conversation_input.run_id
            payload["tool_outputs"] = [
                {"tool_call_id": fo.call_id, "output": fo.output}
                for fo in conversation_input.function_outputs
            ]
        else:
            payload["content"] = conversation_input.input
            if self.temperature is not None:
                payload["temperature"] = self.temperature
        return payload

    async def _make_api_request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        threads = self.client.beta.threads

        if payload.get("run_id"):
            thread_id = payload["thread_id"]
            run = await threads.runs.submit_tool_outputs(
                run_id=payload["run_id"],
                thread_id=thread_id,
                tool_outputs=payload["tool_outputs"],
            )
        else:
            thread_id = payload.get("thread_id")
            if not thread_id:
                thread = await threads.create()
                thread_id = thread.id
                self.logger.debug(f"Created thread {thread_id}")
            await threads.messages.create(thread_id=thread_id, role="user", content=payload["content"])
            run_kwargs: Dict[str, Any] = {"thread_id": thread_id, "assistant_id": payload["assistant_id"]}
            if "temperature" in payload:
                run_kwargs["temperature"] = payload["temperature"]
            run = await threads.runs.create(**run_kwargs)

        run = await self._wait_for_run(thread_id, run)
        return await self._collect_run(thread_id, run)

    async def release_pending(self, response: NormalizedResponse) -> None:
        """
        Cancel a run still waiting for function outputs so the thread accepts
        new messages on the next turn.
        """
        metadata = response.api_metadata
        if not self.use_real_llm or metadata.get("status") != "requires_action":
            return

        thread_id, run_id = metadata.get("thread_id"), metadata.get("run_id")
        self.logger.info(f"Cancelling run {run_id} on thread {thread_id} with unanswered function calls")
        payload = {"model": self.model_id, "thread_id": thread_id, "run_id": run_id}
        try:
            run = await self.client.beta.threads.runs.cancel(run_id=run_id, thread_id=thread_id)
            await self._wait_for_cancel(thread_id, run)
        except AIFrameworkError:
            raise
        except Exception as e:
            self._handle_api_error(e, payload)

    async def _wait_for_cancel(self, thread_id: str, run: Any) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.poll_timeout

        while run.status == "cancelling":
            if loop.time() >= deadline:
                raise AITimeoutError(
                    f"Assistant run {run.id} still cancelling after {self.poll_timeout} seconds",
                    provider=self.provider_name,
                )
            await asyncio.sleep(self.poll_interval)
            run = await self.client.beta.threads.runs.retrieve(run_id=run.id, thread_id=thread_id)

    async def _wait_for_run(self, thread_id: str, run: Any) -> Any:
        """Poll a run until it completes or needs function outputs."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.poll_timeout

        while True:
            status = run.status
            if status in SETTLED_STATUSES:
                return run
            if status in FAILED_STATUSES:
                last_error = getattr(run, "last_error", None)
                detail = getattr(last_error, "message", None) or "Unknown error"
                raise AIProviderError(f"Assistant run {run.id} {status}: {detail}", provider=self.provider_name)
            if loop.time() >= deadline:
                raise AITimeoutError(
                    f"Assistant run {run.id} timed out after {self.poll_timeout} seconds",
                    provider=self.provider_name,
                )
            await asyncio.sleep(self.poll_interval)
            run = await self.client.beta.threads.runs.retrieve(run_id=run.id, thread_id=thread_id)

    async def _collect_run(self, thread_id: str, run: Any) -> Dict[str, Any]:
        threads = self.client.beta.threads
        run_data = self._to_dict(run)

        content = ""
        annotations: List[Dict[str, Any]] = []
        if run.status == "completed":
            messages = await threads.messages.list(thread_id=thread_id, order="desc", limit=1)
            if messages.data:
                latest = self._to_dict(messages.data[0])
                for block in latest.get("content") or []:
                    if block.get("type") == "text":
                        text = block.get("text") or {}
                        content = text.get("value") or ""
                        annotations = list(text.get("annotations") or [])
                        break

        steps = await threads.runs.steps.list(run_id=run.id, thread_id=thread_id)
        return {
            "thread_id": thread_id,
            "run_id": run.id,
            "assistant_id": run_data.get("assistant_id"),
            "model": run_data.get("model"),
            "status": run.status,
            "content": content,
            "annotations": annotations,
            "usage": run_data.get("usage") or {},
            "run_steps": {"data": [self._to_dict(step) for step in steps.data]},
            "required_action": run_data.get("required_action"),
        }

    def _mock_raw_response(self, conversation_input: ConversationInput, index: int) -> Dict[str, Any]:
        if conversation_input.is_continuation:
            text = MOCK_FUNCTION_REPLY
        else:
            text = f"Mock Assistants API response for testing ({index})"
        return {
            "thread_id": conversation_input.previous_response_id or f"thread_mock_{index}",
            "run_id": conversation_input.run_id or f"run_mock_{index}",
            "assistant_id": self.provider_config.assistant_id,
            "model": self.model_id,
            "status": "completed",
            "content": text,
            "annotations": [],
            "usage": dict(MOCK_USAGE),
            "run_steps": {"data": []},
            "required_action": None,
        }
