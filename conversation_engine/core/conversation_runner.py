"""
Conversation orchestrator: drives a simulated conversation turn by turn.
"""
from typing import Any, Callable, Dict, Optional
import asyncio
import time

from ..config import EngineConfig
from ..exceptions import AIConfigError
from ..tools.function_executor import FunctionExecutor
from ..utils.logger import LoggerInterface, LoggerFactory
from .function_call_loop import FunctionCallLoop
from .interfaces import InterlocutorInterface, ProviderInterface
from .interlocutor_simulator import InterlocutorSimulator
from .models import (
    ConversationParams, ConversationResult, ConversationState, Message, ProviderConfig,
)
from .output_builder import OutputBuilder
from .provider_factory import ProviderFactory


class ConversationRunner:
    """
    Runs one conversation per ``run()`` call against a single provider API.

    Each run gets its own ConversationState, provider adapter, executor and
    function-call loop, so one runner can serve concurrent runs.
    """

    def __init__(self,
                 provider_config: ProviderConfig,
                 config: Optional[EngineConfig] = None,
                 logger: Optional[LoggerInterface] = None,
                 interlocutor: Optional[InterlocutorInterface] = None,
                 provider: Optional[ProviderInterface] = None,
                 function_handlers: Optional[Dict[str, Callable[..., Any]]] = None):
        """
        Initialize the runner.

        Args:
            provider_config: Provider, API, model and tool settings
            config: Engine configuration (loop caps, interlocutor model, credentials)
            logger: Logger instance
            interlocutor: Replacement for the default InterlocutorSimulator
            provider: Pre-built provider adapter, shared by every run
            function_handlers: Python callables that answer function calls by name
        """
        self.provider_config = provider_config
        self.config = config or EngineConfig()
        self._logger = logger or LoggerFactory.create(name="conversation_runner")
        self._interlocutor = interlocutor
        self._provider = provider
        self.function_handlers = dict(function_handlers or {})

    def _validate(self, params: ConversationParams) -> None:
        if params.max_turns > 1 and not params.interlocutor_prompt:
            raise AIConfigError(
                f"interlocutor_prompt is required when max_turns > 1 (got max_turns={params.max_turns})",
                config_name="interlocutor_prompt",
            )
        if self._provider is None:
            ProviderFactory.provider_class(self.provider_config)

    async def run(self, params: ConversationParams) -> ConversationResult:
        """
        Execute a conversation.

        Args:
            params: Prompts, turn limit, mode and mock function outputs

        Returns:
            The standardized ConversationResult

        Raises:
            AIConfigError: For invalid parameters, before any provider call
            AIProviderError (or subclass): If a provider call fails
        """
        self._validate(params)

        provider = self._provider or ProviderFactory.create(
            self.provider_config,
            use_real_llm=params.use_real_llm,
            config=self.config,
            logger=self._logger,
        )
        executor = FunctionExecutor(
            mock_function_outputs=params.mock_function_outputs,
            handlers=self.function_handlers,
            timeout=self.config.handler_timeout,
            logger=self._logger,
        )
        loop = FunctionCallLoop(
            provider=provider,
            executor=executor,
            max_iterations=self.config.max_tool_iterations,
            logger=self._logger,
        )
        interlocutor = self._interlocutor or InterlocutorSimulator(
            use_real_llm=params.use_real_llm,
            config=self.config,
            logger=self._logger,
        )

        self._logger.info(
            f"Starting conversation: {self.provider_config.provider}/{self.provider_config.api} "
            f"model={self.provider_config.model} max_turns={params.max_turns} "
            f"mode={'real' if params.use_real_llm else 'mock'}"
        )

        state = ConversationState()
        start_time = time.monotonic()

        for turn in range(1, params.max_turns + 1):
            if turn == 1:
                user_text = params.first_user_message
            else:
                user_text = await interlocutor.next_message(params.interlocutor_prompt, list(state.messages), turn)

            if user_text is None:
                self._logger.info(f"Conversation ended early before turn {turn}")
                break

            state.turn = turn
            state.messages.append(Message(role="user", content=user_text, turn=turn))

            # Stateful APIs keep the instructions from the first turn
            system_prompt = params.system_prompt if (turn == 1 or not provider.stateful) else None
            turn_input = provider.build_turn_input(state, user_text, system_prompt)
            result = await loop.run(turn_input, turn, state)
            final = result.final_response

            state.messages.append(Message(
                role="assistant",
                content=final.text,
                turn=turn,
                usage=result.aggregated_usage,
                tool_calls=result.all_tool_calls,
                web_search_results=final.web_search_results,
                code_interpreter_results=final.code_interpreter_results,
                file_search_results=final.file_search_results,
                response_id=final.response_id,
                api_metadata=final.api_metadata,
            ))

            if provider.stateful:
                state.previous_response_id = final.response_id
            else:
                state.history = provider.extend_history(result.final_input or turn_input, final)
            state.accumulated_responses.extend(result.all_responses)

        response_time_ms = int((time.monotonic() - start_time) * 1000)
        output = OutputBuilder.build(
            state=state,
            params=params,
            provider_config=self.provider_config,
            response_time_ms=response_time_ms,
            stateful=provider.stateful,
        )
        self._logger.info(
            f"Conversation completed: {output.total_turns} turn(s) in {response_time_ms}ms, "
            f"tokens={output.tokens.total_tokens if output.tokens else None}"
        )
        return output

    def run_sync(self, params: ConversationParams) -> ConversationResult:
        """Run a conversation from synchronous code."""
        return asyncio.run(self.run(params))
