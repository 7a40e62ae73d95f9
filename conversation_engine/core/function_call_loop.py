"""
Function-call loop for a single conversation turn.
"""
from typing import List, Optional

from ..tools.function_executor import FunctionExecutor
from ..tools.models import ToolCall
from ..utils.logger import LoggerInterface, LoggerFactory
from .interfaces import ProviderInterface
from .models import ConversationInput, ConversationState, NormalizedResponse, TurnResult
from .usage_aggregator import UsageAggregator

MAX_ITERATIONS = 10


class FunctionCallLoop:
    """
    Calls the provider, answers any function calls, and calls again until the
    model stops asking for functions or the iteration cap is reached.

    Hitting the cap is not an error: the loop returns with ``capped=True`` and
    the last response as final, still carrying its pending tool calls. The
    provider is told to release them so the next turn can proceed.
    """

    def __init__(self,
                 provider: ProviderInterface,
                 executor: FunctionExecutor,
                 max_iterations: int = MAX_ITERATIONS,
                 logger: Optional[LoggerInterface] = None):
        self.provider = provider
        self.executor = executor
        self.max_iterations = max_iterations
        self._logger = logger or LoggerFactory.create(name="function_call_loop")

    async def run(self,
                  turn_input: ConversationInput,
                  turn: int,
                  state: Optional[ConversationState] = None) -> TurnResult:
        """
        Run the loop for one turn.

        Args:
            turn_input: Input for the turn's first provider call
            turn: Turn number, for logging
            state: The conversation's state, passed through to the provider

        Returns:
            TurnResult with the final response, every tool call and response of the
            turn, and their summed usage

        Raises:
            AIProviderError (or subclass): Provider failures propagate unchanged
        """
        current_input = turn_input
        response = await self.provider.call(current_input, state)
        all_responses: List[NormalizedResponse] = [response]
        all_tool_calls: List[ToolCall] = []
        iterations = 0

        while response.tool_calls and iterations < self.max_iterations:
            iterations += 1
            tool_calls = response.tool_calls
            self._logger.debug(
                f"Turn {turn}, iteration {iterations}: received {len(tool_calls)} function call(s): "
                f"{', '.join(tc.function_name for tc in tool_calls)}"
            )
            all_tool_calls.extend(tool_calls)

            function_outputs = await self.executor.execute_all(tool_calls)
            current_input = self.provider.build_continuation_input(current_input, response, function_outputs)

            response = await self.provider.call(current_input, state)
            all_responses.append(response)

        capped = bool(response.tool_calls) and iterations >= self.max_iterations
        if capped:
            all_tool_calls.extend(response.tool_calls)
            await self.provider.release_pending(response)
            self._logger.warning(
                f"Function call iteration limit ({self.max_iterations}) reached for turn {turn} "
                f"(model: {response.model}, iterations: {iterations}). "
                f"Model may be stuck in a function calling loop."
            )

        return TurnResult(
            final_response=response,
            all_tool_calls=all_tool_calls,
            aggregated_usage=UsageAggregator.aggregate(all_responses),
            all_responses=all_responses,
            iterations=iterations,
            capped=capped,
            final_input=current_input,
        )
