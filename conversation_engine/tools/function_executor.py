"""
Executor that produces outputs for function calls requested by the model.

Output precedence for a call:

1. a caller-supplied mock output for that function name,
2. a registered Python handler,
3. a generic mock payload echoing the function name and arguments.
"""
from typing import Any, Callable, Dict, List, Optional, Union
import asyncio
import functools
import inspect
import json

from ..utils.logger import LoggerInterface, LoggerFactory
from ..exceptions import AIToolError
from .models import ToolCall, FunctionOutput

# Default timeout for handler execution in seconds
DEFAULT_HANDLER_TIMEOUT = 30

MockOutput = Union[str, Dict[str, Any], List[Any]]


class FunctionExecutor:
    """Turns ToolCalls into string outputs the model can read."""

    def __init__(self,
                 mock_function_outputs: Optional[Dict[str, MockOutput]] = None,
                 handlers: Optional[Dict[str, Callable[..., Any]]] = None,
                 timeout: float = DEFAULT_HANDLER_TIMEOUT,
                 logger: Optional[LoggerInterface] = None):
        """
        Initialize the executor.

        Args:
            mock_function_outputs: Canned outputs keyed by function name
            handlers: Python callables keyed by function name, called with the parsed arguments
            timeout: Handler execution timeout in seconds
            logger: Logger instance
        """
        self._logger = logger or LoggerFactory.create(name="function_executor")
        self.mock_function_outputs = dict(mock_function_outputs or {})
        self.handlers = dict(handlers or {})
        self.timeout = timeout

        for name, handler in self.handlers.items():
            if not callable(handler):
                raise AIToolError(f"Handler for function '{name}' is not callable", tool_name=name)

    async def execute(self, tool_call: ToolCall) -> str:
        """Produce the output string for a single tool call."""
        name = tool_call.function_name

        if name in self.mock_function_outputs:
            self._logger.debug(f"Using custom mock output for function '{name}'")
            return self._format_output(self.mock_function_outputs[name])

        handler = self.handlers.get(name)
        if handler is not None:
            return await self._run_handler(name, handler, tool_call.arguments)

        self._logger.debug(f"Using default mock output for function '{name}'")
        return json.dumps({
            "success": True,
            "message": f"Mock result for {name}",
            "data": tool_call.arguments,
        })

    async def execute_all(self, tool_calls: List[ToolCall]) -> List[FunctionOutput]:
        """Execute tool calls one after another, in the order the model requested them."""
        outputs = []
        for tool_call in tool_calls:
            output = await self.execute(tool_call)
            outputs.append(FunctionOutput(call_id=tool_call.id, function_name=tool_call.function_name, output=output))
        return outputs

    async def _run_handler(self, name: str, handler: Callable[..., Any], arguments: Dict[str, Any]) -> str:
        self._logger.debug(f"Executing handler for function '{name}'")
        try:
            if inspect.iscoroutinefunction(handler):
                result = await asyncio.wait_for(handler(**arguments), timeout=self.timeout)
            else:
                loop = asyncio.get_running_loop()
                result = await asyncio.wait_for(
                    loop.run_in_executor(None, functools.partial(handler, **arguments)),
                    timeout=self.timeout,
                )
        except asyncio.TimeoutError:
            self._logger.error(f"Handler for function '{name}' timed out after {self.timeout}s")
            return json.dumps({"success": False, "error": f"Function '{name}' timed out after {self.timeout}s"})
        except Exception as e:
            # Handler failures are reported back to the model, not raised
            self._logger.error(f"Handler for function '{name}' failed: {e}", exc_info=True)
            return json.dumps({"success": False, "error": f"{type(e).__name__}: {e}"})

        self._logger.info(f"Handler for function '{name}' executed successfully.")
        return self._format_output(result)

    @staticmethod
    def _format_output(value: Any) -> str:
        if isinstance(value, str):
            return value
        return json.dumps(value, default=str)
