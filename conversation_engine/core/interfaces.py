"""
Core interfaces for provider adapters and the interlocutor.
"""
from typing import Protocol, List, Dict, Any, Optional
from typing_extensions import runtime_checkable

from ..tools.models import FunctionOutput
from .models import ConversationInput, ConversationState, NormalizedResponse, Message


@runtime_checkable
class ProviderInterface(Protocol):
    """Interface for provider API adapters."""

    stateful: bool

    async def call(self,
                   conversation_input: ConversationInput,
                   state: Optional[ConversationState] = None) -> NormalizedResponse:
        """
        Issue one logical provider call and normalize the result.

        Args:
            conversation_input: History or continuation handle plus new input
            state: The conversation's state, used for mock bookkeeping

        Returns:
            The normalized response

        Raises:
            AIProviderError (or subclass): If the provider call fails
        """
        ...

    def normalize(self, raw: Dict[str, Any]) -> NormalizedResponse:
        """Convert a raw wire-format response into a NormalizedResponse."""
        ...

    def build_turn_input(self,
                         state: ConversationState,
                         user_text: str,
                         system_prompt: Optional[str]) -> ConversationInput:
        """Build the input for the first call of a turn."""
        ...

    def build_continuation_input(self,
                                 previous_input: ConversationInput,
                                 response: NormalizedResponse,
                                 function_outputs: List[FunctionOutput]) -> ConversationInput:
        """Build the input that returns function outputs to the model."""
        ...

    def extend_history(self,
                       final_input: ConversationInput,
                       final_response: NormalizedResponse) -> List[Dict[str, Any]]:
        """Return the wire-format history to replay on the next turn."""
        ...

    async def release_pending(self, response: NormalizedResponse) -> None:
        """Abandon the pending function calls of a response the loop will not answer."""
        ...


@runtime_checkable
class InterlocutorInterface(Protocol):
    """Interface for the simulated user driving turns 2..N."""

    async def next_message(self,
                           simulation_prompt: Optional[str],
                           history: List[Message],
                           turn: int) -> Optional[str]:
        """
        Generate the next user message.

        Returns:
            The message text, or None when the conversation should end
        """
        ...
