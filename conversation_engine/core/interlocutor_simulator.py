"""
Simulated user that produces the user messages for turns 2..N.
"""
from typing import List, Optional

from ..config import EngineConfig
from ..utils.logger import LoggerInterface, LoggerFactory
from .interfaces import InterlocutorInterface, ProviderInterface
from .models import ConversationInput, Message, ProviderConfig
from .provider_factory import ProviderFactory

END_MARKER = "[END_CONVERSATION]"
MOCK_FOLLOW_UP = "I have another question."

SIMULATION_TEMPLATE = (
    "You are simulating a user in a conversation. Based on the following context "
    "and conversation history, generate your NEXT response.\n\n"
    "Context: {prompt}\n\n"
    "Conversation so far:\n{history}\n\n"
    "If the conversation has naturally concluded, respond with exactly: {end_marker}\n"
    "Otherwise, generate ONLY the user's next message, nothing else."
)


def format_history(messages: List[Message]) -> str:
    """Render a transcript as ``Role: content`` blocks separated by blank lines."""
    return "\n\n".join(f"{m.role.capitalize()}: {m.content}" for m in messages)


class InterlocutorSimulator(InterlocutorInterface):
    """
    Generates the next user message from a persona prompt and the transcript.

    In mock mode it always answers with a canned follow-up and never ends the
    conversation. In real mode it asks a lightweight chat model and returns
    None when the reply contains the end marker anywhere.
    """

    def __init__(self,
                 use_real_llm: bool = False,
                 provider: Optional[ProviderInterface] = None,
                 config: Optional[EngineConfig] = None,
                 logger: Optional[LoggerInterface] = None):
        self.use_real_llm = use_real_llm
        self._provider = provider
        self._config = config
        self._logger = logger or LoggerFactory.create(name="interlocutor_simulator")

        settings = config.interlocutor_settings if config else {}
        self.end_marker = settings.get("end_marker", END_MARKER)

    async def next_message(self,
                           simulation_prompt: Optional[str],
                           history: List[Message],
                           turn: int) -> Optional[str]:
        if not self.use_real_llm:
            return MOCK_FOLLOW_UP

        prompt = self.build_prompt(simulation_prompt, history)
        response = await self._get_provider().call(
            ConversationInput(messages=[{"role": "user", "content": prompt}], turn=turn)
        )
        return self.parse_reply(response.text, turn)

    def build_prompt(self, simulation_prompt: Optional[str], history: List[Message]) -> str:
        return SIMULATION_TEMPLATE.format(
            prompt=simulation_prompt or "",
            history=format_history(history),
            end_marker=self.end_marker,
        )

    def parse_reply(self, text: Optional[str], turn: int) -> Optional[str]:
        reply = (text or "").strip()
        if self.end_marker in reply:
            self._logger.info(f"Interlocutor ended the conversation before turn {turn}")
            return None
        return reply

    def _get_provider(self) -> ProviderInterface:
        if self._provider is None:
            config = self._config or EngineConfig()
            settings = config.interlocutor_settings
            self._provider = ProviderFactory.create(
                ProviderConfig(
                    provider=settings.get("provider", "openai"),
                    api=settings.get("api", "chat_completions"),
                    model=settings.get("model", "gpt-4o-mini"),
                    temperature=settings.get("temperature", 0.7),
                ),
                use_real_llm=True,
                config=config,
                logger=self._logger,
            )
        return self._provider
