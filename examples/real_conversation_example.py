# examples/real_conversation_example.py
"""
Example script running a simulated conversation against a real provider API.

Requires OPENAI_API_KEY (and ANTHROPIC_API_KEY for the anthropic variant) in
the environment or a .env file. Usage:

    python examples/real_conversation_example.py [openai/chat_completions|openai/responses|anthropic/messages]
"""
import asyncio
from pathlib import Path
import sys

# --- Setup Path ---
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# --- Imports ---
from conversation_engine import ConversationRunner, ConversationParams, ProviderConfig, EngineConfig
from conversation_engine.exceptions import AIConfigError, AIProviderError
from conversation_engine.utils.logger import LoggerFactory, LoggingLevel

LoggerFactory.enable_real_loggers(LoggingLevel.INFO)
logger = LoggerFactory.create("real_conversation_example")

MODELS = {
    ("openai", "chat_completions"): "gpt-4o-mini",
    ("openai", "responses"): "gpt-4o-mini",
    ("anthropic", "messages"): "claude-3-5-haiku-latest",
}


def lookup_time(city: str) -> dict:
    """Toy handler the model can call."""
    return {"city": city, "local_time": "14:05"}


async def main(selector: str):
    provider, api = selector.split("/", 1)
    provider_config = ProviderConfig(
        provider=provider,
        api=api,
        model=MODELS.get((provider, api), "gpt-4o-mini"),
        temperature=0.5,
        tools=["functions"],
        tool_config={
            "functions": [{
                "name": "lookup_time",
                "description": "Look up the local time in a city",
                "parameters": {
                    "type": "object",
                    "properties": {"city": {"type": "string"}},
                    "required": ["city"],
                },
            }]
        },
    )
    runner = ConversationRunner(provider_config, function_handlers={"lookup_time": lookup_time})

    try:
        result = await runner.run(ConversationParams(
            system_prompt="You are a concise assistant.",
            first_user_message="What time is it in Tokyo right now?",
            interlocutor_prompt="You are a curious user. End the conversation after two follow-ups.",
            max_turns=3,
            use_real_llm=True,
        ))
    except AIConfigError as e:
        logger.error(f"Configuration problem: {e}")
        return
    except AIProviderError as e:
        logger.error(f"Provider call failed: {e}", exc_info=True)
        return

    for message in result.messages:
        logger.info(f"  [turn {message.turn}] {message.role}: {message.content}")
    logger.info(f"Turns: {result.total_turns}, tokens: {result.tokens}, time: {result.response_time_ms}ms")


if __name__ == "__main__":
    EngineConfig().configure_logging()
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "openai/chat_completions"))
