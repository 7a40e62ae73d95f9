# examples/mock_conversation_example.py
"""
Example script running a three-turn conversation in mock mode.

Mock mode never calls a provider, so no API key is needed.
"""
import asyncio
from pathlib import Path
import sys

# --- Setup Path ---
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# --- Imports ---
from conversation_engine import ConversationRunner, ConversationParams, ProviderConfig, EngineConfig
from conversation_engine.utils.logger import LoggerFactory, LoggingLevel

LoggerFactory.enable_real_loggers(LoggingLevel.INFO)
logger = LoggerFactory.create("mock_conversation_example")


async def main():
    provider_config = ProviderConfig(
        provider="openai",
        api="responses",
        model="gpt-4o",
        temperature=0.7,
        tools=["functions"],
        tool_config={
            "functions": [{
                "name": "get_weather",
                "description": "Get the current weather for a city",
                "parameters": {
                    "type": "object",
                    "properties": {"city": {"type": "string"}},
                    "required": ["city"],
                },
            }]
        },
    )
    runner = ConversationRunner(provider_config, config=EngineConfig(load_env=False))

    result = await runner.run(ConversationParams(
        system_prompt="You are a friendly travel assistant.",
        first_user_message="I'm planning a trip to Lisbon.",
        interlocutor_prompt="You are a traveller asking about the weather and sights.",
        max_turns=3,
        use_real_llm=False,
        mock_function_outputs={"get_weather": {"city": "Lisbon", "forecast": "sunny", "high_c": 24}},
    ))

    logger.info(f"Total turns: {result.total_turns}")
    for message in result.messages:
        logger.info(f"  [turn {message.turn}] {message.role}: {message.content}")
    logger.info(f"Tokens: {result.tokens}")
    logger.info(f"Last response id: {result.previous_response_id}")


if __name__ == "__main__":
    asyncio.run(main())
