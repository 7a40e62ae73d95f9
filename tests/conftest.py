"""
Shared fixtures for conversation engine tests.
"""
import pytest
from unittest.mock import MagicMock

from conversation_engine.config import EngineConfig
from conversation_engine.core.models import ProviderConfig, ConversationState
from conversation_engine.utils.logger import LoggerInterface


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    return MagicMock(spec=LoggerInterface)


@pytest.fixture
def engine_config():
    """Engine configuration with literal API keys and no .env loading."""
    return EngineConfig(
        load_env=False,
        overrides={
            "providers": {
                "openai": {"api_key": "test-openai-key"},
                "anthropic": {"api_key": "test-anthropic-key"},
                "google": {"api_key": "test-google-key"},
            },
            "assistants": {"poll_interval": 0, "poll_timeout": 5},
        },
    )


@pytest.fixture
def state():
    return ConversationState()


@pytest.fixture
def weather_function():
    return {
        "name": "get_weather",
        "description": "Get the weather for a city",
        "parameters": {
            "type": "object",
            "properties": {"city": {"type": "string"}},
            "required": ["city"],
        },
    }


@pytest.fixture
def chat_config(weather_function):
    return ProviderConfig(
        provider="openai", api="chat_completions", model="gpt-4o", temperature=0.7,
        tools=["functions"], tool_config={"functions": [weather_function]},
    )


@pytest.fixture
def responses_config(weather_function):
    return ProviderConfig(
        provider="openai", api="responses", model="gpt-4o", temperature=0.7,
        tools=["web_search", "functions"], tool_config={"functions": [weather_function]},
    )


@pytest.fixture
def assistants_config():
    return ProviderConfig(provider="openai", api="assistants", model="gpt-4o", assistant_id="asst_123")


@pytest.fixture
def anthropic_config(weather_function):
    return ProviderConfig(
        provider="anthropic", api="messages", model="claude-3-5-sonnet-latest", temperature=0.2,
        tools=["functions"], tool_config={"functions": [weather_function]},
    )


@pytest.fixture
def function_call_raw():
    """Builder for a raw Responses API payload that asks for one function call."""
    def build(index, name="get_weather", arguments='{"city": "Paris"}'):
        return {
            "id": f"resp_tool_{index}",
            "model": "gpt-4o",
            "status": "completed",
            "output": [{
                "type": "function_call",
                "id": f"fc_{index}",
                "call_id": f"call_{index}",
                "name": name,
                "arguments": arguments,
            }],
            "usage": {"input_tokens": 5, "output_tokens": 7, "total_tokens": 12},
        }
    return build


@pytest.fixture
def gemini_config(weather_function):
    return ProviderConfig(
        provider="google", api="gemini", model="gemini-1.5-pro",
        tools=["functions"], tool_config={"functions": [weather_function]},
    )
