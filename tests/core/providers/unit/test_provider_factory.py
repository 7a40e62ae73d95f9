# tests/core/providers/unit/test_provider_factory.py
"""
Unit tests for ProviderFactory and ApiType resolution.
"""
import pytest
from unittest.mock import MagicMock

from conversation_engine.core.api_types import ApiType
from conversation_engine.core.models import ProviderConfig
from conversation_engine.core.provider_factory import ProviderFactory
from conversation_engine.core.providers import (
    OpenAIChatProvider, OpenAIResponsesProvider, OpenAIAssistantsProvider, AnthropicProvider, GeminiProvider,
)
from conversation_engine.exceptions import AIConfigError


@pytest.mark.parametrize("provider,api,expected", [
    ("openai", "chat_completions", OpenAIChatProvider),
    ("openai", "responses", OpenAIResponsesProvider),
    ("openai", "assistants", OpenAIAssistantsProvider),
    ("anthropic", "messages", AnthropicProvider),
    ("google", "gemini", GeminiProvider),
    ("OpenAI", "Responses", OpenAIResponsesProvider),
])
def test_provider_class(provider, api, expected):
    config = ProviderConfig(provider=provider, api=api, model="m")

    assert ProviderFactory.provider_class(config) is expected


@pytest.mark.parametrize("provider,api,config_name", [
    ("", "responses", "provider"),
    ("openai", "", "api"),
    ("openai", "completions", "api"),
    ("anthropic", "responses", "api"),
    ("gemini", "messages", "api"),
])
def test_invalid_pairs_raise_config_error(provider, api, config_name):
    with pytest.raises(AIConfigError) as exc_info:
        ProviderFactory.provider_class(ProviderConfig(provider=provider, api=api, model="m"))

    assert exc_info.value.config_name == config_name


def test_create_mock_provider(responses_config, engine_config, mock_logger):
    provider = ProviderFactory.create(responses_config, config=engine_config, logger=mock_logger)

    assert isinstance(provider, OpenAIResponsesProvider)
    assert provider.use_real_llm is False
    assert provider.client is None
    assert provider.stateful is True


def test_create_real_provider_with_injected_client(chat_config, engine_config, mock_logger):
    client = MagicMock()

    provider = ProviderFactory.create(
        chat_config, use_real_llm=True, config=engine_config, logger=mock_logger, client=client,
    )

    assert provider.client is client


def test_real_provider_builds_sdk_client(anthropic_config, engine_config, mock_logger):
    provider = ProviderFactory.create(anthropic_config, use_real_llm=True, config=engine_config, logger=mock_logger)

    assert provider.client is not None
    assert provider.client.api_key == "test-anthropic-key"


def test_api_type_round_trip():
    assert ApiType.OPENAI_ASSISTANTS.provider == "openai"
    assert ApiType.OPENAI_ASSISTANTS.api == "assistants"
    assert ApiType.from_config("anthropic", "messages") is ApiType.ANTHROPIC_MESSAGES
    assert ApiType.from_config("google", "gemini") is ApiType.GOOGLE_GEMINI
    assert ApiType.from_config(None, "messages") is None
