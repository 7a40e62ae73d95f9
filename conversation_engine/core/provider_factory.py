"""
Factory for creating provider adapters.
"""
from typing import Optional, Any, Type

from ..config import EngineConfig
from ..exceptions import AIConfigError
from ..utils.logger import LoggerFactory, LoggerInterface
from .api_types import ApiType
from .models import ProviderConfig
from .providers.base_provider import BaseProvider
from .providers.openai_chat_provider import OpenAIChatProvider
from .providers.openai_responses_provider import OpenAIResponsesProvider
from .providers.openai_assistants_provider import OpenAIAssistantsProvider
from .providers.anthropic_provider import AnthropicProvider
from .providers.gemini_provider import GeminiProvider


class ProviderFactory:
    """
    Factory for creating provider adapters.

    The set of adapters is closed: one per ``ApiType``. Supporting a new
    provider API means adding an ``ApiType`` member and an entry here.
    """

    _providers = {
        ApiType.OPENAI_CHAT_COMPLETIONS: OpenAIChatProvider,
        ApiType.OPENAI_RESPONSES: OpenAIResponsesProvider,
        ApiType.OPENAI_ASSISTANTS: OpenAIAssistantsProvider,
        ApiType.ANTHROPIC_MESSAGES: AnthropicProvider,
        ApiType.GOOGLE_GEMINI: GeminiProvider,
    }

    @classmethod
    def provider_class(cls, provider_config: ProviderConfig) -> Type[BaseProvider]:
        """
        Resolve the adapter class for a provider configuration.

        Raises:
            AIConfigError: If provider or api is missing or unsupported
        """
        if not provider_config.provider:
            raise AIConfigError("Provider configuration is missing 'provider'", config_name="provider")
        if not provider_config.api:
            raise AIConfigError("Provider configuration is missing 'api'", config_name="api")

        api_type = provider_config.api_type
        if api_type is None:
            raise AIConfigError(
                f"Unsupported provider API: {provider_config.provider}/{provider_config.api}",
                config_name="api",
            )
        return cls._providers[api_type]

    @classmethod
    def create(
        cls,
        provider_config: ProviderConfig,
        use_real_llm: bool = False,
        config: Optional[EngineConfig] = None,
        logger: Optional[LoggerInterface] = None,
        client: Optional[Any] = None,
    ) -> BaseProvider:
        """
        Create a provider adapter.

        Args:
            provider_config: Provider, API, model and tool settings
            use_real_llm: False selects mock mode
            config: Engine configuration
            logger: Logger instance
            client: Pre-built SDK client

        Returns:
            Provider adapter instance
        """
        provider_class = cls.provider_class(provider_config)
        factory_logger = logger or LoggerFactory.create(name="provider_factory")
        factory_logger.debug(
            f"Creating {provider_class.__name__} for {provider_config.provider}/{provider_config.api} "
            f"model '{provider_config.model}'"
        )
        return provider_class(
            provider_config=provider_config,
            use_real_llm=use_real_llm,
            config=config,
            logger=logger,
            client=client,
        )
