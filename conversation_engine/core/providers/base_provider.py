"""
Base provider implementation.
"""
from typing import List, Dict, Any, Optional, Type
import abc
from abc import abstractmethod

from ..interfaces import ProviderInterface
from ..models import (
    ConversationInput, ConversationState, NormalizedResponse, ProviderConfig,
)
from ...tools.models import FunctionOutput
from ...utils.logger import LoggerInterface, LoggerFactory
from ...config import EngineConfig
from ...exceptions import AIFrameworkError, AIProviderError, ModelNotFoundError
from .tool_formatter import ToolFormatter

MOCK_USAGE = {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30}
MOCK_FUNCTION_REPLY = "Mock response after function call"


class BaseProvider(ProviderInterface, abc.ABC):
    """
    Base implementation for provider API adapters.

    ``call`` either synthesizes a mock response in the provider's own wire
    format or prepares a payload and makes the real request. Both paths end
    in ``normalize``, so mocked and real responses take the same route into
    the engine.
    """

    # Provider name used for credentials and error context
    provider_name: str = ""
    # Whether the API keeps conversation state server-side
    stateful: bool = False

    def __init__(self,
                 provider_config: ProviderConfig,
                 use_real_llm: bool = False,
                 config: Optional[EngineConfig] = None,
                 logger: Optional[LoggerInterface] = None,
                 client: Optional[Any] = None):
        """
        Initialize the provider.

        Args:
            provider_config: Provider, API, model and tool settings
            use_real_llm: False selects mock mode, which never touches the network
            config: Engine configuration (credentials, provider defaults)
            logger: Logger instance
            client: Pre-built SDK client, mainly for tests
        """
        self.provider_config = provider_config
        self.model_id = provider_config.model
        self.use_real_llm = use_real_llm
        self.logger = logger or LoggerFactory.create(name=f"{self.provider_name}_provider")
        self.config = config or EngineConfig(load_env=use_real_llm)
        self.tool_formatter = ToolFormatter(provider_config.tools, provider_config.tool_config)
        self.client = client

        if self.use_real_llm and self.client is None:
            self._initialize_credentials()

        self.logger.debug(
            f"Initialized {self.__class__.__name__} for model {self.model_id} "
            f"({'real' if use_real_llm else 'mock'} mode)"
        )

    def _initialize_credentials(self) -> None:
        """Resolve the API key and build the SDK client."""
        api_key = self.config.require_api_key(self.provider_name)
        provider_settings = self.config.get_provider_config(self.provider_name)
        self.client = self._create_client(api_key, provider_settings)

    @property
    def temperature(self) -> Optional[float]:
        """The configured temperature, or ``defaults.temperature`` when unset."""
        if self.provider_config.temperature is not None:
            return self.provider_config.temperature
        return self.config.defaults.get("temperature")

    @abstractmethod
    def _create_client(self, api_key: str, provider_settings: Dict[str, Any]) -> Any:
        """Create the provider SDK client."""
        raise NotImplementedError("Subclasses must implement _create_client")

    async def call(self,
                   conversation_input: ConversationInput,
                   state: Optional[ConversationState] = None) -> NormalizedResponse:
        """
        Make one logical call to the provider and normalize the response.

        Args:
            conversation_input: History or continuation handle plus new input
            state: The conversation's state; mock mode draws its counter from it

        Returns:
            NormalizedResponse

        Raises:
            AIProviderError (or subclass): If the provider request fails
        """
        if not self.use_real_llm:
            state = state if state is not None else ConversationState()
            index = state.next_mock_index()
            self.logger.debug(f"Mock call #{index} to {self.__class__.__name__} (turn {conversation_input.turn})")
            return self.normalize(self._mock_raw_response(conversation_input, index))

        payload = self._prepare_request_payload(conversation_input)
        self.logger.debug(f"Calling {self.__class__.__name__} with payload keys: {list(payload.keys())}")
        try:
            raw_response = await self._make_api_request(payload)
        except AIFrameworkError:
            raise
        except Exception as e:
            self._handle_api_error(e, payload)

        response = self.normalize(raw_response)
        self.logger.debug(
            f"{self.__class__.__name__} response: {len(response.text)} chars, "
            f"{len(response.tool_calls)} tool call(s), {response.usage.total_tokens} tokens"
        )
        return response

    @abstractmethod
    def normalize(self, raw: Dict[str, Any]) -> NormalizedResponse:
        """Convert a raw response dict into a NormalizedResponse."""
        raise NotImplementedError("Subclasses must implement normalize")

    @abstractmethod
    def _prepare_request_payload(self, conversation_input: ConversationInput) -> Dict[str, Any]:
        """Build the request payload for the provider API."""
        raise NotImplementedError("Subclasses must implement _prepare_request_payload")

    @abstractmethod
    async def _make_api_request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Make the actual asynchronous API request.

        Returns:
            The raw response converted to a plain dict
        """
        raise NotImplementedError("Subclasses must implement _make_api_request")

    @abstractmethod
    def _mock_raw_response(self, conversation_input: ConversationInput, index: int) -> Dict[str, Any]:
        """Synthesize a raw response in the provider's wire format."""
        raise NotImplementedError("Subclasses must implement _mock_raw_response")

    @abstractmethod
    def build_turn_input(self,
                         state: ConversationState,
                         user_text: str,
                         system_prompt: Optional[str]) -> ConversationInput:
        raise NotImplementedError

    @abstractmethod
    def build_continuation_input(self,
                                 previous_input: ConversationInput,
                                 response: NormalizedResponse,
                                 function_outputs: List[FunctionOutput]) -> ConversationInput:
        raise NotImplementedError

    def extend_history(self,
                       final_input: ConversationInput,
                       final_response: NormalizedResponse) -> List[Dict[str, Any]]:
        """Stateful APIs keep history server-side, so there is nothing to replay."""
        return []

    async def release_pending(self, response: NormalizedResponse) -> None:
        """Abandon function calls left unanswered by a capped turn. Nothing to do for most APIs."""
        return None

    @staticmethod
    def _to_dict(sdk_object: Any) -> Dict[str, Any]:
        if isinstance(sdk_object, dict):
            return sdk_object
        if hasattr(sdk_object, "model_dump"):
            return sdk_object.model_dump()
        if hasattr(sdk_object, "to_dict"):
            return sdk_object.to_dict()
        raise TypeError(f"Cannot convert {type(sdk_object).__name__} to a dict")

    @abstractmethod
    def _get_error_map(self) -> Dict[Type[Exception], Type[AIProviderError]]:
        """
        Returns a mapping from provider SDK exceptions to engine exceptions.
        Order matters: the first matching entry wins.
        """
        pass

    def _handle_api_error(self, error: Exception, payload: Dict[str, Any]) -> None:
        """
        Map an SDK error to an engine exception and raise it, chained to the original.

        Raises:
            AIProviderError (or subclass): Always
        """
        provider_name = self.provider_name or self.__class__.__name__.lower()
        model_id = payload.get("model", self.model_id)
        status_code = getattr(error, "status_code", None)

        for provider_exception_type, framework_exception_type in self._get_error_map().items():
            if isinstance(error, provider_exception_type):
                self.logger.error(
                    f"Provider Error ({provider_name}, model: {model_id}): Encountered {type(error).__name__}. "
                    f"Mapping to {framework_exception_type.__name__}. Original error: {error}",
                    exc_info=True
                )
                kwargs: Dict[str, Any] = {"provider": provider_name, "status_code": status_code}
                if issubclass(framework_exception_type, ModelNotFoundError):
                    kwargs["model_id"] = model_id
                final_kwargs = {k: v for k, v in kwargs.items() if v is not None}
                raise framework_exception_type(str(error), **final_kwargs) from error

        self.logger.error(
            f"Unmapped Provider Error ({provider_name}, model: {model_id}): Encountered {type(error).__name__}: {error}",
            exc_info=True
        )
        raise AIProviderError(
            f"Provider {provider_name} encountered an unmapped error: {error}",
            provider=provider_name,
            status_code=status_code
        ) from error
