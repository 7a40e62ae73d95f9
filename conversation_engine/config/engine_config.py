"""
Configuration for the conversation engine.

Settings come from the packaged ``defaults.yml``, an optional user YAML file,
and an optional override dictionary, merged in that order. Environment
variables (including a ``.env`` file) supply API keys and the log level.

Every ``EngineConfig`` is an ordinary instance. Nothing is cached at module
level, so concurrent conversations can each carry their own settings.
"""
from typing import Dict, Any, Optional
import copy
import os

import yaml
from dotenv import load_dotenv

from ..exceptions import AIConfigError
from ..utils.logger import LoggerFactory, LoggerInterface, LoggingLevel

DEFAULTS_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "defaults.yml")
LOG_LEVEL_ENV = "CONVERSATION_ENGINE_LOG_LEVEL"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class EngineConfig:
    """Layered configuration for providers, loops and the interlocutor."""

    def __init__(self,
                 config_file: Optional[str] = None,
                 overrides: Optional[Dict[str, Any]] = None,
                 load_env: bool = True,
                 logger: Optional[LoggerInterface] = None):
        """
        Initialize the configuration.

        Args:
            config_file: Optional path to a user YAML file
            overrides: Optional dictionary merged on top of everything else
            load_env: Whether to read a ``.env`` file into the environment
            logger: Logger instance
        """
        if load_env:
            load_dotenv()

        self._logger = logger or LoggerFactory.create(name="engine_config")
        self._config = self._load_yaml(DEFAULTS_FILE)

        if config_file:
            if not os.path.exists(config_file):
                raise AIConfigError(f"Configuration file not found: {config_file}", config_name=config_file)
            self._config = _deep_merge(self._config, self._load_yaml(config_file))
            self._logger.debug(f"Loaded user configuration from {config_file}")

        if overrides:
            self._config = _deep_merge(self._config, overrides)

    def _load_yaml(self, path: str) -> Dict[str, Any]:
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise AIConfigError(f"Invalid YAML in {path}: {e}", config_name=path) from e
        if not isinstance(data, dict):
            raise AIConfigError(f"Configuration in {path} must be a mapping", config_name=path)
        return data

    def get(self, path: str, default: Any = None) -> Any:
        """
        Look up a value by dotted path, e.g. ``"assistants.poll_timeout"``.
        """
        node: Any = self._config
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_provider_config(self, provider: str) -> Dict[str, Any]:
        """
        Get configuration for a specific provider.

        Raises:
            AIConfigError: If the provider is not configured
        """
        providers = self._config.get("providers", {})
        if provider not in providers:
            raise AIConfigError(f"Provider configuration not found: {provider}", config_name="providers")
        return dict(providers[provider] or {})

    def get_api_key(self, provider: str) -> Optional[str]:
        """
        Resolve the API key for a provider: a literal ``api_key`` first, then
        the environment variable named by ``api_key_env``.
        """
        provider_config = self.get_provider_config(provider)
        if provider_config.get("api_key"):
            return provider_config["api_key"]
        env_var = provider_config.get("api_key_env")
        if env_var:
            return os.environ.get(env_var)
        return None

    def require_api_key(self, provider: str) -> str:
        api_key = self.get_api_key(provider)
        if not api_key:
            env_var = self.get_provider_config(provider).get("api_key_env", "<unset>")
            raise AIConfigError(
                f"No API key for provider '{provider}' (set {env_var} or providers.{provider}.api_key)",
                config_name="providers",
            )
        return api_key

    @property
    def defaults(self) -> Dict[str, Any]:
        return dict(self._config.get("defaults", {}))

    @property
    def max_tool_iterations(self) -> int:
        return int(self.get("function_calls.max_iterations", 10))

    @property
    def handler_timeout(self) -> float:
        return float(self.get("function_calls.handler_timeout", 30))

    @property
    def interlocutor_settings(self) -> Dict[str, Any]:
        return dict(self._config.get("interlocutor", {}))

    def configure_logging(self) -> None:
        """Enable real loggers when the log level environment variable is set."""
        level_name = os.environ.get(LOG_LEVEL_ENV)
        if level_name:
            LoggerFactory.enable_real_loggers(LoggingLevel.from_name(level_name))

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._config)
