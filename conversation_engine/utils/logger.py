"""
Logging utilities.

Components receive a ``LoggerInterface`` through their constructor and fall
back to ``LoggerFactory.create(name)``. Real loggers are disabled by default so
library use stays quiet until the host application opts in. Warnings and
errors reach the standard ``logging`` tree either way.
"""
import logging
import sys
from enum import Enum
from typing import Optional, Protocol
from typing_extensions import runtime_checkable

logging.getLogger("conversation_engine").addHandler(logging.NullHandler())


class LoggingLevel(Enum):
    """Supported logging levels."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_name(cls, name: str) -> "LoggingLevel":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            return cls.INFO


@runtime_checkable
class LoggerInterface(Protocol):
    """Interface every logger passed into the engine must satisfy."""

    def debug(self, message: str, *args, **kwargs) -> None: ...

    def info(self, message: str, *args, **kwargs) -> None: ...

    def warning(self, message: str, *args, **kwargs) -> None: ...

    def error(self, message: str, *args, **kwargs) -> None: ...

    def critical(self, message: str, *args, **kwargs) -> None: ...


class Logger:
    """Thin wrapper around a standard library logger."""

    def __init__(self, name: str, level: LoggingLevel = LoggingLevel.INFO):
        self.name = name
        self._logger = logging.getLogger(f"conversation_engine.{name}")
        self._logger.setLevel(level.value)

    def set_level(self, level: LoggingLevel) -> None:
        self._logger.setLevel(level.value)

    def debug(self, message: str, *args, **kwargs) -> None:
        self._logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        self._logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs) -> None:
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self._logger.error(message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs) -> None:
        self._logger.critical(message, *args, **kwargs)


class QuietLogger:
    """
    Default logger while real loggers are off.

    Debug and info messages are dropped. Warnings and errors still go to the
    standard ``conversation_engine`` logger, so a host that configured
    ``logging`` sees them without opting in.
    """

    def __init__(self, name: str = "quiet"):
        self.name = name
        self._logger = logging.getLogger(f"conversation_engine.{name}")

    def debug(self, message: str, *args, **kwargs) -> None:
        pass

    def info(self, message: str, *args, **kwargs) -> None:
        pass

    def warning(self, message: str, *args, **kwargs) -> None:
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self._logger.error(message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs) -> None:
        self._logger.critical(message, *args, **kwargs)


class LoggerFactory:
    """Creates loggers for engine components."""

    _use_real_loggers = False
    _default_level = LoggingLevel.INFO
    _handler_installed = False

    @classmethod
    def enable_real_loggers(cls, level: Optional[LoggingLevel] = None) -> None:
        """Turn on real loggers and install a stream handler once."""
        cls._use_real_loggers = True
        if level is not None:
            cls._default_level = level
        if not cls._handler_installed:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ))
            logging.getLogger("conversation_engine").addHandler(handler)
            cls._handler_installed = True

    @classmethod
    def disable_real_loggers(cls) -> None:
        cls._use_real_loggers = False

    @classmethod
    def create(cls,
               name: str,
               level: Optional[LoggingLevel] = None,
               use_real_logger: Optional[bool] = None) -> LoggerInterface:
        """
        Create a logger.

        Args:
            name: Component name, appended to the ``conversation_engine`` namespace
            level: Level for a real logger (defaults to the factory level)
            use_real_logger: Force a real or null logger regardless of the factory setting

        Returns:
            A ``Logger`` or a ``QuietLogger``
        """
        real = cls._use_real_loggers if use_real_logger is None else use_real_logger
        if not real:
            return QuietLogger(name)
        return Logger(name, level or cls._default_level)
