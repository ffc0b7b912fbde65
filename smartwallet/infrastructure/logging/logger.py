"""Logging helpers for the ledger.

Loggers are assembled by :class:`LoggerBuilder` and exposed through small
singleton wrappers so every component writes to the same handlers:

* ``get_app_logger`` for application diagnostics;
* ``get_audit_logger`` for the trail of ledger mutations.
"""

from datetime import date
import logging
from pathlib import Path
from typing import Callable

from smartwallet.utils.utils import get_project_root


DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class LoggerBuilder:
    """Fluent builder for standard library loggers.

    Files are written to ``<project root>/logs/<subdir>/<YYYYMMDD>_<prefix>.log``.
    """

    def __init__(self) -> None:
        self._name = "smartwallet"
        self._subdir = "app"
        self._prefix = "app_logs"
        self._console = False
        self._level = logging.INFO
        self._formatter_factory: Callable[[], logging.Formatter] = (
            LoggerBuilder._default_formatter
        )
        self._file_handler_factory: Callable[
            [Path, logging.Formatter], logging.Handler
        ] = LoggerBuilder._default_file_handler
        self._console_handler_factory: Callable[
            [logging.Formatter], logging.Handler
        ] = LoggerBuilder._default_console_handler

    def name(self, value: str) -> "LoggerBuilder":
        self._name = value
        return self

    def subdir(self, value: str) -> "LoggerBuilder":
        self._subdir = value
        return self

    def prefix(self, value: str) -> "LoggerBuilder":
        self._prefix = value
        return self

    def console(self, enabled: bool) -> "LoggerBuilder":
        self._console = enabled
        return self

    def level(self, value: int) -> "LoggerBuilder":
        self._level = value
        return self

    def formatter(
        self,
        factory: Callable[[], logging.Formatter],
    ) -> "LoggerBuilder":
        self._formatter_factory = factory
        return self

    def file_handler(
        self,
        factory: Callable[[Path, logging.Formatter], logging.Handler],
    ) -> "LoggerBuilder":
        self._file_handler_factory = factory
        return self

    def console_handler(
        self,
        factory: Callable[[logging.Formatter], logging.Handler],
    ) -> "LoggerBuilder":
        self._console_handler_factory = factory
        return self

    def build(self) -> logging.Logger:
        """Build the configured logger.

        Handlers are attached once; building the same name again returns the
        already configured logger.

        Returns:
            logging.Logger: Logger with file and optional console handlers.
        """
        logger = logging.getLogger(self._name)
        logger.setLevel(self._level)
        if logger.handlers:
            return logger

        fmt = self._formatter_factory()
        log_dir = get_project_root() / "logs" / self._subdir
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"{self._today_stamp()}_{self._prefix}.log"
        logger.addHandler(self._file_handler_factory(log_path, fmt))
        if self._console:
            logger.addHandler(self._console_handler_factory(fmt))
        logger.propagate = False
        return logger

    @staticmethod
    def _today_stamp() -> str:
        return date.today().strftime("%Y%m%d")

    @staticmethod
    def _default_formatter() -> logging.Formatter:
        return logging.Formatter(DEFAULT_FORMAT)

    @staticmethod
    def _default_file_handler(
        path: Path,
        fmt: logging.Formatter,
    ) -> logging.Handler:
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(logging.INFO)
        handler.setFormatter(fmt)
        return handler

    @staticmethod
    def _default_console_handler(fmt: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(fmt)
        return handler


class Logger:
    """Singleton wrapper delegating to a built standard library logger."""

    _instance = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, name: str = "smartwallet") -> None:
        if self._initialized:
            return
        self.logger = self._builder(name).build()
        self._initialized = True

    def _builder(self, name: str) -> LoggerBuilder:
        return LoggerBuilder().name(name)

    def info(self, message, *args) -> None:
        self.logger.info(message, *args)

    def warning(self, message, *args) -> None:
        self.logger.warning(message, *args)

    def error(self, message, *args) -> None:
        self.logger.error(message, *args)

    def debug(self, message, *args) -> None:
        self.logger.debug(message, *args)

    def critical(self, message, *args) -> None:
        self.logger.critical(message, *args)


class AppLogger(Logger):
    """Application-wide diagnostics logger."""

    _instance = None

    def _builder(self, name: str) -> LoggerBuilder:
        return (
            LoggerBuilder()
            .name(name)
            .subdir("app")
            .prefix("app_logs")
            .console(True)
        )


class AuditLogger(Logger):
    """Logger recording every ledger mutation."""

    _instance = None

    def _builder(self, name: str) -> LoggerBuilder:
        return (
            LoggerBuilder()
            .name(name)
            .subdir("audit")
            .prefix("audit_logs")
        )


def get_app_logger() -> AppLogger:
    """Return the application logger singleton."""
    return AppLogger("smartwallet.app")


def get_audit_logger() -> AuditLogger:
    """Return the audit logger singleton."""
    return AuditLogger("smartwallet.audit")


__all__ = [
    "LoggerBuilder",
    "Logger",
    "AppLogger",
    "AuditLogger",
    "get_app_logger",
    "get_audit_logger",
]
