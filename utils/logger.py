"""
Logging utilities for the interaction bot.
Uses Rich for colored console output and plain files for persistent logs.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

APP_LOGGER = "interaction_bot"

FILE_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Custom theme for logging
CUSTOM_THEME = Theme({
    "logging.level.debug": "dim cyan",
})

console = Console(theme=CUSTOM_THEME, stderr=True)

_configured: Optional[logging.Logger] = None


def _parse_level(level: Union[int, str, None]) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    # winston-style "warn" is accepted alongside the stdlib names
    name = level.strip().upper()
    if name == "WARN":
        name = "WARNING"
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def _console_handler(level: int) -> logging.Handler:
    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        omit_repeated_times=False,
        log_time_format="[%Y-%m-%d %H:%M:%S]",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt="[%(name)s] %(message)s"))
    return handler


def _file_handlers(log_dir: Union[str, Path], level: int) -> list:
    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT)

    error_handler = logging.FileHandler(path / "error.log", encoding="utf-8")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)

    combined_handler = logging.FileHandler(path / "combined.log", encoding="utf-8")
    combined_handler.setLevel(level)
    combined_handler.setFormatter(formatter)

    return [error_handler, combined_handler]


def setup_logging(
    level: Union[int, str, None] = None,
    log_dir: Union[str, Path] = "logs",
    console_output: bool = True,
    file_output: bool = True,
    force: bool = False,
) -> logging.Logger:
    """
    Configure the application logger. Runs once per process.

    Console output goes through RichHandler; file output writes every record
    to ``combined.log`` and errors to ``error.log``. If the log directory
    cannot be used, the logger falls back to console only.

    Args:
        level: Logging level name or number (default: INFO)
        log_dir: Directory for log files
        console_output: Attach the Rich console handler
        file_output: Attach the file handlers
        force: Reconfigure even if already configured

    Returns:
        Configured application logger
    """
    global _configured

    if _configured is not None and not force:
        return _configured

    numeric_level = _parse_level(level)
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(numeric_level)

    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = []
    if console_output:
        handlers.append(_console_handler(numeric_level))

    file_error: Optional[Exception] = None
    if file_output:
        try:
            handlers.extend(_file_handlers(log_dir, numeric_level))
        except OSError as e:
            file_error = e

    if file_error is not None and not console_output:
        # Fallback: never leave the process without a sink
        handlers.append(_console_handler(logging.INFO))

    for handler in handlers:
        logger.addHandler(handler)

    _configured = logger

    if file_error is not None:
        logger.error(f"Failed to initialize file logging in {log_dir}: {file_error}")
    logger.info("Logger initialized")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Until setup_logging() runs, records propagate to the root logger
    unformatted.
    """
    return logging.getLogger(f"{APP_LOGGER}.{name}")


class LoggerMixin:
    """Mixin class that provides logger functionality."""

    def __init__(self, name: str):
        self._logger = get_logger(name)

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        self._logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        self._logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        self._logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message."""
        self._logger.error(message, extra=kwargs)
