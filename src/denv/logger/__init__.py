"""
denv logger module

Usage:
    from denv.logger import get_logger, create_logger

    # Configured from DENV_LOG_LEVEL / DENV_LOG_FORMAT / DENV_LOG_FILE
    logger = get_logger()
    logger.debug("Resolved environment", keys=12)

    # Or explicitly
    logger = create_logger(level=logging.DEBUG, json_format=True)

Environment Variables:
    DENV_LOG_LEVEL: Logging level (default WARNING)
    DENV_LOG_FORMAT: "text" or "json"
    DENV_LOG_FILE: Optional file path for log output

All output goes to stderr.
"""

from typing import Optional, TextIO

from .interface import Logger
from .structured_logger import JsonFormatter, StructuredLogger, TextFormatter


def create_logger(
    name: str = "denv",
    level: Optional[int] = None,
    log_file: Optional[str] = None,
    json_format: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> Logger:
    """Create a new logger instance with the specified configuration.

    When level or json_format is None, missing values are taken from the
    DENV_* log settings.

    Args:
        name: Logger name
        level: Logging level
        log_file: Optional file path for log output
        json_format: If True, output logs as JSON
        stream: Console stream (default: stderr)

    Raises:
        ConfigurationError: If a DENV_LOG_* variable is invalid
    """
    if level is None or json_format is None:
        from denv.config.settings import get_settings

        log_settings = get_settings().log
        if level is None:
            level = log_settings.level_number
        if json_format is None:
            json_format = log_settings.json_format
        if log_file is None and log_settings.log_file is not None:
            log_file = str(log_settings.log_file)

    return StructuredLogger(
        name=name,
        level=level,
        log_file=log_file,
        json_format=json_format,
        stream=stream,
    )


def get_logger(name: str = "denv") -> Logger:
    """Get a logger configured from DENV_* environment variables."""
    return create_logger(name=name)


__all__ = [
    # Interface
    "Logger",
    # Implementations
    "StructuredLogger",
    # Formatters (for custom use)
    "JsonFormatter",
    "TextFormatter",
    # Factory functions
    "create_logger",
    "get_logger",
]
