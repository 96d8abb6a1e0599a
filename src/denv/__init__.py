"""denv - run commands with environment variables from .env files.

This package provides:
- config: env sources, dotenv parsing, the EnvLoader resolver, tool settings
- runner: child process execution with signal forwarding
- output: rendering for get/keys/list
- logger: structured logging to stderr
- exceptions: error classes with structured info and exit codes
"""

__version__ = "1.0.0"

# Re-export commonly used items for convenience
from denv.config import (
    DiscoveryPolicy,
    EnvironmentSnapshot,
    EnvLoader,
    EnvSource,
    Settings,
    get_settings,
    reset_settings,
)

from denv.exceptions import (
    ArgumentError,
    ChildRuntimeError,
    ChildStartError,
    ConfigurationError,
    DenvError,
    KeyNotFoundError,
    SourceReadError,
)

from denv.logger import (
    Logger,
    StructuredLogger,
    create_logger,
    get_logger,
)

from denv.runner import CommandRunner, SignalRelay

__all__ = [
    "__version__",
    # Config
    "DiscoveryPolicy",
    "EnvironmentSnapshot",
    "EnvLoader",
    "EnvSource",
    "Settings",
    "get_settings",
    "reset_settings",
    # Exceptions
    "ArgumentError",
    "ChildRuntimeError",
    "ChildStartError",
    "ConfigurationError",
    "DenvError",
    "KeyNotFoundError",
    "SourceReadError",
    # Logger
    "Logger",
    "StructuredLogger",
    "create_logger",
    "get_logger",
    # Runner
    "CommandRunner",
    "SignalRelay",
]
