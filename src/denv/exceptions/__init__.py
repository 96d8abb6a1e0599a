"""Exceptions raised by denv.

All exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for debugging
- exit_code: Process exit status reported by the CLI

Usage:
    from denv.exceptions import (
        DenvError,
        ArgumentError,
        SourceReadError,
        KeyNotFoundError,
        ChildStartError,
        ChildRuntimeError,
        ConfigurationError,
    )
"""

from denv.exceptions.base import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_OK,
    ArgumentError,
    ChildRuntimeError,
    ChildStartError,
    ConfigurationError,
    DenvError,
    KeyNotFoundError,
    SourceReadError,
)

__all__ = [
    # Exit statuses
    "EXIT_OK",
    "EXIT_FAILURE",
    "EXIT_INTERRUPTED",
    # Exceptions
    "DenvError",
    "ArgumentError",
    "SourceReadError",
    "KeyNotFoundError",
    "ChildStartError",
    "ChildRuntimeError",
    "ConfigurationError",
]
