"""Base exception classes for denv.

All denv exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for debugging
- exit_code: Process exit status the CLI reports for this error
"""

from typing import Any, Dict, Optional

EXIT_OK = 0
EXIT_FAILURE = 1
# 128 + SIGINT, as shells report an interrupted command
EXIT_INTERRUPTED = 130


class DenvError(Exception):
    """Base exception for all denv errors.

    Attributes:
        code: Machine-readable error code (e.g., "SOURCE_READ_FAILED")
        message: Human-readable error message
        details: Optional additional context for debugging
        exit_code: Exit status used when the error reaches the CLI
    """

    exit_code: int = EXIT_FAILURE

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with structured information.

        Args:
            code: Machine-readable error code (e.g., "KEY_NOT_FOUND")
            message: Human-readable error message
            details: Optional additional context
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return formatted error string."""
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization.

        Returns:
            Dictionary with code, message, details and exit_code keys.
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "exit_code": self.exit_code,
        }


class ArgumentError(DenvError):
    """Missing command or key, unknown output format, malformed flags."""

    def __init__(
        self, message: str, code: str = "INVALID_ARGUMENT", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(code=code, message=message, details=details)


class SourceReadError(DenvError):
    """A required env file is missing, unreadable, or malformed.

    The message always names the offending path.
    """

    def __init__(
        self,
        path: str,
        reason: str,
        code: str = "SOURCE_READ_FAILED",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.path = path
        self.reason = reason
        merged = {"path": path}
        merged.update(details or {})
        super().__init__(code=code, message=f"failed to read {path}: {reason}", details=merged)


class KeyNotFoundError(DenvError):
    """Requested key is absent from the resolved environment."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            code="KEY_NOT_FOUND", message=f"key '{key}' not found", details={"key": key}
        )


class ChildStartError(DenvError):
    """The child process could not be started."""

    def __init__(
        self, message: str, code: str = "CHILD_START_FAILED", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(code=code, message=message, details=details)


class ChildRuntimeError(DenvError):
    """The child terminated abnormally or waiting on it failed.

    When the child's own exit status is known it becomes ``exit_code``;
    otherwise the generic failure status is used.
    """

    def __init__(
        self,
        message: str,
        code: str = "CHILD_WAIT_FAILED",
        exit_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(code=code, message=message, details=details)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(DenvError):
    """Invalid DENV_* tool settings."""

    def __init__(
        self, message: str, code: str = "INVALID_SETTING", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(code=code, message=message, details=details)
