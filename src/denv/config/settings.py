"""Dataclass-based settings for the denv tool itself.

Settings are read from DENV_* variables of the inherited process environment.
They tune the tool (logging, default file discovery), never the environment
handed to a child process.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from denv.config.env_loader import DEFAULT_ENV_FILE, DiscoveryPolicy
from denv.exceptions import ConfigurationError

DEFAULT_PREFIX = "DENV"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("text", "json")


@dataclass
class LogSettings:
    """Logging configuration

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Log format (text or json)
        log_file: Optional file receiving a copy of every record
    """

    level: str = "WARNING"
    format: str = "text"
    log_file: Optional[Path] = None

    def __post_init__(self):
        """Validate logging settings"""
        self.level = self.level.upper()
        self.format = self.format.lower()
        if self.level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"invalid log level '{self.level}' (expected one of: {', '.join(_LOG_LEVELS)})",
                details={"setting": "log_level"},
            )
        if self.format not in _LOG_FORMATS:
            raise ConfigurationError(
                f"invalid log format '{self.format}' (expected one of: {', '.join(_LOG_FORMATS)})",
                details={"setting": "log_format"},
            )
        if isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)

    @property
    def level_number(self) -> int:
        """Numeric level for the logging module"""
        return getattr(logging, self.level)

    @property
    def json_format(self) -> bool:
        return self.format == "json"

    @classmethod
    def from_env(
        cls, prefix: str = DEFAULT_PREFIX, environ: Optional[Mapping[str, str]] = None
    ) -> "LogSettings":
        """Load logging settings from environment variables

        Environment variables:
            {prefix}_LOG_LEVEL: Logging level (default: WARNING)
            {prefix}_LOG_FORMAT: text or json (default: text)
            {prefix}_LOG_FILE: Optional log file path
        """
        env = os.environ if environ is None else environ
        log_file = env.get(f"{prefix}_LOG_FILE")
        return cls(
            level=env.get(f"{prefix}_LOG_LEVEL", "WARNING"),
            format=env.get(f"{prefix}_LOG_FORMAT", "text"),
            log_file=Path(log_file) if log_file else None,
        )


@dataclass
class ResolverSettings:
    """Default env file discovery

    Attributes:
        default_env_file: File name probed in the working directory when no
            -f/-fo flag is given
        discovery: Whether discovery also runs in isolated mode
    """

    default_env_file: str = DEFAULT_ENV_FILE
    discovery: DiscoveryPolicy = DiscoveryPolicy.ALWAYS

    def __post_init__(self):
        if not self.default_env_file:
            raise ConfigurationError(
                "default env file name must not be empty",
                details={"setting": "default_file"},
            )
        if isinstance(self.discovery, str):
            try:
                self.discovery = DiscoveryPolicy(self.discovery.lower())
            except ValueError:
                choices = ", ".join(p.value for p in DiscoveryPolicy)
                raise ConfigurationError(
                    f"invalid discovery policy '{self.discovery}' (expected one of: {choices})",
                    details={"setting": "discovery"},
                ) from None

    @classmethod
    def from_env(
        cls, prefix: str = DEFAULT_PREFIX, environ: Optional[Mapping[str, str]] = None
    ) -> "ResolverSettings":
        """Load resolver settings from environment variables

        Environment variables:
            {prefix}_DEFAULT_FILE: Default env file name (default: .env)
            {prefix}_DISCOVERY: always or unless-isolated (default: always)
        """
        env = os.environ if environ is None else environ
        return cls(
            default_env_file=env.get(f"{prefix}_DEFAULT_FILE", DEFAULT_ENV_FILE),
            discovery=env.get(f"{prefix}_DISCOVERY", DiscoveryPolicy.ALWAYS.value),
        )


@dataclass
class Settings:
    """Complete tool settings

    Attributes:
        log: Logging settings
        resolver: Default env file discovery settings
        prefix: Environment variable prefix used
    """

    log: LogSettings = field(default_factory=LogSettings)
    resolver: ResolverSettings = field(default_factory=ResolverSettings)
    prefix: str = DEFAULT_PREFIX

    @classmethod
    def from_env(
        cls, prefix: str = DEFAULT_PREFIX, environ: Optional[Mapping[str, str]] = None
    ) -> "Settings":
        """Load complete settings from environment variables

        Args:
            prefix: Environment variable prefix (default: DENV)
            environ: Mapping to read instead of os.environ

        Raises:
            ConfigurationError: If any variable holds an invalid value
        """
        return cls(
            log=LogSettings.from_env(prefix, environ),
            resolver=ResolverSettings.from_env(prefix, environ),
            prefix=prefix,
        )


# Global settings storage per prefix
_global_settings: dict[str, Settings] = {}


def get_settings(prefix: str = DEFAULT_PREFIX, reload: bool = False) -> Settings:
    """Get or create the settings instance for a given prefix

    Args:
        prefix: Environment variable prefix
        reload: If True, reload settings from environment
    """
    global _global_settings

    if prefix not in _global_settings or reload:
        _global_settings[prefix] = Settings.from_env(prefix=prefix)

    return _global_settings[prefix]


def reset_settings(prefix: Optional[str] = None) -> None:
    """Reset settings (primarily for testing)

    Args:
        prefix: Specific prefix to reset, or None to reset all
    """
    global _global_settings
    if prefix:
        _global_settings.pop(prefix, None)
    else:
        _global_settings.clear()
