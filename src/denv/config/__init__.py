"""Configuration module for denv

Covers both the environment being resolved (sources, env files, the loader)
and the settings of the tool itself (DENV_* variables).

Example:
    from denv.config import EnvLoader, EnvSource, get_settings

    settings = get_settings()
    env = EnvLoader(
        [EnvSource.required("app.env")],
        default_env_file=settings.resolver.default_env_file,
    ).load()
"""

from denv.config.dotenv_file import parse_env_text, read_env_file
from denv.config.env_loader import DEFAULT_ENV_FILE, DiscoveryPolicy, EnvLoader
from denv.config.settings import (
    LogSettings,
    ResolverSettings,
    Settings,
    get_settings,
    reset_settings,
)
from denv.config.sources import EnvironmentSnapshot, EnvSource

__all__ = [
    # Sources
    "EnvSource",
    "EnvironmentSnapshot",
    # Env files
    "parse_env_text",
    "read_env_file",
    # Resolver
    "DEFAULT_ENV_FILE",
    "DiscoveryPolicy",
    "EnvLoader",
    # Tool settings
    "LogSettings",
    "ResolverSettings",
    "Settings",
    "get_settings",
    "reset_settings",
]
