"""Resolve the environment handed to a command or printed by the CLI.

Values are merged in deterministic order, later sources overriding earlier:
1) Inherited process environment (unless isolated)
2) Env files, in the order given on the command line
3) When no file was given, a `.env` in the working directory (if present)
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from denv.config.dotenv_file import read_env_file
from denv.config.sources import EnvironmentSnapshot, EnvSource
from denv.exceptions import SourceReadError
from denv.logger import Logger, get_logger

DEFAULT_ENV_FILE = ".env"


class DiscoveryPolicy(str, Enum):
    """When to look for the default env file if no file flag is given."""

    ALWAYS = "always"
    UNLESS_ISOLATED = "unless-isolated"


class EnvLoader:
    """Merge the inherited environment and env files into one mapping.

    Example:
        loader = EnvLoader([EnvSource.required("base.env"), EnvSource.optional_file("local.env")])
        env = loader.load()
    """

    def __init__(
        self,
        sources: Sequence[EnvSource] = (),
        isolate: bool = False,
        snapshot: Optional[EnvironmentSnapshot] = None,
        cwd: Optional[Path | str] = None,
        default_env_file: str = DEFAULT_ENV_FILE,
        discovery: DiscoveryPolicy = DiscoveryPolicy.ALWAYS,
        logger: Optional[Logger] = None,
    ) -> None:
        """
        Args:
            sources: Env files in increasing priority
            isolate: If True, the inherited environment is not included
            snapshot: Inherited environment; captured from os.environ when
                needed and not given
            cwd: Directory probed for the default env file (default: cwd)
            default_env_file: Name of the default env file
            discovery: Whether default discovery also runs when isolated
            logger: Optional logger instance. Creates one if not provided.
        """
        self.sources: List[EnvSource] = list(sources)
        self.isolate = isolate
        self.snapshot = snapshot
        self.cwd = Path(cwd) if cwd is not None else None
        self.default_env_file = default_env_file
        self.discovery = DiscoveryPolicy(discovery)
        self.logger = logger if logger is not None else get_logger()

    def effective_sources(self) -> List[EnvSource]:
        """Sources that will be read, including a discovered default file."""
        if self.sources:
            return list(self.sources)

        if self.isolate and self.discovery is DiscoveryPolicy.UNLESS_ISOLATED:
            self.logger.debug("Default env file discovery skipped in isolated mode")
            return []

        base = self.cwd if self.cwd is not None else Path.cwd()
        default_path = base / self.default_env_file
        if default_path.is_file():
            self.logger.debug("Using default env file", path=str(default_path))
            return [EnvSource.required(default_path)]
        return []

    def load(self) -> Mapping[str, str]:
        """Resolve the environment.

        Returns:
            Read-only mapping of variable name to value

        Raises:
            SourceReadError: If a required file is missing, or any file is
                unreadable or malformed
        """
        data: Dict[str, str] = {}

        if not self.isolate:
            snapshot = self.snapshot if self.snapshot is not None else EnvironmentSnapshot.capture()
            data.update(snapshot.variables)
            self.logger.debug("Included inherited environment", keys=len(snapshot))

        for source in self.effective_sources():
            values = self._read(source)
            if values is None:
                continue
            data.update(values)
            self.logger.debug("Loaded env file", path=str(source.path), keys=len(values))

        return MappingProxyType(data)

    def _read(self, source: EnvSource) -> Optional[Dict[str, str]]:
        path = source.path
        if self.cwd is not None and not path.is_absolute():
            path = self.cwd / path
        try:
            return read_env_file(path)
        except FileNotFoundError as e:
            if source.optional:
                self.logger.debug("Optional env file missing, skipped", path=str(source.path))
                return None
            raise SourceReadError(str(source.path), "no such file or directory") from e


__all__ = ["DEFAULT_ENV_FILE", "DiscoveryPolicy", "EnvLoader"]
