"""Environment sources: env files and the inherited process environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping


@dataclass(frozen=True)
class EnvSource:
    """One env file to load.

    Attributes:
        path: File path, relative paths resolve against the working directory
        optional: If True, a missing file is skipped instead of failing
    """

    path: Path
    optional: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))

    @classmethod
    def required(cls, path: Path | str) -> "EnvSource":
        return cls(Path(path), optional=False)

    @classmethod
    def optional_file(cls, path: Path | str) -> "EnvSource":
        return cls(Path(path), optional=True)

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Read-only copy of a process environment.

    The resolver receives this explicitly instead of reading os.environ, so
    resolution is a pure function of its inputs.
    """

    variables: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))

    @classmethod
    def capture(cls) -> "EnvironmentSnapshot":
        """Snapshot the current process environment."""
        return cls(dict(os.environ))

    @classmethod
    def from_entries(cls, entries: Iterable[str]) -> "EnvironmentSnapshot":
        """Build a snapshot from raw ``NAME=VALUE`` strings.

        Entries are split on the first ``=``. Entries without a separator or
        with an empty name are skipped.
        """
        variables = {}
        for entry in entries:
            name, sep, value = entry.partition("=")
            if not sep or not name:
                continue
            variables[name] = value
        return cls(variables)

    def __len__(self) -> int:
        return len(self.variables)
