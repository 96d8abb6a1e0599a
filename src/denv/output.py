"""Render a resolved environment for `get`, `keys` and `list`."""

import json
from enum import Enum
from typing import List, Mapping

from denv.exceptions import ArgumentError, KeyNotFoundError


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"

    @classmethod
    def parse(cls, value: "str | OutputFormat") -> "OutputFormat":
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ArgumentError(
                f"unknown output format '{value}' (expected one of: {choices})",
                details={"format": str(value)},
            ) from None


def lookup(env: Mapping[str, str], key: str) -> str:
    """Return the value of ``key``.

    Raises:
        ArgumentError: If key is empty
        KeyNotFoundError: If key is not defined
    """
    if not key:
        raise ArgumentError("key argument is required", code="KEY_REQUIRED")
    try:
        return env[key]
    except KeyError:
        raise KeyNotFoundError(key) from None


def sorted_keys(env: Mapping[str, str]) -> List[str]:
    return sorted(env)


def render_keys(env: Mapping[str, str], fmt: "str | OutputFormat" = OutputFormat.TEXT) -> str:
    """Variable names, sorted, one per line or as a JSON array."""
    keys = sorted_keys(env)
    if OutputFormat.parse(fmt) is OutputFormat.JSON:
        return json.dumps(keys, ensure_ascii=False)
    return "\n".join(keys)


def render_list(env: Mapping[str, str], fmt: "str | OutputFormat" = OutputFormat.TEXT) -> str:
    """The whole environment as sorted NAME=VALUE lines or a JSON object."""
    if OutputFormat.parse(fmt) is OutputFormat.JSON:
        return json.dumps(dict(env), ensure_ascii=False, sort_keys=True)
    return "\n".join(f"{key}={env[key]}" for key in sorted_keys(env))
