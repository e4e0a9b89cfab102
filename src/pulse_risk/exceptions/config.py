"""Configuration exceptions: missing files, bad values, bad paths.

These are fatal for a scan: the orchestrator cannot run without a valid
configuration and a readable project root.
"""

from pathlib import Path
from typing import Any, Sequence, Union

from .base import PulseError


class ConfigurationError(PulseError):
    """The scan cannot start with the given settings."""


class ConfigNotFoundError(ConfigurationError):
    """Raised when no configuration file exists at any searched location."""

    def __init__(self, searched: Sequence[Union[str, Path]]):
        paths = [str(p) for p in searched]
        listing = "\n".join(f"  - {p}" for p in paths)
        super().__init__(
            f"No configuration file found. Searched:\n{listing}",
        )
        self.searched = paths


class InvalidConfigError(ConfigurationError):
    """A setting failed validation."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class InvalidPathError(ConfigurationError):
    """The project root cannot be scanned."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason
