"""Configuration loading and management for Pulse Risk.

Configuration sources are merged in priority order:
    1. Defaults (defined in PulseConfig)
    2. The first config file found (explicit path, ./pulse.toml,
       ~/.config/pulse/pulse.toml)
    3. Environment variables (PULSE_* prefix)
    4. Keyword overrides (typically CLI flags)

A config file is required unless ``project_root`` is supplied as an override.
When none is found the error lists every location that was searched.

Example:
    >>> config = load_config(project_root="/src/app", workers=4)
    >>> config.workers
    4
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigNotFoundError, InvalidConfigError

CONFIG_FILENAME = "pulse.toml"

DEFAULT_IGNORE = (
    "node_modules",
    ".git",
    "dist",
    "build",
    ".vite",
    "vendor",
    "__pycache__",
)


@dataclass(frozen=True)
class ThresholdConfig:
    """Alert bands for displaying a global score.

    These are read by the report layer only; the scoring math never looks at
    them.

    Attributes:
        alert: Scores at or above this are shown as alerts
        warning: Scores at or above this (and below alert) are warnings
    """

    alert: float = 50.0
    warning: float = 20.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.warning <= 100.0:
            raise InvalidConfigError("thresholds.warning", self.warning, "must be in [0, 100]")
        if not 0.0 <= self.alert <= 100.0:
            raise InvalidConfigError("thresholds.alert", self.alert, "must be in [0, 100]")
        if self.warning > self.alert:
            raise InvalidConfigError(
                "thresholds.warning", self.warning, f"must not exceed alert ({self.alert})"
            )

    def level(self, score: float) -> str:
        """Classify a global score as "alert", "warning" or "ok"."""
        if score >= self.alert:
            return "alert"
        if score >= self.warning:
            return "warning"
        return "ok"


@dataclass(frozen=True)
class PulseConfig:
    """Configuration for scanning and watching one project.

    Attributes:
        project_root: Directory to scan (absolute after loading)
        ignore: Directory/file basenames pruned from the walk and the watcher
        thresholds: Display thresholds (report layer only)
        workers: Per-file analysis threads (None = auto-detect)
        churn_window_days: Trailing window for the churn query
        debounce_seconds: Quiet period before a watch-triggered re-scan
        config_path: File the configuration was read from, if any
    """

    project_root: str = "."
    ignore: tuple[str, ...] = DEFAULT_IGNORE
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    workers: Optional[int] = None
    churn_window_days: int = 30
    debounce_seconds: float = 1.5
    config_path: Optional[str] = None

    def __post_init__(self) -> None:
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.churn_window_days < 1:
            raise InvalidConfigError(
                "churn_window_days", self.churn_window_days, "must be at least 1"
            )
        if self.debounce_seconds < 0:
            raise InvalidConfigError(
                "debounce_seconds", self.debounce_seconds, "must be non-negative"
            )
        # Lists arrive from TOML; store a tuple so the config stays hashable.
        if not isinstance(self.ignore, tuple):
            object.__setattr__(self, "ignore", tuple(self.ignore))


def default_search_paths(config_file: Optional[Path] = None) -> list[Path]:
    """Locations checked for a config file, highest priority first."""
    paths: list[Path] = []
    if config_file is not None:
        paths.append(Path(config_file))
    paths.append(Path.cwd() / CONFIG_FILENAME)
    paths.append(Path.home() / ".config" / "pulse" / CONFIG_FILENAME)
    return paths


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> PulseConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path. If given it must exist.
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored.

    Returns:
        Validated PulseConfig instance

    Raises:
        ConfigNotFoundError: If no config file was found and no
            ``project_root`` override was given, or if ``config_file`` is missing
        InvalidConfigError: If a config file is malformed or holds bad values
    """
    overrides = {k: v for k, v in overrides.items() if v is not None}
    merged: dict[str, Any] = {}

    searched = default_search_paths(config_file)
    if config_file is not None and not Path(config_file).is_file():
        raise ConfigNotFoundError(searched[:1])

    found: Optional[Path] = None
    for candidate in searched:
        if candidate.is_file():
            found = candidate
            break

    if found is not None:
        merged.update(_load_toml_file(found))
        merged["config_path"] = str(found)
    elif "project_root" not in overrides:
        raise ConfigNotFoundError(searched)

    merged.update(_load_env_vars())
    merged.update(overrides)

    thresholds = merged.pop("thresholds", None)
    if isinstance(thresholds, dict):
        try:
            merged["thresholds"] = ThresholdConfig(**thresholds)
        except TypeError as e:
            raise InvalidConfigError("thresholds", thresholds, str(e))
    elif isinstance(thresholds, ThresholdConfig):
        merged["thresholds"] = thresholds
    elif thresholds is not None:
        raise InvalidConfigError("thresholds", thresholds, "expected a table")

    merged["project_root"] = _resolve_root(merged.get("project_root", "."), found)

    try:
        return PulseConfig(**merged)
    except TypeError as e:
        raise InvalidConfigError("config", found or "<overrides>", str(e))


def _resolve_root(raw: Any, config_path: Optional[Path]) -> str:
    """Make ``project_root`` absolute; relative paths follow the config file."""
    root = Path(str(raw)).expanduser()
    if not root.is_absolute():
        base = config_path.parent if config_path is not None else Path.cwd()
        root = base / root
    return os.path.abspath(root)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from PULSE_* environment variables.

    Supported environment variables:
        PULSE_PROJECT_ROOT: str
        PULSE_WORKERS: int
        PULSE_CHURN_WINDOW_DAYS: int
        PULSE_DEBOUNCE_SECONDS: float
    """
    type_hints = get_type_hints(PulseConfig)
    result: dict[str, Any] = {}

    for field_name in ("project_root", "workers", "churn_window_days", "debounce_seconds"):
        env_key = f"PULSE_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            result[field_name] = _parse_env_value(env_value, type_hints[field_name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none = [t for t in args if t is not type(None)]
        if non_none:
            type_hint = non_none[0]

    if type_hint is int:
        return int(value)
    if type_hint is float:
        return float(value)
    return value


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file, wrapping parse errors as InvalidConfigError."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise InvalidConfigError("config", path, f"malformed TOML: {e}")
    except OSError as e:
        raise InvalidConfigError("config", path, f"unreadable: {e}")
