"""Exception hierarchy for Pulse Risk."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    HistoryError,
    ParsingError,
)
from .base import PulseError
from .config import (
    ConfigNotFoundError,
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "PulseError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "HistoryError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "InvalidConfigError",
    "InvalidPathError",
]
