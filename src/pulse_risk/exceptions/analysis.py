"""Analysis-related exceptions: file access, parsing, version history.

Everything here is recoverable. The scan orchestrator catches these per file
(or per scan, for history) and keeps going.
"""

from pathlib import Path
from typing import Union

from .base import PulseError


class AnalysisError(PulseError):
    """A single file (or the history lookup) could not be analyzed."""


class FileAccessError(AnalysisError):
    """Raised when a file or directory cannot be accessed or read."""

    def __init__(self, filepath: Union[str, Path], reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when the structural parser rejects a file."""

    def __init__(self, filepath: Union[str, Path], language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class HistoryError(AnalysisError):
    """Raised when the version-history provider cannot produce a log."""

    def __init__(self, repo_path: Union[str, Path], reason: str):
        super().__init__(
            f"Cannot read version history: {repo_path}",
            details={"repo": str(repo_path), "reason": reason},
        )
        self.repo_path = repo_path
        self.reason = reason
