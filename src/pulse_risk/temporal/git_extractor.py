"""Read version history from git via subprocess."""

from __future__ import annotations

import os
import re
import subprocess
from pathlib import Path
from typing import Optional

from ..exceptions import HistoryError
from ..logging_config import get_logger
from .models import Commit

logger = get_logger(__name__)


class GitHistoryProvider:
    """Parse ``git log --name-only`` into Commits with absolute paths.

    Paths reported by git are relative to the repository top level, which is
    not necessarily the project root; they are joined onto the top level.
    """

    _COMMIT_PREFIX = "commit:"
    _HEADER_RE = re.compile(r"^commit:([0-9a-f]{7,64})$")

    def __init__(self, repo_path: str, timeout_seconds: int = 30):
        self.repo_path = str(Path(repo_path).resolve())
        self.timeout_seconds = timeout_seconds
        self._toplevel: Optional[str] = None

    def log_since(self, window_days: int) -> list[Commit]:
        """Commits touching the repository in the last ``window_days`` days.

        Raises:
            HistoryError: If the path is not a git repository or git fails
        """
        toplevel = self._repo_toplevel()
        raw = self._git(
            "log",
            f"--since={window_days} days ago",
            "--name-only",
            f"--format={self._COMMIT_PREFIX}%H",
        )
        commits = self._parse_log(raw, toplevel)
        logger.debug("git log: %d commits in the last %d days", len(commits), window_days)
        return commits

    def _repo_toplevel(self) -> str:
        if self._toplevel is None:
            self._toplevel = os.path.realpath(self._git("rev-parse", "--show-toplevel").strip())
        return self._toplevel

    def _git(self, *args: str) -> str:
        cmd = ["git", "-C", self.repo_path, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            raise HistoryError(self.repo_path, f"{args[0]} failed: {e}") from e

        if result.returncode != 0:
            raise HistoryError(self.repo_path, result.stderr.strip() or f"git {args[0]} failed")
        return result.stdout

    def _parse_log(self, raw: str, toplevel: str) -> list[Commit]:
        """Group file lines under the commit header that precedes them.

        Merge commits carry no files and are dropped.
        """
        commits: list[Commit] = []
        current_hash: Optional[str] = None
        current_files: list[str] = []

        def flush() -> None:
            if current_hash and current_files:
                commits.append(Commit(hash=current_hash, files=tuple(current_files)))

        for line in raw.splitlines():
            line = line.strip()
            if not line:
                continue
            header = self._HEADER_RE.match(line)
            if header:
                flush()
                current_hash = header.group(1)
                current_files = []
            elif current_hash:
                current_files.append(os.path.realpath(os.path.join(toplevel, line)))

        flush()
        return commits
