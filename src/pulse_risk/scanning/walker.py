"""Project tree walk.

Recursive descent from the project root with three guarantees:
  - directories whose basename is in the ignore list are pruned entirely
  - a real-path visited set stops symlink cycles; every directory and every
    file is visited at most once, however many links point at it
  - unreadable entries are logged and skipped, never fatal

Only the root itself is required to be readable.
"""

from __future__ import annotations

import os
from typing import Iterable

from ..exceptions import InvalidPathError
from ..logging_config import get_logger
from .languages import is_source_file

logger = get_logger(__name__)


def walk_project(root: str, ignore: Iterable[str] = ()) -> list[str]:
    """Collect every scannable source file under ``root``.

    Args:
        root: Project root directory
        ignore: Basenames (directories or files) to skip

    Returns:
        Canonical absolute file paths, sorted

    Raises:
        InvalidPathError: If ``root`` is missing, not a directory, or unreadable
    """
    real_root = os.path.realpath(root)
    if not os.path.isdir(real_root):
        raise InvalidPathError(root, "not a directory")
    if not os.access(real_root, os.R_OK | os.X_OK):
        raise InvalidPathError(root, "directory is not readable")

    ignored = frozenset(ignore)
    visited_dirs: set[str] = set()
    files: set[str] = set()
    stack = [real_root]

    while stack:
        directory = stack.pop()
        real_dir = os.path.realpath(directory)
        if real_dir in visited_dirs:
            logger.debug("Skipping already-visited directory %s", directory)
            continue
        visited_dirs.add(real_dir)

        try:
            entries = list(os.scandir(directory))
        except OSError as e:
            logger.warning("Cannot read directory %s: %s", directory, e.strerror or e)
            continue

        for entry in entries:
            if entry.name in ignored:
                continue
            try:
                is_dir = entry.is_dir()  # follows symlinks
                is_file = not is_dir and entry.is_file()
            except OSError as e:
                logger.warning("Cannot stat %s: %s", entry.path, e.strerror or e)
                continue

            if is_dir:
                stack.append(entry.path)
            elif is_file and is_source_file(entry.name):
                files.add(os.path.realpath(entry.path))

    return sorted(files)
