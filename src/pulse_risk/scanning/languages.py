"""Language table: extensions, parsing capability and heuristic patterns.

Adding a language:
  1. Add its extensions to EXTENSION_MAP.
  2. Add a LanguageSpec to LANGUAGES. ``structural=True`` only if a tree-sitter
     grammar is wired up in treesitter_parser.py.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

from ..models import Language

EXTENSION_MAP: dict[str, Language] = {
    ".ts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT,
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
    ".py": Language.PYTHON,
}

SUPPORTED_EXTENSIONS = frozenset(EXTENSION_MAP)

# Generated bundles, declarations, source maps and tests. Substring match on
# the file's basename.
IGNORED_FILE_MARKERS = (
    ".min.js",
    ".min.ts",
    ".d.ts",
    ".map",
    ".spec.",
    ".test.",
    "__tests__",
)


@dataclass(frozen=True)
class LanguageSpec:
    """What the extractor needs to know about a language."""

    language: Language

    # Whether a tree-sitter grammar handles this language.
    structural: bool = False

    # A line matching any of these starts a function. Group 1 is the name.
    definition_patterns: tuple[re.Pattern[str], ...] = field(default_factory=tuple)

    # Each pattern matching a line adds 1 to the enclosing function's complexity.
    branch_patterns: tuple[re.Pattern[str], ...] = field(default_factory=tuple)


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)


_PYTHON = LanguageSpec(
    language=Language.PYTHON,
    structural=False,
    definition_patterns=_compile(
        r"^\s*def\s+(\w+)\s*\(",
        r"^\s*async\s+def\s+(\w+)\s*\(",
    ),
    branch_patterns=_compile(
        r"\bif\b",
        r"\belif\b",
        r"\bfor\b",
        r"\bwhile\b",
        r"\bexcept\b",
        r"\band\b",
        r"\bor\b",
    ),
)

# Used for JS/TS only when the structural parser rejects a file.
_ECMASCRIPT_DEFINITIONS = _compile(
    r"^\s*(?:export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s*(\w+)\s*\(",
    r"^\s*(?:export\s+)?(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?"
    r"(?:function\b|\([^)]*\)\s*(?::[^=]+)?=>|\w+\s*=>)",
    r"^\s*(?:(?:public|private|protected|static|async|get|set|override)\s+)*"
    r"(?!(?:if|for|while|switch|catch|function|return|else)\b)(\w+)\s*\([^)]*\)\s*(?::[^{]+)?\{",
)

_ECMASCRIPT_BRANCHES = _compile(
    r"\bif\b",
    r"\bfor\b",
    r"\bwhile\b",
    r"\bcase\b",
    r"\bcatch\b",
    r"\s\?\s",
    r"&&",
    r"\|\|",
    r"\?\?",
)

LANGUAGES: dict[Language, LanguageSpec] = {
    Language.TYPESCRIPT: LanguageSpec(
        language=Language.TYPESCRIPT,
        structural=True,
        definition_patterns=_ECMASCRIPT_DEFINITIONS,
        branch_patterns=_ECMASCRIPT_BRANCHES,
    ),
    Language.JAVASCRIPT: LanguageSpec(
        language=Language.JAVASCRIPT,
        structural=True,
        definition_patterns=_ECMASCRIPT_DEFINITIONS,
        branch_patterns=_ECMASCRIPT_BRANCHES,
    ),
    Language.PYTHON: _PYTHON,
    # Unknown files still get a valid (usually empty) FileMetrics.
    Language.UNKNOWN: LanguageSpec(language=Language.UNKNOWN),
}


def detect_language(path: str) -> Language:
    """Map a file path to a Language by its (case-insensitive) extension."""
    ext = os.path.splitext(path)[1].lower()
    return EXTENSION_MAP.get(ext, Language.UNKNOWN)


def get_language_spec(language: Language) -> LanguageSpec:
    return LANGUAGES[language]


def is_ignored_file(filename: str) -> bool:
    """True for generated or test artifacts that never get scored."""
    return any(marker in filename for marker in IGNORED_FILE_MARKERS)


def is_source_file(path: str) -> bool:
    """True if the path has a supported extension and is not an ignored artifact."""
    name = os.path.basename(path)
    return detect_language(name) is not Language.UNKNOWN and not is_ignored_file(name)
