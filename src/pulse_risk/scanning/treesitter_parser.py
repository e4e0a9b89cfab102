"""Tree-sitter parser wrapper.

Owns the JavaScript, TypeScript and TSX grammars. ``tree_sitter.Parser``
objects are not safe to share between threads, so each thread gets its own
set, created on first use.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "typescript")
"""

from __future__ import annotations

import os
import threading
from typing import Any

import tree_sitter
import tree_sitter_javascript
import tree_sitter_typescript

from ..exceptions import ParsingError
from ..models import Language

_LANGUAGES: dict[str, Any] = {
    "javascript": tree_sitter.Language(tree_sitter_javascript.language()),
    "typescript": tree_sitter.Language(tree_sitter_typescript.language_typescript()),
    "tsx": tree_sitter.Language(tree_sitter_typescript.language_tsx()),
}


def get_supported_grammars() -> list[str]:
    """Names of the grammars this parser can use."""
    return list(_LANGUAGES)


def grammar_for(path: str, language: Language) -> str | None:
    """Pick the grammar for a file, or None if the language has none."""
    if language is Language.TYPESCRIPT:
        return "tsx" if os.path.splitext(path)[1].lower() == ".tsx" else "typescript"
    if language is Language.JAVASCRIPT:
        return "javascript"
    return None


class TreeSitterParser:
    """Thread-safe wrapper around tree-sitter parsers."""

    def __init__(self) -> None:
        self._local = threading.local()

    def _parser(self, grammar: str) -> tree_sitter.Parser:
        parsers: dict[str, tree_sitter.Parser] | None = getattr(self._local, "parsers", None)
        if parsers is None:
            parsers = {}
            self._local.parsers = parsers
        parser = parsers.get(grammar)
        if parser is None:
            parser = tree_sitter.Parser(_LANGUAGES[grammar])
            parsers[grammar] = parser
        return parser

    def parse(self, code: bytes, grammar: str, path: str = "<memory>") -> tree_sitter.Tree:
        """Parse code and return its syntax tree.

        Args:
            code: Source code as bytes
            grammar: One of get_supported_grammars()
            path: Used in error messages only

        Returns:
            The parsed tree

        Raises:
            ParsingError: If the grammar is unknown, the parser fails, or the
                tree contains syntax errors
        """
        if grammar not in _LANGUAGES:
            raise ParsingError(path, grammar, "no grammar available")

        try:
            tree = self._parser(grammar).parse(code)
        except Exception as e:
            raise ParsingError(path, grammar, f"parser raised {type(e).__name__}: {e}") from e

        if tree.root_node.has_error:
            raise ParsingError(path, grammar, "syntax errors in source")
        return tree
