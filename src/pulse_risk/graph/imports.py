"""Textual import extraction and relative-path resolution.

Only relative specifiers (leading ``.``) are considered; the graph models
intra-project structure, and bare specifiers name packages. Comments are
blanked before matching; specifiers built at runtime are not seen.

ECMAScript resolution tries, in order:
  1. the literal path
  2. the literal path + each source extension
  3. ``index`` + each source extension inside the literal path
and, when the specifier ends in ``.js`` (TypeScript sources importing their
compiled names), the same candidates with ``.js`` stripped.

Python resolution follows package semantics: each dot past the first climbs
one package, and a module is either ``name.py`` or ``name/__init__.py``.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import AbstractSet, Iterator

from ..models import Language
from ..scanning.languages import detect_language

ECMASCRIPT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")

# Suffix a build step rewrites: `import "./util.js"` may mean util.ts.
REWRITTEN_SUFFIX = ".js"

_ECMASCRIPT_PATTERNS = (
    re.compile(r"\bimport\s+[^'\";]*?\bfrom\s*['\"]([^'\"]+)['\"]"),
    re.compile(r"\bexport\s+[^'\";]*?\bfrom\s*['\"]([^'\"]+)['\"]"),
    re.compile(r"\bimport\s*['\"]([^'\"]+)['\"]"),
    re.compile(r"\brequire\s*\(\s*['\"]([^'\"]+)['\"]\s*\)"),
    re.compile(r"\bimport\s*\(\s*['\"]([^'\"]+)['\"]\s*\)"),
)

_PYTHON_FROM_RE = re.compile(
    r"^[ \t]*from[ \t]+(\.+)([\w.]*)[ \t]+import[ \t]+(?:\(([^)]*)\)|([^#\n]*))",
    re.MULTILINE,
)

# Strings are matched so that comment markers inside them are left alone.
_ECMASCRIPT_COMMENT_RE = re.compile(
    r"""('(?:\\.|[^'\\\n])*'|"(?:\\.|[^"\\\n])*"|`(?:\\.|[^`\\])*`)|//[^\n]*|/\*.*?\*/""",
    re.DOTALL,
)

_PYTHON_COMMENT_RE = re.compile(r"#[^\n]*")


@dataclass(frozen=True)
class ImportRef:
    """A relative import as written in source.

    ``names`` is only filled for Python ``from . import a, b`` forms, where
    the imported names may themselves be modules.
    """

    specifier: str
    names: tuple[str, ...] = ()


def extract_imports(path: str, source: str) -> list[ImportRef]:
    """Relative imports in ``source``, in order of appearance."""
    if detect_language(path) is Language.PYTHON:
        return list(_python_imports(source))
    return list(_ecmascript_imports(source))


def strip_ecmascript_comments(source: str) -> str:
    """Blank out ``//`` and ``/* */`` comments, keeping string literals."""
    return _ECMASCRIPT_COMMENT_RE.sub(lambda m: m.group(1) or " ", source)


def _ecmascript_imports(source: str) -> Iterator[ImportRef]:
    source = strip_ecmascript_comments(source)
    found: list[tuple[int, str]] = []
    for pattern in _ECMASCRIPT_PATTERNS:
        for match in pattern.finditer(source):
            specifier = match.group(1)
            if specifier.startswith("."):
                found.append((match.start(1), specifier))
    # Several patterns can hit the same specifier; keep one per position.
    seen: set[int] = set()
    for position, specifier in sorted(found):
        if position not in seen:
            seen.add(position)
            yield ImportRef(specifier)


def _python_imports(source: str) -> Iterator[ImportRef]:
    for match in _PYTHON_FROM_RE.finditer(source):
        dots, module, grouped, inline = match.groups()
        # `from . import (\n a,  # note\n b,\n)` spans lines.
        names_raw = _PYTHON_COMMENT_RE.sub("", grouped) if grouped is not None else inline
        names = tuple(
            part.split()[0]
            for part in names_raw.split(",")
            if part.strip() and part.strip() != "*"
        )
        yield ImportRef(dots + module, names)


def resolve_import(from_file: str, ref: ImportRef, file_set: AbstractSet[str]) -> list[str]:
    """Resolve an import to scanned files.

    Returns:
        Matching paths from ``file_set``; empty when the import does not
        resolve. ECMAScript imports resolve to at most one file.
    """
    if detect_language(from_file) is Language.PYTHON:
        return _resolve_python(from_file, ref, file_set)
    hit = _resolve_ecmascript(from_file, ref.specifier, file_set)
    return [hit] if hit else []


def _ecmascript_candidates(base: str) -> Iterator[str]:
    yield base
    for ext in ECMASCRIPT_EXTENSIONS:
        yield base + ext
    for ext in ECMASCRIPT_EXTENSIONS:
        yield os.path.join(base, "index" + ext)


def _resolve_ecmascript(from_file: str, specifier: str, file_set: AbstractSet[str]) -> str | None:
    base = os.path.normpath(os.path.join(os.path.dirname(from_file), specifier))
    for candidate in _ecmascript_candidates(base):
        if candidate in file_set:
            return candidate
    if base.endswith(REWRITTEN_SUFFIX):
        for candidate in _ecmascript_candidates(base[: -len(REWRITTEN_SUFFIX)]):
            if candidate in file_set:
                return candidate
    return None


def _python_module(base: str, file_set: AbstractSet[str]) -> str | None:
    for candidate in (base + ".py", os.path.join(base, "__init__.py")):
        if candidate in file_set:
            return candidate
    return None


def _resolve_python(from_file: str, ref: ImportRef, file_set: AbstractSet[str]) -> list[str]:
    spec = ref.specifier
    dots = len(spec) - len(spec.lstrip("."))
    module = spec[dots:]

    package = os.path.dirname(from_file)
    for _ in range(dots - 1):
        package = os.path.dirname(package)

    resolved: list[str] = []
    if module:
        base = os.path.join(package, *module.split("."))
        target = _python_module(base, file_set)
        if target is None:
            return []
        resolved.append(target)
        if not target.endswith("__init__.py"):
            return resolved
        package = base  # `from .pkg import sub` may name a submodule

    for name in ref.names:
        target = _python_module(os.path.join(package, name), file_set)
        if target is not None and target not in resolved:
            resolved.append(target)

    if not resolved:
        init = os.path.join(package, "__init__.py")
        if init in file_set:
            resolved.append(init)
    return resolved
