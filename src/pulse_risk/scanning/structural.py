"""Structural (tree-sitter) analyzer for the JavaScript family.

Walks the syntax tree once to find every function-like node, then measures
each one:

  - name: decided once per node as a closed variant (see FunctionKind)
  - line span: first to last line, inclusive
  - cyclomatic complexity: 1 + descendant nodes of a branching kind
  - parameters: the node's declared parameter list
  - nesting depth: deepest chain of conditionals / loops / switch / try.
    Plain blocks do not count.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

import tree_sitter

from ..exceptions import ParsingError
from ..models import ANONYMOUS, FileMetrics, FunctionMetrics, Language, ParseMode
from .treesitter_parser import TreeSitterParser, grammar_for

FUNCTION_KINDS = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",  # older grammars name function expressions "function"
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)

DECLARATION_KINDS = frozenset({"function_declaration", "generator_function_declaration"})

BRANCH_KINDS = frozenset(
    {
        "if_statement",
        "for_statement",
        "for_in_statement",  # also covers for...of
        "while_statement",
        "do_statement",
        "switch_case",
        "catch_clause",
        "ternary_expression",
        "&&",
        "||",
        "??",
    }
)

NESTING_KINDS = frozenset(
    {
        "if_statement",
        "for_statement",
        "for_in_statement",
        "while_statement",
        "do_statement",
        "switch_statement",
        "try_statement",
    }
)


# ── Name resolution ────────────────────────────────────────────────


@dataclass(frozen=True)
class NamedFunction:
    """A declaration or function expression carrying its own identifier."""

    name: str


@dataclass(frozen=True)
class Method:
    """A class or object-literal method."""

    name: str


@dataclass(frozen=True)
class BoundAnonymous:
    """An anonymous function assigned to a variable, property or field."""

    binding: str


@dataclass(frozen=True)
class TrulyAnonymous:
    """A function with nothing to name it by (callbacks, IIFEs)."""


FunctionKind = Union[NamedFunction, Method, BoundAnonymous, TrulyAnonymous]


def display_name(kind: FunctionKind) -> str:
    if isinstance(kind, (NamedFunction, Method)):
        return kind.name
    if isinstance(kind, BoundAnonymous):
        return kind.binding
    return ANONYMOUS


def classify_function(node: tree_sitter.Node) -> FunctionKind:
    """Decide how a function-like node is named."""
    name_node = node.child_by_field_name("name")
    if node.type == "method_definition":
        if name_node is not None:
            return Method(_strip_quotes(_text(name_node)))
        return TrulyAnonymous()
    if name_node is not None:
        return NamedFunction(_text(name_node))

    binding = _binding_name(node.parent)
    if binding:
        return BoundAnonymous(binding)
    return TrulyAnonymous()


def _binding_name(parent: tree_sitter.Node | None) -> str | None:
    """Identifier of the declaration or assignment directly holding a function."""
    if parent is None:
        return None

    target: tree_sitter.Node | None = None
    if parent.type == "variable_declarator":
        target = parent.child_by_field_name("name")
    elif parent.type in ("assignment_expression", "augmented_assignment_expression"):
        target = parent.child_by_field_name("left")
        if target is not None and target.type == "member_expression":
            target = target.child_by_field_name("property")
    elif parent.type == "pair":
        target = parent.child_by_field_name("key")
    elif parent.type in ("public_field_definition", "field_definition"):
        target = parent.child_by_field_name("name") or parent.child_by_field_name("property")

    if target is None or target.type not in (
        "identifier",
        "property_identifier",
        "private_property_identifier",
        "string",
    ):
        return None
    return _strip_quotes(_text(target)) or None


def _text(node: tree_sitter.Node) -> str:
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def _strip_quotes(value: str) -> str:
    return value.strip("'\"`")


# ── Measurements ───────────────────────────────────────────────────


def iter_functions(root: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    """Yield function-like nodes in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        # The `function` keyword token shares its type with the old expression
        # node name; only named nodes are functions.
        if node.is_named and node.type in FUNCTION_KINDS:
            yield node
        stack.extend(reversed(node.children))


def cyclomatic_complexity(node: tree_sitter.Node) -> int:
    count = 1
    stack = list(node.children)
    while stack:
        current = stack.pop()
        if current.type in BRANCH_KINDS:
            count += 1
        stack.extend(current.children)
    return count


def max_nesting_depth(node: tree_sitter.Node) -> int:
    deepest = 0
    stack = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        deepest = max(deepest, depth)
        for child in current.children:
            stack.append((child, depth + 1 if child.type in NESTING_KINDS else depth))
    return deepest


def parameter_count(node: tree_sitter.Node) -> int:
    params = node.child_by_field_name("parameters")
    if params is not None:
        return sum(1 for child in params.named_children if child.type != "comment")
    # `x => x * 2`
    if node.child_by_field_name("parameter") is not None:
        return 1
    return 0


def measure_function(node: tree_sitter.Node) -> FunctionMetrics:
    start_line = node.start_point[0] + 1
    end_line = node.end_point[0] + 1
    return FunctionMetrics(
        name=display_name(classify_function(node)),
        start_line=start_line,
        line_count=end_line - start_line + 1,
        cyclomatic_complexity=cyclomatic_complexity(node),
        parameter_count=parameter_count(node),
        max_nesting_depth=max_nesting_depth(node),
    )


class StructuralAnalyzer:
    """Produces FileMetrics from a tree-sitter syntax tree."""

    def __init__(self, parser: TreeSitterParser | None = None) -> None:
        self._parser = parser or TreeSitterParser()

    def analyze(self, source: str, path: str, language: Language) -> FileMetrics:
        """Parse and measure one file.

        Raises:
            ParsingError: If the language has no grammar or the source does
                not parse cleanly
        """
        grammar = grammar_for(path, language)
        if grammar is None:
            raise ParsingError(path, language.value, "no structural grammar for language")

        tree = self._parser.parse(source.encode("utf-8"), grammar, path)
        functions = tuple(measure_function(node) for node in iter_functions(tree.root_node))

        return FileMetrics(
            file_path=path,
            total_lines=len(source.splitlines()),
            functions=functions,
            language=language,
            parse_mode=ParseMode.STRUCTURAL,
        )
