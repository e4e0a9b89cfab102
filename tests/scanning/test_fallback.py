"""Tests for the regex heuristic analyzer."""

import pytest

from pulse_risk.models import Language, ParseMode
from pulse_risk.scanning.fallback import HeuristicAnalyzer, count_parameters, indent_depth


SAMPLE_PYTHON = '''import os


def outer(a, b):
    if a and b:
        return 1
    for x in b:
        pass
    return 0


async def fetch(session, url, *, timeout=10):
    try:
        return await session.get(url)
    except TimeoutError:
        return None


class Widget:
    def render(self):
        return "<div/>"
'''


class TestHeuristicAnalyzerPython:
    """Test Python analysis."""

    @pytest.fixture
    def metrics(self):
        return HeuristicAnalyzer().analyze(SAMPLE_PYTHON, "/repo/sample.py", Language.PYTHON)

    def test_parse_mode_is_heuristic(self, metrics):
        assert metrics.parse_mode is ParseMode.HEURISTIC
        assert metrics.language is Language.PYTHON

    def test_total_lines(self, metrics):
        assert metrics.total_lines == len(SAMPLE_PYTHON.splitlines())

    def test_detects_functions_in_order(self, metrics):
        names = [fn.name for fn in metrics.functions]
        assert names == ["outer", "fetch", "render"]

    def test_function_runs_to_next_definition(self, metrics):
        outer = metrics.functions[0]
        assert outer.start_line == 4
        # lines 4..11, up to the line before `async def fetch`
        assert outer.line_count == 8

    def test_complexity_counts_branch_keywords(self, metrics):
        """if + and + for on top of the base 1."""
        assert metrics.functions[0].cyclomatic_complexity == 4

    def test_except_counts_as_branch(self, metrics):
        assert metrics.functions[1].cyclomatic_complexity == 2

    def test_parameters_from_definition_line(self, metrics):
        assert metrics.functions[0].parameter_count == 2
        assert metrics.functions[1].parameter_count == 4

    def test_nesting_from_indentation(self, metrics):
        assert metrics.functions[0].max_nesting_depth == 2

    def test_empty_source(self):
        metrics = HeuristicAnalyzer().analyze("", "/repo/empty.py", Language.PYTHON)
        assert metrics.total_lines == 0
        assert metrics.functions == ()


class TestHeuristicAnalyzerEcmascript:
    """The fallback patterns for JS/TS sources."""

    def test_function_declaration_and_arrow(self):
        source = (
            "export function load(a, b) {\n"
            "  if (a && b) {\n"
            "    return a;\n"
            "  }\n"
            "}\n"
            "const pick = (x) => x ? 1 : 2;\n"
        )
        metrics = HeuristicAnalyzer().analyze(source, "/repo/a.ts", Language.TYPESCRIPT)
        names = [fn.name for fn in metrics.functions]
        assert names == ["load", "pick"]
        assert metrics.functions[0].cyclomatic_complexity == 3
        assert metrics.functions[0].parameter_count == 2

    def test_control_keywords_are_not_methods(self):
        source = "  if (ready) {\n  }\n  while (x) {\n  }\n"
        metrics = HeuristicAnalyzer().analyze(source, "/repo/a.js", Language.JAVASCRIPT)
        assert metrics.functions == ()

    def test_deterministic(self):
        source = "function a() {\n  return 1;\n}\n"
        analyzer = HeuristicAnalyzer()
        first = analyzer.analyze(source, "/repo/a.js", Language.JAVASCRIPT)
        second = analyzer.analyze(source, "/repo/a.js", Language.JAVASCRIPT)
        assert first == second


class TestHelpers:
    """Test parameter and indentation helpers."""

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("def f():", 0),
            ("def f(a):", 1),
            ("def f(self, a=1, *args):", 3),
            ("function g(a, b, c) {", 3),
            ("no parens here", 0),
        ],
    )
    def test_count_parameters(self, line, expected):
        assert count_parameters(line) == expected

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("x = 1", 0),
            ("    x = 1", 1),
            ("        x = 1", 2),
            ("\tx = 1", 1),
            ("  x = 1", 0),
            ("        ", 0),
        ],
    )
    def test_indent_depth(self, line, expected):
        assert indent_depth(line) == expected
