"""Tests for risk score aggregation."""

import numpy as np
import pytest

from pulse_risk.models import ANONYMOUS, FileMetrics, FunctionMetrics, Language
from pulse_risk.scoring.risk import (
    COMPLEXITY_BAND,
    DEFAULT_WEIGHTS,
    ScoreWeights,
    aggregate,
    churn_score,
    clamp,
    combine,
)


def fn(name="f", complexity=1, lines=1, depth=0, params=0):
    return FunctionMetrics(
        name=name,
        start_line=1,
        line_count=lines,
        cyclomatic_complexity=complexity,
        parameter_count=params,
        max_nesting_depth=depth,
    )


def file_metrics(*functions):
    return FileMetrics(
        file_path="/p/a.ts",
        total_lines=100,
        functions=tuple(functions),
        language=Language.TYPESCRIPT,
    )


class TestClamp:
    """Test the piecewise-linear normalizer."""

    @pytest.mark.parametrize(
        "value, expected",
        [(-5, 0.0), (3, 0.0), (6.5, 50.0), (10, 100.0), (1000, 100.0)],
    )
    def test_values(self, value, expected):
        assert clamp(value, 3, 10) == pytest.approx(expected)

    def test_monotonic_and_bounded(self):
        values = np.linspace(-10, 30, 81)
        scores = [clamp(v, 2, 5) for v in values]
        assert all(0.0 <= s <= 100.0 for s in scores)
        assert all(a <= b for a, b in zip(scores, scores[1:]))

    def test_returns_float(self):
        assert isinstance(clamp(4, 3, 10), float)

    def test_degenerate_band_rejected(self):
        with pytest.raises(ValueError):
            clamp(5, 10, 10)
        with pytest.raises(ValueError):
            clamp(5, 10, 3)


class TestScoreWeights:
    """Test weight validation."""

    def test_defaults(self):
        assert DEFAULT_WEIGHTS.as_array().tolist() == [0.35, 0.20, 0.15, 0.20, 0.10]
        assert DEFAULT_WEIGHTS.as_array().sum() == pytest.approx(1.0)

    def test_must_sum_to_one(self):
        with pytest.raises(ValueError):
            ScoreWeights(complexity=0.5)

    def test_non_negative(self):
        with pytest.raises(ValueError):
            ScoreWeights(complexity=0.55, params=-0.10)

    def test_custom(self):
        weights = ScoreWeights(complexity=0.2, function_size=0.2, churn=0.2, depth=0.2, params=0.2)
        assert combine(np.full(5, 50.0), weights) == pytest.approx(50.0)


class TestAggregate:
    """Test per-file aggregation."""

    def test_all_safe_scores_zero(self):
        result = aggregate(file_metrics(fn(complexity=3, lines=20, depth=2, params=3)), churn=0.0)
        assert result.global_score == 0.0
        assert result.complexity_score == 0.0

    def test_all_danger_scores_hundred(self):
        result = aggregate(file_metrics(fn(complexity=10, lines=60, depth=5, params=7)), churn=100.0)
        assert result.global_score == pytest.approx(100.0)

    def test_weighted_combination(self):
        """complexity=100 alone contributes 35 points."""
        result = aggregate(file_metrics(fn(complexity=10)), churn=0.0)
        assert result.complexity_score == 100.0
        assert result.global_score == pytest.approx(35.0)

    def test_uses_worst_function_per_metric(self):
        metrics = file_metrics(
            fn("a", complexity=10, lines=10),
            fn("b", complexity=2, lines=60),
        )
        result = aggregate(metrics, churn=0.0)
        assert result.complexity_score == 100.0
        assert result.function_size_score == 100.0

    def test_anonymous_functions_ignored(self):
        metrics = file_metrics(fn(ANONYMOUS, complexity=50, lines=500, depth=9, params=9))
        result = aggregate(metrics, churn=0.0)
        assert result.global_score == 0.0

    def test_no_named_functions_leaves_only_churn(self):
        result = aggregate(file_metrics(), churn=100.0)
        assert result.complexity_score == 0.0
        assert result.function_size_score == 0.0
        assert result.depth_score == 0.0
        assert result.param_score == 0.0
        assert result.global_score == pytest.approx(15.0)

    def test_components_in_range(self):
        result = aggregate(file_metrics(fn(complexity=7, lines=45, depth=4, params=5)), churn=37.0)
        for score in (
            result.complexity_score,
            result.function_size_score,
            result.churn_score,
            result.depth_score,
            result.param_score,
            result.global_score,
        ):
            assert 0.0 <= score <= 100.0

    def test_fan_counts_start_at_zero(self):
        result = aggregate(file_metrics(fn()), churn=0.0)
        assert (result.fan_in, result.fan_out) == (0, 0)
        assert result.with_fan(3, 1).fan_in == 3

    def test_carries_identity(self):
        result = aggregate(file_metrics(), churn=0.0)
        assert result.file_path == "/p/a.ts"
        assert result.language is Language.TYPESCRIPT


class TestChurnScore:
    def test_band(self):
        assert churn_score(5) == 0.0
        assert churn_score(20) == 100.0
        assert COMPLEXITY_BAND.safe < COMPLEXITY_BAND.danger
