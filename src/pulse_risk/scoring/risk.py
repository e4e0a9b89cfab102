"""Risk score aggregation.

Each raw metric is mapped onto [0, 100] by ``clamp`` with its own
(safe, danger) band, then the five component scores are combined with a
fixed weight vector:

    global = 0.35·complexity + 0.20·size + 0.15·churn + 0.20·depth + 0.10·params

Only named functions feed the per-file maxima. Anonymous closures are
already counted inside the function that encloses them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from ..models import FileMetrics, RiskScoreResult


class ScoreBand(NamedTuple):
    """Raw value at or below ``safe`` scores 0; at or above ``danger`` scores 100."""

    safe: float
    danger: float


COMPLEXITY_BAND = ScoreBand(3, 10)
FUNCTION_SIZE_BAND = ScoreBand(20, 60)
DEPTH_BAND = ScoreBand(2, 5)
PARAMS_BAND = ScoreBand(3, 7)
CHURN_BAND = ScoreBand(5, 20)


@dataclass(frozen=True)
class ScoreWeights:
    """Weights of the component scores in the global score. Must sum to 1.0."""

    complexity: float = 0.35
    function_size: float = 0.20
    churn: float = 0.15
    depth: float = 0.20
    params: float = 0.10

    def __post_init__(self) -> None:
        values = self.as_array()
        if np.any(values < 0):
            raise ValueError("Score weights must be non-negative")
        total = float(values.sum())
        if not 0.999 <= total <= 1.001:
            raise ValueError(f"Score weights must sum to 1.0, got {total:.3f}")

    def as_array(self) -> np.ndarray:
        return np.array(
            [self.complexity, self.function_size, self.churn, self.depth, self.params],
            dtype=float,
        )


DEFAULT_WEIGHTS = ScoreWeights()


def clamp(value: float, safe: float, danger: float) -> float:
    """Map ``value`` linearly onto [0, 100] between ``safe`` and ``danger``.

    0 at or below ``safe``, 100 at or above ``danger``, linear in between.
    """
    if danger <= safe:
        raise ValueError(f"danger ({danger}) must be greater than safe ({safe})")
    return float(np.interp(value, (safe, danger), (0.0, 100.0)))


clamped_score = clamp


def band_score(value: float, band: ScoreBand) -> float:
    return clamp(value, band.safe, band.danger)


def churn_score(touch_count: int) -> float:
    """Normalized churn score for a raw commit-touch count."""
    return band_score(touch_count, CHURN_BAND)


def combine(components: np.ndarray, weights: ScoreWeights = DEFAULT_WEIGHTS) -> float:
    """Weighted sum of component scores ordered as ScoreWeights fields."""
    return float(np.dot(weights.as_array(), components))


def aggregate(
    metrics: FileMetrics,
    churn: float,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> RiskScoreResult:
    """Score one file.

    Args:
        metrics: Extracted file metrics
        churn: Normalized churn score in [0, 100]
        weights: Component weights

    Returns:
        RiskScoreResult with fan_in/fan_out left at 0 for the graph pass
    """
    named = metrics.named_functions

    max_complexity = max((fn.cyclomatic_complexity for fn in named), default=0)
    max_size = max((fn.line_count for fn in named), default=0)
    max_depth = max((fn.max_nesting_depth for fn in named), default=0)
    max_params = max((fn.parameter_count for fn in named), default=0)

    complexity = band_score(max_complexity, COMPLEXITY_BAND)
    size = band_score(max_size, FUNCTION_SIZE_BAND)
    depth = band_score(max_depth, DEPTH_BAND)
    params = band_score(max_params, PARAMS_BAND)

    components = np.array([complexity, size, churn, depth, params], dtype=float)

    return RiskScoreResult(
        file_path=metrics.file_path,
        language=metrics.language,
        complexity_score=complexity,
        function_size_score=size,
        churn_score=churn,
        depth_score=depth,
        param_score=params,
        global_score=combine(components, weights),
    )
