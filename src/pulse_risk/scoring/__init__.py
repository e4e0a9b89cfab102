"""Risk scoring: normalization bands, weights and per-file aggregation."""

from .risk import (
    CHURN_BAND,
    COMPLEXITY_BAND,
    DEFAULT_WEIGHTS,
    DEPTH_BAND,
    FUNCTION_SIZE_BAND,
    PARAMS_BAND,
    ScoreBand,
    ScoreWeights,
    aggregate,
    churn_score,
    clamp,
    clamped_score,
)

__all__ = [
    "CHURN_BAND",
    "COMPLEXITY_BAND",
    "DEFAULT_WEIGHTS",
    "DEPTH_BAND",
    "FUNCTION_SIZE_BAND",
    "PARAMS_BAND",
    "ScoreBand",
    "ScoreWeights",
    "aggregate",
    "churn_score",
    "clamp",
    "clamped_score",
]
