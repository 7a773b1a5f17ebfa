"""Score projection from historical tournament results."""

from .estimator import (
    ScoreEstimator,
    ScorePolicy,
    average_excluding_outliers,
    default_policies,
    estimate_score,
    exponential_smoothing,
    one_star_only,
)

__all__ = [
    "ScoreEstimator",
    "ScorePolicy",
    "average_excluding_outliers",
    "default_policies",
    "estimate_score",
    "exponential_smoothing",
    "one_star_only",
]
