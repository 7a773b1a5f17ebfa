"""Projected-score estimation from weekly tournament history."""

from __future__ import annotations

import logging
import math
from statistics import fmean, median
from typing import TYPE_CHECKING, Callable, Dict, Mapping, Optional, Sequence

from herodeck.config import ScoringAlgorithm
from herodeck.models import CardRecord

if TYPE_CHECKING:
    from herodeck.optimizer.cache import ScoreCache


logger = logging.getLogger(__name__)

SMOOTHING_ALPHA = 0.3
RECENCY_WEIGHTS = (0.3, 0.2, 0.175, 0.15, 0.125)
ONE_STAR_DEFAULT_SCORE = 300.0
ONE_STAR_ONLY_HERO = "0XMAKESY"

ScorePolicy = Callable[[CardRecord, Optional[float]], float]


def average_score(scores: Sequence[float]) -> float:
    if not scores:
        return 0.0
    return fmean(scores)


def average_excluding_outliers(scores: Sequence[float], num_to_exclude: int) -> float:
    """Mean after trimming ``num_to_exclude`` values from the sorted scores.

    ``num_to_exclude // 2`` values come off the low end and the remainder off
    the high end, so a single exclusion always drops the highest score.
    """

    if len(scores) <= num_to_exclude:
        return average_score(scores)
    ordered = sorted(scores)
    low = num_to_exclude // 2
    high = num_to_exclude - low
    return average_score(ordered[low:len(ordered) - high])


def weighted_score(scores: Sequence[float]) -> float:
    if not scores:
        return 0.0
    applied = list(zip(scores, RECENCY_WEIGHTS))
    total_weight = sum(weight for _, weight in applied)
    return sum(score * weight for score, weight in applied) / total_weight


def consistency_floor(scores: Sequence[float]) -> float:
    if not scores:
        return 0.0
    return float(min(scores))


def consistency_median(scores: Sequence[float]) -> float:
    if not scores:
        return 0.0
    return float(median(scores))


def exponential_smoothing(scores: Sequence[float], alpha: float = SMOOTHING_ALPHA) -> float:
    """Smooth from the most recent week toward the oldest, seeding with the latest score."""

    if not scores:
        return 0.0
    smoothed = float(scores[0])
    for value in scores[1:]:
        smoothed = alpha * value + (1 - alpha) * smoothed
    return smoothed


def estimate_score(series: Sequence[float], algorithm: str | ScoringAlgorithm | None) -> float:
    """Project a single score from a most-recent-first history."""

    if not series:
        return 0.0
    resolved = ScoringAlgorithm.resolve(algorithm)
    if resolved is ScoringAlgorithm.RECENT_6_WEEKS:
        return average_score(series[:6])
    if resolved is ScoringAlgorithm.RECENT_4_WEEKS:
        return average_score(series[:4])
    if resolved is ScoringAlgorithm.RECENT_6_EXCLUDE_1:
        return average_excluding_outliers(series[:6], 1)
    if resolved is ScoringAlgorithm.RECENT_4_EXCLUDE_1:
        return average_excluding_outliers(series[:4], 1)
    if resolved is ScoringAlgorithm.WEIGHTED:
        return weighted_score(series)
    if resolved is ScoringAlgorithm.CONSISTENCY_FLOOR:
        return consistency_floor(series[:6])
    if resolved is ScoringAlgorithm.CONSISTENCY_MEDIAN:
        return consistency_median(series[:6])
    return exponential_smoothing(series, SMOOTHING_ALPHA)


def one_star_only(default: float = ONE_STAR_DEFAULT_SCORE) -> ScorePolicy:
    """Policy scoring a hero only in its one-star version.

    The override (or ``default`` when none is configured) applies at exactly
    one star; every other star count scores zero.
    """

    def policy(card: CardRecord, override: Optional[float]) -> float:
        if card.stars != 1:
            return 0.0
        return float(override) if override is not None else float(default)

    return policy


def default_policies() -> Dict[str, ScorePolicy]:
    return {ONE_STAR_ONLY_HERO: one_star_only()}


class ScoreEstimator:
    """Scores cards for one algorithm, honouring overrides and per-hero policies.

    Lookup order for a card: a policy registered for its hero key, then a
    configured override for the hero key, then the card's own override, then
    the history projection (memoized in ``cache`` when one is supplied).
    """

    def __init__(
        self,
        history: Mapping[str, Sequence[float]],
        *,
        algorithm: str | ScoringAlgorithm | None = None,
        overrides: Optional[Mapping[str, float]] = None,
        policies: Optional[Mapping[str, ScorePolicy]] = None,
        cache: Optional[ScoreCache] = None,
    ) -> None:
        self.history = {key.upper(): list(values) for key, values in history.items()}
        self.algorithm = ScoringAlgorithm.resolve(algorithm)
        self.overrides = {key.strip().upper(): float(value) for key, value in (overrides or {}).items()}
        self.policies = {key.strip().upper(): policy for key, policy in (policies or {}).items()}
        self.cache = cache

    def history_score(self, hero_key: str) -> float:
        key = hero_key.upper()
        if self.cache is not None:
            cached = self.cache.get(key, self.algorithm.value)
            if cached is not None:
                return cached
        score = estimate_score(self.history.get(key, ()), self.algorithm)
        if not math.isfinite(score):
            logger.warning("Non-finite score for %s (%s); treating as 0", key, self.algorithm.value)
            score = 0.0
        if self.cache is not None:
            self.cache.put(key, self.algorithm.value, score)
        return score

    def score(self, card: CardRecord) -> float:
        key = card.hero_key
        override = self.overrides.get(key, card.score_override)
        policy = self.policies.get(key)
        if policy is not None:
            value = policy(card, override)
            logger.debug("%s: policy score %.1f (%s stars)", card.card_id, value, card.stars)
            return max(0.0, value)
        if override is not None:
            logger.debug("%s: override score %.1f", card.card_id, override)
            return max(0.0, override)
        return max(0.0, self.history_score(key))

    def score_catalog(self) -> Dict[str, float]:
        """History projection for every hero in the snapshot."""

        return {key: self.history_score(key) for key in self.history}
