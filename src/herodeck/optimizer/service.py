"""Optimizer session tying scoring, pruning, search and validation together."""

from __future__ import annotations

import logging
import time
from typing import List, Mapping, Optional, Sequence

from herodeck.config import DeckConfig
from herodeck.models import CardRecord, ScoredCard
from herodeck.scoring import ScoreEstimator, ScorePolicy, default_policies

from .cache import CandidateCache, ScoreCache
from .ranking import rank_and_prune, score_and_rank
from .result import REASON_NO_CANDIDATES, DeckFailure, DeckOutcome, assemble_result
from .solver import find_optimal_combination


logger = logging.getLogger(__name__)


def _unique_cards(cards: Sequence[CardRecord]) -> List[CardRecord]:
    """Drop repeated card ids, keeping the first occurrence."""

    unique: List[CardRecord] = []
    seen: set[str] = set()
    for card in cards:
        if card.card_id in seen:
            continue
        seen.add(card.card_id)
        unique.append(card)
    if len(unique) != len(cards):
        logger.warning("Dropped %s cards with duplicate card ids", len(cards) - len(unique))
    return unique


class DeckOptimizer:
    """One optimization session over a history snapshot and a card pool.

    The session owns its score and candidate caches. Both are cleared when
    the pool or history changes, or explicitly via :meth:`clear_caches`.
    Callers must serialize access; a session is not shared between threads.
    """

    def __init__(
        self,
        history: Mapping[str, Sequence[float]],
        *,
        cards: Optional[Sequence[CardRecord]] = None,
        policies: Optional[Mapping[str, ScorePolicy]] = None,
    ) -> None:
        self._history = {key.upper(): list(values) for key, values in history.items()}
        self._policies = dict(default_policies() if policies is None else policies)
        self._cards = _unique_cards(list(cards or []))
        self.score_cache = ScoreCache()
        self.candidate_cache = CandidateCache()

    @property
    def cards(self) -> List[CardRecord]:
        return list(self._cards)

    def clear_caches(self) -> None:
        self.score_cache.invalidate()
        self.candidate_cache.invalidate()

    def set_pool(self, cards: Sequence[CardRecord]) -> None:
        cards = _unique_cards(list(cards))
        if cards != self._cards:
            logger.info("Card pool changed (%s -> %s cards); clearing caches", len(self._cards), len(cards))
            self.clear_caches()
        self._cards = cards

    def set_history(self, history: Mapping[str, Sequence[float]]) -> None:
        self._history = {key.upper(): list(values) for key, values in history.items()}
        self.clear_caches()

    def estimator(self, config: DeckConfig) -> ScoreEstimator:
        return ScoreEstimator(
            self._history,
            algorithm=config.scoring_algorithm,
            overrides=config.normalized_overrides(),
            policies=self._policies,
            cache=self.score_cache,
        )

    def ranked_candidates(self, config: DeckConfig) -> List[ScoredCard]:
        """Full efficiency-sorted list for ``config``, served from cache when possible."""

        fingerprint = config.fingerprint()
        cached = self.candidate_cache.lookup(fingerprint, len(self._cards))
        if cached is not None:
            logger.info("Using cached ranked candidates (config unchanged)")
            return cached

        start = time.perf_counter()
        ranked = score_and_rank(self._cards, self.estimator(config))
        self.candidate_cache.store(fingerprint, len(self._cards), ranked)
        logger.info(
            "Scored %s cards with %s in %.1fms",
            len(ranked),
            config.scoring_algorithm.value,
            (time.perf_counter() - start) * 1000,
        )
        return ranked

    def build_optimal_selection(self, config: DeckConfig) -> DeckOutcome:
        logger.info(
            "Building deck: %s cards, %s stars, algorithm=%s, overrides=%s",
            config.target_count,
            config.target_stars,
            config.scoring_algorithm.value,
            len(config.score_overrides),
        )
        ranked = self.ranked_candidates(config)
        if not ranked:
            logger.error("No cards with valid scores available")
            return DeckFailure(
                reason=REASON_NO_CANDIDATES,
                target_count=config.target_count,
                target_stars=config.target_stars,
            )

        pruned = rank_and_prune(ranked, config.effective_bucket_cap)
        solved = find_optimal_combination(
            pruned,
            config.target_stars,
            config.target_count,
            greedy_window=config.effective_greedy_window,
        )
        outcome = assemble_result(
            solved.selection if solved is not None else None,
            target_count=config.target_count,
            target_stars=config.target_stars,
            strategy=solved.strategy if solved is not None else "none",
        )
        if outcome.success:
            for idx, card in enumerate(outcome.cards, start=1):
                logger.info("  %s. %s (%s stars) expected %.0f", idx, card.card.name or card.hero_key, card.stars, card.score)
            logger.info(
                "Total: %s stars | expected score %.0f (%s)",
                outcome.total_stars,
                outcome.total_score,
                outcome.strategy,
            )
        return outcome


def build_optimal_selection(
    cards: Sequence[CardRecord],
    config: DeckConfig,
    *,
    history: Mapping[str, Sequence[float]],
    policies: Optional[Mapping[str, ScorePolicy]] = None,
) -> DeckOutcome:
    """One-shot optimization without keeping a session around."""

    return DeckOptimizer(history, cards=cards, policies=policies).build_optimal_selection(config)
