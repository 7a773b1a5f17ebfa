"""Efficiency ranking and per-star-bucket pruning of the candidate pool."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, List, Sequence

from herodeck.models import CardRecord, ScoredCard
from herodeck.scoring import ScoreEstimator


logger = logging.getLogger(__name__)

DEFAULT_BUCKET_CAP = 5


def _by_efficiency(cards: Iterable[ScoredCard]) -> List[ScoredCard]:
    # reverse=True keeps the input order among equal efficiencies
    return sorted(cards, key=lambda card: card.efficiency, reverse=True)


def score_and_rank(cards: Sequence[CardRecord], estimator: ScoreEstimator) -> List[ScoredCard]:
    """Score every usable card and sort the result by score per star."""

    scored: List[ScoredCard] = []
    rejected = 0
    for card in cards:
        if card.stars <= 0:
            rejected += 1
            continue
        scored.append(ScoredCard.from_card(card, estimator.score(card)))
    if rejected:
        logger.warning("Skipped %s cards without a star cost", rejected)
    return _by_efficiency(scored)


def rank_and_prune(entities: Sequence[ScoredCard], bucket_cap: int = DEFAULT_BUCKET_CAP) -> List[ScoredCard]:
    """Keep the ``bucket_cap`` most efficient cards of each star cost.

    This bounds the solver's search space and is an approximation: a card
    outside its bucket's top entries can never be selected, even when it
    would belong to the true optimum.
    """

    bucket_cap = max(1, bucket_cap)
    buckets: dict[int, list[ScoredCard]] = defaultdict(list)
    rejected = 0
    for entity in entities:
        if entity.stars <= 0:
            rejected += 1
            continue
        buckets[entity.stars].append(entity)
    if rejected:
        logger.warning("Rejected %s candidates with non-positive star cost", rejected)

    retained: List[ScoredCard] = []
    for stars in sorted(buckets):
        ranked = _by_efficiency(buckets[stars])
        kept = ranked[:bucket_cap]
        retained.extend(kept)
        logger.debug("%s-star bucket: %s cards -> keeping top %s", stars, len(ranked), len(kept))

    pruned = _by_efficiency(retained)
    logger.info(
        "Pruned to %s candidates (top %s per star bucket from %s)",
        len(pruned),
        bucket_cap,
        len(entities),
    )
    return pruned
