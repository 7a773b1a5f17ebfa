"""Final validation of solver output against the deck's hard constraints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from herodeck.models import ScoredCard


logger = logging.getLogger(__name__)

REASON_NO_CANDIDATES = "no cards with valid scores"
REASON_NO_COMBINATION = "no combination found"
REASON_CAP_EXCEEDED = "exceeded cap — rejected"
REASON_WRONG_COUNT = "wrong card count"
REASON_DUPLICATE_IDS = "duplicate card ids"


class CapViolation(AssertionError):
    """An accepted selection costs more stars than the requested cap."""


@dataclass(frozen=True)
class DeckSelection:
    cards: Tuple[ScoredCard, ...]
    total_stars: int
    total_score: float
    target_count: int
    target_stars: int
    strategy: str

    @property
    def success(self) -> bool:
        return True

    def assert_valid(self) -> None:
        if self.total_stars > self.target_stars:
            raise CapViolation(f"selection costs {self.total_stars} stars, cap is {self.target_stars}")
        if len(self.cards) != self.target_count:
            raise AssertionError(f"selection has {len(self.cards)} cards, expected {self.target_count}")
        ids = [card.card_id for card in self.cards]
        if len(set(ids)) != len(ids):
            raise AssertionError("selection contains duplicate card ids")


@dataclass(frozen=True)
class DeckFailure:
    reason: str
    target_count: int
    target_stars: int

    @property
    def success(self) -> bool:
        return False


DeckOutcome = Union[DeckSelection, DeckFailure]


def assemble_result(
    selection: Optional[Sequence[ScoredCard]],
    *,
    target_count: int,
    target_stars: int,
    strategy: str = "exact",
) -> DeckOutcome:
    """Turn solver output into a validated selection or a failure with a reason."""

    def fail(reason: str) -> DeckFailure:
        logger.error("Deck rejected: %s", reason)
        return DeckFailure(reason=reason, target_count=target_count, target_stars=target_stars)

    if not selection:
        return fail(REASON_NO_COMBINATION)
    cards = tuple(selection)
    if len(cards) != target_count:
        return fail(REASON_WRONG_COUNT)
    ids = {card.card_id for card in cards}
    if len(ids) != len(cards):
        return fail(REASON_DUPLICATE_IDS)
    total_stars = sum(card.stars for card in cards)
    if total_stars > target_stars:
        return fail(REASON_CAP_EXCEEDED)
    total_score = sum(card.score for card in cards)
    return DeckSelection(
        cards=cards,
        total_stars=total_stars,
        total_score=total_score,
        target_count=target_count,
        target_stars=target_stars,
        strategy=strategy,
    )
