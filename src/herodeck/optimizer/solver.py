"""Exact-count, exact-star deck search with relaxed and greedy fallbacks."""

from __future__ import annotations

import logging
import time
from bisect import insort
from dataclasses import dataclass
from itertools import accumulate
from typing import Dict, List, Optional, Sequence, Tuple

from herodeck.models import ScoredCard


logger = logging.getLogger(__name__)

MAX_RELAXATION = 2
DEFAULT_GREEDY_WINDOW = 120

STRATEGY_EXACT = "exact"
STRATEGY_RELAXED = "relaxed"
STRATEGY_GREEDY = "greedy"


@dataclass(frozen=True)
class SolverResult:
    selection: Tuple[ScoredCard, ...]
    total_score: float
    strategy: str = STRATEGY_EXACT

    @property
    def total_stars(self) -> int:
        return sum(card.stars for card in self.selection)


_StateKey = Tuple[int, int, int]


class CombinationSearch:
    """Bottom-up include/exclude table over a fixed candidate order.

    ``memo[(index, remaining_cost, remaining_count)]`` holds the best total
    score reachable from ``candidates[index:]``, or ``None`` when no subset
    fits. The table is filled iteratively from the last candidate backwards,
    so pool size never affects stack depth. A filled table answers every
    target up to its dimensions, which lets the relaxed targets reuse it.
    """

    def __init__(self, candidates: Sequence[ScoredCard]) -> None:
        self.candidates = list(candidates)
        self.memo: Dict[_StateKey, Optional[float]] = {}
        self.states_computed = 0
        self.table_reuses = 0
        self._filled_cost = -1
        self._filled_count = -1
        # per index: sums of the k cheapest and k dearest remaining star costs
        self._min_sums: List[List[int]] = []
        self._max_sums: List[List[int]] = []

    def _build_bounds(self, max_count: int) -> None:
        size = len(self.candidates)
        self._min_sums = [[] for _ in range(size)]
        self._max_sums = [[] for _ in range(size)]
        cheapest: List[int] = []
        dearest: List[int] = []
        for index in range(size - 1, -1, -1):
            stars = self.candidates[index].stars
            insort(cheapest, stars)
            del cheapest[max_count:]
            insort(dearest, stars)
            if len(dearest) > max_count:
                del dearest[0]
            self._min_sums[index] = [0, *accumulate(cheapest)]
            self._max_sums[index] = [0, *accumulate(reversed(dearest))]

    def _cost_range(self, index: int, remaining_count: int) -> Optional[Tuple[int, int]]:
        if remaining_count > len(self.candidates) - index:
            return None
        return self._min_sums[index][remaining_count], self._max_sums[index][remaining_count]

    def _value(self, index: int, remaining_cost: int, remaining_count: int) -> Optional[float]:
        if remaining_count == 0:
            return 0.0 if remaining_cost == 0 else None
        if remaining_cost < 0 or index >= len(self.candidates):
            return None
        return self.memo.get((index, remaining_cost, remaining_count))

    def _fill(self, max_cost: int, max_count: int) -> None:
        max_count = min(max_count, len(self.candidates))
        if max_cost <= self._filled_cost and max_count <= self._filled_count:
            self.table_reuses += 1
            return

        self.memo.clear()
        self._build_bounds(max_count)
        for index in range(len(self.candidates) - 1, -1, -1):
            card = self.candidates[index]
            for remaining_count in range(1, max_count + 1):
                bounds = self._cost_range(index, remaining_count)
                if bounds is None:
                    break
                low, high = bounds
                for remaining_cost in range(low, min(high, max_cost) + 1):
                    best = self._value(index + 1, remaining_cost, remaining_count)
                    if card.stars <= remaining_cost:
                        sub = self._value(index + 1, remaining_cost - card.stars, remaining_count - 1)
                        if sub is not None:
                            total = card.score + sub
                            if best is None or total > best:
                                best = total
                    self.memo[(index, remaining_cost, remaining_count)] = best
                    self.states_computed += 1
        self._filled_cost = max_cost
        self._filled_count = max_count

    def _reconstruct(self, target_cost: int, target_count: int) -> Tuple[ScoredCard, ...]:
        selection: List[ScoredCard] = []
        remaining_cost, remaining_count = target_cost, target_count
        for index, card in enumerate(self.candidates):
            if remaining_count == 0:
                break
            best = self._value(index, remaining_cost, remaining_count)
            # exclusion wins ties, so an equal value means the card was skipped
            if best == self._value(index + 1, remaining_cost, remaining_count):
                continue
            selection.append(card)
            remaining_cost -= card.stars
            remaining_count -= 1
        return tuple(selection)

    def run(self, target_cost: int, target_count: int) -> Optional[SolverResult]:
        if target_cost < 0 or target_count <= 0 or target_count > len(self.candidates):
            return None
        self._fill(target_cost, target_count)
        total = self._value(0, target_cost, target_count)
        if total is None:
            return None
        return SolverResult(self._reconstruct(target_cost, target_count), total, STRATEGY_EXACT)


def solve(candidates: Sequence[ScoredCard], target_cost: int, target_count: int) -> Optional[SolverResult]:
    """Best-scoring subset of exactly ``target_count`` cards costing exactly ``target_cost``."""

    return CombinationSearch(candidates).run(target_cost, target_count)


def greedy_fill(
    candidates: Sequence[ScoredCard],
    target_cost: int,
    target_count: int,
    *,
    window: int = DEFAULT_GREEDY_WINDOW,
) -> Optional[SolverResult]:
    """Fill slots one by one with the highest scoring card that still fits.

    Only the first ``window`` candidates are considered. On the final slot,
    equal scores are broken by how close the deck lands to ``target_cost``.
    """

    considered = list(candidates[: max(0, window)])
    selected: List[ScoredCard] = []
    used_ids: set[str] = set()
    total_stars = 0

    for slot in range(target_count):
        last_slot = slot == target_count - 1
        best: Optional[ScoredCard] = None
        best_score = -1.0
        best_diff = float("inf")
        for card in considered:
            if card.card_id in used_ids:
                continue
            new_total = total_stars + card.stars
            if new_total > target_cost:
                continue
            diff = abs(target_cost - new_total) if last_slot else 0
            if card.score > best_score or (card.score == best_score and diff < best_diff):
                best = card
                best_score = card.score
                best_diff = diff
        if best is None:
            logger.warning("Greedy fill found no card for slot %s/%s", slot + 1, target_count)
            return None
        selected.append(best)
        used_ids.add(best.card_id)
        total_stars += best.stars
        logger.debug("Greedy slot %s: %s (%s stars) -> %s stars", slot + 1, best.card_id, best.stars, total_stars)

    total_score = sum(card.score for card in selected)
    logger.info("Greedy result: %s stars (target %s), score %.1f", total_stars, target_cost, total_score)
    return SolverResult(tuple(selected), total_score, STRATEGY_GREEDY)


def find_optimal_combination(
    candidates: Sequence[ScoredCard],
    target_cost: int,
    target_count: int,
    *,
    greedy_window: int = DEFAULT_GREEDY_WINDOW,
) -> Optional[SolverResult]:
    """Exact search, then up to two star-relaxed searches, then greedy fill.

    No returned result ever costs more than ``target_cost``.
    """

    start = time.perf_counter()
    logger.info(
        "DP search: %s cards, %s stars target from %s candidates",
        target_count,
        target_cost,
        len(candidates),
    )
    search = CombinationSearch(candidates)
    result = search.run(target_cost, target_count)

    if result is None:
        logger.warning("No exact %s-star combination; trying under target", target_cost)
        for adjustment in range(1, MAX_RELAXATION + 1):
            relaxed = search.run(target_cost - adjustment, target_count)
            if relaxed is not None:
                result = SolverResult(relaxed.selection, relaxed.total_score, STRATEGY_RELAXED)
                logger.info(
                    "Best under target: %s stars (score %.1f)",
                    result.total_stars,
                    result.total_score,
                )
                break

    if result is not None and result.total_stars > target_cost:
        logger.error(
            "Result exceeds hard cap (%s > %s stars); rejecting",
            result.total_stars,
            target_cost,
        )
        result = None

    logger.info(
        "DP took %.1fms (%s states computed, table reused %s times)",
        (time.perf_counter() - start) * 1000,
        search.states_computed,
        search.table_reuses,
    )

    if result is None:
        logger.warning("Still no match; falling back to greedy fill")
        result = greedy_fill(candidates, target_cost, target_count, window=greedy_window)
    return result
