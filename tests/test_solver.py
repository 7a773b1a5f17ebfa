import random
from itertools import combinations

import pytest

from herodeck.models import CardRecord, ScoredCard
from herodeck.optimizer import find_optimal_combination, greedy_fill, solve
from herodeck.optimizer.solver import STRATEGY_EXACT, STRATEGY_GREEDY, STRATEGY_RELAXED, CombinationSearch


def _scored(card_id: str, stars: int, score: float) -> ScoredCard:
    return ScoredCard.from_card(CardRecord(card_id=card_id, hero_key=f"H{card_id}", stars=stars), score)


def _by_efficiency(cards: list[ScoredCard]) -> list[ScoredCard]:
    return sorted(cards, key=lambda card: card.efficiency, reverse=True)


def _brute_force(cards: list[ScoredCard], target_cost: int, target_count: int) -> float | None:
    best = None
    for combo in combinations(cards, target_count):
        if sum(card.stars for card in combo) != target_cost:
            continue
        total = sum(card.score for card in combo)
        if best is None or total > best:
            best = total
    return best


def _ten_card_pool() -> list[ScoredCard]:
    stars = [1, 1, 2, 2, 3, 3, 4, 4, 5, 5]
    scores = [12.0, 9.0, 25.0, 18.0, 33.0, 30.0, 41.0, 47.0, 50.0, 58.0]
    return _by_efficiency([_scored(f"c{i}", s, score) for i, (s, score) in enumerate(zip(stars, scores))])


def test_solve_matches_brute_force_on_ten_cards():
    pool = _ten_card_pool()
    result = solve(pool, 19, 5)

    assert result is not None
    assert len(result.selection) == 5
    assert result.total_stars == 19
    assert result.total_score == pytest.approx(_brute_force(pool, 19, 5))
    assert len({card.card_id for card in result.selection}) == 5


def test_solve_returns_none_when_not_enough_cards():
    pool = _ten_card_pool()[:3]
    assert solve(pool, 6, 4) is None


def test_solve_exact_target_only():
    pool = _by_efficiency([_scored("a", 2, 10.0), _scored("b", 2, 12.0), _scored("c", 4, 30.0)])
    assert solve(pool, 5, 2) is None
    result = solve(pool, 6, 2)
    assert result is not None
    assert {card.card_id for card in result.selection} == {"b", "c"}


def test_find_optimal_combination_exact_strategy():
    result = find_optimal_combination(_ten_card_pool(), 19, 5)
    assert result is not None
    assert result.strategy == STRATEGY_EXACT
    assert result.total_stars == 19


def test_relaxed_target_never_exceeds_cap():
    pool = _by_efficiency([
        _scored("a", 2, 20.0),
        _scored("b", 2, 18.0),
        _scored("c", 4, 35.0),
        _scored("d", 4, 30.0),
        _scored("e", 6, 50.0),
        _scored("f", 6, 44.0),
    ])
    result = find_optimal_combination(pool, 13, 3)

    assert result is not None
    assert result.strategy == STRATEGY_RELAXED
    assert result.total_stars == 12
    assert result.total_stars <= 13
    assert result.total_score == pytest.approx(_brute_force(pool, 12, 3))


def test_greedy_fallback_when_no_near_target_combination():
    pool = _by_efficiency([
        _scored("big1", 5, 50.0),
        _scored("big2", 5, 45.0),
        _scored("small1", 1, 8.0),
        _scored("small2", 1, 6.0),
    ])
    result = find_optimal_combination(pool, 9, 2)

    assert result is not None
    assert result.strategy == STRATEGY_GREEDY
    assert [card.card_id for card in result.selection] == ["big1", "small1"]
    assert result.total_stars == 6


def test_all_strategies_fail_returns_none():
    pool = [_scored("huge1", 10, 90.0), _scored("huge2", 10, 80.0)]
    assert find_optimal_combination(pool, 9, 2) is None


def test_greedy_last_slot_prefers_closest_to_target():
    pool = [_scored("low", 2, 10.0), _scored("high", 4, 10.0)]
    result = greedy_fill(pool, 5, 1)
    assert result is not None
    assert result.selection[0].card_id == "high"


def test_greedy_respects_window():
    pool = [_scored("first", 1, 1.0), _scored("second", 1, 99.0)]
    result = greedy_fill(pool, 5, 1, window=1)
    assert result is not None
    assert result.selection[0].card_id == "first"


def test_no_fallback_path_exceeds_cap():
    rng = random.Random(2024)
    for _ in range(200):
        pool = _by_efficiency([
            _scored(f"r{i}", rng.randint(1, 6), float(rng.randint(0, 120)))
            for i in range(rng.randint(1, 14))
        ])
        target_cost = rng.randint(3, 22)
        target_count = rng.randint(1, 5)
        result = find_optimal_combination(pool, target_cost, target_count)
        if result is None:
            continue
        assert result.total_stars <= target_cost
        assert len(result.selection) == target_count
        assert len({card.card_id for card in result.selection}) == target_count


def test_solve_handles_large_pool_without_deep_stack():
    pool = [_scored(f"bulk{i}", 1, float(i % 97)) for i in range(1200)]
    result = solve(pool, 5, 5)

    assert result is not None
    assert len(result.selection) == 5
    assert result.total_stars == 5
    assert result.total_score == pytest.approx(5 * 96.0)


def test_relaxed_targets_reuse_filled_table():
    pool = [_scored("a", 2, 20.0), _scored("b", 2, 18.0), _scored("c", 4, 35.0)]
    search = CombinationSearch(pool)

    assert search.run(5, 2) is None
    computed = search.states_computed
    relaxed = search.run(4, 2)

    assert relaxed is not None
    assert {card.card_id for card in relaxed.selection} == {"a", "b"}
    assert search.states_computed == computed
    assert search.table_reuses == 1
