import pytest

from herodeck.models import CardRecord, ScoredCard
from herodeck.optimizer import rank_and_prune, score_and_rank
from herodeck.scoring import ScoreEstimator


def _scored(card_id: str, stars: int, score: float) -> ScoredCard:
    card = CardRecord(card_id=card_id, hero_key=f"H{card_id}", stars=stars)
    if stars <= 0:
        return ScoredCard(card=card, score=score, efficiency=0.0)
    return ScoredCard.from_card(card, score)


def test_rank_and_prune_keeps_top_per_bucket():
    pool = [_scored(f"two{i}", 2, float(10 + i)) for i in range(7)]
    pool.append(_scored("one", 1, 5.0))

    pruned = rank_and_prune(pool, bucket_cap=5)

    two_star = [card.card_id for card in pruned if card.stars == 2]
    assert two_star == ["two6", "two5", "two4", "two3", "two2"]
    assert any(card.card_id == "one" for card in pruned)
    assert len(pruned) == 6


def test_rank_and_prune_sorted_by_efficiency():
    pool = [
        _scored("a", 1, 10.0),
        _scored("b", 4, 100.0),
        _scored("c", 2, 30.0),
        _scored("d", 5, 60.0),
    ]
    pruned = rank_and_prune(pool)
    efficiencies = [card.efficiency for card in pruned]
    assert efficiencies == sorted(efficiencies, reverse=True)
    assert pruned[0].card_id == "b"


def test_rank_and_prune_rejects_zero_star_cards():
    pool = [_scored("free", 0, 50.0), _scored("paid", 1, 5.0)]
    pruned = rank_and_prune(pool)
    assert [card.card_id for card in pruned] == ["paid"]


def test_rank_and_prune_is_idempotent_with_ties():
    pool = [_scored(f"t{i}", 1 + i % 3, 10.0 * (1 + i % 3)) for i in range(12)]
    first = rank_and_prune(pool, bucket_cap=2)
    second = rank_and_prune(pool, bucket_cap=2)
    assert [card.card_id for card in first] == [card.card_id for card in second]
    # equal efficiency keeps the original pool order
    assert [card.card_id for card in first if card.stars == 1] == ["t0", "t3"]


def test_score_and_rank_skips_cards_without_stars():
    cards = [
        CardRecord(card_id="x", hero_key="ALICE", stars=0),
        CardRecord(card_id="y", hero_key="ALICE", stars=2),
        CardRecord(card_id="z", hero_key="BOB", stars=1),
    ]
    estimator = ScoreEstimator({"ALICE": [40], "BOB": [30]})
    ranked = score_and_rank(cards, estimator)
    assert [card.card_id for card in ranked] == ["z", "y"]
    assert ranked[0].efficiency == pytest.approx(30.0)
    assert ranked[1].efficiency == pytest.approx(20.0)
