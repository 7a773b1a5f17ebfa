import pytest
from pydantic import ValidationError

from herodeck.config import DeckConfig, ScoringAlgorithm, get_rules, iter_rules
from herodeck.models import CardRecord
from herodeck.optimizer import build_optimal_selection


def test_get_rules_handles_lowercase_key():
    rules = get_rules("main")
    assert rules.card_count == 5
    assert rules.star_cap == 19


def test_get_rules_missing_raises():
    with pytest.raises(KeyError):
        get_rules("SEASONAL")


def test_iter_rules_lists_main():
    assert any(rules.key == "MAIN" for rules in iter_rules())


def test_deck_config_defaults_follow_main_rules():
    config = DeckConfig()
    assert config.target_count == 5
    assert config.target_stars == 19
    assert config.scoring_algorithm is ScoringAlgorithm.EXPONENTIAL_SMOOTHING


def test_unknown_algorithm_resolves_to_exponential_smoothing():
    config = DeckConfig(algorithm="crystalBall")
    assert config.scoring_algorithm is ScoringAlgorithm.EXPONENTIAL_SMOOTHING


def test_fingerprint_tracks_algorithm_and_overrides():
    base = DeckConfig(score_overrides={"hero": 10})
    assert base.fingerprint() == DeckConfig(score_overrides={"HERO": 10.0}).fingerprint()
    assert base.fingerprint() != DeckConfig(score_overrides={"HERO": 11}).fingerprint()
    assert base.fingerprint() != DeckConfig(algorithm="weighted", score_overrides={"HERO": 10}).fingerprint()
    # star target does not influence scores
    assert base.fingerprint() == DeckConfig(score_overrides={"HERO": 10}, target_stars=18).fingerprint()


def test_deck_config_rejects_zero_cards():
    with pytest.raises(ValidationError):
        DeckConfig(target_count=0)


def test_bucket_cap_from_environment(monkeypatch):
    monkeypatch.setenv("HERODECK_BUCKET_CAP", "8")
    assert DeckConfig().effective_bucket_cap == 8
    assert DeckConfig(bucket_cap=3).effective_bucket_cap == 3


def test_invalid_environment_value_uses_default(monkeypatch):
    monkeypatch.setenv("HERODECK_GREEDY_WINDOW", "lots")
    assert DeckConfig().effective_greedy_window == 120


def _greedy_only_pool() -> tuple[list[CardRecord], dict[str, list[int]]]:
    # no pair costs 7-9 stars, so only the greedy fill can answer a 9-star cap
    pool = [
        CardRecord(card_id="big1", hero_key="BIG1", stars=5),
        CardRecord(card_id="big2", hero_key="BIG2", stars=5),
        CardRecord(card_id="small1", hero_key="SMALL1", stars=1),
        CardRecord(card_id="small2", hero_key="SMALL2", stars=1),
    ]
    history = {"BIG1": [50], "BIG2": [45], "SMALL1": [8], "SMALL2": [6]}
    return pool, history


def test_greedy_window_default_reaches_greedy_fill():
    pool, history = _greedy_only_pool()
    outcome = build_optimal_selection(pool, DeckConfig(target_count=2, target_stars=9), history=history)

    assert outcome.success
    assert outcome.strategy == "greedy"
    assert [card.card_id for card in outcome.cards] == ["big1", "small1"]


def test_greedy_window_from_config_limits_greedy_fill():
    pool, history = _greedy_only_pool()
    config = DeckConfig(target_count=2, target_stars=9, greedy_window=1)

    assert config.effective_greedy_window == 1
    outcome = build_optimal_selection(pool, config, history=history)
    assert not outcome.success
    assert outcome.reason == "no combination found"


def test_greedy_window_from_environment_limits_greedy_fill(monkeypatch):
    monkeypatch.setenv("HERODECK_GREEDY_WINDOW", "1")
    pool, history = _greedy_only_pool()
    config = DeckConfig(target_count=2, target_stars=9)

    assert config.effective_greedy_window == 1
    assert not build_optimal_selection(pool, config, history=history).success
    assert build_optimal_selection(pool, config.model_copy(update={"greedy_window": 3}), history=history).success
