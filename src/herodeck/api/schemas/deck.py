from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from herodeck.config import DEFAULT_ALGORITHM, DEFAULT_RULES


class CardPayload(BaseModel):
    card_id: str = Field(..., min_length=1)
    hero_key: str = Field(..., min_length=1)
    name: str = ""
    stars: int = Field(..., ge=0)
    score_override: float | None = Field(default=None, ge=0.0)


class ScoreRequest(BaseModel):
    history: Dict[str, List[float]]
    algorithm: str = Field(default=DEFAULT_ALGORITHM.value)


class ScoreResponse(BaseModel):
    algorithm: str
    scores: Dict[str, float]


class DeckRequest(BaseModel):
    cards: List[CardPayload]
    history: Dict[str, List[float]] = Field(default_factory=dict)
    algorithm: str = Field(default=DEFAULT_ALGORITHM.value)
    score_overrides: Dict[str, float] = Field(default_factory=dict)
    target_count: int = Field(default=DEFAULT_RULES.card_count, ge=1)
    target_stars: int = Field(default=DEFAULT_RULES.star_cap, ge=1)
    bucket_cap: int | None = Field(default=None, ge=1)


class DeckCardResponse(BaseModel):
    card_id: str
    hero_key: str
    name: str
    stars: int
    expected_score: float
    score_per_star: float


class DeckResponse(BaseModel):
    cards: List[DeckCardResponse]
    total_stars: int
    total_score: float
    target_count: int
    target_stars: int
    strategy: str
