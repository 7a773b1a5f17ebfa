"""Canonical card models shared across ingestion, scoring and optimizer layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class CardRecord(BaseModel):
    """A single owned card eligible for deck selection."""

    card_id: str = Field(..., min_length=1)
    hero_key: str = Field(..., min_length=1)
    name: str = ""
    stars: int = Field(..., ge=0)
    score_override: Optional[float] = Field(default=None, ge=0.0)

    model_config = ConfigDict(frozen=True)

    @field_validator("hero_key")
    @classmethod
    def _upper_hero_key(cls, value: str) -> str:
        return value.strip().upper()


@dataclass(frozen=True)
class ScoredCard:
    card: CardRecord
    score: float
    efficiency: float

    @property
    def card_id(self) -> str:
        return self.card.card_id

    @property
    def hero_key(self) -> str:
        return self.card.hero_key

    @property
    def stars(self) -> int:
        return self.card.stars

    @classmethod
    def from_card(cls, card: CardRecord, score: float) -> "ScoredCard":
        """Attach a projected score; callers must filter out zero-star cards first."""

        if card.stars <= 0:
            raise ValueError(f"card {card.card_id!r} has no star cost")
        score = max(0.0, float(score))
        return cls(card=card, score=score, efficiency=score / card.stars)
