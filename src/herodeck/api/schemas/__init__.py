"""Pydantic models for API I/O."""

from .deck import (
    CardPayload,
    DeckCardResponse,
    DeckRequest,
    DeckResponse,
    ScoreRequest,
    ScoreResponse,
)

__all__ = [
    "CardPayload",
    "DeckCardResponse",
    "DeckRequest",
    "DeckResponse",
    "ScoreRequest",
    "ScoreResponse",
]
