"""Card models used across herodeck."""

from .card import CardRecord, ScoredCard

__all__ = ["CardRecord", "ScoredCard"]
