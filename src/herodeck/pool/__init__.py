"""Card pool utilities (portfolio expansion)."""

from .portfolio import OwnedCard, expand_portfolio, load_portfolio_csv

__all__ = [
    "OwnedCard",
    "expand_portfolio",
    "load_portfolio_csv",
]
