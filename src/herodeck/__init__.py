"""Deck optimizer for star-capped hero card tournaments."""
