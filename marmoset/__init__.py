"""Top-level package for the Marmoset Set and SuperSet engine."""

from . import cards, deal, deck, encoding, find, game, history, rules, state

__all__ = [
    "cards",
    "deal",
    "deck",
    "encoding",
    "find",
    "game",
    "history",
    "rules",
    "state",
]
