"""Exhaustive Set and SuperSet search over the cards in play.

Boards are small (rarely more than 21 cards), so every routine here simply
walks ``itertools.combinations`` of the occupied positions in ascending
order. That order is the tie-break whenever several matches are present:
the first combination found is the one reported.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import Iterable, Iterator, Sequence

from .cards import Card, is_set, is_superset, superset_pairs
from .state import Cell, Variant

__all__ = [
    "Board",
    "InvalidPosition",
    "InvalidSelectionSize",
    "Match",
    "NoMatch",
    "occupied",
    "iter_sets",
    "iter_supersets",
    "find_set",
    "find_superset",
    "find_all_sets",
    "find_all_supersets",
    "count_sets",
    "count_supersets",
    "contains_set",
    "contains_superset",
    "match_size",
    "hint",
    "validate_selection",
]

Board = Iterable[tuple[int, Card]]

SET_SIZE = 3
SUPERSET_SIZE = 4


class InvalidPosition(LookupError):
    """Raised when a position is out of range or holds no card."""

    def __init__(self, position: int) -> None:
        super().__init__(f"no card at position {position}")
        self.position = position


class InvalidSelectionSize(ValueError):
    """Raised when a selection has the wrong number of cards for the variant."""

    def __init__(self, size: int, expected: int) -> None:
        super().__init__(f"selection holds {size} card(s), expected {expected}")
        self.size = size
        self.expected = expected


@dataclass(frozen=True, slots=True)
class Match:
    """A validated selection."""

    positions: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class NoMatch:
    """A complete selection that does not form a Set or SuperSet."""

    positions: tuple[int, ...]


def occupied(cells: Sequence[Cell]) -> list[tuple[int, Card]]:
    """Return ``(position, card)`` pairs for the non-empty cells."""

    return [(position, card) for position, card in enumerate(cells) if card is not None]


def _ordered(board: Board) -> list[tuple[int, Card]]:
    return sorted(board, key=lambda item: item[0])


def iter_sets(board: Board) -> Iterator[tuple[int, int, int]]:
    """Yield the positions of every Set on ``board``."""

    for (p, a), (q, b), (r, c) in combinations(_ordered(board), SET_SIZE):
        if is_set(a, b, c):
            yield p, q, r


def iter_supersets(board: Board) -> Iterator[tuple[int, int, int, int]]:
    """Yield the positions of every SuperSet on ``board``."""

    for (p, a), (q, b), (r, c), (s, d) in combinations(_ordered(board), SUPERSET_SIZE):
        if is_superset(a, b, c, d):
            yield p, q, r, s


def find_set(board: Board) -> tuple[int, int, int] | None:
    return next(iter_sets(board), None)


def find_superset(board: Board) -> tuple[int, int, int, int] | None:
    return next(iter_supersets(board), None)


def find_all_sets(board: Board) -> list[tuple[int, int, int]]:
    return list(iter_sets(board))


def find_all_supersets(board: Board) -> list[tuple[int, int, int, int]]:
    return list(iter_supersets(board))


def count_sets(board: Board) -> int:
    return sum(1 for _ in iter_sets(board))


def count_supersets(board: Board) -> int:
    return sum(1 for _ in iter_supersets(board))


def contains_set(cards: Iterable[Card]) -> bool:
    """Return ``True`` if any three of ``cards`` form a Set."""

    return find_set(enumerate(cards)) is not None


def contains_superset(cards: Iterable[Card]) -> bool:
    """Return ``True`` if any four of ``cards`` form a SuperSet."""

    return find_superset(enumerate(cards)) is not None


def match_size(variant: Variant) -> int:
    """Return how many cards a match holds in ``variant``."""

    return SUPERSET_SIZE if variant is Variant.SUPERSET else SET_SIZE


def hint(board: Board, variant: Variant) -> tuple[int, int] | None:
    """Return two positions belonging to a match, or ``None`` if the board is stuck.

    For Sets these are the first two positions of the first Set found. For
    SuperSets they are one of the two pairs sharing a completing card.
    """

    ordered = _ordered(board)
    if variant is Variant.SET:
        found = find_set(ordered)
        if found is None:
            return None
        return found[0], found[1]

    found_superset = find_superset(ordered)
    if found_superset is None:
        return None
    by_position = dict(ordered)
    quad = [by_position[position] for position in found_superset]
    pairs = superset_pairs(*quad)
    if pairs is None:  # pragma: no cover - find_superset already validated the quad
        raise RuntimeError("SuperSet search returned an invalid quad")
    left, _ = pairs
    position_of = {card: position for position, card in ordered}
    first, second = sorted(position_of[card] for card in left)
    return first, second


def validate_selection(
    board: Board, positions: Iterable[int], variant: Variant
) -> Match | NoMatch:
    """Check a completed selection without searching the rest of the board."""

    selected = tuple(positions)
    expected = match_size(variant)
    if len(set(selected)) != len(selected) or len(selected) != expected:
        raise InvalidSelectionSize(len(set(selected)), expected)

    by_position = dict(board)
    cards: list[Card] = []
    for position in selected:
        card = by_position.get(position)
        if card is None:
            raise InvalidPosition(position)
        cards.append(card)

    matched = is_set(*cards) if variant is Variant.SET else is_superset(*cards)
    return Match(selected) if matched else NoMatch(selected)
