"""Core tableau state data structures for Marmoset."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, List, Optional

from . import encoding
from .cards import Card

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .deck import Stock


class Variant(str, Enum):
    """Game variants supported by the engine."""

    SET = "set"
    SUPERSET = "superset"


class DeckKind(str, Enum):
    """Which cards are shuffled into a new game."""

    FULL = "full"
    BEGINNER = "beginner"


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Runtime configuration for a single game."""

    variant: Variant = Variant.SET
    deck: DeckKind = DeckKind.FULL
    # Refuse to deal extra cards while the board still holds a match.
    deal_only_when_stuck: bool = True
    seed: int | None = None


Cell = Optional[Card]


def _empty_stock() -> "Stock":
    """Return an empty stock for a fresh tableau."""

    from .deck import Stock  # Local import to avoid cycles

    return Stock([])


@dataclass(slots=True)
class TableauState:
    """Mutable board owned by a single :class:`~marmoset.game.Game`."""

    cells: List[Cell] = field(default_factory=list)
    stock: "Stock" = field(default_factory=_empty_stock)
    score: int = 0
    deck_size: int = 0
    discarded: int = 0

    def cards(self) -> list[Card]:
        """Return the face-up cards in position order."""

        return [card for card in self.cells if card is not None]

    def card_count(self) -> int:
        return sum(1 for card in self.cells if card is not None)

    def occupied(self) -> Iterator[tuple[int, Card]]:
        """Yield ``(position, card)`` for every occupied cell."""

        for position, card in enumerate(self.cells):
            if card is not None:
                yield position, card

    def empty_positions(self) -> list[int]:
        return [position for position, card in enumerate(self.cells) if card is None]

    def snapshot(self) -> tuple[tuple[Cell, ...], tuple[Card, ...], int]:
        """Return an immutable copy of the board, stock and score for comparisons."""

        return tuple(self.cells), tuple(self.stock), self.score

    def check_invariants(self) -> None:
        """Raise ``RuntimeError`` if cards were duplicated or lost."""

        indices = [card.index for card in self.cards()] + [card.index for card in self.stock]
        try:
            encoding.mask_from_indices(indices)
        except ValueError as exc:
            raise RuntimeError(f"corrupted tableau: {exc}") from exc
        accounted = len(indices) + self.discarded
        if accounted != self.deck_size:
            raise RuntimeError(
                f"corrupted tableau: {accounted} cards accounted for, deck holds {self.deck_size}"
            )
