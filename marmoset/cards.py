"""Card abstractions and the Set/SuperSet algebra."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator

from . import encoding

__all__ = [
    "Shape",
    "Count",
    "Color",
    "Shading",
    "Card",
    "DegenerateInput",
    "Pair",
    "iter_full_deck",
    "is_set",
    "complete",
    "is_superset",
    "superset_pairs",
]


class Shape(IntEnum):
    """Symbol drawn on the card."""

    OVAL = 0
    SQUIGGLE = 1
    DIAMOND = 2


class Count(IntEnum):
    """Number of symbols, stored zero-based."""

    ONE = 0
    TWO = 1
    THREE = 2


class Color(IntEnum):
    """Colour slot; the palette is chosen by the presentation layer."""

    A = 0
    B = 1
    C = 2


class Shading(IntEnum):
    """Fill pattern of the symbols."""

    SOLID = 0
    STRIPED = 1
    OUTLINED = 2


class DegenerateInput(AssertionError):
    """Raised when the algebra is handed identical cards where distinct ones are required."""


@dataclass(frozen=True, slots=True, order=True)
class Card:
    """Value object describing one of the 81 SET cards."""

    shape: Shape
    count: Count
    color: Color
    shading: Shading

    @classmethod
    def from_trits(cls, shape: int, count: int, color: int, shading: int) -> "Card":
        return cls(Shape(shape), Count(count), Color(color), Shading(shading))

    @classmethod
    def from_index(cls, index: int) -> "Card":
        decoded = encoding.decode_index(index)
        return cls.from_trits(*decoded.trits())

    @property
    def index(self) -> int:
        """Position of the card in :func:`iter_full_deck` order."""

        return encoding.card_index(*self.trits())

    def trits(self) -> tuple[int, int, int, int]:
        return (int(self.shape), int(self.count), int(self.color), int(self.shading))

    def label(self) -> str:
        """Create a compact label suitable for terminal output, e.g. ``2-B-striped-oval``."""

        return (
            f"{self.count + 1}-{self.color.name}-"
            f"{self.shading.name.lower()}-{self.shape.name.lower()}"
        )

    def __repr__(self) -> str:
        return f"Card({self.index})"


Pair = tuple[Card, Card]


def iter_full_deck() -> Iterator[Card]:
    """Yield every card in lexicographic feature order."""

    for index in range(encoding.DECK_CARD_COUNT):
        yield Card.from_index(index)


def is_set(a: Card, b: Card, c: Card) -> bool:
    """Return ``True`` when every feature is all-equal or all-distinct across the trio."""

    return all(
        (x + y + z) % encoding.FEATURE_VALUES == 0
        for x, y, z in zip(a.trits(), b.trits(), c.trits())
    )


def complete(a: Card, b: Card) -> Card:
    """Return the unique card forming a Set with ``a`` and ``b``."""

    if a == b:
        raise DegenerateInput(f"cannot complete a Set from two copies of {a!r}")
    return Card.from_trits(*encoding.complete_trits(a.trits(), b.trits()))


def superset_pairs(a: Card, b: Card, c: Card, d: Card) -> tuple[Pair, Pair] | None:
    """Return the pairing that makes the four cards a SuperSet, if any.

    Two pairs form a SuperSet when the card completing a Set with each pair
    is the same, and that shared card is not one of the four.
    """

    quad = (a, b, c, d)
    if len(set(quad)) != len(quad):
        return None

    pairings = (((a, b), (c, d)), ((a, c), (b, d)), ((a, d), (b, c)))
    for left, right in pairings:
        virtual = complete(*left)
        if virtual == complete(*right) and virtual not in quad:
            return left, right
    return None


def is_superset(a: Card, b: Card, c: Card, d: Card) -> bool:
    """Return ``True`` when the four cards form a SuperSet."""

    return superset_pairs(a, b, c, d) is not None
