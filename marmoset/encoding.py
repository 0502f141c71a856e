"""Card index encoding utilities for Marmoset."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable

FEATURES: Final[tuple[str, ...]] = ("shape", "count", "color", "shading")
FEATURE_VALUES: Final[int] = 3
FEATURE_COUNT: Final[int] = len(FEATURES)
DECK_CARD_COUNT: Final[int] = FEATURE_VALUES**FEATURE_COUNT
# Place value of each feature within an index; shape is the most significant trit.
WEIGHTS: Final[tuple[int, ...]] = (27, 9, 3, 1)


@dataclass(frozen=True, slots=True)
class CardDecoding:
    """Typed container describing a decoded card index."""

    shape: int
    count: int
    color: int
    shading: int

    def trits(self) -> tuple[int, int, int, int]:
        return (self.shape, self.count, self.color, self.shading)


def _validate_trit(value: int, feature: str) -> None:
    if not 0 <= value < FEATURE_VALUES:
        raise ValueError(f"{feature} value {value} out of range")


def _validate_index(index: int) -> None:
    if index < 0 or index >= DECK_CARD_COUNT:
        raise ValueError(f"card index {index} out of range")


def card_index(shape: int, count: int, color: int, shading: int) -> int:
    """Encode four feature values into a card index in ``[0, 81)``."""

    trits = (shape, count, color, shading)
    for feature, value in zip(FEATURES, trits):
        _validate_trit(value, feature)
    return sum(value * weight for value, weight in zip(trits, WEIGHTS))


def decode_index(index: int) -> CardDecoding:
    """Decode a card index into its feature values."""

    _validate_index(index)
    shape, rest = divmod(index, 27)
    count, rest = divmod(rest, 9)
    color, shading = divmod(rest, 3)
    return CardDecoding(shape, count, color, shading)


def complete_trits(first: Iterable[int], second: Iterable[int]) -> tuple[int, ...]:
    """Return the trits that make each coordinate of the triple sum to zero mod 3."""

    return tuple((-a - b) % FEATURE_VALUES for a, b in zip(first, second))


def complete_index(first: int, second: int) -> int:
    """Index-level counterpart of :func:`complete_trits`."""

    a = decode_index(first).trits()
    b = decode_index(second).trits()
    return card_index(*complete_trits(a, b))


def mask_from_indices(indices: Iterable[int]) -> int:
    """Return a bit-mask of ``indices``; raises ``ValueError`` on repeats."""

    mask = 0
    for index in indices:
        _validate_index(index)
        bit = 1 << index
        if mask & bit:
            raise ValueError(f"card index {index} appears more than once")
        mask |= bit
    return mask

