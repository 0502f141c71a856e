"""Deck assembly and the stock of undealt cards."""

from __future__ import annotations

import logging
import random
from itertools import combinations
from typing import Iterable, Iterator, List, Sequence

from .cards import Card, Shading, complete, iter_full_deck
from .find import contains_set, find_set
from .state import DeckKind

__all__ = [
    "GUARANTEE_TABLE_SIZE",
    "GUARANTEE_MIN_STOCK",
    "StockDraw",
    "Stock",
    "full_deck",
    "beginner_deck",
    "cards_for",
]

logger = logging.getLogger(__name__)

# 15 on the table plus 6 in the stock is 21 cards, which always hold a Set.
GUARANTEE_TABLE_SIZE = 15
GUARANTEE_MIN_STOCK = 6
DRAW_SIZE = 3

# ``(stock_index, card)`` pairs in placement order; indices refer to the
# stock as it was immediately before the draw.
StockDraw = tuple[tuple[int, Card], ...]


def full_deck() -> list[Card]:
    """Return all 81 cards in index order."""

    return list(iter_full_deck())


def beginner_deck() -> list[Card]:
    """Return the 27 solid cards, keeping their full-deck order."""

    return [card for card in iter_full_deck() if card.shading is Shading.SOLID]


def cards_for(kind: DeckKind) -> list[Card]:
    if kind is DeckKind.BEGINNER:
        return beginner_deck()
    return full_deck()


class Stock:
    """Ordered undealt cards; the front of the sequence is dealt first."""

    __slots__ = ("_cards",)

    def __init__(self, cards: Iterable[Card]) -> None:
        self._cards: List[Card] = list(cards)
        if len(set(self._cards)) != len(self._cards):
            raise ValueError("stock contains duplicate cards")

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __getitem__(self, index: int) -> Card:
        return self._cards[index]

    def __repr__(self) -> str:
        return f"Stock({len(self._cards)} cards)"

    @property
    def remainder(self) -> int:
        return len(self._cards)

    def is_empty(self) -> bool:
        return not self._cards

    def peek(self, n: int) -> list[Card]:
        return self._cards[:n]

    def take_at(self, indices: Sequence[int]) -> StockDraw:
        """Remove the cards at ``indices`` and return them in the order requested."""

        if len(set(indices)) != len(indices):
            raise ValueError("stock indices must be distinct")
        for index in indices:
            if not 0 <= index < len(self._cards):
                raise IndexError(f"stock index {index} out of range")
        draw = tuple((index, self._cards[index]) for index in indices)
        for index in sorted(indices, reverse=True):
            del self._cards[index]
        return draw

    def restore(self, draw: StockDraw) -> None:
        """Put back the cards of a previous :meth:`take_at` in their original slots."""

        for index, card in sorted(draw, key=lambda item: item[0]):
            self._cards.insert(index, card)

    def draw(self, n: int) -> StockDraw:
        """Take up to ``n`` cards from the front of the stock."""

        return self.take_at(list(range(min(n, len(self._cards)))))

    def guaranteed_indices(self, table: Sequence[Card], rng: random.Random) -> list[int] | None:
        """Choose three stock indices whose cards complete a Set with ``table``.

        The smallest deal guaranteed to hold a Set is 21 cards. With 15 cards
        on the table and at least 6 in the stock, a Set exists somewhere among
        those 21, so the draw can be arranged to reach it:

        1. two cards of the Set are on the table, one in the stock;
        2. one card is on the table, two in the stock;
        3. all three are in the stock.

        The plain next-three draw is used whenever it already works. The stock
        itself is left untouched.
        """

        if len(table) != GUARANTEE_TABLE_SIZE:
            raise ValueError(f"expected {GUARANTEE_TABLE_SIZE} table cards, got {len(table)}")
        if len(self._cards) < GUARANTEE_MIN_STOCK:
            raise ValueError(f"need at least {GUARANTEE_MIN_STOCK} cards in stock")

        if contains_set(list(table) + self.peek(DRAW_SIZE)):
            return list(range(DRAW_SIZE))

        indices = (
            self._fix_one_card(table, rng)
            or self._fix_two_cards(table, rng)
            or self._fix_three_cards()
        )
        if indices is not None:
            logger.debug("Doctored stock draw to guarantee a Set: indices %s", indices)
        return indices

    def _fill(self, chosen: list[int], rng: random.Random) -> list[int]:
        """Top ``chosen`` up to a full draw with cards from the front, then shuffle."""

        for index in range(len(self._cards)):
            if len(chosen) == DRAW_SIZE:
                break
            if index not in chosen:
                chosen.append(index)
        rng.shuffle(chosen)
        return chosen

    def _fix_one_card(self, table: Sequence[Card], rng: random.Random) -> list[int] | None:
        hand = list(table)
        # Shuffle so cards early in the layout are not favoured.
        rng.shuffle(hand)
        position = {card: index for index, card in enumerate(self._cards)}
        for a, b in combinations(hand, 2):
            index = position.get(complete(a, b))
            if index is not None:
                return self._fill([index], rng)
        return None

    def _fix_two_cards(self, table: Sequence[Card], rng: random.Random) -> list[int] | None:
        hand = set(table)
        for (i, a), (j, b) in combinations(enumerate(self._cards), 2):
            if complete(a, b) in hand:
                return self._fill([i, j], rng)
        return None

    def _fix_three_cards(self) -> list[int] | None:
        found = find_set(enumerate(self._cards))
        if found is None:
            return None
        return list(found)
