"""Fair shuffles: deck orderings whose opening cards always hold a match."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Final, Sequence

from .cards import Card
from .find import contains_set, contains_superset
from .state import Variant

__all__ = [
    "PrefixGuarantee",
    "CLASSIC_GUARANTEE",
    "SUPERSET_GUARANTEE",
    "DealGenerator",
    "prefix_has_match",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PrefixGuarantee:
    """Promise that the first ``size`` cards of a deal contain a match.

    ``proven`` marks guarantees that hold for every ordering of the deck, in
    which case no rejection sampling is needed.
    """

    size: int
    variant: Variant
    proven: bool = False


# No Set in 18 cards happens roughly once in 1.6 million random deals.
CLASSIC_GUARANTEE: Final[PrefixGuarantee] = PrefixGuarantee(size=18, variant=Variant.SET)
# Every 10 cards of the deck contain a SuperSet.
SUPERSET_GUARANTEE: Final[PrefixGuarantee] = PrefixGuarantee(
    size=10, variant=Variant.SUPERSET, proven=True
)


def prefix_has_match(cards: Sequence[Card], guarantee: PrefixGuarantee) -> bool:
    """Return ``True`` when the guaranteed prefix of ``cards`` holds a match."""

    contains: Callable[[Sequence[Card]], bool] = (
        contains_superset if guarantee.variant is Variant.SUPERSET else contains_set
    )
    return contains(cards[: guarantee.size])


class DealGenerator:
    """Shuffle decks subject to a :class:`PrefixGuarantee`."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def shuffled(self, cards: Sequence[Card]) -> list[Card]:
        """Return a uniformly random permutation of ``cards``."""

        order = list(cards)
        self.rng.shuffle(order)
        return order

    def generate(self, cards: Sequence[Card], guarantee: PrefixGuarantee) -> list[Card]:
        """Return a shuffled deal whose prefix satisfies ``guarantee``.

        Unproven guarantees are met by rejection sampling: reshuffle until the
        prefix holds a match. There is no retry cap. Raises ``ValueError`` if
        the deck as a whole holds no match.
        """

        if not prefix_has_match(cards, PrefixGuarantee(len(cards), guarantee.variant)):
            raise ValueError(f"deck of {len(cards)} cards holds no {guarantee.variant.value}")

        order = self.shuffled(cards)
        if guarantee.proven:
            return order

        attempts = 1
        while not prefix_has_match(order, guarantee):
            attempts += 1
            logger.debug(
                "Rejected deal without a %s in the first %d cards (attempt %d)",
                guarantee.variant.value,
                guarantee.size,
                attempts,
            )
            self.rng.shuffle(order)
        return order
