"""Rule utilities and constants for the Set and SuperSet variants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable

from . import find
from .deal import CLASSIC_GUARANTEE, SUPERSET_GUARANTEE, PrefixGuarantee
from .find import Board, InvalidPosition, InvalidSelectionSize, Match, NoMatch
from .state import Variant

__all__ = [
    "Rules",
    "SET_RULES",
    "SUPERSET_RULES",
    "InvalidPosition",
    "InvalidSelectionSize",
    "rules_for",
]


@dataclass(frozen=True, slots=True)
class Rules:
    """Variant-specific parameters and queries shared by the game controller."""

    variant: Variant
    name: str
    set_size: int
    initial_deal_size: int
    guarantee: PrefixGuarantee

    def find(self, board: Board) -> tuple[int, ...] | None:
        if self.variant is Variant.SUPERSET:
            return find.find_superset(board)
        return find.find_set(board)

    def count(self, board: Board) -> int:
        if self.variant is Variant.SUPERSET:
            return find.count_supersets(board)
        return find.count_sets(board)

    def hint(self, board: Board) -> tuple[int, int] | None:
        return find.hint(board, self.variant)

    def is_stuck(self, board: Board) -> bool:
        """Return ``True`` when no match exists among the cards in play."""

        return self.find(board) is None

    def validate(self, board: Board, positions: Iterable[int]) -> Match | NoMatch:
        return find.validate_selection(board, positions, self.variant)

    def match_label(self, count: int) -> str:
        """Describe how many matches are available, e.g. ``There are 2 Sets available.``"""

        if count == 1:
            return f"There is 1 {self.name} available."
        return f"There are {count} {self.name}s available."


SET_RULES: Final[Rules] = Rules(
    variant=Variant.SET,
    name="Set",
    set_size=find.SET_SIZE,
    initial_deal_size=12,
    guarantee=CLASSIC_GUARANTEE,
)
SUPERSET_RULES: Final[Rules] = Rules(
    variant=Variant.SUPERSET,
    name="SuperSet",
    set_size=find.SUPERSET_SIZE,
    initial_deal_size=10,
    guarantee=SUPERSET_GUARANTEE,
)


def rules_for(variant: Variant) -> Rules:
    """Return the rules object for ``variant``."""

    if variant is Variant.SUPERSET:
        return SUPERSET_RULES
    return SET_RULES
