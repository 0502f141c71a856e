"""Game controller: explicit commands over a single owned tableau.

Every command runs to completion and returns a plain result object; player
outcomes such as a wrong selection or a finished round are values, not
exceptions. A :class:`Game` is not safe to share between threads without
external locking.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Union

from .cards import Card
from .deal import DealGenerator
from .deck import GUARANTEE_MIN_STOCK, GUARANTEE_TABLE_SIZE, Stock, cards_for
from .find import InvalidPosition, NoMatch
from .history import Delta, History, apply_delta, revert_delta
from .rules import Rules, rules_for
from .state import Cell, DeckKind, GameConfig, TableauState, Variant

__all__ = [
    "Game",
    "SelectionChanged",
    "MatchFound",
    "NoMatch",
    "CardsDealt",
    "MatchesAvailable",
    "Hint",
    "HintUnavailable",
    "RoundOver",
    "SelectResult",
    "DealResult",
    "HintResult",
]

logger = logging.getLogger(__name__)

DEAL_MORE_LABEL = "Deal More Cards"


@dataclass(frozen=True, slots=True)
class SelectionChanged:
    """The selection was toggled but is not yet complete."""

    selection: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class MatchFound:
    """A match was taken; ``dealt`` lists the positions refilled from the stock.

    Taking the last available match does not report the end of the round;
    query :meth:`Game.is_round_over` afterwards.
    """

    positions: tuple[int, ...]
    dealt: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class CardsDealt:
    positions: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class MatchesAvailable:
    """Extra cards were refused because the board already holds a match."""

    count: int
    message: str


@dataclass(frozen=True, slots=True)
class Hint:
    positions: tuple[int, int]


@dataclass(frozen=True, slots=True)
class HintUnavailable:
    """No match on the board and nothing left to deal."""


@dataclass(frozen=True, slots=True)
class RoundOver:
    score: int


SelectResult = Union[SelectionChanged, MatchFound, NoMatch]
DealResult = Union[CardsDealt, MatchesAvailable, RoundOver]
HintResult = Union[Hint, HintUnavailable, CardsDealt, MatchesAvailable, RoundOver]


class Game:
    """A single game of Set or SuperSet."""

    def __init__(self, config: GameConfig | None = None, *, rng: random.Random | None = None) -> None:
        self.config = config or GameConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.rules: Rules = rules_for(self.config.variant)
        self.state = TableauState()
        self.history = History()
        self._selection: list[int] = []
        self.new_game()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def cells(self) -> tuple[Cell, ...]:
        return tuple(self.state.cells)

    @property
    def selection(self) -> tuple[int, ...]:
        return tuple(self._selection)

    @property
    def variant(self) -> Variant:
        return self.config.variant

    @property
    def deck_kind(self) -> DeckKind:
        return self.config.deck

    @property
    def stock_count(self) -> int:
        return len(self.state.stock)

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    @property
    def undo_label(self) -> str | None:
        return self.history.undo_label

    @property
    def redo_label(self) -> str | None:
        return self.history.redo_label

    def board(self) -> list[tuple[int, Card]]:
        return list(self.state.occupied())

    def card_at(self, position: int) -> Card:
        """Return the card at ``position`` or raise :class:`InvalidPosition`."""

        if not 0 <= position < len(self.state.cells):
            raise InvalidPosition(position)
        card = self.state.cells[position]
        if card is None:
            raise InvalidPosition(position)
        return card

    def count_matches(self) -> int:
        return self.rules.count(self.board())

    def is_round_over(self) -> bool:
        return self.state.stock.is_empty() and self.rules.is_stuck(self.board())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def new_game(self, variant: Variant | None = None, deck: DeckKind | None = None) -> None:
        """Shuffle a fresh deck and deal the opening layout."""

        if variant is not None or deck is not None:
            self.config = replace(
                self.config,
                variant=variant if variant is not None else self.config.variant,
                deck=deck if deck is not None else self.config.deck,
            )
        self.rules = rules_for(self.config.variant)

        order = DealGenerator(self.rng).generate(cards_for(self.config.deck), self.rules.guarantee)
        stock = Stock(order)
        opening = stock.draw(self.rules.initial_deal_size)
        self.state = TableauState(
            cells=[card for _, card in opening],
            stock=stock,
            deck_size=len(order),
        )
        self.history.clear()
        self._selection.clear()
        logger.info(
            "New %s game: %d cards dealt, %d in stock",
            self.rules.name,
            len(opening),
            len(stock),
        )

    def restart(self) -> None:
        """Return to the opening layout of the current game."""

        while self.undo():
            pass
        self.history.clear()

    def select(self, position: int) -> SelectResult:
        """Toggle ``position``; a full selection is validated immediately."""

        self.card_at(position)
        if position in self._selection:
            self._selection.remove(position)
            return SelectionChanged(self.selection)

        self._selection.append(position)
        if len(self._selection) < self.rules.set_size:
            return SelectionChanged(self.selection)

        selected = self.selection
        self._selection.clear()
        verdict = self.rules.validate(self.board(), selected)
        if isinstance(verdict, NoMatch):
            logger.debug("Selection %s is not a %s", selected, self.rules.name)
            return verdict
        return self.take_match(verdict.positions)

    def take_match(self, positions: tuple[int, ...]) -> MatchFound | NoMatch:
        """Remove a match and refill the layout back up to the opening size."""

        verdict = self.rules.validate(self.board(), positions)
        if isinstance(verdict, NoMatch):
            return verdict

        vacated = sorted(positions)
        removed = tuple((position, self.card_at(position)) for position in vacated)
        remaining = self.state.card_count() - len(removed)
        shortfall = max(0, self.rules.initial_deal_size - remaining)
        targets = tuple(vacated[: min(shortfall, len(self.state.stock))])
        drawn = tuple((index, self.state.stock[index]) for index in range(len(targets)))

        delta = Delta(
            label=self.rules.name,
            removed=removed,
            drawn=drawn,
            placed=targets,
            score_delta=1,
        )
        self._commit(delta)
        logger.debug("Took %s at %s, refilled %s", self.rules.name, vacated, targets)
        return MatchFound(tuple(vacated), targets)

    def deal_more(self) -> DealResult:
        """Deal one match worth of extra cards onto the board."""

        board = self.board()
        stuck = self.rules.is_stuck(board)
        if self.state.stock.is_empty():
            if stuck:
                return RoundOver(self.state.score)
            return self._matches_available(board)
        if not stuck and self.config.deal_only_when_stuck:
            return self._matches_available(board)

        indices = self._next_draw_indices()
        empties = self.state.empty_positions()
        grew_by = max(0, len(indices) - len(empties))
        fresh = list(range(len(self.state.cells), len(self.state.cells) + grew_by))
        targets = tuple((empties + fresh)[: len(indices)])
        drawn = tuple((index, self.state.stock[index]) for index in indices)

        self._commit(Delta(label=DEAL_MORE_LABEL, drawn=drawn, placed=targets, grew_by=grew_by))
        logger.debug("Dealt %d more card(s) to %s", len(targets), targets)
        return CardsDealt(targets)

    def hint(self) -> HintResult:
        """Select two cards of some match, dealing more when the board is stuck."""

        self._selection.clear()
        found = self.rules.hint(self.board())
        if found is not None:
            self._selection.extend(found)
            return Hint(found)
        if self.state.stock.is_empty():
            return HintUnavailable()
        return self.deal_more()

    def undo(self) -> bool:
        """Reverse the latest command; returns ``False`` when there is nothing to undo."""

        delta = self.history.pop_undo()
        if delta is None:
            return False
        revert_delta(self.state, delta)
        self._selection.clear()
        return True

    def redo(self) -> bool:
        delta = self.history.pop_redo()
        if delta is None:
            return False
        apply_delta(self.state, delta)
        self._selection.clear()
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _commit(self, delta: Delta) -> None:
        apply_delta(self.state, delta)
        self.history.push(delta)
        self._selection.clear()

    def _matches_available(self, board: list[tuple[int, Card]]) -> MatchesAvailable:
        count = self.rules.count(board)
        return MatchesAvailable(count, self.rules.match_label(count))

    def _next_draw_indices(self) -> list[int]:
        stock = self.state.stock
        guarantee = (
            self.rules.variant is Variant.SET
            and self.state.card_count() == GUARANTEE_TABLE_SIZE
            and len(stock) >= GUARANTEE_MIN_STOCK
        )
        if guarantee:
            indices = stock.guaranteed_indices(self.state.cards(), self.rng)
            if indices is not None:
                return indices
        return list(range(min(self.rules.set_size, len(stock))))
