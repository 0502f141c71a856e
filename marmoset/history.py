"""Linear undo/redo history built from reversible tableau deltas."""

from __future__ import annotations

from dataclasses import dataclass, field

from .cards import Card
from .deck import StockDraw
from .state import TableauState

__all__ = ["Delta", "History", "apply_delta", "revert_delta"]


@dataclass(frozen=True, slots=True)
class Delta:
    """Minimal description of one state-changing command.

    ``drawn`` and ``placed`` are parallel: the n-th drawn card lands on the
    n-th placed position.
    """

    label: str
    removed: tuple[tuple[int, Card], ...] = ()
    drawn: StockDraw = ()
    placed: tuple[int, ...] = ()
    grew_by: int = 0
    score_delta: int = 0

    def __post_init__(self) -> None:
        if len(self.drawn) != len(self.placed):
            raise ValueError("every drawn card needs a target position")


def apply_delta(state: TableauState, delta: Delta) -> None:
    """Perform ``delta`` on ``state``; used both for new commands and redo."""

    for position, card in delta.removed:
        if state.cells[position] != card:
            raise RuntimeError(f"expected {card!r} at position {position}")
        state.cells[position] = None

    state.cells.extend([None] * delta.grew_by)

    taken = state.stock.take_at([index for index, _ in delta.drawn])
    if taken != delta.drawn:
        raise RuntimeError("stock does not match the recorded draw")
    for position, (_, card) in zip(delta.placed, delta.drawn):
        if state.cells[position] is not None:
            raise RuntimeError(f"position {position} is already occupied")
        state.cells[position] = card

    state.score += delta.score_delta
    state.discarded += len(delta.removed)


def revert_delta(state: TableauState, delta: Delta) -> None:
    """Undo ``delta``, leaving ``state`` exactly as it was before it was applied."""

    for position in delta.placed:
        state.cells[position] = None
    state.stock.restore(delta.drawn)

    if delta.grew_by:
        del state.cells[-delta.grew_by :]

    for position, card in delta.removed:
        state.cells[position] = card

    state.score -= delta.score_delta
    state.discarded -= len(delta.removed)


@dataclass(slots=True)
class History:
    """Undo and redo stacks; issuing a new command drops the redo branch."""

    undo_stack: list[Delta] = field(default_factory=list)
    redo_stack: list[Delta] = field(default_factory=list)

    def push(self, delta: Delta) -> None:
        self.undo_stack.append(delta)
        self.redo_stack.clear()

    def pop_undo(self) -> Delta | None:
        """Move the latest command onto the redo stack and return it."""

        if not self.undo_stack:
            return None
        delta = self.undo_stack.pop()
        self.redo_stack.append(delta)
        return delta

    def pop_redo(self) -> Delta | None:
        if not self.redo_stack:
            return None
        delta = self.redo_stack.pop()
        self.undo_stack.append(delta)
        return delta

    def clear(self) -> None:
        self.undo_stack.clear()
        self.redo_stack.clear()

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    @property
    def undo_label(self) -> str | None:
        return self.undo_stack[-1].label if self.undo_stack else None

    @property
    def redo_label(self) -> str | None:
        return self.redo_stack[-1].label if self.redo_stack else None

    def __len__(self) -> int:
        return len(self.undo_stack)
