"""Tests for reversible tableau deltas and the undo/redo stacks."""

from __future__ import annotations

import pytest

from marmoset.cards import Card
from marmoset.deck import Stock, full_deck
from marmoset.history import Delta, History, apply_delta, revert_delta
from marmoset.state import TableauState


def _make_state() -> TableauState:
    deck = full_deck()
    return TableauState(cells=list(deck[:6]), stock=Stock(deck[6:12]), deck_size=12)


def test_delta_requires_a_target_for_every_draw() -> None:
    with pytest.raises(ValueError):
        Delta(label="broken", drawn=((0, Card.from_index(0)),))


def test_apply_and_revert_restore_the_exact_state() -> None:
    state = _make_state()
    before = state.snapshot()
    removed = tuple((position, state.cells[position]) for position in (1, 3, 4))
    drawn = ((2, state.stock[2]), (0, state.stock[0]))
    delta = Delta(
        label="Set",
        removed=removed,
        drawn=drawn,
        placed=(1, 7),
        grew_by=2,
        score_delta=1,
    )

    apply_delta(state, delta)

    assert state.cells[1] == drawn[0][1]
    assert state.cells[3] is None
    assert state.cells[7] == drawn[1][1]
    assert len(state.cells) == 8
    assert state.score == 1
    assert state.discarded == 3
    state.check_invariants()

    revert_delta(state, delta)

    assert state.snapshot() == before
    assert state.discarded == 0
    state.check_invariants()


def test_apply_rejects_a_mismatched_board() -> None:
    state = _make_state()
    delta = Delta(label="Set", removed=((0, Card.from_index(80)),))

    with pytest.raises(RuntimeError):
        apply_delta(state, delta)


def test_history_push_clears_redo() -> None:
    history = History()
    first = Delta(label="Set")
    second = Delta(label="Deal More Cards")

    history.push(first)
    history.push(second)
    assert history.undo_label == "Deal More Cards"
    assert history.pop_undo() is second
    assert history.can_redo
    assert history.redo_label == "Deal More Cards"

    history.push(Delta(label="SuperSet"))

    assert not history.can_redo
    assert history.pop_redo() is None
    assert len(history) == 2


def test_history_ends_are_no_ops() -> None:
    history = History()

    assert history.pop_undo() is None
    assert history.pop_redo() is None
    assert history.undo_label is None
    assert not history.can_undo
