"""Tests covering the per-variant rule objects."""

from __future__ import annotations

import pytest

from marmoset import rules
from marmoset.cards import Card
from marmoset.find import Match
from marmoset.state import Variant


@pytest.mark.parametrize(
    ("variant", "expected"),
    [
        (Variant.SET, rules.SET_RULES),
        (Variant.SUPERSET, rules.SUPERSET_RULES),
    ],
)
def test_rules_for(variant: Variant, expected: rules.Rules) -> None:
    assert rules.rules_for(variant) is expected
    assert expected.variant is variant


def test_variant_parameters() -> None:
    assert (rules.SET_RULES.set_size, rules.SET_RULES.initial_deal_size) == (3, 12)
    assert (rules.SUPERSET_RULES.set_size, rules.SUPERSET_RULES.initial_deal_size) == (4, 10)
    assert rules.SET_RULES.guarantee.size == 18
    assert rules.SUPERSET_RULES.guarantee.proven


def test_validate_checks_selection_size() -> None:
    board = [(position, Card.from_trits(0, position, 0, 0)) for position in range(3)]

    assert rules.SET_RULES.validate(board, (0, 1, 2)) == Match((0, 1, 2))
    with pytest.raises(rules.InvalidSelectionSize):
        rules.SUPERSET_RULES.validate(board, (0, 1, 2))


def test_is_stuck_and_count() -> None:
    board = [(position, Card.from_trits(0, count, 0, 0)) for position, count in enumerate(range(3))]

    assert rules.SET_RULES.count(board) == 1
    assert not rules.SET_RULES.is_stuck(board)
    assert rules.SUPERSET_RULES.is_stuck(board)


@pytest.mark.parametrize(
    ("rule", "count", "expected"),
    [
        (rules.SET_RULES, 1, "There is 1 Set available."),
        (rules.SET_RULES, 3, "There are 3 Sets available."),
        (rules.SUPERSET_RULES, 0, "There are 0 SuperSets available."),
    ],
)
def test_match_label(rule: rules.Rules, count: int, expected: str) -> None:
    assert rule.match_label(count) == expected
