"""Tests for fair shuffles and prefix guarantees."""

from __future__ import annotations

import random
from itertools import product

import pytest

from marmoset.cards import Card
from marmoset.deal import (
    CLASSIC_GUARANTEE,
    SUPERSET_GUARANTEE,
    DealGenerator,
    PrefixGuarantee,
    prefix_has_match,
)
from marmoset.deck import beginner_deck, full_deck
from marmoset.find import contains_set, contains_superset
from marmoset.state import Variant


def _make_cap_cards() -> list[Card]:
    return [Card.from_trits(*trits) for trits in product((0, 1), repeat=4)]


@pytest.mark.parametrize("seed", range(25))
def test_classic_prefix_always_holds_a_set(seed: int) -> None:
    order = DealGenerator(random.Random(seed)).generate(full_deck(), CLASSIC_GUARANTEE)

    assert sorted(order) == full_deck()
    assert contains_set(order[: CLASSIC_GUARANTEE.size])


def test_every_sampled_ten_cards_hold_a_superset() -> None:
    rng = random.Random(2024)
    deck = full_deck()
    for _ in range(300):
        assert contains_superset(rng.sample(deck, 10))


def test_proven_guarantee_returns_first_shuffle(monkeypatch: pytest.MonkeyPatch) -> None:
    checked: list[int] = []

    def fake_prefix_has_match(cards, guarantee) -> bool:  # type: ignore[no-untyped-def]
        checked.append(guarantee.size)
        return True

    monkeypatch.setattr("marmoset.deal.prefix_has_match", fake_prefix_has_match)
    order = DealGenerator(random.Random(1)).generate(full_deck(), SUPERSET_GUARANTEE)

    assert len(order) == 81
    # Only the whole-deck check runs; the prefix is never re-tested.
    assert checked == [81]


def test_rejection_sampling_reshuffles_until_the_prefix_matches() -> None:
    cards = _make_cap_cards() + [Card.from_trits(2, 0, 0, 0)]
    guarantee = PrefixGuarantee(size=6, variant=Variant.SET)

    for seed in range(5):
        order = DealGenerator(random.Random(seed)).generate(cards, guarantee)
        assert sorted(order) == sorted(cards)
        assert prefix_has_match(order, guarantee)


def test_generate_rejects_a_deck_without_any_set() -> None:
    with pytest.raises(ValueError):
        DealGenerator(random.Random(0)).generate(_make_cap_cards(), CLASSIC_GUARANTEE)


def test_beginner_deck_meets_both_guarantees() -> None:
    generator = DealGenerator(random.Random(3))

    assert contains_set(generator.generate(beginner_deck(), CLASSIC_GUARANTEE)[:18])
    assert contains_superset(generator.generate(beginner_deck(), SUPERSET_GUARANTEE)[:10])


def test_shuffled_is_a_permutation() -> None:
    deck = full_deck()
    shuffled = DealGenerator(random.Random(9)).shuffled(deck)

    assert shuffled != deck
    assert sorted(shuffled) == deck
