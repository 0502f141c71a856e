"""Tests for deal counting and random-game simulation."""

from __future__ import annotations

import math
from itertools import combinations

import numpy as np
import pytest

from marmoset import analysis
from marmoset.cards import complete
from marmoset.deck import beginner_deck, full_deck
from marmoset.find import contains_set, contains_superset
from marmoset.state import Variant


def test_completion_table_matches_complete() -> None:
    deck = full_deck()
    table = analysis.completion_table()

    assert table.shape == (81, 81)
    assert np.all(np.diag(table) == -1)
    assert np.array_equal(table, table.T)
    for i, j in combinations(range(81), 2):
        assert table[i, j] == complete(deck[i], deck[j]).index


def test_completion_table_of_a_sub_deck_uses_full_deck_indices() -> None:
    cards = beginner_deck()
    table = analysis.completion_table(cards)

    assert table.shape == (27, 27)
    assert table[1, 2] == complete(cards[1], cards[2]).index
    assert set(table[table >= 0].tolist()) == {card.index for card in cards}


def test_iter_deals_enumerates_every_combination() -> None:
    deals = list(analysis.iter_deals(3, beginner_deck()))

    assert len(deals) == math.comb(27, 3)
    assert len(set(deals)) == len(deals)


@pytest.mark.parametrize("deal_size", [3, 4])
def test_set_free_count_matches_brute_force(deal_size: int) -> None:
    cards = beginner_deck()
    expected = sum(1 for deal in analysis.iter_deals(deal_size, cards) if not contains_set(deal))

    result = analysis.count_free_deals(deal_size, Variant.SET, cards=cards)

    assert result.free == expected
    assert result.combinations == math.comb(27, deal_size)
    assert result.with_match == result.combinations - expected


def test_superset_free_count_matches_brute_force() -> None:
    cards = beginner_deck()
    expected = sum(1 for deal in analysis.iter_deals(4, cards) if not contains_superset(deal))

    result = analysis.count_free_deals(4, Variant.SUPERSET, cards=cards)

    assert result.free == expected == math.comb(27, 4) - 27 * 78


def test_caps_larger_than_nine_do_not_exist_in_the_beginner_deck() -> None:
    assert analysis.count_free_deals(10, Variant.SET, cards=beginner_deck()).free == 0


def test_parallel_count_agrees_with_serial() -> None:
    cards = beginner_deck()
    serial = analysis.count_free_deals(5, Variant.SET, cards=cards)
    parallel = analysis.count_free_deals(5, Variant.SET, cards=cards, workers=2)

    assert parallel.free == serial.free


def test_count_free_deals_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        analysis.count_free_deals(0)


def test_simulation_is_reproducible_and_accounts_for_every_game() -> None:
    first = analysis.simulate_games(20, seed=42)
    second = analysis.simulate_games(20, seed=42)

    assert first.num_games == 20
    assert np.array_equal(first.sets, second.sets)
    assert np.array_equal(first.remainder, second.remainder)
    # Every game ends with a multiple of three cards on the table.
    assert all(size % 3 == 0 for size, _ in first.end_rows())
    # 81 cards can hold at most 27 Sets.
    assert int(first.sets.sum()) <= 27 * 20
    assert first.sets[12] > 0


def test_simulation_splits_games_across_workers() -> None:
    report = analysis.run_simulation(analysis.SimulationConfig(num_games=7, seed=1, workers=2))

    assert report.num_games == 7


def test_report_rows() -> None:
    report = analysis.SimulationReport()
    report.sets[12] = 5
    report.no_sets[12] = 1
    report.remainder[6] = 2

    other = analysis.SimulationReport()
    other.no_sets[15] = 3
    report.add(other)

    assert report.hand_rows() == [(12, 5, 1), (15, 0, 3)]
    assert report.end_rows() == [(6, 2)]
    assert report.num_games == 2


def test_every_ten_card_subset_of_a_small_deck_holds_a_superset() -> None:
    cards = beginner_deck()[:18]

    assert analysis.count_free_deals(10, Variant.SUPERSET, cards=cards).free == 0
