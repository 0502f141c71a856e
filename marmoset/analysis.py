"""Exhaustive deal counting and game simulation.

Both utilities work on card indices rather than :class:`~marmoset.cards.Card`
objects. Cards are only consulted once, to build a completion lookup table;
after that a Set is ``table[a][b] == c`` and a SuperSet is two pairs with
equal table entries.
"""

from __future__ import annotations

import logging
import math
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from itertools import combinations
from typing import Iterator, Sequence

import numpy as np
from numpy.typing import NDArray

from .cards import Card
from .deck import full_deck
from .encoding import complete_index
from .state import Variant

__all__ = [
    "MAX_HAND",
    "completion_table",
    "iter_deals",
    "DealCount",
    "count_free_deals",
    "SimulationConfig",
    "SimulationReport",
    "simulate_games",
    "run_simulation",
]

logger = logging.getLogger(__name__)

INITIAL_DEAL = 12
DEAL_SIZE = 3
# A Set-free hand holds at most 20 cards, plus one more deal of three.
MAX_HAND = 24


def completion_table(cards: Sequence[Card] | None = None) -> NDArray[np.int16]:
    """Return an ``n x n`` table of full-deck indices completing each pair.

    The diagonal holds ``-1``. Entries are full-deck indices even when the
    completing card is not part of ``cards``.
    """

    deck = list(cards) if cards is not None else full_deck()
    size = len(deck)
    table = np.full((size, size), -1, dtype=np.int16)
    for i, j in combinations(range(size), 2):
        value = complete_index(deck[i].index, deck[j].index)
        table[i, j] = value
        # completion is symmetric
        table[j, i] = value
    return table


def iter_deals(deal_size: int, cards: Sequence[Card] | None = None) -> Iterator[tuple[Card, ...]]:
    """Yield every ``deal_size``-card combination of ``cards`` (default: full deck)."""

    deck = list(cards) if cards is not None else full_deck()
    return combinations(deck, deal_size)


@dataclass(frozen=True, slots=True)
class DealCount:
    """Result of counting the deals of one size."""

    deal_size: int
    variant: Variant
    free: int
    combinations: int
    seconds: float

    @property
    def with_match(self) -> int:
        return self.combinations - self.free

    @property
    def percent_free(self) -> float:
        if self.combinations == 0:
            return 0.0
        return self.free / self.combinations * 100.0


def _makes_set(lookup: list[list[int]], ids: Sequence[int], hand: list[int], extra: int) -> bool:
    target = ids[extra]
    for a, b in combinations(hand, 2):
        if lookup[a][b] == target:
            return True
    return False


def _makes_superset(lookup: list[list[int]], hand: list[int], extra: int) -> bool:
    d = extra
    for a, b, c in combinations(hand, 3):
        if (
            lookup[a][b] == lookup[c][d]
            or lookup[a][c] == lookup[b][d]
            or lookup[a][d] == lookup[b][c]
        ):
            return True
    return False


def _count_from(
    start: int,
    deal_size: int,
    variant: Variant,
    table: NDArray[np.int16],
    ids: Sequence[int],
) -> int:
    """Count match-free deals whose lowest card is ``start``.

    Branches are abandoned as soon as the partial hand holds a match, so only
    deals of exactly ``deal_size`` can be counted this way.
    """

    lookup: list[list[int]] = table.tolist()
    size = len(ids)

    def creates_match(hand: list[int], extra: int) -> bool:
        if variant is Variant.SUPERSET:
            return _makes_superset(lookup, hand, extra)
        return _makes_set(lookup, ids, hand, extra)

    def extend(hand: list[int], lowest: int, remaining: int) -> int:
        if remaining == 0:
            return 1
        total = 0
        for card in range(lowest, size - remaining + 1):
            if creates_match(hand, card):
                continue
            hand.append(card)
            total += extend(hand, card + 1, remaining - 1)
            hand.pop()
        return total

    return extend([start], start + 1, deal_size - 1)


def count_free_deals(
    deal_size: int,
    variant: Variant = Variant.SUPERSET,
    cards: Sequence[Card] | None = None,
    workers: int = 1,
) -> DealCount:
    """Count the ``deal_size``-card deals that contain no Set (or SuperSet)."""

    if deal_size < 1:
        raise ValueError("deal_size must be positive")
    deck = list(cards) if cards is not None else full_deck()
    ids = [card.index for card in deck]
    table = completion_table(deck)
    starts = list(range(len(deck) - deal_size + 1))

    started = time.perf_counter()
    if workers > 1:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(_count_from, start, deal_size, variant, table, ids)
                for start in starts
            ]
            free = sum(future.result() for future in futures)
    else:
        free = sum(_count_from(start, deal_size, variant, table, ids) for start in starts)
    elapsed = time.perf_counter() - started

    logger.info("Counted %d-card deals without a %s in %.3fs", deal_size, variant.value, elapsed)
    return DealCount(
        deal_size=deal_size,
        variant=variant,
        free=free,
        combinations=math.comb(len(deck), deal_size),
        seconds=elapsed,
    )


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    """Parameters for :func:`run_simulation`."""

    num_games: int = 1_000
    seed: int | None = None
    workers: int = 1


def _zeros() -> NDArray[np.uint64]:
    return np.zeros(MAX_HAND, dtype=np.uint64)


@dataclass(slots=True)
class SimulationReport:
    """Per hand-size tallies gathered from simulated games.

    ``sets[n]`` counts turns where an ``n``-card hand held a Set,
    ``no_sets[n]`` turns where it did not, and ``remainder[n]`` games that
    ended with ``n`` cards left on the table.
    """

    sets: NDArray[np.uint64] = field(default_factory=_zeros)
    no_sets: NDArray[np.uint64] = field(default_factory=_zeros)
    remainder: NDArray[np.uint64] = field(default_factory=_zeros)
    seconds: float = 0.0

    def add(self, other: "SimulationReport") -> None:
        self.sets += other.sets
        self.no_sets += other.no_sets
        self.remainder += other.remainder

    @property
    def num_games(self) -> int:
        return int(self.remainder.sum())

    def hand_rows(self) -> list[tuple[int, int, int]]:
        """Return ``(hand, sets, no_sets)`` for every hand size that was ever stuck."""

        return [
            (size, int(self.sets[size]), int(self.no_sets[size]))
            for size in range(1, MAX_HAND)
            if self.no_sets[size]
        ]

    def end_rows(self) -> list[tuple[int, int]]:
        """Return ``(cards_left, games)`` for every observed ending."""

        return [(size, int(count)) for size, count in enumerate(self.remainder) if count]


def _random_set(
    lookup: list[list[int]], hand: list[int], rng: np.random.Generator
) -> tuple[int, int, int] | None:
    found = [
        (a, b, c) for a, b, c in combinations(hand, 3) if lookup[a][b] == c
    ]
    if not found:
        return None
    return found[int(rng.integers(len(found)))]


def _simulate_chunk(num_games: int, seed: np.random.SeedSequence) -> SimulationReport:
    rng = np.random.default_rng(seed)
    lookup: list[list[int]] = completion_table().tolist()
    report = SimulationReport()

    for _ in range(num_games):
        stock: list[int] = rng.permutation(len(lookup)).tolist()
        hand, stock = stock[:INITIAL_DEAL], stock[INITIAL_DEAL:]
        while True:
            found = _random_set(lookup, hand, rng)
            if found is not None:
                report.sets[len(hand)] += 1
                hand = [card for card in hand if card not in found]
                if len(hand) < INITIAL_DEAL:
                    hand.extend(stock[:DEAL_SIZE])
                    del stock[:DEAL_SIZE]
                continue

            report.no_sets[len(hand)] += 1
            if not stock:
                report.remainder[len(hand)] += 1
                break
            hand.extend(stock[:DEAL_SIZE])
            del stock[:DEAL_SIZE]
    return report


def simulate_games(num_games: int, seed: int | None = None, workers: int = 1) -> SimulationReport:
    """Play random games of Set and tally how often each hand size gets stuck.

    Each turn removes a uniformly chosen Set when one exists and otherwise
    deals three more cards, without any deck doctoring. Games are split
    evenly across ``workers`` processes, each seeded from ``seed``.
    """

    if num_games < 0:
        raise ValueError("num_games must be non-negative")
    workers = max(1, workers)
    chunk, rest = divmod(num_games, workers)
    sizes = [chunk + (rest if index == 0 else 0) for index in range(workers)]
    seeds = np.random.SeedSequence(seed).spawn(workers)

    started = time.perf_counter()
    total = SimulationReport()
    if workers > 1:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            for report in executor.map(_simulate_chunk, sizes, seeds):
                total.add(report)
    else:
        total.add(_simulate_chunk(sizes[0], seeds[0]))
    total.seconds = time.perf_counter() - started

    logger.info("Simulated %d games in %.3fs", total.num_games, total.seconds)
    return total


def run_simulation(config: SimulationConfig | None = None) -> SimulationReport:
    config = config or SimulationConfig()
    return simulate_games(config.num_games, seed=config.seed, workers=config.workers)
