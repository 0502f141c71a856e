"""Rendering helpers dedicated to the CLI experience."""

from __future__ import annotations

from typing import Sequence

from rich import box
from rich.table import Table

from ..analysis import DealCount, SimulationReport
from ..cards import Card, Color, Shading, Shape
from ..state import Cell

_COLOR_STYLES = {
    Color.A: "red",
    Color.B: "green",
    Color.C: "magenta",
}

_SHAPE_SYMBOLS = {
    Shape.OVAL: "O",
    Shape.SQUIGGLE: "S",
    Shape.DIAMOND: "D",
}

_SHADING_STYLES = {
    Shading.SOLID: "bold",
    Shading.STRIPED: "italic",
    Shading.OUTLINED: "dim",
}


def format_card(card: Card) -> str:
    """Return a Rich-rendered label for ``card``, e.g. ``[red bold]OO[/red bold]``."""

    style = f"{_COLOR_STYLES[card.color]} {_SHADING_STYLES[card.shading]}"
    symbols = _SHAPE_SYMBOLS[card.shape] * (card.count + 1)
    return f"[{style}]{symbols}[/{style}] {card.shading.name.lower()}"


def render_layout(cells: Sequence[Cell], *, columns: int = 3, title: str = "Layout") -> Table:
    """Lay the cells out in rows of ``columns``, labelling each with its position."""

    table = Table(title=title, box=box.SIMPLE_HEAVY, show_header=False)
    for _ in range(columns):
        table.add_column()
    for row_start in range(0, len(cells), columns):
        row = []
        for position in range(row_start, min(row_start + columns, len(cells))):
            card = cells[position]
            label = "[dim]empty[/dim]" if card is None else format_card(card)
            row.append(f"[cyan]{position:>2}[/cyan] {label}")
        table.add_row(*row)
    return table


def render_counts(counts: Sequence[DealCount]) -> Table:
    table = Table(title="Deals without a match", box=box.SIMPLE_HEAVY)
    table.add_column("Cards", justify="right")
    table.add_column("Free", justify="right")
    table.add_column("Combinations", justify="right")
    table.add_column("Free %", justify="right")
    table.add_column("Seconds", justify="right")
    for count in counts:
        table.add_row(
            str(count.deal_size),
            f"{count.free:_}",
            f"{count.combinations:_}",
            f"{count.percent_free:.6f}",
            f"{count.seconds:.3f}",
        )
    return table


def render_simulation(report: SimulationReport) -> list[Table]:
    """Return the per hand-size table followed by the end-of-game table."""

    hands = Table(title="Hands without a Set", box=box.SIMPLE_HEAVY)
    hands.add_column("Hand", justify="right")
    hands.add_column("With Set", justify="right")
    hands.add_column("Without Set", justify="right")
    hands.add_column("Stuck %", justify="right")
    for size, sets, no_sets in report.hand_rows():
        total = sets + no_sets
        hands.add_row(str(size), f"{sets:_}", f"{no_sets:_}", f"{no_sets / total * 100:.4f}")

    endings = Table(title="Cards left at the end", box=box.SIMPLE_HEAVY)
    endings.add_column("Cards", justify="right")
    endings.add_column("Games", justify="right")
    endings.add_column("Share %", justify="right")
    games = report.num_games or 1
    for size, count in report.end_rows():
        endings.add_row(str(size), f"{count:_}", f"{count / games * 100:.4f}")
    return [hands, endings]
