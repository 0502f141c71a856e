"""Typer entry-point wiring for the Marmoset CLI."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from .. import analysis
from ..deck import cards_for
from ..game import Game
from ..state import DeckKind, GameConfig, Variant
from .render import format_card, render_counts, render_layout, render_simulation

app = typer.Typer(add_completion=False, rich_markup_mode="rich")
console = Console()


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """Set and SuperSet analysis tools."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


@app.command("count")
def count_command(
    start: int = typer.Option(3, "--from", min=1, help="Smallest deal size to count."),
    stop: int = typer.Option(6, "--to", min=1, help="Largest deal size to count."),
    variant: Variant = typer.Option(Variant.SUPERSET, help="Which kind of match to look for."),
    deck: DeckKind = typer.Option(DeckKind.FULL, help="Deck to deal from."),
    workers: int = typer.Option(1, min=1, help="Worker processes to spread the search over."),
) -> None:
    """Count the deals of each size that contain no match."""

    if stop < start:
        raise typer.BadParameter("--to must not be smaller than --from")
    cards = cards_for(deck)
    counts = [
        analysis.count_free_deals(size, variant, cards=cards, workers=workers)
        for size in range(start, stop + 1)
    ]
    console.print(render_counts(counts))


@app.command("simulate")
def simulate_command(
    games: int = typer.Option(10_000, min=1, help="Number of games to play."),
    seed: Optional[int] = typer.Option(None, help="Seed for reproducible runs."),
    workers: int = typer.Option(1, min=1, help="Worker processes to spread the games over."),
) -> None:
    """Play random games of Set and report how often the board gets stuck."""

    config = analysis.SimulationConfig(num_games=games, seed=seed, workers=workers)
    report = analysis.run_simulation(config)
    for table in render_simulation(report):
        console.print(table)
    console.print(f"[bold]{report.num_games:_}[/bold] games in {report.seconds:.2f}s")


@app.command("deal")
def deal_command(
    variant: Variant = typer.Option(Variant.SET, help="Game variant to deal."),
    deck: DeckKind = typer.Option(DeckKind.FULL, help="Deck to deal from."),
    seed: Optional[int] = typer.Option(None, help="Seed for reproducible deals."),
) -> None:
    """Deal an opening layout and show the matches it holds."""

    game = Game(GameConfig(variant=variant, deck=deck, seed=seed))
    console.print(render_layout(game.cells, title=f"{game.rules.name} opening"))
    console.print(game.rules.match_label(game.count_matches()))
    found = game.rules.find(game.board())
    if found is not None:
        labels = ", ".join(format_card(game.card_at(position)) for position in found)
        console.print(f"First {game.rules.name} at {list(found)}: {labels}")
    console.print(f"{game.stock_count} cards left in the stock.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
