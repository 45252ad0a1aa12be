# Copyright (c) Syntropy Systems
"""paramstudy show and validate commands."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from paramstudy.ensemble import load
from paramstudy.errors import EnsembleError

if TYPE_CHECKING:
    from paramstudy.ensemble import Ensemble

console = Console()


def format_value(value: float) -> str:
    """Format a float compactly for tables."""
    return f"{value:.6g}"


def _load_or_exit(spec_file: Path, settings: str | None, seed: int | None = None) -> Ensemble:
    try:
        return load(spec_file, settings, seed=seed)
    except EnsembleError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


def show(
    spec_file: Path = typer.Argument(
        ...,
        help="Path to ensemble specification YAML file",
        exists=True,
    ),
    settings: str | None = typer.Option(
        "settings",
        "--settings", "-s",
        help="Name of the settings block",
    ),
    no_settings: bool = typer.Option(
        False,
        "--no-settings",
        help="Load the ensemble without a settings block",
    ),
    seed: int | None = typer.Option(
        None,
        "--seed",
        help="Seed for sampled ensembles that do not set one",
    ),
    limit: int = typer.Option(
        20,
        "--limit", "-n",
        help="Number of members to show (0 for all)",
    ),
) -> None:
    r"""Generate an ensemble and preview its members.

    Example ensemble.yaml:

    \b
        type: lattice
        settings:
          author: me
        input:
          fixed:
            p1: 1.0
          lattice:
            tick: [0, 5, 10]
            tock: {min: 10, max: 100, count: 4}
    """
    ensemble = _load_or_exit(spec_file, None if no_settings else settings, seed)

    console.print(f"[bold]Type:[/bold] {ensemble.type()}")
    if len(ensemble.settings()):
        console.print("[bold]Settings:[/bold]")
        for key, value in ensemble.settings().items():
            console.print(f"  {escape(key)} = {escape(value)}")

    table = Table(title=f"Members of {spec_file.name}")
    table.add_column("#", style="dim")
    names = ensemble.input_names
    for name in names:
        table.add_column(name, justify="right")

    shown = ensemble.members if limit <= 0 else ensemble[:limit]
    for member in shown:
        table.add_row(
            str(member.index),
            *(format_value(member.input.get(name)) for name in names),
        )

    console.print(table)
    console.print(f"\n[bold]{ensemble.size()} members[/bold]")
    if len(shown) < ensemble.size():
        console.print(f"[dim]Showing first {len(shown)}; use --limit 0 for all[/dim]")


def validate(
    spec_file: Path = typer.Argument(
        ...,
        help="Path to ensemble specification YAML file",
        exists=True,
    ),
    settings: str | None = typer.Option(
        "settings",
        "--settings", "-s",
        help="Name of the settings block",
    ),
    no_settings: bool = typer.Option(
        False,
        "--no-settings",
        help="Load the ensemble without a settings block",
    ),
) -> None:
    """Check that a specification loads and generates members."""
    ensemble = _load_or_exit(spec_file, None if no_settings else settings)
    console.print(
        f"[green]OK:[/green] {ensemble.type()} ensemble with {ensemble.size()} members"
    )
