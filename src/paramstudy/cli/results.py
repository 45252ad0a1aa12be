# Copyright (c) Syntropy Systems
"""paramstudy results command."""
from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from paramstudy.cli.show import format_value
from paramstudy.errors import EnsembleError
from paramstudy.writer import read_result

console = Console()


def results(
    result_file: Path = typer.Argument(
        ...,
        help="Path to a result artifact (.py or .json)",
        exists=True,
    ),
    limit: int = typer.Option(
        20,
        "--limit", "-n",
        help="Number of members to show (0 for all)",
    ),
) -> None:
    """Show the contents of a result artifact."""
    try:
        table_data = read_result(result_file)
    except EnsembleError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    console.print(f"[bold]Type:[/bold] {table_data.ensemble_type}")
    for key, value in table_data.settings.items():
        console.print(f"  {escape(key)} = {escape(value)}")

    table = Table(title=result_file.name)
    table.add_column("#", style="dim")
    for name in table_data.input:
        table.add_column(name, justify="right")
    for name in table_data.output:
        table.add_column(name, justify="right", style="cyan")

    size = table_data.size
    shown = size if limit <= 0 else min(limit, size)
    for i in range(shown):
        values = [column[i] for column in table_data.input.values()]
        values.extend(column[i] for column in table_data.output.values())
        table.add_row(str(i), *(format_value(v) for v in values))

    console.print(table)
    console.print(f"\n[bold]{size} members[/bold]")
