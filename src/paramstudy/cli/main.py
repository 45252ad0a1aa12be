# Copyright (c) Syntropy Systems
"""Main CLI entry point for paramstudy."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from paramstudy import __version__
from paramstudy.cli.results import results
from paramstudy.cli.show import show, validate

app = typer.Typer(
    name="paramstudy",
    help="Ensemble parameter studies. Generate members, process them, write results.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Log loading and generation details",
    ),
) -> None:
    """Configure logging for all commands."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def version() -> None:
    """Show the paramstudy version."""
    Console().print(f"paramstudy {__version__}")


# Register commands
_ = app.command()(show)
_ = app.command()(validate)
_ = app.command()(results)
_ = app.command()(version)


if __name__ == "__main__":
    app()
