# Copyright (c) Syntropy Systems
"""Gas temperature study using the Van der Waals equation of state.

Usage:
    python t_gas.py gas_study.yaml

Each member provides a volume V and pressure p, and optionally the Van der
Waals constants a and b (both zero for an ideal gas). The temperature T is
recorded as the member's output, and the results are written next to the
specification (gas_study.yaml -> gas_study.py).
"""
from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

import paramstudy
from paramstudy import EnsembleError, Input

console = Console(stderr=True)

# Universal gas constant [J/(mol K)]
R = 8.31446261815324


def temperature(inp: Input) -> dict[str, float]:
    """Compute the gas temperature of one member."""
    V = inp.get("V")  # noqa: N806
    p = inp.get("p")
    a = inp.get("a") if inp.has("a") else 0.0
    b = inp.get("b") if inp.has("b") else 0.0
    return {"T": ((p - a / (V * V)) * (V - b)) / R}


def run_study(spec_file: Path, result_file: Path | None = None) -> Path:
    """Load the study, compute every member's temperature and write the results."""
    ensemble = paramstudy.load(spec_file, None)
    ensemble.process(temperature)
    return ensemble.write(result_file or paramstudy.result_path_for(spec_file))


def main(
    spec_file: Path = typer.Argument(..., help="Ensemble specification", exists=True),
) -> None:
    """Compute gas temperatures for every member of an ensemble."""
    console.print(f"t_gas: Loading ensemble from {spec_file}")
    try:
        result_file = run_study(spec_file)
    except EnsembleError as e:
        console.print(f"[red]t_gas:[/red] {e}")
        raise typer.Exit(1) from e
    console.print(f"t_gas: Wrote results to {result_file}")


if __name__ == "__main__":
    typer.run(main)
