# Copyright (c) Syntropy Systems
"""Pytest fixtures for paramstudy tests."""

import tempfile
import textwrap
from collections.abc import Callable, Generator
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_config(
    temp_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Run each test from an empty directory with no user configuration."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("PARAMSTUDY_SEED", raising=False)
    monkeypatch.delenv("PARAMSTUDY_WORKERS", raising=False)
    monkeypatch.chdir(temp_dir)
    yield temp_dir


@pytest.fixture
def write_spec(temp_dir: Path) -> Callable[..., Path]:
    """Return a helper that writes YAML text to a specification file."""

    def _write(text: str, name: str = "ensemble.yaml") -> Path:
        path = temp_dir / name
        _ = path.write_text(textwrap.dedent(text))
        return path

    return _write


ENUMERATION_SPEC = """
type: enumeration
settings:
  param1: hello
  param2: 81
  param3: 3.14159265357
input:
  fixed:
    p1: 1
    p2: 2
    p3: 3
  enumerated:
    tick: [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10]
    tock: [1e1, 1e2, 1e3, 1e4, 1e5, 1e6, 1e7, 1e8, 1e9, 1e10, 1e11]
"""

LATTICE_SPEC = """
type: lattice
settings:
  study: tick-tock
input:
  fixed:
    p1: 1.0
  lattice:
    tick: [0, 5, 10]
    tock: [10, 1e6, 1e11]
"""


@pytest.fixture
def enumeration_spec(write_spec: Callable[..., Path]) -> Path:
    """An 11-member enumeration with three settings and three fixed parameters."""
    return write_spec(ENUMERATION_SPEC, "enumeration.yaml")


@pytest.fixture
def lattice_spec(write_spec: Callable[..., Path]) -> Path:
    """A 3 x 3 lattice over tick and tock with one fixed parameter."""
    return write_spec(LATTICE_SPEC, "lattice.yaml")
