# Copyright (c) Syntropy Systems
"""Exception types raised by paramstudy."""
from __future__ import annotations

from pathlib import Path


class EnsembleError(Exception):
    """Base class for all paramstudy errors."""


class KeyNotFound(EnsembleError, LookupError):
    """A named value was looked up in a store that does not contain it."""

    def __init__(self, key: str, store: str = "store") -> None:
        self.key = key
        self.store = store
        super().__init__(f"{store} has no value named '{key}'")


class SpecificationError(EnsembleError):
    """An ensemble specification is well-formed YAML but describes an invalid study."""


class DuplicateParameter(SpecificationError):
    """A name was declared more than once."""

    def __init__(self, name: str, where: str | None = None) -> None:
        self.name = name
        msg = f"Parameter '{name}' is declared more than once"
        if where:
            msg = f"{msg} ({where})"
        super().__init__(msg)


class InvalidRange(SpecificationError):
    """A range has min > max or a bound that is not finite."""

    def __init__(
        self,
        name: str,
        min_value: float,
        max_value: float,
        reason: str = "min must not exceed max",
    ) -> None:
        self.name = name
        self.min = min_value
        self.max = max_value
        super().__init__(
            f"Parameter '{name}' has an invalid range "
            f"[{min_value!r}, {max_value!r}]: {reason}"
        )


class InvalidSeed(SpecificationError):
    """A sampling seed is negative."""

    def __init__(self, seed: int, source: str = "seed") -> None:
        self.seed = seed
        self.source = source
        super().__init__(f"{source}: expected a non-negative integer seed, got {seed!r}")


class InvalidCount(SpecificationError):
    """A count is not a positive integer, or co-indexed lists disagree in length."""

    def __init__(self, name: str, count: object, expected: str = "a positive integer") -> None:
        self.name = name
        self.count = count
        super().__init__(f"{name}: expected {expected}, got {count!r}")


class LoadError(EnsembleError):
    """The specification file could not be read or has the wrong structure."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not load ensemble from {path}: {reason}")


class WriteError(EnsembleError):
    """The result artifact could not be produced."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not write results to {path}: {reason}")
