# Copyright (c) Syntropy Systems
"""Named value stores used for settings, member inputs and member outputs."""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from numbers import Real
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from paramstudy.errors import KeyNotFound

if TYPE_CHECKING:
    from collections.abc import ItemsView, KeysView

V = TypeVar("V", float, str)


class NamedValues(Generic[V]):
    """Read-only mapping from names to values.

    Lookups of absent names raise KeyNotFound rather than returning a default;
    use has() to check optional names.
    """

    kind: ClassVar[str] = "store"

    _values: dict[str, V]

    def __init__(self, values: Mapping[str, V] | None = None) -> None:
        self._values = dict(values or {})

    def has(self, key: str) -> bool:
        """Return True if a value named key is present."""
        return key in self._values

    def get(self, key: str) -> V:
        """Return the value named key, raising KeyNotFound if absent."""
        try:
            return self._values[key]
        except KeyError:
            raise KeyNotFound(key, self.kind) from None

    def keys(self) -> KeysView[str]:
        """Return the names in insertion order."""
        return self._values.keys()

    def items(self) -> ItemsView[str, V]:
        """Return (name, value) pairs in insertion order."""
        return self._values.items()

    def as_dict(self) -> dict[str, V]:
        """Return an insertion-ordered copy of the stored values."""
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NamedValues):
            return NotImplemented
        return self.kind == other.kind and self._values == other._values

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"


class Settings(NamedValues[str]):
    """Study-level string metadata."""

    kind = "settings"


class Input(NamedValues[float]):
    """Parameter values of one ensemble member."""

    kind = "input"


class Output(NamedValues[float]):
    """Computed values of one ensemble member, written by the caller."""

    kind = "output"

    def set(self, key: str, value: float) -> None:
        """Store value under key, replacing any previous value."""
        if not isinstance(key, str):
            msg = f"Output names must be strings, got {type(key).__name__}"
            raise TypeError(msg)
        if not key:
            msg = "Output names must not be empty"
            raise ValueError(msg)
        if isinstance(value, bool) or not isinstance(value, Real):
            msg = f"Output '{key}' must be a real number, got {type(value).__name__}"
            raise TypeError(msg)
        self._values[key] = float(value)

    def update(self, values: Mapping[str, float]) -> None:
        """Set several values at once."""
        for key, value in values.items():
            self.set(key, value)
