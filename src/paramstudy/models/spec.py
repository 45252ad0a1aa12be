# Copyright (c) Syntropy Systems
"""Pydantic models for ensemble specification files."""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import Field
from typing_extensions import TypeAlias

from .base import StrictModel, StudyBaseModel


class EnsembleType(str, Enum):
    """Strategy used to generate the members of an ensemble."""

    ENUMERATION = "enumeration"  # co-indexed value lists
    LATTICE = "lattice"  # Cartesian product of value lists
    RANDOM = "random"
    LATIN_HYPERCUBE = "latin_hypercube"
    HALTON = "halton"

    @property
    def is_sampled(self) -> bool:
        """Whether members are drawn from ranges with a global sample count."""
        return self in _SAMPLED_TYPES

    @property
    def section(self) -> str:
        """Name of the input section holding the varying parameters."""
        return VARYING_SECTIONS[self]

    def __str__(self) -> str:
        return self.value


_SAMPLED_TYPES = frozenset(
    {EnsembleType.RANDOM, EnsembleType.LATIN_HYPERCUBE, EnsembleType.HALTON}
)

VARYING_SECTIONS: dict[EnsembleType, str] = {
    EnsembleType.ENUMERATION: "enumerated",
    EnsembleType.LATTICE: "lattice",
    EnsembleType.RANDOM: "sampled",
    EnsembleType.LATIN_HYPERCUBE: "sampled",
    EnsembleType.HALTON: "sampled",
}


class ValueRange(StrictModel):
    """Evenly spaced values from min to max, both bounds included."""

    min: float
    max: float
    count: float


class SampledRange(StrictModel):
    """Interval that sampled values are drawn from."""

    min: float
    max: float


ValueSpec: TypeAlias = Union[list[float], ValueRange]


class InputSpec(StrictModel):
    """The `input` section: fixed parameters plus one varying section."""

    fixed: dict[str, float] = Field(default_factory=dict)
    enumerated: dict[str, ValueSpec] | None = None
    lattice: dict[str, ValueSpec] | None = None
    sampled: dict[str, SampledRange] | None = None

    def declared_sections(self) -> list[str]:
        """Names of the varying sections present in the file."""
        return [
            name
            for name in ("enumerated", "lattice", "sampled")
            if getattr(self, name) is not None
        ]


class EnsembleSpec(StudyBaseModel):
    """A parsed ensemble specification."""

    type: EnsembleType
    settings: dict[str, str] = Field(default_factory=dict)
    input: InputSpec
    count: float | None = None
    seed: int | None = Field(default=None, ge=0)

    def varying(self) -> dict[str, ValueSpec] | dict[str, SampledRange]:
        """Return the varying parameters declared for this ensemble's type."""
        section = getattr(self.input, self.type.section)
        return section or {}

    def parameter_names(self) -> list[str]:
        """Fixed then varying parameter names, in declaration order."""
        return [*self.input.fixed, *self.varying()]
