# Copyright (c) Syntropy Systems
"""Pydantic model for ensemble result artifacts."""

from __future__ import annotations

from typing import ClassVar

from pydantic import ConfigDict, Field

from .base import StudyBaseModel


class ResultTable(StudyBaseModel):
    """Settings, type tag and per-member values of a processed ensemble.

    input and output map each name to one value per member, in member order.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        ser_json_inf_nan="constants",
    )

    ensemble_type: str
    settings: dict[str, str] = Field(default_factory=dict)
    input: dict[str, list[float]] = Field(default_factory=dict)
    output: dict[str, list[float]] = Field(default_factory=dict)

    @property
    def size(self) -> int:
        """Number of members (rows)."""
        for column in self.input.values():
            return len(column)
        return 0

    def row(self, index: int) -> dict[str, float]:
        """Return the inputs and outputs of one member."""
        values = {name: column[index] for name, column in self.input.items()}
        values.update({name: column[index] for name, column in self.output.items()})
        return values
