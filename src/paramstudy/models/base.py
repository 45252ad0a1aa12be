# Copyright (c) Syntropy Systems
"""Shared Pydantic model helpers for paramstudy."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError


class StudyBaseModel(BaseModel):
    """Base model with shared config for paramstudy schemas."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="ignore",
        populate_by_name=True,
    )


class StrictModel(BaseModel):
    """Base model that rejects unknown fields, for user-written sections."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        extra="forbid",
        populate_by_name=True,
    )


def format_validation_error(error: ValidationError) -> str:
    """Summarize a validation error as 'field.path: message' items."""
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        problems.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(problems)
