# Copyright (c) Syntropy Systems
"""Ensemble member generation.

Each strategy is a plain function from the varying part of a specification to
an ordered list of assignments; generate() validates the specification,
dispatches on the ensemble type and prepends the fixed parameters.
"""
from __future__ import annotations

import itertools
import logging
import math
from typing import TYPE_CHECKING, Callable, cast

import numpy as np
from scipy.stats import qmc

from paramstudy.errors import DuplicateParameter, InvalidCount, InvalidRange, InvalidSeed
from paramstudy.models.spec import EnsembleSpec, EnsembleType, ValueRange

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from paramstudy.models.spec import SampledRange, ValueSpec

logger = logging.getLogger(__name__)

Assignment = dict[str, float]


def require_count(name: str, count: float | None) -> int:
    """Return count as an int, or raise InvalidCount if it is not a positive integer."""
    if count is None:
        raise InvalidCount(name, count)
    value = float(count)
    if not value.is_integer() or value < 1:
        raise InvalidCount(name, count)
    return int(value)


def require_range(name: str, min_value: float, max_value: float) -> None:
    """Raise InvalidRange unless both bounds are finite and min_value <= max_value."""
    if not (math.isfinite(min_value) and math.isfinite(max_value)):
        raise InvalidRange(name, min_value, max_value, "bounds must be finite")
    if not min_value <= max_value:
        raise InvalidRange(name, min_value, max_value)


def require_seed(seed: int, source: str = "seed") -> int:
    """Return seed, or raise InvalidSeed if it is negative."""
    if seed < 0:
        raise InvalidSeed(seed, source)
    return seed


def expand_values(name: str, spec: ValueSpec) -> list[float]:
    """Return the explicit values of a list or {min, max, count} entry."""
    if isinstance(spec, ValueRange):
        count = require_count(f"{name}.count", spec.count)
        require_range(name, spec.min, spec.max)
        if count == 1:
            return [spec.min]
        return [float(v) for v in np.linspace(spec.min, spec.max, count)]

    if not spec:
        raise InvalidCount(name, 0, "at least one value")
    return [float(v) for v in spec]


def enumerate_zipped(values: Mapping[str, Sequence[float]]) -> list[Assignment]:
    """Walk co-indexed value lists in parallel.

    All lists must have the same length; that length is the member count.
    """
    lengths = {name: len(vals) for name, vals in values.items()}
    if len(set(lengths.values())) > 1:
        detail = ", ".join(f"{name}={n}" for name, n in lengths.items())
        raise InvalidCount("enumerated", detail, "value lists of equal length")

    names = list(values)
    return [dict(zip(names, combo)) for combo in zip(*values.values())]


def enumerate_product(values: Mapping[str, Sequence[float]]) -> list[Assignment]:
    """Take the Cartesian product of value lists.

    The first declared parameter varies slowest.
    """
    names = list(values)
    return [dict(zip(names, combo)) for combo in itertools.product(*values.values())]


def _scale(
    unit: np.ndarray,
    ranges: Mapping[str, SampledRange],
) -> list[Assignment]:
    names = list(ranges)
    lows = np.array([r.min for r in ranges.values()], dtype=float)
    highs = np.array([r.max for r in ranges.values()], dtype=float)
    points = lows + unit * (highs - lows)
    return [
        {name: float(x) for name, x in zip(names, row)}
        for row in points
    ]


def sample_random(
    ranges: Mapping[str, SampledRange],
    count: int,
    seed: int,
) -> list[Assignment]:
    """Draw independent uniform samples."""
    rng = np.random.default_rng(seed)
    return _scale(rng.random((count, len(ranges))), ranges)


def sample_latin_hypercube(
    ranges: Mapping[str, SampledRange],
    count: int,
    seed: int,
) -> list[Assignment]:
    """Draw a Latin hypercube design: one sample per stratum in every dimension."""
    engine = qmc.LatinHypercube(d=len(ranges), rng=np.random.default_rng(seed))
    return _scale(engine.random(count), ranges)


def sample_halton(
    ranges: Mapping[str, SampledRange],
    count: int,
    seed: int,
) -> list[Assignment]:
    """Draw points from a scrambled Halton sequence."""
    engine = qmc.Halton(d=len(ranges), scramble=True, rng=np.random.default_rng(seed))
    return _scale(engine.random(count), ranges)


Sampler = Callable[["Mapping[str, SampledRange]", int, int], "list[Assignment]"]

SAMPLERS: dict[EnsembleType, Sampler] = {
    EnsembleType.RANDOM: sample_random,
    EnsembleType.LATIN_HYPERCUBE: sample_latin_hypercube,
    EnsembleType.HALTON: sample_halton,
}


def _check_unique_names(spec: EnsembleSpec) -> None:
    fixed = spec.input.fixed
    for name in spec.varying():
        if name in fixed:
            where = f"in both 'input.fixed' and 'input.{spec.type.section}'"
            raise DuplicateParameter(name, where)


def generate_varying(spec: EnsembleSpec, default_seed: int = 0) -> list[Assignment]:
    """Generate the varying part of every member, in member order."""
    if not spec.type.is_sampled:
        entries = cast("dict[str, ValueSpec]", spec.varying())
        values = {name: expand_values(name, entry) for name, entry in entries.items()}
        if spec.type is EnsembleType.ENUMERATION:
            return enumerate_zipped(values)
        return enumerate_product(values)

    ranges = cast("dict[str, SampledRange]", spec.varying())
    for name, entry in ranges.items():
        require_range(name, entry.min, entry.max)
    count = require_count("count", spec.count)
    seed = spec.seed
    if seed is None:
        seed = require_seed(default_seed, "default seed")
    logger.debug("Sampling %d %s members with seed %d", count, spec.type, seed)
    return SAMPLERS[spec.type](ranges, count, seed)


def generate(spec: EnsembleSpec, default_seed: int = 0) -> list[Assignment]:
    """Validate a specification and return the full input of every member.

    Fixed parameters come first in each assignment, followed by the varying
    parameters in declaration order.
    """
    _check_unique_names(spec)
    members = generate_varying(spec, default_seed)
    fixed = dict(spec.input.fixed)
    logger.info("Generated %d members for %s ensemble", len(members), spec.type)
    return [{**fixed, **assignment} for assignment in members]
