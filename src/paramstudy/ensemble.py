# Copyright (c) Syntropy Systems
"""Ensembles: generated members, processing and result writing."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, overload

from typing_extensions import Self

from paramstudy.config import load_config
from paramstudy.errors import InvalidCount, WriteError
from paramstudy.generator import generate
from paramstudy.models.spec import EnsembleSpec, EnsembleType
from paramstudy.spec import load_spec
from paramstudy.values import Input, Output, Settings
from paramstudy.writer import write_result

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

logger = logging.getLogger(__name__)

ProcessFn = Callable[[Input], Optional[Mapping[str, float]]]


@dataclass(frozen=True)
class Member:
    """One ensemble member: its input and the output filled in by processing."""

    index: int
    input: Input
    output: Output


class Ensemble:
    """An ordered, fixed-size set of ensemble members.

    Members are created once from the generated inputs. Only their outputs
    change afterwards, through process() or direct Output.set() calls.
    """

    _type: EnsembleType
    _settings: Settings
    _members: tuple[Member, ...]
    _workers: int
    _processing: bool

    def __init__(
        self,
        ensemble_type: EnsembleType | str,
        inputs: Sequence[Mapping[str, float]],
        settings: Mapping[str, str] | None = None,
        workers: int = 1,
    ) -> None:
        if not inputs:
            raise InvalidCount("ensemble", 0, "at least one member")
        self._type = EnsembleType(ensemble_type)
        self._settings = Settings(settings)
        self._members = tuple(
            Member(index=i, input=Input(values), output=Output())
            for i, values in enumerate(inputs)
        )
        self._workers = workers
        self._processing = False

    @classmethod
    def from_spec(
        cls,
        spec: EnsembleSpec,
        default_seed: int = 0,
        workers: int = 1,
    ) -> Self:
        """Generate the members described by spec."""
        return cls(
            spec.type,
            generate(spec, default_seed),
            settings=spec.settings,
            workers=workers,
        )

    def type(self) -> EnsembleType:
        """Return the strategy that generated the members."""
        return self._type

    def settings(self) -> Settings:
        """Return the study-level settings."""
        return self._settings

    def size(self) -> int:
        """Return the number of members."""
        return len(self._members)

    @property
    def members(self) -> tuple[Member, ...]:
        return self._members

    @property
    def input_names(self) -> list[str]:
        """Input parameter names, shared by every member."""
        return list(self._members[0].input.keys())

    @property
    def output_names(self) -> list[str]:
        """Output names in the order they were first set across members."""
        names: dict[str, None] = {}
        for member in self._members:
            names.update(dict.fromkeys(member.output.keys()))
        return list(names)

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Member]:
        return iter(self._members)

    @overload
    def __getitem__(self, index: int) -> Member: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Member, ...]: ...

    def __getitem__(self, index: int | slice) -> Member | tuple[Member, ...]:
        return self._members[index]

    def __repr__(self) -> str:
        return f"Ensemble(type={self._type.value!r}, size={len(self._members)})"

    @staticmethod
    def _apply(fn: ProcessFn, member: Member) -> None:
        result = fn(member.input)
        if result is None:
            return
        if not isinstance(result, Mapping):
            msg = (
                f"Processing member {member.index} returned {type(result).__name__}; "
                "expected a mapping of output values or None"
            )
            raise TypeError(msg)
        member.output.update(result)

    def process(self, fn: ProcessFn, *, workers: int | None = None) -> None:
        """Apply fn to the input of every member and store what it returns.

        fn receives a member's Input and returns a mapping of output names
        to values (or None if it records nothing). With more than one worker,
        members are processed on a thread pool; the call returns only after
        every member is done. The first exception raised by fn propagates and
        cancels members that have not started; outputs already stored stay.
        """
        workers = self._workers if workers is None else workers
        if workers < 1:
            msg = f"workers must be at least 1, got {workers}"
            raise ValueError(msg)

        logger.debug("Processing %d members with %d worker(s)", len(self), workers)
        self._processing = True
        try:
            if workers == 1:
                for member in self._members:
                    self._apply(fn, member)
                return

            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(self._apply, fn, member) for member in self._members
                ]
                try:
                    for future in futures:
                        future.result()
                except BaseException:
                    for future in futures:
                        _ = future.cancel()
                    raise
        finally:
            self._processing = False

    def write(self, path: Path | str) -> Path:
        """Write settings, type and every member's input and output to path.

        The format follows the file suffix: `.py` for an importable Python
        module, `.json` for JSON.
        """
        path = Path(path)
        if self._processing:
            raise WriteError(path, "members are still being processed")
        return write_result(self, path)


def load(
    spec_path: Path | str,
    section_name: str | None = "settings",
    *,
    seed: int | None = None,
    workers: int | None = None,
) -> Ensemble:
    """Load an ensemble specification file and generate its members.

    section_name names the top-level block holding the study settings; pass
    None for a study without settings. seed overrides the configured default
    seed for sampled ensembles that do not set one themselves.
    """
    config = load_config()
    spec = load_spec(spec_path, section_name)
    ensemble = Ensemble.from_spec(
        spec,
        default_seed=config.default_seed if seed is None else seed,
        workers=config.workers if workers is None else workers,
    )
    logger.info("Loaded %r from %s", ensemble, spec_path)
    return ensemble
