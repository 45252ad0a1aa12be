# Copyright (c) Syntropy Systems
"""Writing and reading ensemble result artifacts.

A result artifact holds one column per input or output name and one row per
member, plus the ensemble type and settings. Two formats are supported,
chosen by file suffix:

- `.py`: a Python module defining `ensemble_type`, `settings`, `input` and
  `output`; it imports nothing but `math`.
- `.json`: a JSON object with the same four keys.
"""
from __future__ import annotations

import importlib.util
import json
import logging
import math
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from paramstudy.config import load_config
from paramstudy.errors import LoadError, WriteError
from paramstudy.models.base import format_validation_error
from paramstudy.models.result import ResultTable

if TYPE_CHECKING:
    from paramstudy.ensemble import Ensemble

logger = logging.getLogger(__name__)

RESULT_SUFFIXES = (".py", ".json")

_MODULE_HEADER = '''\
"""Ensemble results written by paramstudy.

input and output map each name to a list with one value per member.
"""
from math import inf, nan  # noqa: F401

'''


def result_path_for(spec_path: Path | str, suffix: str | None = None) -> Path:
    """Return the result file name matching a specification file.

    Everything from the first '.' of the file name on is replaced by suffix,
    so study.v2.yaml becomes study.py in the same directory and .study.yaml
    becomes .py. Without a suffix, the configured result_suffix is used.
    """
    if suffix is None:
        suffix = load_config().result_suffix
    spec_path = Path(spec_path)
    stem = spec_path.name.split(".", 1)[0]
    return spec_path.with_name(stem + suffix)


def tabulate(ensemble: Ensemble) -> ResultTable:
    """Collect an ensemble's members into a rectangular table.

    Outputs a member did not set are recorded as nan.
    """
    members = ensemble.members
    inputs = {
        name: [member.input.get(name) for member in members]
        for name in ensemble.input_names
    }
    outputs = {
        name: [
            member.output.get(name) if member.output.has(name) else math.nan
            for member in members
        ]
        for name in ensemble.output_names
    }
    return ResultTable(
        ensemble_type=ensemble.type().value,
        settings=ensemble.settings().as_dict(),
        input=inputs,
        output=outputs,
    )


def _render_columns(name: str, columns: dict[str, list[float]]) -> str:
    if not columns:
        return f"{name} = {{}}\n"
    lines = [f"{name} = {{"]
    for key, values in columns.items():
        rendered = ", ".join(repr(float(v)) for v in values)
        lines.append(f"    {key!r}: [{rendered}],")
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_module(table: ResultTable) -> str:
    """Render a result table as Python source."""
    parts = [_MODULE_HEADER, f"ensemble_type = {table.ensemble_type!r}\n\n"]
    if table.settings:
        settings_lines = ["settings = {"]
        settings_lines.extend(f"    {k!r}: {v!r}," for k, v in table.settings.items())
        settings_lines.append("}")
        parts.append("\n".join(settings_lines) + "\n\n")
    else:
        parts.append("settings = {}\n\n")
    parts.append(_render_columns("input", table.input))
    parts.append("\n")
    parts.append(_render_columns("output", table.output))
    return "".join(parts)


def write_result(ensemble: Ensemble, path: Path | str) -> Path:
    """Write an ensemble's result artifact to path and return the path."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in RESULT_SUFFIXES:
        reason = f"unsupported result format '{path.suffix}' (use .py or .json)"
        raise WriteError(path, reason)

    table = tabulate(ensemble)
    text = render_module(table) if suffix == ".py" else table.model_dump_json(indent=2)

    try:
        _ = path.write_text(text)
    except OSError as e:
        raise WriteError(path, e.strerror or str(e)) from e

    logger.info("Wrote %d members to %s", table.size, path)
    return path


def _read_module(path: Path) -> dict[str, object]:
    module_name = f"_paramstudy_result_{uuid.uuid4().hex}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise LoadError(path, "not a Python module")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise LoadError(path, f"{type(e).__name__}: {e}") from e

    data: dict[str, object] = {}
    for name in ("ensemble_type", "settings", "input", "output"):
        if not hasattr(module, name):
            raise LoadError(path, f"module does not define '{name}'")
        data[name] = getattr(module, name)
    return data


def read_result(path: Path | str) -> ResultTable:
    """Read a result artifact written by write_result()."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".py":
        data = _read_module(path)
    elif suffix == ".json":
        try:
            data = json.loads(path.read_text())
        except OSError as e:
            raise LoadError(path, e.strerror or str(e)) from e
        except json.JSONDecodeError as e:
            raise LoadError(path, f"invalid JSON: {e}") from e
    else:
        raise LoadError(path, f"unsupported result format '{path.suffix}'")

    try:
        return ResultTable.model_validate(data)
    except ValidationError as e:
        raise LoadError(path, format_validation_error(e)) from e
