# Copyright (c) Syntropy Systems
"""Reading ensemble specifications from YAML files."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, cast

import yaml
from pydantic import ValidationError

from paramstudy.errors import DuplicateParameter, LoadError
from paramstudy.models.base import format_validation_error
from paramstudy.models.spec import EnsembleSpec

if TYPE_CHECKING:
    from yaml.nodes import MappingNode

logger = logging.getLogger(__name__)


class _SpecLoader(yaml.BaseLoader):
    """YAML loader that keeps every scalar as text and rejects repeated keys.

    Scalars stay strings so that settings keep their exact spelling; numeric
    fields are converted when the document is validated.
    """

    def construct_mapping(self, node: MappingNode, deep: bool = False) -> dict[str, object]:  # noqa: FBT001, FBT002
        seen: set[str] = set()
        for key_node, _ in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                continue
            key = cast("str", key_node.value)
            if key in seen:
                where = f"line {key_node.start_mark.line + 1}"
                raise DuplicateParameter(key, where)
            seen.add(key)
        return cast("dict[str, object]", super().construct_mapping(node, deep=deep))


def read_document(path: Path) -> dict[str, object]:
    """Read a YAML specification file into a raw settings tree."""
    try:
        with path.open() as f:
            data = yaml.load(f, Loader=_SpecLoader)  # noqa: S506
    except OSError as e:
        raise LoadError(path, e.strerror or str(e)) from e
    except yaml.YAMLError as e:
        raise LoadError(path, f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise LoadError(path, "the document must be a mapping")
    return cast("dict[str, object]", data)


def parse_spec(
    data: Mapping[str, object],
    settings_block: str | None = "settings",
    source: Path | str = "<specification>",
) -> EnsembleSpec:
    """Validate a raw settings tree and return the ensemble specification.

    settings_block names the top-level mapping whose entries become the
    ensemble's settings. None means the ensemble has no settings.
    """
    if "type" not in data:
        raise LoadError(source, "missing 'type' field")
    if "input" not in data:
        raise LoadError(source, "missing 'input' section")

    fields: dict[str, object] = {
        key: data[key] for key in ("type", "input", "count", "seed") if key in data
    }
    if settings_block is not None:
        if settings_block not in data:
            raise LoadError(source, f"missing settings block '{settings_block}'")
        fields["settings"] = data[settings_block]

    try:
        spec = EnsembleSpec.model_validate(fields)
    except ValidationError as e:
        raise LoadError(source, format_validation_error(e)) from e

    expected = spec.type.section
    declared = spec.input.declared_sections()
    for section in declared:
        if section != expected:
            msg = f"section 'input.{section}' cannot be used with type '{spec.type}'"
            raise LoadError(source, msg)
    if expected not in declared:
        raise LoadError(source, f"type '{spec.type}' requires an 'input.{expected}' section")
    if not spec.varying():
        raise LoadError(source, f"'input.{expected}' declares no parameters")

    if not spec.type.is_sampled and (spec.count is not None or spec.seed is not None):
        logger.warning(
            "%s: 'count' and 'seed' are ignored for %s ensembles", source, spec.type
        )
    return spec


def load_spec(path: Path | str, settings_block: str | None = "settings") -> EnsembleSpec:
    """Load and validate an ensemble specification file."""
    path = Path(path)
    spec = parse_spec(read_document(path), settings_block, source=path)
    logger.debug(
        "Loaded %s specification from %s (%d parameters)",
        spec.type,
        path,
        len(spec.parameter_names()),
    )
    return spec
