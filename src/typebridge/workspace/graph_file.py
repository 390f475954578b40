# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Load a resource graph exported by the host framework from a YAML file.

The file mirrors :class:`~typebridge.model.ResourceGraph`. Wherever a type
descriptor is expected (``type``, ``inner``, ``subtype``) a plain string may
be used as shorthand: ``"string"`` is a primitive and ``"string[]"`` an array
of that primitive.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from typebridge.model.resources import ResourceGraph

# ###############
# Public Interface
# ###############


class GraphFileError(Exception):
    """Raised when a graph file cannot be read or does not describe a valid graph."""


def load_graph(path: Path) -> ResourceGraph:
    """Load and validate a resource graph file.

    An empty file is treated as an empty graph.

    Args:
        path: Path to the YAML graph file.

    Returns:
        A validated ResourceGraph.

    Raises:
        GraphFileError: If the file cannot be read, contains invalid YAML,
            or does not conform to the graph schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise GraphFileError(f"Cannot read graph file '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise GraphFileError(f"Invalid YAML in graph file '{path}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise GraphFileError(f"Graph file '{path}' must contain a YAML mapping")

    try:
        return ResourceGraph.model_validate(expand_shorthand(data))
    except ValidationError as exc:
        raise GraphFileError(f"Invalid graph file '{path}': {exc}") from exc


def expand_shorthand(data: object) -> object:
    """Return *data* with every shorthand type string replaced by a descriptor mapping."""
    if isinstance(data, list):
        return [expand_shorthand(item) for item in data]
    if not isinstance(data, dict):
        return data
    expanded = {}
    for key, value in data.items():
        if key in _OPAQUE_KEYS:
            expanded[key] = value
        elif key in _TYPE_KEYS and isinstance(value, str):
            expanded[key] = _expand_type_string(value)
        else:
            expanded[key] = expand_shorthand(value)
    return expanded


# ################
# Implementation
# ################

_TYPE_KEYS = frozenset({"type", "inner", "subtype"})

# Free-form mappings whose keys may collide with the type keys.
_OPAQUE_KEYS = frozenset({"constraints", "field_names"})


def _expand_type_string(text: str) -> dict[str, object]:
    text = text.strip()
    if text.endswith("[]"):
        return {"kind": "array", "inner": _expand_type_string(text[:-2])}
    return {"kind": "primitive", "name": text}
