# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Alias declarations for primitives that map to a named TypeScript type."""

from __future__ import annotations

from collections.abc import Iterable

from typebridge.codegen.helpers import aggregate_result_type, walk_type
from typebridge.codegen.type_mapper import MapperSettings
from typebridge.model.resources import FieldOrigin, ResourceGraph, ResourceNode
from typebridge.model.types import NewTypeDescriptor, PrimitiveDescriptor

# ###############
# Public Interface
# ###############

# Alias name -> definition.
TYPE_ALIASES: dict[str, str] = {
    "UUID": "string",
    "UUIDv7": "string",
    "Decimal": "string",
    "IsoDate": "string",
    "Time": "string",
    "TimeUsec": "string",
    "UtcDateTime": "string",
    "UtcDateTimeUsec": "string",
    "DateTime": "string",
    "NaiveDateTime": "string",
    "Duration": "string",
    "DurationName": "string",
    "Binary": "string",
    "UrlEncodedBinary": "string",
    "File": "any",
    "Function": "any",
    "ModuleName": "string",
    "ULID": "string",
    "LtreeFlexible": "string | string[]",
    "LtreeArray": "string[]",
    "Money": "{ amount: string; currency: string }",
}

# Source primitive name -> the aliases its translation may refer to.
PRIMITIVE_ALIASES: dict[str, tuple[str, ...]] = {
    "uuid": ("UUID",),
    "uuid_v7": ("UUIDv7",),
    "decimal": ("Decimal",),
    "date": ("IsoDate",),
    "time": ("Time",),
    "time_usec": ("TimeUsec",),
    "utc_datetime": ("UtcDateTime",),
    "utc_datetime_usec": ("UtcDateTimeUsec",),
    "datetime": ("DateTime",),
    "naive_datetime": ("NaiveDateTime",),
    "duration": ("Duration",),
    "duration_name": ("DurationName",),
    "binary": ("Binary",),
    "url_encoded_binary": ("UrlEncodedBinary",),
    "file": ("File",),
    "function": ("Function",),
    "module": ("ModuleName",),
    "ulid": ("ULID",),
    "ltree": ("LtreeFlexible", "LtreeArray"),
    "money": ("Money",),
}


def collect_primitive_names(graph: ResourceGraph, resources: Iterable[ResourceNode]) -> set[str]:
    """Return the primitive and new-type names used by public fields of *resources*.

    Attribute types, calculation return and argument types, and aggregate
    result types are inspected, including everything nested inside them.
    """
    names: set[str] = set()
    for resource in resources:
        for field in graph.public_fields(resource.name):
            if field.origin is FieldOrigin.RELATIONSHIP:
                continue
            if field.origin is FieldOrigin.AGGREGATE:
                descriptor, constraints = aggregate_result_type(graph, resource.name, field)
                roots = [(descriptor, constraints)]
            else:
                roots = [(field.type, field.constraints)]
                roots.extend((arg.type, arg.constraints) for arg in field.arguments)
            for root, root_constraints in roots:
                for node, _ in walk_type(graph, root, root_constraints):
                    if isinstance(node, (PrimitiveDescriptor, NewTypeDescriptor)):
                        names.add(node.name)
    return names


def generate_type_aliases(
    graph: ResourceGraph, resources: Iterable[ResourceNode], settings: MapperSettings | None = None
) -> str:
    """Return ``export type X = ...;`` lines for every alias the resources need.

    Primitives replaced by a type-mapping override need no alias. Lines are
    emitted in a fixed order, so the prelude is stable across runs.
    """
    settings = settings or MapperSettings()
    used = collect_primitive_names(graph, resources)
    wanted: set[str] = set()
    for name in used:
        if name in settings.type_mapping_overrides:
            continue
        wanted.update(PRIMITIVE_ALIASES.get(name, ()))
    lines = [f"export type {alias} = {definition};" for alias, definition in TYPE_ALIASES.items() if alias in wanted]
    return "\n".join(lines)
