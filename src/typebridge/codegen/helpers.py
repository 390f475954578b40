# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Naming and classification helpers shared by the code generators."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from enum import Enum

from typebridge.model.resources import (
    AggregateKind,
    FieldDescriptor,
    FieldOrigin,
    GraphError,
    ResourceGraph,
    ResourceNode,
    TypedStructDef,
)
from typebridge.model.types import (
    ArrayDescriptor,
    Constraints,
    NewTypeDescriptor,
    PrimitiveDescriptor,
    RecordDescriptor,
    ResourceRefDescriptor,
    StructDescriptor,
    TypeDescriptor,
    UnionDescriptor,
)

# ###############
# Public Interface
# ###############


class Direction(Enum):
    """Whether a type describes data sent by the client or returned to it."""

    INPUT = "input"
    OUTPUT = "output"


class SchemaVariant(Enum):
    """The generated declarations a resource can have."""

    RESOURCE = "resource"
    ATTRIBUTES_ONLY = "attributes_only"
    INPUT = "input"


def canonical_name(node: ResourceNode | TypedStructDef, strip_prefixes: Sequence[str] = ()) -> str:
    """Return the client type name of a resource or typed struct.

    An explicit display name wins. Otherwise the qualified identity is used:
    the longest matching prefix from *strip_prefixes* is removed and the
    remaining dotted segments are joined (``MyApp.Blog.Post`` -> ``MyAppBlogPost``).
    """
    if node.display_name:
        return node.display_name
    return derive_name(node.name, strip_prefixes)


def derive_name(qualified_name: str, strip_prefixes: Sequence[str] = ()) -> str:
    """Derive a type name from a qualified identity.

    A prefix only matches whole segments: it must end with a separator or be
    followed by one in *qualified_name*.
    """
    name = qualified_name
    for prefix in sorted(strip_prefixes, key=len, reverse=True):
        if not prefix or not name.startswith(prefix) or len(name) <= len(prefix):
            continue
        rest = name[len(prefix) :]
        if prefix.endswith((".", ":")) or rest.startswith((".", "::")):
            name = rest
            break
    segments = [s for s in name.replace("::", ".").split(".") if s]
    return "".join(s[0].upper() + s[1:] for s in segments)


def schema_name(type_name: str, direction: Direction, variant: SchemaVariant = SchemaVariant.RESOURCE) -> str:
    """Return the declaration name for *type_name* in *direction*.

    Input direction always refers to the ``InputSchema``; output direction
    refers to the full or the attributes-only schema.
    """
    if direction is Direction.INPUT or variant is SchemaVariant.INPUT:
        return f"{type_name}InputSchema"
    if variant is SchemaVariant.ATTRIBUTES_ONLY:
        return f"{type_name}AttributesOnlySchema"
    return f"{type_name}ResourceSchema"


def item_constraints(constraints: Constraints) -> Constraints:
    """Return the ``items`` constraints of an array type, or ``{}`` if missing or malformed."""
    items = constraints.get("items") if isinstance(constraints, dict) else None
    return items if isinstance(items, dict) else {}


def unwrap_new_type(
    descriptor: TypeDescriptor | None, constraints: Constraints
) -> tuple[TypeDescriptor | None, Constraints, dict[str, str] | None]:
    """Strip every new-type layer, merging each wrapper's constraints.

    Returns:
        The base descriptor, the merged constraints, and the innermost
        field-rename table declared by a wrapper (if any).
    """
    field_names: dict[str, str] | None = None
    while isinstance(descriptor, NewTypeDescriptor):
        constraints = {**constraints, **descriptor.constraints}
        if descriptor.field_names is not None:
            field_names = descriptor.field_names
        descriptor = descriptor.subtype
    return descriptor, constraints, field_names


def unwrap_array(
    descriptor: TypeDescriptor | None, constraints: Constraints
) -> tuple[TypeDescriptor | None, Constraints, bool]:
    """Strip one array layer. Returns ``(inner, item constraints, was_array)``."""
    if isinstance(descriptor, ArrayDescriptor):
        return descriptor.inner, item_constraints(constraints), True
    return descriptor, constraints, False


def walk_type(
    graph: ResourceGraph, descriptor: TypeDescriptor | None, constraints: Constraints
) -> Iterator[tuple[TypeDescriptor, Constraints]]:
    """Yield every descriptor nested in *descriptor*, itself included.

    Arrays, new types, union members, record fields, and registered typed
    struct fields are entered; resource references are yielded but never
    entered. Each typed struct is expanded at most once per walk.
    """
    pending: list[tuple[TypeDescriptor | None, Constraints]] = [(descriptor, constraints)]
    expanded: set[str] = set()
    while pending:
        current, current_constraints = pending.pop()
        if current is None:
            continue
        yield current, current_constraints
        if isinstance(current, ArrayDescriptor):
            pending.append((current.inner, item_constraints(current_constraints)))
        elif isinstance(current, NewTypeDescriptor):
            pending.append((current.subtype, {**current_constraints, **current.constraints}))
        elif isinstance(current, UnionDescriptor):
            pending.extend((m.type, m.constraints) for m in reversed(current.members))
        elif isinstance(current, RecordDescriptor) and current.fields is not None:
            pending.extend((f.type, f.constraints) for f in reversed(current.fields))
        elif isinstance(current, StructDescriptor):
            if current.fields is not None:
                pending.extend((f.type, f.constraints) for f in reversed(current.fields))
            elif current.instance_of is not None and graph.has_typed_struct(current.instance_of):
                if current.instance_of not in expanded:
                    expanded.add(current.instance_of)
                    fields = graph.typed_struct(current.instance_of).fields
                    pending.extend((f.type, f.constraints) for f in reversed(fields))


def is_complex_return_type(descriptor: TypeDescriptor | None, constraints: Constraints) -> bool:
    """Return True if a calculation returning *descriptor* needs calculation metadata."""
    base, _, _ = unwrap_new_type(descriptor, constraints)
    if isinstance(base, StructDescriptor):
        return base.instance_of is not None or base.fields is not None
    if isinstance(base, RecordDescriptor):
        return base.fields is not None
    return isinstance(base, (UnionDescriptor, ResourceRefDescriptor))


def is_simple_calculation(calculation: FieldDescriptor) -> bool:
    """Return True if a calculation behaves like a plain attribute for the client.

    That is the case when it takes no arguments and does not return a complex
    structural type.
    """
    return not calculation.arguments and not is_complex_return_type(calculation.type, calculation.constraints)


def resolve_aggregate_field(
    graph: ResourceGraph, resource: str, relationship_chain: Sequence[str], field: str
) -> FieldDescriptor | None:
    """Walk *relationship_chain* from *resource* and return the terminal field.

    Only attributes and calculations are returned; anything else yields None.

    Raises:
        GraphError: If a hop names an unknown relationship.
    """
    current = resource
    for hop in relationship_chain:
        rel = graph.relationship(current, hop)
        if rel.destination is None:
            raise GraphError(f"Relationship '{hop}' of '{current}' has no destination")
        current = rel.destination
    target = graph.field(current, field)
    if target is None or target.origin not in (FieldOrigin.ATTRIBUTE, FieldOrigin.CALCULATION):
        return None
    return target


def resolve_aggregate_type(
    graph: ResourceGraph, resource: str, relationship_chain: Sequence[str], field: str
) -> tuple[TypeDescriptor | None, Constraints]:
    """Return the type and constraints of the field an aggregate reads.

    Raises:
        GraphError: If the chain is broken or the terminal field does not exist.
    """
    target = resolve_aggregate_field(graph, resource, relationship_chain, field)
    if target is None:
        chain = " -> ".join([resource, *relationship_chain])
        raise GraphError(f"Aggregate field '{field}' not found via {chain}")
    return target.type, target.constraints


def aggregate_result_type(
    graph: ResourceGraph, resource: str, aggregate: FieldDescriptor
) -> tuple[TypeDescriptor | None, Constraints]:
    """Return the type an aggregate produces.

    A type reported by the host on the aggregate itself is used as-is.
    Otherwise ``count`` is an integer, ``exists`` a boolean, ``avg`` a float,
    ``list`` an array of the terminal field's type, and every other kind has
    the terminal field's type.
    """
    if aggregate.type is not None:
        return aggregate.type, aggregate.constraints
    kind = aggregate.aggregate_kind
    if kind is AggregateKind.COUNT:
        return PrimitiveDescriptor(name="integer"), {}
    if kind is AggregateKind.EXISTS:
        return PrimitiveDescriptor(name="boolean"), {}
    if kind is AggregateKind.AVG:
        return PrimitiveDescriptor(name="float"), {}
    if aggregate.aggregate_field is None:
        raise GraphError(f"Aggregate '{aggregate.name}' of '{resource}' does not name a field")
    field_type, field_constraints = resolve_aggregate_type(
        graph, resource, aggregate.relationship_path, aggregate.aggregate_field
    )
    if kind is AggregateKind.LIST and field_type is not None:
        return ArrayDescriptor(inner=field_type), {"items": field_constraints}
    return field_type, field_constraints
