# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Translate source type descriptors into TypeScript type expressions.

The translation is direction-aware: a resource reference becomes its
``ResourceSchema`` when data flows out to the client and its ``InputSchema``
when data flows in; unions become optional-member objects on output and
discriminated single-key unions on input.

Dispatch order, first match wins:

1. nil -> ``null``
2. arrays, recursing with the ``items`` constraints
3. explicit type-name overrides from configuration
4. the primitive table, looked up by the descriptor's own name (so a new
   type named like a more specific primitive keeps that alias)
5. one layer of new-type unwrapping, then dispatch again
6. structural types: resource references, structs, records, unions, enums,
   custom types with a display name

Everything else raises :class:`UnsupportedTypeError`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from typebridge.codegen.helpers import (
    Direction,
    canonical_name,
    is_complex_return_type,
    item_constraints,
    schema_name,
    unwrap_array,
    unwrap_new_type,
)
from typebridge.codegen.printer import print_type
from typebridge.codegen.ts_ast import (
    NEVER,
    NULL,
    ArrayType,
    LiteralUnionType,
    ObjectType,
    PrimitiveType,
    Property,
    ReferenceType,
    TypeNode,
    UnionType,
    nullable,
    tag,
)
from typebridge.model.resources import ResourceGraph
from typebridge.model.types import (
    ArrayDescriptor,
    Constraints,
    CustomDescriptor,
    EnumDescriptor,
    NewTypeDescriptor,
    PrimitiveDescriptor,
    RecordDescriptor,
    RecordField,
    ResourceRefDescriptor,
    StructDescriptor,
    TypeDescriptor,
    UnionDescriptor,
    UnionMember,
)
from typebridge.naming import FieldFormatter

# ###############
# Public Interface
# ###############

DEFAULT_UNTYPED_MAP_TYPE = "Record<string, any>"

# Source primitive name -> TypeScript type or alias name. ``atom`` and
# ``ltree`` depend on their constraints and are handled separately.
PRIMITIVE_TYPES: dict[str, str] = {
    "string": "string",
    "ci_string": "string",
    "integer": "number",
    "float": "number",
    "decimal": "Decimal",
    "boolean": "boolean",
    "uuid": "UUID",
    "uuid_v7": "UUIDv7",
    "date": "IsoDate",
    "time": "Time",
    "time_usec": "TimeUsec",
    "datetime": "DateTime",
    "naive_datetime": "NaiveDateTime",
    "utc_datetime": "UtcDateTime",
    "utc_datetime_usec": "UtcDateTimeUsec",
    "duration": "Duration",
    "duration_name": "DurationName",
    "binary": "Binary",
    "url_encoded_binary": "UrlEncodedBinary",
    "file": "File",
    "function": "Function",
    "term": "any",
    "vector": "number[]",
    "module": "ModuleName",
    "ulid": "ULID",
    "money": "Money",
}

# Primitive names that denote a container without declared fields.
UNTYPED_CONTAINERS = frozenset({"map", "keyword", "tuple", "struct"})


class UnsupportedTypeError(Exception):
    """Raised when a type descriptor has no faithful TypeScript translation.

    Generation must stop: an imprecise placeholder would publish a wrong
    client contract.
    """


@dataclass(frozen=True)
class MapperSettings:
    """Read-only configuration consulted by the translator.

    Attributes:
        untyped_map_type: Type used for records that declare no fields.
        type_mapping_overrides: Source type name -> TypeScript type, used verbatim.
        strip_namespace_prefixes: Prefixes removed when deriving type names.
    """

    untyped_map_type: str = DEFAULT_UNTYPED_MAP_TYPE
    type_mapping_overrides: Mapping[str, str] = field(default_factory=dict)
    strip_namespace_prefixes: tuple[str, ...] = ()


class TypeMapper:
    """Maps type descriptors to TypeScript type AST nodes."""

    def __init__(
        self,
        graph: ResourceGraph,
        formatter: FieldFormatter | None = None,
        settings: MapperSettings | None = None,
    ) -> None:
        self._graph = graph
        self._formatter = formatter or FieldFormatter()
        self._settings = settings or MapperSettings()

    @property
    def settings(self) -> MapperSettings:
        return self._settings

    def map_type(
        self,
        descriptor: TypeDescriptor | None,
        constraints: Constraints | None = None,
        direction: Direction = Direction.OUTPUT,
    ) -> TypeNode:
        """Translate *descriptor* under *constraints* for *direction*.

        Raises:
            UnsupportedTypeError: If the descriptor cannot be translated.
        """
        return self._map(descriptor, _as_constraints(constraints), direction, None)

    def render(
        self,
        descriptor: TypeDescriptor | None,
        constraints: Constraints | None = None,
        direction: Direction = Direction.OUTPUT,
    ) -> str:
        """Translate *descriptor* and print it as TypeScript."""
        return print_type(self.map_type(descriptor, constraints, direction))

    def maps_by_name(self, descriptor: TypeDescriptor | None) -> bool:
        """Return True if an override or the primitive table maps *descriptor* by name.

        Every new-type layer is checked, in the order :meth:`map_type` checks
        them, so a named layer shadows whatever structure it wraps.
        """
        while descriptor is not None:
            if self._override(descriptor) is not None:
                return True
            if not isinstance(descriptor, NewTypeDescriptor):
                return False
            if descriptor.name in PRIMITIVE_TYPES or descriptor.name in ("atom", "ltree"):
                return True
            descriptor = descriptor.subtype
        return False

    def type_name(self, qualified_name: str) -> str:
        """Return the client type name of a resource or typed struct."""
        if self._graph.has_resource(qualified_name):
            node = self._graph.resource(qualified_name)
        else:
            node = self._graph.typed_struct(qualified_name)
        return canonical_name(node, self._settings.strip_namespace_prefixes)

    def resource_reference(self, resource: str, direction: Direction) -> ReferenceType:
        """Return a reference to *resource*'s schema for *direction*.

        Raises:
            UnsupportedTypeError: If *resource* is not part of the graph.
        """
        if not self._graph.has_resource(resource):
            raise UnsupportedTypeError(f"Reference to unknown resource '{resource}'")
        return ReferenceType(schema_name(self.type_name(resource), direction))

    def build_record_type(
        self,
        fields: Sequence[RecordField],
        direction: Direction,
        field_names: Mapping[str, str] | None = None,
    ) -> ObjectType:
        """Build an inline object type from a record field list.

        On output the object also carries ``__type: "TypedMap"`` and the
        ``__primitiveFields`` union of its directly selectable fields.
        """
        properties: list[Property] = []
        primitive_names: list[str] = []
        for record_field in fields:
            name = self._formatter.format_for_client(record_field.name, field_names)
            node = self._map(record_field.type, record_field.constraints, direction, None)
            if record_field.nullable:
                node = nullable(node)
            properties.append(Property(name, node))
            if is_primitive_member(record_field.type, record_field.constraints):
                primitive_names.append(name)

        if direction is Direction.INPUT:
            return ObjectType(tuple(properties))
        metadata = (tag("TypedMap"), Property("__primitiveFields", primitive_fields_union(primitive_names)))
        return ObjectType(metadata + tuple(properties))

    def build_union_type(self, members: Sequence[UnionMember], direction: Direction) -> TypeNode:
        """Build the type of a tagged union.

        Output: an object whose members are all optional properties, plus
        ``__type: "Union"`` and ``__primitiveFields``. Input: a union of
        single-key objects, one per member (``never`` without members).
        """
        if direction is Direction.INPUT:
            options = tuple(
                ObjectType((Property(self._formatter.format_field(m.name), self._map_member(m, direction)),))
                for m in members
            )
            if not options:
                return NEVER
            if len(options) == 1:
                return options[0]
            return UnionType(options)

        properties: list[Property] = []
        primitive_names: list[str] = []
        for member in members:
            name = self._formatter.format_field(member.name)
            properties.append(Property(name, self._map_member(member, direction), optional=True))
            if is_primitive_member(member.type, member.constraints):
                primitive_names.append(name)
        metadata = (tag("Union"), Property("__primitiveFields", primitive_fields_union(primitive_names)))
        return ObjectType(metadata + tuple(properties))

    def untyped(self) -> PrimitiveType:
        """Return the configured placeholder for records without declared fields."""
        return PrimitiveType(self._settings.untyped_map_type)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _map(
        self,
        descriptor: TypeDescriptor | None,
        constraints: Constraints,
        direction: Direction,
        field_names: Mapping[str, str] | None,
    ) -> TypeNode:
        if descriptor is None:
            return NULL

        if isinstance(descriptor, ArrayDescriptor):
            return ArrayType(self._map(descriptor.inner, item_constraints(constraints), direction, None))

        override = self._override(descriptor)
        if override is not None:
            return PrimitiveType(override)

        primitive = self._map_primitive(descriptor, constraints)
        if primitive is not None:
            return primitive

        if isinstance(descriptor, NewTypeDescriptor):
            merged = {**constraints, **descriptor.constraints}
            names = descriptor.field_names if descriptor.field_names is not None else field_names
            return self._map(descriptor.subtype, merged, direction, names)

        if isinstance(descriptor, ResourceRefDescriptor):
            return self.resource_reference(descriptor.resource, direction)

        if isinstance(descriptor, StructDescriptor):
            return self._map_struct(descriptor, direction, field_names)

        if isinstance(descriptor, RecordDescriptor):
            if descriptor.fields is None:
                return self.untyped()
            return self.build_record_type(descriptor.fields, direction, field_names)

        if isinstance(descriptor, UnionDescriptor):
            return self.build_union_type(descriptor.members, direction)

        if isinstance(descriptor, EnumDescriptor):
            return LiteralUnionType(tuple(descriptor.values))

        if isinstance(descriptor, CustomDescriptor) and descriptor.display_name:
            return PrimitiveType(descriptor.display_name)

        raise UnsupportedTypeError(f"Unsupported type {_describe(descriptor)}")

    def _override(self, descriptor: TypeDescriptor) -> str | None:
        name = _type_name_of(descriptor)
        if name is None:
            return None
        return self._settings.type_mapping_overrides.get(name)

    def _map_primitive(self, descriptor: TypeDescriptor, constraints: Constraints) -> TypeNode | None:
        if not isinstance(descriptor, (PrimitiveDescriptor, NewTypeDescriptor)):
            return None
        name = descriptor.name
        if isinstance(descriptor, NewTypeDescriptor):
            constraints = {**constraints, **descriptor.constraints}

        if name == "atom":
            values = constraints.get("one_of")
            if isinstance(values, list) and values:
                return LiteralUnionType(tuple(str(v) for v in values))
            return PrimitiveType("string")
        if name == "ltree":
            return PrimitiveType("LtreeArray" if constraints.get("escape?") else "LtreeFlexible")
        if name in PRIMITIVE_TYPES:
            return PrimitiveType(PRIMITIVE_TYPES[name])
        if isinstance(descriptor, PrimitiveDescriptor) and name in UNTYPED_CONTAINERS:
            return self.untyped()
        return None

    def _map_struct(
        self,
        descriptor: StructDescriptor,
        direction: Direction,
        field_names: Mapping[str, str] | None,
    ) -> TypeNode:
        instance_of = descriptor.instance_of
        if instance_of is not None:
            if self._graph.has_resource(instance_of):
                return self.resource_reference(instance_of, direction)
            if self._graph.has_typed_struct(instance_of):
                typed_struct = self._graph.typed_struct(instance_of)
                fields = descriptor.fields if descriptor.fields is not None else typed_struct.fields
                names = typed_struct.field_names or field_names
                return self.build_record_type(fields, direction, names)
            raise UnsupportedTypeError(f"Struct is an instance of unknown type '{instance_of}'")
        if descriptor.fields is not None:
            return self.build_record_type(descriptor.fields, direction, field_names)
        return self.untyped()

    def _map_member(self, member: UnionMember, direction: Direction) -> TypeNode:
        return self._map(member.type, _as_constraints(member.constraints), direction, None)


def is_primitive_member(descriptor: TypeDescriptor | None, constraints: Constraints) -> bool:
    """Return True if a record field or union member is directly selectable.

    Nested records, structs, unions, and resource references (also inside one
    array layer) need a further nested selection and are not primitive.
    """
    base, base_constraints, _ = unwrap_new_type(descriptor, _as_constraints(constraints))
    inner, inner_constraints, _ = unwrap_array(base, base_constraints)
    inner, inner_constraints, _ = unwrap_new_type(inner, inner_constraints)
    return not is_complex_return_type(inner, inner_constraints)


def primitive_fields_union(names: Sequence[str]) -> LiteralUnionType:
    """Return the ``__primitiveFields`` literal union (``never`` when empty)."""
    return LiteralUnionType(tuple(names))


# ################
# Implementation
# ################


def _as_constraints(constraints: object) -> Constraints:
    """Degrade missing or malformed constraints to an empty mapping."""
    return dict(constraints) if isinstance(constraints, dict) else {}


def _type_name_of(descriptor: TypeDescriptor) -> str | None:
    if isinstance(descriptor, (PrimitiveDescriptor, NewTypeDescriptor, CustomDescriptor)):
        return descriptor.name
    if isinstance(descriptor, EnumDescriptor):
        return descriptor.name
    return None


def _describe(descriptor: TypeDescriptor) -> str:
    name = _type_name_of(descriptor)
    if name is not None:
        return f"{descriptor.kind} '{name}'"
    return descriptor.kind
