# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-resource schema generation.

Every public field of a resource is classified into exactly one
:class:`FieldCategory`. The category decides how the field is emitted:

- primitives become plain properties (``| null`` when nullable),
- relationships and embedded resources become ``{ __type: "Relationship"; ... }``
  wrappers around the target's schema,
- unions, typed maps, and typed structs are built by the :class:`TypeMapper`,
  with ``__array: true`` spliced into the same object for array fields,
- complex calculations become ``{ __type: "ComplexCalculation"; ... }``
  wrappers carrying the return type and the argument object.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum

from typebridge.codegen.helpers import (
    Direction,
    SchemaVariant,
    aggregate_result_type,
    is_simple_calculation,
    schema_name,
    unwrap_array,
    unwrap_new_type,
)
from typebridge.codegen.printer import print_declaration
from typebridge.codegen.ts_ast import (
    ArrayType,
    LiteralType,
    ObjectType,
    Property,
    ReferenceType,
    TypeNode,
    nullable,
    tag,
    with_array_flag,
)
from typebridge.codegen.type_mapper import (
    TypeMapper,
    UnsupportedTypeError,
    is_primitive_member,
    primitive_fields_union,
)
from typebridge.model.resources import (
    FieldDescriptor,
    FieldOrigin,
    ResourceGraph,
    ResourceNode,
)
from typebridge.model.types import (
    ArrayDescriptor,
    Constraints,
    RecordDescriptor,
    ResourceRefDescriptor,
    StructDescriptor,
    TypeDescriptor,
    UnionDescriptor,
    UnionMember,
)
from typebridge.naming import FieldFormatter

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class FieldCategory(Enum):
    """How a field is emitted in a resource schema."""

    PRIMITIVE = "primitive"
    RELATIONSHIP = "relationship"
    EMBEDDED = "embedded"
    UNION = "union"
    TYPED_MAP = "typed_map"
    TYPED_STRUCT = "typed_struct"
    CALCULATION = "calculation"


@dataclass(frozen=True)
class GeneratedSchema:
    """One generated declaration.

    Attributes:
        canonical_name: Declaration name, e.g. ``TodoResourceSchema``.
        direction: Data direction the schema describes.
        variant: Which of the resource's schemas this is.
        resource: Qualified name of the source resource.
        node: The declaration's object type.
    """

    canonical_name: str
    direction: Direction
    variant: SchemaVariant
    resource: str
    node: ObjectType

    @property
    def body(self) -> str:
        """The rendered ``export type ...`` declaration."""
        return print_declaration(self.canonical_name, self.node)


class ResourceSchemaGenerator:
    """Builds the schemas of individual resources.

    Args:
        graph: The metadata graph.
        mapper: Translator used for every non-trivial field type.
        formatter: Client field-name formatter.
        allowed_resources: Qualified names that may be referenced from
            relationships and embedded fields. ``None`` allows every resource.
    """

    def __init__(
        self,
        graph: ResourceGraph,
        mapper: TypeMapper,
        formatter: FieldFormatter | None = None,
        allowed_resources: Collection[str] | None = None,
    ) -> None:
        self._graph = graph
        self._mapper = mapper
        self._formatter = formatter or FieldFormatter()
        self._allowed = None if allowed_resources is None else frozenset(allowed_resources)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify_field(self, field: FieldDescriptor) -> FieldCategory:
        """Return the category of *field*.

        Relationships are always ``RELATIONSHIP``. A calculation is
        ``CALCULATION`` unless it is simple, in which case it is classified
        like an attribute of its return type.
        """
        if field.origin is FieldOrigin.RELATIONSHIP:
            return FieldCategory.RELATIONSHIP
        if field.origin is FieldOrigin.CALCULATION and not is_simple_calculation(field):
            return FieldCategory.CALCULATION
        return self.classify_by_type(field.type, field.constraints)

    def classify_by_type(self, descriptor: TypeDescriptor | None, constraints: Constraints) -> FieldCategory:
        """Classify a type after unwrapping new types and one array layer.

        A type that an override or the primitive table maps by name, before or
        after the array layer, is ``PRIMITIVE`` whatever it wraps.
        """
        if self._mapper.maps_by_name(descriptor):
            return FieldCategory.PRIMITIVE
        base, base_constraints, _ = unwrap_new_type(descriptor, constraints)
        inner, inner_constraints, _ = unwrap_array(base, base_constraints)
        if self._mapper.maps_by_name(inner):
            return FieldCategory.PRIMITIVE
        inner, _, _ = unwrap_new_type(inner, inner_constraints)

        if isinstance(inner, UnionDescriptor):
            return FieldCategory.UNION
        if isinstance(inner, ResourceRefDescriptor):
            return FieldCategory.EMBEDDED
        if isinstance(inner, StructDescriptor):
            if inner.instance_of is not None:
                if self._graph.has_resource(inner.instance_of):
                    return FieldCategory.EMBEDDED
                if inner.fields is not None or self._graph.has_typed_struct(inner.instance_of):
                    return FieldCategory.TYPED_STRUCT
                return FieldCategory.PRIMITIVE
            if inner.fields is not None:
                return FieldCategory.TYPED_MAP
        if isinstance(inner, RecordDescriptor) and inner.fields is not None:
            return FieldCategory.TYPED_MAP
        return FieldCategory.PRIMITIVE

    # ------------------------------------------------------------------
    # Schemas
    # ------------------------------------------------------------------

    def generate_resource_schema(self, resource: str) -> GeneratedSchema:
        """Generate ``{Name}ResourceSchema``: every public field plus metadata."""
        node = self._graph.resource(resource)
        fields = [self._with_aggregate_type(resource, f) for f in self._graph.public_fields(resource)]

        primitive: list[FieldDescriptor] = []
        complex_fields: list[FieldDescriptor] = []
        relationships: list[FieldDescriptor] = []
        for f in fields:
            category = self.classify_field(f)
            if category is FieldCategory.RELATIONSHIP:
                relationships.append(f)
            elif category is FieldCategory.PRIMITIVE:
                primitive.append(f)
            else:
                complex_fields.append(f)

        properties = [self._primitive_property(node, f) for f in primitive]
        for f in complex_fields:
            if f.origin is FieldOrigin.AGGREGATE:
                prop = self._attributes_only_property(node, f)
            else:
                prop = self._complex_property(node, f)
            if prop is not None:
                properties.append(prop)
        for rel in relationships:
            prop = self._relationship_property(node, rel)
            if prop is not None:
                properties.append(prop)

        body = self._with_metadata(node, [f.name for f in primitive], properties)
        return self._schema(node, Direction.OUTPUT, SchemaVariant.RESOURCE, body)

    def generate_attributes_only_schema(self, resource: str) -> GeneratedSchema:
        """Generate ``{Name}AttributesOnlySchema``: public attributes only.

        Embedded attributes reference the target's attributes-only schema, so
        nothing beyond stored attributes is selectable through this schema.
        """
        node = self._graph.resource(resource)
        primitive: list[FieldDescriptor] = []
        properties: list[Property] = []
        complex_properties: list[Property] = []
        for attr in self._graph.public_attributes(resource):
            if self.classify_field(attr) is FieldCategory.PRIMITIVE:
                primitive.append(attr)
                properties.append(self._primitive_property(node, attr))
                continue
            prop = self._attributes_only_property(node, attr)
            if prop is not None:
                complex_properties.append(prop)

        body = self._with_metadata(node, [a.name for a in primitive], properties + complex_properties)
        return self._schema(node, Direction.OUTPUT, SchemaVariant.ATTRIBUTES_ONLY, body)

    def generate_input_schema(self, resource: str) -> GeneratedSchema:
        """Generate ``{Name}InputSchema`` from the public attributes.

        Nullable attributes are optional and accept ``null``; attributes with
        a default are optional; all others are required.
        """
        node = self._graph.resource(resource)
        properties = []
        for attr in self._graph.public_attributes(resource):
            name = self._client_name(node, attr.name)
            ts_type = self._mapper.map_type(attr.type, attr.constraints, Direction.INPUT)
            if attr.nullable:
                properties.append(Property(name, nullable(ts_type), optional=True))
            elif attr.has_default:
                properties.append(Property(name, ts_type, optional=True))
            else:
                properties.append(Property(name, ts_type))
        return self._schema(node, Direction.INPUT, SchemaVariant.INPUT, ObjectType(tuple(properties)))

    def generate_all_schemas(
        self, resource: str, input_schema_resources: Collection[str] = ()
    ) -> list[GeneratedSchema]:
        """Generate the resource, attributes-only, and (when needed) input schema.

        An input schema is generated for embedded resources and for every
        resource listed in *input_schema_resources*.
        """
        logger.debug("Generating schemas for %s", resource)
        schemas = [self.generate_resource_schema(resource), self.generate_attributes_only_schema(resource)]
        if self._graph.is_embedded(resource) or resource in input_schema_resources:
            schemas.append(self.generate_input_schema(resource))
        return schemas

    # ------------------------------------------------------------------
    # Field emission
    # ------------------------------------------------------------------

    def _primitive_property(self, node: ResourceNode, field: FieldDescriptor) -> Property:
        ts_type = self._mapper.map_type(field.type, field.constraints, Direction.OUTPUT)
        return Property(self._client_name(node, field.name), _maybe_null(ts_type, field.nullable))

    def _complex_property(self, node: ResourceNode, field: FieldDescriptor) -> Property | None:
        category = self.classify_field(field)
        name = self._client_name(node, field.name)
        if category is FieldCategory.CALCULATION:
            return Property(name, self._calculation_type(field))
        if category is FieldCategory.EMBEDDED:
            wrapper = self._embedded_type(field, SchemaVariant.RESOURCE)
            return None if wrapper is None else Property(name, wrapper)
        ts_type = self._inline_type(field.type, field.constraints)
        return Property(name, _maybe_null(ts_type, field.nullable))

    def _attributes_only_property(self, node: ResourceNode, field: FieldDescriptor) -> Property | None:
        category = self.classify_field(field)
        name = self._client_name(node, field.name)
        if category is FieldCategory.EMBEDDED:
            wrapper = self._embedded_type(field, SchemaVariant.ATTRIBUTES_ONLY)
            return None if wrapper is None else Property(name, wrapper)
        if category is FieldCategory.UNION:
            base, constraints, _ = unwrap_new_type(field.type, field.constraints)
            inner, _, is_array = unwrap_array(base, constraints)
            inner, _, _ = unwrap_new_type(inner, {})
            ts_type: TypeNode = self._attributes_only_union(inner.members)
            if is_array:
                ts_type = with_array_flag(ts_type)
            return Property(name, _maybe_null(ts_type, field.nullable))
        ts_type = self._inline_type(field.type, field.constraints)
        return Property(name, _maybe_null(ts_type, field.nullable))

    def _relationship_property(self, node: ResourceNode, rel: FieldDescriptor) -> Property | None:
        destination = rel.destination
        if destination is None or not self._is_allowed(destination):
            return None
        reference: TypeNode = self._mapper.resource_reference(destination, Direction.OUTPUT)
        is_many = rel.relationship_type is not None and rel.relationship_type.is_many
        if not is_many and rel.nullable:
            reference = nullable(reference)
        return Property(self._client_name(node, rel.name), _relationship_wrapper(reference, is_many))

    def _embedded_type(self, field: FieldDescriptor, variant: SchemaVariant) -> ObjectType | None:
        base, constraints, _ = unwrap_new_type(field.type, field.constraints)
        inner, inner_constraints, is_array = unwrap_array(base, constraints)
        inner, _, _ = unwrap_new_type(inner, inner_constraints)
        if isinstance(inner, ResourceRefDescriptor):
            target = inner.resource
        else:
            target = inner.instance_of

        if not self._graph.has_resource(target):
            raise UnsupportedTypeError(f"Field '{field.name}' references unknown resource '{target}'")
        if not self._is_allowed(target):
            return None

        reference: TypeNode = ReferenceType(schema_name(self._mapper.type_name(target), Direction.OUTPUT, variant))
        if not is_array and field.nullable:
            reference = nullable(reference)
        return _relationship_wrapper(reference, is_array)

    def _inline_type(self, descriptor: TypeDescriptor | None, constraints: Constraints) -> TypeNode:
        """Map a union, typed map, or typed struct field, splicing ``__array`` into array values."""
        base, base_constraints, _ = unwrap_new_type(descriptor, constraints)
        if not isinstance(base, ArrayDescriptor):
            return self._mapper.map_type(descriptor, constraints, Direction.OUTPUT)
        ts_type = self._mapper.map_type(base, base_constraints, Direction.OUTPUT)
        if isinstance(ts_type, ArrayType) and isinstance(ts_type.element, ObjectType):
            return with_array_flag(ts_type.element)
        return ts_type

    def _calculation_type(self, calc: FieldDescriptor) -> ObjectType:
        return_type = self._mapper.map_type(calc.type, calc.constraints, Direction.OUTPUT)
        properties = [tag("ComplexCalculation"), Property("__returnType", _maybe_null(return_type, calc.nullable))]
        if calc.arguments:
            args = []
            for arg in calc.arguments:
                arg_type = self._mapper.map_type(arg.type, arg.constraints, Direction.INPUT)
                args.append(
                    Property(
                        self._formatter.format_field(arg.name),
                        _maybe_null(arg_type, arg.nullable),
                        optional=arg.has_default,
                    )
                )
            properties.append(Property("__args", ObjectType(tuple(args))))
        return ObjectType(tuple(properties))

    def _attributes_only_union(self, members: list[UnionMember]) -> ObjectType:
        properties = []
        primitive_names = []
        for member in members:
            name = self._formatter.format_field(member.name)
            target = _resource_target(member.type)
            if target is not None and self._graph.has_resource(target) and self._is_allowed(target):
                ts_type: TypeNode = ReferenceType(
                    schema_name(self._mapper.type_name(target), Direction.OUTPUT, SchemaVariant.ATTRIBUTES_ONLY)
                )
            else:
                ts_type = self._mapper.map_type(member.type, member.constraints, Direction.OUTPUT)
            properties.append(Property(name, ts_type, optional=True))
            if is_primitive_member(member.type, member.constraints):
                primitive_names.append(name)
        metadata = (tag("Union"), Property("__primitiveFields", primitive_fields_union(primitive_names)))
        return ObjectType(metadata + tuple(properties))

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------

    def _with_aggregate_type(self, resource: str, field: FieldDescriptor) -> FieldDescriptor:
        if field.origin is not FieldOrigin.AGGREGATE:
            return field
        descriptor, constraints = aggregate_result_type(self._graph, resource, field)
        return field.model_copy(update={"type": descriptor, "constraints": constraints})

    def _with_metadata(self, node: ResourceNode, primitive_names: list[str], properties: list[Property]) -> ObjectType:
        names = [self._client_name(node, n) for n in primitive_names]
        metadata = (tag("Resource"), Property("__primitiveFields", primitive_fields_union(names)))
        return ObjectType(metadata + tuple(properties))

    def _schema(
        self, node: ResourceNode, direction: Direction, variant: SchemaVariant, body: ObjectType
    ) -> GeneratedSchema:
        name = schema_name(self._mapper.type_name(node.name), direction, variant)
        return GeneratedSchema(name, direction, variant, node.name, body)

    def _client_name(self, node: ResourceNode, field_name: str) -> str:
        return self._formatter.format_for_client(field_name, node.field_names)

    def _is_allowed(self, resource: str) -> bool:
        return self._allowed is None or resource in self._allowed


# ################
# Implementation
# ################


def _maybe_null(node: TypeNode, is_nullable: bool) -> TypeNode:
    return nullable(node) if is_nullable else node


def _relationship_wrapper(reference: TypeNode, is_array: bool) -> ObjectType:
    properties = [tag("Relationship")]
    if is_array:
        properties.append(Property("__array", LiteralType(True)))
    properties.append(Property("__resource", reference))
    return ObjectType(tuple(properties))


def _resource_target(descriptor: TypeDescriptor | None) -> str | None:
    base, _, _ = unwrap_new_type(descriptor, {})
    if isinstance(base, ResourceRefDescriptor):
        return base.resource
    if isinstance(base, StructDescriptor):
        return base.instance_of
    return None
