# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resources, fields, and the read-only metadata graph consumed by code generation."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, PrivateAttr
from pydantic import Field as _Field

from typebridge.model.types import Constraints, RecordField, TypeDescriptor

# ###############
# Public Interface
# ###############


class GraphError(Exception):
    """Raised when the metadata graph is asked about something it does not define."""


class FieldOrigin(Enum):
    """Where a public field of a resource comes from."""

    ATTRIBUTE = "attribute"
    CALCULATION = "calculation"
    AGGREGATE = "aggregate"
    RELATIONSHIP = "relationship"


class RelationshipType(Enum):
    """Cardinality-bearing relationship kinds."""

    BELONGS_TO = "belongs_to"
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    MANY_TO_MANY = "many_to_many"

    @property
    def is_many(self) -> bool:
        """Return True if the relationship yields a list of related records."""
        return self in (RelationshipType.HAS_MANY, RelationshipType.MANY_TO_MANY)


class AggregateKind(Enum):
    """Aggregate kinds supported by the host framework."""

    COUNT = "count"
    EXISTS = "exists"
    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"
    FIRST = "first"
    LIST = "list"
    CUSTOM = "custom"

    @property
    def reads_field(self) -> bool:
        """Return True if the aggregate reads a concrete field on the far side."""
        return self in (
            AggregateKind.FIRST,
            AggregateKind.LIST,
            AggregateKind.MIN,
            AggregateKind.MAX,
            AggregateKind.CUSTOM,
        )


class Argument(BaseModel):
    """A calculation argument."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeDescriptor | None = None
    constraints: Constraints = _Field(default_factory=dict)
    nullable: bool = True
    has_default: bool = False


class FieldDescriptor(BaseModel):
    """A field of a resource: attribute, calculation, aggregate, or relationship.

    Relationship fields use ``destination`` and ``relationship_type``; aggregate
    fields use ``aggregate_kind``, ``relationship_path`` and ``aggregate_field``;
    calculations may declare ``arguments``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    origin: FieldOrigin = FieldOrigin.ATTRIBUTE
    type: TypeDescriptor | None = None
    constraints: Constraints = _Field(default_factory=dict)
    nullable: bool = True
    public: bool = True
    has_default: bool = False
    arguments: list[Argument] = _Field(default_factory=list)
    destination: str | None = None
    relationship_type: RelationshipType | None = None
    aggregate_kind: AggregateKind | None = None
    relationship_path: list[str] = _Field(default_factory=list)
    aggregate_field: str | None = None


class ResourceNode(BaseModel):
    """One resource: identity, embedded flag, ordered fields, and client rename table."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str | None = None
    embedded: bool = False
    fields: list[FieldDescriptor] = _Field(default_factory=list)
    field_names: dict[str, str] = _Field(default_factory=dict)


class TypedStructDef(BaseModel):
    """A named ad hoc composite type with no resource identity."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str | None = None
    fields: list[RecordField] = _Field(default_factory=list)
    field_names: dict[str, str] = _Field(default_factory=dict)


class ResourceGraph(BaseModel):
    """The materialized metadata oracle: every resource and typed struct known to the host."""

    resources: list[ResourceNode] = _Field(default_factory=list)
    typed_structs: list[TypedStructDef] = _Field(default_factory=list)

    _resources_by_name: dict[str, ResourceNode] = PrivateAttr(default_factory=dict)
    _structs_by_name: dict[str, TypedStructDef] = PrivateAttr(default_factory=dict)

    def model_post_init(self, context: object) -> None:
        self._resources_by_name = {r.name: r for r in self.resources}
        self._structs_by_name = {s.name: s for s in self.typed_structs}

    def has_resource(self, name: str) -> bool:
        """Return True if *name* is a resource of this graph."""
        return name in self._resources_by_name

    def resource(self, name: str) -> ResourceNode:
        """Return the resource named *name*.

        Raises:
            GraphError: If the graph has no such resource.
        """
        try:
            return self._resources_by_name[name]
        except KeyError:
            raise GraphError(f"Unknown resource '{name}'") from None

    def is_embedded(self, name: str) -> bool:
        """Return True if *name* is an embedded (value-type) resource."""
        node = self._resources_by_name.get(name)
        return node is not None and node.embedded

    def has_typed_struct(self, name: str) -> bool:
        """Return True if *name* is a registered typed struct."""
        return name in self._structs_by_name

    def typed_struct(self, name: str) -> TypedStructDef:
        """Return the typed struct named *name*.

        Raises:
            GraphError: If the graph has no such typed struct.
        """
        try:
            return self._structs_by_name[name]
        except KeyError:
            raise GraphError(f"Unknown typed struct '{name}'") from None

    def public_fields(self, name: str) -> list[FieldDescriptor]:
        return [f for f in self.resource(name).fields if f.public]

    def public_attributes(self, name: str) -> list[FieldDescriptor]:
        return self._public_of(name, FieldOrigin.ATTRIBUTE)

    def public_calculations(self, name: str) -> list[FieldDescriptor]:
        return self._public_of(name, FieldOrigin.CALCULATION)

    def public_aggregates(self, name: str) -> list[FieldDescriptor]:
        return self._public_of(name, FieldOrigin.AGGREGATE)

    def public_relationships(self, name: str) -> list[FieldDescriptor]:
        return self._public_of(name, FieldOrigin.RELATIONSHIP)

    def field(self, name: str, field_name: str) -> FieldDescriptor | None:
        """Return the field *field_name* of resource *name*, public or not."""
        for f in self.resource(name).fields:
            if f.name == field_name:
                return f
        return None

    def relationship(self, name: str, relationship_name: str) -> FieldDescriptor:
        """Return the relationship *relationship_name* of resource *name*.

        Raises:
            GraphError: If the resource has no such relationship.
        """
        rel = self.field(name, relationship_name)
        if rel is None or rel.origin is not FieldOrigin.RELATIONSHIP:
            raise GraphError(f"Resource '{name}' has no relationship '{relationship_name}'")
        return rel

    def _public_of(self, name: str, origin: FieldOrigin) -> list[FieldDescriptor]:
        return [f for f in self.resource(name).fields if f.public and f.origin is origin]
