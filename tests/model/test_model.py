# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the type descriptors and the resource graph oracle."""

import pytest
from pydantic import TypeAdapter, ValidationError

from typebridge.model import (
    AggregateKind,
    ArrayDescriptor,
    FieldDescriptor,
    FieldOrigin,
    GraphError,
    NewTypeDescriptor,
    PrimitiveDescriptor,
    RecordField,
    RelationshipType,
    ResourceGraph,
    ResourceNode,
    StructDescriptor,
    TypeDescriptor,
    TypedStructDef,
    UnionDescriptor,
)

# ###############
# Test Helpers
# ###############


def _graph() -> ResourceGraph:
    return ResourceGraph(
        resources=[
            ResourceNode(
                name="MyApp.Todo",
                fields=[
                    FieldDescriptor(name="title", type=PrimitiveDescriptor(name="string")),
                    FieldDescriptor(name="secret", type=PrimitiveDescriptor(name="string"), public=False),
                    FieldDescriptor(
                        name="is_overdue",
                        origin=FieldOrigin.CALCULATION,
                        type=PrimitiveDescriptor(name="boolean"),
                    ),
                    FieldDescriptor(
                        name="comment_count",
                        origin=FieldOrigin.AGGREGATE,
                        aggregate_kind=AggregateKind.COUNT,
                        relationship_path=["comments"],
                    ),
                    FieldDescriptor(
                        name="comments",
                        origin=FieldOrigin.RELATIONSHIP,
                        destination="MyApp.Comment",
                        relationship_type=RelationshipType.HAS_MANY,
                    ),
                ],
            ),
            ResourceNode(name="MyApp.Comment"),
            ResourceNode(name="MyApp.Address", embedded=True),
        ],
        typed_structs=[TypedStructDef(name="MyApp.Point", fields=[RecordField(name="x")])],
    )


# ###############
# Type Descriptors
# ###############


def test_descriptor_validates_from_discriminated_mapping() -> None:
    """A mapping with a 'kind' key validates into the matching descriptor class."""
    adapter = TypeAdapter(TypeDescriptor)
    descriptor = adapter.validate_python({"kind": "array", "inner": {"kind": "primitive", "name": "uuid"}})

    assert isinstance(descriptor, ArrayDescriptor)
    assert descriptor.inner == PrimitiveDescriptor(name="uuid")


def test_nested_descriptors_validate() -> None:
    """New types and unions nest other descriptors."""
    adapter = TypeAdapter(TypeDescriptor)
    descriptor = adapter.validate_python(
        {
            "kind": "new_type",
            "name": "content",
            "subtype": {
                "kind": "union",
                "members": [{"name": "text", "type": {"kind": "primitive", "name": "string"}}],
            },
        }
    )

    assert isinstance(descriptor, NewTypeDescriptor)
    assert isinstance(descriptor.subtype, UnionDescriptor)
    assert descriptor.subtype.members[0].name == "text"


def test_unknown_kind_is_rejected() -> None:
    """Exactly one known variant must be selected by the discriminator."""
    with pytest.raises(ValidationError):
        TypeAdapter(TypeDescriptor).validate_python({"kind": "pointer", "name": "x"})


def test_descriptors_are_frozen() -> None:
    """Descriptors cannot be mutated after construction."""
    struct = StructDescriptor(instance_of="MyApp.Point")
    with pytest.raises(ValidationError):
        struct.instance_of = "MyApp.Other"  # type: ignore[misc]


def test_aggregate_kinds_that_read_a_field() -> None:
    assert AggregateKind.FIRST.reads_field
    assert AggregateKind.LIST.reads_field
    assert AggregateKind.CUSTOM.reads_field
    assert not AggregateKind.COUNT.reads_field
    assert not AggregateKind.SUM.reads_field


def test_relationship_cardinality() -> None:
    assert RelationshipType.HAS_MANY.is_many
    assert RelationshipType.MANY_TO_MANY.is_many
    assert not RelationshipType.BELONGS_TO.is_many
    assert not RelationshipType.HAS_ONE.is_many


# ###############
# Resource Graph
# ###############


def test_graph_lookups() -> None:
    graph = _graph()

    assert graph.has_resource("MyApp.Todo")
    assert not graph.has_resource("MyApp.Missing")
    assert graph.resource("MyApp.Todo").name == "MyApp.Todo"
    assert graph.is_embedded("MyApp.Address")
    assert not graph.is_embedded("MyApp.Todo")
    assert not graph.is_embedded("MyApp.Missing")
    assert graph.has_typed_struct("MyApp.Point")
    assert graph.typed_struct("MyApp.Point").fields[0].name == "x"


def test_unknown_names_raise_graph_error() -> None:
    graph = _graph()

    with pytest.raises(GraphError, match="MyApp.Missing"):
        graph.resource("MyApp.Missing")
    with pytest.raises(GraphError):
        graph.typed_struct("MyApp.Missing")
    with pytest.raises(GraphError):
        graph.public_fields("MyApp.Missing")


def test_public_field_views_filter_by_origin() -> None:
    """Private fields are hidden; each view only returns its own origin."""
    graph = _graph()

    assert [f.name for f in graph.public_fields("MyApp.Todo")] == [
        "title",
        "is_overdue",
        "comment_count",
        "comments",
    ]
    assert [f.name for f in graph.public_attributes("MyApp.Todo")] == ["title"]
    assert [f.name for f in graph.public_calculations("MyApp.Todo")] == ["is_overdue"]
    assert [f.name for f in graph.public_aggregates("MyApp.Todo")] == ["comment_count"]
    assert [f.name for f in graph.public_relationships("MyApp.Todo")] == ["comments"]


def test_field_returns_private_fields_too() -> None:
    graph = _graph()

    assert graph.field("MyApp.Todo", "secret") is not None
    assert graph.field("MyApp.Todo", "nope") is None


def test_relationship_lookup() -> None:
    graph = _graph()

    assert graph.relationship("MyApp.Todo", "comments").destination == "MyApp.Comment"
    with pytest.raises(GraphError, match="no relationship 'title'"):
        graph.relationship("MyApp.Todo", "title")


def test_graph_validates_from_plain_data() -> None:
    """A graph can be built from plain dicts, e.g. loaded from a file."""
    graph = ResourceGraph.model_validate(
        {
            "resources": [
                {
                    "name": "MyApp.Post",
                    "fields": [
                        {"name": "title", "type": {"kind": "primitive", "name": "string"}},
                        {"name": "author", "origin": "relationship", "destination": "MyApp.User"},
                    ],
                },
                {"name": "MyApp.User"},
            ]
        }
    )

    assert graph.has_resource("MyApp.User")
    assert graph.field("MyApp.Post", "author").origin is FieldOrigin.RELATIONSHIP
