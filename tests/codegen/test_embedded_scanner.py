# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for embedded resource, typed struct, and input schema scanning."""

from typebridge.codegen.embedded_scanner import EmbeddedScanner
from typebridge.model import (
    Argument,
    ArrayDescriptor,
    FieldDescriptor,
    FieldOrigin,
    NewTypeDescriptor,
    PrimitiveDescriptor,
    RecordField,
    ResourceGraph,
    ResourceNode,
    ResourceRefDescriptor,
    StructDescriptor,
    TypedStructDef,
    UnionDescriptor,
    UnionMember,
)

# ###############
# Test Helpers
# ###############


def _struct(name: str) -> StructDescriptor:
    return StructDescriptor(instance_of=name)


def _graph() -> ResourceGraph:
    route = NewTypeDescriptor(
        name="MyApp.Route",
        subtype=ArrayDescriptor(
            inner=ArrayDescriptor(inner=NewTypeDescriptor(name="MyApp.Waypoint", subtype=_struct("MyApp.Point")))
        ),
    )
    shape = UnionDescriptor(
        members=[
            UnionMember(name="circle", type=_struct("MyApp.Circle")),
            UnionMember(name="label", type=PrimitiveDescriptor(name="string")),
        ]
    )
    return ResourceGraph(
        resources=[
            ResourceNode(
                name="MyApp.Todo",
                fields=[
                    FieldDescriptor(name="location", type=_struct("MyApp.Point")),
                    FieldDescriptor(name="route", type=route),
                    FieldDescriptor(name="shape", type=shape),
                    FieldDescriptor(name="hidden", type=_struct("MyApp.Hidden"), public=False),
                    FieldDescriptor(name="unknown", type=_struct("MyApp.NotRegistered")),
                    FieldDescriptor(name="metadata", type=ResourceRefDescriptor(resource="MyApp.Metadata")),
                    FieldDescriptor(
                        name="bounds",
                        origin=FieldOrigin.CALCULATION,
                        type=_struct("MyApp.Box"),
                    ),
                    FieldDescriptor(
                        name="search",
                        origin=FieldOrigin.CALCULATION,
                        type=PrimitiveDescriptor(name="boolean"),
                        arguments=[Argument(name="query", type=ResourceRefDescriptor(resource="MyApp.Query"))],
                    ),
                ],
            ),
            ResourceNode(
                name="MyApp.Metadata",
                embedded=True,
                fields=[FieldDescriptor(name="address", type=_struct("MyApp.Address"))],
            ),
            ResourceNode(name="MyApp.Address", embedded=True),
            ResourceNode(
                name="MyApp.Query",
                fields=[
                    FieldDescriptor(
                        name="owners", type=ArrayDescriptor(inner=ResourceRefDescriptor(resource="MyApp.Owner"))
                    )
                ],
            ),
            ResourceNode(name="MyApp.Owner"),
        ],
        typed_structs=[
            TypedStructDef(name="MyApp.Point", fields=[RecordField(name="x")]),
            TypedStructDef(name="MyApp.Circle", fields=[RecordField(name="radius")]),
            TypedStructDef(name="MyApp.Hidden"),
            TypedStructDef(name="MyApp.Box"),
        ],
    )


def _resources(graph: ResourceGraph, *names: str) -> list[ResourceNode]:
    return [graph.resource(n) for n in names]


# ###############
# Tests
# ###############


def test_find_embedded_resources() -> None:
    graph = _graph()
    resources = _resources(graph, "MyApp.Todo", "MyApp.Metadata", "MyApp.Address", "MyApp.Query")

    embedded = EmbeddedScanner(graph).find_embedded_resources(resources)

    assert [r.name for r in embedded] == ["MyApp.Metadata", "MyApp.Address"]


def test_find_typed_structs() -> None:
    """Structs are found through new types, nested arrays, and union members, once each."""
    graph = _graph()

    structs = EmbeddedScanner(graph).find_typed_structs(_resources(graph, "MyApp.Todo"))

    assert [s.name for s in structs] == ["MyApp.Point", "MyApp.Circle"]


def test_find_typed_structs_ignores_calculations_and_private_attributes() -> None:
    graph = _graph()

    names = [s.name for s in EmbeddedScanner(graph).find_typed_structs(_resources(graph, "MyApp.Todo"))]

    assert "MyApp.Hidden" not in names
    assert "MyApp.Box" not in names


def test_find_input_schema_resources() -> None:
    """Embedded resources and calculation argument resources, closed over their attributes."""
    graph = _graph()
    resources = _resources(graph, "MyApp.Todo", "MyApp.Metadata", "MyApp.Address", "MyApp.Query")

    names = EmbeddedScanner(graph).find_input_schema_resources(resources)

    assert names == ["MyApp.Query", "MyApp.Metadata", "MyApp.Address", "MyApp.Owner"]


def test_find_input_schema_resources_without_inputs() -> None:
    graph = _graph()
    assert EmbeddedScanner(graph).find_input_schema_resources(_resources(graph, "MyApp.Owner")) == []


def test_find_input_schema_resources_closes_over_seeds() -> None:
    """Seeded resources pull in what their attributes reference; unknown seeds are ignored."""
    graph = _graph()

    names = EmbeddedScanner(graph).find_input_schema_resources(
        _resources(graph, "MyApp.Owner"), seeds=["MyApp.Query", "MyApp.Missing"]
    )

    assert names == ["MyApp.Query", "MyApp.Owner"]
