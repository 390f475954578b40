# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Metadata model for TypeBridge (type descriptors, resources, the resource graph)."""

from typebridge.model.resources import (
    AggregateKind,
    Argument,
    FieldDescriptor,
    FieldOrigin,
    GraphError,
    RelationshipType,
    ResourceGraph,
    ResourceNode,
    TypedStructDef,
)
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

__all__ = [
    # Type descriptors
    "Constraints",
    "PrimitiveDescriptor",
    "ArrayDescriptor",
    "RecordField",
    "StructDescriptor",
    "RecordDescriptor",
    "UnionMember",
    "UnionDescriptor",
    "EnumDescriptor",
    "NewTypeDescriptor",
    "CustomDescriptor",
    "ResourceRefDescriptor",
    "TypeDescriptor",
    # Resources
    "AggregateKind",
    "Argument",
    "FieldDescriptor",
    "FieldOrigin",
    "GraphError",
    "RelationshipType",
    "ResourceGraph",
    "ResourceNode",
    "TypedStructDef",
]
