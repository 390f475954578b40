# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Find embedded resources, typed structs, and resources that need an input schema."""

from __future__ import annotations

from collections.abc import Iterable

from typebridge.codegen.helpers import unwrap_array, unwrap_new_type, walk_type
from typebridge.model.resources import ResourceGraph, ResourceNode, TypedStructDef
from typebridge.model.types import (
    Constraints,
    ResourceRefDescriptor,
    StructDescriptor,
    TypeDescriptor,
    UnionDescriptor,
)

# ###############
# Public Interface
# ###############


class EmbeddedScanner:
    """Filters a discovered resource set for value types and named composite types."""

    def __init__(self, graph: ResourceGraph) -> None:
        self._graph = graph

    def find_embedded_resources(self, resources: Iterable[ResourceNode]) -> list[ResourceNode]:
        """Return the embedded resources among *resources*, in order."""
        return [r for r in resources if r.embedded]

    def find_typed_structs(self, resources: Iterable[ResourceNode]) -> list[TypedStructDef]:
        """Return the typed structs referenced from public attributes of *resources*.

        A typed struct counts when an attribute's type is one after removing
        new-type wrappers and array layers, or when it is a member of a union
        reached the same way. Each typed struct is returned once.
        """
        found: dict[str, TypedStructDef] = {}
        for resource in resources:
            for attr in self._graph.public_attributes(resource.name):
                for name in self._typed_struct_names(attr.type, attr.constraints):
                    if name not in found:
                        found[name] = self._graph.typed_struct(name)
        return list(found.values())

    def find_input_schema_resources(
        self, resources: Iterable[ResourceNode], seeds: Iterable[str] = ()
    ) -> list[str]:
        """Return the resources that need an ``InputSchema``.

        These are the embedded resources, the resources used in calculation
        argument types and the known resources named in *seeds*, closed over
        the resources that their own attributes reference (an input schema
        refers to the input schemas of nested resources).
        """
        pending = [name for name in seeds if self._graph.has_resource(name)]
        for resource in resources:
            if resource.embedded:
                pending.append(resource.name)
            for calc in self._graph.public_calculations(resource.name):
                for arg in calc.arguments:
                    pending.extend(self._referenced_resources(arg.type, arg.constraints))

        result: dict[str, None] = {}
        while pending:
            name = pending.pop(0)
            if name in result:
                continue
            result[name] = None
            for attr in self._graph.public_attributes(name):
                pending.extend(self._referenced_resources(attr.type, attr.constraints))
        return list(result)

    def _typed_struct_names(self, descriptor: TypeDescriptor | None, constraints: Constraints) -> list[str]:
        base, base_constraints, _ = unwrap_new_type(descriptor, constraints)
        while True:
            base, base_constraints, was_array = unwrap_array(base, base_constraints)
            base, base_constraints, _ = unwrap_new_type(base, base_constraints)
            if not was_array:
                break

        if isinstance(base, UnionDescriptor):
            names = []
            for member in base.members:
                names.extend(self._typed_struct_names(member.type, member.constraints))
            return names
        if (
            isinstance(base, StructDescriptor)
            and base.instance_of is not None
            and self._graph.has_typed_struct(base.instance_of)
        ):
            return [base.instance_of]
        return []

    def _referenced_resources(self, descriptor: TypeDescriptor | None, constraints: Constraints) -> list[str]:
        names = []
        for node, _ in walk_type(self._graph, descriptor, constraints):
            if isinstance(node, ResourceRefDescriptor):
                names.append(node.resource)
            elif (
                isinstance(node, StructDescriptor)
                and node.instance_of is not None
                and self._graph.has_resource(node.instance_of)
            ):
                names.append(node.instance_of)
        return names
