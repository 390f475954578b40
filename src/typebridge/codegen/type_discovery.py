# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reachability analysis over the resource graph.

Starting from a set of root resources, every public attribute, calculation
(return and argument types), aggregate, and relationship is followed, along
with union members, array items, record fields, new-type subtypes, and typed
struct fields. Each pass owns an insertion-ordered arena keyed by resource
name: a resource is scanned on first sight only, which guarantees termination
on self-referential and mutually recursive graphs. The arena doubles as the
result table and records every path that led to a resource.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from typebridge.codegen.helpers import item_constraints, resolve_aggregate_field
from typebridge.model.resources import FieldDescriptor, FieldOrigin, ResourceGraph, ResourceNode
from typebridge.model.types import (
    ArrayDescriptor,
    Constraints,
    NewTypeDescriptor,
    RecordDescriptor,
    RecordField,
    ResourceRefDescriptor,
    StructDescriptor,
    TypeDescriptor,
    UnionDescriptor,
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class SegmentKind(Enum):
    """The step a path segment records."""

    ROOT = "root"
    ATTRIBUTE = "attribute"
    CALCULATION = "calculation"
    ARGUMENT = "argument"
    AGGREGATE = "aggregate"
    RELATIONSHIP = "relationship"
    RELATIONSHIP_PATH = "relationship_path"
    UNION_MEMBER = "union_member"
    ARRAY_ITEMS = "array_items"
    MAP_FIELD = "map_field"


@dataclass(frozen=True)
class PathSegment:
    """One step of the path by which a resource was reached."""

    kind: SegmentKind
    name: str = ""


# Diagnostic only: paths never influence deduplication or generation.
PathTrace = tuple[PathSegment, ...]


class TypeDiscovery:
    """Finds every resource reachable from a set of roots."""

    def __init__(self, graph: ResourceGraph) -> None:
        self._graph = graph

    def discover(self, roots: Iterable[str]) -> list[ResourceNode]:
        """Return the deduplicated closure of *roots*, roots included, in discovery order."""
        arena = self._run(roots)
        logger.debug("Discovered %d resources", len(arena))
        return [self._graph.resource(name) for name in arena]

    def discover_with_paths(self, roots: Iterable[str]) -> dict[str, list[PathTrace]]:
        """Return every reachable resource with all paths that reached it."""
        return self._run(roots)

    def find_referenced_resources(self, resource: str) -> list[str]:
        """Return the resources reachable from *resource* through at least one field."""
        arena = self._run([resource])
        return [name for name, paths in arena.items() if any(len(p) > 1 for p in paths)]

    def traverse_type(self, descriptor: TypeDescriptor | None, constraints: Constraints | None = None) -> list[str]:
        """Return the resources reachable from a single type descriptor."""
        discovery = _DiscoveryPass(self._graph)
        discovery.traverse_type(descriptor, constraints or {}, ())
        return list(discovery.arena)

    def find_unexposed_references(self, roots: Iterable[str]) -> dict[str, list[str]]:
        """Return standalone resources reachable from *roots* that are not roots themselves.

        Returns:
            Resource name -> sorted, distinct formatted paths, ordered by name.
        """
        root_names = list(roots)
        arena = self._run(root_names)
        unexposed: dict[str, list[str]] = {}
        for name in sorted(arena):
            if name in root_names or self._graph.is_embedded(name):
                continue
            unexposed[name] = sorted({format_path(p) for p in arena[name]})
        return unexposed

    def _run(self, roots: Iterable[str]) -> dict[str, list[PathTrace]]:
        discovery = _DiscoveryPass(self._graph)
        for root in roots:
            discovery.enter(root, (PathSegment(SegmentKind.ROOT, root),))
        return discovery.arena


def format_path(trace: PathTrace) -> str:
    """Render *trace* as ``Todo -> metadata -> (union member: text)``."""
    return " -> ".join(_format_segment(s) for s in trace)


# ################
# Implementation
# ################


class _DiscoveryPass:
    """State of a single traversal: the resource arena and the typed structs already expanded."""

    def __init__(self, graph: ResourceGraph) -> None:
        self._graph = graph
        self.arena: dict[str, list[PathTrace]] = {}
        self._expanded_structs: set[str] = set()

    def enter(self, resource: str, path: PathTrace) -> None:
        first_sight = resource not in self.arena
        self.arena.setdefault(resource, []).append(path)
        if first_sight:
            self._scan_resource(resource, path)

    def traverse_type(self, descriptor: TypeDescriptor | None, constraints: Constraints, path: PathTrace) -> None:
        if descriptor is None:
            return
        if isinstance(descriptor, ArrayDescriptor):
            self.traverse_type(
                descriptor.inner, item_constraints(constraints), path + (PathSegment(SegmentKind.ARRAY_ITEMS),)
            )
        elif isinstance(descriptor, NewTypeDescriptor):
            self.traverse_type(descriptor.subtype, {**constraints, **descriptor.constraints}, path)
        elif isinstance(descriptor, ResourceRefDescriptor):
            self.enter(descriptor.resource, path)
        elif isinstance(descriptor, StructDescriptor):
            self._traverse_struct(descriptor, path)
        elif isinstance(descriptor, RecordDescriptor):
            if descriptor.fields is not None:
                self._traverse_fields(descriptor.fields, path)
        elif isinstance(descriptor, UnionDescriptor):
            for member in descriptor.members:
                self.traverse_type(
                    member.type, member.constraints, path + (PathSegment(SegmentKind.UNION_MEMBER, member.name),)
                )

    def _scan_resource(self, resource: str, path: PathTrace) -> None:
        for field in self._graph.public_fields(resource):
            if field.origin is FieldOrigin.ATTRIBUTE:
                attr_path = path + (PathSegment(SegmentKind.ATTRIBUTE, field.name),)
                self.traverse_type(field.type, field.constraints, attr_path)
            elif field.origin is FieldOrigin.CALCULATION:
                calc_path = path + (PathSegment(SegmentKind.CALCULATION, field.name),)
                self.traverse_type(field.type, field.constraints, calc_path)
                for arg in field.arguments:
                    arg_path = calc_path + (PathSegment(SegmentKind.ARGUMENT, arg.name),)
                    self.traverse_type(arg.type, arg.constraints, arg_path)
            elif field.origin is FieldOrigin.AGGREGATE:
                self._scan_aggregate(resource, field, path)
            elif field.destination is not None:
                self.enter(field.destination, path + (PathSegment(SegmentKind.RELATIONSHIP, field.name),))

    def _scan_aggregate(self, resource: str, aggregate: FieldDescriptor, path: PathTrace) -> None:
        kind = aggregate.aggregate_kind
        if kind is None or not kind.reads_field:
            return
        if aggregate.aggregate_field is None or not aggregate.relationship_path:
            return
        target = resolve_aggregate_field(
            self._graph, resource, aggregate.relationship_path, aggregate.aggregate_field
        )
        if target is None:
            return
        agg_path = path + (
            PathSegment(SegmentKind.AGGREGATE, aggregate.name),
            PathSegment(SegmentKind.RELATIONSHIP_PATH, " -> ".join(aggregate.relationship_path)),
        )
        self.traverse_type(target.type, target.constraints, agg_path)

    def _traverse_struct(self, descriptor: StructDescriptor, path: PathTrace) -> None:
        instance_of = descriptor.instance_of
        if instance_of is not None and self._graph.has_resource(instance_of):
            self.enter(instance_of, path)
            return
        if descriptor.fields is not None:
            self._traverse_fields(descriptor.fields, path)
            return
        if instance_of is not None and self._graph.has_typed_struct(instance_of):
            # Typed structs may nest themselves; expand each once per pass.
            if instance_of in self._expanded_structs:
                return
            self._expanded_structs.add(instance_of)
            self._traverse_fields(self._graph.typed_struct(instance_of).fields, path)

    def _traverse_fields(self, fields: list[RecordField], path: PathTrace) -> None:
        for record_field in fields:
            self.traverse_type(
                record_field.type,
                record_field.constraints,
                path + (PathSegment(SegmentKind.MAP_FIELD, record_field.name),),
            )


def _format_segment(segment: PathSegment) -> str:
    if segment.kind is SegmentKind.ROOT:
        return segment.name.replace("::", ".").split(".")[-1]
    if segment.kind is SegmentKind.UNION_MEMBER:
        return f"(union member: {segment.name})"
    if segment.kind is SegmentKind.ARRAY_ITEMS:
        return "[]"
    if segment.kind is SegmentKind.ARGUMENT:
        return f"(argument: {segment.name})"
    if segment.kind is SegmentKind.RELATIONSHIP_PATH:
        return f"(via relationships: {segment.name})"
    return segment.name
