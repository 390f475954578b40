# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""A small TypeScript type AST.

Translation produces these nodes; :mod:`typebridge.codegen.printer` is the only
place that knows the concrete target syntax.
"""

from __future__ import annotations

from dataclasses import dataclass

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class PrimitiveType:
    """A named scalar or alias (``string``, ``UUID``, ``null``, ``never``...)."""

    name: str


@dataclass(frozen=True)
class LiteralType:
    """A single literal: a string or a boolean."""

    value: str | bool


@dataclass(frozen=True)
class LiteralUnionType:
    """A union of string literals; ``never`` when empty."""

    values: tuple[str, ...]


@dataclass(frozen=True)
class ReferenceType:
    """A reference to a named declaration."""

    name: str


@dataclass(frozen=True)
class ArrayType:
    """An array of an element type."""

    element: TypeNode


@dataclass(frozen=True)
class UnionType:
    """A union of arbitrary member types."""

    members: tuple[TypeNode, ...]


@dataclass(frozen=True)
class Property:
    """A property of an object type."""

    name: str
    type: TypeNode
    optional: bool = False


@dataclass(frozen=True)
class ObjectType:
    """An object literal type with ordered properties."""

    properties: tuple[Property, ...] = ()

    def property(self, name: str) -> Property | None:
        """Return the property called *name*, if present."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


TypeNode = PrimitiveType | LiteralType | LiteralUnionType | ReferenceType | ArrayType | UnionType | ObjectType

NULL = PrimitiveType("null")
NEVER = PrimitiveType("never")


def nullable(node: TypeNode) -> UnionType:
    """Return ``node | null``."""
    return UnionType((node, NULL))


def with_array_flag(node: ObjectType) -> ObjectType:
    """Return *node* with ``__array: true`` spliced in as its first property."""
    return ObjectType((Property("__array", LiteralType(True)),) + node.properties)


def tag(name: str) -> Property:
    """Return the ``__type`` discriminant property carrying *name*."""
    return Property("__type", LiteralType(name))
