# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Render the type AST as TypeScript source."""

from __future__ import annotations

import json

from typebridge.codegen.ts_ast import (
    ArrayType,
    LiteralType,
    LiteralUnionType,
    ObjectType,
    PrimitiveType,
    ReferenceType,
    TypeNode,
    UnionType,
)

# ###############
# Public Interface
# ###############


def print_type(node: TypeNode) -> str:
    """Render *node* as an inline TypeScript type expression."""
    if isinstance(node, PrimitiveType):
        return node.name
    if isinstance(node, ReferenceType):
        return node.name
    if isinstance(node, LiteralType):
        return _print_literal(node.value)
    if isinstance(node, LiteralUnionType):
        if not node.values:
            return "never"
        return " | ".join(_print_literal(v) for v in node.values)
    if isinstance(node, ArrayType):
        return f"Array<{print_type(node.element)}>"
    if isinstance(node, UnionType):
        return " | ".join(print_type(m) for m in node.members)
    if isinstance(node, ObjectType):
        if not node.properties:
            return "{}"
        body = " ".join(f"{_print_property_head(p.name, p.optional)}: {print_type(p.type)};" for p in node.properties)
        return f"{{ {body} }}"
    raise TypeError(f"Cannot print {node!r}")


def print_declaration(name: str, node: TypeNode) -> str:
    """Render ``export type <name> = ...;``, one property per line for object types."""
    if isinstance(node, ObjectType) and node.properties:
        lines = [f"export type {name} = {{"]
        for prop in node.properties:
            lines.append(f"  {_print_property_head(prop.name, prop.optional)}: {print_type(prop.type)};")
        lines.append("};")
        return "\n".join(lines)
    return f"export type {name} = {print_type(node)};"


# ################
# Implementation
# ################


def _print_literal(value: str | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value)


def _print_property_head(name: str, optional: bool) -> str:
    return f"{name}?" if optional else name
