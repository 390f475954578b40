# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""TypeScript code generation: type translation, reachability, and schema emission."""

from typebridge.codegen.embedded_scanner import EmbeddedScanner
from typebridge.codegen.generator import generate_schemas, generate_typescript
from typebridge.codegen.helpers import Direction, SchemaVariant, canonical_name, schema_name
from typebridge.codegen.resource_schemas import FieldCategory, GeneratedSchema, ResourceSchemaGenerator
from typebridge.codegen.type_discovery import PathSegment, PathTrace, SegmentKind, TypeDiscovery, format_path
from typebridge.codegen.type_mapper import MapperSettings, TypeMapper, UnsupportedTypeError

__all__ = [
    "Direction",
    "EmbeddedScanner",
    "FieldCategory",
    "GeneratedSchema",
    "MapperSettings",
    "PathSegment",
    "PathTrace",
    "ResourceSchemaGenerator",
    "SchemaVariant",
    "SegmentKind",
    "TypeDiscovery",
    "TypeMapper",
    "UnsupportedTypeError",
    "canonical_name",
    "format_path",
    "generate_schemas",
    "generate_typescript",
    "schema_name",
]
