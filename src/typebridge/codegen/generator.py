# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end generation: discovery, schema emission, and file assembly."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from typebridge.codegen.embedded_scanner import EmbeddedScanner
from typebridge.codegen.resource_schemas import GeneratedSchema, ResourceSchemaGenerator
from typebridge.codegen.type_aliases import generate_type_aliases
from typebridge.codegen.type_discovery import TypeDiscovery
from typebridge.codegen.type_mapper import TypeMapper
from typebridge.model.resources import ResourceGraph

if TYPE_CHECKING:
    from typebridge.workspace.config import GeneratorConfig

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

HEADER = "// Generated by typebridge. Do not edit by hand."


def resolve_roots(graph: ResourceGraph, config: GeneratorConfig) -> list[str]:
    """Return the configured roots, or every standalone resource when none are configured."""
    if config.root_resources:
        return list(config.root_resources)
    return [r.name for r in graph.resources if not r.embedded]


def generate_schemas(graph: ResourceGraph, config: GeneratorConfig) -> list[GeneratedSchema]:
    """Generate every schema needed by the resources reachable from the roots.

    Resources are emitted in discovery order. Each resource gets its resource
    and attributes-only schema; embedded resources, resources used as
    calculation argument types, and configured input-schema resources also
    get an input schema.

    Raises:
        UnsupportedTypeError: If a reachable field has an untranslatable type.
        GraphError: If the graph references something it does not define.
    """
    formatter = config.formatter()
    mapper = TypeMapper(graph, formatter, config.settings())

    roots = resolve_roots(graph, config)
    resources = TypeDiscovery(graph).discover(roots)
    allowed = [r.name for r in resources]
    logger.debug("Generating schemas for %d resources reachable from %d roots", len(resources), len(roots))

    input_schema_resources = set(
        EmbeddedScanner(graph).find_input_schema_resources(resources, seeds=config.input_schema_resources)
    )

    generator = ResourceSchemaGenerator(graph, mapper, formatter, allowed)
    schemas: list[GeneratedSchema] = []
    for resource in resources:
        schemas.extend(generator.generate_all_schemas(resource.name, input_schema_resources))
    return schemas


def generate_typescript(graph: ResourceGraph, config: GeneratorConfig) -> str:
    """Generate the complete TypeScript source: header, type aliases, and schemas."""
    schemas = generate_schemas(graph, config)
    resources = TypeDiscovery(graph).discover(resolve_roots(graph, config))
    aliases = generate_type_aliases(graph, resources, config.settings())

    blocks = [HEADER]
    if aliases:
        blocks.append(aliases)
    blocks.extend(s.body for s in schemas)
    return "\n\n".join(blocks) + "\n"
