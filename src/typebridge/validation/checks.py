# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Verification checks run on a resource graph before code generation.

These checks catch problems that the code generator cannot resolve on its own
because they depend on naming policy: colliding type names, client field
names that collide or are not valid TypeScript identifiers, and roots that
do not exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from typebridge.codegen.embedded_scanner import EmbeddedScanner
from typebridge.codegen.generator import resolve_roots
from typebridge.codegen.helpers import canonical_name
from typebridge.codegen.type_discovery import TypeDiscovery
from typebridge.model.resources import GraphError, ResourceGraph, ResourceNode, TypedStructDef
from typebridge.naming import FieldFormatter
from typebridge.workspace.config import GeneratorConfig

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal issue: generation succeeds but the result may be surprising.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass(frozen=True)
class ValidationError:
    """A fatal issue: the generated types would be wrong or would not compile.

    Attributes:
        message: Human-readable description of the error.
    """

    message: str


@dataclass
class ValidationResult:
    """Result of running the verification checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
        errors: Fatal errors that must be fixed before generating.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any fatal validation errors were found."""
        return len(self.errors) > 0


def validate(graph: ResourceGraph, config: GeneratorConfig | None = None) -> ValidationResult:
    """Run all verification checks for the resources reachable from the configured roots.

    Checks performed:

    1. **Unknown roots** (error): every configured root must be a resource of
       the graph. Later checks are skipped when a root is unknown.

    2. **Duplicate type names** (error): two reachable resources or typed
       structs must not share a client type name.

    3. **Field names** (error): within one resource, formatted client field
       names must be unique; every client name (including rename-table values
       and typed struct fields) must be a valid TypeScript identifier; source
       names containing ``?`` or digits after underscores need an explicit
       rename.

    4. **Unexposed references** (warning, when enabled): standalone resources
       that are reachable from the roots without being roots themselves.

    Args:
        graph: The resource graph to check.
        config: Generator configuration; defaults are used when omitted.

    Returns:
        A :class:`ValidationResult`. An empty result indicates a valid graph.
    """
    config = config or GeneratorConfig()
    warnings: list[ValidationWarning] = []
    errors: list[ValidationError] = []

    roots = resolve_roots(graph, config)
    errors.extend(_check_roots(graph, roots))
    if errors:
        return ValidationResult(warnings=warnings, errors=errors)

    discovery = TypeDiscovery(graph)
    try:
        resources = discovery.discover(roots)
        typed_structs = EmbeddedScanner(graph).find_typed_structs(resources)
    except GraphError as exc:
        errors.append(ValidationError(message=str(exc)))
        return ValidationResult(warnings=warnings, errors=errors)

    formatter = config.formatter()
    prefixes = tuple(config.strip_namespace_prefixes)
    errors.extend(_check_duplicate_type_names(resources, typed_structs, prefixes))
    for resource in resources:
        errors.extend(_check_resource_field_names(graph, resource, formatter))
    for typed_struct in typed_structs:
        errors.extend(_check_typed_struct_field_names(typed_struct, formatter))

    if config.warn_on_unexposed_references:
        warnings.extend(_check_unexposed_references(discovery, roots))

    return ValidationResult(warnings=warnings, errors=errors)


def is_valid_identifier(name: str) -> bool:
    """Return True if *name* is usable as an unquoted TypeScript property name."""
    return _IDENTIFIER.fullmatch(name) is not None


def needs_rename(name: str) -> bool:
    """Return True if a source name cannot round-trip through client formatting."""
    return _NEEDS_RENAME.search(name) is not None


def suggest_name(name: str) -> str:
    """Suggest a source name that round-trips, e.g. ``line_1?`` -> ``line1``."""
    return _NEEDS_RENAME_DIGITS.sub(lambda m: m.group(0).lstrip("_"), name).replace("?", "")


# ################
# Implementation
# ################

_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_NEEDS_RENAME = re.compile(r"_+\d|\?")
_NEEDS_RENAME_DIGITS = re.compile(r"_+\d")


def _check_roots(graph: ResourceGraph, roots: list[str]) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for root in roots:
        if not graph.has_resource(root):
            errors.append(ValidationError(message=f"Root resource '{root}' is not defined in the graph"))
        elif graph.is_embedded(root):
            errors.append(ValidationError(message=f"Root resource '{root}' is embedded and cannot be exposed directly"))
    return errors


def _check_duplicate_type_names(
    resources: list[ResourceNode], typed_structs: list[TypedStructDef], prefixes: tuple[str, ...]
) -> list[ValidationError]:
    owners: dict[str, list[str]] = {}
    for node in [*resources, *typed_structs]:
        owners.setdefault(canonical_name(node, prefixes), []).append(node.name)
    return [
        ValidationError(message=f"Type name '{type_name}' is used by multiple types: {', '.join(names)}")
        for type_name, names in owners.items()
        if len(names) > 1
    ]


def _check_resource_field_names(
    graph: ResourceGraph, resource: ResourceNode, formatter: FieldFormatter
) -> list[ValidationError]:
    errors: list[ValidationError] = []
    seen: dict[str, str] = {}
    for f in graph.public_fields(resource.name):
        client_name = formatter.format_for_client(f.name, resource.field_names)
        if client_name in seen:
            errors.append(
                ValidationError(
                    message=(
                        f"Resource '{resource.name}': fields '{seen[client_name]}' and '{f.name}' "
                        f"both map to client name '{client_name}'"
                    )
                )
            )
        else:
            seen[client_name] = f.name
        errors.extend(_check_name(resource.name, f.name, client_name, resource.field_names))

    errors.extend(_check_renames(resource.name, resource.field_names))
    return errors


def _check_typed_struct_field_names(typed_struct: TypedStructDef, formatter: FieldFormatter) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for record_field in typed_struct.fields:
        client_name = formatter.format_for_client(record_field.name, typed_struct.field_names)
        errors.extend(_check_name(typed_struct.name, record_field.name, client_name, typed_struct.field_names))
    errors.extend(_check_renames(typed_struct.name, typed_struct.field_names))
    return errors


def _check_name(owner: str, source_name: str, client_name: str, renames: dict[str, str]) -> list[ValidationError]:
    if source_name in renames:
        return []
    if needs_rename(source_name):
        return [
            ValidationError(
                message=(
                    f"'{owner}': field '{source_name}' needs an entry in its field name mapping, "
                    f"e.g. '{suggest_name(source_name)}'"
                )
            )
        ]
    if not is_valid_identifier(client_name):
        return [
            ValidationError(
                message=f"'{owner}': client name '{client_name}' of field '{source_name}' is not a valid identifier"
            )
        ]
    return []


def _check_renames(owner: str, renames: dict[str, str]) -> list[ValidationError]:
    return [
        ValidationError(message=f"'{owner}': rename of '{source}' to '{client}' is not a valid identifier")
        for source, client in renames.items()
        if not is_valid_identifier(client)
    ]


def _check_unexposed_references(discovery: TypeDiscovery, roots: list[str]) -> list[ValidationWarning]:
    warnings: list[ValidationWarning] = []
    for resource, paths in discovery.find_unexposed_references(roots).items():
        listing = "; ".join(paths)
        warnings.append(
            ValidationWarning(message=f"Resource '{resource}' is reachable but not a configured root: {listing}")
        )
    return warnings
