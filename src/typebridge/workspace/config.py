# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the TypeBridge generator configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from typebridge.codegen.type_mapper import DEFAULT_UNTYPED_MAP_TYPE, MapperSettings
from typebridge.naming import FORMATTER_STYLES, FieldFormatter

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = "typebridge.yaml"


class GeneratorConfigError(Exception):
    """Raised when a generator configuration file is invalid or cannot be loaded."""


@dataclass
class GeneratorConfig:
    """The parsed generator configuration.

    Attributes:
        output_file: Path of the generated TypeScript file.
        root_resources: Resources exposed to the client. Empty means every
            standalone resource of the graph.
        input_schema_resources: Resources that always get an ``InputSchema``.
        field_formatter: Client field-name style.
        untyped_map_type: TypeScript type for records without declared fields.
        type_mapping_overrides: Source type name -> TypeScript type.
        strip_namespace_prefixes: Prefixes removed when deriving type names.
        warn_on_unexposed_references: Whether to warn about reachable
            standalone resources that are not roots.
    """

    output_file: str = "generated.ts"
    root_resources: list[str] = field(default_factory=list)
    input_schema_resources: list[str] = field(default_factory=list)
    field_formatter: str = "camel_case"
    untyped_map_type: str = DEFAULT_UNTYPED_MAP_TYPE
    type_mapping_overrides: dict[str, str] = field(default_factory=dict)
    strip_namespace_prefixes: list[str] = field(default_factory=list)
    warn_on_unexposed_references: bool = True

    def settings(self) -> MapperSettings:
        """Return the read-only translator settings derived from this configuration."""
        return MapperSettings(
            untyped_map_type=self.untyped_map_type,
            type_mapping_overrides=dict(self.type_mapping_overrides),
            strip_namespace_prefixes=tuple(self.strip_namespace_prefixes),
        )

    def formatter(self) -> FieldFormatter:
        """Return the client field-name formatter."""
        return FieldFormatter(self.field_formatter)


def load_generator_config(path: Path) -> GeneratorConfig:
    """Load and parse a generator configuration file.

    Args:
        path: Path to the ``typebridge.yaml`` file.

    Returns:
        A GeneratorConfig populated from the file. Omitted keys keep their defaults.

    Raises:
        GeneratorConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise GeneratorConfigError(f"Generator config file not found: {path}") from None
    except OSError as exc:
        raise GeneratorConfigError(f"Cannot read generator config file: {exc}") from exc

    return _parse_generator_config(text, source_label=str(path))


# ################
# Implementation
# ################

_KNOWN_KEYS = {
    "output-file",
    "root-resources",
    "input-schema-resources",
    "field-formatter",
    "untyped-map-type",
    "type-mapping-overrides",
    "strip-namespace-prefixes",
    "warn-on-unexposed-references",
}


def _parse_generator_config(text: str, source_label: str = "<string>") -> GeneratorConfig:
    """Parse generator config YAML text into a GeneratorConfig.

    An empty document yields the default configuration.

    Raises:
        GeneratorConfigError: If the YAML is invalid or a field has the wrong shape.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise GeneratorConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise GeneratorConfigError(f"{source_label}: generator config must be a YAML mapping")

    unknown = sorted(str(k) for k in data if k not in _KNOWN_KEYS)
    if unknown:
        raise GeneratorConfigError(f"{source_label}: unknown field(s) {', '.join(repr(k) for k in unknown)}")

    config = GeneratorConfig()
    if "output-file" in data:
        config.output_file = _require_string(data, "output-file", source_label)
    if "root-resources" in data:
        config.root_resources = _require_string_list(data, "root-resources", source_label)
    if "input-schema-resources" in data:
        config.input_schema_resources = _require_string_list(data, "input-schema-resources", source_label)
    if "field-formatter" in data:
        style = _require_string(data, "field-formatter", source_label)
        if style not in FORMATTER_STYLES:
            raise GeneratorConfigError(
                f"{source_label}: 'field-formatter' must be one of {', '.join(FORMATTER_STYLES)}, got '{style}'"
            )
        config.field_formatter = style
    if "untyped-map-type" in data:
        config.untyped_map_type = _require_string(data, "untyped-map-type", source_label)
    if "type-mapping-overrides" in data:
        config.type_mapping_overrides = _require_string_mapping(data, "type-mapping-overrides", source_label)
    if "strip-namespace-prefixes" in data:
        config.strip_namespace_prefixes = _require_string_list(data, "strip-namespace-prefixes", source_label)
    if "warn-on-unexposed-references" in data:
        value = data["warn-on-unexposed-references"]
        if not isinstance(value, bool):
            raise GeneratorConfigError(f"{source_label}: 'warn-on-unexposed-references' must be a boolean")
        config.warn_on_unexposed_references = value
    return config


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a string field from a mapping, raising GeneratorConfigError if it is not one."""
    value = mapping[key]
    if not isinstance(value, str):
        raise GeneratorConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _require_string_list(mapping: dict[str, object], key: str, source_label: str) -> list[str]:
    value = mapping[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise GeneratorConfigError(f"{source_label}: '{key}' must be a list of strings")
    return list(value)


def _require_string_mapping(mapping: dict[str, object], key: str, source_label: str) -> dict[str, str]:
    value = mapping[key]
    if not isinstance(value, dict) or not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
        raise GeneratorConfigError(f"{source_label}: '{key}' must be a mapping of strings to strings")
    return dict(value)
