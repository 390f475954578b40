# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generator configuration and graph file loading."""

from typebridge.workspace.config import (
    CONFIG_FILE_NAME,
    GeneratorConfig,
    GeneratorConfigError,
    load_generator_config,
)
from typebridge.workspace.graph_file import GraphFileError, expand_shorthand, load_graph

__all__ = [
    "CONFIG_FILE_NAME",
    "GeneratorConfig",
    "GeneratorConfigError",
    "GraphFileError",
    "expand_shorthand",
    "load_generator_config",
    "load_graph",
]
