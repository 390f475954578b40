# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Client field-name formatting.

Code generation never decides how a property is spelled on the client; it
asks a :class:`FieldFormatter`. A per-resource rename table takes precedence
and its values are used verbatim, without further formatting.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping

# ###############
# Public Interface
# ###############

FORMATTER_STYLES = ("camel_case", "pascal_case", "snake_case")


class FieldFormatter:
    """Formats source field names for client consumption.

    Args:
        style: One of :data:`FORMATTER_STYLES`, or a callable mapping a source
            name to a client name.

    Raises:
        ValueError: If *style* is an unknown style name.
    """

    def __init__(self, style: str | Callable[[str], str] = "camel_case") -> None:
        if callable(style):
            self._format = style
        elif style == "camel_case":
            self._format = snake_to_camel_case
        elif style == "pascal_case":
            self._format = snake_to_pascal_case
        elif style == "snake_case":
            self._format = _identity
        else:
            raise ValueError(f"Unknown field formatter '{style}'; expected one of {', '.join(FORMATTER_STYLES)}")

    def format_field(self, name: str) -> str:
        """Format *name* with the configured style."""
        return self._format(name)

    def format_for_client(self, name: str, rename_table: Mapping[str, str] | None = None) -> str:
        """Return the client name of *name*, honouring *rename_table* first."""
        if rename_table and name in rename_table:
            return rename_table[name]
        return self._format(name)


def snake_to_camel_case(name: str) -> str:
    """Convert ``user_name`` to ``userName``."""
    parts = name.split("_")
    return parts[0].lower() + "".join(p.capitalize() for p in parts[1:])


def snake_to_pascal_case(name: str) -> str:
    """Convert ``user_name`` to ``UserName``."""
    return "".join(p.capitalize() for p in name.split("_"))


def camel_to_snake_case(name: str) -> str:
    """Convert ``userName2Fa`` to ``user_name_2_fa``."""
    result = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    result = re.sub(r"([a-z])(\d+)", r"\1_\2", result)
    result = re.sub(r"(\d+)([a-zA-Z])", r"\1_\2", result)
    result = re.sub(r"([A-Z])(\d+)", r"\1_\2", result)
    return result.lower()


# ################
# Implementation
# ################


def _identity(name: str) -> str:
    return name
