# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Source type descriptors for the TypeBridge metadata graph."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

# Free-form constraints as reported by the host framework (e.g. ``items``,
# ``one_of``, ``escape?``). Unknown keys are carried through untouched.
Constraints = dict[str, Any]


class PrimitiveDescriptor(BaseModel):
    """A scalar type known by name (``string``, ``uuid``, ``utc_datetime_usec``...)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["primitive"] = "primitive"
    name: str


class ArrayDescriptor(BaseModel):
    """A homogeneous array of an inner type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["array"] = "array"
    inner: TypeDescriptor


class RecordField(BaseModel):
    """One named entry of a record or struct field list."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeDescriptor | None = None
    constraints: Constraints = _Field(default_factory=dict)
    nullable: bool = True


class StructDescriptor(BaseModel):
    """A struct, optionally an instance of a resource or a named typed struct."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["struct"] = "struct"
    instance_of: str | None = None
    fields: list[RecordField] | None = None


class RecordDescriptor(BaseModel):
    """An ad hoc map, keyword list, or tuple with an optional field list."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["record"] = "record"
    container: Literal["map", "keyword", "tuple"] = "map"
    fields: list[RecordField] | None = None


class UnionMember(BaseModel):
    """A named member of a tagged union."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeDescriptor | None = None
    constraints: Constraints = _Field(default_factory=dict)


class UnionDescriptor(BaseModel):
    """A tagged union; exactly one member is populated at runtime."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["union"] = "union"
    members: list[UnionMember] = _Field(default_factory=list)


class EnumDescriptor(BaseModel):
    """An enumeration of string values."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    name: str | None = None
    values: list[str] = _Field(default_factory=list)


class NewTypeDescriptor(BaseModel):
    """A renaming or subtyping wrapper around another type.

    Attributes:
        name: The wrapper's own type name (looked up in the primitive table
            before the wrapper is unwrapped).
        subtype: The wrapped type.
        constraints: Constraints the wrapper imposes on its subtype.
        field_names: Optional client-name table for record subtypes.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["new_type"] = "new_type"
    name: str
    subtype: TypeDescriptor
    constraints: Constraints = _Field(default_factory=dict)
    field_names: dict[str, str] | None = None


class CustomDescriptor(BaseModel):
    """An opaque custom type; only usable when it declares a display name."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["custom"] = "custom"
    name: str
    display_name: str | None = None


class ResourceRefDescriptor(BaseModel):
    """A direct reference to a resource by qualified name."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["resource"] = "resource"
    resource: str


# A source type descriptor. The `kind` discriminator guarantees that exactly
# one variant is active per descriptor.
TypeDescriptor = Annotated[
    PrimitiveDescriptor
    | ArrayDescriptor
    | StructDescriptor
    | RecordDescriptor
    | UnionDescriptor
    | EnumDescriptor
    | NewTypeDescriptor
    | CustomDescriptor
    | ResourceRefDescriptor,
    _Field(discriminator="kind"),
]


# Resolve forward references for models that use TypeDescriptor.
ArrayDescriptor.model_rebuild()
RecordField.model_rebuild()
StructDescriptor.model_rebuild()
RecordDescriptor.model_rebuild()
UnionMember.model_rebuild()
UnionDescriptor.model_rebuild()
NewTypeDescriptor.model_rebuild()
