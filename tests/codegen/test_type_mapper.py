# Copyright 2026 TypeBridge Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for translating type descriptors into TypeScript types."""

import pytest

from typebridge.codegen.helpers import Direction
from typebridge.codegen.ts_ast import LiteralUnionType, ObjectType, ReferenceType
from typebridge.codegen.type_mapper import MapperSettings, TypeMapper, UnsupportedTypeError, is_primitive_member
from typebridge.model import (
    ArrayDescriptor,
    CustomDescriptor,
    EnumDescriptor,
    NewTypeDescriptor,
    PrimitiveDescriptor,
    RecordDescriptor,
    RecordField,
    ResourceGraph,
    ResourceNode,
    ResourceRefDescriptor,
    StructDescriptor,
    TypedStructDef,
    UnionDescriptor,
    UnionMember,
)
from typebridge.naming import FieldFormatter

# ###############
# Test Helpers
# ###############


def _prim(name: str) -> PrimitiveDescriptor:
    return PrimitiveDescriptor(name=name)


def _field(name: str, descriptor, nullable: bool = False) -> RecordField:
    return RecordField(name=name, type=descriptor, nullable=nullable)


def _graph() -> ResourceGraph:
    return ResourceGraph(
        resources=[
            ResourceNode(name="MyApp.Todo", display_name="Todo"),
            ResourceNode(name="MyApp.Address", display_name="Address", embedded=True),
        ],
        typed_structs=[
            TypedStructDef(
                name="MyApp.Point",
                fields=[_field("x", _prim("integer")), _field("y", _prim("integer"), nullable=True)],
                field_names={"x": "xCoord"},
            )
        ],
    )


def _mapper(**settings) -> TypeMapper:
    return TypeMapper(_graph(), FieldFormatter("camel_case"), MapperSettings(**settings))


def _content_union() -> UnionDescriptor:
    return UnionDescriptor(
        members=[
            UnionMember(name="text", type=_prim("string")),
            UnionMember(name="image", type=RecordDescriptor(fields=[_field("url", _prim("string"))])),
        ]
    )


# ###############
# Primitives
# ###############


class TestPrimitives:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("string", "string"),
            ("ci_string", "string"),
            ("integer", "number"),
            ("float", "number"),
            ("boolean", "boolean"),
            ("decimal", "Decimal"),
            ("uuid", "UUID"),
            ("uuid_v7", "UUIDv7"),
            ("date", "IsoDate"),
            ("utc_datetime", "UtcDateTime"),
            ("utc_datetime_usec", "UtcDateTimeUsec"),
            ("naive_datetime", "NaiveDateTime"),
            ("binary", "Binary"),
            ("term", "any"),
            ("money", "Money"),
            ("atom", "string"),
            ("ltree", "LtreeFlexible"),
        ],
    )
    def test_primitive_table(self, name: str, expected: str) -> None:
        assert _mapper().render(_prim(name)) == expected

    def test_nil_maps_to_null(self) -> None:
        assert _mapper().render(None) == "null"

    def test_atom_with_one_of_becomes_literal_union(self) -> None:
        assert _mapper().render(_prim("atom"), {"one_of": ["low", "high"]}) == '"low" | "high"'

    def test_ltree_with_escape_uses_array_alias(self) -> None:
        assert _mapper().render(_prim("ltree"), {"escape?": True}) == "LtreeArray"

    def test_untyped_container_primitives_use_placeholder(self) -> None:
        assert _mapper().render(_prim("map")) == "Record<string, any>"

    def test_unknown_primitive_is_fatal(self) -> None:
        with pytest.raises(UnsupportedTypeError, match="no_such_type"):
            _mapper().render(_prim("no_such_type"))


# ###############
# Arrays and New Types
# ###############


class TestArraysAndNewTypes:
    def test_array_of_primitive(self) -> None:
        assert _mapper().render(ArrayDescriptor(inner=_prim("uuid"))) == "Array<UUID>"

    def test_array_passes_item_constraints(self) -> None:
        descriptor = ArrayDescriptor(inner=_prim("atom"))
        assert _mapper().render(descriptor, {"items": {"one_of": ["a", "b"]}}) == 'Array<"a" | "b">'

    def test_malformed_item_constraints_degrade_to_empty(self) -> None:
        descriptor = ArrayDescriptor(inner=_prim("atom"))
        assert _mapper().render(descriptor, {"items": "not-a-mapping"}) == "Array<string>"

    def test_new_type_name_is_matched_before_unwrapping(self) -> None:
        """A more specific alias is kept even when declared as a subtype of a generic one."""
        descriptor = NewTypeDescriptor(name="utc_datetime_usec", subtype=_prim("utc_datetime"))
        assert _mapper().render(descriptor) == "UtcDateTimeUsec"

    def test_opaque_new_type_unwraps_to_subtype(self) -> None:
        descriptor = NewTypeDescriptor(name="MyApp.Slug", subtype=_prim("string"))
        assert _mapper().render(descriptor) == "string"

    def test_new_type_constraints_apply_to_subtype(self) -> None:
        descriptor = NewTypeDescriptor(
            name="MyApp.Status", subtype=_prim("atom"), constraints={"one_of": ["open", "closed"]}
        )
        assert _mapper().render(descriptor) == '"open" | "closed"'

    def test_new_type_named_like_a_primitive_reads_its_own_constraints(self) -> None:
        atom = NewTypeDescriptor(name="atom", subtype=_prim("string"), constraints={"one_of": ["a", "b"]})
        ltree = NewTypeDescriptor(name="ltree", subtype=_prim("string"), constraints={"escape?": True})

        assert _mapper().render(atom) == '"a" | "b"'
        assert _mapper().render(ltree) == "LtreeArray"

    def test_new_type_rename_table_applies_to_record_fields(self) -> None:
        descriptor = NewTypeDescriptor(
            name="MyApp.Meta",
            subtype=RecordDescriptor(fields=[_field("user_id", _prim("uuid"))]),
            field_names={"user_id": "uid"},
        )
        assert _mapper().render(descriptor) == '{ __type: "TypedMap"; __primitiveFields: "uid"; uid: UUID; }'


# ###############
# Overrides and Custom Types
# ###############


def test_override_by_custom_type_name() -> None:
    mapper = _mapper(type_mapping_overrides={"MyApp.Color": "ColorString"})
    assert mapper.render(CustomDescriptor(name="MyApp.Color")) == "ColorString"


def test_override_wins_over_primitive_table() -> None:
    mapper = _mapper(type_mapping_overrides={"uuid": "string"})
    assert mapper.render(_prim("uuid")) == "string"


def test_override_by_enum_name() -> None:
    mapper = _mapper(type_mapping_overrides={"MyApp.Priority": "Priority"})
    assert mapper.render(EnumDescriptor(name="MyApp.Priority", values=["low"])) == "Priority"


def test_custom_type_with_display_name() -> None:
    assert _mapper().render(CustomDescriptor(name="MyApp.Point", display_name="PointTuple")) == "PointTuple"


def test_custom_type_without_display_name_is_fatal() -> None:
    with pytest.raises(UnsupportedTypeError, match="MyApp.Opaque"):
        _mapper().render(CustomDescriptor(name="MyApp.Opaque"))


def test_enum_becomes_literal_union() -> None:
    assert _mapper().render(EnumDescriptor(values=["low", "high"])) == '"low" | "high"'
    assert _mapper().render(EnumDescriptor(values=[])) == "never"


# ###############
# Resource References
# ###############


class TestResourceReferences:
    def test_reference_is_direction_sensitive(self) -> None:
        ref = ResourceRefDescriptor(resource="MyApp.Address")
        mapper = _mapper()

        output = mapper.map_type(ref, {}, Direction.OUTPUT)
        input_ = mapper.map_type(ref, {}, Direction.INPUT)

        assert output == ReferenceType("AddressResourceSchema")
        assert input_ == ReferenceType("AddressInputSchema")
        assert output != input_

    def test_struct_instance_of_resource_is_a_reference(self) -> None:
        descriptor = StructDescriptor(instance_of="MyApp.Todo")
        assert _mapper().render(descriptor) == "TodoResourceSchema"

    def test_array_of_embedded_resource(self) -> None:
        descriptor = ArrayDescriptor(inner=ResourceRefDescriptor(resource="MyApp.Address"))
        assert _mapper().render(descriptor, {}, Direction.INPUT) == "Array<AddressInputSchema>"

    def test_unknown_resource_is_fatal(self) -> None:
        with pytest.raises(UnsupportedTypeError, match="MyApp.Ghost"):
            _mapper().render(ResourceRefDescriptor(resource="MyApp.Ghost"))

    def test_unknown_struct_instance_is_fatal(self) -> None:
        with pytest.raises(UnsupportedTypeError, match="MyApp.Ghost"):
            _mapper().render(StructDescriptor(instance_of="MyApp.Ghost"))


# ###############
# Records
# ###############


class TestRecords:
    def _record(self) -> RecordDescriptor:
        nested = RecordDescriptor(fields=[_field("a", _prim("integer"))])
        return RecordDescriptor(
            fields=[
                _field("first_name", _prim("string")),
                _field("nested", nested),
                _field("note", _prim("string"), nullable=True),
            ]
        )

    def test_output_record_carries_metadata(self) -> None:
        assert _mapper().render(self._record()) == (
            '{ __type: "TypedMap"; __primitiveFields: "firstName" | "note"; firstName: string; '
            'nested: { __type: "TypedMap"; __primitiveFields: "a"; a: number; }; note: string | null; }'
        )

    def test_input_record_has_no_metadata(self) -> None:
        assert _mapper().render(self._record(), {}, Direction.INPUT) == (
            "{ firstName: string; nested: { a: number; }; note: string | null; }"
        )

    def test_record_without_fields_uses_placeholder(self) -> None:
        assert _mapper().render(RecordDescriptor()) == "Record<string, any>"
        assert _mapper(untyped_map_type="unknown").render(RecordDescriptor(container="keyword")) == "unknown"

    def test_struct_without_fields_uses_placeholder(self) -> None:
        assert _mapper().render(StructDescriptor()) == "Record<string, any>"

    def test_record_with_no_primitive_fields(self) -> None:
        nested = RecordDescriptor(fields=[_field("a", _prim("integer"))])
        descriptor = RecordDescriptor(fields=[_field("inner", nested)])
        node = _mapper().map_type(descriptor)
        assert isinstance(node, ObjectType)
        assert node.property("__primitiveFields").type == LiteralUnionType(())

    def test_typed_struct_uses_registered_fields_and_renames(self) -> None:
        descriptor = StructDescriptor(instance_of="MyApp.Point")
        assert _mapper().render(descriptor) == (
            '{ __type: "TypedMap"; __primitiveFields: "xCoord" | "y"; xCoord: number; y: number | null; }'
        )

    def test_field_formatter_is_applied(self) -> None:
        mapper = TypeMapper(_graph(), FieldFormatter("snake_case"))
        descriptor = RecordDescriptor(fields=[_field("first_name", _prim("string"))])
        assert mapper.render(descriptor, {}, Direction.INPUT) == "{ first_name: string; }"


# ###############
# Unions
# ###############


class TestUnions:
    def test_output_union_has_optional_members_and_metadata(self) -> None:
        assert _mapper().render(_content_union()) == (
            '{ __type: "Union"; __primitiveFields: "text"; text?: string; '
            'image?: { __type: "TypedMap"; __primitiveFields: "url"; url: string; }; }'
        )

    def test_input_union_is_discriminated_by_member_key(self) -> None:
        assert _mapper().render(_content_union(), {}, Direction.INPUT) == (
            "{ text: string; } | { image: { url: string; }; }"
        )

    def test_single_member_input_union(self) -> None:
        descriptor = UnionDescriptor(members=[UnionMember(name="text", type=_prim("string"))])
        assert _mapper().render(descriptor, {}, Direction.INPUT) == "{ text: string; }"

    def test_empty_union(self) -> None:
        assert _mapper().render(UnionDescriptor(), {}, Direction.INPUT) == "never"
        assert _mapper().render(UnionDescriptor()) == '{ __type: "Union"; __primitiveFields: never; }'

    def test_embedded_member_references_its_schema(self) -> None:
        descriptor = UnionDescriptor(
            members=[
                UnionMember(name="home", type=ResourceRefDescriptor(resource="MyApp.Address")),
                UnionMember(name="note", type=_prim("string")),
            ]
        )
        assert _mapper().render(descriptor) == (
            '{ __type: "Union"; __primitiveFields: "note"; home?: AddressResourceSchema; note?: string; }'
        )


# ###############
# Primitive Members
# ###############


def test_is_primitive_member() -> None:
    assert is_primitive_member(_prim("string"), {})
    assert is_primitive_member(ArrayDescriptor(inner=_prim("string")), {})
    assert is_primitive_member(RecordDescriptor(), {})
    assert is_primitive_member(EnumDescriptor(values=["a"]), {})
    assert not is_primitive_member(RecordDescriptor(fields=[]), {})
    assert not is_primitive_member(ResourceRefDescriptor(resource="MyApp.Address"), {})
    assert not is_primitive_member(ArrayDescriptor(inner=_content_union()), {})
    assert not is_primitive_member(NewTypeDescriptor(name="MyApp.Content", subtype=_content_union()), {})
