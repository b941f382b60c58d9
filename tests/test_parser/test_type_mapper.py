"""Tests for servicegen.parser.type_mapper."""

from __future__ import annotations

from typing import Any

import pytest

from servicegen.parser.type_mapper import enum_type, map_type, ref_name, schema_type


class TestPrimitives:
    @pytest.mark.parametrize(
        "kind", ["int64", "integer", "long", "float", "double", "number", "int", "int32"]
    )
    def test_number_kinds(self, kind: str) -> None:
        assert map_type({"type": kind}) == "number"

    @pytest.mark.parametrize("kind", ["Date", "date", "dateTime", "date-time", "datetime"])
    def test_date_kinds_are_strings(self, kind: str) -> None:
        assert map_type({"type": kind}) == "string"

    @pytest.mark.parametrize("kind", ["string", "email", "password", "url", "byte", "binary"])
    def test_string_kinds(self, kind: str) -> None:
        assert map_type({"type": kind}) == "string"

    def test_boolean(self) -> None:
        assert map_type({"type": "boolean"}) == "boolean"

    def test_string_enum_becomes_literal_union(self) -> None:
        assert map_type({"type": "string", "enum": ["admin", "member"]}) == "('admin' | 'member')"

    def test_empty_enum_is_plain_string(self) -> None:
        assert map_type({"type": "string", "enum": []}) == "string"

    def test_openapi_31_type_list(self) -> None:
        assert map_type({"type": ["integer", "null"]}) == "number"
        assert map_type({"type": ["null"]}) == "any"


class TestReferencesAndContainers:
    def test_reference(self) -> None:
        assert map_type({"$ref": "#/definitions/User"}) == "User"

    def test_generic_reference(self) -> None:
        assert map_type({"$ref": "#/definitions/Page«List«User»»"}) == "Page<List<User>>"

    def test_original_ref_without_ref(self) -> None:
        assert map_type({"originalRef": "Page«User»"}) == "Page<User>"

    def test_reference_in_generic_context(self) -> None:
        assert map_type({"$ref": "#/definitions/User"}, has_generics=True) == "T"

    def test_object_with_reference(self) -> None:
        assert map_type({"type": "object", "$ref": "#/definitions/User"}) == "User"

    def test_plain_object_is_any(self) -> None:
        assert map_type({"type": "object"}) == "any"

    def test_object_in_generic_context(self) -> None:
        assert map_type({"type": "object"}, has_generics=True) == "T"

    def test_array_of_references(self) -> None:
        node = {"type": "array", "items": {"$ref": "#/definitions/User"}}
        assert map_type(node) == "User[]"

    def test_array_in_generic_context(self) -> None:
        node = {"type": "array", "items": {"$ref": "#/definitions/User"}}
        assert map_type(node, has_generics=True) == "T[]"

    def test_array_without_items(self) -> None:
        assert map_type({"type": "array"}) == "any[]"

    def test_nested_arrays(self) -> None:
        node = {"type": "array", "items": {"type": "array", "items": {"type": "integer"}}}
        assert map_type(node) == "number[][]"


class TestParameterWrappers:
    def test_schema_wrapper(self) -> None:
        assert map_type({"name": "id", "in": "path", "schema": {"type": "integer"}}) == "number"

    def test_exploded_parameter_is_array(self) -> None:
        node = {"name": "tags", "in": "query", "explode": True, "schema": {"type": "string"}}
        assert map_type(node) == "string[]"

    def test_swagger2_inline_parameter(self) -> None:
        assert map_type({"name": "page", "in": "query", "type": "integer"}) == "number"


class TestTotality:
    """Unknown or malformed input always degrades to ``any``."""

    @pytest.mark.parametrize(
        "node",
        [None, {}, "string", 42, [], {"type": "file"}, {"type": 7}, {"description": "x"}],
    )
    def test_degrades_to_any(self, node: Any) -> None:
        assert map_type(node) == "any"

    def test_no_arguments(self) -> None:
        assert map_type() == "any"


class TestHelpers:
    def test_ref_name_unescapes_pointer(self) -> None:
        assert ref_name({"$ref": "#/components/schemas/a~1b~0c"}) == "a/b~c"

    def test_ref_name_missing(self) -> None:
        assert ref_name({"type": "string"}) is None
        assert ref_name("User") is None

    def test_schema_type(self) -> None:
        assert schema_type({"type": "string"}) == "string"
        assert schema_type({}) is None

    def test_enum_type(self) -> None:
        assert enum_type([1, 2]) == "('1' | '2')"
