"""Tests for servicegen.parser.normalizer."""

from __future__ import annotations

from typing import Any

import pytest

from servicegen.exceptions import SpecParseError
from servicegen.models import OpenApiSpecV3, SpecVersion, SwaggerSpecV2
from servicegen.parser.normalizer import detect_version, normalize_spec, parse_raw_spec


class TestDetectVersion:
    def test_swagger_2(self) -> None:
        assert detect_version({"swagger": "2.0"}) is SpecVersion.V2

    def test_openapi_3(self) -> None:
        assert detect_version({"openapi": "3.0.1"}) is SpecVersion.V3

    def test_missing_marker_is_v3(self) -> None:
        assert detect_version({}) is SpecVersion.V3

    def test_numeric_swagger_field(self) -> None:
        # YAML may parse an unquoted 2.0 as a float
        assert detect_version({"swagger": 2.0}) is SpecVersion.V2


class TestParseRawSpec:
    def test_builds_v2_model(self, swagger_raw: dict[str, Any]) -> None:
        spec = parse_raw_spec(swagger_raw)
        assert isinstance(spec, SwaggerSpecV2)
        assert spec.kind == "v2"

    def test_builds_v3_model(self, openapi_raw: dict[str, Any]) -> None:
        spec = parse_raw_spec(openapi_raw)
        assert isinstance(spec, OpenApiSpecV3)
        assert spec.openapi == "3.0.1"

    def test_numeric_openapi_version_is_stringified(self) -> None:
        assert parse_raw_spec({"openapi": 3.0}).openapi == "3.0"

    @pytest.mark.parametrize("raw", [None, [], "swagger: 2.0", 42])
    def test_non_mapping_raises(self, raw: Any) -> None:
        with pytest.raises(SpecParseError, match="must be a JSON/YAML object"):
            parse_raw_spec(raw)


class TestNormalizeSpec:
    """Uniform (definitions, paths, tags) view over both layouts."""

    def test_v2_definitions(self, swagger_raw: dict[str, Any]) -> None:
        spec = normalize_spec(swagger_raw)
        assert spec.version is SpecVersion.V2
        assert "Page«User»" in spec.definitions
        assert "/users" in spec.paths

    def test_v3_schemas(self, openapi_raw: dict[str, Any]) -> None:
        spec = normalize_spec(openapi_raw)
        assert spec.version is SpecVersion.V3
        assert set(spec.definitions) == {"Pet", "Store", "Result«List«Pet»»"}

    def test_tag_registry_names(self, swagger_raw: dict[str, Any]) -> None:
        assert normalize_spec(swagger_raw).tags == ["user-controller", "order-controller"]

    def test_missing_tags_is_none(self, openapi_raw: dict[str, Any]) -> None:
        assert normalize_spec(openapi_raw).tags is None

    def test_empty_document_degrades_to_empty(self) -> None:
        spec = normalize_spec({"swagger": "2.0"})
        assert spec.definitions == {}
        assert spec.paths == {}
        assert spec.tags is None

    def test_wrongly_typed_collections_degrade(self) -> None:
        spec = normalize_spec(
            {"openapi": "3.0.0", "components": "nope", "paths": [1, 2], "tags": "x"}
        )
        assert spec.definitions == {}
        assert spec.paths == {}
        assert spec.tags is None

    def test_components_without_schemas(self) -> None:
        spec = normalize_spec({"openapi": "3.0.0", "components": {"securitySchemes": {}}})
        assert spec.definitions == {}

    def test_non_dict_definitions_are_dropped(self) -> None:
        spec = normalize_spec(
            {"swagger": "2.0", "definitions": {"User": {"properties": {}}, "Bad": "text"}}
        )
        assert list(spec.definitions) == ["User"]

    def test_tags_without_names_are_skipped(self) -> None:
        spec = normalize_spec({"swagger": "2.0", "tags": [{"name": "a"}, {"description": "b"}, "c"]})
        assert spec.tags == ["a"]
