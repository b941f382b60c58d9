"""Tests for the built-in format plugins."""

from __future__ import annotations

import pytest

from servicegen.models import OpenApiModel
from servicegen.plugins import PluginRegistry
from servicegen.plugins.formatters import (
    IdAsStringPlugin,
    OperationSuffixPlugin,
    TagRenamePlugin,
    strip_operation_suffix,
)


def _format(model: OpenApiModel, *plugins, options=None) -> OpenApiModel:
    registry = PluginRegistry()
    for plugin in plugins:
        registry.use(plugin, (options or {}).get(plugin.name))
    return registry.get_hook_runner().run_format(model)


class TestStripOperationSuffix:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("getUserUsingGET", "getUser"),
            ("getUserUsingGET_1", "getUser"),
            ("saveUsingPOST_12", "save"),
            ("listUsers_2", "listUsers"),
            ("listUsers", "listUsers"),
            ("UsingGET", "UsingGET"),
        ],
    )
    def test_strip(self, name: str, expected: str) -> None:
        assert strip_operation_suffix(name) == expected


class TestOperationSuffixPlugin:
    def test_renames_all_apis(self, swagger_model: OpenApiModel) -> None:
        formatted = _format(swagger_model, OperationSuffixPlugin())
        assert [a.name for a in formatted.apis][:4] == [
            "listUsers",
            "createUser",
            "getUser",
            "deleteUser",
        ]


class TestTagRenamePlugin:
    def test_mapping_from_constructor(self, swagger_model: OpenApiModel) -> None:
        formatted = _format(swagger_model, TagRenamePlugin({"user-controller": "user"}))
        assert {a.tag for a in formatted.apis} == {"user", "order-controller"}

    def test_mapping_from_options(self, swagger_model: OpenApiModel) -> None:
        formatted = _format(
            swagger_model,
            TagRenamePlugin(),
            options={"tag-rename": {"mapping": {"order-controller": "order"}}},
        )
        assert {a.tag for a in formatted.apis} == {"user-controller", "order"}


class TestIdAsStringPlugin:
    def test_narrows_type_fields(self, swagger_model: OpenApiModel) -> None:
        formatted = _format(swagger_model, IdAsStringPlugin())
        order = next(t for t in formatted.types if t.name == "Order")
        assert {p.name: p.type for p in order.params} == {
            "id": "string",
            "userId": "string",
            "items": "string[]",
        }

    def test_narrows_request_params(self, swagger_model: OpenApiModel) -> None:
        formatted = _format(swagger_model, IdAsStringPlugin())
        get_user = next(a for a in formatted.apis if a.name == "getUserUsingGET")
        assert get_user.request.filter.path[0].type == "string"
        assert get_user.request.params[0].type == "string"

    def test_leaves_other_numbers(self, swagger_model: OpenApiModel) -> None:
        formatted = _format(swagger_model, IdAsStringPlugin())
        page = next(t for t in formatted.types if t.name == "Page<T>")
        assert {p.name: p.type for p in page.params}["total"] == "number"

    def test_custom_fields(self, swagger_model: OpenApiModel) -> None:
        formatted = _format(
            swagger_model, IdAsStringPlugin(), options={"id-as-string": {"fields": ["total"]}}
        )
        page = next(t for t in formatted.types if t.name == "Page<T>")
        user = next(t for t in formatted.types if t.name == "User")
        assert {p.name: p.type for p in page.params}["total"] == "string"
        assert {p.name: p.type for p in user.params}["id"] == "number"
