"""Built-in format plugins for common clean-ups of generated bindings.

None of these run unless registered, either explicitly through
:meth:`~servicegen.plugins.manager.PluginRegistry.use` or by naming them in
``plugins.enabled`` (they are declared as entry points in the
``servicegen.plugins`` group).

* :class:`TagRenamePlugin` (``tag-rename``) -- rename tags, and therefore
  output files, from a mapping.
* :class:`OperationSuffixPlugin` (``operation-suffix``) -- strip the
  ``UsingGET``/``_1`` noise springfox appends to operation names.
* :class:`IdAsStringPlugin` (``id-as-string``) -- narrow numeric identifier
  fields to ``string`` (64-bit ids do not survive JavaScript numbers).
"""

from __future__ import annotations

import re
from typing import Any, Optional

from servicegen.models import OpenApiModel, Param
from servicegen.plugins.base import Plugin

_SPRINGFOX_SUFFIX_RE = re.compile(
    r"Using(GET|POST|PUT|DELETE|PATCH|HEAD|OPTIONS)(_\d+)?$"
)
_DUPLICATE_SUFFIX_RE = re.compile(r"_\d+$")


class TagRenamePlugin(Plugin):
    """Rename API tags.

    Options:
        mapping: ``{"user-controller": "user"}``.
    """

    def __init__(self, mapping: Optional[dict[str, str]] = None) -> None:
        self._mapping: dict[str, str] = dict(mapping or {})

    @property
    def name(self) -> str:
        return "tag-rename"

    @property
    def description(self) -> str:
        return "Rename tags (and output files) from a mapping"

    def on_init(self, options: dict[str, Any]) -> None:
        self._mapping.update(options.get("mapping", {}))

    def format_model(self, model: OpenApiModel) -> OpenApiModel:
        for api in model.apis:
            api.tag = self._mapping.get(api.tag, api.tag)
        return model


def strip_operation_suffix(name: str) -> str:
    """``getUserUsingGET_1`` -> ``getUser``; ``listUsers_2`` -> ``listUsers``."""
    stripped = _SPRINGFOX_SUFFIX_RE.sub("", name)
    if stripped == name:
        stripped = _DUPLICATE_SUFFIX_RE.sub("", name)
    return stripped or name


class OperationSuffixPlugin(Plugin):
    """Strip generated suffixes from operation names."""

    @property
    def name(self) -> str:
        return "operation-suffix"

    @property
    def description(self) -> str:
        return "Strip springfox UsingGET/_N suffixes from operation names"

    def format_model(self, model: OpenApiModel) -> OpenApiModel:
        for api in model.apis:
            api.name = strip_operation_suffix(api.name)
        return model


class IdAsStringPlugin(Plugin):
    """Narrow numeric identifier fields to ``string``.

    A field counts as an identifier when its name is listed in ``fields``
    (default ``["id"]``) or ends with ``Id``.
    """

    def __init__(self) -> None:
        self._fields: set[str] = {"id"}

    @property
    def name(self) -> str:
        return "id-as-string"

    @property
    def description(self) -> str:
        return "Narrow numeric id fields to string"

    def on_init(self, options: dict[str, Any]) -> None:
        if "fields" in options:
            self._fields = set(options["fields"])

    def _is_identifier(self, name: str) -> bool:
        return name in self._fields or name.endswith("Id")

    def _narrow(self, params: list[Param]) -> None:
        for param in params:
            if not self._is_identifier(param.name):
                continue
            if param.type == "number":
                param.type = "string"
            elif param.type == "number[]":
                param.type = "string[]"

    def format_model(self, model: OpenApiModel) -> OpenApiModel:
        for type_ in model.types:
            self._narrow(type_.params)
        for api in model.apis:
            request = api.request
            self._narrow(request.params)
            self._narrow(request.filter.path)
            self._narrow(request.filter.query)
            self._narrow(request.filter.formdata)
            self._narrow(request.filter.body.params)
        return model
