"""Canonical Pydantic models shared across all servicegen modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Configuration models** -- loaded from ``servicegen.json``, the environment
and CLI flags:
    :class:`PluginsConfig`, :class:`GeneratorConfig` and :class:`ServiceOptions`.

**Raw spec models** -- a tagged union over the two document shapes the
normalizer accepts:
    :class:`SpecVersion`, :class:`SwaggerSpecV2`, :class:`OpenApiSpecV3` and
    the normalized view :class:`NormalizedSpec`.

**Resolved model** -- produced by the resolution pipeline and consumed by the
template stage:
    :class:`Param`, :class:`Body`, :class:`RequestFilter`, :class:`Request`,
    :class:`Response`, :class:`API`, :class:`Type`, :class:`OpenApiModel` and
    :class:`TagGroup`.

Resolved models use snake_case attributes and serialise with the camelCase
names templates and format hooks in other languages expect
(``model_dump(by_alias=True)``).
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_TYPE_ALIASES: dict[str, str] = {"List": "Array"}
"""Names rewritten inside response generics before the unknown-type check."""


# --- Configuration ---


class PluginsConfig(BaseModel):
    """Explicit plugin allow/deny lists stored in :class:`GeneratorConfig`."""

    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class GeneratorConfig(BaseModel):
    """Effective generator configuration after precedence resolution.

    Loaded by :func:`~servicegen.config.resolve_config`, which layers CLI
    flags over ``SERVICEGEN_*`` environment variables over the project-local
    ``servicegen.json`` over these defaults.
    """

    spec: Optional[str] = Field(
        default=None, description="URL, file path or '-' for the API description"
    )
    output_dir: Optional[str] = Field(
        default=None, description="Directory receiving the generated files"
    )
    template: str = Field(
        default="umi-request", description="Request binding style: umi-request, axios"
    )
    typescript: bool = Field(default=True, description="Emit .ts instead of .js")
    import_text: str = Field(
        default="", description="Custom import header replacing the template default"
    )
    type_aliases: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_TYPE_ALIASES)
    )
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    plugin_options: dict[str, dict[str, Any]] = Field(default_factory=dict)


# --- Raw spec (tagged union) ---


class SpecVersion(str, enum.Enum):
    """The two API description shapes the normalizer understands."""

    V2 = "v2"
    V3 = "v3"


def _dict_or_empty(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _tag_list_or_none(value: Any) -> Optional[list[dict[str, Any]]]:
    if not isinstance(value, list):
        return None
    return [tag for tag in value if isinstance(tag, dict)]


class SwaggerSpecV2(BaseModel):
    """A Swagger 2.0 document. Every collection is optional."""

    model_config = ConfigDict(extra="allow")

    kind: Literal["v2"] = "v2"
    swagger: str = "2.0"
    definitions: dict[str, Any] = Field(default_factory=dict)
    paths: dict[str, Any] = Field(default_factory=dict)
    tags: Optional[list[dict[str, Any]]] = None

    @field_validator("definitions", "paths", mode="before")
    @classmethod
    def _coerce_mapping(cls, value: Any) -> dict[str, Any]:
        return _dict_or_empty(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Optional[list[dict[str, Any]]]:
        return _tag_list_or_none(value)


class OpenApiSpecV3(BaseModel):
    """An OpenAPI 3.x document. Every collection is optional."""

    model_config = ConfigDict(extra="allow")

    kind: Literal["v3"] = "v3"
    openapi: Optional[str] = None
    components: dict[str, Any] = Field(default_factory=dict)
    paths: dict[str, Any] = Field(default_factory=dict)
    tags: Optional[list[dict[str, Any]]] = None

    @field_validator("components", "paths", mode="before")
    @classmethod
    def _coerce_mapping(cls, value: Any) -> dict[str, Any]:
        return _dict_or_empty(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Optional[list[dict[str, Any]]]:
        return _tag_list_or_none(value)

    @property
    def schemas(self) -> dict[str, Any]:
        return _dict_or_empty(self.components.get("schemas"))


class NormalizedSpec(BaseModel):
    """Version-independent view of a spec: definitions, paths and tag registry."""

    version: SpecVersion
    definitions: dict[str, Any] = Field(default_factory=dict)
    paths: dict[str, Any] = Field(default_factory=dict)
    tags: Optional[list[str]] = Field(
        default=None, description="Root tag registry; None when the spec declares none"
    )


# --- Resolved model ---


class Param(BaseModel):
    """A parameter of an API operation, or a field of a :class:`Type`."""

    model_config = ConfigDict(populate_by_name=True)

    location: Optional[str] = Field(default=None, alias="in")
    name: str
    type: str = "any"
    description: str = ""
    required: bool = False


class Body(BaseModel):
    """Request-body wrapper: discrete body params, or an array element type."""

    model_config = ConfigDict(populate_by_name=True)

    array_type: str = Field(default="", alias="arrayType")
    params: list[Param] = Field(default_factory=list)


class RequestFilter(BaseModel):
    """Parameters of a request pre-split by location for the templates."""

    path: list[Param] = Field(default_factory=list)
    query: list[Param] = Field(default_factory=list)
    body: Body = Field(default_factory=Body)
    formdata: list[Param] = Field(default_factory=list)


class Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    url_text: str = Field(alias="urlText")
    method: str
    params: list[Param] = Field(default_factory=list)
    filter: RequestFilter = Field(default_factory=RequestFilter)


class Response(BaseModel):
    type: str = "any"


class API(BaseModel):
    """One resolved path + method operation, ready for emission."""

    tag: str = ""
    name: str = ""
    description: str = ""
    request: Request
    response: Response = Field(default_factory=Response)


class Type(BaseModel):
    """A deduplicated structural declaration emitted into the types file.

    ``name`` is ``Base<T>`` when :attr:`is_generics` is set; use
    :func:`~servicegen.parser.generics.strip_generic_marker` to recover the
    base name.
    """

    model_config = ConfigDict(populate_by_name=True)

    is_generics: bool = Field(default=False, alias="isGenerics")
    name: str
    description: str = ""
    params: list[Param] = Field(default_factory=list)


class OpenApiModel(BaseModel):
    """The pipeline's sole output: resolved types and operations."""

    types: list[Type] = Field(default_factory=list)
    apis: list[API] = Field(default_factory=list)


class TagGroup(BaseModel):
    """The APIs sharing one tag plus the Type names they reference."""

    tag: str
    apis: list[API] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)


FormatHook = Callable[[OpenApiModel], Optional[OpenApiModel]]
"""A caller-supplied transform applied to a deep copy of the model before rendering."""


class ServiceOptions(BaseModel):
    """Options for :func:`~servicegen.generator.generate_service`.

    Validated by :func:`~servicegen.generator.service_generator.validate_options`
    before any spec is fetched or resolved.
    """

    template: str = "umi-request"
    import_text: str = ""
    typescript: bool = True
    output_dir: Optional[Path] = None
    format: Optional[FormatHook] = None
