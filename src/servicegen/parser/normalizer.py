"""Detect the spec version and extract a uniform view of a raw document.

Swagger 2.0 keeps schemas under ``definitions``; OpenAPI 3.x keeps them under
``components.schemas``.  :func:`normalize_spec` hides that difference behind a
:class:`~servicegen.models.NormalizedSpec` so the resolvers never branch on
document layout, only on the few behaviours that genuinely differ
(response/request body shapes).

Missing or wrongly-typed collections become empty collections.  Only a
document that is not a mapping at all is rejected.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from pydantic import ValidationError

from servicegen.exceptions import SpecParseError
from servicegen.models import NormalizedSpec, OpenApiSpecV3, SpecVersion, SwaggerSpecV2

logger = logging.getLogger(__name__)

RawSpec = Union[SwaggerSpecV2, OpenApiSpecV3]


def detect_version(raw: dict[str, Any]) -> SpecVersion:
    """Return :attr:`SpecVersion.V2` iff ``swagger`` is ``"2.0"``, else V3."""
    return SpecVersion.V2 if str(raw.get("swagger", "")) == "2.0" else SpecVersion.V3


def parse_raw_spec(raw: Any) -> RawSpec:
    """Validate *raw* into the matching member of the raw-spec union.

    Raises:
        SpecParseError: If *raw* is not a mapping.
    """
    if not isinstance(raw, dict):
        raise SpecParseError(
            f"Spec must be a JSON/YAML object (got {type(raw).__name__})"
        )
    payload = {key: value for key, value in raw.items() if key != "kind"}
    try:
        if detect_version(raw) is SpecVersion.V2:
            payload["swagger"] = "2.0"
            return SwaggerSpecV2.model_validate(payload)
        if payload.get("openapi") is not None:
            payload["openapi"] = str(payload["openapi"])
        return OpenApiSpecV3.model_validate(payload)
    except ValidationError as exc:
        raise SpecParseError(f"Invalid spec document: {exc}") from exc


def normalize_spec(raw: Any) -> NormalizedSpec:
    """Extract definitions, paths and the tag registry from a raw spec.

    Args:
        raw: The parsed JSON/YAML document.

    Returns:
        A :class:`~servicegen.models.NormalizedSpec`.  ``tags`` is ``None``
        when the document declares no root ``tags`` list.

    Raises:
        SpecParseError: If *raw* is not a mapping.
    """
    spec = parse_raw_spec(raw)
    if isinstance(spec, SwaggerSpecV2):
        definitions = spec.definitions
        version = SpecVersion.V2
    else:
        definitions = spec.schemas
        version = SpecVersion.V3

    tags = None
    if spec.tags is not None:
        tags = [str(tag["name"]) for tag in spec.tags if tag.get("name") is not None]

    logger.debug(
        "Normalized %s spec: %d definitions, %d paths",
        version.value,
        len(definitions),
        len(spec.paths),
    )
    return NormalizedSpec(
        version=version,
        definitions={
            name: schema for name, schema in definitions.items() if isinstance(schema, dict)
        },
        paths=spec.paths,
        tags=tags,
    )
