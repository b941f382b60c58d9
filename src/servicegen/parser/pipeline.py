"""Run the resolution pipeline end to end.

:func:`build_openapi_model` chains normalizer -> type resolver -> API
resolver and returns the :class:`~servicegen.models.OpenApiModel`;
:func:`group_by_tag` splits a model into per-file
:class:`~servicegen.models.TagGroup` records with their dependencies.

Both are pure: nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from servicegen.models import API, OpenApiModel, TagGroup
from servicegen.parser.api_resolver import resolve_apis
from servicegen.parser.dependencies import collect_dependencies
from servicegen.parser.normalizer import normalize_spec
from servicegen.parser.type_resolver import resolve_types

logger = logging.getLogger(__name__)


def build_openapi_model(
    raw: Any, aliases: Optional[Mapping[str, str]] = None
) -> OpenApiModel:
    """Resolve a raw Swagger 2.0 / OpenAPI 3.x document into an :class:`OpenApiModel`.

    Args:
        raw: The parsed JSON/YAML document.
        aliases: Response-generic name rewrites (default ``{"List": "Array"}``).

    Raises:
        SpecParseError: If *raw* is not a mapping.

    Example::

        model = build_openapi_model(json.loads(text))
        for api in model.apis:
            print(api.request.method, api.request.url, api.response.type)
    """
    spec = normalize_spec(raw)
    types = resolve_types(spec.definitions)
    apis = resolve_apis(spec, types, aliases)
    logger.debug("Built model with %d types and %d apis", len(types), len(apis))
    return OpenApiModel(types=types, apis=apis)


def group_by_tag(model: OpenApiModel) -> list[TagGroup]:
    """Group the model's APIs by tag, in first-seen tag order."""
    groups: dict[str, list[API]] = {}
    for api in model.apis:
        groups.setdefault(api.tag, []).append(api)
    return [
        TagGroup(
            tag=tag,
            apis=apis,
            dependencies=collect_dependencies(apis, model.types),
        )
        for tag, apis in groups.items()
    ]
