"""API description parser -- load, normalize, and resolve into an intermediate model.

This sub-package is the first half of the servicegen pipeline: turning a raw
Swagger 2.0 or OpenAPI 3.x document into an
:class:`~servicegen.models.OpenApiModel` of named Types and API operations
that the generator can render.

Typical usage::

    from servicegen.parser import build_openapi_model, group_by_tag, load_spec

    raw = load_spec("api-docs.json")
    model = build_openapi_model(raw)
    for group in group_by_tag(model):
        print(group.tag, group.dependencies)

Sub-modules:

* :mod:`~servicegen.parser.loader` -- I/O layer (inline text, URL, file, stdin).
* :mod:`~servicegen.parser.normalizer` -- Version detection and a uniform
  (definitions, paths, tags) view.
* :mod:`~servicegen.parser.generics` -- Recursive-descent parser for encoded
  generic names such as ``Page«List«User»»``.
* :mod:`~servicegen.parser.type_mapper` -- Schema node to type expression.
* :mod:`~servicegen.parser.type_resolver` -- The deduplicated Type registry.
* :mod:`~servicegen.parser.api_resolver` -- Operations, params and response types.
* :mod:`~servicegen.parser.dependencies` -- Per-group Type dependencies.
* :mod:`~servicegen.parser.pipeline` -- End-to-end model building and grouping.
"""

from servicegen.parser.loader import load_spec, load_spec_source, parse_spec_text
from servicegen.parser.pipeline import build_openapi_model, group_by_tag

__all__ = [
    "load_spec",
    "load_spec_source",
    "parse_spec_text",
    "build_openapi_model",
    "group_by_tag",
]
