"""Compute the Type names a group of APIs depends on.

The template stage emits one file per tag and needs to import exactly the
declarations that file references.  :func:`collect_dependencies` decomposes
every param type and response type of the group into base names and keeps
the ones present in the Type registry.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from servicegen.models import API, Type
from servicegen.parser.generics import GenericSyntaxError, parse_generic
from servicegen.parser.type_resolver import known_type_names

logger = logging.getLogger(__name__)


def type_names(type_expr: str) -> list[str]:
    """Candidate base names in *type_expr*, outer first.

    ``Page<Array<User>>[]`` gives ``["Page", "Array", "User"]``.  Literal
    unions and other unparseable expressions give ``[]``.
    """
    if not type_expr:
        return []
    try:
        return parse_generic(type_expr).names()
    except GenericSyntaxError:
        logger.debug("No dependencies in %r", type_expr)
        return []


def _api_type_exprs(api: API) -> Iterator[str]:
    for param in api.request.params:
        yield param.type
    body = api.request.filter.body
    for param in body.params:
        yield param.type
    if body.array_type:
        yield body.array_type
    yield api.response.type


def collect_dependencies(apis: Iterable[API], types: list[Type]) -> list[str]:
    """Return the registry Type names referenced by *apis*.

    Args:
        apis: One output group, typically all APIs sharing a tag.
        types: The Type registry.

    Returns:
        Base names (without ``<T>``), deduplicated, in first-reference order.
        Names absent from the registry are never included.
    """
    known = known_type_names(types)
    deps: dict[str, None] = {}
    for api in apis:
        for type_expr in _api_type_exprs(api):
            for name in type_names(type_expr):
                if name in known:
                    deps.setdefault(name, None)
    return list(deps)
