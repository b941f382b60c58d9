"""Build the deduplicated Type registry from a spec's definitions.

Springfox emits one definition per generic *instantiation*: ``Page«User»``,
``Page«Order»`` and so on, each repeating the container's shape.
:func:`resolve_types` folds these back into a single generic declaration
``Page<T>`` whose payload fields are typed with the placeholder ``T``.

Rules:

* A definition without ``properties`` yields no Type.
* Every name that appears with type arguments in any key is *generic*.
* One Type per base name; the first definition with properties wins.  Later
  instantiations with a different shape are ignored, which assumes a generic
  container has one structure reused across all instantiations.
* In a generic Type, a field whose reference does not mention the
  definition's own innermost argument keeps its concrete type, so mixed
  containers (``Page«User»`` with an ``owner: Account`` field) stay accurate.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from servicegen.models import Param, Type
from servicegen.parser.generics import (
    ARRAY_MARKER,
    GENERIC_MARKER,
    GENERIC_PLACEHOLDER,
    GenericExpr,
    GenericSyntaxError,
    normalize_generic_markers,
    parse_generic,
    strip_generic_marker,
    to_generic_type,
)
from servicegen.parser.type_mapper import map_type, ref_name

logger = logging.getLogger(__name__)


def _parse_key(key: str) -> GenericExpr:
    try:
        return parse_generic(key)
    except GenericSyntaxError:
        logger.debug("Definition key %r is not a generic expression, using it verbatim", key)
        return GenericExpr(normalize_generic_markers(key))


def collect_generic_bases(definitions: dict[str, Any]) -> set[str]:
    """Return every name that appears with type arguments in a definition key.

    ``Page«List«User»»`` contributes ``Page`` and ``List``.
    """
    generics: set[str] = set()
    for key in definitions:
        for node in _parse_key(key).walk():
            if node.is_instantiated:
                generics.add(node.name)
    return generics


def _mentions(reference: str, argument: str) -> bool:
    try:
        names = parse_generic(reference).names()
    except GenericSyntaxError:
        return argument in reference
    return argument in names


def _field_type(prop: Any, is_generics: bool, own_argument: Optional[str]) -> str:
    type_name = map_type(prop, is_generics)
    if type_name not in (GENERIC_PLACEHOLDER, GENERIC_PLACEHOLDER + ARRAY_MARKER):
        return type_name

    reference = None
    if isinstance(prop, dict):
        reference = ref_name(prop.get("items")) or ref_name(prop)
    if reference is None or own_argument is None:
        return type_name
    if _mentions(reference, own_argument):
        return type_name

    concrete = to_generic_type(reference)
    return concrete + ARRAY_MARKER if type_name.endswith(ARRAY_MARKER) else concrete


def resolve_type_params(
    properties: dict[str, Any], is_generics: bool, own_argument: Optional[str] = None
) -> list[Param]:
    """Map each property of a definition to a :class:`~servicegen.models.Param`.

    Args:
        properties: The definition's ``properties`` mapping.
        is_generics: Whether the owning Type is generic.
        own_argument: Innermost type argument of the owning definition key
            (``User`` for ``Page«List«User»»``), used to tell placeholder
            fields from fixed-type fields.
    """
    params: list[Param] = []
    for name, prop in properties.items():
        description = prop.get("description") if isinstance(prop, dict) else None
        params.append(
            Param(
                name=name,
                type=_field_type(prop, is_generics, own_argument),
                description=description or "",
                required=False,
            )
        )
    return params


def resolve_types(definitions: dict[str, Any]) -> list[Type]:
    """Scan all definitions and return one canonical Type per base name.

    Args:
        definitions: Definition key -> schema mapping from
            :func:`~servicegen.parser.normalizer.normalize_spec`.

    Returns:
        Types in definition order.  Generic Types are named ``Base<T>``.
    """
    generics = collect_generic_bases(definitions)
    types: list[Type] = []
    seen: set[str] = set()

    for key, definition in definitions.items():
        expr = _parse_key(key)
        base = expr.name if expr.is_instantiated else normalize_generic_markers(key)

        properties = definition.get("properties") if isinstance(definition, dict) else None
        if not isinstance(properties, dict):
            continue
        if base in seen:
            logger.debug("Skipping %r: Type %r already declared", key, base)
            continue
        seen.add(base)

        is_generics = base in generics
        types.append(
            Type(
                is_generics=is_generics,
                name=base + GENERIC_MARKER if is_generics else base,
                description=definition.get("description") or "",
                params=resolve_type_params(
                    properties, is_generics, expr.innermost().name
                ),
            )
        )

    logger.debug("Resolved %d types (%d generic)", len(types), sum(t.is_generics for t in types))
    return types


def known_type_names(types: list[Type]) -> set[str]:
    """Registry names with their ``<T>`` marker stripped."""
    return {strip_generic_marker(t.name) for t in types}


def generic_type_names(types: list[Type]) -> set[str]:
    """Base names of the generic Types in the registry."""
    return {strip_generic_marker(t.name) for t in types if t.is_generics}
