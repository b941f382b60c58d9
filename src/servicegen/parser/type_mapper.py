"""Map schema and parameter nodes to type expressions.

:func:`map_type` turns one node of an API description (a property schema, a
parameter object, an ``items`` schema) into a string drawn from a closed
vocabulary: ``number``, ``string``, ``boolean``, a literal union such as
``('a' | 'b')``, a referenced type name, ``X[]``, ``X<Y>``, the generic
placeholder ``T`` or ``any``.

The mapping is total.  Unrecognised or malformed nodes degrade to ``any``
instead of raising, because a spec that is odd in one corner should still
produce usable output for everything else.
"""

from __future__ import annotations

from typing import Any, Optional

from servicegen.parser.generics import (
    ARRAY_MARKER,
    GENERIC_PLACEHOLDER,
    to_generic_type,
)

ANY = "any"

NUMBER_KINDS = frozenset(
    ["int64", "integer", "long", "float", "double", "number", "int", "int32"]
)
DATE_KINDS = frozenset(["Date", "date", "dateTime", "date-time", "datetime"])
STRING_KINDS = frozenset(["string", "email", "password", "url", "byte", "binary"])


def ref_name(node: Any) -> Optional[str]:
    """Return the raw referenced name of *node*, or ``None``.

    Reads the last segment of ``$ref`` (``#/definitions/Page«User»`` gives
    ``Page«User»``), handling RFC 6901 escaping.  Springfox's
    ``originalRef`` is used when ``$ref`` is absent.
    """
    if not isinstance(node, dict):
        return None
    ref = node.get("$ref")
    if isinstance(ref, str) and ref:
        segment = ref.rsplit("/", 1)[-1]
        return segment.replace("~1", "/").replace("~0", "~") or None
    original = node.get("originalRef")
    if isinstance(original, str) and original:
        return original
    return None


def schema_type(node: dict[str, Any]) -> Optional[str]:
    """Return the primitive ``type`` of *node*.

    OpenAPI 3.1 allows a list (``["string", "null"]``); the first non-null
    member is used.
    """
    value = node.get("type")
    if isinstance(value, list):
        non_null = [t for t in value if isinstance(t, str) and t != "null"]
        return non_null[0] if non_null else None
    return value if isinstance(value, str) and value else None


def enum_type(values: list[Any]) -> str:
    """``["a", "b"]`` -> ``('a' | 'b')``."""
    return "(" + " | ".join(f"'{value}'" for value in values) + ")"


def map_type(node: Any = None, has_generics: bool = False) -> str:
    """Map a schema or parameter node to a type expression.

    Args:
        node: A schema dict, a parameter dict wrapping a ``schema``, or
            ``None``.
        has_generics: ``True`` when *node* is a field of a generic container;
            references and objects then resolve to the placeholder ``T``.

    Returns:
        The type expression.  Never raises; unknown shapes yield ``"any"``.

    Example::

        >>> map_type({"type": "integer", "format": "int64"})
        'number'
        >>> map_type({"$ref": "#/definitions/Page«User»"})
        'Page<User>'
        >>> map_type({"type": "array", "items": {"$ref": "#/definitions/User"}}, True)
        'T[]'
    """
    if not isinstance(node, dict) or not node:
        return ANY

    # Parameter-wrapper style (OpenAPI 3 parameters, Swagger 2 body params).
    if "schema" in node:
        result = map_type(node.get("schema"))
        if node.get("explode"):
            result += ARRAY_MARKER
        return result

    reference = ref_name(node)
    kind = schema_type(node)

    if kind is None:
        if reference is None:
            return ANY
        return GENERIC_PLACEHOLDER if has_generics else to_generic_type(reference)

    if kind in NUMBER_KINDS:
        return "number"
    if kind in DATE_KINDS:
        return "string"
    if kind in STRING_KINDS:
        values = node.get("enum")
        if isinstance(values, list) and values:
            return enum_type(values)
        return "string"
    if kind == "boolean":
        return "boolean"
    if kind == "object":
        if has_generics:
            return GENERIC_PLACEHOLDER
        return to_generic_type(reference) if reference else ANY
    if kind == "array":
        if has_generics:
            return GENERIC_PLACEHOLDER + ARRAY_MARKER
        return map_type(node.get("items")) + ARRAY_MARKER

    return ANY
