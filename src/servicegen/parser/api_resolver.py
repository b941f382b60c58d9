"""Resolve path operations into :class:`~servicegen.models.API` records.

This module walks the normalized ``paths`` map and, for every supported
operation, extracts:

* **parameters** -- Swagger 2 body parameters are expanded into one
  ``in="body"`` param per property of the referenced definition; all other
  parameters map one-to-one. Parameters listed after a body parameter are
  still mapped, so path and query values declared alongside a body reach
  ``filter.path``/``filter.query`` and ``urlText`` resolves.
* **request body** (OpenAPI 3) -- multipart bodies become ``formdata``
  params, array bodies record their element type, object bodies are expanded
  like Swagger 2 body parameters.
* **response type** -- the ``200`` (else ``201``) schema, with encoded
  generics resolved against the Type registry: unknown names become ``any``
  and aliased names (``List`` -> ``Array``) are rewritten first.

The single public entry point is :func:`resolve_apis`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from servicegen.models import (
    API,
    DEFAULT_TYPE_ALIASES,
    Body,
    NormalizedSpec,
    Param,
    Request,
    RequestFilter,
    Response,
    SpecVersion,
    Type,
)
from servicegen.parser.generics import GenericExpr, GenericSyntaxError, parse_generic
from servicegen.parser.type_mapper import ANY, map_type, ref_name, schema_type
from servicegen.parser.type_resolver import generic_type_names, known_type_names

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "delete")
"""Operations considered on each path item, in emission order."""

SUCCESS_STATUSES = ("200", "201")
MULTIPART_FORM_DATA = "multipart/form-data"
UNKNOWN_BODY_PARAM = "unknownParam"

_LOCATION_ALIASES = {"formData": "formdata"}


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


def _definition_properties(
    definitions: dict[str, Any], schema: Any
) -> Optional[dict[str, Any]]:
    """Properties of the definition *schema* references, or its inline properties."""
    if not isinstance(schema, dict):
        return None
    reference = ref_name(schema)
    if reference is not None:
        definition = definitions.get(reference)
        properties = definition.get("properties") if isinstance(definition, dict) else None
    else:
        properties = schema.get("properties")
    return properties if isinstance(properties, dict) else None


def _properties_to_params(properties: dict[str, Any], location: str) -> list[Param]:
    params: list[Param] = []
    for name, prop in properties.items():
        description = prop.get("description") if isinstance(prop, dict) else None
        params.append(
            Param(
                location=location,
                name=name,
                type=map_type(prop),
                description=description or "",
                required=False,
            )
        )
    return params


def _map_parameter(parameter: dict[str, Any]) -> Param:
    location = parameter.get("in")
    if isinstance(location, str):
        location = _LOCATION_ALIASES.get(location, location)
    return Param(
        location=location,
        name=str(parameter.get("name", "")),
        type=map_type(parameter),
        description=parameter.get("description") or "",
        required=bool(parameter.get("required", False)),
    )


def resolve_params(
    definitions: dict[str, Any], parameters: Any, body: Body
) -> list[Param]:
    """Resolve an operation's ``parameters`` list.

    When the first parameter is body-located its schema is expanded into one
    body param per property (``required=False``); an array schema records
    its element type on *body* instead, and an unresolvable schema yields a
    single ``any``-typed param.  Remaining parameters map one-to-one.

    Args:
        definitions: Normalized definitions used to resolve body references.
        parameters: The raw ``parameters`` value (anything; non-lists are
            treated as empty).
        body: The request-body wrapper; expanded body params are appended to
            ``body.params``.

    Returns:
        The operation's params in declaration order.
    """
    if not isinstance(parameters, list):
        return []
    declared = [p for p in parameters if isinstance(p, dict)]
    if not declared:
        return []

    params: list[Param] = []
    first = declared[0]
    rest = declared

    if first.get("in") == "body":
        rest = declared[1:]
        schema = first.get("schema")
        properties = _definition_properties(definitions, schema)
        if isinstance(schema, dict) and schema_type(schema) == "array":
            body.array_type = map_type(schema.get("items"))
        elif properties is not None:
            expanded = _properties_to_params(properties, "body")
            params.extend(expanded)
            body.params.extend(expanded)
        else:
            synthetic = Param(
                location="body",
                name=str(first.get("name", "")),
                type=ANY,
                description=first.get("description") or "",
                required=False,
            )
            params.append(synthetic)
            body.params.append(synthetic)

    for parameter in rest:
        param = _map_parameter(parameter)
        params.append(param)
        if param.location == "body":
            body.params.append(param)
    return params


def resolve_request_body(
    definitions: dict[str, Any], request_body: Any, body: Body
) -> list[Param]:
    """Resolve an OpenAPI 3 ``requestBody`` from its first media type.

    Returns:
        ``formdata`` params for multipart bodies; body params are recorded on
        *body* and also returned so they appear in the request param list.
    """
    if not isinstance(request_body, dict):
        return []
    content = request_body.get("content")
    if not isinstance(content, dict) or not content:
        return []
    media_type, media = next(iter(content.items()))
    schema = media.get("schema") if isinstance(media, dict) else None

    if media_type == MULTIPART_FORM_DATA:
        properties = _definition_properties(definitions, schema) or {}
        return _properties_to_params(properties, "formdata")

    if isinstance(schema, dict) and schema_type(schema) == "array":
        body.array_type = map_type(schema.get("items"))
        return []

    properties = _definition_properties(definitions, schema)
    if properties is not None:
        expanded = _properties_to_params(properties, "body")
    else:
        expanded = [Param(location="body", name=UNKNOWN_BODY_PARAM, type=ANY)]
    body.params.extend(expanded)
    return expanded


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


def success_response_schema(operation: dict[str, Any], version: SpecVersion) -> Any:
    """Return the schema of the ``200`` (else ``201``) response, or ``None``."""
    responses = operation.get("responses")
    if not isinstance(responses, dict):
        return None
    response = None
    for status in SUCCESS_STATUSES:
        candidate = responses.get(status)
        if candidate is None:
            candidate = responses.get(int(status))
        if isinstance(candidate, dict):
            response = candidate
            break
    if response is None:
        return None

    if version is SpecVersion.V2:
        return response.get("schema")

    content = response.get("content")
    if not isinstance(content, dict) or not content:
        return None
    media = next(iter(content.values()))
    return media.get("schema") if isinstance(media, dict) else None


def resolve_response_type(
    schema: Any,
    types: list[Type],
    aliases: Optional[Mapping[str, str]] = None,
) -> str:
    """Resolve a response schema to a type expression.

    Primitive schemas are mapped with
    :func:`~servicegen.parser.type_mapper.map_type`.  References are parsed
    into a generic tree and every node is checked against the registry:

    * a lone generic base (``Page``) becomes ``Page<any>``;
    * aliased names are rewritten (``List`` -> ``Array``);
    * unknown names become ``any`` (dropping their own arguments).

    Example::

        Page«List«User»»   ->  Page<Array<User>>
        Page«UnknownKind»  ->  Page<any>
    """
    if not isinstance(schema, dict):
        return ANY
    if schema_type(schema) is not None:
        return map_type(schema)

    reference = ref_name(schema)
    if reference is None:
        return ANY
    aliases = DEFAULT_TYPE_ALIASES if aliases is None else aliases

    try:
        expr = parse_generic(reference)
    except GenericSyntaxError:
        logger.debug("Unparseable response reference %r, using any", reference)
        return ANY

    chain = expr.names()
    if len(chain) <= 1 and expr.name in generic_type_names(types):
        return GenericExpr(expr.name, (GenericExpr(ANY),), expr.array_depth).render()

    known = known_type_names(types)

    def _resolve_node(node: GenericExpr) -> GenericExpr:
        if node.name in aliases:
            return GenericExpr(aliases[node.name], node.args, node.array_depth)
        if node.name not in known:
            # ``any<X>`` is not valid TypeScript, so the arguments go too.
            return GenericExpr(ANY, (), node.array_depth)
        return node

    return expr.rewrite(_resolve_node).render()


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def url_text(path: str) -> str:
    """``/users/{id}`` -> ``/users/${pathVars.id}`` for template literals."""
    return path.replace("{", "${pathVars.")


def resolve_operation(
    spec: NormalizedSpec,
    path: str,
    method: str,
    operation: dict[str, Any],
    types: list[Type],
    aliases: Optional[Mapping[str, str]] = None,
) -> API:
    """Resolve a single path + method operation."""
    body = Body()
    params = resolve_params(spec.definitions, operation.get("parameters"), body)
    if spec.version is SpecVersion.V3:
        params.extend(
            resolve_request_body(spec.definitions, operation.get("requestBody"), body)
        )

    tags = operation.get("tags")
    tag = tags[0] if isinstance(tags, list) and tags else ""
    schema = success_response_schema(operation, spec.version)

    return API(
        tag=str(tag),
        name=str(operation.get("operationId") or ""),
        description=str(operation.get("summary") or ""),
        request=Request(
            url=path,
            url_text=url_text(path),
            method=method.upper(),
            params=params,
            filter=RequestFilter(
                path=[p for p in params if p.location == "path"],
                query=[p for p in params if p.location == "query"],
                body=body,
                formdata=[p for p in params if p.location == "formdata"],
            ),
        ),
        response=Response(type=resolve_response_type(schema, types, aliases)),
    )


def resolve_apis(
    spec: NormalizedSpec,
    types: list[Type],
    aliases: Optional[Mapping[str, str]] = None,
) -> list[API]:
    """Resolve every supported operation in *spec*.

    Args:
        spec: The normalized spec.
        types: The Type registry from
            :func:`~servicegen.parser.type_resolver.resolve_types`.
        aliases: Name rewrites applied inside response generics; defaults to
            :data:`~servicegen.models.DEFAULT_TYPE_ALIASES`.

    Returns:
        APIs in path order, then ``get``/``post``/``put``/``delete`` order.
        When the spec declares a root tag registry, APIs whose tag is not in
        it are dropped.
    """
    apis: list[API] = []
    for path, path_item in spec.paths.items():
        if not isinstance(path_item, dict):
            continue
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            apis.append(
                resolve_operation(spec, str(path), method, operation, types, aliases)
            )

    # An empty registry is treated like a missing one.
    if spec.tags:
        registry = set(spec.tags)
        for api in apis:
            if api.tag not in registry:
                logger.debug(
                    "Dropping %s %s: tag %r is not declared",
                    api.request.method,
                    api.request.url,
                    api.tag,
                )
        apis = [api for api in apis if api.tag in registry]

    return apis
