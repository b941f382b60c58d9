"""Inspect commands -- examine what a spec resolves to without writing files.

Provides the ``servicegen inspect`` sub-command group with read-only views of
the resolved model: the Type registry, the API list, and the per-tag
dependency sets that each service file would import. Output is a table, or
JSON with the global ``--json`` flag.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer

from servicegen.commands import build_registry, exit_with_error
from servicegen.exceptions import InvalidUsageError, ServicegenError
from servicegen.models import OpenApiModel
from servicegen.output import OutputFormat, get_output, info, print_json, print_table


inspect_app = typer.Typer(no_args_is_help=True)

_SPEC_OPTION = typer.Option(
    None, "--spec", "-s", help="Spec URL, file path, or '-' for stdin."
)
_CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Project config file (default ./servicegen.json)."
)


def _load_model(spec: Optional[str], config_file: Optional[Path]) -> OpenApiModel:
    """Resolve the spec and apply the configured plugins' format hooks."""
    from servicegen.config import resolve_config
    from servicegen.tool import OpenApiTool

    try:
        config = resolve_config(config_file, spec=spec)
        if not config.spec:
            raise InvalidUsageError("No spec given. Pass --spec or set SERVICEGEN_SPEC.")
        registry = build_registry(config)
        tool = OpenApiTool(url=config.spec, registry=registry, aliases=config.type_aliases)
        model = asyncio.run(tool.get_openapi())
    except ServicegenError as exc:
        exit_with_error(exc)
    return registry.get_hook_runner().run_format(model)


def _wants_json() -> bool:
    return get_output().format == OutputFormat.JSON


@inspect_app.command("types")
def inspect_types(
    spec: Optional[str] = _SPEC_OPTION,
    config_file: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """List the resolved Type registry.

    Example::

        servicegen inspect types --spec api-docs.json
    """
    model = _load_model(spec, config_file)
    if _wants_json():
        print_json([t.model_dump(by_alias=True) for t in model.types])
        return
    if not model.types:
        info("No types found.")
        return

    rows = [
        [
            t.name,
            "yes" if t.is_generics else "",
            str(len(t.params)),
            t.description,
        ]
        for t in model.types
    ]
    print_table(["Name", "Generic", "Fields", "Description"], rows, title="Types")


@inspect_app.command("apis")
def inspect_apis(
    spec: Optional[str] = _SPEC_OPTION,
    config_file: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """List every resolved API with its response type."""
    model = _load_model(spec, config_file)
    if _wants_json():
        print_json([a.model_dump(by_alias=True) for a in model.apis])
        return
    if not model.apis:
        info("No APIs found.")
        return

    rows = [
        [
            a.tag,
            a.request.method.upper(),
            a.request.url,
            a.name,
            a.response.type,
        ]
        for a in model.apis
    ]
    print_table(["Tag", "Method", "URL", "Name", "Response"], rows, title="APIs")


@inspect_app.command("deps")
def inspect_deps(
    spec: Optional[str] = _SPEC_OPTION,
    config_file: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Show, per tag, the types its service file imports."""
    from servicegen.parser import group_by_tag

    groups = group_by_tag(_load_model(spec, config_file))
    if _wants_json():
        print_json({g.tag: g.dependencies for g in groups})
        return
    if not groups:
        info("No APIs found.")
        return

    rows = [[g.tag, str(len(g.apis)), ", ".join(g.dependencies)] for g in groups]
    print_table(["Tag", "APIs", "Dependencies"], rows, title="Dependencies")
