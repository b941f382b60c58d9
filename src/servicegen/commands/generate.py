"""``servicegen generate`` -- write service and typings files for a spec."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer

from servicegen.commands import build_registry, exit_with_error
from servicegen.exceptions import InvalidUsageError, ServicegenError
from servicegen.models import ServiceOptions
from servicegen.output import debug, success


def generate_command(
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="Spec URL, file path, or '-' for stdin."
    ),
    output_dir: Optional[str] = typer.Option(
        None, "--output", "-o", help="Directory for the generated files."
    ),
    template: Optional[str] = typer.Option(
        None, "--template", "-t", help="Request template: axios or umi-request."
    ),
    typescript: Optional[bool] = typer.Option(
        None,
        "--typescript/--javascript",
        help="Emit .ts files with types, or .js files with JSDoc.",
    ),
    import_text: Optional[str] = typer.Option(
        None, "--import-text", help="Custom import header for service files."
    ),
    plugins: Optional[list[str]] = typer.Option(
        None, "--plugin", help="Enable a plugin by name (repeatable)."
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Project config file (default ./servicegen.json)."
    ),
) -> None:
    """Generate request functions and type declarations from a spec.

    Example::

        servicegen generate --spec ./api-docs.json --output src/services --template axios
    """
    from servicegen.config import resolve_config
    from servicegen.tool import OpenApiTool

    try:
        config = resolve_config(
            config_file,
            spec=spec,
            output_dir=output_dir,
            template=template,
            typescript=typescript,
            import_text=import_text,
        )
        if plugins:
            config.plugins.enabled = [*config.plugins.enabled, *plugins]
        if not config.spec:
            raise InvalidUsageError(
                "No spec given. Pass --spec or set SERVICEGEN_SPEC."
            )

        registry = build_registry(config)
        options = ServiceOptions(
            template=config.template,
            import_text=config.import_text,
            typescript=config.typescript,
            output_dir=Path(config.output_dir) if config.output_dir else None,
        )
        debug(f"Loading spec from {config.spec}")
        tool = OpenApiTool(url=config.spec, registry=registry, aliases=config.type_aliases)
        paths = asyncio.run(tool.generate_service(options))
    except ServicegenError as exc:
        exit_with_error(exc)

    success(f"Generated {len(paths)} files in {options.output_dir}")
