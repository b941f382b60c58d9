"""Built-in CLI sub-commands for servicegen.

Each module defines either a single command function or a :class:`typer.Typer`
sub-application that is registered on the root app in
:func:`servicegen.app.main`.

Sub-modules:

* :mod:`~servicegen.commands.generate` -- ``servicegen generate``.
* :mod:`~servicegen.commands.inspect` -- ``servicegen inspect types|apis|deps``.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from servicegen.exceptions import ServicegenError
from servicegen.models import GeneratorConfig
from servicegen.output import error
from servicegen.plugins import PluginRegistry


def exit_with_error(exc: ServicegenError) -> NoReturn:
    """Print *exc* on stderr and exit with its exit code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def build_registry(config: GeneratorConfig) -> PluginRegistry:
    """Create a registry and discover the plugins *config* asks for."""
    registry = PluginRegistry()
    registry.discover(
        enabled=config.plugins.enabled,
        disabled=config.plugins.disabled,
        options=config.plugin_options,
    )
    return registry
