"""Programmatic entry point: load a spec, resolve it, emit bindings.

Example::

    import asyncio
    from pathlib import Path

    from servicegen.models import ServiceOptions
    from servicegen.tool import OpenApiTool

    tool = OpenApiTool(url="https://petstore.swagger.io/v2/swagger.json")
    asyncio.run(
        tool.generate_service(ServiceOptions(template="axios", output_dir=Path("src/api")))
    )
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional

from servicegen.exceptions import ConfigError
from servicegen.generator import generate_service, validate_options
from servicegen.models import OpenApiModel, ServiceOptions
from servicegen.parser import build_openapi_model, load_spec_source, parse_spec_text
from servicegen.plugins import Plugin, PluginRegistry

logger = logging.getLogger(__name__)


class OpenApiTool:
    """Facade over loader, resolver and generator for one spec.

    Args:
        data: Inline JSON or YAML text of the spec. Wins over *url*.
        url: An http(s) URL, a file path, or ``-`` for stdin.
        registry: Plugins taking part in generation. A fresh, empty
            registry is used when omitted.
        aliases: Response-generic name rewrites (default ``{"List": "Array"}``).

    Raises:
        ConfigError: If neither *data* nor *url* is given.
    """

    def __init__(
        self,
        data: Optional[str] = None,
        url: Optional[str] = None,
        registry: Optional[PluginRegistry] = None,
        aliases: Optional[Mapping[str, str]] = None,
    ) -> None:
        if not data and not url:
            raise ConfigError("Either inline spec data or a spec URL is required")
        self.data = data
        self.url = url
        self.registry = registry if registry is not None else PluginRegistry()
        self.aliases = aliases

    def use(self, plugin: Plugin, options: Optional[dict] = None) -> "OpenApiTool":
        """Register *plugin* on this tool's registry; returns ``self``."""
        self.registry.use(plugin, options)
        return self

    async def get_openapi(self) -> OpenApiModel:
        """Load the spec once and resolve it into an :class:`OpenApiModel`."""
        if self.data:
            raw = parse_spec_text(self.data)
        else:
            raw = await load_spec_source(self.url or "")
        return build_openapi_model(raw, self.aliases)

    async def generate_service(self, options: ServiceOptions) -> list[Path]:
        """Validate *options*, resolve the spec and write the service files."""
        validate_options(options, self.registry)
        model = await self.get_openapi()
        logger.debug(
            "Generating %s bindings for %d apis", options.template, len(model.apis)
        )
        return await generate_service(model, options, self.registry)
