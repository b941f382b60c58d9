"""Example plugin: a ``fetch`` request template plus a tag prefix.

Register it from code::

    tool = OpenApiTool(url=url).use(ExamplePlugin(), {"tag_prefix": "api-"})

and generate with ``template="fetch"``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from servicegen.models import OpenApiModel
from servicegen.plugins.base import Plugin

logger = logging.getLogger(__name__)

TEMPLATE_FILE = Path(__file__).parent / "fetch.j2"


class ExamplePlugin(Plugin):
    """Adds the ``fetch`` template and optionally prefixes every tag."""

    def __init__(self) -> None:
        self._tag_prefix = ""

    @property
    def name(self) -> str:
        return "example"

    @property
    def description(self) -> str:
        return "Example plugin contributing a fetch template"

    @property
    def templates(self) -> dict[str, Path]:
        return {"fetch": TEMPLATE_FILE}

    def on_init(self, options: dict[str, Any]) -> None:
        self._tag_prefix = options.get("tag_prefix", "")

    def format_model(self, model: OpenApiModel) -> OpenApiModel:
        if self._tag_prefix:
            for api in model.apis:
                api.tag = f"{self._tag_prefix}{api.tag}"
        logger.debug("[example] formatted %d apis", len(model.apis))
        return model
