"""Abstract base class for servicegen plugins.

Every plugin must subclass :class:`Plugin` and implement the :attr:`name`
property. The remaining hooks (``on_init``, ``format_model``, ``templates``)
are optional -- default implementations are no-ops so plugins only override
what they need.

Plugins are either registered directly on a
:class:`~servicegen.plugins.manager.PluginRegistry` or declared as entry
points in the ``servicegen.plugins`` group and discovered at runtime.

Example:
    Minimal plugin implementation::

        class UppercaseTags(Plugin):
            @property
            def name(self) -> str:
                return "uppercase-tags"

            def format_model(self, model):
                for api in model.apis:
                    api.tag = api.tag.upper()
                return model
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from servicegen.models import OpenApiModel


class Plugin(ABC):
    """Base class for all servicegen plugins.

    The plugin lifecycle is:

    1. Instantiation -- the registry calls the no-arg constructor when
       discovering entry points; direct registration passes an instance.
    2. :meth:`on_init` -- called once with the plugin's options dict.
    3. :meth:`format_model` -- called once per generation run, on a deep copy
       of the resolved model.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique plugin name used for registration and logging."""
        ...

    @property
    def version(self) -> str:
        return "0.1.0"

    @property
    def description(self) -> str:
        return ""

    @property
    def templates(self) -> dict[str, Path]:
        """Extra request-binding templates contributed by this plugin.

        Returns:
            A mapping of template name (as passed to ``--template``) to the
            Jinja2 template file.  Defaults to no templates.
        """
        return {}

    def on_init(self, options: dict[str, Any]) -> None:
        """Called once when the plugin is registered.

        Args:
            options: Plugin-specific settings, e.g. from the
                ``plugin_options`` section of ``servicegen.json``.
        """

    def format_model(self, model: OpenApiModel) -> Optional[OpenApiModel]:
        """Transform the resolved model before rendering.

        *model* is already a private deep copy; plugins may mutate it in
        place and return it, or build and return a new model.  Returning
        ``None`` keeps *model* as it is.
        """
        return model
