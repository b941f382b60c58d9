"""Plugin registry -- discovery, registration, and hook runner access.

This module contains :class:`PluginRegistry`, the explicit value through which
plugins reach the generator.  A registry is constructed by the caller before
the pipeline runs and passed to :class:`~servicegen.tool.OpenApiTool`; there is
no process-wide plugin list.

Third-party packages register plugins by declaring an entry point under the
``servicegen.plugins`` group in their ``pyproject.toml``::

    [project.entry-points."servicegen.plugins"]
    my-plugin = "my_package.plugin:MyPlugin"
"""

from __future__ import annotations

import importlib.metadata
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from servicegen.exceptions import PluginError
from servicegen.plugins.base import Plugin
from servicegen.plugins.hooks import HookRunner

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "servicegen.plugins"
"""The entry-point group name used for plugin discovery."""

OPT_IN_PLUGINS = frozenset({"tag-rename", "operation-suffix", "id-as-string"})
"""Built-in formatters; discovered only when named in *enabled*."""


class PluginRegistry:
    """Holds the plugins taking part in one generation run.

    Example:
        Typical usage::

            registry = PluginRegistry()
            registry.use(OperationSuffixPlugin())
            registry.discover(enabled=["tag-rename"], options={"tag-rename": {...}})
            tool = OpenApiTool(url=url, registry=registry)
    """

    def __init__(self) -> None:
        self._plugins: dict[str, Plugin] = {}
        self._hook_runner: Optional[HookRunner] = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def use(self, plugin: Plugin, options: Optional[dict[str, Any]] = None) -> None:
        """Register and initialise a plugin instance.

        Args:
            plugin: The plugin to register under ``plugin.name``.
            options: Passed to :meth:`~servicegen.plugins.base.Plugin.on_init`.

        Raises:
            PluginError: If a plugin with the same name is already registered.
        """
        name = plugin.name
        if name in self._plugins:
            raise PluginError(f"Plugin '{name}' is already registered")

        plugin.on_init(options or {})
        self._plugins[name] = plugin
        self._hook_runner = None
        logger.info("Registered plugin '%s' v%s", name, plugin.version)

    def discover(
        self,
        enabled: Iterable[str] = (),
        disabled: Iterable[str] = (),
        options: Optional[dict[str, dict[str, Any]]] = None,
    ) -> list[str]:
        """Load plugins from the ``servicegen.plugins`` entry-point group.

        When *enabled* is non-empty only those plugins are loaded; otherwise
        every discovered plugin not in *disabled* is loaded, except the
        built-in formatters in :data:`OPT_IN_PLUGINS`.

        Args:
            enabled: Explicit allowlist of entry-point names.
            disabled: Blocklist of entry-point names.
            options: Per-plugin options keyed by entry-point name.

        Returns:
            Names of the plugins that were loaded.  Plugins that fail to load
            are logged as warnings and skipped.
        """
        enabled_set = set(enabled)
        disabled_set = set(disabled)
        options = options or {}
        loaded: list[str] = []

        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            name = ep.name
            if name in OPT_IN_PLUGINS and name not in enabled_set:
                continue
            if enabled_set and name not in enabled_set:
                logger.debug("Plugin '%s' not in enabled list, skipping", name)
                continue
            if name in disabled_set:
                logger.debug("Plugin '%s' is disabled, skipping", name)
                continue
            if name in self._plugins:
                logger.debug("Plugin '%s' already registered, skipping", name)
                continue

            try:
                plugin_cls = ep.load()
                self.use(plugin_cls(), options.get(name))
                loaded.append(name)
            except Exception as exc:
                logger.warning("Failed to load plugin '%s': %s", name, exc)

        missing = enabled_set - set(self._plugins)
        for name in sorted(missing):
            logger.warning("Enabled plugin '%s' was not found", name)
        return loaded

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def get_plugin(self, name: str) -> Plugin:
        """Retrieve a registered plugin by name.

        Raises:
            PluginError: If no plugin with the given *name* is registered.
        """
        try:
            return self._plugins[name]
        except KeyError:
            raise PluginError(f"Plugin '{name}' is not registered") from None

    def list_plugins(self) -> list[dict[str, str]]:
        return [
            {
                "name": plugin.name,
                "version": plugin.version,
                "description": plugin.description,
            }
            for plugin in self._plugins.values()
        ]

    def template_overrides(self) -> dict[str, Path]:
        """Templates contributed by plugins; later registrations win."""
        templates: dict[str, Path] = {}
        for plugin in self._plugins.values():
            templates.update(plugin.templates)
        return templates

    def get_hook_runner(self) -> HookRunner:
        """Return a :class:`~servicegen.plugins.hooks.HookRunner` over all plugins.

        The runner is cached until the next :meth:`use` call.
        """
        if self._hook_runner is None:
            self._hook_runner = HookRunner(list(self._plugins.values()))
        return self._hook_runner

    def __len__(self) -> int:
        return len(self._plugins)
