"""Plugin system for servicegen -- registration, discovery, and format hooks.

Plugins extend generation in two ways: they may rewrite the resolved model
before rendering (``format_model``) and contribute additional request-binding
templates (``templates``).  Third-party packages can ship plugins as entry
points in the ``servicegen.plugins`` group.

Key classes:

* :class:`Plugin` -- Abstract base class that all plugins must extend.
* :class:`PluginRegistry` -- Explicit registry passed into the generator.
* :class:`HookRunner` -- Applies format hooks to a deep copy of the model.

Example::

    from servicegen.plugins import PluginRegistry
    from servicegen.plugins.formatters import OperationSuffixPlugin

    registry = PluginRegistry()
    registry.use(OperationSuffixPlugin())
    formatted = registry.get_hook_runner().run_format(model)
"""

from servicegen.plugins.base import Plugin
from servicegen.plugins.hooks import HookRunner
from servicegen.plugins.manager import PluginRegistry

__all__ = ["Plugin", "HookRunner", "PluginRegistry"]
