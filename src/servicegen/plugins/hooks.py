"""Runner for the model-formatting hook chain.

:class:`HookRunner` applies ``format_model`` across all registered plugins in
registration order, then the caller's own format hook.  The chain follows a
pipeline pattern: each hook receives the output of the previous one.

The resolved model handed to :meth:`HookRunner.run_format` is never touched;
the chain starts from a deep copy.
"""

from __future__ import annotations

import logging
from typing import Optional

from servicegen.models import FormatHook, OpenApiModel
from servicegen.plugins.base import Plugin

logger = logging.getLogger(__name__)


class HookRunner:
    """Executes format hooks across plugins in registration order.

    The runner is created by
    :meth:`~servicegen.plugins.manager.PluginRegistry.get_hook_runner`
    and holds an immutable snapshot of the plugin list at creation time.
    """

    def __init__(self, plugins: list[Plugin]) -> None:
        self._plugins = list(plugins)

    def run_format(
        self, model: OpenApiModel, format_hook: Optional[FormatHook] = None
    ) -> OpenApiModel:
        """Return a formatted deep copy of *model*.

        Args:
            model: The resolved model. It is not mutated.
            format_hook: Optional caller transform applied after all plugins.

        Returns:
            The transformed copy.  A hook returning ``None`` leaves the copy
            as the previous hook produced it.
        """
        current = model.model_copy(deep=True)
        for plugin in self._plugins:
            logger.debug("Running format hook of plugin '%s'", plugin.name)
            result = plugin.format_model(current)
            if result is not None:
                current = result
        if format_hook is not None:
            result = format_hook(current)
            if result is not None:
                current = result
        return current
