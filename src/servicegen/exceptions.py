"""Exception hierarchy for servicegen.

All exceptions inherit from :class:`ServicegenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`servicegen.exit_codes`.
The top-level error handler in :func:`servicegen.app.main` catches
``ServicegenError`` and exits with the appropriate code.

Subclass hierarchy::

    ServicegenError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 3)
    +-- ConnectionError_    (exit 4)
    +-- SpecParseError      (exit 5)
    +-- RenderError         (exit 6)
    +-- PluginError         (exit 10)
"""

from servicegen.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PLUGIN_ERROR,
    EXIT_RENDER_ERROR,
    EXIT_SPEC_PARSE_ERROR,
)


class ServicegenError(Exception):
    """Base exception for all servicegen errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ServicegenError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(ServicegenError):
    """Raised before resolution when generator options are missing or invalid."""

    exit_code = EXIT_CONFIG_ERROR


class ConnectionError_(ServicegenError):
    """Raised on network-level failures while fetching a remote spec.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SpecParseError(ServicegenError):
    """Raised when the API description cannot be read or is not a JSON/YAML object."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class RenderError(ServicegenError):
    """Raised when a template fails to render or a generated file cannot be written."""

    exit_code = EXIT_RENDER_ERROR


class PluginError(ServicegenError):
    """Raised when a plugin fails to load or is registered twice."""

    exit_code = EXIT_PLUGIN_ERROR
