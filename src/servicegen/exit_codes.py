"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~servicegen.exceptions.ServicegenError` subclass.
CI scripts can inspect the exit code to tell a bad config apart from an
unreachable spec URL without parsing stderr.

Example::

    $ servicegen generate --spec https://example.com/v2/api-docs
    $ echo $?
    3   # EXIT_CONFIG_ERROR -- no --output directory was given
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_CONFIG_ERROR = 3
"""Generator options are missing or invalid (no spec source, no output dir, unknown template)."""

EXIT_CONNECTION_ERROR = 4
"""The spec document could not be fetched (timeout, DNS failure, connection refused)."""

EXIT_SPEC_PARSE_ERROR = 5
"""The API description could not be read or parsed."""

EXIT_RENDER_ERROR = 6
"""A template failed to render or an output file could not be written."""

EXIT_PLUGIN_ERROR = 10
"""A plugin failed to load or initialise."""
