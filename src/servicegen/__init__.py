"""servicegen -- Generate typed HTTP client bindings from Swagger/OpenAPI specs.

This package reads a Swagger 2.0 or OpenAPI 3.x document, resolves its
schemas into named TypeScript types (recovering generics from encoded names
such as ``Page«User»``) and its operations into request functions, and
renders one service file per tag plus a shared ``typings`` file.

Typical workflow::

    servicegen generate --spec https://example.com/v2/api-docs --output src/services
    servicegen inspect types --spec api-docs.json

Modules:
    app: Typer application and CLI entry point.
    tool: :class:`~servicegen.tool.OpenApiTool`, the programmatic facade.
    models: Pydantic models shared across the entire package.
    config: Project config file, environment and CLI precedence.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
