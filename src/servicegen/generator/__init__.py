"""Template stage: render the resolved model into TypeScript/JavaScript files.

See :mod:`servicegen.generator.service_generator`.
"""

from servicegen.generator.service_generator import (
    BUILTIN_TEMPLATES,
    generate_service,
    supported_templates,
    validate_options,
)

__all__ = [
    "BUILTIN_TEMPLATES",
    "generate_service",
    "supported_templates",
    "validate_options",
]
