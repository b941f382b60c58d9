"""Configuration loading and precedence resolution.

A generation run is described by one :class:`~servicegen.models.GeneratorConfig`.
:func:`resolve_config` builds it from, high to low:

1. CLI flags (passed in as keyword overrides),
2. environment variables (``SERVICEGEN_SPEC``, ``SERVICEGEN_OUTPUT_DIR``,
   ``SERVICEGEN_TEMPLATE``),
3. the project config file (``./servicegen.json`` or an explicit path),
4. model defaults.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from servicegen.exceptions import ConfigError
from servicegen.models import GeneratorConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILENAME = "servicegen.json"

ENV_VARS: dict[str, str] = {
    "spec": "SERVICEGEN_SPEC",
    "output_dir": "SERVICEGEN_OUTPUT_DIR",
    "template": "SERVICEGEN_TEMPLATE",
}
"""Config field -> environment variable consulted for it."""


def load_project_config(path: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load the project config file.

    Args:
        path: Explicit config file. When ``None``, ``./servicegen.json`` is
            used if present.

    Returns:
        The parsed JSON object, or ``None`` when no default file exists.

    Raises:
        ConfigError: If an explicit *path* does not exist, or the file is not
            a JSON object.
    """
    explicit = path is not None
    path = path if path is not None else Path.cwd() / PROJECT_CONFIG_FILENAME
    if not path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    logger.debug("Loaded project config from %s", path)
    return data


def _env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for field, var in ENV_VARS.items():
        value = os.environ.get(var)
        if value:
            overrides[field] = value
    return overrides


def resolve_config(
    config_path: Optional[Path] = None, **cli_overrides: Any
) -> GeneratorConfig:
    """Resolve the effective configuration.

    Args:
        config_path: Explicit project config file (``--config``).
        **cli_overrides: Field values from CLI flags. ``None`` means the flag
            was not given and does not override anything.

    Raises:
        ConfigError: If the project config is unreadable or any layer holds
            a value of the wrong shape.
    """
    merged: dict[str, Any] = {}

    project = load_project_config(config_path)
    if project is not None:
        merged.update(project)

    merged.update(_env_overrides())
    merged.update({k: v for k, v in cli_overrides.items() if v is not None})

    try:
        return GeneratorConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
