"""Shared test fixtures for servicegen.

Provides reusable fixtures for loading spec fixtures, building resolved
models, isolating configuration, managing output state, and running CLI
commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from servicegen.models import OpenApiModel
from servicegen.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def swagger_raw() -> dict[str, Any]:
    """Load the raw springfox-style Swagger 2.0 spec dict."""
    with open(FIXTURES_DIR / "swagger_2.0.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def openapi_raw() -> dict[str, Any]:
    """Load the raw OpenAPI 3.0 spec dict."""
    with open(FIXTURES_DIR / "openapi_3.0.json", encoding="utf-8") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Resolved model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def swagger_model(swagger_raw: dict[str, Any]) -> OpenApiModel:
    from servicegen.parser import build_openapi_model

    return build_openapi_model(swagger_raw)


@pytest.fixture
def openapi_model(openapi_raw: dict[str, Any]) -> OpenApiModel:
    from servicegen.parser import build_openapi_model

    return build_openapi_model(openapi_raw)


@pytest.fixture
def swagger_spec_file(tmp_path: Path) -> Path:
    """Copy the Swagger 2.0 fixture into tmp_path and return its path."""
    spec_path = tmp_path / "api-docs.json"
    spec_path.write_text(
        (FIXTURES_DIR / "swagger_2.0.json").read_text(encoding="utf-8"),
        encoding="utf-8",
    )
    return spec_path


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Clears all SERVICEGEN_* environment variables and changes the working
    directory to tmp_path so no stray ``servicegen.json`` is picked up.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in [
        "SERVICEGEN_SPEC",
        "SERVICEGEN_OUTPUT_DIR",
        "SERVICEGEN_TEMPLATE",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager for tests that ignore output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager for tests that check JSON output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
