"""End-to-end tests for the servicegen CLI through Typer's CliRunner."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from servicegen import __version__
from servicegen.app import app
from servicegen.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)
from servicegen.plugins.formatters import OperationSuffixPlugin

runner = CliRunner()


def _entry_point(name: str, target: Any) -> MagicMock:
    ep = MagicMock()
    ep.name = name
    ep.load.return_value = target
    return ep


@pytest.fixture
def no_entry_points():
    """Keep installed plugins out of CLI runs."""
    with patch(
        "servicegen.plugins.manager.importlib.metadata.entry_points",
        return_value=[],
    ):
        yield


# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------


class TestRootApp:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"servicegen {__version__}" in result.stdout

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.stdout
        assert "inspect" in result.stdout


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


@pytest.mark.usefixtures("isolated_config", "no_entry_points")
class TestGenerate:
    def test_writes_typescript_files(
        self, swagger_spec_file: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "services"
        result = runner.invoke(
            app, ["generate", "--spec", str(swagger_spec_file), "--output", str(out)]
        )
        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in out.iterdir()) == [
            "order-controller.ts",
            "typings.ts",
            "user-controller.ts",
        ]
        assert "Generated 3 files" in result.output

        service = (out / "user-controller.ts").read_text(encoding="utf-8")
        assert "import request from 'umi-request';" in service
        assert "export async function getUserUsingGET(" in service

    def test_javascript_axios(self, swagger_spec_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "services"
        result = runner.invoke(
            app,
            [
                "generate",
                "-s",
                str(swagger_spec_file),
                "-o",
                str(out),
                "-t",
                "axios",
                "--javascript",
            ],
        )
        assert result.exit_code == 0, result.output
        assert (out / "typings.js").is_file()
        service = (out / "order-controller.js").read_text(encoding="utf-8")
        assert "import axios from 'axios';" in service
        assert "from './typings'" not in service

    def test_import_text_replaces_default_import(
        self, swagger_spec_file: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "services"
        header = "import request from '@/utils/request';"
        result = runner.invoke(
            app,
            [
                "generate",
                "--spec",
                str(swagger_spec_file),
                "--output",
                str(out),
                "--import-text",
                header,
            ],
        )
        assert result.exit_code == 0, result.output
        service = (out / "user-controller.ts").read_text(encoding="utf-8")
        assert header in service
        assert "from 'umi-request'" not in service

    def test_missing_spec_is_usage_error(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["generate", "--output", str(tmp_path)])
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "No spec given" in result.output

    def test_missing_output_is_config_error(self, swagger_spec_file: Path) -> None:
        result = runner.invoke(app, ["generate", "--spec", str(swagger_spec_file)])
        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "output directory" in result.output

    def test_unknown_template_is_config_error(
        self, swagger_spec_file: Path, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            app,
            [
                "generate",
                "--spec",
                str(swagger_spec_file),
                "--output",
                str(tmp_path / "out"),
                "--template",
                "fetch",
            ],
        )
        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Unsupported template 'fetch'" in result.output
        assert not (tmp_path / "out").exists()

    def test_unreadable_spec_is_parse_error(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            [
                "generate",
                "--spec",
                str(tmp_path / "missing.json"),
                "--output",
                str(tmp_path / "out"),
            ],
        )
        assert result.exit_code == EXIT_SPEC_PARSE_ERROR

    def test_env_vars_supply_spec_and_output(
        self,
        swagger_spec_file: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        out = tmp_path / "from-env"
        monkeypatch.setenv("SERVICEGEN_SPEC", str(swagger_spec_file))
        monkeypatch.setenv("SERVICEGEN_OUTPUT_DIR", str(out))
        result = runner.invoke(app, ["generate"])
        assert result.exit_code == 0, result.output
        assert (out / "typings.ts").is_file()

    def test_project_file_with_cli_override(
        self, swagger_spec_file: Path, isolated_config: Path
    ) -> None:
        (isolated_config / "servicegen.json").write_text(
            json.dumps(
                {
                    "spec": str(swagger_spec_file),
                    "output_dir": "generated",
                    "template": "axios",
                    "typescript": False,
                }
            ),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["generate", "--typescript"])
        assert result.exit_code == 0, result.output
        out = isolated_config / "generated"
        assert (out / "typings.ts").is_file()
        assert "axios.request" in (out / "user-controller.ts").read_text(
            encoding="utf-8"
        )

    def test_quiet_suppresses_file_reports(
        self, swagger_spec_file: Path, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            app,
            [
                "--quiet",
                "generate",
                "--spec",
                str(swagger_spec_file),
                "--output",
                str(tmp_path / "out"),
            ],
        )
        assert result.exit_code == 0, result.output
        assert "kb" not in result.output


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


@pytest.mark.usefixtures("isolated_config", "no_entry_points")
class TestInspect:
    def test_types_json(self, swagger_spec_file: Path) -> None:
        result = runner.invoke(
            app, ["--json", "inspect", "types", "--spec", str(swagger_spec_file)]
        )
        assert result.exit_code == 0, result.output
        types = json.loads(result.stdout)
        assert [t["name"] for t in types] == ["User", "Order", "Page<T>"]
        assert types[2]["isGenerics"] is True

    def test_apis_json(self, swagger_spec_file: Path) -> None:
        result = runner.invoke(
            app, ["--json", "inspect", "apis", "--spec", str(swagger_spec_file)]
        )
        assert result.exit_code == 0, result.output
        apis = json.loads(result.stdout)
        assert len(apis) == 7
        get_user = next(a for a in apis if a["name"] == "getUserUsingGET")
        assert get_user["request"]["urlText"] == "/users/${pathVars.id}"
        assert get_user["response"]["type"] == "User"

    def test_deps_json(self, swagger_spec_file: Path) -> None:
        result = runner.invoke(
            app, ["--json", "inspect", "deps", "--spec", str(swagger_spec_file)]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {
            "user-controller": ["Page", "User"],
            "order-controller": ["Page", "Order"],
        }

    def test_deps_plain_table(self, swagger_spec_file: Path) -> None:
        result = runner.invoke(
            app, ["--no-color", "inspect", "deps", "--spec", str(swagger_spec_file)]
        )
        assert result.exit_code == 0, result.output
        lines = result.stdout.strip().splitlines()
        assert lines[0] == "Tag\tAPIs\tDependencies"
        assert "user-controller\t5\tPage, User" in lines

    def test_inspect_without_spec(self) -> None:
        result = runner.invoke(app, ["inspect", "types"])
        assert result.exit_code == EXIT_INVALID_USAGE


# ---------------------------------------------------------------------------
# Plugins
# ---------------------------------------------------------------------------


@pytest.mark.usefixtures("isolated_config")
class TestPluginFlag:
    def _invoke_with_entry_points(self, args: list[str]) -> Any:
        eps = [_entry_point("operation-suffix", OperationSuffixPlugin)]
        with patch(
            "servicegen.plugins.manager.importlib.metadata.entry_points",
            return_value=eps,
        ):
            return runner.invoke(app, args)

    def test_opt_in_plugin_not_loaded_by_default(self, swagger_spec_file: Path) -> None:
        result = self._invoke_with_entry_points(
            ["--json", "inspect", "apis", "--spec", str(swagger_spec_file)]
        )
        assert result.exit_code == 0, result.output
        names = {a["name"] for a in json.loads(result.stdout)}
        assert "getUserUsingGET" in names

    def test_plugin_flag_enables_formatter(
        self, swagger_spec_file: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "out"
        result = self._invoke_with_entry_points(
            [
                "generate",
                "--spec",
                str(swagger_spec_file),
                "--output",
                str(out),
                "--plugin",
                "operation-suffix",
            ]
        )
        assert result.exit_code == 0, result.output
        service = (out / "user-controller.ts").read_text(encoding="utf-8")
        assert "export async function getUser(" in service
        assert "UsingGET" not in service
