"""Terminal output for the CLI: data on stdout, diagnostics on stderr.

``inspect`` listings are the only thing written to stdout, so they can be
piped into ``jq`` or a spreadsheet.  Generated-file reports, warnings and
errors go to stderr.  Rich styling is used only when stdout is a terminal
and colour has not been turned off through ``NO_COLOR``, ``TERM=dumb`` or
``--no-color``.

The CLI installs one :class:`OutputManager` per invocation with
:func:`set_output`; library code reports through the module-level helpers
(:func:`report_file`, :func:`error`, ...), which fall back to a default
manager when nothing was installed.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Any, NamedTuple, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How stdout data is rendered. ``AUTO`` picks ``RICH`` or ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Diagnostic(NamedTuple):
    plain: str
    markup: str
    quiet_hides: bool
    verbose_only: bool = False


_DIAGNOSTICS: dict[str, _Diagnostic] = {
    "info": _Diagnostic("{}", "{}", quiet_hides=True),
    "success": _Diagnostic("{}", "[green]{}[/green]", quiet_hides=True),
    "warning": _Diagnostic("Warning: {}", "[yellow]Warning:[/yellow] {}", quiet_hides=False),
    "error": _Diagnostic("Error: {}", "[bold red]Error:[/bold red] {}", quiet_hides=False),
    "debug": _Diagnostic(
        "[debug] {}", "[dim]\\[debug] {}[/dim]", quiet_hides=False, verbose_only=True
    ),
}


def resolve_format(requested: OutputFormat, no_color: bool) -> OutputFormat:
    if requested != OutputFormat.AUTO:
        return requested
    if _is_tty() and not no_color:
        return OutputFormat.RICH
    return OutputFormat.PLAIN


class OutputManager:
    """Output preferences for one CLI invocation.

    Args:
        format: Rendering for stdout data; ``AUTO`` is resolved immediately.
        no_color: Force plain diagnostics even on a terminal.
        quiet: Hide info and success messages (file reports included).
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._format = resolve_format(format, self._no_color)
        self._rich_stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._rich_stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # stdout

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any) -> None:
        """Dump *data* as indented JSON, syntax highlighted in Rich mode."""
        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.RICH:
            self._rich_stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
            return
        self.print_data(text)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render rows as a Rich table, JSON records, or tab-separated lines.

        *title* is only shown in Rich mode.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.RICH:
            self._rich_stdout.print(_rich_table(headers, rows, title))
        else:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))

    # stderr

    def _diagnose(self, kind: str, message: str) -> None:
        spec = _DIAGNOSTICS[kind]
        if spec.verbose_only and not self._verbose:
            return
        if spec.quiet_hides and self._quiet:
            return
        if self._no_color:
            print(spec.plain.format(message), file=sys.stderr, flush=True)
        else:
            self._rich_stderr.print(spec.markup.format(message))

    def info(self, message: str) -> None:
        self._diagnose("info", message)

    def success(self, message: str) -> None:
        self._diagnose("success", message)

    def warning(self, message: str) -> None:
        self._diagnose("warning", message)

    def error(self, message: str) -> None:
        self._diagnose("error", message)

    def debug(self, message: str) -> None:
        self._diagnose("debug", message)

    def report_file(self, path: Path, content: str) -> None:
        """Report a written file as ``<path> <size>kb``."""
        self.success(f"{path} {format_size(content)}")


def _rich_table(headers: list[str], rows: list[list[str]], title: Optional[str]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*row)
    return table


def format_size(content: str) -> str:
    """UTF-8 size of *content* in kilobytes, e.g. ``"1.23kb"``."""
    return f"{len(content.encode('utf-8')) / 1024:.2f}kb"


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` (any value, see no-color.org) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# Global instance

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed manager; the next :func:`get_output` builds a fresh one."""
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_json(data: Any) -> None:
    get_output().print_json(data)


def print_table(
    headers: list[str], rows: list[list[str]], title: Optional[str] = None
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)


def report_file(path: Path, content: str) -> None:
    get_output().report_file(path, content)
