"""The ``servicegen`` command line.

Commands:

* ``servicegen generate`` -- write typings and per-tag service files.
* ``servicegen inspect types|apis|deps`` -- show what a spec resolves to.

Global flags (``--json``, ``--no-color``, ``--quiet``, ``--verbose``) go before
the command name and configure :mod:`servicegen.output` and logging for the
whole run.
"""

from __future__ import annotations

import logging
import sys

import typer
from rich.console import Console
from rich.logging import RichHandler

from servicegen import __version__
from servicegen.commands.generate import generate_command
from servicegen.commands.inspect import inspect_app
from servicegen.exit_codes import EXIT_GENERIC_FAILURE

EXIT_CANCELLED = 130

app = typer.Typer(
    name="servicegen",
    help="Generate typed HTTP client bindings from Swagger 2.0 / OpenAPI 3.x specs.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("generate")(generate_command)
app.add_typer(inspect_app, name="inspect", help="Inspect the resolved model.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"servicegen {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Route stdlib logging to a Rich handler on stderr.

    DEBUG with ``--verbose``, WARNING otherwise.
    """
    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=False,
        show_path=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the servicegen version.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print inspect results as JSON."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Plain, uncoloured output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Do not report generated files."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log resolution and rendering details."
    ),
) -> None:
    """Install the output manager and logging for this invocation."""
    from servicegen.output import OutputFormat, OutputManager, set_output

    set_output(
        OutputManager(
            format=OutputFormat.JSON if json_output else OutputFormat.AUTO,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )
    configure_logging(verbose=verbose, no_color=no_color)


def main() -> None:
    """Console-script entry point.

    Commands translate :class:`~servicegen.exceptions.ServicegenError` into
    exit codes themselves; this is the last line for anything that escapes.
    """
    from servicegen.exceptions import ServicegenError
    from servicegen.output import error

    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)
    except ServicegenError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        logging.getLogger(__name__).debug("Unhandled exception", exc_info=True)
        sys.exit(EXIT_GENERIC_FAILURE)
