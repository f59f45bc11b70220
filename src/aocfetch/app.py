"""Typer application and CLI entry point for aocfetch.

This module wires together the top-level Typer application and registers
the sub-commands (``fetch`` and ``cache``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler and invokes the Typer app,
turning :class:`~aocfetch.exceptions.AocFetchError` into a one-line error
and the matching exit code.

See Also:
    :mod:`aocfetch.config`: Settings resolution for the commands.
    :mod:`aocfetch.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import os
import signal
import sys
from typing import Any, Optional

import typer

from aocfetch import __version__
from aocfetch.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="aocfetch",
    help="Fetch Advent of Code puzzle inputs, caching them on disk.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Sub-commands
# ------------------------------------------------------------------ #

from aocfetch.commands.cache import cache_app  # noqa: E402
from aocfetch.commands.fetch import fetch_command  # noqa: E402

app.command("fetch")(fetch_command)
app.add_typer(cache_app, name="cache", help="Inspect the local input cache.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"aocfetch {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format for listings."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output (also enabled by TRACE)."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write data to this file instead of stdout."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~aocfetch.output.OutputManager` from
    CLI flags.
    """
    from aocfetch.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    verbose = verbose or bool(os.environ.get("TRACE"))
    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
        )
    )


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``aocfetch`` console script.

    Unhandled :class:`~aocfetch.exceptions.AocFetchError` instances cause
    a clean exit with the error's ``exit_code``. All other exceptions exit
    with :data:`~aocfetch.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from aocfetch.exceptions import AocFetchError
        from aocfetch.output import error

        if isinstance(exc, AocFetchError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
