"""Typer application and CLI entry point for cachefresh.

Wires the top-level Typer application and registers the built-in
sub-commands (``check`` and ``config``).  :func:`main` is the console-script
entry point declared in ``pyproject.toml``: it installs a SIGINT handler,
invokes the app, maps :class:`~cachefresh.exceptions.CachefreshError` to its
exit code, and writes a crash log for anything unexpected.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from cachefresh import __version__
from cachefresh.commands import check_command, config_app
from cachefresh.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="cachefresh",
    help="Evaluate HTTP response freshness from Cache-Control, Expires, Date, and Age.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"cachefresh {__version__}")
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
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Initialise the global output manager from flags and configuration.

    ``--json`` and ``--plain`` win over the configured ``output.format``
    (which itself may come from ``CACHEFRESH_FORMAT``).
    """
    from cachefresh.config import resolve_config
    from cachefresh.exceptions import ConfigError
    from cachefresh.output import OutputFormat, OutputManager, set_output

    # A broken config must not lock the user out of ``config reset``.
    problem: str | None = None
    try:
        fmt = OutputFormat(resolve_config().output.format)
    except ConfigError as exc:
        fmt, problem = OutputFormat.AUTO, str(exc)
    except ValueError as exc:
        fmt, problem = OutputFormat.AUTO, f"Unknown output format, using auto: {exc}"

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    if problem is not None:
        output.warning(problem)


app.command("check")(check_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback under the data directory and return its path."""
    from cachefresh.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``cachefresh`` console script.

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
        from cachefresh.exceptions import CachefreshError
        from cachefresh.output import error

        if isinstance(exc, CachefreshError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
