"""
qobuz CLI - Main entry point using Typer.

This module configures the main Typer application, registers all command groups,
and defines global options like --version and --verbose.
"""

import typer
from rich.console import Console
from rich.traceback import install

from .commands import config, favorites, get, search, tag
from .core.logging_util import setup_logging

# Install a rich traceback handler for readable exceptions
install(show_locals=False)

console = Console()

app = typer.Typer(
    name="qobuz",
    help="🎵 Qobuz API client: search the catalog, download and tag tracks.",
    epilog="Use `qobuz [COMMAND] --help` for more info on a specific command.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

app.add_typer(config.app, name="config", help="🔐 Manage credentials, paths, and tag settings.")
app.add_typer(get.app, name="get", help="🚀 Download tracks or albums.")
app.add_typer(search.app, name="search", help="🔎 Search the Qobuz catalog.")
app.add_typer(tag.app, name="tag", help="🏷️ Embed or inspect Qobuz metadata.")
app.add_typer(favorites.app, name="favorites", help="⭐ Manage your favorites.")


def _version_callback(value: bool):
    # Eager, so it runs before Click complains about a missing command
    if value:
        from . import __version__

        console.print(f"qobuz-api v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show the application version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(None, "--verbose", help="Enable DEBUG-level logging."),
    quiet: bool = typer.Option(None, "--quiet", help="Reduce logging to warnings and errors."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines."),
):
    """
    qobuz - search, download and tag music from Qobuz.
    """
    # Configure logging once, early
    setup_logging(json_logs=json_logs, verbose=bool(verbose), quiet=bool(quiet))


def cli():
    """Main entry point for the console script defined in pyproject.toml."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 Operation cancelled by user.[/yellow]")
        raise typer.Exit(130)


if __name__ == "__main__":
    cli()
