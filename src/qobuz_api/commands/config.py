"""
Configuration commands (`qobuz config`).

This module handles all user-facing configuration, including:
- Storing Qobuz app and user credentials
- The default download location
- Which tags are embedded into downloaded files
- Viewing and clearing stored settings
"""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt

from ..core.auth import CREDENTIAL_KEYS, clear_credentials, get_credentials, store_credentials
from ..core.config import get_settings, save_settings
from ..metadata import MetadataConfig

console = Console()
app = typer.Typer(
    no_args_is_help=True,
    help="Manage credentials, paths, and tagging settings.",
)


@app.command("credentials")
def config_credentials(
    app_id: Optional[str] = typer.Option(None, "--app-id", help="Qobuz application id."),
    app_secret: Optional[str] = typer.Option(
        None, "--app-secret", help="Qobuz application secret (signs file URL requests)."
    ),
    user_id: Optional[str] = typer.Option(None, "--user-id", help="Your Qobuz user id."),
    user_auth_token: Optional[str] = typer.Option(
        None, "--token", help="A user auth token from an existing Qobuz session."
    ),
):
    """
    Store Qobuz credentials in the system keyring.

    Missing app id or secret are prompted for; the user id and token are
    optional and only needed for favorites and full-length downloads.
    """
    if not app_id:
        app_id = get_credentials("app_id") or Prompt.ask("Qobuz App ID")
    if not app_secret:
        app_secret = get_credentials("app_secret") or Prompt.ask("Qobuz App Secret", password=True)

    values = {
        "app_id": app_id,
        "app_secret": app_secret,
        "user_id": user_id,
        "user_auth_token": user_auth_token,
    }
    stored = []
    for key, value in values.items():
        if value:
            store_credentials(key, value)
            stored.append(key)
    console.print(f"[green]✅ Stored:[/green] {', '.join(stored)}")


@app.command("path")
def config_path(
    download_path: Optional[Path] = typer.Option(
        None, "--download", help="Set the default path for new downloads."
    ),
):
    """
    View or update the download path.

    Running the command with no options displays the current path.
    """
    settings = get_settings()
    if download_path:
        settings.download_path = Path(str(download_path)).expanduser().resolve()
        settings.download_path.mkdir(parents=True, exist_ok=True)
        save_settings(settings)
        console.print(f"Download path set to: [blue]{settings.download_path}[/blue]")
        return
    console.print(f"Download: [blue]{settings.download_path}[/blue]")


def _check_flags(flags: List[str]) -> None:
    known = MetadataConfig.field_names()
    unknown = [f for f in flags if f not in known]
    if unknown:
        console.print(f"[red]Unknown tag flag(s):[/red] {', '.join(unknown)}")
        console.print(f"Known flags: {', '.join(known)}")
        raise typer.Exit(1)


@app.command("metadata")
def config_metadata(
    enable: List[str] = typer.Option([], "--enable", help="Tag flag to switch on (repeatable)."),
    disable: List[str] = typer.Option([], "--disable", help="Tag flag to switch off (repeatable)."),
    reset: bool = typer.Option(False, "--reset", help="Restore the default tag selection."),
):
    """
    View or change which tags are embedded into downloaded files.
    """
    _check_flags(enable + disable)
    settings = get_settings()

    if reset:
        settings.metadata = MetadataConfig()
    for flag in enable:
        setattr(settings.metadata, flag, True)
    for flag in disable:
        setattr(settings.metadata, flag, False)

    if reset or enable or disable:
        save_settings(settings)
        console.print("[green]✅ Tag settings saved.[/green]")

    for name, on in settings.metadata.model_dump().items():
        state = "[green]on[/green]" if on else "[yellow]off[/yellow]"
        console.print(f"  {name:<16} {state}")


@app.command("show")
def config_show(
    json_output: bool = typer.Option(
        False, "--json", help="Output configuration and credential status as JSON."
    ),
):
    """
    Display the current configuration and stored credential status.

    Secrets are never printed; only whether each one is set.
    """
    settings = get_settings()
    data = {
        "paths": {"download": str(settings.download_path)},
        "format_id": settings.format_id,
        "requests_per_second": settings.requests_per_second,
        "credentials": {
            key: bool(get_credentials(key) or getattr(settings, key, None))
            for key in CREDENTIAL_KEYS
        },
        "metadata": settings.metadata.model_dump(),
    }

    if json_output:
        typer.echo(json.dumps(data))
        return

    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Download:  [blue]{data['paths']['download']}[/blue]")
    console.print(f"  Format ID: [blue]{data['format_id']}[/blue]")
    console.print("\n[bold]Credentials:[/bold]")
    for key, present in data["credentials"].items():
        state = "[green]Set[/green]" if present else "[yellow]Not Set[/yellow]"
        console.print(f"  {key:<16} {state}")
    disabled = [k for k, v in data["metadata"].items() if not v]
    console.print(f"\n[bold]Tags disabled:[/bold] {', '.join(disabled) or 'none'}")


@app.command("clear")
def config_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    """
    Permanently delete all stored Qobuz credentials.
    """
    if yes or Confirm.ask("[bold red]Delete all stored Qobuz credentials?[/bold red]", default=False):
        removed = clear_credentials()
        console.print(
            f"[green]✅ Credentials cleared.[/green] ({', '.join(removed) or 'nothing stored'})"
        )
    else:
        console.print("Operation cancelled.")
