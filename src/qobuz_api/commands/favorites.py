"""
Favorites commands (`qobuz favorites`).

These endpoints act on the account behind the stored user auth token.
"""

import asyncio
import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..api import QobuzClient
from ..core.errors import QobuzApiError

console = Console()
app = typer.Typer(no_args_is_help=True, help="Manage your Qobuz favorites.")

FAVORITE_TYPES = ("tracks", "albums", "artists")


def _call(coro_factory):
    async def _run():
        async with QobuzClient.from_settings() as client:
            return await coro_factory(client)

    try:
        return asyncio.run(_run())
    except QobuzApiError as e:
        console.print(f"[red]❌ Favorites request failed:[/red] {e}")
        raise typer.Exit(1)


@app.command("add")
def favorites_add(
    tracks: Optional[str] = typer.Option(None, "--tracks", help="Comma separated track ids."),
    albums: Optional[str] = typer.Option(None, "--albums", help="Comma separated album ids."),
    artists: Optional[str] = typer.Option(None, "--artists", help="Comma separated artist ids."),
):
    """Add tracks, albums or artists to your favorites."""
    status = _call(lambda c: c.add_user_favorites(tracks, albums, artists))
    console.print(f"[green]✅ Favorites updated[/green] ({status.status or 'ok'})")


@app.command("remove")
def favorites_remove(
    tracks: Optional[str] = typer.Option(None, "--tracks", help="Comma separated track ids."),
    albums: Optional[str] = typer.Option(None, "--albums", help="Comma separated album ids."),
    artists: Optional[str] = typer.Option(None, "--artists", help="Comma separated artist ids."),
):
    """Remove tracks, albums or artists from your favorites."""
    status = _call(lambda c: c.delete_user_favorites(tracks, albums, artists))
    console.print(f"[green]✅ Favorites updated[/green] ({status.status or 'ok'})")


@app.command("list")
def favorites_list(
    type: str = typer.Option("tracks", "--type", "-t", help="tracks|albums|artists"),
    limit: int = typer.Option(50, "--limit", help="Max results"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """List your favorite tracks, albums or artists."""
    if type not in FAVORITE_TYPES:
        console.print(f"[red]Error:[/red] --type must be one of {', '.join(FAVORITE_TYPES)}.")
        raise typer.Exit(1)

    favorites = _call(lambda c: c.get_user_favorites(type=type, limit=limit))
    page = getattr(favorites, type)
    rows = []
    for item in (page.items if page else None) or []:
        if type == "artists":
            rows.append({"id": item.id, "name": item.name})
        elif type == "albums":
            rows.append(
                {"id": item.id, "name": item.title, "artist": item.artist.name if item.artist else None}
            )
        else:
            rows.append(
                {
                    "id": item.id,
                    "name": item.title,
                    "artist": item.performer.name if item.performer else None,
                }
            )

    if json_output:
        typer.echo(json.dumps({"type": type, "results": rows}))
        return
    table = Table(show_header=True, header_style="bold")
    columns = ["id", "name"] if type == "artists" else ["id", "name", "artist"]
    for col in columns:
        table.add_column(col)
    for r in rows:
        table.add_row(*[str(r.get(c) or "") for c in columns])
    console.print(table)
