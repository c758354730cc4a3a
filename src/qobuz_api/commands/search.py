"""
Search commands (`qobuz search`).

Free-text catalog search for tracks, albums, artists and playlists, printed
as a table or as JSON.
"""

import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

from ..api import QobuzClient
from ..core.errors import QobuzApiError
from ..models import SearchResult

console = Console()
app = typer.Typer(no_args_is_help=True, help="Search the Qobuz catalog.")

COLUMNS = {
    "tracks": ["id", "title", "artist", "album", "isrc"],
    "albums": ["id", "title", "artist", "upc", "date"],
    "artists": ["id", "name", "albums"],
    "playlists": ["id", "name", "owner", "tracks"],
}


def _print_table(rows, columns):
    table = Table(show_header=True, header_style="bold")
    for col in columns:
        table.add_column(col)
    for r in rows:
        table.add_row(*[str(r.get(c) if r.get(c) is not None else "") for c in columns])
    console.print(table)


def _rows(result: SearchResult, kind: str) -> list[dict]:
    page = getattr(result, kind, None)
    items = (page.items if page else None) or []
    if kind == "tracks":
        return [
            {
                "id": t.id,
                "title": t.title,
                "artist": t.performer.name if t.performer else None,
                "album": t.album.title if t.album else None,
                "isrc": t.isrc,
            }
            for t in items
        ]
    if kind == "albums":
        return [
            {
                "id": a.id,
                "title": a.title,
                "artist": a.artist.name if a.artist else None,
                "upc": a.upc,
                "date": a.release_date_original,
            }
            for a in items
        ]
    if kind == "artists":
        return [{"id": a.id, "name": a.name, "albums": a.albums_count} for a in items]
    return [
        {
            "id": p.id,
            "name": p.name,
            "owner": p.owner.name if p.owner else None,
            "tracks": p.tracks_count,
        }
        for p in items
    ]


def _search(kind: str, query: str, limit: int, json_output: bool) -> None:
    async def _run():
        async with QobuzClient.from_settings() as client:
            if kind == "catalog":
                return await client.search_catalog(query, limit=limit)
            method = getattr(client, f"search_{kind}")
            return await method(query, limit=limit)

    try:
        result = asyncio.run(_run())
    except QobuzApiError as e:
        console.print(f"[red]❌ Search failed:[/red] {e}")
        raise typer.Exit(1)

    kinds = list(COLUMNS) if kind == "catalog" else [kind]
    if json_output:
        payload = {"query": query, "type": kind, "results": {k: _rows(result, k) for k in kinds}}
        typer.echo(json.dumps(payload))
        return
    for k in kinds:
        rows = _rows(result, k)
        if kind == "catalog":
            if not rows:
                continue
            console.print(f"[bold]{k.capitalize()}[/bold]")
        _print_table(rows, COLUMNS[k])


@app.command("tracks")
def search_tracks(
    query: str = typer.Argument(..., help="Search text"),
    limit: int = typer.Option(10, "--limit", help="Max results"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    _search("tracks", query, limit, json_output)


@app.command("albums")
def search_albums(
    query: str = typer.Argument(..., help="Search text"),
    limit: int = typer.Option(10, "--limit", help="Max results"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    _search("albums", query, limit, json_output)


@app.command("artists")
def search_artists(
    query: str = typer.Argument(..., help="Search text"),
    limit: int = typer.Option(10, "--limit", help="Max results"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    _search("artists", query, limit, json_output)


@app.command("playlists")
def search_playlists(
    query: str = typer.Argument(..., help="Search text"),
    limit: int = typer.Option(10, "--limit", help="Max results"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    _search("playlists", query, limit, json_output)


@app.command("catalog")
def search_catalog(
    query: str = typer.Argument(..., help="Search text"),
    limit: int = typer.Option(10, "--limit", help="Max results per type"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """Search every content type at once."""
    _search("catalog", query, limit, json_output)
