"""
Tagging commands (`qobuz tag`).

`embed` rewrites the tags of a local file from a Qobuz track; `show` prints
the flat metadata view of a track without touching any file.
"""

import asyncio
import json
from pathlib import Path

import typer
from mutagen import MutagenError
from rich.console import Console
from rich.table import Table

from ..api import QobuzClient
from ..core.config import get_settings
from ..core.errors import MetadataError, QobuzApiError, ResourceNotFoundError
from ..metadata import embed_metadata_in_file, extract_comprehensive_metadata
from ..models import Track

console = Console()
app = typer.Typer(no_args_is_help=True, help="Embed or inspect Qobuz metadata.")


async def _fetch_track(track_id: str) -> Track:
    async with QobuzClient.from_settings() as client:
        return await client.get_track(track_id)


def _load_track(track_id: str) -> Track:
    try:
        return asyncio.run(_fetch_track(track_id))
    except QobuzApiError as e:
        console.print(f"[red]❌ Could not fetch track {track_id}:[/red] {e}")
        raise typer.Exit(1)


@app.command("embed")
def tag_embed(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="FLAC or MP3 file to tag."),
    track_id: str = typer.Option(..., "--track-id", "-t", help="Qobuz track id to take tags from."),
):
    """
    Replace the tags of FILE with metadata of a Qobuz track.

    Existing tags are cleared first; which tags get written follows
    `qobuz config metadata`.
    """
    track = _load_track(track_id)
    album = track.album
    artist = track.performer or (album.artist if album else None)
    if album is None or artist is None:
        missing = "album" if album is None else "artist"
        console.print(f"[red]❌[/red] {ResourceNotFoundError(missing, track_id)}")
        raise typer.Exit(1)

    try:
        embed_metadata_in_file(file, track, album, artist, get_settings().metadata)
    except (OSError, MutagenError, MetadataError) as e:
        console.print(f"[red]❌ Failed to write tags to {file}:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]✅ Tagged[/green] {file}")


@app.command("show")
def tag_show(
    track_id: str = typer.Option(..., "--track-id", "-t", help="Qobuz track id."),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """Print the metadata Qobuz holds for a track."""
    track = _load_track(track_id)
    album = track.album
    artist = track.performer or (album.artist if album else None)
    data = extract_comprehensive_metadata(track, album, artist)

    if json_output:
        typer.echo(json.dumps(data))
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Tag")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, value)
    console.print(table)
