"""
Download commands (`qobuz get`).

Fetch single tracks or whole albums by id or by Qobuz URL. Downloaded files
are tagged with the metadata settings from `qobuz config metadata`.
"""

import asyncio
import re
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..api import QobuzClient
from ..api.client import track_file_extension
from ..core.config import get_settings
from ..core.errors import QobuzApiError
from ..core.utils import sanitize_filename

console = Console()
app = typer.Typer(no_args_is_help=True, help="Download tracks or albums from Qobuz.")

_QOBUZ_URL = re.compile(
    r"qobuz\.com/(?:[a-z]{2}-[a-z]{2}/)?(album|track)/(?:[^/?#]+/)*([^/?#]+)"
)


def parse_qobuz_url(url: str) -> tuple[str, str] | None:
    """Return ("album" | "track", id) for a Qobuz web or player URL."""
    match = _QOBUZ_URL.search(url)
    if not match:
        return None
    return match.group(1), match.group(2)


def _output_dir(output: Optional[Path]) -> Path:
    return Path(output).expanduser().resolve() if output else get_settings().download_path


async def _download_track(track_id: str, format_id: str, output_dir: Path) -> Path:
    settings = get_settings()
    async with QobuzClient.from_settings(settings) as client:
        track = await client.get_track(track_id)
        name = sanitize_filename(f"{track.track_number or 0:02}. {track.title or f'Track {track_id}'}")
        dest = output_dir / f"{name}.{track_file_extension(format_id)}"
        return await client.download_track(
            track_id, format_id, dest, settings.metadata, track=track
        )


async def _download_album(album_id: str, format_id: str, output_dir: Path) -> list[Path]:
    settings = get_settings()
    async with QobuzClient.from_settings(settings) as client:
        album = await client.get_album(album_id, limit=0)
        artist = album.artist.name if album.artist and album.artist.name else "Unknown Artist"
        folder = sanitize_filename(f"{artist} - {album.title or album_id}")
        return await client.download_album(album_id, format_id, output_dir / folder, settings.metadata)


def _run(kind: str, item_id: str, format_id: Optional[str], output: Optional[Path], dry_run: bool):
    format_id = format_id or get_settings().format_id
    output_dir = _output_dir(output)
    if dry_run:
        console.print(
            f"[cyan]Dry run:[/cyan] would download {kind} [bold]{item_id}[/bold] "
            f"(format {format_id}) to [blue]{output_dir}[/blue]"
        )
        return
    try:
        if kind == "track":
            path = asyncio.run(_download_track(item_id, format_id, output_dir))
            console.print(f"[green]✅ Downloaded[/green] {path}")
        else:
            paths = asyncio.run(_download_album(item_id, format_id, output_dir))
            console.print(f"[green]✅ Album download complete![/green] ({len(paths)} tracks)")
    except QobuzApiError as e:
        console.print(f"[red]❌ Qobuz download failed:[/red] {e}")
        raise typer.Exit(1)


@app.command("track")
def get_track(
    track_id: str = typer.Argument(..., help="Qobuz track id"),
    format_id: Optional[str] = typer.Option(
        None, "--format-id", "-f", help="5=MP3 320, 6=FLAC 16-bit, 7=FLAC 24/96, 27=FLAC 24/192."
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Target directory."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print what would be downloaded."),
):
    """Download a single track."""
    _run("track", track_id, format_id, output, dry_run)


@app.command("album")
def get_album(
    album_id: str = typer.Argument(..., help="Qobuz album id"),
    format_id: Optional[str] = typer.Option(
        None, "--format-id", "-f", help="5=MP3 320, 6=FLAC 16-bit, 7=FLAC 24/96, 27=FLAC 24/192."
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Target directory."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print what would be downloaded."),
):
    """Download every track of an album into an 'Artist - Album' folder."""
    _run("album", album_id, format_id, output, dry_run)


@app.command("url")
def get_url(
    url: str = typer.Argument(..., help="Qobuz album or track URL"),
    format_id: Optional[str] = typer.Option(None, "--format-id", "-f", help="Qobuz format id."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Target directory."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print what would be downloaded."),
):
    """Detect a track or album from a Qobuz URL and download it."""
    parsed = parse_qobuz_url(url)
    if parsed is None:
        console.print("[red]❌ Unsupported or invalid URL.[/red]")
        raise typer.Exit(1)
    kind, item_id = parsed
    console.print(f"Detected Qobuz {kind} with ID: {item_id}")
    _run(kind, item_id, format_id, output, dry_run)
