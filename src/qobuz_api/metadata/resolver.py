"""
Resolution of tag values from Qobuz track and album records.

Every tag value may come from several optional sources. `resolve_attributes`
walks them in a fixed precedence order and returns one `ResolvedAttributes`
per call; nothing is cached. Missing sources leave the matching attribute as
`None` and are never an error.

FLAC and MP3 files disagree on a handful of rules (album artist, artist
separator, composer selection, producer credits), so the container format is
passed in explicitly.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from ..models import Album, Artist, Track

from .normalize import is_duplicate_composer, normalize_composer_name
from .performers import extract_artist_names, extract_composers, extract_producers

QOBUZ_WEB_ORIGIN = "https://www.qobuz.com"
VARIOUS_COMPOSERS = "Various Composers"
MAIN_ARTIST_ROLE = "main-artist"

_FLAC_MAGIC = b"fLaC"
_ID3_MAGIC = b"ID3"


class ContainerFormat(str, Enum):
    LOSSLESS = "lossless"
    OTHER = "other"


def _id3_block_size(header: bytes) -> int:
    """Total size of a leading ID3v2 block, header and footer included."""
    size = 0
    for b in header[6:10]:
        size = (size << 7) | (b & 0x7F)
    footer = 10 if header[5] & 0x10 else 0
    return 10 + size + footer


def detect_container_format(path: str | Path) -> ContainerFormat:
    """Sniff the file header; FLAC is lossless, everything else is ID3-tagged."""
    with open(path, "rb") as fh:
        header = fh.read(10)
        if len(header) == 10 and header[:3] == _ID3_MAGIC:
            fh.seek(_id3_block_size(header))
            header = fh.read(4)
    if header[:4] == _FLAC_MAGIC:
        return ContainerFormat.LOSSLESS
    return ContainerFormat.OTHER


@dataclass
class ResolvedAttributes:
    title: str | None = None
    album: str | None = None
    album_artist: str | None = None
    artist: str | None = None
    composer: str | None = None
    producers: list[str] = field(default_factory=list)
    involved_people: str | None = None
    label: str | None = None
    genre: str | None = None
    track_number: int | None = None
    track_total: int | None = None
    disc_number: int | None = None
    disc_total: int | None = None
    copyright: str | None = None
    isrc: str | None = None
    upc: str | None = None
    explicit: str | None = None
    release_date: str | None = None
    release_year: int | None = None
    comment: str | None = None
    url: str | None = None
    media_type: str | None = None
    cover_url: str | None = None


def timestamp_to_date_and_year(timestamp: int) -> tuple[str | None, int | None]:
    """Convert a Unix timestamp to ("YYYY-MM-DD", year) in UTC."""
    try:
        moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None, None
    return moment.strftime("%Y-%m-%d"), moment.year


def _with_version(title: str | None, version: str | None) -> str | None:
    if title is None:
        return None
    if version:
        return f"{title} ({version})"
    return title


def _year_of(date: str) -> int | None:
    try:
        return int(date.split("-", 1)[0])
    except ValueError:
        return None


def resolve_release_date(track: Track, album: Album) -> tuple[str | None, int | None]:
    for date in (
        album.release_date_download,
        album.release_date_original,
        track.release_date_original,
    ):
        if date is not None:
            return date, _year_of(date)
    if album.released_at is not None:
        return timestamp_to_date_and_year(album.released_at)
    return None, None


def resolve_album_artist(track: Track, album: Album, fmt: ContainerFormat) -> str | None:
    fallback = album.artist.name if album.artist and album.artist.name else None

    if fmt is ContainerFormat.LOSSLESS:
        # Classical releases credit the conductor as album artist
        performers = track.performers or ""
        for candidate in album.artists or []:
            if (
                candidate.name
                and MAIN_ARTIST_ROLE in (candidate.roles or [])
                and f"{candidate.name}, Conductor" in performers
            ):
                return candidate.name
        return fallback

    names = [
        a.name for a in album.artists or [] if a.name and MAIN_ARTIST_ROLE in (a.roles or [])
    ]
    if not names and fallback:
        names = [fallback]
    return "/".join(names) or None


def resolve_artists(track: Track, album: Album, artist: Artist) -> list[str]:
    """Performing artists, then the main artist, then album artists."""
    names: list[str] = []
    candidates = extract_artist_names(track.performers)
    candidates.append(artist.name)
    candidates.extend(a.name for a in album.artists or [])
    for name in candidates:
        if name and name not in names:
            names.append(name)
    return names


def _usable_composer(name: str | None) -> bool:
    return bool(name) and name != VARIOUS_COMPOSERS


def resolve_composers(track: Track, album: Album, fmt: ContainerFormat) -> list[str]:
    composers: list[str] = []
    seen: set[str] = set()

    def _add(name: str) -> None:
        composers.append(name)
        seen.add(normalize_composer_name(name))

    track_composer = track.composer.name if track.composer else None
    album_composer = album.composer.name if album.composer else None

    if fmt is ContainerFormat.LOSSLESS:
        # FLAC gets a single composer
        from_performers = extract_composers(track.performers)
        if from_performers:
            if _usable_composer(from_performers[-1]):
                _add(from_performers[-1])
        elif _usable_composer(track_composer):
            _add(track_composer)
        elif _usable_composer(album_composer) and not is_duplicate_composer(album_composer, seen):
            _add(album_composer)
        return composers

    candidates = extract_composers(track.performers) + [track_composer, album_composer]
    for name in candidates:
        if _usable_composer(name) and not is_duplicate_composer(name, seen):
            _add(name)
    return composers


def resolve_cover_url(album: Album) -> str | None:
    image = album.image
    if image is None:
        return None
    for url in (image.mega, image.extralarge, image.large, image.medium, image.small, image.thumbnail):
        if url:
            return url
    return None


def resolve_product_url(album: Album) -> str | None:
    url = album.product_url
    if not url:
        return None
    if url.startswith("http"):
        return url
    return f"{QOBUZ_WEB_ORIGIN}{url}"


def resolve_explicit(track: Track, album: Album) -> str | None:
    warning = track.parental_warning
    if warning is None:
        warning = album.parental_warning
    if warning is None:
        return None
    return "1" if warning else "0"


def resolve_attributes(
    track: Track, album: Album, artist: Artist, fmt: ContainerFormat
) -> ResolvedAttributes:
    """Compute every tag value for one track written into a `fmt` container."""
    date, year = resolve_release_date(track, album)
    artists = resolve_artists(track, album, artist)
    composers = resolve_composers(track, album, fmt)
    separator = ", " if fmt is ContainerFormat.LOSSLESS else "/"

    return ResolvedAttributes(
        title=_with_version(track.title, track.version),
        album=_with_version(album.title, album.version),
        album_artist=resolve_album_artist(track, album, fmt),
        artist=separator.join(artists) or None,
        composer="/".join(composers) or None,
        producers=extract_producers(track.performers) if fmt is ContainerFormat.LOSSLESS else [],
        involved_people=track.performers or None,
        label=album.label.name if album.label else None,
        genre=album.genre.name if album.genre else None,
        track_number=track.track_number,
        track_total=album.tracks_count,
        disc_number=track.media_number,
        disc_total=album.media_count,
        copyright=track.copyright,
        isrc=track.isrc,
        upc=album.upc or None,
        explicit=resolve_explicit(track, album),
        release_date=date,
        release_year=year,
        comment=album.description or None,
        url=resolve_product_url(album),
        # Passed through verbatim, e.g. "album", "compilation", "single"
        media_type=album.release_type or album.product_type,
        cover_url=resolve_cover_url(album),
    )
