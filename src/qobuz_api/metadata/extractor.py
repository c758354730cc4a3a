"""Flat string view of track metadata for display and export."""

from typing import Any

from ..models import Album, Artist, Track

from .resolver import ContainerFormat, resolve_composers


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def extract_comprehensive_metadata(
    track: Track | None, album: Album | None, artist: Artist | None
) -> dict[str, str]:
    """
    Project track, album and artist records into an upper-case keyed map.

    No container rules apply here: composers are aggregated from every source
    the same way MP3 tags get them. Missing records or fields are skipped, so
    the result may be empty but is always a dict.
    """
    track = track or Track()
    album = album or Album()
    artist = artist or Artist()

    composers = resolve_composers(track, album, ContainerFormat.OTHER)

    values: dict[str, Any] = {
        "TITLE": track.title,
        "ALBUM": album.title,
        "ARTIST": artist.name,
        "PERFORMER": track.performers,
        "COMPOSER": "/".join(composers) or None,
        "LABEL": album.label.name if album.label else None,
        "GENRE": album.genre.name if album.genre else None,
        "TRACKNUMBER": track.track_number,
        "TRACKTOTAL": album.tracks_count,
        "DISCNUMBER": track.media_number,
        "DISCTOTAL": album.media_count,
        "COPYRIGHT": track.copyright,
        "ISRC": track.isrc,
        "DATE": track.release_date_original,
        "RELEASE_DATE_STREAM": album.release_date_stream,
        "RELEASE_DATE_DOWNLOAD": album.release_date_download,
        "SUBTITLE": album.subtitle,
        "VERSION": album.version,
        "UPC": album.upc,
        "DESCRIPTION": album.description,
        "BIT_DEPTH": track.maximum_bit_depth,
        "SAMPLING_RATE": track.maximum_sampling_rate,
        "CHANNELS": track.maximum_channel_count,
        "HIRES": track.hires,
        "HIRES_STREAMABLE": track.hires_streamable,
    }
    return {key: _as_text(value) for key, value in values.items() if value is not None}
