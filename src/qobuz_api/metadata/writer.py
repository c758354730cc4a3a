"""
Writing resolved attributes into audio files with Mutagen.

FLAC files receive Vorbis comments and a FLAC picture block. MP3 files
receive a bare ID3v2.4 tag at the start of the file; WAVE and AIFF files get
the same frames in their ID3 chunk. Any other container raises
`MetadataError` before the file is touched, since a leading ID3 block would
destroy its header.

Each write replaces the whole tag: existing comments, frames and pictures are
dropped before the new values go in, so repeated writes with the same input
leave the same tag behind.
"""

import logging
from pathlib import Path
from typing import Callable

import requests
from mutagen.aiff import AIFF
from mutagen.flac import FLAC, Picture
from mutagen.id3 import (
    APIC,
    COMM,
    ID3,
    TALB,
    TCOM,
    TCON,
    TCOP,
    TDRC,
    TDRL,
    TIT2,
    TMCL,
    TMED,
    TPE1,
    TPE2,
    TPOS,
    TPUB,
    TRCK,
    TSRC,
    TXXX,
    WCOM,
)
from mutagen.wave import WAVE

from ..core.errors import DownloadError, MetadataError

from .config import MetadataConfig
from .performers import parse_performers
from .resolver import ContainerFormat, ResolvedAttributes

logger = logging.getLogger(__name__)

FRONT_COVER = 3
COVER_MIME = "image/jpeg"

ImageFetcher = Callable[[str], bytes]


def download_image(url: str) -> bytes:
    """Fetch cover art bytes; any transport failure becomes `DownloadError`."""
    try:
        r = requests.get(url, timeout=20)
        r.raise_for_status()
        return r.content
    except requests.RequestException as e:
        raise DownloadError(f"Failed to download image from {url}: {e}") from e


def _id3_host(path: str | Path):
    """Mutagen class whose ID3 chunk holds the tag, or None for a bare ID3/MPEG file.

    Raises `MetadataError` for containers that cannot carry an ID3 tag.
    """
    with open(path, "rb") as fh:
        header = fh.read(12)
    if header[:3] == b"ID3":
        return None
    # MPEG audio frame sync; layer bits 00 would be ADTS AAC
    if len(header) >= 2 and header[0] == 0xFF and header[1] & 0xE0 == 0xE0 and header[1] & 0x06:
        return None
    if header[:4] == b"RIFF" and header[8:12] == b"WAVE":
        return WAVE
    if header[:4] == b"FORM" and header[8:12] in (b"AIFF", b"AIFC"):
        return AIFF
    raise MetadataError(f"Unsupported container for ID3 tags: {path}")


def _number_pair(number: int | None, total: int | None) -> str | None:
    if number is None and total is None:
        return None
    text = f"{number}" if number is not None else ""
    if total is not None:
        text = f"{text}/{total}"
    return text


class TagWriter:
    """Writes one `ResolvedAttributes` into a file of a known container format."""

    def __init__(self, fmt: ContainerFormat, fetch_image: ImageFetcher = download_image) -> None:
        self.fmt = fmt
        self.fetch_image = fetch_image

    def write(self, path: str | Path, attrs: ResolvedAttributes, config: MetadataConfig) -> None:
        if self.fmt is ContainerFormat.LOSSLESS:
            self._write_flac(path, attrs, config)
        else:
            self._write_id3(path, attrs, config)

    def _cover_art(self, attrs: ResolvedAttributes, config: MetadataConfig) -> bytes | None:
        if not config.cover_art or not attrs.cover_url:
            return None
        try:
            return self.fetch_image(attrs.cover_url)
        except Exception as e:
            logger.warning(
                "metadata.cover_art.fetch_failed",
                extra={"url": attrs.cover_url, "error": str(e)},
            )
            return None

    def _flac_fields(self, attrs: ResolvedAttributes, config: MetadataConfig) -> dict[str, list[str]]:
        candidates = [
            ("TITLE", config.track_title, attrs.title),
            ("ALBUM", config.album, attrs.album),
            ("ALBUMARTIST", config.album_artist, attrs.album_artist),
            ("ARTIST", config.artist, attrs.artist),
            ("COMPOSER", config.composer, attrs.composer),
            ("INVOLVEDPEOPLE", config.involved_people, attrs.involved_people),
            ("LABEL", config.label, attrs.label),
            ("GENRE", config.genre, attrs.genre),
            ("TRACKNUMBER", config.track_number, attrs.track_number),
            ("TRACKTOTAL", config.track_total, attrs.track_total),
            ("DISCNUMBER", config.disc_number, attrs.disc_number),
            ("DISCTOTAL", config.disc_total, attrs.disc_total),
            ("COPYRIGHT", config.copyright, attrs.copyright),
            ("ISRC", config.isrc, attrs.isrc),
            ("UPC", config.upc, attrs.upc),
            ("ITUNESADVISORY", config.explicit, attrs.explicit),
            ("YEAR", config.release_year, attrs.release_year),
            # Recording date; FLAC files carry no separate release date
            ("DATE", config.release_date, attrs.release_date),
            ("COMMENT", config.comment, attrs.comment),
            ("URL", config.url, attrs.url),
            ("MEDIATYPE", config.media_type, attrs.media_type),
        ]
        fields = {key: [str(value)] for key, enabled, value in candidates if enabled and value is not None}
        if config.producer and attrs.producers:
            fields["PRODUCER"] = list(attrs.producers)
        return fields

    def _write_flac(self, path: str | Path, attrs: ResolvedAttributes, config: MetadataConfig) -> None:
        audio = FLAC(path)
        if audio.tags is None:
            audio.add_tags()
        for key in list(audio.tags.keys()):
            del audio.tags[key]
        audio.clear_pictures()

        for key, values in self._flac_fields(attrs, config).items():
            audio[key] = values

        image_data = self._cover_art(attrs, config)
        if image_data:
            pic = Picture()
            pic.data = image_data
            pic.type = FRONT_COVER
            pic.mime = COVER_MIME
            pic.desc = ""
            audio.add_picture(pic)
        audio.save()

    def _write_id3(self, path: str | Path, attrs: ResolvedAttributes, config: MetadataConfig) -> None:
        host = _id3_host(path)
        if host is None:
            # Build from scratch; the old tag is replaced wholesale on save
            id3 = ID3()
            self._fill_id3(id3, attrs, config)
            id3.save(path, v2_version=4)
            return

        audio = host(path)
        if audio.tags is None:
            audio.add_tags()
        for key in list(audio.tags.keys()):
            del audio.tags[key]
        self._fill_id3(audio.tags, attrs, config)
        audio.save(v2_version=4)

    def _fill_id3(self, id3: ID3, attrs: ResolvedAttributes, config: MetadataConfig) -> None:
        def _text(frame, enabled: bool, value) -> None:
            if enabled and value is not None:
                id3.add(frame(encoding=3, text=str(value)))

        def _user_text(desc: str, enabled: bool, value) -> None:
            if enabled and value is not None:
                id3.add(TXXX(encoding=3, desc=desc, text=str(value)))

        _text(TIT2, config.track_title, attrs.title)
        _text(TALB, config.album, attrs.album)
        _text(TPE2, config.album_artist, attrs.album_artist)
        _text(TPE1, config.artist, attrs.artist)
        _text(TCOM, config.composer, attrs.composer)
        if config.involved_people and attrs.involved_people:
            # Musician credits: (role, name) pairs
            people = [[", ".join(c.roles), c.name] for c in parse_performers(attrs.involved_people)]
            if people:
                id3.add(TMCL(encoding=3, people=people))
        _text(TPUB, config.label, attrs.label)
        _text(TCON, config.genre, attrs.genre)

        trck = _number_pair(
            attrs.track_number if config.track_number else None,
            attrs.track_total if config.track_total else None,
        )
        _text(TRCK, True, trck)
        tpos = _number_pair(
            attrs.disc_number if config.disc_number else None,
            attrs.disc_total if config.disc_total else None,
        )
        _text(TPOS, True, tpos)

        _text(TCOP, config.copyright, attrs.copyright)
        _text(TSRC, config.isrc, attrs.isrc)
        _user_text("UPC", config.upc, attrs.upc)
        _user_text("ITUNESADVISORY", config.explicit, attrs.explicit)
        _text(TDRC, config.release_year, attrs.release_year)
        _text(TDRL, config.release_date, attrs.release_date)
        if config.comment and attrs.comment is not None:
            id3.add(COMM(encoding=3, lang="eng", desc="", text=attrs.comment))
        if config.url and attrs.url:
            id3.add(WCOM(url=attrs.url))
        _text(TMED, config.media_type, attrs.media_type)

        image_data = self._cover_art(attrs, config)
        if image_data:
            id3.add(APIC(encoding=3, mime=COVER_MIME, type=FRONT_COVER, desc="", data=image_data))
