import struct
from pathlib import Path

import pytest
from mutagen.id3 import ID3, TIT2

from qobuz_api.core import auth
from qobuz_api.core.config import reset_settings
from qobuz_api.models import Album, Artist, Track


def _flac_bytes() -> bytes:
    """A FLAC stream with only a STREAMINFO block (44.1 kHz, stereo, 16-bit)."""
    streaminfo = (
        struct.pack(">HH", 4096, 4096)
        + b"\x00" * 6
        + ((44100 << 44) | (1 << 41) | (15 << 36)).to_bytes(8, "big")
        + b"\x00" * 16
    )
    return b"fLaC" + b"\x80\x00\x00\x22" + streaminfo


FLAC_BYTES = _flac_bytes()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from the real keyring, settings and secrets."""
    monkeypatch.setenv("QOBUZ_DISABLE_KEYRING", "1")
    monkeypatch.setenv("QOBUZ_IGNORE_LOCAL_SETTINGS", "1")
    monkeypatch.setenv("QOBUZ_SETTINGS_PATH", str(tmp_path / "settings.json"))
    for var in (
        "QOBUZ_APP_ID",
        "QOBUZ_APP_SECRET",
        "QOBUZ_USER_ID",
        "QOBUZ_USER_AUTH_TOKEN",
        "QOBUZ_DOWNLOAD_PATH",
        "QOBUZ_FORMAT_ID",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(auth, "USER_SECRETS_FILE", tmp_path / "user" / ".secrets.toml")
    monkeypatch.setattr(auth, "LOCAL_SECRETS_FILE", tmp_path / "local.secrets.toml")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def flac_bytes() -> bytes:
    return FLAC_BYTES


@pytest.fixture
def flac_file(tmp_path: Path) -> Path:
    p = tmp_path / "track.flac"
    p.write_bytes(FLAC_BYTES)
    return p


@pytest.fixture
def mp3_file(tmp_path: Path) -> Path:
    # ID3-only file; no MPEG frames needed for tagging
    p = tmp_path / "track.mp3"
    id3 = ID3()
    id3.add(TIT2(encoding=3, text=["placeholder"]))
    id3.save(p)
    return p


@pytest.fixture
def album() -> Album:
    return Album.model_validate(
        {
            "id": "0060254772227",
            "title": "Random Album",
            "version": "Deluxe",
            "upc": "0060254772227",
            "artist": {"id": 1, "name": "Jane Doe"},
            "artists": [
                {"id": 1, "name": "Jane Doe", "roles": ["main-artist"]},
                {"id": 2, "name": "Guest Star", "roles": ["featured-artist"]},
            ],
            "label": {"id": 10, "name": "Indie Label"},
            "genre": {"id": 112, "name": "Pop"},
            "image": {"large": "https://img.example/large.jpg", "small": "https://img.example/s.jpg"},
            "tracks_count": 12,
            "media_count": 2,
            "release_date_download": "2020-05-01",
            "release_date_original": "2019-01-01",
            "released_at": 1698393600,
            "description": "Liner notes",
            "product_url": "/us-en/album/random-album/0060254772227",
            "release_type": "album",
            "parental_warning": False,
        }
    )


@pytest.fixture
def track(album: Album) -> Track:
    return Track.model_validate(
        {
            "id": 42,
            "title": "Song",
            "version": "Remastered",
            "isrc": "USAB12345678",
            "track_number": 3,
            "media_number": 1,
            "performers": "Jane Doe, MainArtist - John Smith, Composer, Lyricist - Max Mix, Producer",
            "composer": {"id": 5, "name": "John Smith"},
            "performer": {"id": 1, "name": "Jane Doe"},
            "copyright": "2020 Indie Label",
            "release_date_original": "2018-02-02",
            "parental_warning": True,
            "album": album.model_dump(),
        }
    )


@pytest.fixture
def artist() -> Artist:
    return Artist(id=1, name="Jane Doe")
