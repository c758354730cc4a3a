import json

import pytest
from mutagen.flac import FLAC
from typer.testing import CliRunner

from qobuz_api import __version__
from qobuz_api.cli import app
from qobuz_api.commands import favorites, search, tag
from qobuz_api.commands.get import parse_qobuz_url
from qobuz_api.core.auth import store_credentials
from qobuz_api.core.config import get_settings, reset_settings
from qobuz_api.models import SearchResult, Track

runner = CliRunner()


def test_help_lists_command_groups():
    res = runner.invoke(app, ["--help"])
    assert res.exit_code == 0, res.output
    for group in ("config", "get", "search", "tag", "favorites"):
        assert group in res.output


def test_version():
    res = runner.invoke(app, ["--version"])
    assert res.exit_code == 0
    assert f"qobuz-api v{__version__}" in res.output


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.qobuz.com/us-en/album/random-album/0060254772227", ("album", "0060254772227")),
        ("https://www.qobuz.com/album/random-album/abc123xyz", ("album", "abc123xyz")),
        ("https://play.qobuz.com/album/0060254772227", ("album", "0060254772227")),
        ("https://open.qobuz.com/track/12345678", ("track", "12345678")),
        ("https://www.qobuz.com/gb-en/track/some-song/987?ref=x", ("track", "987")),
        ("https://www.qobuz.com/us-en/playlist/1", None),
        ("https://example.com/album/1", None),
    ],
)
def test_parse_qobuz_url(url, expected):
    assert parse_qobuz_url(url) == expected


def test_get_track_dry_run():
    res = runner.invoke(app, ["get", "track", "12345678", "--dry-run", "-f", "6"])
    assert res.exit_code == 0, res.output
    assert "Dry run" in res.output
    assert "12345678" in res.output


def test_get_url_dry_run():
    res = runner.invoke(
        app, ["get", "url", "https://open.qobuz.com/album/0060254772227", "--dry-run"]
    )
    assert res.exit_code == 0, res.output
    assert "Detected Qobuz album" in res.output


def test_get_url_unsupported():
    res = runner.invoke(app, ["get", "url", "https://example.com/nothing"])
    assert res.exit_code == 1
    assert "Unsupported" in res.output


def test_get_without_credentials_fails_cleanly(tmp_path):
    res = runner.invoke(app, ["get", "track", "1", "-o", str(tmp_path)])
    assert res.exit_code == 1
    assert "download failed" in res.output


def test_config_show_json():
    store_credentials("app_id", "123")
    res = runner.invoke(app, ["config", "show", "--json"])
    assert res.exit_code == 0, res.output
    data = json.loads(res.stdout)
    assert set(data) == {"paths", "format_id", "requests_per_second", "credentials", "metadata"}
    assert data["format_id"] == "27"
    assert data["credentials"]["app_id"] is True
    assert data["credentials"]["app_secret"] is False
    assert data["metadata"]["comment"] is False


def test_config_show_never_prints_secrets():
    store_credentials("app_secret", "very-secret-value")
    res = runner.invoke(app, ["config", "show"])
    assert res.exit_code == 0, res.output
    assert "very-secret-value" not in res.output


def test_config_credentials_stores_values():
    res = runner.invoke(
        app, ["config", "credentials", "--app-id", "111", "--app-secret", "abc", "--token", "tok"]
    )
    assert res.exit_code == 0, res.output
    reset_settings()
    data = json.loads(runner.invoke(app, ["config", "show", "--json"]).stdout)
    assert data["credentials"] == {
        "app_id": True,
        "app_secret": True,
        "user_id": False,
        "user_auth_token": True,
    }


def test_config_clear():
    store_credentials("app_id", "123")
    res = runner.invoke(app, ["config", "clear", "--yes"])
    assert res.exit_code == 0, res.output
    data = json.loads(runner.invoke(app, ["config", "show", "--json"]).stdout)
    assert not any(data["credentials"].values())


def test_config_path(tmp_path):
    target = tmp_path / "downloads"
    res = runner.invoke(app, ["config", "path", "--download", str(target)])
    assert res.exit_code == 0, res.output
    assert target.is_dir()

    reset_settings()
    assert get_settings().download_path == target.resolve()


def test_config_metadata_flags():
    res = runner.invoke(app, ["config", "metadata", "--enable", "comment", "--disable", "cover_art"])
    assert res.exit_code == 0, res.output

    reset_settings()
    metadata = get_settings().metadata
    assert metadata.comment is True
    assert metadata.cover_art is False

    res = runner.invoke(app, ["config", "metadata", "--reset"])
    assert res.exit_code == 0, res.output
    assert get_settings().metadata.cover_art is True


def test_config_metadata_unknown_flag():
    res = runner.invoke(app, ["config", "metadata", "--enable", "lyrics"])
    assert res.exit_code == 1
    assert "Unknown tag flag" in res.output


def test_search_without_credentials():
    res = runner.invoke(app, ["search", "tracks", "daft punk"])
    assert res.exit_code == 1
    assert "Search failed" in res.output


class _FakeClient:
    """Stands in for QobuzClient inside the commands."""

    calls = []

    @classmethod
    def from_settings(cls, settings=None):
        return cls()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def search_tracks(self, query, limit=50):
        self.calls.append(("search_tracks", query, limit))
        return SearchResult.model_validate(
            {
                "query": query,
                "tracks": {
                    "items": [
                        {
                            "id": 1,
                            "title": "One More Time",
                            "performer": {"name": "Daft Punk"},
                            "album": {"title": "Discovery"},
                            "isrc": "GBDUW0000053",
                        }
                    ]
                },
            }
        )

    async def search_catalog(self, query, limit=50):
        self.calls.append(("search_catalog", query, limit))
        return SearchResult.model_validate(
            {"query": query, "artists": {"items": [{"id": 7, "name": "Daft Punk", "albums_count": 9}]}}
        )

    async def get_user_favorites(self, type=None, limit=50):
        self.calls.append(("get_user_favorites", type, limit))
        from qobuz_api.models import UserFavorites

        return UserFavorites.model_validate(
            {"albums": {"items": [{"id": "a1", "title": "Discovery", "artist": {"name": "Daft Punk"}}]}}
        )


def test_search_tracks_json(monkeypatch):
    monkeypatch.setattr(search, "QobuzClient", _FakeClient)
    _FakeClient.calls = []
    res = runner.invoke(app, ["search", "tracks", "daft punk", "--limit", "5", "--json"])
    assert res.exit_code == 0, res.output

    payload = json.loads(res.stdout)
    assert payload["type"] == "tracks"
    assert payload["results"]["tracks"] == [
        {
            "id": 1,
            "title": "One More Time",
            "artist": "Daft Punk",
            "album": "Discovery",
            "isrc": "GBDUW0000053",
        }
    ]
    assert _FakeClient.calls == [("search_tracks", "daft punk", 5)]


def test_search_tracks_table(monkeypatch):
    monkeypatch.setattr(search, "QobuzClient", _FakeClient)
    res = runner.invoke(app, ["search", "tracks", "daft punk"])
    assert res.exit_code == 0, res.output
    assert "One More Time" in res.output


def test_search_only_calls_the_requested_kind(monkeypatch):
    # The fake client lacks search_albums and friends; only the asked-for method is used
    monkeypatch.setattr(search, "QobuzClient", _FakeClient)
    _FakeClient.calls = []
    res = runner.invoke(app, ["search", "catalog", "daft punk", "--json"])
    assert res.exit_code == 0, res.output

    payload = json.loads(res.stdout)
    assert payload["results"]["artists"] == [{"id": 7, "name": "Daft Punk", "albums": 9}]
    assert payload["results"]["tracks"] == []
    assert _FakeClient.calls == [("search_catalog", "daft punk", 10)]


def test_favorites_list_json(monkeypatch):
    monkeypatch.setattr(favorites, "QobuzClient", _FakeClient)
    res = runner.invoke(app, ["favorites", "list", "--type", "albums", "--json"])
    assert res.exit_code == 0, res.output
    payload = json.loads(res.stdout)
    assert payload["results"] == [{"id": "a1", "name": "Discovery", "artist": "Daft Punk"}]


def test_favorites_list_rejects_type():
    res = runner.invoke(app, ["favorites", "list", "--type", "labels"])
    assert res.exit_code == 1


def test_favorites_add_without_ids(monkeypatch):
    store_credentials("app_id", "123")
    store_credentials("app_secret", "abc")
    res = runner.invoke(app, ["favorites", "add"])
    assert res.exit_code == 1
    assert "Favorites request failed" in res.output


@pytest.fixture
def fake_track(monkeypatch, track):
    async def _fetch(track_id):
        return track

    monkeypatch.setattr(tag, "_fetch_track", _fetch)
    return track


def test_tag_show_json(fake_track):
    res = runner.invoke(app, ["tag", "show", "--track-id", "42", "--json"])
    assert res.exit_code == 0, res.output
    data = json.loads(res.stdout)
    assert data["TITLE"] == "Song"
    assert data["COMPOSER"] == "John Smith"
    assert data["TRACKTOTAL"] == "12"


def test_tag_embed(fake_track, flac_file):
    runner.invoke(app, ["config", "metadata", "--disable", "cover_art"])
    res = runner.invoke(app, ["tag", "embed", str(flac_file), "--track-id", "42"])
    assert res.exit_code == 0, res.output
    audio = FLAC(flac_file)
    assert audio["TITLE"] == ["Song (Remastered)"]
    assert audio.pictures == []


def test_tag_embed_track_without_album(monkeypatch, flac_file):
    async def _fetch(track_id):
        return Track(id=1, title="Lonely")

    monkeypatch.setattr(tag, "_fetch_track", _fetch)
    res = runner.invoke(app, ["tag", "embed", str(flac_file), "--track-id", "1"])
    assert res.exit_code == 1
    assert "Resource not found" in res.output
