"""
Async client for the Qobuz JSON API.

`QobuzClient` wraps an `aiohttp` session and exposes the catalog, favorites
and streaming endpoints as typed coroutines. Use it as an async context
manager so the session is opened and closed around the calls::

    async with QobuzClient.from_settings() as client:
        album = await client.get_album("0060254772227")

Requests go through a shared token bucket (`requests_per_second`). Every
failure surfaces as a `QobuzApiError` subclass: error bodies as
`ApiErrorResponse`, undecodable bodies as `ApiResponseParseError` and
transport failures as `HttpError`.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional, Type, TypeVar

import aiohttp
from pydantic import BaseModel, ValidationError

from ..core.auth import get_credentials
from ..core.config import QobuzSettings, get_settings
from ..core.downloader import download_file
from ..core.errors import (
    ApiErrorResponse,
    ApiResponseParseError,
    CredentialsError,
    DownloadError,
    HttpError,
    InvalidParameterError,
    MetadataError,
    ResourceNotFoundError,
)
from ..core.ratelimit import AsyncRateLimiter
from ..core.utils import get_current_timestamp, get_md5_hash, sanitize_filename
from ..metadata import MetadataConfig, embed_metadata_in_file
from ..models import (
    Album,
    Artist,
    FileUrl,
    Label,
    Playlist,
    QobuzApiStatusResponse,
    ReleasesList,
    SearchResult,
    Track,
    UserFavoriteIds,
    UserFavorites,
)

QOBUZ_API_URL = "https://www.qobuz.com/api.json/0.2"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:83.0) Gecko/20100101 Firefox/83.0"
MP3_FORMAT_ID = "5"

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _clean_params(params: Optional[dict]) -> dict[str, str]:
    """Drop unset values and stringify the rest."""
    return {k: str(v) for k, v in (params or {}).items() if v is not None and v != ""}


def file_url_signature(track_id: str, format_id: str, timestamp: str, secret: str) -> str:
    return get_md5_hash(
        f"trackgetFileUrlformat_id{format_id}intentstreamtrack_id{track_id}{timestamp}{secret}"
    )


def track_file_extension(format_id: str) -> str:
    return "mp3" if str(format_id) == MP3_FORMAT_ID else "flac"


class QobuzClient:
    def __init__(
        self,
        app_id: Optional[str],
        app_secret: Optional[str],
        user_auth_token: Optional[str] = None,
        *,
        user_id: Optional[str] = None,
        requests_per_second: int = 8,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        if not app_id or not app_secret:
            raise CredentialsError(
                "Qobuz app id and app secret are required. Run 'qobuz config credentials' first."
            )
        self.app_id = str(app_id)
        self.app_secret = str(app_secret)
        self.user_auth_token = user_auth_token
        self.user_id = user_id
        self.timeout = timeout
        self.limiter = AsyncRateLimiter(requests_per_second, 1.0)
        self.session = session
        self._owns_session = session is None

    @classmethod
    def from_settings(cls, settings: Optional[QobuzSettings] = None) -> "QobuzClient":
        """Build a client from stored settings and credentials.

        Credentials from the keyring (or their environment overrides) take
        precedence over ids stored in the settings files.
        """
        settings = settings or get_settings()
        return cls(
            get_credentials("app_id") or settings.app_id,
            get_credentials("app_secret") or settings.app_secret,
            get_credentials("user_auth_token"),
            user_id=get_credentials("user_id"),
            requests_per_second=settings.requests_per_second,
            timeout=settings.http_timeout,
        )

    async def __aenter__(self) -> "QobuzClient":
        if self.session is None:
            headers = {"User-Agent": USER_AGENT, "X-App-Id": self.app_id}
            if self.user_auth_token:
                headers["X-User-Auth-Token"] = self.user_auth_token
            self.session = aiohttp.ClientSession(
                headers=headers, timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.session is not None and self._owns_session:
            await self.session.close()
            self.session = None

    # Transport

    def _require_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            raise RuntimeError("QobuzClient must be used within 'async with'.")
        return self.session

    async def _decode(self, response: Any) -> dict:
        text = await response.text()
        if not text.strip():
            raise ApiResponseParseError("empty response body")
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ApiResponseParseError(str(e), content=text[:500]) from e

        if isinstance(data, dict) and data.get("status") == "error":
            status = QobuzApiStatusResponse.model_validate(data)
            raise ApiErrorResponse(status.code or "", status.message or "", status.status or "")
        if response.status >= 400:
            raise HttpError(f"HTTP {response.status} from Qobuz API")
        if not isinstance(data, dict):
            raise ApiResponseParseError("expected a JSON object", content=text[:500])
        return data

    async def _send(self, method: str, endpoint: str, **kwargs) -> dict:
        session = self._require_session()
        await self.limiter.acquire()
        url = f"{QOBUZ_API_URL}{endpoint}"
        logger.debug("qobuz.request", extra={"method": method, "endpoint": endpoint})
        try:
            request = session.get if method == "GET" else session.post
            async with request(url, **kwargs) as response:
                return await self._decode(response)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise HttpError(f"{method} {endpoint} failed: {e}") from e

    async def get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        return await self._send("GET", endpoint, params=_clean_params(params))

    async def post(self, endpoint: str, params: Optional[dict] = None) -> dict:
        data = _clean_params(params)
        data["app_id"] = self.app_id
        if self.user_auth_token:
            data["user_auth_token"] = self.user_auth_token
        return await self._send("POST", endpoint, data=data)

    def _signature(self, method: str, endpoint: str, params: dict, timestamp: str) -> str:
        signed = dict(params)
        signed["app_id"] = self.app_id
        signed["method"] = method
        signed["timestamp"] = timestamp
        if self.user_auth_token:
            signed["user_auth_token"] = self.user_auth_token
        pairs = "".join(f"{k}{v}" for k, v in sorted(signed.items()))
        return get_md5_hash(f"{method}{endpoint}{pairs}{self.app_secret}")

    async def signed_get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        params = _clean_params(params)
        timestamp = get_current_timestamp()
        query = dict(params)
        query["app_id"] = self.app_id
        if self.user_auth_token:
            query["user_auth_token"] = self.user_auth_token
        query["request_ts"] = timestamp
        query["request_sig"] = self._signature("GET", endpoint, params, timestamp)
        return await self._send("GET", endpoint, params=query)

    @staticmethod
    def _parse(model: Type[M], data: dict) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ApiResponseParseError(str(e), content=json.dumps(data)[:500]) from e

    # Albums

    async def get_album(
        self, album_id: str, *, extra: Optional[str] = None, limit: int = 1200, offset: int = 0
    ) -> Album:
        data = await self.get(
            "/album/get", {"album_id": album_id, "extra": extra, "limit": limit, "offset": offset}
        )
        return self._parse(Album, data)

    async def search_albums(self, query: str, *, limit: int = 50, offset: int = 0) -> SearchResult:
        data = await self.get("/album/search", {"query": query, "limit": limit, "offset": offset})
        return self._parse(SearchResult, data)

    # Artists

    async def get_artist(
        self,
        artist_id: str,
        *,
        extra: Optional[str] = None,
        sort: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Artist:
        data = await self.get(
            "/artist/get",
            {"artist_id": artist_id, "extra": extra, "sort": sort, "limit": limit, "offset": offset},
        )
        return self._parse(Artist, data)

    async def get_release_list(
        self,
        artist_id: str,
        *,
        release_type: Optional[str] = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
        track_size: int = 10,
        limit: int = 50,
        offset: int = 0,
    ) -> ReleasesList:
        data = await self.get(
            "/artist/getReleasesList",
            {
                "artist_id": artist_id,
                "release_type": release_type,
                "sort": sort,
                "order": order,
                "track_size": track_size,
                "limit": limit,
                "offset": offset,
            },
        )
        return self._parse(ReleasesList, data)

    async def search_artists(self, query: str, *, limit: int = 50, offset: int = 0) -> SearchResult:
        data = await self.get("/artist/search", {"query": query, "limit": limit, "offset": offset})
        return self._parse(SearchResult, data)

    # Catalog, labels, articles

    async def search_catalog(
        self, query: str, *, limit: int = 50, offset: int = 0, type: Optional[str] = None
    ) -> SearchResult:
        data = await self.get(
            "/catalog/search", {"query": query, "limit": limit, "offset": offset, "type": type}
        )
        return self._parse(SearchResult, data)

    async def search_articles(self, query: str, *, limit: int = 50, offset: int = 0) -> SearchResult:
        data = await self.get("/article/search", {"query": query, "limit": limit, "offset": offset})
        return self._parse(SearchResult, data)

    async def get_label(
        self, label_id: str, *, extra: Optional[str] = None, limit: int = 25, offset: int = 0
    ) -> Label:
        data = await self.get(
            "/label/get", {"label_id": label_id, "extra": extra, "limit": limit, "offset": offset}
        )
        return self._parse(Label, data)

    # Playlists

    async def get_playlist(
        self, playlist_id: str, *, extra: Optional[str] = None, limit: int = 25, offset: int = 0
    ) -> Playlist:
        data = await self.get(
            "/playlist/get",
            {"playlist_id": playlist_id, "extra": extra, "limit": limit, "offset": offset},
        )
        return self._parse(Playlist, data)

    async def search_playlists(self, query: str, *, limit: int = 50, offset: int = 0) -> SearchResult:
        data = await self.get("/playlist/search", {"query": query, "limit": limit, "offset": offset})
        return self._parse(SearchResult, data)

    # Tracks

    async def get_track(self, track_id: str) -> Track:
        data = await self.get("/track/get", {"track_id": track_id})
        return self._parse(Track, data)

    async def search_tracks(self, query: str, *, limit: int = 50, offset: int = 0) -> SearchResult:
        data = await self.get("/track/search", {"query": query, "limit": limit, "offset": offset})
        return self._parse(SearchResult, data)

    async def get_track_file_url(self, track_id: str, format_id: str) -> FileUrl:
        timestamp = get_current_timestamp()
        params = {
            "track_id": track_id,
            "format_id": format_id,
            "intent": "stream",
            "request_ts": timestamp,
            "request_sig": file_url_signature(
                str(track_id), str(format_id), timestamp, self.app_secret
            ),
        }
        data = await self.get("/track/getFileUrl", params)
        return self._parse(FileUrl, data)

    # Favorites

    @staticmethod
    def _favorite_params(
        track_ids: Optional[str], album_ids: Optional[str], artist_ids: Optional[str]
    ) -> dict:
        params = _clean_params(
            {"track_ids": track_ids, "album_ids": album_ids, "artist_ids": artist_ids}
        )
        if not params:
            raise InvalidParameterError(
                "At least one of track_ids, album_ids or artist_ids must be provided"
            )
        return params

    async def add_user_favorites(
        self,
        track_ids: Optional[str] = None,
        album_ids: Optional[str] = None,
        artist_ids: Optional[str] = None,
    ) -> QobuzApiStatusResponse:
        params = self._favorite_params(track_ids, album_ids, artist_ids)
        data = await self.signed_get("/favorite/create", params)
        return self._parse(QobuzApiStatusResponse, data)

    async def delete_user_favorites(
        self,
        track_ids: Optional[str] = None,
        album_ids: Optional[str] = None,
        artist_ids: Optional[str] = None,
    ) -> QobuzApiStatusResponse:
        params = self._favorite_params(track_ids, album_ids, artist_ids)
        data = await self.signed_get("/favorite/delete", params)
        return self._parse(QobuzApiStatusResponse, data)

    async def get_user_favorite_ids(
        self, user_id: Optional[str] = None, *, limit: int = 5000, offset: int = 0
    ) -> UserFavoriteIds:
        data = await self.signed_get(
            "/favorite/getUserFavoriteIds",
            {"user_id": user_id or self.user_id, "limit": limit, "offset": offset},
        )
        return self._parse(UserFavoriteIds, data)

    async def get_user_favorites(
        self,
        user_id: Optional[str] = None,
        *,
        type: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> UserFavorites:
        data = await self.signed_get(
            "/favorite/getUserFavorites",
            {"user_id": user_id or self.user_id, "type": type, "limit": limit, "offset": offset},
        )
        return self._parse(UserFavorites, data)

    # Downloads

    async def _tag_downloaded(
        self, path: Path, track: Track, track_id: str, config: Optional[MetadataConfig]
    ) -> None:
        album = track.album
        if album is None:
            raise ResourceNotFoundError("album", track_id)
        artist = track.performer or album.artist
        if artist is None:
            raise ResourceNotFoundError("artist", track_id)
        try:
            embed_metadata_in_file(path, track, album, artist, config)
        except Exception as e:
            raise MetadataError(f"Failed to embed metadata in {path}: {e}") from e

    async def download_track(
        self,
        track_id: str,
        format_id: str,
        path: Path,
        config: Optional[MetadataConfig] = None,
        *,
        track: Optional[Track] = None,
    ) -> Path:
        """Download one track to `path` and tag it. Returns the written path.

        Pass `track` when the caller already holds the record; otherwise it is
        fetched once after the download for tagging.
        """
        path = Path(path)
        logger.info(
            "qobuz.download_track.start",
            extra={"track_id": track_id, "format_id": format_id, "dest": str(path)},
        )
        file_url = await self.get_track_file_url(track_id, format_id)
        if not file_url.url:
            raise DownloadError(f"No download URL found for track {track_id}")
        await download_file(file_url.url, path)

        if track is None:
            try:
                track = await self.get_track(track_id)
            except ApiErrorResponse as e:
                raise DownloadError(f"Failed to get track details for metadata: {e}") from e
        await self._tag_downloaded(path, track, track_id, config)
        logger.info("qobuz.download_track.done", extra={"track_id": track_id, "dest": str(path)})
        return path

    async def download_album(
        self,
        album_id: str,
        format_id: str,
        directory: Path,
        config: Optional[MetadataConfig] = None,
        *,
        concurrency: int = 4,
    ) -> list[Path]:
        """Download every track of an album into `directory`.

        Files are named "NN. Title.ext". Returns the paths in album order.
        """
        directory = Path(directory)
        album = await self.get_album(album_id, extra="track_ids")
        track_ids = album.track_ids or []
        if not track_ids:
            raise ResourceNotFoundError("album tracks", album_id)
        directory.mkdir(parents=True, exist_ok=True)
        logger.info(
            "qobuz.download_album.start",
            extra={"album_id": album_id, "tracks": len(track_ids), "format_id": format_id},
        )
        ext = track_file_extension(format_id)
        sem = asyncio.Semaphore(max(1, int(concurrency or 1)))

        async def _one(track_id: int) -> Path:
            async with sem:
                track = await self.get_track(str(track_id))
                title = track.title or f"Track {track_id}"
                name = sanitize_filename(f"{track.track_number or 0:02}. {title}")
                return await self.download_track(
                    str(track_id), format_id, directory / f"{name}.{ext}", config, track=track
                )

        paths = await asyncio.gather(*(_one(tid) for tid in track_ids))
        logger.info("qobuz.download_album.done", extra={"album_id": album_id, "tracks": len(paths)})
        return list(paths)
