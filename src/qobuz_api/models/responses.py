"""Envelope records for search, favorites and streaming endpoints."""

from typing import List, Optional

from .catalog import Album, Article, Artist, Playlist, Track, User
from .common import Image, ItemSearchResult, QobuzModel


class SearchResult(QobuzModel):
    query: Optional[str] = None
    albums: Optional[ItemSearchResult[Album]] = None
    artists: Optional[ItemSearchResult[Artist]] = None
    tracks: Optional[ItemSearchResult[Track]] = None
    playlists: Optional[ItemSearchResult[Playlist]] = None
    articles: Optional[ItemSearchResult[Article]] = None


class UserFavorites(QobuzModel):
    user: Optional[User] = None
    albums: Optional[ItemSearchResult[Album]] = None
    artists: Optional[ItemSearchResult[Artist]] = None
    tracks: Optional[ItemSearchResult[Track]] = None
    articles: Optional[ItemSearchResult[Article]] = None


class UserFavoriteIds(QobuzModel):
    albums: Optional[List[str]] = None
    artists: Optional[List[int]] = None
    tracks: Optional[List[int]] = None
    articles: Optional[List[int]] = None


class FileUrl(QobuzModel):
    track_id: Optional[int] = None
    duration: Optional[int] = None
    url: Optional[str] = None
    format_id: Optional[int] = None
    mime_type: Optional[str] = None
    sampling_rate: Optional[float] = None
    bit_depth: Optional[int] = None


class ReleaseArtist(QobuzModel):
    id: Optional[int] = None
    name: Optional[str] = None
    slug: Optional[str] = None


class Release(QobuzModel):
    id: Optional[str] = None
    title: Optional[str] = None
    version: Optional[str] = None
    artist: Optional[ReleaseArtist] = None
    image: Optional[Image] = None
    upc: Optional[str] = None
    release_date: Optional[str] = None
    label: Optional[str] = None
    tracks_count: Optional[int] = None
    duration: Optional[int] = None
    copyright: Optional[str] = None
    url: Optional[str] = None
    is_hq: Optional[bool] = None
    is_explicit: Optional[bool] = None


class ReleasesList(QobuzModel):
    has_more: Optional[bool] = None
    items: Optional[List[Release]] = None
