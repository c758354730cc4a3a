"""Typed records for Qobuz API responses."""

from .catalog import Album, Article, Artist, Label, Playlist, Track, User
from .common import AudioInfo, Genre, Image, ItemSearchResult, QobuzApiStatusResponse
from .responses import (
    FileUrl,
    Release,
    ReleaseArtist,
    ReleasesList,
    SearchResult,
    UserFavoriteIds,
    UserFavorites,
)

__all__ = [
    "Album",
    "Article",
    "Artist",
    "AudioInfo",
    "FileUrl",
    "Genre",
    "Image",
    "ItemSearchResult",
    "Label",
    "Playlist",
    "QobuzApiStatusResponse",
    "Release",
    "ReleaseArtist",
    "ReleasesList",
    "SearchResult",
    "Track",
    "User",
    "UserFavoriteIds",
    "UserFavorites",
]
