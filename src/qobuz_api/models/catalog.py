"""
Catalog records returned by the Qobuz API.

Artists, albums, tracks and playlists reference each other recursively, so
they live in one module and are rebuilt once every class exists. Field names
follow the JSON keys one to one; every field is optional because the API
omits whatever it does not know for a given item.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .common import AudioInfo, Genre, Image, ItemSearchResult, QobuzModel


class Label(QobuzModel):
    id: Optional[int] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    albums_count: Optional[int] = None
    description: Optional[str] = None
    albums: Optional[ItemSearchResult[Album]] = None


class Artist(QobuzModel):
    id: Optional[int] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    picture: Optional[str] = None
    albums_count: Optional[int] = None
    albums_as_primary_artist_count: Optional[int] = None
    albums_as_primary_composer_count: Optional[int] = None
    roles: Optional[List[str]] = None
    image: Optional[Image] = None
    similar_artist_ids: Optional[List[int]] = None
    albums: Optional[ItemSearchResult[Album]] = None
    playlists: Optional[ItemSearchResult[Playlist]] = None
    album_last_release: Optional[Album] = None
    information: Optional[Any] = None


class Album(QobuzModel):
    id: Optional[str] = None
    qobuz_id: Optional[int] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    version: Optional[str] = None
    upc: Optional[str] = None
    url: Optional[str] = None
    product_url: Optional[str] = None
    relative_url: Optional[str] = None
    artist: Optional[Artist] = None
    artists: Optional[List[Artist]] = None
    composer: Optional[Artist] = None
    label: Optional[Label] = None
    genre: Optional[Genre] = None
    genres_list: Optional[List[str]] = None
    image: Optional[Image] = None
    duration: Optional[int] = None
    tracks_count: Optional[int] = None
    media_count: Optional[int] = None
    released_at: Optional[int] = None
    release_date_download: Optional[str] = None
    release_date_original: Optional[str] = None
    release_date_stream: Optional[str] = None
    created_at: Optional[int] = None
    purchasable_at: Optional[int] = None
    streamable_at: Optional[int] = None
    copyright: Optional[str] = None
    description: Optional[str] = None
    catchline: Optional[str] = None
    recording_information: Optional[str] = None
    maximum_bit_depth: Optional[float] = None
    maximum_channel_count: Optional[float] = None
    maximum_sampling_rate: Optional[float] = None
    maximum_technical_specifications: Optional[str] = None
    hires: Optional[bool] = None
    hires_streamable: Optional[bool] = None
    displayable: Optional[bool] = None
    downloadable: Optional[bool] = None
    purchasable: Optional[bool] = None
    streamable: Optional[bool] = None
    previewable: Optional[bool] = None
    sampleable: Optional[bool] = None
    parental_warning: Optional[bool] = None
    is_official: Optional[bool] = None
    product_type: Optional[str] = None
    release_type: Optional[str] = None
    popularity: Optional[int] = None
    tracks: Optional[ItemSearchResult[Track]] = None
    track_ids: Optional[List[int]] = None


class Track(QobuzModel):
    id: Optional[int] = None
    title: Optional[str] = None
    version: Optional[str] = None
    isrc: Optional[str] = None
    track_number: Optional[int] = None
    media_number: Optional[int] = None
    duration: Optional[int] = None
    work: Optional[str] = None
    album: Optional[Album] = None
    performer: Optional[Artist] = None
    # "Name, Role, Role - Name2, Role" credits string
    performers: Optional[str] = None
    composer: Optional[Artist] = None
    audio_info: Optional[AudioInfo] = None
    copyright: Optional[str] = None
    displayable: Optional[bool] = None
    downloadable: Optional[bool] = None
    purchasable: Optional[bool] = None
    streamable: Optional[bool] = None
    previewable: Optional[bool] = None
    sampleable: Optional[bool] = None
    hires: Optional[bool] = None
    hires_streamable: Optional[bool] = None
    maximum_bit_depth: Optional[float] = None
    maximum_channel_count: Optional[float] = None
    maximum_sampling_rate: Optional[float] = None
    purchasable_at: Optional[int] = None
    streamable_at: Optional[int] = None
    release_date_download: Optional[str] = None
    release_date_original: Optional[str] = None
    release_date_stream: Optional[str] = None
    parental_warning: Optional[bool] = None


class User(QobuzModel):
    id: Optional[int] = None
    public_id: Optional[str] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    email: Optional[str] = None
    login: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    language_code: Optional[str] = None
    zone: Optional[str] = None
    store: Optional[str] = None
    avatar: Optional[str] = None
    creation_date: Optional[str] = None


class Playlist(QobuzModel):
    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None
    tracks_count: Optional[int] = None
    users_count: Optional[int] = None
    is_public: Optional[bool] = None
    is_collaborative: Optional[bool] = None
    owner: Optional[User] = None
    image_rectangle: Optional[List[str]] = None
    images: Optional[List[str]] = None
    genres: Optional[List[Genre]] = None
    featured_artists: Optional[List[Artist]] = None
    tracks: Optional[ItemSearchResult[Track]] = None
    slug: Optional[str] = None


class Article(QobuzModel):
    id: Optional[int] = None
    title: Optional[str] = None
    url: Optional[str] = None
    source: Optional[str] = None
    published_at: Optional[int] = None


for _model in (Label, Artist, Album, Track, Playlist):
    _model.model_rebuild()
