"""Small records shared by the catalog models."""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

T = TypeVar("T")


class QobuzModel(BaseModel):
    """Base for API records: every field optional, unknown keys ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class QobuzApiStatusResponse(QobuzModel):
    code: Optional[str] = None
    message: Optional[str] = None
    status: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def _code_as_text(cls, value):
        # The API sends the code as a string on some endpoints and a number on others
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise ValueError("Invalid code format")


class Image(QobuzModel):
    small: Optional[str] = None
    thumbnail: Optional[str] = None
    medium: Optional[str] = None
    large: Optional[str] = None
    extralarge: Optional[str] = None
    mega: Optional[str] = None
    back: Optional[str] = None


class AudioInfo(QobuzModel):
    replaygain_track_peak: Optional[float] = None
    replaygain_track_gain: Optional[float] = None


class Genre(QobuzModel):
    id: Optional[int] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    path: Optional[List[int]] = None
    color: Optional[str] = None


class ItemSearchResult(QobuzModel, Generic[T]):
    """One page of a paginated collection."""

    items: Optional[List[T]] = None
    total: Optional[int] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    has_more: Optional[bool] = None
