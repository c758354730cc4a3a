"""
Switches controlling which tags are embedded into audio files.

Each flag gates exactly one tag category. The defaults enable everything
except `comment`, which most players render poorly when it carries a long
album description.
"""

from pydantic import BaseModel, ConfigDict


class MetadataConfig(BaseModel):
    """Per-tag on/off switches used by `embed_metadata_in_file`."""

    album_artist: bool = True
    artist: bool = True
    track_title: bool = True
    track_number: bool = True
    track_total: bool = True
    disc_number: bool = True
    disc_total: bool = True
    album: bool = True
    explicit: bool = True
    upc: bool = True
    isrc: bool = True
    copyright: bool = True
    composer: bool = True
    genre: bool = True
    release_year: bool = True
    release_date: bool = True
    comment: bool = False
    cover_art: bool = True
    label: bool = True
    # Only written for FLAC files.
    producer: bool = True
    involved_people: bool = True
    url: bool = True
    media_type: bool = True

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    @classmethod
    def field_names(cls) -> list[str]:
        return list(cls.model_fields)

    @classmethod
    def disabled(cls) -> "MetadataConfig":
        """A config with every tag switched off."""
        return cls(**{name: False for name in cls.model_fields})
