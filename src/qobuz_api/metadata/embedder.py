import logging
from pathlib import Path

from ..models import Album, Artist, Track

from .config import MetadataConfig
from .resolver import detect_container_format, resolve_attributes
from .writer import ImageFetcher, TagWriter, download_image

logger = logging.getLogger(__name__)


def embed_metadata_in_file(
    filepath: str | Path,
    track: Track,
    album: Album,
    artist: Artist,
    config: MetadataConfig | None = None,
    fetch_image: ImageFetcher = download_image,
) -> None:
    """
    Replace the tags of `filepath` with metadata resolved from the records.

    The container is detected from the file content. Errors reading or saving
    the file (`OSError`, `mutagen.MutagenError`) reach the caller untouched; a
    container that can hold neither Vorbis comments nor ID3 raises
    `MetadataError` and is left as it was. A cover art download failure only
    drops the picture.
    """
    config = config or MetadataConfig()
    fmt = detect_container_format(filepath)
    logger.debug(
        "metadata.embed.start",
        extra={"path": str(filepath), "format": fmt.value, "track_id": track.id},
    )
    attrs = resolve_attributes(track, album, artist, fmt)
    TagWriter(fmt, fetch_image).write(filepath, attrs, config)
    logger.debug("metadata.embed.done", extra={"path": str(filepath)})
