"""Resolution and embedding of Qobuz metadata into audio files."""

from .config import MetadataConfig
from .embedder import embed_metadata_in_file
from .extractor import extract_comprehensive_metadata
from .resolver import ContainerFormat, ResolvedAttributes, detect_container_format, resolve_attributes

__all__ = [
    "ContainerFormat",
    "MetadataConfig",
    "ResolvedAttributes",
    "detect_container_format",
    "embed_metadata_in_file",
    "extract_comprehensive_metadata",
    "resolve_attributes",
]
