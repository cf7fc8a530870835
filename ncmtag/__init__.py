"""
ncmtag: write NetEase Cloud Music track metadata into FLAC and MP3 files

Takes the metadata record produced by decoding an .ncm container and merges
it into the decoded audio file in place:

    - Title, album, artists and comment are merge-only: fields the file
      already has are never overwritten.
    - Cover art is attached as a front cover picture. Image bytes are
      embedded when available or downloadable; otherwise the cover URL is
      stored as a link-only picture (MIME "-->").

Modules:
    ncm/      - TrackMetadata model built from the container's meta JSON
    audio/    - Cover art resolver, FLAC and MP3 writers, format dispatch
    config/   - YAML and environment settings
    utils/    - Logging and helpers

Usage:
    from ncmtag import TrackMetadata, write_tags

    metadata = TrackMetadata.from_ncm_data(meta_json, comment=comment)
    write_tags("song.flac", cover_bytes, metadata)

Dependencies:
    - mutagen: FLAC and ID3 container handling
    - requests: Cover art download
    - Pillow: Picture dimensions for FLAC picture blocks
    - pyyaml, python-dotenv: Configuration
    - colorama: Colored console logging
"""

__version__ = "0.1.0"
__license__ = "MIT"

from ncmtag.exceptions import (
    TaggerError,
    ContainerParseError,
    NetworkFetchError,
    TagMarshalError,
    PersistError,
    UnsupportedFormatError,
)
from ncmtag.ncm import ArtistInfo, AlbumInfo, TrackMetadata
from ncmtag.audio import (
    Embedded,
    LinkOnly,
    resolve_cover_art,
    write_flac_tags,
    write_mp3_tags,
    write_tags,
)

__all__ = [
    "__version__",
    # Exceptions
    "TaggerError",
    "ContainerParseError",
    "NetworkFetchError",
    "TagMarshalError",
    "PersistError",
    "UnsupportedFormatError",
    # Models
    "ArtistInfo",
    "AlbumInfo",
    "TrackMetadata",
    # Tagging
    "Embedded",
    "LinkOnly",
    "resolve_cover_art",
    "write_flac_tags",
    "write_mp3_tags",
    "write_tags",
]
