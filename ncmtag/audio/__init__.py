"""
Audio tagging package

Tag writers for FLAC (Vorbis comments + picture blocks) and MP3 (ID3v2),
the cover art resolver they share, and a dispatcher that picks the writer
for a file.

Usage:
    from ncmtag.audio import write_tags

    write_tags("song.flac", cover_bytes, metadata)
"""

from .cover import (
    Embedded,
    LinkOnly,
    CoverArtResult,
    LINK_MIME,
    FRONT_COVER_DESCRIPTION,
    detect_image_mime,
    fetch_cover,
    resolve_cover_art,
)
from .flac import write_flac_tags
from .mp3 import write_mp3_tags
from .tagger import write_tags, SUPPORTED_FORMATS

__all__ = [
    # Cover art
    'Embedded',
    'LinkOnly',
    'CoverArtResult',
    'LINK_MIME',
    'FRONT_COVER_DESCRIPTION',
    'detect_image_mime',
    'fetch_cover',
    'resolve_cover_art',
    # Writers
    'write_flac_tags',
    'write_mp3_tags',
    'write_tags',
    'SUPPORTED_FORMATS',
]
