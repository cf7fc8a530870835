"""
NetEase Cloud Music metadata models

Read-only records describing a decoded track, handed to the tag writers.
"""

from .models import ArtistInfo, AlbumInfo, TrackMetadata

__all__ = [
    'ArtistInfo',
    'AlbumInfo',
    'TrackMetadata',
]
