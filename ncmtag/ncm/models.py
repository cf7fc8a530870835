"""
Data models for track metadata decoded from NetEase Cloud Music containers

The decoder that unpacks an .ncm container produces a JSON meta object
alongside the audio stream. These models are the read-only view the tag
writers consume: one TrackMetadata per file, created before tagging and
discarded afterwards.

NetEase meta JSON (relevant keys only):

    {
        "musicName": "Song Title",
        "album": "Album Name",
        "albumPic": "https://p1.music.126.net/.../cover.jpg",
        "artist": [["Artist A", 12345], ["Artist B", 67890]],
        "format": "flac"
    }

The "163 key" comment string is stored outside the JSON object in the
container, so it is passed to from_ncm_data separately.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ArtistInfo:
    """A credited artist, in the order the decoder reported it"""
    name: str

    @classmethod
    def from_ncm_data(cls, data: Any) -> Optional['ArtistInfo']:
        """
        Build an ArtistInfo from one entry of the meta "artist" list

        NetEase stores artists as [name, id] pairs. Mappings with a "name"
        key are accepted as well.

        Returns:
            ArtistInfo, or None if the entry carries no usable name
        """
        if isinstance(data, (list, tuple)) and data:
            name = data[0]
        elif isinstance(data, dict):
            name = data.get('name')
        else:
            return None

        if not isinstance(name, str):
            return None
        return cls(name=name)


@dataclass(frozen=True)
class AlbumInfo:
    """
    Album information for a track

    Attributes:
        name: Album title, empty if unknown
        cover_url: Remote cover art URL, empty if the container has none
    """
    name: str = ""
    cover_url: str = ""


@dataclass(frozen=True)
class TrackMetadata:
    """
    Immutable metadata record for a single decoded track

    Attributes:
        name: Track title
        album: Album name and cover URL
        artists: Credited artists in display order
        comment: Free-text comment (the container's "163 key" string)
        format: Audio format reported by the decoder ("flac", "mp3" or "")
    """
    name: str = ""
    album: AlbumInfo = field(default_factory=AlbumInfo)
    artists: Tuple[ArtistInfo, ...] = ()
    comment: str = ""
    format: str = ""

    @property
    def artist_names(self) -> Tuple[str, ...]:
        """Artist names in credited order"""
        return tuple(artist.name for artist in self.artists)

    @classmethod
    def from_ncm_data(cls, data: Dict[str, Any], comment: str = "") -> 'TrackMetadata':
        """
        Factory method to construct TrackMetadata from NetEase meta JSON

        Missing keys fall back to empty values. Malformed artist entries
        are skipped rather than failing the whole record.

        Args:
            data: Decoded meta JSON object
            comment: Comment string stored in the container

        Returns:
            TrackMetadata instance
        """
        artists = []
        for entry in data.get('artist') or []:
            artist = ArtistInfo.from_ncm_data(entry)
            if artist is not None:
                artists.append(artist)

        return cls(
            name=data.get('musicName') or "",
            album=AlbumInfo(
                name=data.get('album') or "",
                cover_url=data.get('albumPic') or "",
            ),
            artists=tuple(artists),
            comment=comment or "",
            format=data.get('format') or "",
        )
