"""
MP3 tag writer

Merges track metadata into an MP3 file's ID3v2 tag and appends a front
cover APIC frame, then saves the tag back into the same file.

ID3v2 Frame Mapping:
    TrackMetadata field     -> Frame
    -------------------     -----
    name                    -> TIT2 (UTF-8)
    album.name              -> TALB (UTF-8)
    artists                 -> TPE1 (UTF-8, one text value per artist)
    comment                 -> COMM (ISO-8859-1, lang "XXX", empty description)
    cover art               -> APIC (ISO-8859-1 description "Front cover", type 3)

Each text frame is only added when the tag has no non-empty frame of that
type.

Artists are deliberately not written as one TPE1 frame per artist. ID3
allows a single frame per text frame ID (mutagen would keep only the last
one), so every artist becomes a value of one TPE1 frame. That is how
ID3v2.4 represents lists; v2.3 output joins them with "/".

APIC frames are keyed by their description, so a second "Front cover"
would normally replace the first. The writer salts the new frame's key
until it is unique, which keeps every existing picture (cover_policy
"append"). With "replace" all APIC frames are removed first.
"""

from pathlib import Path
from typing import Optional, Union

import mutagen
import requests
from mutagen.id3 import ID3, APIC, COMM, TALB, TIT2, TPE1, Encoding
from mutagen.mp3 import MP3

from ..exceptions import ContainerParseError, PersistError, TagMarshalError
from ..ncm.models import TrackMetadata
from ..utils.logger import get_logger
from .container import (
    is_blank,
    open_for_update,
    require_writable,
    resolve_cover_policy,
    resolve_id3_version,
)
from .cover import (
    CoverArtResult,
    FRONT_COVER_DESCRIPTION,
    FRONT_COVER_TYPE,
    resolve_cover_art,
)

logger = get_logger(__name__)


COMMENT_LANGUAGE = "XXX"


def write_mp3_tags(
    file_path: Union[str, Path],
    image_data: Optional[bytes],
    metadata: TrackMetadata,
    *,
    cover_policy: Optional[str] = None,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
    id3_version: Optional[str] = None
) -> None:
    """
    Merge metadata and cover art into an MP3 file's ID3v2 tag in place

    Args:
        file_path: Path to the MP3 file
        image_data: Cover image bytes, or None to use the album cover URL
        metadata: Track metadata to merge
        cover_policy: "append" or "replace", defaults to the metadata.cover_policy setting
        timeout: Cover download timeout, defaults to the network.request_timeout setting
        session: Optional HTTP session for the cover download
        id3_version: "2.3" or "2.4", defaults to the metadata.id3_version setting

    Raises:
        ContainerParseError: If the file is not a valid MP3 file or its tag is malformed
        TagMarshalError: If a frame cannot be encoded (e.g. non Latin-1 comment)
        PersistError: If the file is write-protected or writing the tag fails
        ValueError: If cover_policy or id3_version is not a known value
    """
    cover_policy = resolve_cover_policy(cover_policy)
    id3_version = resolve_id3_version(id3_version)

    with open_for_update(file_path) as fileobj:
        try:
            audio = MP3(fileobj, ID3=ID3)
            if audio.tags is None:
                audio.add_tags()
        except mutagen.MutagenError as e:
            logger.error(f"Failed to parse MP3 file {file_path}: {e}")
            raise ContainerParseError(
                f"{file_path} is not a valid MP3 file: {e}",
                details={'file_path': str(file_path), 'original_error': str(e)}
            ) from e

        tags = audio.tags

        cover = resolve_cover_art(image_data, metadata.album, timeout=timeout, session=session)
        if cover is not None:
            if cover_policy == "replace":
                tags.delall('APIC')
            _add_picture(tags, cover)
            logger.debug(f"APIC frame appended: {cover.mime}")

        _merge_frames(tags, metadata)

        if id3_version == "2.3":
            tags.update_to_v23()

        try:
            _check_latin1_frames(tags)
        except UnicodeEncodeError as e:
            logger.error(f"Cannot encode ID3 frames for {file_path}: {e}")
            raise TagMarshalError(
                f"Cannot encode ID3 frames for {file_path}: {e}",
                details={'file_path': str(file_path), 'original_error': str(e)}
            ) from e

        require_writable(fileobj, file_path)

        try:
            # mutagen reads and writes from the current position
            fileobj.seek(0)
            audio.save(fileobj, v2_version=3 if id3_version == "2.3" else 4)
        except (mutagen.MutagenError, OSError) as e:
            logger.error(f"Failed to save MP3 file {file_path}: {e}")
            raise PersistError(
                f"Failed to save {file_path}: {e}",
                details={'file_path': str(file_path), 'original_error': str(e)}
            ) from e

    logger.debug(f"MP3 metadata merged: {Path(file_path).name}")


def _frame_is_blank(tags: ID3, frame_id: str) -> bool:
    """True if no frame of this type carries any non-empty text"""
    return all(is_blank(frame.text) for frame in tags.getall(frame_id))


def _merge_frames(tags: ID3, metadata: TrackMetadata) -> None:
    """Add TIT2, TALB, TPE1 and COMM frames where the tag has none"""
    if _frame_is_blank(tags, 'TIT2') and metadata.name:
        tags.add(TIT2(encoding=Encoding.UTF8, text=[metadata.name]))
        logger.debug(f"TIT2 set: {metadata.name}")

    if _frame_is_blank(tags, 'TALB') and metadata.album.name:
        tags.add(TALB(encoding=Encoding.UTF8, text=[metadata.album.name]))
        logger.debug(f"TALB set: {metadata.album.name}")

    if _frame_is_blank(tags, 'TPE1') and metadata.artists:
        tags.add(TPE1(encoding=Encoding.UTF8, text=list(metadata.artist_names)))
        logger.debug(f"TPE1 set: {', '.join(metadata.artist_names)}")

    if not tags.getall('COMM') and metadata.comment:
        tags.add(COMM(
            encoding=Encoding.LATIN1,
            lang=COMMENT_LANGUAGE,
            desc='',
            text=[metadata.comment]
        ))


def _check_latin1_frames(tags: ID3) -> None:
    """
    Raise UnicodeEncodeError if an ISO-8859-1 frame holds unencodable text

    mutagen would report it as a generic save error.
    """
    for frame in tags.values():
        if getattr(frame, 'encoding', None) != Encoding.LATIN1:
            continue
        values = list(getattr(frame, 'text', [])) + [getattr(frame, 'desc', '')]
        for value in values:
            str(value).encode('latin-1')


def _add_picture(tags: ID3, cover: CoverArtResult) -> None:
    """Append a front cover APIC frame without replacing existing ones"""
    frame = APIC(
        encoding=Encoding.LATIN1,
        mime=cover.mime,
        type=FRONT_COVER_TYPE,
        desc=FRONT_COVER_DESCRIPTION,
        data=cover.data
    )
    while frame.HashKey in tags:
        frame.salt += ' '
    tags.add(frame)
