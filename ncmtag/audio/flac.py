"""
FLAC tag writer

Merges track metadata into a FLAC file's Vorbis comment block and appends
a front cover picture block, then rewrites the file in place.

Vorbis Comment Mapping:
    TrackMetadata field     -> Vorbis key
    -------------------     ----------
    name                    -> TITLE
    album.name              -> ALBUM
    artists (one each)      -> ARTIST
    comment                 -> COMMENT

Text fields are merge-only: a key that already has a non-empty value is
left untouched. The picture block is appended even when the file already
has one (cover_policy "append"); with "replace" existing pictures are
dropped first.

mutagen keeps the Vorbis comment block at its original position in
metadata_blocks, so an existing block is rewritten in place and a new one
is appended after the existing blocks.
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple, Union

import mutagen
import requests
from mutagen.flac import FLAC, Picture
from PIL import Image

from ..exceptions import ContainerParseError, PersistError, TagMarshalError
from ..ncm.models import TrackMetadata
from ..utils.logger import get_logger
from .container import (
    is_blank,
    open_for_update,
    require_writable,
    resolve_cover_policy,
)
from .cover import (
    CoverArtResult,
    Embedded,
    FRONT_COVER_DESCRIPTION,
    FRONT_COVER_TYPE,
    resolve_cover_art,
)

logger = get_logger(__name__)


def write_flac_tags(
    file_path: Union[str, Path],
    image_data: Optional[bytes],
    metadata: TrackMetadata,
    *,
    cover_policy: Optional[str] = None,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None
) -> None:
    """
    Merge metadata and cover art into a FLAC file in place

    Args:
        file_path: Path to the FLAC file
        image_data: Cover image bytes, or None to use the album cover URL
        metadata: Track metadata to merge
        cover_policy: "append" or "replace", defaults to the metadata.cover_policy setting
        timeout: Cover download timeout, defaults to the network.request_timeout setting
        session: Optional HTTP session for the cover download

    Raises:
        ContainerParseError: If the file is not a valid FLAC file
        TagMarshalError: If the Vorbis comment block cannot be encoded
        PersistError: If the file is write-protected or writing it fails
        ValueError: If cover_policy is not "append" or "replace"
    """
    cover_policy = resolve_cover_policy(cover_policy)

    with open_for_update(file_path) as fileobj:
        try:
            audio = FLAC(fileobj)
        except mutagen.MutagenError as e:
            logger.error(f"Failed to parse FLAC file {file_path}: {e}")
            raise ContainerParseError(
                f"{file_path} is not a valid FLAC file: {e}",
                details={'file_path': str(file_path), 'original_error': str(e)}
            ) from e

        cover = resolve_cover_art(image_data, metadata.album, timeout=timeout, session=session)
        if cover is not None:
            if cover_policy == "replace":
                audio.clear_pictures()
            audio.add_picture(_build_picture(cover))
            logger.debug(f"FLAC picture appended: {cover.mime}")

        if audio.tags is None:
            audio.add_tags()
        _merge_comments(audio.tags, metadata)

        try:
            audio.tags.validate()
        except ValueError as e:
            logger.error(f"Invalid Vorbis comment in {file_path}: {e}")
            raise TagMarshalError(
                f"Cannot encode Vorbis comment for {file_path}: {e}",
                details={'file_path': str(file_path), 'original_error': str(e)}
            ) from e

        require_writable(fileobj, file_path)

        try:
            # mutagen reads and writes from the current position
            fileobj.seek(0)
            audio.save(fileobj)
        except ValueError as e:
            raise TagMarshalError(
                f"Cannot encode metadata blocks for {file_path}: {e}",
                details={'file_path': str(file_path), 'original_error': str(e)}
            ) from e
        except (mutagen.MutagenError, OSError) as e:
            logger.error(f"Failed to save FLAC file {file_path}: {e}")
            raise PersistError(
                f"Failed to save {file_path}: {e}",
                details={'file_path': str(file_path), 'original_error': str(e)}
            ) from e

    logger.debug(f"FLAC metadata merged: {Path(file_path).name}")


def _merge_comments(tags, metadata: TrackMetadata) -> None:
    """Fill TITLE, ALBUM, ARTIST and COMMENT where the file has none"""
    if is_blank(tags.get('TITLE', [])) and metadata.name:
        tags['TITLE'] = [metadata.name]
        logger.debug(f"TITLE set: {metadata.name}")

    if is_blank(tags.get('ALBUM', [])) and metadata.album.name:
        tags['ALBUM'] = [metadata.album.name]
        logger.debug(f"ALBUM set: {metadata.album.name}")

    if is_blank(tags.get('ARTIST', [])) and metadata.artists:
        tags['ARTIST'] = list(metadata.artist_names)
        logger.debug(f"ARTIST set: {', '.join(metadata.artist_names)}")

    if is_blank(tags.get('COMMENT', [])) and metadata.comment:
        tags['COMMENT'] = [metadata.comment]


def _build_picture(cover: CoverArtResult) -> Picture:
    """Create a front cover picture block for an embedded or linked cover"""
    picture = Picture()
    picture.type = FRONT_COVER_TYPE
    picture.desc = FRONT_COVER_DESCRIPTION
    picture.mime = cover.mime
    picture.data = cover.data

    if isinstance(cover, Embedded):
        picture.width, picture.height, picture.depth = _image_geometry(cover.data)

    return picture


def _image_geometry(data: bytes) -> Tuple[int, int, int]:
    """
    Read width, height and bits per pixel for the picture block header

    Returns zeros when Pillow cannot identify the image; the block is
    still valid, players just have to decode the image themselves.
    """
    try:
        with Image.open(BytesIO(data)) as img:
            width, height = img.size
            depth = 8 * len(img.getbands())
    except (OSError, ValueError) as e:
        logger.debug(f"Cannot read cover image geometry: {e}")
        return 0, 0, 0
    return width, height, depth
