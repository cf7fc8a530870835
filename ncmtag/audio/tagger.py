"""
Format dispatch for the tag writers

Picks the FLAC or MP3 writer for a file. The extension decides first; for
files without a recognizable extension the format reported by the decoder
(TrackMetadata.format) is used.
"""

from pathlib import Path
from typing import Optional, Union

from ..exceptions import UnsupportedFormatError
from ..ncm.models import TrackMetadata
from ..utils.helpers import detect_audio_format
from ..utils.logger import get_logger
from .flac import write_flac_tags
from .mp3 import write_mp3_tags

logger = get_logger(__name__)


SUPPORTED_FORMATS = ('flac', 'mp3')


def write_tags(
    file_path: Union[str, Path],
    image_data: Optional[bytes],
    metadata: TrackMetadata,
    **kwargs
) -> str:
    """
    Tag a FLAC or MP3 file with the matching writer

    Args:
        file_path: Path to the audio file
        image_data: Cover image bytes, or None
        metadata: Track metadata to merge
        **kwargs: Passed to the writer (cover_policy, timeout, session, ...)

    Returns:
        The format name that was written ("flac" or "mp3")

    Raises:
        UnsupportedFormatError: If the file is neither FLAC nor MP3
        ContainerParseError, TagMarshalError, PersistError: From the writer
    """
    audio_format = detect_audio_format(file_path, fallback=metadata.format)
    if audio_format not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported audio format for {file_path}",
            details={'file_path': str(file_path), 'format': metadata.format}
        )

    if audio_format == 'flac':
        # id3_version only applies to MP3
        kwargs.pop('id3_version', None)
        write_flac_tags(file_path, image_data, metadata, **kwargs)
    else:
        write_mp3_tags(file_path, image_data, metadata, **kwargs)
    logger.console_info(f"Tagged {Path(file_path).name}")
    return audio_format
