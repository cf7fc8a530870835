"""
Helpers shared by the FLAC and MP3 tag writers
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, BinaryIO, Optional, Union

from ..config.settings import COVER_POLICIES, ID3_VERSIONS, get_settings
from ..exceptions import ContainerParseError, PersistError
from ..utils.logger import get_logger

logger = get_logger(__name__)


@contextmanager
def open_for_update(file_path: Union[str, Path]) -> Iterator[BinaryIO]:
    """
    Open an audio file for in-place tag rewriting

    A write-protected file is opened read-only so it can still be parsed;
    require_writable() rejects it before anything is saved. The file is
    closed on every exit path, including parse and save errors raised
    inside the with block.

    Raises:
        ContainerParseError: If the file cannot be opened for reading
    """
    try:
        fileobj = open(file_path, 'rb+')
    except PermissionError as e:
        logger.debug(f"{file_path} is not writable, parsing read-only: {e}")
        fileobj = _open_read_only(file_path)
    except OSError as e:
        logger.error(f"Cannot open {file_path}: {e}")
        raise ContainerParseError(
            f"Cannot open {file_path}: {e}",
            details={'file_path': str(file_path), 'original_error': str(e)}
        ) from e

    with fileobj:
        yield fileobj


def _open_read_only(file_path: Union[str, Path]) -> BinaryIO:
    try:
        return open(file_path, 'rb')
    except OSError as e:
        logger.error(f"Cannot open {file_path}: {e}")
        raise ContainerParseError(
            f"Cannot open {file_path}: {e}",
            details={'file_path': str(file_path), 'original_error': str(e)}
        ) from e


def require_writable(fileobj: BinaryIO, file_path: Union[str, Path]) -> None:
    """
    Raises:
        PersistError: If the file was opened read-only
    """
    if not fileobj.writable():
        logger.error(f"Cannot write to {file_path}: permission denied")
        raise PersistError(
            f"Cannot write to {file_path}: permission denied",
            details={'file_path': str(file_path), 'original_error': 'permission denied'}
        )


def resolve_cover_policy(cover_policy: Optional[str]) -> str:
    """
    Normalize a cover policy argument, falling back to the configured one

    Raises:
        ValueError: If the policy is not "append" or "replace"
    """
    if cover_policy is None:
        cover_policy = get_settings().metadata.cover_policy
    policy = str(cover_policy).strip().lower()
    if policy not in COVER_POLICIES:
        raise ValueError(f"Invalid cover policy: {cover_policy!r}, expected one of {COVER_POLICIES}")
    return policy


def resolve_id3_version(id3_version: Optional[str]) -> str:
    """
    Normalize an ID3 version argument, falling back to the configured one

    Raises:
        ValueError: If the version is not "2.3" or "2.4"
    """
    if id3_version is None:
        id3_version = get_settings().metadata.id3_version
    version = str(id3_version).strip()
    if version not in ID3_VERSIONS:
        raise ValueError(f"Invalid ID3 version: {id3_version!r}, expected one of {ID3_VERSIONS}")
    return version


def is_blank(values: Iterable[str]) -> bool:
    """True if a tag field has no non-empty value"""
    return not any(value for value in values)
