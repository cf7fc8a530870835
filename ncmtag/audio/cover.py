"""
Cover art resolution for the tag writers

Decides which picture, if any, gets attached to a file:

    image bytes given          -> Embedded(bytes, sniffed MIME)
    no bytes, cover URL set    -> download once
                                    200      -> Embedded(body, sniffed MIME)
                                    failure  -> LinkOnly(url)
    no bytes, no URL           -> None

Network failures never propagate. A file is still tagged offline; it just
carries a link-only picture (MIME "-->", URL bytes as payload) instead of
image data.

MIME sniffing only distinguishes PNG from everything else. Anything that
does not start with the 8-byte PNG signature is treated as JPEG, which is
what the decoder's cover images are in practice.
"""

from dataclasses import dataclass
from typing import Optional, Union

import requests

from ..config.settings import get_settings
from ..exceptions import NetworkFetchError
from ..ncm.models import AlbumInfo
from ..utils.helpers import format_file_size
from ..utils.logger import get_logger

logger = get_logger(__name__)


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
MIME_PNG = "image/png"
MIME_JPEG = "image/jpeg"

# MIME marker for a picture whose payload is a URL rather than image data
LINK_MIME = "-->"

FRONT_COVER_DESCRIPTION = "Front cover"
FRONT_COVER_TYPE = 3


@dataclass(frozen=True)
class Embedded:
    """Image bytes to embed, with the MIME type sniffed from them"""
    data: bytes
    mime: str


@dataclass(frozen=True)
class LinkOnly:
    """Cover art referenced by URL only"""
    url: str

    @property
    def data(self) -> bytes:
        """Picture payload: the URL itself"""
        return self.url.encode('utf-8')

    @property
    def mime(self) -> str:
        return LINK_MIME


CoverArtResult = Union[Embedded, LinkOnly]


def detect_image_mime(data: bytes) -> str:
    """
    Classify image bytes as PNG or JPEG

    Args:
        data: Raw image bytes

    Returns:
        "image/png" if data starts with the PNG signature, else "image/jpeg"
    """
    if data[:8] == PNG_SIGNATURE:
        return MIME_PNG
    return MIME_JPEG


def fetch_cover(
    url: str,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None
) -> bytes:
    """
    Download cover art with a single bounded GET request

    Args:
        url: Cover image URL
        timeout: Request timeout in seconds, defaults to the network.request_timeout setting
        session: Optional session to reuse; a temporary one is used otherwise

    Returns:
        Response body

    Raises:
        NetworkFetchError: On transport errors or a non-200 response
    """
    settings = get_settings()
    if timeout is None:
        timeout = settings.network.request_timeout

    owns_session = session is None
    if owns_session:
        session = requests.Session()
        session.headers.update({'User-Agent': settings.network.user_agent})

    try:
        response = session.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise NetworkFetchError(
            f"Failed to download cover art: {e}",
            details={'original_error': str(e)},
            url=url
        ) from e
    finally:
        if owns_session:
            session.close()

    if response.status_code != 200:
        raise NetworkFetchError(
            f"Failed to download cover art: remote returned {response.status_code}",
            url=url,
            status_code=response.status_code
        )

    return response.content


def resolve_cover_art(
    image_data: Optional[bytes],
    album: AlbumInfo,
    *,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None
) -> Optional[CoverArtResult]:
    """
    Decide what cover art to attach to a file

    Args:
        image_data: Pre-fetched image bytes, or None
        album: Album info carrying the optional cover URL
        timeout: Download timeout override
        session: Optional HTTP session for the download

    Returns:
        Embedded, LinkOnly, or None when there is no cover art at all
    """
    if image_data is not None:
        return Embedded(data=image_data, mime=detect_image_mime(image_data))

    if not album.cover_url:
        logger.debug("No cover art available")
        return None

    try:
        data = fetch_cover(album.cover_url, timeout=timeout, session=session)
    except NetworkFetchError as e:
        logger.warning(f"{e.message} ({album.cover_url}), linking cover instead")
        return LinkOnly(url=album.cover_url)

    logger.debug(f"Downloaded cover art: {format_file_size(len(data))} from {album.cover_url}")
    return Embedded(data=data, mime=detect_image_mime(data))
