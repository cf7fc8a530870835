"""Test configuration and fixtures"""

import struct
import tempfile
from io import BytesIO
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from PIL import Image

from ncmtag.ncm.models import AlbumInfo, ArtistInfo, TrackMetadata


# STREAMINFO: 4096-sample blocks, 44.1 kHz, stereo, 16 bit, no MD5
STREAMINFO = (
    struct.pack('>HH', 4096, 4096)
    + b'\x00' * 6
    + bytes([0x0A, 0xC4, 0x42, 0xF0, 0x00, 0x00, 0x00, 0x00])
    + b'\x00' * 16
)

# MPEG-1 Layer III, 128 kbps, 44.1 kHz, 417 byte frames
MP3_FRAME = b'\xff\xfb\x90\x64' + b'\x00' * 413


def build_flac() -> bytes:
    """Smallest FLAC stream mutagen accepts: marker, STREAMINFO, fake audio"""
    header = bytes([0x80]) + len(STREAMINFO).to_bytes(3, 'big')
    return b'fLaC' + header + STREAMINFO + b'\xff\xf8' + b'\x00' * 64


def build_mp3() -> bytes:
    """Untagged MP3 made of silent frames"""
    return MP3_FRAME * 8


def image_bytes(fmt: str, size=(4, 3)) -> bytes:
    buffer = BytesIO()
    Image.new('RGB', size, 'red').save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def flac_file(temp_dir):
    """Untagged FLAC file"""
    path = temp_dir / "track.flac"
    path.write_bytes(build_flac())
    return path


@pytest.fixture
def mp3_file(temp_dir):
    """Untagged MP3 file"""
    path = temp_dir / "track.mp3"
    path.write_bytes(build_mp3())
    return path


@pytest.fixture
def png_bytes():
    return image_bytes('PNG')


@pytest.fixture
def jpeg_bytes():
    return image_bytes('JPEG')


@pytest.fixture
def sample_metadata():
    """Metadata as decoded from an .ncm container"""
    return TrackMetadata(
        name='Test Song',
        album=AlbumInfo(name='Test Album', cover_url='https://p1.music.126.net/cover.jpg'),
        artists=(ArtistInfo(name='A'), ArtistInfo(name='B')),
        comment='163 key(Don\'t modify):abc',
        format='flac',
    )


@pytest.fixture
def empty_metadata():
    """Metadata with nothing to write"""
    return TrackMetadata()


@pytest.fixture
def offline_session():
    """HTTP session whose cover download always answers 404"""
    session = Mock()
    session.get.return_value = Mock(status_code=404, content=b'Not Found')
    return session


@pytest.fixture
def write_protected():
    """Make every rb+ open in the writers fail as it does on a read-only file"""
    real_open = open

    def guarded_open(file, mode='r', *args, **kwargs):
        if mode == 'rb+':
            raise PermissionError(13, 'Permission denied', str(file))
        return real_open(file, mode, *args, **kwargs)

    with patch('ncmtag.audio.container.open', side_effect=guarded_open, create=True):
        yield
