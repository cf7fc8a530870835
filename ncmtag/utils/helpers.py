"""
Utility functions and helpers for ncmtag
Common functions for format detection and human-readable output
"""

from pathlib import Path
from typing import Optional, Union


# Extension (without dot) -> tag writer format name
AUDIO_EXTENSIONS = {
    'flac': 'flac',
    'mp3': 'mp3',
}


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable string

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string
    """
    if size_bytes < 0:
        return "0 B"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    size = float(size_bytes)
    unit_index = 0

    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1

    if unit_index == 0:
        return f"{int(size)} {units[unit_index]}"
    else:
        return f"{size:.1f} {units[unit_index]}"


def detect_audio_format(file_path: Union[str, Path], fallback: Optional[str] = None) -> Optional[str]:
    """
    Determine the audio format of a file for tag writer selection

    The file extension wins. When it is not recognized, the format reported
    by the decoder (fallback) is used if it names a supported format.

    Args:
        file_path: Path to the audio file
        fallback: Format name reported alongside the metadata, e.g. "flac"

    Returns:
        "flac", "mp3", or None if neither source names a supported format
    """
    extension = Path(file_path).suffix.lower().lstrip('.')
    if extension in AUDIO_EXTENSIONS:
        return AUDIO_EXTENSIONS[extension]

    if fallback:
        return AUDIO_EXTENSIONS.get(fallback.lower().lstrip('.'))

    return None
