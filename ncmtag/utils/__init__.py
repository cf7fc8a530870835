"""
Utilities package
Logging setup and small helpers shared by the tag writers
"""

from .logger import (
    get_logger,
    configure_from_settings,
    setup_logging,
    get_current_log_file,
    parse_size,
    LogContext,
)
from .helpers import (
    format_file_size,
    detect_audio_format,
)

__all__ = [
    # Logger exports
    'get_logger',
    'configure_from_settings',
    'setup_logging',
    'get_current_log_file',
    'parse_size',
    'LogContext',

    # Helper exports
    'format_file_size',
    'detect_audio_format',
]
