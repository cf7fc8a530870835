"""
Exception classes for ncmtag.

This module defines the exceptions raised while writing tags into audio
containers. Each exception distinguishes a failure mode so callers can tell
a broken input file from a failed write.

Exception Hierarchy:
    TaggerError (base)
        ContainerParseError - Input file is not a parsable FLAC/MP3 container
        NetworkFetchError - Cover art download failed (recovered internally)
        TagMarshalError - Comment/frame re-encoding failed
        PersistError - Writing the container back to disk failed
        UnsupportedFormatError - No writer exists for the file's format

Only NetworkFetchError is non-fatal: the cover art resolver catches it and
falls back to a link-only picture. Every other error aborts the tagging
call, and the file should be treated as being in an unknown state.
"""


class TaggerError(Exception):
    """
    Base exception for all ncmtag errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch every tagging failure with a single
    except clause.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., file path, URL).

    Example:
        try:
            write_tags(path, None, metadata)
        except TaggerError as e:
            logger.error(f"Tagging failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'file_path': Audio file involved in the error
                     - 'url': URL that caused the error
                     - 'original_error': The underlying exception message
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ContainerParseError(TaggerError):
    """
    Raised when the input file is not a valid container of the expected type.

    This is a FATAL error for the tagging call.

    Common causes:
        - File does not exist or cannot be opened for reading and writing
        - Missing 'fLaC' marker or STREAMINFO block
        - No MPEG frame sync found in an MP3 file
        - Malformed ID3 header

    Example:
        raise ContainerParseError(
            "song.flac is not a valid FLAC file",
            details={'file_path': 'song.flac'}
        )
    """
    pass


class NetworkFetchError(TaggerError):
    """
    Raised when cover art cannot be downloaded.

    This error is NON-FATAL. It never leaves the cover art resolver, which
    logs it and falls back to a link-only picture.

    Attributes:
        url: The URL that was requested.
        status_code: HTTP status code if a response was received, else None.
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        url: str = "",
        status_code: int | None = None
    ) -> None:
        """
        Initialize network error with request context.

        Args:
            message: Human-readable error description.
            details: Optional additional context.
            url: The URL that failed.
            status_code: HTTP status code, None for transport errors.
        """
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class TagMarshalError(TaggerError):
    """
    Raised when merged tags cannot be re-encoded.

    This is a FATAL error for the tagging call.

    Common causes:
        - Comment text not representable in ISO-8859-1 (ID3 COMM frames)
        - Invalid Vorbis comment keys or non-string values
    """
    pass


class PersistError(TaggerError):
    """
    Raised when the updated container cannot be written back to disk.

    This is a FATAL error. The file may have been partially rewritten,
    callers should re-process it from the source container.

    Common causes:
        - Permission denied
        - Disk full
        - File truncated or replaced while tagging
    """
    pass


class UnsupportedFormatError(TaggerError):
    """
    Raised when no tag writer exists for the file's audio format.

    Only FLAC and MP3 are supported.
    """
    pass
