"""
Exception hierarchy for the resumable uploader.

Chunk-level failures (ServerRejected, TransportError) are terminal for the
file being uploaded but never for the batch. ResumeQueryFailed never leaves
the negotiator: it is logged and mapped to offset 0.
"""

from enum import Enum
from typing import Optional


class ErrorLevel(Enum):
    """Error level definitions"""
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class UploaderException(Exception):
    """Base class for uploader exceptions"""

    def __init__(self, message: str, error_code: Optional[str] = "", level: ErrorLevel = ErrorLevel.ERROR):
        self.message = message
        self.error_code = error_code
        self.level = level
        super().__init__(self.message)


class ResumeQueryFailed(UploaderException):
    """Status query failed or returned a body that is not a byte offset"""

    def __init__(self, filename: str, reason: str):
        super().__init__(
            f"Resume query for {filename!r} failed: {reason}",
            "RESUME_QUERY_FAILED",
            ErrorLevel.WARNING,
        )
        self.filename = filename
        self.reason = reason


class UploadError(UploaderException):
    """A chunk could not be delivered; fatal for the current file."""

    @property
    def status_text(self) -> str:
        """Message shown to the user for the failed file."""
        return self.message


class ServerRejected(UploadError):
    """The server answered a chunk upload with a non-success status"""

    def __init__(self, details: str, status: Optional[int] = None):
        super().__init__(details, "SERVER_REJECTED")
        self.details = details
        self.status = status

    @property
    def status_text(self) -> str:
        return f"Upload failed: {self.details}"


class TransportError(UploadError):
    """The request failed before any response was received"""

    def __init__(self, reason: str):
        super().__init__(reason, "TRANSPORT_ERROR")
        self.reason = reason

    @property
    def status_text(self) -> str:
        return "Network error"


class NoFilesSelected(UploaderException):
    """A batch was started without any files"""

    def __init__(self, message: str = "Select files first"):
        super().__init__(message, "NO_FILES_SELECTED", ErrorLevel.WARNING)


class RemoteFileNotFound(UploaderException):
    """The server does not hold the requested file"""

    def __init__(self, filename: str):
        super().__init__(f"File not found on server: {filename}", "REMOTE_FILE_NOT_FOUND")
        self.filename = filename
