"""
Domain models for resumable uploads.

Value objects describing files, byte ranges, per-file upload state and
progress notifications.
"""

from .files import ChunkRange, FileHandle
from .upload import (
    COMPLETE_STATUS_TEXT, BatchResult, FileOutcome, ProgressEvent,
    UploadSession, UploadState
)

__all__ = [
    "ChunkRange",
    "FileHandle",
    "COMPLETE_STATUS_TEXT",
    "BatchResult",
    "FileOutcome",
    "ProgressEvent",
    "UploadSession",
    "UploadState",
]
