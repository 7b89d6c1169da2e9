"""
Resumable Uploader - chunked HTTP uploads that resume from the server's offset.

A file is split into fixed-size byte ranges that are sent one after another;
an interrupted upload picks up again from the number of bytes the server
reports it already holds.
"""

__version__ = "0.1.0"

# Public API exports
from .core.domain import (
    BatchResult, ChunkRange, FileHandle, FileOutcome, ProgressEvent, UploadState
)
from .core.exceptions import (
    NoFilesSelected, ResumeQueryFailed, ServerRejected, TransportError, UploadError
)
from .core.interfaces.upload import IChunkTransmitter, IProgressSink, IResumeNegotiator
from .core.services import BatchRunner, UploadOrchestrator, plan_chunks
from .application.startup import UploaderApplication

__all__ = [
    "BatchResult",
    "ChunkRange",
    "FileHandle",
    "FileOutcome",
    "ProgressEvent",
    "UploadState",
    "NoFilesSelected",
    "ResumeQueryFailed",
    "ServerRejected",
    "TransportError",
    "UploadError",
    "IChunkTransmitter",
    "IProgressSink",
    "IResumeNegotiator",
    "BatchRunner",
    "UploadOrchestrator",
    "plan_chunks",
    "UploaderApplication",
]
