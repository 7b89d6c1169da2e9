"""
Core interfaces defining the contracts between the upload core and its
collaborators.
"""

from .lifecycle import IManagedResource
from .upload import IResumeNegotiator, IChunkTransmitter, IProgressSink, ProgressCallback
from .clients import IBaseClient, IUploadServerClient, ClientStatus, RemoteFile

__all__ = [
    "IManagedResource",
    "IResumeNegotiator",
    "IChunkTransmitter",
    "IProgressSink",
    "ProgressCallback",
    "IBaseClient",
    "IUploadServerClient",
    "ClientStatus",
    "RemoteFile",
]
