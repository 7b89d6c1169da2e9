"""
Client implementations.

This module provides the base client and the HTTP client for the
resumable upload server.
"""

from .base import BaseClient, ClientConfig, ClientMetrics
from .http import (
    HttpClientConfig, UploadServerClient, HttpResumeNegotiator, HttpChunkTransmitter
)

__all__ = [
    "BaseClient",
    "ClientConfig",
    "ClientMetrics",
    "HttpClientConfig",
    "UploadServerClient",
    "HttpResumeNegotiator",
    "HttpChunkTransmitter",
]
