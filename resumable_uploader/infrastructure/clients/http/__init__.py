"""
HTTP implementation of the upload server protocol.
"""

from .config import HttpClientConfig
from .client import UploadServerClient
from .negotiator import HttpResumeNegotiator, parse_offset
from .transmitter import HttpChunkTransmitter

__all__ = [
    "HttpClientConfig",
    "UploadServerClient",
    "HttpResumeNegotiator",
    "parse_offset",
    "HttpChunkTransmitter",
]
