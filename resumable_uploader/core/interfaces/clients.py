"""
Client interfaces for the upload server.

This module defines the contract of the HTTP client that talks to the
resumable upload server.
"""

from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import AsyncIterable, List, Optional

from .lifecycle import IManagedResource


class ClientStatus(Enum):
    """Client connection status."""
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True)
class RemoteFile:
    """A file stored on the upload server."""
    name: str
    size: int


class IBaseClient(IManagedResource):
    """Base interface for all client implementations."""

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if client is ready to issue requests."""
        pass

    @abstractmethod
    def get_status(self) -> ClientStatus:
        """Get current client status."""
        pass


class IUploadServerClient(IBaseClient):
    """Interface for the resumable upload server API."""

    @abstractmethod
    async def fetch_offset(self, filename: str) -> str:
        """
        Query the number of bytes the server holds for ``filename``.

        Returns:
            Raw response body

        Raises:
            ServerRejected: Non-success status
            TransportError: Request failed
        """
        pass

    @abstractmethod
    async def post_chunk(
        self,
        filename: str,
        start: int,
        body: AsyncIterable[bytes],
        size: int
    ) -> None:
        """
        Post one chunk of ``filename`` beginning at byte ``start``.

        Raises:
            ServerRejected: Non-success status
            TransportError: Request failed
        """
        pass

    @abstractmethod
    async def list_files(self) -> List[RemoteFile]:
        """List files stored on the server."""
        pass

    @abstractmethod
    async def download(
        self,
        filename: str,
        destination: Path,
        chunk_size: Optional[int] = None
    ) -> int:
        """Download ``filename`` into ``destination``; returns bytes written."""
        pass
