"""
Upload service interfaces.

This module defines the contracts between the upload orchestration core
and its collaborators: the resume negotiator, the chunk transmitter and
the progress sink the caller injects.
"""

from abc import ABC, abstractmethod
from typing import Callable

from ..domain.upload import ProgressEvent

ProgressCallback = Callable[[int], None]
"""Receives the number of bytes of the current chunk sent so far."""


class IResumeNegotiator(ABC):
    """Interface for looking up how much of a file the server already holds."""

    @abstractmethod
    async def resolve(self, filename: str) -> int:
        """
        Get the byte offset from which the upload of ``filename`` should resume.

        Implementations must fail open: any failure to obtain a usable offset
        results in ``0`` rather than an exception.

        Args:
            filename: Logical file name used as the server-side resume key

        Returns:
            Non-negative byte offset
        """
        pass


class IChunkTransmitter(ABC):
    """Interface for sending a single chunk to the server."""

    @abstractmethod
    async def send(
        self,
        filename: str,
        start: int,
        data: bytes,
        total_size: int,
        on_progress: ProgressCallback
    ) -> None:
        """
        Transmit one chunk.

        ``on_progress`` may be called zero or more times with increasing
        byte counts, always before this coroutine returns or raises.

        Args:
            filename: Logical file name
            start: Offset of the chunk within the file
            data: Chunk bytes
            total_size: Size of the whole file
            on_progress: Byte-level progress callback

        Raises:
            ServerRejected: The server answered with a non-success status
            TransportError: The request failed before a response arrived
        """
        pass


class IProgressSink(ABC):
    """Interface for consumers of upload progress (UI, logs, recorders)."""

    @abstractmethod
    def publish(self, event: ProgressEvent) -> None:
        """Receive one progress event. Events arrive in order."""
        pass
