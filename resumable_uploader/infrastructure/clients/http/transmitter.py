"""
Chunk transmission over HTTP.

Each chunk is posted as its own multipart request. The chunk body is fed to
aiohttp piece by piece so that byte-level progress can be reported while
the request is being written.
"""

import logging
from typing import AsyncIterator

from ....core.interfaces.clients import IUploadServerClient
from ....core.interfaces.upload import IChunkTransmitter, ProgressCallback
from ...config.models import DEFAULT_PROGRESS_STEP

logger = logging.getLogger(__name__)


class HttpChunkTransmitter(IChunkTransmitter):
    """
    Sends chunks through an upload server client.

    Holds no per-chunk state; every ``send`` call is independent.
    """

    def __init__(self, client: IUploadServerClient, progress_step: int = DEFAULT_PROGRESS_STEP) -> None:
        if progress_step <= 0:
            raise ValueError(f"Progress step must be positive, got {progress_step}")
        self._client = client
        self._progress_step = progress_step

    @property
    def progress_step(self) -> int:
        return self._progress_step

    async def send(
        self,
        filename: str,
        start: int,
        data: bytes,
        total_size: int,
        on_progress: ProgressCallback
    ) -> None:
        if start < 0 or start + len(data) > total_size:
            raise ValueError(
                f"Chunk [{start}, {start + len(data)}) does not fit a {total_size}-byte file")

        logger.debug(f"POST {filename} bytes [{start}, {start + len(data)}) of {total_size}")
        await self._client.post_chunk(
            filename, start, self._stream(data, on_progress), len(data))

    async def _stream(self, data: bytes, on_progress: ProgressCallback) -> AsyncIterator[bytes]:
        """Yield ``data`` in pieces, reporting each piece once it has been consumed."""
        view = memoryview(data)
        sent = 0
        while sent < len(data):
            piece = view[sent:sent + self._progress_step]
            yield piece.tobytes()
            sent += len(piece)
            on_progress(sent)
