"""
HTTP client for the resumable upload server.

Wraps an aiohttp ClientSession and exposes the server's endpoints:
status (resume offset), upload (one chunk), list and download.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, AsyncIterable, List, Optional

import aiofiles
import aiohttp

from ....core.exceptions import RemoteFileNotFound, ServerRejected, TransportError
from ....core.interfaces.clients import ClientStatus, IUploadServerClient, RemoteFile
from ..base import BaseClient
from .config import HttpClientConfig

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class UploadServerClient(BaseClient, IUploadServerClient):
    """
    aiohttp client for the upload server API.

    The underlying session is created in ``start`` and closed in ``stop``;
    the client can also be used as an async context manager.
    """

    def __init__(self, config: HttpClientConfig, name: Optional[str] = None):
        super().__init__(config, name)
        self._http_config = config
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def config(self) -> HttpClientConfig:
        return self._http_config

    @property
    def session(self) -> aiohttp.ClientSession:
        """Active HTTP session."""
        if self._session is None or self._session.closed:
            raise RuntimeError(f"Client {self._name} is not started")
        return self._session

    async def start(self) -> None:
        """Open the HTTP session."""
        if self._running:
            return

        timeout = aiohttp.ClientTimeout(
            total=self._http_config.timeout,
            connect=self._http_config.connect_timeout
        )
        connector = aiohttp.TCPConnector(
            ssl=None if self._http_config.verify_ssl else False)
        self._session = aiohttp.ClientSession(
            timeout=timeout,
            connector=connector,
            headers=self._http_config.headers
        )
        await super().start()

    async def stop(self) -> None:
        """Close the HTTP session."""
        if not self._running:
            return

        if self._session is not None:
            await self._session.close()
            self._session = None
        await super().stop()

    def url(self, path: str) -> str:
        """Build an absolute URL for a server path."""
        return f"{self._http_config.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def fetch_offset(self, filename: str) -> str:
        """Query the number of bytes the server holds for ``filename``."""
        started_at = time.time()
        try:
            async with self.session.get(
                self.url(self._http_config.status_path),
                params={"filename": filename}
            ) as response:
                body = await _read_text(response)
                self._metrics.bytes_received += len(body)
                if not 200 <= response.status < 300:
                    raise ServerRejected(body.strip() or str(response.reason), response.status)
        except TRANSPORT_ERRORS as e:
            self._fail(started_at, e)
            raise TransportError(_describe(e)) from e
        except ServerRejected as e:
            self._record(started_at, e.details)
            raise

        self._succeed(started_at)
        return body

    async def post_chunk(
        self,
        filename: str,
        start: int,
        body: AsyncIterable[bytes],
        size: int
    ) -> None:
        """
        Post one chunk as a multipart form.

        Args:
            filename: Logical file name
            start: Offset of the chunk within the file
            body: Chunk bytes, streamed
            size: Number of bytes in ``body``

        Raises:
            ServerRejected: Non-success status
            TransportError: Request failed before a response arrived
        """
        form = aiohttp.FormData()
        form.add_field("filename", filename)
        form.add_field("start", str(start))
        form.add_field(
            "file", body,
            filename=filename,
            content_type="application/octet-stream"
        )

        started_at = time.time()
        try:
            async with self.session.post(
                self.url(self._http_config.upload_path), data=form
            ) as response:
                text = await _read_text(response)
                if not 200 <= response.status < 300:
                    raise ServerRejected(text.strip() or str(response.reason), response.status)
        except TRANSPORT_ERRORS as e:
            self._fail(started_at, e)
            raise TransportError(_describe(e)) from e
        except ServerRejected as e:
            self._record(started_at, e.details)
            raise

        self._metrics.bytes_sent += size
        self._succeed(started_at)

    async def list_files(self) -> List[RemoteFile]:
        """List files stored on the server."""
        started_at = time.time()
        try:
            async with self.session.get(self.url(self._http_config.list_path)) as response:
                if not 200 <= response.status < 300:
                    text = await _read_text(response)
                    raise ServerRejected(text.strip() or str(response.reason), response.status)
                payload: Any = await response.json(content_type=None)
        except TRANSPORT_ERRORS as e:
            self._fail(started_at, e)
            raise TransportError(_describe(e)) from e
        except ServerRejected as e:
            self._record(started_at, e.details)
            raise
        except ValueError as e:
            self._record(started_at, str(e))
            raise ServerRejected(f"Invalid file listing: {e}") from e

        try:
            files = [
                RemoteFile(name=str(entry["name"]), size=int(entry["size"]))
                for entry in payload or []
            ]
        except (KeyError, TypeError, ValueError) as e:
            self._record(started_at, str(e))
            raise ServerRejected(f"Invalid file listing: {e}") from e

        self._succeed(started_at)
        return files

    async def download(
        self,
        filename: str,
        destination: Path,
        chunk_size: Optional[int] = None
    ) -> int:
        """
        Download ``filename`` from the server into ``destination``.

        Returns:
            Number of bytes written

        Raises:
            RemoteFileNotFound: The server does not hold the file
        """
        chunk_size = chunk_size or 64 * 1024
        written = 0
        started_at = time.time()
        try:
            async with self.session.get(
                self.url(self._http_config.download_path),
                params={"file": filename}
            ) as response:
                if response.status == 404:
                    raise RemoteFileNotFound(filename)
                if not 200 <= response.status < 300:
                    text = await _read_text(response)
                    raise ServerRejected(text.strip() or str(response.reason), response.status)

                async with aiofiles.open(destination, 'wb') as f:
                    async for data in response.content.iter_chunked(chunk_size):
                        await f.write(data)
                        written += len(data)
        except TRANSPORT_ERRORS as e:
            self._fail(started_at, e)
            raise TransportError(_describe(e)) from e
        except (ServerRejected, RemoteFileNotFound) as e:
            self._record(started_at, e.message)
            raise

        self._metrics.bytes_received += written
        self._succeed(started_at)
        logger.info(f"Downloaded {filename} ({written} bytes) to {destination}")
        return written

    def _succeed(self, started_at: float) -> None:
        self._record(started_at)
        self._update_status(ClientStatus.CONNECTED)

    def _fail(self, started_at: float, error: BaseException) -> None:
        self._record(started_at, _describe(error))
        self._update_status(ClientStatus.ERROR)


def _describe(error: BaseException) -> str:
    if isinstance(error, asyncio.TimeoutError):
        return "Request timed out"
    return str(error) or error.__class__.__name__


async def _read_text(response: aiohttp.ClientResponse) -> str:
    """Response body as text; undecodable bytes become U+FFFD."""
    return await response.text(errors="replace")
