"""
Shared fixtures: an in-process upload server and stub collaborators.

The fake server mirrors the resumable upload server's HTTP contract:
``/status``, ``/upload``, ``/list`` and ``/download``.
"""

from typing import AsyncIterator, Dict, List, Optional, Set, Tuple, Union

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from resumable_uploader.core.exceptions import UploadError
from resumable_uploader.core.interfaces.upload import (
    IChunkTransmitter, IResumeNegotiator, ProgressCallback
)
from resumable_uploader.infrastructure.clients.http import HttpClientConfig, UploadServerClient


class FakeUploadServer:
    """In-memory upload server with switches for failure scenarios."""

    def __init__(self) -> None:
        self.files: Dict[str, bytearray] = {}
        self.received: List[Tuple[str, int, int]] = []
        self.rejected_names: Set[str] = set()
        self.reject_body = b"Failed to write chunk"
        self.accept_limit: Dict[str, int] = {}
        self.status_body: Optional[Union[str, bytes]] = None
        self.status_code = 200
        self.list_body: Optional[str] = None
        self.base_url = ""

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/status", self.handle_status)
        app.router.add_post("/upload", self.handle_upload)
        app.router.add_get("/list", self.handle_list)
        app.router.add_get("/download", self.handle_download)
        return app

    async def handle_status(self, request: web.Request) -> web.Response:
        filename = request.query.get("filename", "")
        if not filename:
            return web.Response(status=400, text="Missing filename")
        if self.status_code != 200:
            return web.Response(status=self.status_code, text="Could not stat file")
        if self.status_body is not None:
            if isinstance(self.status_body, bytes):
                return web.Response(body=self.status_body, content_type="text/plain", charset="utf-8")
            return web.Response(text=self.status_body)
        return web.Response(text=str(len(self.files.get(filename, b""))))

    async def handle_upload(self, request: web.Request) -> web.Response:
        form = await request.post()
        filename = form.get("filename")
        start = form.get("start")
        part = form.get("file")
        if not filename or start is None or part is None:
            return web.Response(status=400, text="Missing filename/start")

        filename = str(filename)
        if filename in self.rejected_names:
            return web.Response(status=500, body=self.reject_body, content_type="text/plain", charset="utf-8")

        limit = self.accept_limit.get(filename)
        accepted = sum(1 for name, _, _ in self.received if name == filename)
        if limit is not None and accepted >= limit:
            return web.Response(status=503, text="Server going away")

        data = part.file.read()  # type: ignore[union-attr]
        offset = int(str(start))
        buffer = self.files.setdefault(filename, bytearray())
        if len(buffer) < offset:
            buffer.extend(b"\0" * (offset - len(buffer)))
        buffer[offset:offset + len(data)] = data
        self.received.append((filename, offset, len(data)))
        return web.Response(status=200)

    async def handle_list(self, request: web.Request) -> web.Response:
        if self.list_body is not None:
            return web.Response(text=self.list_body, content_type="application/json")
        return web.json_response(
            [{"name": name, "size": len(data)} for name, data in sorted(self.files.items())]
        )

    async def handle_download(self, request: web.Request) -> web.Response:
        filename = request.query.get("file", "")
        if filename not in self.files:
            return web.Response(status=404, text="File not found")
        return web.Response(body=bytes(self.files[filename]))

    def starts_for(self, filename: str) -> List[int]:
        return [start for name, start, _ in self.received if name == filename]


@pytest.fixture
async def upload_server() -> AsyncIterator[FakeUploadServer]:
    """Running fake upload server."""
    fake = FakeUploadServer()
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.base_url = str(server.make_url("/")).rstrip("/")

    yield fake

    await server.close()


@pytest.fixture
async def server_client(upload_server: FakeUploadServer) -> AsyncIterator[UploadServerClient]:
    """Started client pointed at the fake server."""
    client = UploadServerClient(HttpClientConfig(base_url=upload_server.base_url, timeout=10.0))
    await client.start()

    yield client

    await client.stop()


class StubNegotiator(IResumeNegotiator):
    """Returns preset offsets per file name (0 when unknown)."""

    def __init__(self, offsets: Optional[Dict[str, int]] = None) -> None:
        self.offsets = offsets or {}
        self.calls: List[str] = []

    async def resolve(self, filename: str) -> int:
        self.calls.append(filename)
        return self.offsets.get(filename, 0)


class StubTransmitter(IChunkTransmitter):
    """
    Records every send and reports progress in fixed steps.

    ``failures`` maps a file name to the error raised for it; ``fail_at``
    maps a file name to the chunk start at which that error is raised.
    """

    def __init__(self, step: int = 100) -> None:
        self.step = step
        self.sent: List[Tuple[str, int, int]] = []
        self.failures: Dict[str, UploadError] = {}
        self.fail_at: Dict[str, int] = {}
        self.in_flight = 0
        self.max_in_flight = 0

    async def send(
        self,
        filename: str,
        start: int,
        data: bytes,
        total_size: int,
        on_progress: ProgressCallback
    ) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            sent = 0
            while sent < len(data):
                sent = min(sent + self.step, len(data))
                on_progress(sent)

            error = self.failures.get(filename)
            if error is not None and self.fail_at.get(filename, start) == start:
                raise error

            self.sent.append((filename, start, len(data)))
        finally:
            self.in_flight -= 1

    def starts_for(self, filename: str) -> List[int]:
        return [start for name, start, _ in self.sent if name == filename]
