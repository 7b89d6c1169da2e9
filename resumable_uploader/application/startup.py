"""
Application startup and wiring.

This module builds the upload components from the application
configuration and manages the lifetime of the HTTP client they share.
"""

import logging
import os
from typing import Any, Dict, Iterable, List, Optional, Union

from ..core.domain.files import FileHandle
from ..core.domain.upload import BatchResult
from ..core.exceptions import NoFilesSelected
from ..core.interfaces.lifecycle import IManagedResource
from ..core.interfaces.upload import IProgressSink
from ..core.services.batch import BatchRunner
from ..core.services.orchestrator import UploadOrchestrator
from ..infrastructure.clients.http import (
    HttpChunkTransmitter, HttpClientConfig, HttpResumeNegotiator, UploadServerClient
)
from ..infrastructure.config.models import ApplicationConfig

logger = logging.getLogger(__name__)


class UploaderApplication(IManagedResource):
    """
    Owns the upload server client and the services built on top of it.

    Use as an async context manager; the client is started on entry and
    stopped on exit.
    """

    def __init__(self, config: ApplicationConfig, sink: Optional[IProgressSink] = None) -> None:
        self._config = config
        self._sink = sink

        self.client = UploadServerClient(HttpClientConfig.from_server_config(config.server))
        self.negotiator = HttpResumeNegotiator(self.client)
        self.transmitter = HttpChunkTransmitter(self.client, config.upload.progress_step)
        self.orchestrator = UploadOrchestrator(
            self.negotiator,
            self.transmitter,
            sink=sink,
            chunk_size=config.upload.chunk_size
        )
        self.batch_runner = BatchRunner(self.orchestrator)

    @property
    def config(self) -> ApplicationConfig:
        return self._config

    async def start(self) -> None:
        logger.debug(f"Starting {self._config.name} against {self._config.server.base_url}")
        await self.client.start()

    async def stop(self) -> None:
        try:
            await self.client.stop()
        except Exception as e:
            logger.error(f"Error stopping upload client: {e}")

    async def health_check(self) -> Dict[str, Any]:
        health = await self.client.health_check()
        health["details"]["chunk_size"] = self._config.upload.chunk_size
        return health

    async def upload_paths(self, paths: Iterable[Union[str, os.PathLike]]) -> BatchResult:
        """
        Upload local files as one batch.

        Raises:
            NoFilesSelected: If ``paths`` is empty
            FileNotFoundError: If any path is not a regular file; raised
                before the first upload starts
        """
        files = build_file_handles(paths)
        if not files:
            raise NoFilesSelected()
        return await self.batch_runner.run(files)

    async def resume_offset(self, filename: str) -> int:
        """Offset the server reports for ``filename`` (0 when unknown)."""
        return await self.negotiator.resolve(filename)


def build_file_handles(paths: Iterable[Union[str, os.PathLike]]) -> List[FileHandle]:
    """Build file handles for ``paths``, preserving order."""
    return [FileHandle.from_path(path) for path in paths]
