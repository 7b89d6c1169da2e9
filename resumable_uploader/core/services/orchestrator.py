"""
Single-file upload orchestration.

The orchestrator negotiates the resume offset for one file, then sends the
planned chunks one after another, turning chunk-relative byte counts into
whole-file progress events.
"""

import logging
import time
from typing import Optional

from ..domain.files import ChunkRange, FileHandle
from ..domain.upload import FileOutcome, ProgressEvent, UploadSession, UploadState
from ..exceptions import UploadError
from ..interfaces.upload import IChunkTransmitter, IProgressSink, IResumeNegotiator
from .planner import DEFAULT_CHUNK_SIZE, plan_chunks

logger = logging.getLogger(__name__)


class _ProgressTracker:
    """Forwards progress to the sink, dropping anything that would go backwards."""

    def __init__(self, filename: str, total_size: int, sink: Optional[IProgressSink]) -> None:
        self.filename = filename
        self.total_size = total_size
        self.position = 0
        self.percentage = 0.0
        self._sink = sink
        self._emitted = False

    def advance(self, chunk_start: int, bytes_sent: int) -> None:
        position = chunk_start + bytes_sent
        if self._emitted and position <= self.position:
            return
        self.position = position
        self.emit(ProgressEvent.compute(self.filename, chunk_start, bytes_sent, self.total_size))

    def emit(self, event: ProgressEvent) -> None:
        self._emitted = True
        self.percentage = max(self.percentage, event.percentage)
        if self._sink is None:
            return
        try:
            self._sink.publish(event)
        except Exception as e:
            logger.error(f"Progress sink error for {event.filename}: {e}")


class UploadOrchestrator:
    """
    Drives one file through NEGOTIATING -> TRANSMITTING -> COMPLETE/FAILED.

    Chunks are strictly sequential: a chunk is only read and sent once the
    previous chunk's transmission has returned. A failed chunk ends the
    file's upload; nothing is retried.
    """

    def __init__(
        self,
        negotiator: IResumeNegotiator,
        transmitter: IChunkTransmitter,
        sink: Optional[IProgressSink] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")

        self._negotiator = negotiator
        self._transmitter = transmitter
        self._sink = sink
        self._chunk_size = chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    async def upload(self, file: FileHandle) -> FileOutcome:
        """
        Upload a single file, resuming where the server left off.

        Chunk failures do not propagate; they are reported through the sink
        and encoded in the returned outcome.

        Args:
            file: File to upload

        Returns:
            Terminal outcome of the upload (COMPLETE or FAILED)
        """
        session = UploadSession(filename=file.name, total_size=file.size)
        tracker = _ProgressTracker(file.name, file.size, self._sink)
        started_at = time.time()

        offset = await self._negotiator.resolve(file.name)
        session.begin_transmitting(offset)
        if session.resume_offset != offset:
            logger.warning(
                f"Resume offset {offset} for {file.name} out of range, using {session.resume_offset}")

        plan = plan_chunks(file.size, session.resume_offset, self._chunk_size)
        logger.info(
            f"Uploading {file.name} ({file.size} bytes) from offset "
            f"{session.resume_offset} in {len(plan)} chunk(s)")

        if len(plan) > 0:
            tracker.advance(session.resume_offset, 0)

        for chunk in plan:
            try:
                await self._send_chunk(file, chunk, tracker)
            except UploadError as e:
                session.state = UploadState.FAILED
                logger.error(f"Upload of {file.name} failed at {chunk}: {e.message}")
                tracker.emit(ProgressEvent.failed(file.name, tracker.percentage, e.status_text))
                return FileOutcome.from_session(session, error=e.status_text)

            session.confirm(chunk.end)
            if chunk.end < file.size:
                tracker.advance(chunk.end, 0)

        session.state = UploadState.COMPLETE
        tracker.emit(ProgressEvent.complete(file.name))
        logger.info(
            f"Upload of {file.name} complete: {session.chunks_sent} chunk(s) "
            f"in {time.time() - started_at:.2f}s")
        return FileOutcome.from_session(session)

    async def _send_chunk(self, file: FileHandle, chunk: ChunkRange, tracker: _ProgressTracker) -> None:
        try:
            data = await file.read_range(chunk)
        except (OSError, ValueError) as e:
            raise UploadError(f"Cannot read {file.path}: {e}", "READ_ERROR")

        def on_progress(bytes_sent: int) -> None:
            if bytes_sent < 0 or bytes_sent > chunk.length:
                logger.debug(f"Ignoring out-of-range progress {bytes_sent} for {chunk}")
                return
            tracker.advance(chunk.start, bytes_sent)

        logger.debug(f"Sending {file.name} chunk {chunk}")
        await self._transmitter.send(file.name, chunk.start, data, file.size, on_progress)
