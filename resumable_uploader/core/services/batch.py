"""
Sequential batch uploads.

Files are uploaded one at a time in the order given. A failed file is
reported and skipped; the batch carries on with the next file.
"""

import logging
from typing import Sequence

from ..domain.files import FileHandle
from ..domain.upload import BatchResult
from ..exceptions import NoFilesSelected
from .orchestrator import UploadOrchestrator

logger = logging.getLogger(__name__)


class BatchRunner:
    """Runs an UploadOrchestrator over a list of files, one file at a time."""

    def __init__(self, orchestrator: UploadOrchestrator) -> None:
        self._orchestrator = orchestrator

    async def run(self, files: Sequence[FileHandle]) -> BatchResult:
        """
        Upload every file in ``files``.

        Raises:
            NoFilesSelected: If ``files`` is empty
        """
        if not files:
            raise NoFilesSelected()

        result = BatchResult()
        logger.info(f"Starting batch of {len(files)} file(s)")

        for index, file in enumerate(files, start=1):
            logger.debug(f"Batch file {index}/{len(files)}: {file.name}")
            outcome = await self._orchestrator.upload(file)
            result.outcomes.append(outcome)

        logger.info(
            f"Batch finished: {len(result.succeeded)} succeeded, {len(result.failed)} failed")
        return result
