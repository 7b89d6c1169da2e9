"""
Upload state, progress and outcome models.

These models carry no I/O. An UploadSession lives only for the duration of
one file's upload and is owned by the orchestrator running it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

COMPLETE_STATUS_TEXT = "Done!"


class UploadState(Enum):
    """States of a single file's upload."""
    NEGOTIATING = "negotiating"
    TRANSMITTING = "transmitting"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadState.COMPLETE, UploadState.FAILED)


@dataclass
class UploadSession:
    """Ephemeral per-file upload state."""

    filename: str
    total_size: int
    resume_offset: int = 0
    bytes_confirmed: int = 0
    state: UploadState = UploadState.NEGOTIATING
    chunks_sent: int = 0

    def begin_transmitting(self, resume_offset: int) -> None:
        """Record the negotiated offset and enter the transmitting state."""
        offset = min(max(resume_offset, 0), self.total_size)
        self.resume_offset = offset
        self.bytes_confirmed = offset
        self.state = UploadState.TRANSMITTING

    def confirm(self, end_offset: int) -> None:
        """
        Mark everything up to ``end_offset`` as durably received.

        Raises:
            ValueError: If the offset would move backwards or past the file size
        """
        if end_offset < self.bytes_confirmed:
            raise ValueError(
                f"Confirmed bytes cannot decrease ({self.bytes_confirmed} -> {end_offset})")
        if end_offset > self.total_size:
            raise ValueError(
                f"Confirmed bytes cannot exceed file size ({end_offset} > {self.total_size})")
        self.bytes_confirmed = end_offset
        self.chunks_sent += 1

    @property
    def percentage(self) -> float:
        if self.total_size == 0:
            return 100.0
        return (self.bytes_confirmed / self.total_size) * 100.0


@dataclass(frozen=True)
class ProgressEvent:
    """A single progress notification for one file."""

    filename: str
    percentage: float
    status_text: str
    state: UploadState = UploadState.TRANSMITTING

    @classmethod
    def compute(
        cls,
        filename: str,
        chunk_start: int,
        bytes_sent: int,
        total_size: int
    ) -> 'ProgressEvent':
        """Derive the whole-file percentage from a chunk-relative byte count."""
        if total_size <= 0:
            percentage = 100.0
        else:
            percentage = ((chunk_start + bytes_sent) / total_size) * 100.0
            percentage = min(max(percentage, 0.0), 100.0)

        return cls(
            filename=filename,
            percentage=percentage,
            status_text=f"{percentage:.2f}%",
        )

    @classmethod
    def complete(cls, filename: str) -> 'ProgressEvent':
        return cls(filename, 100.0, COMPLETE_STATUS_TEXT, UploadState.COMPLETE)

    @classmethod
    def failed(cls, filename: str, percentage: float, status_text: str) -> 'ProgressEvent':
        return cls(filename, percentage, status_text, UploadState.FAILED)

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal


@dataclass(frozen=True)
class FileOutcome:
    """Terminal result of one file's upload."""

    filename: str
    state: UploadState
    total_size: int
    resume_offset: int
    bytes_confirmed: int
    chunks_sent: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state == UploadState.COMPLETE

    @classmethod
    def from_session(cls, session: UploadSession, error: Optional[str] = None) -> 'FileOutcome':
        return cls(
            filename=session.filename,
            state=session.state,
            total_size=session.total_size,
            resume_offset=session.resume_offset,
            bytes_confirmed=session.bytes_confirmed,
            chunks_sent=session.chunks_sent,
            error=error,
        )


@dataclass
class BatchResult:
    """Outcomes of a batch, in the order the files were processed."""

    outcomes: List[FileOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def all_succeeded(self) -> bool:
        return not self.failed

    def get(self, filename: str) -> Optional[FileOutcome]:
        for outcome in self.outcomes:
            if outcome.filename == filename:
                return outcome
        return None
