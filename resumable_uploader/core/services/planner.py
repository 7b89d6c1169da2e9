"""
Chunk planning.

Splits the not-yet-uploaded tail of a file into contiguous byte ranges of a
fixed maximum size.
"""

from typing import Iterator

from ..domain.files import ChunkRange

DEFAULT_CHUNK_SIZE = 512 * 1024


class ChunkPlan:
    """
    Lazy, restartable sequence of chunk ranges.

    The plan holds only its inputs; every iteration recomputes the ranges,
    so iterating twice yields the same ranges.
    """

    def __init__(self, total_size: int, resume_offset: int, chunk_size: int) -> None:
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        if total_size < 0:
            raise ValueError(f"Total size must be non-negative, got {total_size}")
        if resume_offset < 0:
            raise ValueError(f"Resume offset must be non-negative, got {resume_offset}")

        self.total_size = total_size
        self.resume_offset = resume_offset
        self.chunk_size = chunk_size

    def __iter__(self) -> Iterator[ChunkRange]:
        start = self.resume_offset
        while start < self.total_size:
            end = min(start + self.chunk_size, self.total_size)
            yield ChunkRange(start, end)
            start = end

    def __len__(self) -> int:
        remaining = self.total_size - self.resume_offset
        if remaining <= 0:
            return 0
        return -(-remaining // self.chunk_size)

    def __repr__(self) -> str:
        return (f"ChunkPlan(total_size={self.total_size}, "
                f"resume_offset={self.resume_offset}, chunk_size={self.chunk_size})")


def plan_chunks(total_size: int, resume_offset: int, chunk_size: int = DEFAULT_CHUNK_SIZE) -> ChunkPlan:
    """
    Plan the chunks still to be sent for a file.

    Args:
        total_size: File size in bytes
        resume_offset: Bytes already held by the server
        chunk_size: Maximum chunk length in bytes

    Returns:
        Plan covering ``[resume_offset, total_size)``; empty when the
        offset is at or past the end of the file.
    """
    return ChunkPlan(total_size, resume_offset, chunk_size)
