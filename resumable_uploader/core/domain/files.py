"""
File and byte-range value objects.

A FileHandle identifies a local file by path and by the logical name the
server uses as its resume key. ChunkRange is one half-open byte range of
that file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import aiofiles


@dataclass(frozen=True)
class ChunkRange:
    """Half-open byte range ``[start, end)`` of a file."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Chunk start must be non-negative, got {self.start}")
        if self.end <= self.start:
            raise ValueError(
                f"Chunk end must be greater than start, got [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        """Number of bytes covered by the range."""
        return self.end - self.start

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"


@dataclass(frozen=True)
class FileHandle:
    """
    Reference to a local file taking part in an upload.

    The handle is immutable: ``size`` is captured once when the handle is
    built and is treated as authoritative for the whole upload.
    """

    path: Path
    """Local filesystem path."""

    name: str
    """Logical file identity; keys the server-side resume state."""

    size: int
    """File size in bytes."""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("File name cannot be empty")
        if self.size < 0:
            raise ValueError(f"File size must be non-negative, got {self.size}")

    @classmethod
    def from_path(cls, path: Union[str, os.PathLike], name: Optional[str] = None) -> 'FileHandle':
        """
        Build a handle for an existing regular file.

        Args:
            path: Path of the local file
            name: Server-side name (defaults to the file's basename)

        Raises:
            FileNotFoundError: If the path does not exist or is not a file
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"No such file: {file_path}")

        return cls(
            path=file_path,
            name=name or file_path.name,
            size=file_path.stat().st_size,
        )

    async def read_range(self, chunk: ChunkRange) -> bytes:
        """Read the bytes covered by ``chunk``."""
        if chunk.end > self.size:
            raise ValueError(
                f"Chunk {chunk} lies beyond the end of {self.name} ({self.size} bytes)")

        async with aiofiles.open(self.path, 'rb') as f:
            await f.seek(chunk.start)
            data = await f.read(chunk.length)

        if len(data) != chunk.length:
            raise IOError(
                f"Short read from {self.path}: expected {chunk.length} bytes, got {len(data)}")
        return data
