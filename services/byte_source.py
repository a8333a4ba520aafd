"""
Byte sources: finite, randomly addressable inputs for the digest engine.
"""
import logging
import os
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

from services.hashing_errors import ReadError

logger = logging.getLogger(__name__)


class ByteSource(ABC):
    """
    Abstract base class for inputs the digest engine can slice by offset and length.

    Methods:
        size(): Total number of bytes in the source.
        read_range(offset, length): Return exactly ``length`` bytes starting at ``offset``.
        name: Human-readable name used in results and log lines.
    """

    name: str = "<bytes>"

    @abstractmethod
    def size(self) -> int:
        """Total number of bytes in the source."""
        pass

    @abstractmethod
    def read_range(self, offset: int, length: int) -> bytes:
        """Read ``length`` bytes at ``offset``. Raises ReadError on failure."""
        pass

    def _check_range(self, offset: int, length: int) -> None:
        total = self.size()
        if offset < 0 or length < 0 or offset + length > total:
            raise ReadError(
                f"Range [{offset}, {offset + length}) is outside {self.name} of {total} bytes",
                offset=offset,
            )


class MemoryByteSource(ByteSource):
    """Byte source over an in-memory buffer. The buffer is copied so callers cannot mutate it."""

    def __init__(self, data: bytes, name: str = "<bytes>"):
        self._data = bytes(data)
        self.name = name

    @classmethod
    def from_text(cls, text: str, encoding: str = "utf-8", name: str = "text") -> "MemoryByteSource":
        return cls(text.encode(encoding), name=name)

    def size(self) -> int:
        return len(self._data)

    def read_range(self, offset: int, length: int) -> bytes:
        self._check_range(offset, length)
        return self._data[offset:offset + length]


class FileByteSource(ByteSource):
    """
    Read-only byte source backed by a file on disk.

    The size is captured when the source is created. Each source owns its own
    file handle, so several sources over the same path never share a seek position.
    """

    def __init__(self, path: str):
        self.path = str(path)
        self.name = os.path.basename(self.path) or self.path
        self._handle: Optional[BinaryIO] = None
        try:
            self._size = os.path.getsize(self.path)
        except OSError as e:
            raise ReadError(f"Cannot stat {self.path}: {e}") from e

    def size(self) -> int:
        return self._size

    def open(self) -> "FileByteSource":
        if self._handle is None:
            try:
                self._handle = open(self.path, "rb")
            except OSError as e:
                raise ReadError(f"Cannot open {self.path}: {e}") from e
            logger.debug(f"Opened {self.path} ({self._size} bytes)")
        return self

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> "FileByteSource":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def read_range(self, offset: int, length: int) -> bytes:
        self._check_range(offset, length)
        self.open()
        try:
            self._handle.seek(offset)
            data = self._handle.read(length)
        except OSError as e:
            raise ReadError(f"Failed reading {self.path} at offset {offset}: {e}", offset=offset) from e
        if len(data) != length:
            raise ReadError(
                f"Short read from {self.path} at offset {offset}: got {len(data)} of {length} bytes",
                offset=offset,
            )
        return data
