"""Stream helpers for the object read and write paths."""

from __future__ import annotations

import hashlib
import io
from typing import BinaryIO


class DigestReader:
    """Read-through wrapper that feeds a SHA-256 digest and caps the length.

    Bytes are hashed once, in stream order, up to a high-water mark. When the
    consumer seeks back and reads again (botocore does so to compute request
    checksums) the repeated bytes do not affect the digest.
    """

    def __init__(self, stream: BinaryIO, limit: int = -1) -> None:
        self._stream = stream
        self._limit = limit
        self._hash = hashlib.sha256()
        self._start = stream.tell() if self._can_seek(stream) else 0
        self._pos = 0
        self._hashed = 0

    @staticmethod
    def _can_seek(stream: BinaryIO) -> bool:
        seekable = getattr(stream, "seekable", None)
        return bool(seekable and seekable())

    @property
    def bytes_read(self) -> int:
        return self._hashed

    def hexdigest(self) -> str:
        return self._hash.hexdigest()

    def digest(self) -> bytes:
        return self._hash.digest()

    def read(self, size: int | None = -1) -> bytes:
        if size is None:
            size = -1
        if self._limit >= 0:
            remaining = self._limit - self._pos
            if remaining <= 0:
                return b""
            size = remaining if size < 0 else min(size, remaining)
        chunk = self._stream.read(size)
        if not chunk:
            return b""
        end = self._pos + len(chunk)
        if end > self._hashed:
            self._hash.update(chunk[max(self._hashed - self._pos, 0):])
            self._hashed = end
        self._pos = end
        return chunk

    def seekable(self) -> bool:
        return self._can_seek(self._stream)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self._pos + offset
        elif whence == io.SEEK_END and self._limit >= 0:
            target = self._limit + offset
        else:
            raise io.UnsupportedOperation("seek from end requires a known length")
        if target < 0:
            raise ValueError(f"negative seek position {target}")
        self._stream.seek(self._start + target)
        self._pos = target
        return target

    def tell(self) -> int:
        return self._pos


def copy_exactly(src: BinaryIO, sink: BinaryIO, length: int, chunk_size: int) -> int:
    """Copy up to ``length`` bytes from ``src`` to ``sink``.

    Returns the number of bytes copied, which is less than ``length`` only
    when ``src`` ran out first.
    """
    copied = 0
    while copied < length:
        chunk = src.read(min(chunk_size, length - copied))
        if not chunk:
            break
        sink.write(chunk)
        copied += len(chunk)
    return copied
