"""Robust I/O helpers: buffered reads and complete writes over streams and sockets."""

from __future__ import annotations

import socket
from typing import Any, Callable

RIO_BUFSIZE = 8192
MAXLINE = 8192
MAXBUF = 8192


def _raw_reader(stream: Any) -> Callable[[int], bytes]:
    """Return a callable that performs one short read on *stream*."""
    if isinstance(stream, socket.socket) or hasattr(stream, "recv"):
        return stream.recv
    if hasattr(stream, "read1"):
        return stream.read1
    return stream.read


def read_exact(stream: Any, n: int) -> bytes:
    """Read up to *n* bytes without an intermediate buffer, stopping early only at EOF."""
    read = _raw_reader(stream)
    chunks: list[bytes] = []
    remaining = n
    while remaining > 0:
        chunk = read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def write_all(stream: Any, data: bytes) -> int:
    """Write every byte of *data* to *stream* and return the number written."""
    if hasattr(stream, "sendall"):
        stream.sendall(data)
        return len(data)
    view = memoryview(data)
    while view:
        written = stream.write(view)
        if not written:
            raise OSError("write made no progress")
        view = view[written:]
    if hasattr(stream, "flush"):
        stream.flush()
    return len(data)


class RobustReader:
    """Buffered reader over a socket or binary stream."""

    def __init__(self, stream: Any, bufsize: int = RIO_BUFSIZE) -> None:
        if bufsize <= 0:
            raise ValueError("bufsize must be positive")
        self.stream = stream
        self.bufsize = bufsize
        self._raw_read = _raw_reader(stream)
        self._buf = b""
        self._pos = 0

    @property
    def buffered(self) -> int:
        """Number of unread bytes held in the internal buffer."""
        return len(self._buf) - self._pos

    def read(self, n: int) -> bytes:
        """Return up to *n* bytes, refilling the buffer once if it is empty.

        Returns ``b""`` at end of stream.
        """
        if n <= 0:
            return b""
        if self.buffered == 0:
            self._buf = self._raw_read(self.bufsize)
            self._pos = 0
            if not self._buf:
                return b""
        end = min(self._pos + n, len(self._buf))
        chunk = self._buf[self._pos:end]
        self._pos = end
        return chunk

    def readn(self, n: int) -> bytes:
        """Read *n* bytes through the buffer, returning fewer only at EOF."""
        chunks: list[bytes] = []
        remaining = n
        while remaining > 0:
            chunk = self.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def readline(self, maxlen: int = MAXLINE) -> bytes:
        """Read a line of at most ``maxlen - 1`` bytes, keeping the trailing newline.

        Returns ``b""`` at end of stream when nothing was read.
        """
        line = bytearray()
        while len(line) < maxlen - 1:
            if self.buffered == 0 and not self.read(0) and not self._fill():
                break
            limit = min(len(self._buf), self._pos + (maxlen - 1 - len(line)))
            newline = self._buf.find(b"\n", self._pos, limit)
            end = limit if newline < 0 else newline + 1
            line += self._buf[self._pos:end]
            self._pos = end
            if newline >= 0:
                break
        return bytes(line)

    def _fill(self) -> bool:
        self._buf = self._raw_read(self.bufsize)
        self._pos = 0
        return bool(self._buf)