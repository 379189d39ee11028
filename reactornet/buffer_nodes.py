"""Pieces of outgoing data queued on a connection: memory, file and stream sources."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Callable

MAX_SEND_FILE_BUFFER_SIZE = 16 * 1024

StreamCallback = Callable[[int], bytes]


class BufferNode(ABC):
    """A source of bytes waiting to be written to a socket."""

    def __init__(self) -> None:
        self._done = False

    @abstractmethod
    def get_data(self) -> bytes:
        """Return the bytes that are ready to send, possibly empty."""

    @abstractmethod
    def retrieve(self, length: int) -> None:
        """Drop the first ``length`` bytes, which have been sent."""

    @abstractmethod
    def remaining_bytes(self) -> int:
        """Return how many bytes are still to be sent."""

    def append(self, data: bytes) -> None:
        raise TypeError(f"{type(self).__name__} does not accept appended data")

    def available(self) -> bool:
        return not self._done

    def is_file(self) -> bool:
        return False

    def is_stream(self) -> bool:
        return False

    def is_async(self) -> bool:
        return False

    def done(self) -> None:
        """Mark the node as finished; nothing more is sent from it."""
        self._done = True

    def close(self) -> None:
        """Release any resource the node holds."""

    def __enter__(self) -> BufferNode:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class MemBufferNode(BufferNode):
    """Bytes held in memory."""

    def __init__(self) -> None:
        super().__init__()
        self._buffer = bytearray()

    def get_data(self) -> bytes:
        return bytes(self._buffer)

    def retrieve(self, length: int) -> None:
        del self._buffer[:length]

    def remaining_bytes(self) -> int:
        return 0 if self._done else len(self._buffer)

    def append(self, data: bytes) -> None:
        self._buffer += data


class FileBufferNode(BufferNode):
    """A range of a file, read in chunks of at most 16 KiB."""

    def __init__(self, file_name: str | os.PathLike, offset: int = 0, length: int = 0) -> None:
        super().__init__()
        self._fd = -1
        self._buffer = bytearray()
        if offset < 0:
            raise ValueError("offset must be greater than or equal to 0")
        fd = os.open(file_name, os.O_RDONLY | getattr(os, "O_BINARY", 0))
        try:
            size = os.fstat(fd).st_size
            if length == 0:
                if offset >= size:
                    raise ValueError(
                        f"The file size is {size} bytes, but the offset is {offset} "
                        f"bytes and the length is {length} bytes"
                    )
                to_send = size - offset
            else:
                if length > size - offset:
                    raise ValueError(
                        f"The file size is {size} bytes, but the offset is {offset} "
                        f"bytes and the length is {length} bytes"
                    )
                to_send = length
            os.lseek(fd, offset, os.SEEK_SET)
        except BaseException:
            os.close(fd)
            raise
        self._fd = fd
        self._bytes_to_send = to_send

    def is_file(self) -> bool:
        return True

    def fileno(self) -> int:
        return self._fd

    def get_data(self) -> bytes:
        if not self._buffer and self._bytes_to_send > 0 and self._fd >= 0:
            chunk = os.read(self._fd, min(MAX_SEND_FILE_BUFFER_SIZE, self._bytes_to_send))
            self._buffer += chunk
        return bytes(self._buffer)

    def retrieve(self, length: int) -> None:
        del self._buffer[:length]
        self._bytes_to_send = max(self._bytes_to_send - length, 0)

    def remaining_bytes(self) -> int:
        return 0 if self._done else self._bytes_to_send

    def available(self) -> bool:
        return self._fd >= 0

    def close(self) -> None:
        if self._fd >= 0:
            os.close(self._fd)
            self._fd = -1


class StreamBufferNode(BufferNode):
    """Bytes pulled from a callback until it returns nothing.

    The callback receives the largest number of bytes wanted and returns
    a bytes object; an empty result ends the stream. On close it is
    called once more with 0 so that it can clean up.
    """

    def __init__(self, callback: StreamCallback) -> None:
        super().__init__()
        self._callback: StreamCallback | None = callback
        self._buffer = bytearray()
        self._written = 0

    def is_stream(self) -> bool:
        return True

    def get_data(self) -> bytes:
        if not self._buffer and not self._done and self._callback is not None:
            chunk = self._callback(MAX_SEND_FILE_BUFFER_SIZE)
            if chunk:
                self._buffer += chunk
            else:
                self._done = True
        return bytes(self._buffer)

    def retrieve(self, length: int) -> None:
        sent = min(length, len(self._buffer))
        del self._buffer[:length]
        self._written += sent

    def remaining_bytes(self) -> int:
        return 0 if self._done else 1

    @property
    def bytes_written(self) -> int:
        return self._written

    def close(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback(0)


class AsyncStreamBufferNode(BufferNode):
    """Bytes appended from elsewhere until the producer marks it done."""

    def __init__(self) -> None:
        super().__init__()
        self._buffer = bytearray()

    def is_async(self) -> bool:
        return True

    def is_stream(self) -> bool:
        return True

    def get_data(self) -> bytes:
        return bytes(self._buffer)

    def retrieve(self, length: int) -> None:
        del self._buffer[:length]

    def remaining_bytes(self) -> int:
        return len(self._buffer)

    def append(self, data: bytes) -> None:
        self._buffer += data


def new_mem_buffer_node() -> MemBufferNode:
    return MemBufferNode()


def new_file_buffer_node(file_name: str | os.PathLike, offset: int = 0, length: int = 0) -> FileBufferNode:
    return FileBufferNode(file_name, offset, length)


def new_stream_buffer_node(callback: StreamCallback) -> StreamBufferNode:
    return StreamBufferNode(callback)


def new_async_stream_buffer_node() -> AsyncStreamBufferNode:
    return AsyncStreamBufferNode()