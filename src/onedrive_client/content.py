# -*- coding: utf-8 -*-
"""
Content sources for uploads.

An upload reads its bytes through a ContentSource: anything that knows its
total size and can return the bytes of a given range. Raw bytes, text and
binary streams are normalized by as_content_source().
"""

import io
import os
from typing import Protocol, runtime_checkable

from .exceptions import InvalidConfiguration


@runtime_checkable
class ContentSource(Protocol):
    """Addressable, sized view over the bytes to upload"""

    @property
    def size(self) -> int:
        ...

    def read_range(self, offset: int, length: int) -> bytes:
        ...


class BytesContent:
    """In-memory content"""

    def __init__(self, data):
        self._data = bytes(data)

    @property
    def size(self):
        return len(self._data)

    def read_range(self, offset, length):
        return self._data[offset:offset + length]


class StreamContent:
    """
    Content backed by a seekable binary stream (open file, BytesIO, ...).

    The stream's current position is ignored: ranges are absolute offsets
    from the start of the stream, and every read seeks first.
    """

    def __init__(self, stream):
        if not stream.seekable():
            raise InvalidConfiguration("StreamContent requires a seekable stream")
        self._stream = stream
        self._size = stream.seek(0, os.SEEK_END)

    @property
    def size(self):
        return self._size

    def read_range(self, offset, length):
        self._stream.seek(offset)
        data = self._stream.read(length)
        if len(data) != min(length, max(self._size - offset, 0)):
            raise IOError(f"Short read at offset {offset}: expected {length} bytes, got {len(data)}")
        return data


def as_content_source(content):
    """
    Normalize upload content into a ContentSource.

    Args:
        content: bytes, bytearray, memoryview, str (encoded as UTF-8),
            a readable binary stream, or an existing ContentSource

    Returns:
        ContentSource: A sized, addressable view over the content

    Raises:
        InvalidConfiguration: If the content type is not supported
    """
    if isinstance(content, (BytesContent, StreamContent)):
        return content
    if not hasattr(content, 'read') and isinstance(content, ContentSource):
        return content
    if isinstance(content, str):
        return BytesContent(content.encode('utf-8'))
    if isinstance(content, (bytes, bytearray, memoryview)):
        return BytesContent(content)
    if isinstance(content, io.TextIOBase):
        raise InvalidConfiguration("Text streams are not supported; open the file in binary mode")
    if hasattr(content, 'read'):
        seekable = getattr(content, 'seekable', None)
        if seekable is not None and seekable():
            return StreamContent(content)
        # Buffer non-seekable streams (pipes, sockets) once
        return BytesContent(content.read())
    raise InvalidConfiguration(f"Unsupported content type: {type(content).__name__}")
