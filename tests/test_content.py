"""
Content source tests
"""

import io

import pytest

from onedrive_client.content import BytesContent, ContentSource, StreamContent, as_content_source
from onedrive_client.exceptions import InvalidConfiguration


class NonSeekableStream(io.RawIOBase):
    """A readable stream that cannot seek, like a pipe"""

    def __init__(self, data):
        self._buffer = io.BytesIO(data)

    def readable(self):
        return True

    def seekable(self):
        return False

    def readinto(self, b):
        data = self._buffer.read(len(b))
        b[:len(data)] = data
        return len(data)


class TestAsContentSource:

    def test_string_is_encoded_as_utf8(self):
        source = as_content_source('héllo')

        assert source.size == 6
        assert source.read_range(0, 6) == 'héllo'.encode('utf-8')

    @pytest.mark.parametrize('data', [b'Test content', bytearray(b'Test content'), memoryview(b'Test content')])
    def test_binary_types(self, data):
        source = as_content_source(data)

        assert isinstance(source, BytesContent)
        assert source.size == 12
        assert source.read_range(5, 7) == b'content'

    def test_seekable_stream(self):
        stream = io.BytesIO(b'0123456789')
        stream.seek(4)

        source = as_content_source(stream)

        assert isinstance(source, StreamContent)
        assert source.size == 10
        # Offsets are absolute, whatever the stream position
        assert source.read_range(0, 3) == b'012'
        assert source.read_range(8, 5) == b'89'

    def test_non_seekable_stream_is_buffered(self):
        source = as_content_source(NonSeekableStream(b'abcdef'))

        assert isinstance(source, BytesContent)
        assert source.size == 6
        assert source.read_range(2, 2) == b'cd'

    def test_existing_source_is_returned_unchanged(self):
        source = BytesContent(b'abc')

        assert as_content_source(source) is source

    def test_custom_source(self):
        class Zeros:
            size = 4

            def read_range(self, offset, length):
                return b'\0' * length

        zeros = Zeros()

        assert isinstance(zeros, ContentSource)
        assert as_content_source(zeros) is zeros

    def test_text_stream_is_rejected(self):
        with pytest.raises(InvalidConfiguration):
            as_content_source(io.StringIO('text'))

    @pytest.mark.parametrize('content', [None, 42, ['a', 'b']])
    def test_unsupported_types(self, content):
        with pytest.raises(InvalidConfiguration):
            as_content_source(content)


class TestStreamContent:

    def test_short_read_raises(self):
        stream = io.BytesIO(b'0123456789')
        source = StreamContent(stream)
        # Truncate behind the source's back
        stream.truncate(5)

        with pytest.raises(IOError):
            source.read_range(0, 10)

    def test_requires_seekable_stream(self):
        with pytest.raises(InvalidConfiguration):
            StreamContent(NonSeekableStream(b'abc'))
