"""StreamAccessor — read and write streams over object content."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

from .directories import listing_prefix
from .exceptions import IsADirectoryPathError
from .path import SEPARATOR

if TYPE_CHECKING:
    from collections.abc import Buffer
    from typing import BinaryIO

    from .protocol import ObjectStoreClient

logger = logging.getLogger(__name__)


# =============================================================================
# Read side
# =============================================================================


class ObjectReader(io.RawIOBase):
    """Raw read stream over a client body.

    The body is released on ``close()``, which ``io`` also calls when the
    reader is used as a context manager or garbage collected.
    """

    def __init__(self, body: BinaryIO, name: str) -> None:
        super().__init__()
        self._body = body
        self.name = name

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Buffer) -> int:
        view = memoryview(buffer).cast("B")
        data = self._body.read(len(view))
        n = len(data)
        view[:n] = data
        return n

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._body.close()
            logger.debug("Released read stream for %s", self.name)
        finally:
            super().close()


# =============================================================================
# Write side
# =============================================================================


class ObjectWriter:
    """Buffered write stream that uploads its whole content on ``close()``.

    Nothing reaches the store before ``close()``; ``close()`` issues exactly
    one ``put_object``. ``abort()`` (or leaving a ``with`` block through an
    exception) discards the buffer. A writer that is never closed uploads
    nothing, even when garbage collected.
    """

    def __init__(self, client: ObjectStoreClient, bucket: str, key: str) -> None:
        self._client = client
        self._bucket = bucket
        self._key = key
        self._buffer = io.BytesIO()
        self._closed = False

    @property
    def name(self) -> str:
        return f"{self._bucket}{SEPARATOR}{self._key}"

    @property
    def closed(self) -> bool:
        return self._closed

    def writable(self) -> bool:
        return True

    def write(self, data: Buffer) -> int:
        if self._closed:
            raise ValueError("I/O operation on closed file.")
        return self._buffer.write(data)

    def writelines(self, lines: list[Buffer]) -> None:
        for line in lines:
            self.write(line)

    def tell(self) -> int:
        return self._buffer.tell()

    def flush(self) -> None:
        # Content only becomes visible on close.
        if self._closed:
            raise ValueError("I/O operation on closed file.")

    def close(self) -> None:
        """Upload the buffered content. Idempotent."""
        if self._closed:
            return
        data = self._buffer.getvalue()
        self._client.put_object(self._bucket, self._key, data)
        self._closed = True
        self._buffer.close()
        logger.debug("Uploaded %d bytes to %s", len(data), self.name)

    def abort(self) -> None:
        """Discard the buffered content without uploading."""
        if self._closed:
            return
        self._closed = True
        self._buffer.close()
        logger.debug("Discarded write stream for %s", self.name)

    def __enter__(self) -> ObjectWriter:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type is not None:
            self.abort()
        else:
            self.close()


# =============================================================================
# StreamAccessor
# =============================================================================


class StreamAccessor:
    """Opens streams on objects, refusing pseudo-directories."""

    def __init__(self, client: ObjectStoreClient) -> None:
        self._client = client

    def is_directory(self, bucket: str, key: str) -> bool:
        """True for a bucket, or when any key lives under ``key/``.

        A zero-length ``key/`` marker counts: it is how empty directories
        are stored.
        """
        if not key:
            return True
        page = self._client.list_objects(bucket, listing_prefix(key), SEPARATOR, max_keys=1)
        return bool(page.keys or page.common_prefixes)

    def open_read(self, bucket: str, key: str) -> io.BufferedReader:
        if self.is_directory(bucket, key):
            raise IsADirectoryPathError(f"Is a directory: {bucket}/{key}")
        body = self._client.get_object(bucket, key)
        return io.BufferedReader(ObjectReader(body, f"{bucket}{SEPARATOR}{key}"))

    def open_write(self, bucket: str, key: str) -> ObjectWriter:
        if self.is_directory(bucket, key):
            raise IsADirectoryPathError(f"Is a directory: {bucket}/{key}")
        return ObjectWriter(self._client, bucket, key)
