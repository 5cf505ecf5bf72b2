"""S3FileSystem — a filesystem bound to one storage authority."""

from __future__ import annotations

import logging
import shutil
import threading
from enum import Enum
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from .directories import DirectoryEmulator, listing_prefix
from .exceptions import (
    ClosedFileSystemError,
    DirectoryNotEmptyError,
    InvalidPathError,
    IsADirectoryPathError,
    PathExistsError,
    PathNotFoundError,
)
from .path import SCHEME, SEPARATOR, Authority, S3Path, parse_uri_path, split_segments
from .streams import StreamAccessor
from .types import FileInfo

if TYPE_CHECKING:
    import io

    from .directories import DirectoryStream, EntryFilter
    from .protocol import ObjectStoreClient
    from .registry import FileSystemRegistry
    from .streams import ObjectWriter

logger = logging.getLogger(__name__)


class FileSystemState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class S3FileSystem:
    """Hierarchical view of an object store reached through one client.

    The filesystem owns its client exclusively. ``close()`` releases the
    client and drops the registry entry; paths issued before the close
    stay usable as values, but every operation that needs the store raises
    ``ClosedFileSystemError``.

    Usage::

        registry = FileSystemRegistry()
        with registry.create("s3://minio.local:9000/", {"access-key": ..., "secret-key": ...}) as fs:
            path = fs.get_path("/bucket/reports/2024.csv")
            with fs.open_read(path) as f:
                data = f.read()
    """

    def __init__(
        self,
        authority: Authority,
        client: ObjectStoreClient,
        *,
        registry: FileSystemRegistry | None = None,
        page_size: int | None = None,
    ) -> None:
        self._authority = authority
        self._client = client
        self._registry = registry
        self._state = FileSystemState.OPEN
        self._state_lock = threading.Lock()
        self._directories = DirectoryEmulator(
            client, check_open=self._ensure_open, page_size=page_size
        )
        self._streams = StreamAccessor(client)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def authority(self) -> Authority:
        return self._authority

    @property
    def closed(self) -> bool:
        return self._state is FileSystemState.CLOSED

    @property
    def client(self) -> ObjectStoreClient:
        self._ensure_open()
        return self._client

    def _ensure_open(self) -> None:
        if self._state is FileSystemState.CLOSED:
            raise ClosedFileSystemError(f"Filesystem {self._authority} is closed")

    def close(self) -> None:
        """Unregister, then close the client. Closing twice is a no-op."""
        with self._state_lock:
            if self._state is FileSystemState.CLOSED:
                return
            self._state = FileSystemState.CLOSED

        # Free the authority before the client close, which may block
        if self._registry is not None:
            self._registry.unregister(self)
        try:
            self._client.close()
        except Exception:
            logger.warning("Client close failed for %s", self._authority, exc_info=True)
        logger.info("Closed filesystem %s", self._authority)

    def __enter__(self) -> S3FileSystem:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"S3FileSystem({str(self._authority)!r}, state={self._state.value})"

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def root(self) -> S3Path:
        return S3Path(self, ())

    def get_path(self, first: str, *more: str) -> S3Path:
        """Resolve a URI or a slash-delimited path to an ``S3Path`` of this filesystem.

        ``s3://endpoint/bucket/key`` must name this filesystem's endpoint
        (host-less ``s3:///bucket/key`` is accepted everywhere) and a
        non-empty bucket. Plain strings are joined with ``/``; a leading
        ``/`` makes the result absolute and must be followed by a bucket,
        like a URI path. Use :attr:`root` for the store root.
        """
        self._ensure_open()

        if "://" in first:
            if more:
                raise InvalidPathError("A URI cannot be combined with further segments")
            return self._path_from_uri(first)

        text = SEPARATOR.join((first, *more))
        if text.startswith(SEPARATOR):
            return S3Path(self, parse_uri_path(text, decode=False))
        segments = split_segments(text)
        if not segments:
            raise InvalidPathError(f"Empty path: {text!r}")
        return S3Path(self, segments, absolute=False)

    def _path_from_uri(self, uri: str) -> S3Path:
        parts = urlsplit(uri)
        if parts.scheme != SCHEME:
            raise InvalidPathError(f"URI scheme must be '{SCHEME}': {uri}")
        if "?" in uri or "#" in uri:
            raise InvalidPathError(f"URI must not carry a query or fragment: {uri}")
        if parts.netloc and Authority(parts.netloc) != self._authority:
            raise InvalidPathError(
                f"URI {uri} does not belong to filesystem {self._authority}"
            )
        return S3Path(self, parse_uri_path(parts.path))

    def _resolve(self, path: S3Path, *, allow_bucket: bool = True) -> tuple[str, str]:
        """Check ownership and shape of *path*; return ``(bucket, key)``."""
        if path.filesystem is not self:
            raise InvalidPathError(f"{path!r} was not issued by {self!r}")
        self._ensure_open()
        if not path.is_absolute:
            raise InvalidPathError(f"Path must be absolute: {path}")
        bucket = path.bucket
        if bucket is None:
            raise InvalidPathError("The store root does not select a bucket")
        if not allow_bucket and not path.key:
            raise InvalidPathError(f"Path names a bucket, not an object: {path}")
        return bucket, path.key

    # ------------------------------------------------------------------
    # Directories
    # ------------------------------------------------------------------

    def list_dir(
        self,
        path: S3Path,
        entry_filter: EntryFilter | None = None,
    ) -> DirectoryStream:
        """List the immediate children of a bucket or key prefix.

        A prefix with no keys lists as empty, whether or not it "exists".
        """
        self._resolve(path)
        logger.debug("Listing %s", path)
        return self._directories.list(path, entry_filter)

    def is_dir(self, path: S3Path) -> bool:
        bucket, key = self._resolve(path)
        return self._streams.is_directory(bucket, key)

    def exists(self, path: S3Path) -> bool:
        bucket, key = self._resolve(path)
        if not key:
            return True
        if self._client.head_object(bucket, key) is not None:
            return True
        return self._streams.is_directory(bucket, key)

    def stat(self, path: S3Path) -> FileInfo:
        bucket, key = self._resolve(path)
        if self._streams.is_directory(bucket, key):
            return FileInfo(path=str(path), name=path.name, is_directory=True)
        info = self._client.head_object(bucket, key)
        if info is None:
            raise PathNotFoundError(f"No such file or directory: {path}")
        return FileInfo(
            path=str(path),
            name=path.name,
            is_directory=False,
            size=info.size,
            last_modified=info.last_modified,
        )

    def mkdir(self, path: S3Path) -> None:
        """Create an empty directory by storing a zero-length ``key/`` marker."""
        bucket, key = self._resolve(path, allow_bucket=False)
        if self._client.head_object(bucket, key) is not None:
            raise PathExistsError(f"A file already exists at {path}")
        self._client.put_object(bucket, listing_prefix(key), b"")
        logger.debug("Created directory marker for %s", path)

    def delete(self, path: S3Path) -> None:
        """Delete a file, or an empty directory's marker."""
        bucket, key = self._resolve(path, allow_bucket=False)
        if self._client.head_object(bucket, key) is not None:
            self._client.delete_object(bucket, key)
            return

        marker = listing_prefix(key)
        page = self._client.list_objects(bucket, marker, SEPARATOR, max_keys=2)
        children = [k for k in page.keys if k != marker] + page.common_prefixes
        if children:
            raise DirectoryNotEmptyError(f"Directory not empty: {path}")
        if marker not in page.keys:
            raise PathNotFoundError(f"No such file or directory: {path}")
        self._client.delete_object(bucket, marker)

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    def open_read(self, path: S3Path) -> io.BufferedReader:
        """Open a byte stream on an object. Close it to release the transfer."""
        bucket, key = self._resolve(path, allow_bucket=False)
        return self._streams.open_read(bucket, key)

    def open_write(self, path: S3Path) -> ObjectWriter:
        """Open a buffered writer; the object is uploaded when it is closed."""
        bucket, key = self._resolve(path, allow_bucket=False)
        return self._streams.open_write(bucket, key)

    def read_bytes(self, path: S3Path) -> bytes:
        with self.open_read(path) as f:
            return f.read()

    def write_bytes(self, path: S3Path, data: bytes) -> None:
        with self.open_write(path) as f:
            f.write(data)

    def copy(self, src: S3Path, dest: S3Path) -> None:
        """Copy a file object. Directories are not copied."""
        if self.is_dir(src):
            raise IsADirectoryPathError(f"Is a directory: {src}")
        with self.open_read(src) as reader, self.open_write(dest) as writer:
            shutil.copyfileobj(reader, writer)
