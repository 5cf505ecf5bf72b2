"""InMemoryObjectStoreClient — dict-backed store with S3 listing semantics."""

from __future__ import annotations

import io
import logging
import threading
from datetime import UTC, datetime
from hashlib import md5

from bucketfs.exceptions import PathNotFoundError
from bucketfs.types import ListPage, ObjectInfo

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


class InMemoryObjectStoreClient:
    """Object store held in process memory.

    Implements the ``ObjectStoreClient`` protocol with the listing behaviour
    of S3: keys come back in lexical order, a delimiter rolls deeper keys up
    into common prefixes, and results are paginated with an opaque
    continuation token.

    Thread-safe via :class:`threading.Lock`.

    Usage::

        client = InMemoryObjectStoreClient(page_size=2)
        client.put_object("bucket", "dir/file.txt", b"hello")
        page = client.list_objects("bucket", "", "/")
    """

    def __init__(self, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.page_size = page_size
        self.closed = False
        self._lock = threading.Lock()
        # bucket → key → (content, last_modified)
        self._buckets: dict[str, dict[str, tuple[bytes, datetime]]] = {}

    # ------------------------------------------------------------------
    # Buckets
    # ------------------------------------------------------------------

    def create_bucket(self, bucket: str) -> None:
        with self._lock:
            self._buckets.setdefault(bucket, {})

    def list_buckets(self) -> list[str]:
        with self._lock:
            return sorted(self._buckets)

    # ------------------------------------------------------------------
    # ObjectStoreClient protocol
    # ------------------------------------------------------------------

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: str | None = None,
        continuation_token: str | None = None,
        max_keys: int | None = None,
    ) -> ListPage:
        """Return one page of keys and common prefixes after *continuation_token*."""
        limit = max_keys or self.page_size
        with self._lock:
            keys = sorted(k for k in self._buckets.get(bucket, {}) if k.startswith(prefix))

        # Merged, ordered stream of (entry, is_prefix) as S3 reports it
        entries: list[tuple[str, bool]] = []
        for key in keys:
            rest = key[len(prefix) :]
            if delimiter and delimiter in rest:
                rolled = prefix + rest[: rest.index(delimiter) + len(delimiter)]
                if not entries or entries[-1][0] != rolled:
                    entries.append((rolled, True))
            else:
                entries.append((key, False))

        if continuation_token is not None:
            entries = [e for e in entries if e[0] > continuation_token]

        page = entries[:limit]
        next_token = page[-1][0] if len(entries) > limit else None
        logger.debug(
            "list_objects %s prefix=%r returned %d entries (more=%s)",
            bucket,
            prefix,
            len(page),
            next_token is not None,
        )
        return ListPage(
            keys=[e for e, is_prefix in page if not is_prefix],
            common_prefixes=[e for e, is_prefix in page if is_prefix],
            next_token=next_token,
        )

    def get_object(self, bucket: str, key: str) -> io.BytesIO:
        with self._lock:
            stored = self._buckets.get(bucket, {}).get(key)
        if stored is None:
            raise PathNotFoundError(f"No such object: {bucket}/{key}")
        return io.BytesIO(stored[0])

    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        with self._lock:
            self._buckets.setdefault(bucket, {})[key] = (bytes(data), datetime.now(UTC))

    def head_object(self, bucket: str, key: str) -> ObjectInfo | None:
        with self._lock:
            stored = self._buckets.get(bucket, {}).get(key)
        if stored is None:
            return None
        content, last_modified = stored
        return ObjectInfo(
            key=key,
            size=len(content),
            last_modified=last_modified,
            etag=md5(content, usedforsecurity=False).hexdigest(),
        )

    def delete_object(self, bucket: str, key: str) -> None:
        # Deleting a missing key is not an error in S3.
        with self._lock:
            self._buckets.get(bucket, {}).pop(key, None)

    def close(self) -> None:
        self.closed = True
