"""ObjectStoreClient protocol — the network boundary of bucketfs.

Implementations perform the actual I/O against a store. Retries, timeouts
and transport errors are their concern; bucketfs propagates whatever they
raise unchanged, except that a missing object must surface as
``PathNotFoundError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .types import ListPage, ObjectInfo


@runtime_checkable
class ObjectStoreClient(Protocol):
    """Flat key/value store addressed by (bucket, key)."""

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: str | None = None,
        continuation_token: str | None = None,
        max_keys: int | None = None,
    ) -> ListPage:
        """Return one page of keys (and common prefixes) under *prefix*."""
        ...

    def get_object(self, bucket: str, key: str) -> BinaryIO:
        """Return a readable body. The caller closes it."""
        ...

    def put_object(self, bucket: str, key: str, data: bytes) -> None: ...

    def head_object(self, bucket: str, key: str) -> ObjectInfo | None:
        """Return object metadata, or ``None`` if no object exists at *key*."""
        ...

    def delete_object(self, bucket: str, key: str) -> None: ...

    def close(self) -> None:
        """Release connections. Called once when the owning filesystem closes."""
        ...
