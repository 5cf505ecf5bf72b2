"""DirectoryEmulator — directory listings derived from flat prefix queries.

The store has no directories. A directory ``/bucket/a`` is emulated by
listing keys under ``a/`` with ``/`` as the delimiter and grouping every
returned key or common prefix by its first segment after the prefix:

- ``a/file1``            -> ("file1", FILE)
- ``a/dir1/x``           -> ("dir1", DIRECTORY)
- ``a/dir1/`` (prefix)   -> ("dir1", DIRECTORY)
- ``a/`` (the marker)    -> skipped

A name that appears both as an object and as a prefix (``a/dir1`` plus
``a/dir1/x``) is reported once, as a DIRECTORY.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import DirectoryStreamError, InvalidPathError
from .path import SEPARATOR
from .types import DirEntry, EntryKind

if TYPE_CHECKING:
    from collections.abc import Callable, Generator, Iterator

    from .path import S3Path
    from .protocol import ObjectStoreClient
    from .types import ListPage

    EntryFilter = Callable[[str, EntryKind], bool]

logger = logging.getLogger(__name__)


# =============================================================================
# Grouping pass
# =============================================================================


def listing_prefix(key: str) -> str:
    """Prefix that selects the children of *key* (``""`` for a bucket)."""
    return key + SEPARATOR if key else ""


def merge_child(children: dict[str, EntryKind], name: str, kind: EntryKind) -> None:
    """Record *name*; DIRECTORY wins over FILE."""
    if children.get(name) is not EntryKind.DIRECTORY:
        children[name] = kind


def group_page(prefix: str, page: ListPage) -> dict[str, EntryKind]:
    """Reduce one listing page to immediate child names under *prefix*."""
    children: dict[str, EntryKind] = {}

    for key in sorted(page.keys):
        if not key.startswith(prefix):
            continue
        name, sep, _ = key[len(prefix) :].partition(SEPARATOR)
        if not name:
            # The directory's own marker, or an empty segment
            continue
        merge_child(children, name, EntryKind.DIRECTORY if sep else EntryKind.FILE)

    for common in sorted(page.common_prefixes):
        if not common.startswith(prefix):
            continue
        name = common[len(prefix) :].partition(SEPARATOR)[0]
        if name:
            merge_child(children, name, EntryKind.DIRECTORY)

    return children


def is_settled(prefix: str, name: str, boundary: str) -> bool:
    """True once the listing has moved past every key that could extend *name*.

    Keys extending ``name`` all start with ``prefix + name + "/"``. Pages
    arrive in lexical order, so when the last key seen (*boundary*) sorts
    after that whole range no later page can merge into *name*.
    """
    child_prefix = prefix + name + SEPARATOR
    return boundary > child_prefix and not boundary.startswith(child_prefix)


# =============================================================================
# DirectoryEmulator
# =============================================================================


class DirectoryEmulator:
    """Turns paginated prefix listings into a stream of immediate children.

    *check_open* is called before every page request so that a listing
    started on a filesystem that is closed midway fails on its next page.
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        *,
        check_open: Callable[[], None] | None = None,
        page_size: int | None = None,
    ) -> None:
        self._client = client
        self._check_open = check_open
        self._page_size = page_size

    def _fetch(self, bucket: str, prefix: str, token: str | None) -> ListPage:
        if self._check_open is not None:
            self._check_open()
        return self._client.list_objects(
            bucket,
            prefix,
            SEPARATOR,
            continuation_token=token,
            max_keys=self._page_size,
        )

    def iter_children(self, bucket: str, key: str) -> Generator[tuple[str, EntryKind]]:
        """Yield ``(name, kind)`` for each child of *bucket*/*key*, fetching pages lazily.

        Only the current page plus the names that may still merge with the
        next page are held in memory.
        """
        prefix = listing_prefix(key)
        pending: dict[str, EntryKind] = {}
        token: str | None = None
        pages = 0
        try:
            while True:
                page = self._fetch(bucket, prefix, token)
                pages += 1
                for name, kind in group_page(prefix, page).items():
                    merge_child(pending, name, kind)

                if page.next_token is None:
                    for name in sorted(pending):
                        yield name, pending[name]
                    pending.clear()
                    return

                raw = page.keys + page.common_prefixes
                if raw:
                    boundary = max(raw)
                    for name in sorted(pending):
                        if is_settled(prefix, name, boundary):
                            yield name, pending.pop(name)
                token = page.next_token
        finally:
            logger.debug(
                "Released listing cursor for %s/%s after %d page(s)", bucket, prefix, pages
            )

    def list(
        self,
        directory: S3Path,
        entry_filter: EntryFilter | None = None,
    ) -> DirectoryStream:
        """Open a single-pass listing of *directory*."""
        bucket = directory.bucket
        if not directory.is_absolute or bucket is None:
            raise InvalidPathError(f"Listing needs an absolute path with a bucket: {directory}")
        return DirectoryStream(directory, self.iter_children(bucket, directory.key), entry_filter)


# =============================================================================
# DirectoryStream
# =============================================================================


class DirectoryStream:
    """Single-pass, closeable sequence of ``DirEntry`` values.

    Every child is passed to *entry_filter*; rejected children are consumed
    but not yielded. Iterate once; a second ``iter()`` raises
    ``DirectoryStreamError``. Closing (or leaving a ``with`` block) releases
    the underlying paging cursor.

    Usage::

        with fs.list_dir(fs.get_path("/bucket/dir")) as entries:
            for entry in entries:
                print(entry.name, entry.kind)
    """

    def __init__(
        self,
        directory: S3Path,
        children: Generator[tuple[str, EntryKind]],
        entry_filter: EntryFilter | None = None,
    ) -> None:
        self._directory = directory
        self._children = children
        self._filter = entry_filter
        self._iterated = False
        self._closed = False

    @property
    def directory(self) -> S3Path:
        return self._directory

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[DirEntry]:
        if self._iterated:
            raise DirectoryStreamError(f"Listing of {self._directory} was already iterated")
        self._iterated = True
        return self._entries()

    def _entries(self) -> Generator[DirEntry]:
        try:
            for name, kind in self._children:
                if self._filter is not None and not self._filter(name, kind):
                    continue
                yield DirEntry(name=name, kind=kind, path=self._directory / name)
        finally:
            self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._children.close()

    def __enter__(self) -> DirectoryStream:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()
