"""Value types: EntryKind, DirEntry, ListPage, ObjectInfo, FileInfo."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from .path import S3Path


class EntryKind(str, Enum):
    """Classification of a listed child."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class DirEntry:
    """One immediate child produced by a directory listing."""

    name: str
    kind: EntryKind
    path: S3Path

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass
class ListPage:
    """One page of a prefix listing as returned by an object-store client."""

    keys: list[str] = field(default_factory=list)
    """Object keys under the prefix (immediate objects when a delimiter is used)."""

    common_prefixes: list[str] = field(default_factory=list)
    """Delimiter-terminated prefixes rolled up by the store."""

    next_token: str | None = None
    """Opaque continuation token, ``None`` on the last page."""


@dataclass(frozen=True)
class ObjectInfo:
    """Metadata of a stored object."""

    key: str
    size: int
    last_modified: datetime | None = None
    etag: str | None = None


@dataclass
class FileInfo:
    """File/directory metadata returned by ``S3FileSystem.stat``."""

    path: str
    name: str
    is_directory: bool
    size: int | None = None
    last_modified: datetime | None = None
