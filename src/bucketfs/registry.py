"""FileSystemRegistry — at most one open filesystem per authority."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from .clients.boto import Boto3ObjectStoreClient
from .credentials import no_properties, resolve_credentials
from .exceptions import FileSystemAlreadyExistsError, FileSystemNotFoundError
from .filesystem import S3FileSystem
from .path import Authority

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .credentials import Credentials
    from .protocol import ObjectStoreClient

    ClientFactory = Callable[[Authority, Credentials], ObjectStoreClient]
    PropertiesLoader = Callable[[], Mapping[str, str]]

logger = logging.getLogger(__name__)


def default_client_factory(authority: Authority, credentials: Credentials) -> ObjectStoreClient:
    """Build a boto3-backed client for *authority*."""
    return Boto3ObjectStoreClient.from_authority(authority, credentials)


class FileSystemRegistry:
    """Table of open filesystems keyed by authority.

    An entry is added only by ``create`` and removed only when the
    registered filesystem is closed. Mutations hold a lock, so of two
    concurrent ``create`` calls for one authority exactly one succeeds.

    Dependencies are injected rather than discovered: *client_factory*
    builds the client for each new filesystem and *properties_loader*
    supplies the fallback credential source.
    """

    def __init__(
        self,
        *,
        client_factory: ClientFactory | None = None,
        properties_loader: PropertiesLoader | None = None,
        page_size: int | None = None,
    ) -> None:
        self._client_factory = client_factory or default_client_factory
        self._properties_loader = properties_loader or no_properties
        self._page_size = page_size
        self._filesystems: dict[Authority, S3FileSystem] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(self, uri: str, config: Mapping[str, object] | None = None) -> S3FileSystem:
        """Open a new filesystem for the authority of *uri*.

        Raises ``FileSystemAlreadyExistsError`` while one is open.
        """
        authority = Authority.from_uri(uri)
        with self._lock:
            if authority in self._filesystems:
                raise FileSystemAlreadyExistsError(f"Filesystem already open for {authority}")
            fs = self._create_locked(authority, config)
        return fs

    def _create_locked(
        self, authority: Authority, config: Mapping[str, object] | None
    ) -> S3FileSystem:
        credentials = resolve_credentials(config, self._properties_loader())
        client = self._client_factory(authority, credentials)
        fs = S3FileSystem(authority, client, registry=self, page_size=self._page_size)
        self._filesystems[authority] = fs
        logger.info("Opened filesystem %s", authority)
        return fs

    def lookup(self, uri: str) -> S3FileSystem:
        """Return the open filesystem for *uri*'s authority."""
        authority = Authority.from_uri(uri)
        with self._lock:
            fs = self._filesystems.get(authority)
        if fs is None:
            raise FileSystemNotFoundError(f"No open filesystem for {authority}")
        return fs

    def get_or_create(self, uri: str, config: Mapping[str, object] | None = None) -> S3FileSystem:
        """Return the open filesystem for *uri*, creating it if needed."""
        authority = Authority.from_uri(uri)
        with self._lock:
            fs = self._filesystems.get(authority)
            if fs is None:
                fs = self._create_locked(authority, config)
        return fs

    def close(self, fs: S3FileSystem) -> None:
        """Close *fs*. Closing an already closed filesystem is a no-op."""
        fs.close()

    def unregister(self, fs: S3FileSystem) -> None:
        """Drop the entry for *fs*; a newer filesystem for the same authority stays."""
        with self._lock:
            if self._filesystems.get(fs.authority) is fs:
                del self._filesystems[fs.authority]

    def close_all(self) -> None:
        with self._lock:
            filesystems = list(self._filesystems.values())
        for fs in filesystems:
            fs.close()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_filesystems(self) -> list[S3FileSystem]:
        """Open filesystems, default authority first, then by endpoint."""
        with self._lock:
            filesystems = list(self._filesystems.values())
        return sorted(filesystems, key=lambda fs: fs.authority.endpoint or "")

    def __contains__(self, uri: object) -> bool:
        if not isinstance(uri, str):
            return False
        authority = Authority.from_uri(uri)
        with self._lock:
            return authority in self._filesystems

    def __len__(self) -> int:
        with self._lock:
            return len(self._filesystems)
