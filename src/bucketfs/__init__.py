"""bucketfs: a hierarchical filesystem over flat object stores.

Paths, directory listings and byte streams on top of bucket/key storage.
"""

__version__ = "0.1.0"

from bucketfs.clients import Boto3ObjectStoreClient, InMemoryObjectStoreClient
from bucketfs.credentials import (
    ACCESS_KEY,
    SECRET_KEY,
    Credentials,
    load_properties,
    resolve_credentials,
)
from bucketfs.directories import DirectoryEmulator, DirectoryStream
from bucketfs.exceptions import (
    BucketFSError,
    ClosedFileSystemError,
    DirectoryNotEmptyError,
    DirectoryStreamError,
    FileSystemAlreadyExistsError,
    FileSystemNotFoundError,
    InvalidPathError,
    IsADirectoryPathError,
    PathExistsError,
    PathNotFoundError,
)
from bucketfs.filesystem import S3FileSystem
from bucketfs.path import Authority, S3Path
from bucketfs.protocol import ObjectStoreClient
from bucketfs.registry import FileSystemRegistry
from bucketfs.streams import ObjectReader, ObjectWriter, StreamAccessor
from bucketfs.types import DirEntry, EntryKind, FileInfo, ListPage, ObjectInfo

__all__ = [
    "ACCESS_KEY",
    "SECRET_KEY",
    "Authority",
    "Boto3ObjectStoreClient",
    "BucketFSError",
    "ClosedFileSystemError",
    "Credentials",
    "DirEntry",
    "DirectoryEmulator",
    "DirectoryNotEmptyError",
    "DirectoryStream",
    "DirectoryStreamError",
    "EntryKind",
    "FileInfo",
    "FileSystemAlreadyExistsError",
    "FileSystemNotFoundError",
    "FileSystemRegistry",
    "InMemoryObjectStoreClient",
    "InvalidPathError",
    "IsADirectoryPathError",
    "ListPage",
    "ObjectInfo",
    "ObjectReader",
    "ObjectStoreClient",
    "ObjectWriter",
    "PathExistsError",
    "PathNotFoundError",
    "S3FileSystem",
    "S3Path",
    "StreamAccessor",
    "__version__",
    "load_properties",
    "resolve_credentials",
]
