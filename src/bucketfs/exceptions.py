"""Custom exception hierarchy for the bucketfs filesystem layer.

Each error also derives from the closest builtin so callers can catch
either the bucketfs type or the standard one (``FileNotFoundError``,
``ValueError``, ...).
"""


class BucketFSError(Exception):
    """Base exception for all bucketfs errors."""


class FileSystemAlreadyExistsError(BucketFSError):
    """Raised when a filesystem is already open for an authority."""


class FileSystemNotFoundError(BucketFSError, LookupError):
    """Raised when no open filesystem matches an authority."""


class InvalidPathError(BucketFSError, ValueError):
    """Raised on a malformed URI, a missing bucket, or a foreign path."""


class ClosedFileSystemError(BucketFSError):
    """Raised when an operation needs the client of a closed filesystem."""


class PathNotFoundError(BucketFSError, FileNotFoundError):
    """Raised when no object exists at a key."""


class PathExistsError(BucketFSError, FileExistsError):
    """Raised when a directory marker would shadow an existing object."""


class IsADirectoryPathError(BucketFSError, IsADirectoryError):
    """Raised when a stream is opened on a pseudo-directory."""


class DirectoryNotEmptyError(BucketFSError, OSError):
    """Raised when deleting a pseudo-directory that still has children."""


class DirectoryStreamError(BucketFSError):
    """Raised when a single-pass directory listing is iterated twice."""
