"""Authority and S3Path — hierarchical paths over a flat bucket/key namespace."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import TYPE_CHECKING, ClassVar
from urllib.parse import quote, unquote, urlsplit

from .exceptions import InvalidPathError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .filesystem import S3FileSystem

SCHEME = "s3"
SEPARATOR = "/"


# =============================================================================
# Authority
# =============================================================================


@dataclass(frozen=True)
class Authority:
    """Identity of a storage endpoint.

    An empty or missing endpoint is the default authority.
    """

    endpoint: str | None = None

    scheme: ClassVar[str] = SCHEME

    def __post_init__(self) -> None:
        if not self.endpoint:
            object.__setattr__(self, "endpoint", None)

    @property
    def is_default(self) -> bool:
        return self.endpoint is None

    @classmethod
    def from_uri(cls, uri: str) -> Authority:
        """Extract the authority of an ``s3://`` URI."""
        parts = urlsplit(uri)
        if parts.scheme != SCHEME:
            raise InvalidPathError(f"URI scheme must be '{SCHEME}': {uri}")
        return cls(parts.netloc or None)

    def __str__(self) -> str:
        return f"{SCHEME}://{self.endpoint or ''}/"


# =============================================================================
# Parsing helpers
# =============================================================================


def split_segments(text: str) -> tuple[str, ...]:
    """Split a slash-delimited string into its non-empty segments."""
    return tuple(part for part in text.split(SEPARATOR) if part)


def parse_uri_path(path: str, *, decode: bool = True) -> tuple[str, ...]:
    """Parse an absolute path into bucket-first segments.

    The first segment must be a non-empty bucket name: ``""``, ``"/"`` and
    ``"//key"`` are rejected. With *decode* the path is percent-decoded
    before it is split, so ``%2F`` separates segments like ``/`` does.

    Examples:
        parse_uri_path("/bucket/a/b") -> ("bucket", "a", "b")
        parse_uri_path("/bucket/a/") -> ("bucket", "a")
        parse_uri_path("/bucket/a%2Fb") -> ("bucket", "a", "b")
    """
    text = unquote(path) if decode else path
    rest = text[1:] if text.startswith(SEPARATOR) else text
    if not rest or rest.startswith(SEPARATOR):
        raise InvalidPathError(f"Path does not name a bucket: {path!r}")
    return split_segments(rest)


# =============================================================================
# S3Path
# =============================================================================


@total_ordering
class S3Path:
    """Immutable path value: an ordered tuple of segments plus an absolute flag.

    For an absolute path the first segment is the bucket and the remaining
    segments form the key. The absolute path with no segments is the store
    root.

    Equality and hashing are structural: two paths issued by different
    filesystems compare equal when their segments match. Operations that
    need a client compare ``filesystem`` by identity instead.
    """

    __slots__ = ("_absolute", "_filesystem", "_segments")

    def __init__(
        self,
        filesystem: S3FileSystem | None,
        segments: Iterable[str] = (),
        *,
        absolute: bool = True,
    ) -> None:
        self._filesystem = filesystem
        self._segments = tuple(segments)
        self._absolute = absolute

    @classmethod
    def from_string(cls, text: str, filesystem: S3FileSystem | None = None) -> S3Path:
        """Parse ``/bucket/a/b`` (absolute) or ``a/b`` (relative)."""
        return cls(
            filesystem,
            split_segments(text),
            absolute=text.startswith(SEPARATOR),
        )

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def filesystem(self) -> S3FileSystem | None:
        return self._filesystem

    @property
    def parts(self) -> tuple[str, ...]:
        return self._segments

    @property
    def is_absolute(self) -> bool:
        return self._absolute

    @property
    def is_root(self) -> bool:
        return self._absolute and not self._segments

    @property
    def bucket(self) -> str | None:
        """First segment of an absolute path, ``None`` otherwise."""
        if self._absolute and self._segments:
            return self._segments[0]
        return None

    @property
    def key(self) -> str:
        """The object key: segments after the bucket joined with ``/``."""
        segments = self._segments[1:] if self._absolute else self._segments
        return SEPARATOR.join(segments)

    @property
    def name(self) -> str:
        return self._segments[-1] if self._segments else ""

    @property
    def parent(self) -> S3Path | None:
        """The parent path, or ``None`` for the root and single relative names."""
        if not self._segments:
            return None
        if not self._absolute and len(self._segments) == 1:
            return None
        return self._with_segments(self._segments[:-1])

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def _with_segments(self, segments: Iterable[str], absolute: bool | None = None) -> S3Path:
        if absolute is None:
            absolute = self._absolute
        return S3Path(self._filesystem, segments, absolute=absolute)

    def joinpath(self, *others: str | S3Path) -> S3Path:
        """Append segments; an absolute argument replaces everything before it."""
        segments = list(self._segments)
        absolute = self._absolute
        for other in others:
            if isinstance(other, S3Path):
                other_segments, other_absolute = other.parts, other.is_absolute
            else:
                other_segments = split_segments(other)
                other_absolute = other.startswith(SEPARATOR)
            if other_absolute:
                segments = list(other_segments)
                absolute = True
            else:
                segments.extend(other_segments)
        return self._with_segments(segments, absolute)

    def __truediv__(self, other: str | S3Path) -> S3Path:
        return self.joinpath(other)

    def is_relative_to(self, other: S3Path) -> bool:
        if self._absolute != other.is_absolute:
            return False
        prefix = other.parts
        return self._segments[: len(prefix)] == prefix

    def relative_to(self, other: S3Path) -> S3Path:
        """Return this path relative to *other*."""
        if not self.is_relative_to(other):
            raise InvalidPathError(f"{self} is not relative to {other}")
        return self._with_segments(self._segments[len(other.parts) :], absolute=False)

    def as_uri(self) -> str:
        """Render ``s3://<endpoint>/bucket/key`` for an absolute path."""
        if not self._absolute:
            raise InvalidPathError(f"Relative path has no URI: {self}")
        endpoint = ""
        if self._filesystem is not None:
            endpoint = self._filesystem.authority.endpoint or ""
        body = SEPARATOR.join(quote(part, safe="") for part in self._segments)
        return f"{SCHEME}://{endpoint}/{body}"

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        text = SEPARATOR.join(self._segments)
        return SEPARATOR + text if self._absolute else text

    def __repr__(self) -> str:
        return f"S3Path({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, S3Path):
            return NotImplemented
        return (self._absolute, self._segments) == (other._absolute, other._segments)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, S3Path):
            return NotImplemented
        return (self._absolute, self._segments) < (other._absolute, other._segments)

    def __hash__(self) -> int:
        return hash((self._absolute, self._segments))
