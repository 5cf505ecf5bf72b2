"""Tests for path.py — Authority, URI parsing, S3Path."""

from __future__ import annotations

import pytest

from bucketfs.exceptions import InvalidPathError
from bucketfs.path import Authority, S3Path, parse_uri_path, split_segments

# ---------------------------------------------------------------------------
# Authority
# ---------------------------------------------------------------------------


class TestAuthority:
    def test_default_authority(self):
        assert Authority.from_uri("s3:///") == Authority()
        assert Authority.from_uri("s3:///").is_default is True

    def test_empty_endpoint_is_default(self):
        assert Authority("") == Authority(None)

    def test_endpoint(self):
        authority = Authority.from_uri("s3://endpoint1/bucket/key")
        assert authority.endpoint == "endpoint1"
        assert authority.is_default is False

    def test_endpoint_with_port(self):
        assert Authority.from_uri("s3://minio:9000/").endpoint == "minio:9000"

    def test_equality_by_endpoint(self):
        assert Authority("endpoint1") == Authority.from_uri("s3://endpoint1/other")
        assert Authority("endpoint1") != Authority("endpoint2")
        assert Authority("endpoint1") != Authority()

    def test_hashable(self):
        table = {Authority("a"): 1, Authority(): 2}
        assert table[Authority.from_uri("s3://a/")] == 1
        assert table[Authority.from_uri("s3:///")] == 2

    def test_wrong_scheme(self):
        with pytest.raises(InvalidPathError, match="scheme"):
            Authority.from_uri("http://endpoint1/")

    @pytest.mark.parametrize(
        ("authority", "expected"),
        [
            pytest.param(Authority(), "s3:///", id="default"),
            pytest.param(Authority("endpoint1"), "s3://endpoint1/", id="endpoint"),
        ],
    )
    def test_str(self, authority: Authority, expected: str):
        assert str(authority) == expected


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


class TestParseUriPath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            pytest.param("/bucket", ("bucket",), id="bucket-only"),
            pytest.param("/bucket/path/to/file", ("bucket", "path", "to", "file"), id="nested"),
            pytest.param("/bucket/dir/", ("bucket", "dir"), id="trailing-slash"),
            pytest.param("/bucket//a", ("bucket", "a"), id="inner-double-slash"),
            pytest.param("/bucket/with%20space", ("bucket", "with space"), id="percent-decoded"),
            pytest.param("/bucket/a%2Fb", ("bucket", "a", "b"), id="encoded-separator"),
        ],
    )
    def test_valid(self, path: str, expected: tuple[str, ...]):
        assert parse_uri_path(path) == expected

    @pytest.mark.parametrize(
        "path",
        [
            pytest.param("", id="empty"),
            pytest.param("/", id="root"),
            pytest.param("//falta-bucket", id="empty-leading-segment"),
            pytest.param("/%2Ffalta-bucket", id="encoded-empty-leading-segment"),
        ],
    )
    def test_missing_bucket(self, path: str):
        with pytest.raises(InvalidPathError, match="bucket"):
            parse_uri_path(path)

    def test_split_segments_drops_empty(self):
        assert split_segments("/a//b/") == ("a", "b")

    def test_decode_disabled_keeps_percent(self):
        assert parse_uri_path("/bucket/a%2Fb", decode=False) == ("bucket", "a%2Fb")


# ---------------------------------------------------------------------------
# S3Path
# ---------------------------------------------------------------------------


class TestS3PathComponents:
    def test_bucket_and_key(self):
        path = S3Path.from_string("/bucket/path/to/file")
        assert path.bucket == "bucket"
        assert path.key == "path/to/file"
        assert path.name == "file"
        assert path.parts == ("bucket", "path", "to", "file")
        assert path.is_absolute is True

    def test_bucket_only(self):
        path = S3Path.from_string("/bucket")
        assert path.bucket == "bucket"
        assert path.key == ""

    def test_root(self):
        root = S3Path.from_string("/")
        assert root.is_root is True
        assert root.bucket is None
        assert root.parent is None
        assert str(root) == "/"

    def test_relative(self):
        path = S3Path.from_string("dir/file")
        assert path.is_absolute is False
        assert path.bucket is None
        assert path.key == "dir/file"
        assert str(path) == "dir/file"

    def test_parent(self):
        path = S3Path.from_string("/bucket/dir/file")
        assert path.parent == S3Path.from_string("/bucket/dir")
        assert path.parent.parent == S3Path.from_string("/bucket")
        assert path.parent.parent.parent == S3Path.from_string("/")

    def test_relative_single_name_has_no_parent(self):
        assert S3Path.from_string("file").parent is None


class TestS3PathEquality:
    def test_structural_equality_ignores_filesystem(self):
        sentinel = object()
        a = S3Path(None, ("bucket", "a"))
        b = S3Path(sentinel, ("bucket", "a"))  # type: ignore[arg-type]
        assert a == b
        assert hash(a) == hash(b)

    def test_absolute_flag_matters(self):
        assert S3Path.from_string("/bucket/a") != S3Path.from_string("bucket/a")

    def test_not_equal_to_str(self):
        assert S3Path.from_string("/bucket/a") != "/bucket/a"

    def test_ordering(self):
        paths = [S3Path.from_string(p) for p in ("/b/x", "/a/z", "/a/y")]
        assert [str(p) for p in sorted(paths)] == ["/a/y", "/a/z", "/b/x"]


class TestS3PathDerivation:
    def test_joinpath(self):
        base = S3Path.from_string("/bucket")
        assert base / "dir" / "file" == S3Path.from_string("/bucket/dir/file")
        assert base.joinpath("dir/file") == S3Path.from_string("/bucket/dir/file")

    def test_joinpath_absolute_replaces(self):
        base = S3Path.from_string("/bucket/dir")
        assert base / "/other/x" == S3Path.from_string("/other/x")

    def test_joinpath_keeps_filesystem(self):
        sentinel = object()
        base = S3Path(sentinel, ("bucket",))  # type: ignore[arg-type]
        assert (base / "a").filesystem is sentinel

    def test_relative_to(self):
        path = S3Path.from_string("/bucket/dir/sub/file")
        rel = path.relative_to(S3Path.from_string("/bucket/dir"))
        assert rel == S3Path.from_string("sub/file")
        assert rel.is_absolute is False

    def test_relative_to_unrelated(self):
        with pytest.raises(InvalidPathError):
            S3Path.from_string("/bucket/a").relative_to(S3Path.from_string("/bucket/b"))

    def test_is_relative_to(self):
        path = S3Path.from_string("/bucket/dir/file")
        assert path.is_relative_to(S3Path.from_string("/bucket")) is True
        assert path.is_relative_to(S3Path.from_string("/other")) is False

    def test_as_uri_without_filesystem(self):
        assert S3Path.from_string("/bucket/a b").as_uri() == "s3:///bucket/a%20b"

    def test_as_uri_relative(self):
        with pytest.raises(InvalidPathError):
            S3Path.from_string("a/b").as_uri()

    def test_repr(self):
        assert repr(S3Path.from_string("/bucket/a")) == "S3Path('/bucket/a')"
