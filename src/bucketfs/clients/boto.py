"""Boto3ObjectStoreClient — ObjectStoreClient adapter over a boto3 S3 client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import boto3
from botocore import UNSIGNED
from botocore.config import Config
from botocore.exceptions import ClientError

from bucketfs.exceptions import PathNotFoundError
from bucketfs.types import ListPage, ObjectInfo

if TYPE_CHECKING:
    from typing import BinaryIO

    from bucketfs.credentials import Credentials
    from bucketfs.path import Authority

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "NotFound", "404"}


def _is_not_found(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES


class Boto3ObjectStoreClient:
    """Wraps a ``boto3`` S3 client.

    Retries, timeouts and connection pooling are configured on the boto3
    client itself. Only "object not found" responses are translated (to
    ``PathNotFoundError``); every other ``ClientError`` propagates as is.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_authority(
        cls,
        authority: Authority,
        credentials: Credentials,
        *,
        region_name: str | None = None,
        endpoint_scheme: str = "https",
    ) -> Boto3ObjectStoreClient:
        """Build a client for *authority*.

        The default authority talks to AWS; any other endpoint is used as
        ``endpoint_url``. Anonymous credentials produce unsigned requests.
        """
        kwargs: dict[str, Any] = {}
        if region_name:
            kwargs["region_name"] = region_name
        if not authority.is_default:
            kwargs["endpoint_url"] = f"{endpoint_scheme}://{authority.endpoint}"
        if credentials.anonymous:
            kwargs["config"] = Config(signature_version=UNSIGNED)
        else:
            kwargs["aws_access_key_id"] = credentials.access_key
            kwargs["aws_secret_access_key"] = credentials.secret_key

        logger.debug("Creating boto3 S3 client for %s (%r)", authority, credentials)
        return cls(boto3.client("s3", **kwargs))

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
        kwargs: dict[str, Any] = {"Bucket": bucket, "Prefix": prefix}
        if delimiter:
            kwargs["Delimiter"] = delimiter
        if continuation_token:
            kwargs["ContinuationToken"] = continuation_token
        if max_keys:
            kwargs["MaxKeys"] = max_keys

        response = self._client.list_objects_v2(**kwargs)
        return ListPage(
            keys=[obj["Key"] for obj in response.get("Contents", [])],
            common_prefixes=[cp["Prefix"] for cp in response.get("CommonPrefixes", [])],
            next_token=response.get("NextContinuationToken") if response.get("IsTruncated") else None,
        )

    def get_object(self, bucket: str, key: str) -> BinaryIO:
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
        except ClientError as e:
            if _is_not_found(e):
                raise PathNotFoundError(f"No such object: {bucket}/{key}") from e
            raise
        return response["Body"]

    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        self._client.put_object(Bucket=bucket, Key=key, Body=data)

    def head_object(self, bucket: str, key: str) -> ObjectInfo | None:
        try:
            response = self._client.head_object(Bucket=bucket, Key=key)
        except ClientError as e:
            if _is_not_found(e):
                return None
            raise
        return ObjectInfo(
            key=key,
            size=response.get("ContentLength", 0),
            last_modified=response.get("LastModified"),
            etag=response.get("ETag", "").strip('"') or None,
        )

    def delete_object(self, bucket: str, key: str) -> None:
        self._client.delete_object(Bucket=bucket, Key=key)

    def close(self) -> None:
        self._client.close()
