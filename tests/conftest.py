"""Shared fixtures for bucketfs tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from bucketfs.clients.memory import InMemoryObjectStoreClient
from bucketfs.credentials import ACCESS_KEY, SECRET_KEY
from bucketfs.registry import FileSystemRegistry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from bucketfs.credentials import Credentials
    from bucketfs.filesystem import S3FileSystem
    from bucketfs.path import Authority


class RecordingClientFactory:
    """Client factory that hands out one in-memory store and records each call."""

    def __init__(self, client: InMemoryObjectStoreClient) -> None:
        self.client = client
        self.calls: list[tuple[Authority, Credentials]] = []

    def __call__(self, authority: Authority, credentials: Credentials) -> InMemoryObjectStoreClient:
        self.calls.append((authority, credentials))
        return self.client


@pytest.fixture
def fake_env() -> dict[str, str]:
    return {ACCESS_KEY: "access key", SECRET_KEY: "secret key"}


@pytest.fixture
def client() -> InMemoryObjectStoreClient:
    """Empty in-memory store."""
    return InMemoryObjectStoreClient()


@pytest.fixture
def factory(client: InMemoryObjectStoreClient) -> RecordingClientFactory:
    return RecordingClientFactory(client)


@pytest.fixture
def registry(factory: RecordingClientFactory) -> Iterator[FileSystemRegistry]:
    """Registry wired to the in-memory store; closes everything afterwards."""
    reg = FileSystemRegistry(client_factory=factory)
    yield reg
    reg.close_all()


@pytest.fixture
def fs(registry: FileSystemRegistry, fake_env: dict[str, str]) -> S3FileSystem:
    """Open filesystem for ``s3://endpoint1/``."""
    return registry.create("s3://endpoint1/", fake_env)
