"""Object-store client implementations."""

from bucketfs.clients.boto import Boto3ObjectStoreClient
from bucketfs.clients.memory import InMemoryObjectStoreClient

__all__ = [
    "Boto3ObjectStoreClient",
    "InMemoryObjectStoreClient",
]
