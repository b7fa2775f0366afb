"""Entity stores the import writes to."""

from b2r.clients.entity_store import EntityStore
from b2r.clients.exceptions import ClientError, RecordNotFoundError, SnapshotError
from b2r.clients.memory_store import InMemoryEntityStore, JsonFileEntityStore

__all__ = [
    "ClientError",
    "EntityStore",
    "InMemoryEntityStore",
    "JsonFileEntityStore",
    "RecordNotFoundError",
    "SnapshotError",
]
