"""Services package."""

from water_tracker.services.replication import (
    LoopbackReplicationChannel,
    MqttReplicationChannel,
    NullReplicationChannel,
    ReplicationChannelInterface,
    ReplicationError,
    SessionUnavailableError,
)
from water_tracker.services.storage import (
    ConnectionError,
    CorruptDataError,
    InMemoryKeyValueStore,
    KeyValueStoreInterface,
    SqliteKeyValueStore,
    StorageError,
)

__all__ = [
    # Replication services
    "LoopbackReplicationChannel",
    "MqttReplicationChannel",
    "NullReplicationChannel",
    "ReplicationChannelInterface",
    "ReplicationError",
    "SessionUnavailableError",
    # Storage services
    "ConnectionError",
    "CorruptDataError",
    "InMemoryKeyValueStore",
    "KeyValueStoreInterface",
    "SqliteKeyValueStore",
    "StorageError",
]
