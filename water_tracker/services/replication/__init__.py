"""
Replication Services Package

Provides the abstract paired-device channel and its implementations.
MQTT is the real transport; loopback and null channels cover tests and
running without a peer.
"""

from water_tracker.services.replication.interface import (
    ReplicationChannelInterface,
    ReplicationError,
    SessionUnavailableError,
    SnapshotCallback,
)
from water_tracker.services.replication.local import (
    LoopbackReplicationChannel,
    NullReplicationChannel,
)
from water_tracker.services.replication.mqtt_channel import MqttReplicationChannel

__all__ = [
    # Interface
    "ReplicationChannelInterface",
    "SnapshotCallback",
    # Exceptions
    "ReplicationError",
    "SessionUnavailableError",
    # Implementations
    "LoopbackReplicationChannel",
    "MqttReplicationChannel",
    "NullReplicationChannel",
]
