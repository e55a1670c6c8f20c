"""
Application Factory for Water Tracker

Builds the one TrackerState the process will use, wiring in whichever
storage and replication backends the settings ask for.

DESIGN DECISION: Nothing here is allowed to stop the app from starting.
- Storage that can't be opened degrades to memory
- Replication that is disabled or can't be built degrades to no peer
"""

from typing import Optional

import structlog

from water_tracker.audit import ActivityLogger, configure_logging
from water_tracker.config import Settings, get_settings
from water_tracker.dispatch import MainContextDispatcher
from water_tracker.services.replication import (
    MqttReplicationChannel,
    NullReplicationChannel,
    ReplicationChannelInterface,
)
from water_tracker.services.storage import (
    InMemoryKeyValueStore,
    KeyValueStoreInterface,
    SqliteKeyValueStore,
    StorageError,
)
from water_tracker.tracker import TrackerState


logger = structlog.get_logger(__name__)


def create_store(settings: Settings) -> KeyValueStoreInterface:
    """Open the configured key-value store, falling back to memory."""
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryKeyValueStore()
    try:
        return SqliteKeyValueStore(storage.database_path)
    except StorageError as e:
        logger.warning("storage_unavailable", path=storage.database_path, error=str(e))
        return InMemoryKeyValueStore()


def create_channel(settings: Settings) -> ReplicationChannelInterface:
    """Build the replication channel, or a peerless one if disabled."""
    # Read once: device_id defaults to a fresh id per settings load
    replication = settings.replication
    if not replication.enabled:
        return NullReplicationChannel()
    try:
        return MqttReplicationChannel(replication)
    except (OSError, ValueError) as e:
        logger.warning("replication_unavailable", broker=replication.broker_host, error=str(e))
        return NullReplicationChannel()


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStoreInterface] = None,
    channel: Optional[ReplicationChannelInterface] = None,
) -> tuple[TrackerState, KeyValueStoreInterface, ReplicationChannelInterface]:
    """
    Factory function to create all application components.
    
    Args:
        settings: Settings to build from (defaults to get_settings())
        store: Use this store instead of the configured one
        channel: Use this channel instead of the configured one
        
    Returns:
        (tracker, store, channel)
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)
    
    store = store or create_store(settings)
    channel = channel or create_channel(settings)
    
    tracker = TrackerState(
        store=store,
        channel=channel,
        dispatcher=MainContextDispatcher(),
        activity_logger=ActivityLogger(),
        default_daily_goal=settings.tracker.default_daily_goal,
    )
    
    return tracker, store, channel
