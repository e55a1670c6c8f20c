"""
Abstract Replication Channel Interface

DESIGN DECISION: This is intentionally the thinnest contract that lets
two devices mirror each other:
- no acknowledgement
- no retry or queueing
- no ordering guarantee across successive sends

A dropped snapshot is simply superseded by the next mutation.
"""

from abc import ABC, abstractmethod
from typing import Callable

from water_tracker.models.snapshot import SyncSnapshot


SnapshotCallback = Callable[[SyncSnapshot], None]


class ReplicationChannelInterface(ABC):
    """
    Abstract interface for the paired-device messaging channel.
    
    Inbound snapshots may be delivered on any thread; the receiver is
    responsible for moving them onto its own context.
    """
    
    name: str = "replication"
    
    @abstractmethod
    def activate(self) -> None:
        """
        Start establishing a session with the paired device.
        
        May return before the session is actually active.
        
        Raises:
            SessionUnavailableError: If a session can't even be attempted
        """
        pass
    
    @abstractmethod
    def is_session_active(self) -> bool:
        """True while snapshots can be sent to the peer."""
        pass
    
    @abstractmethod
    def send_snapshot(self, snapshot: SyncSnapshot) -> bool:
        """
        Push a snapshot to the peer, fire-and-forget.
        
        Returns:
            True if the snapshot was handed to the transport. This is
            NOT a delivery confirmation.
        """
        pass
    
    @abstractmethod
    def on_snapshot_received(self, callback: SnapshotCallback) -> None:
        """
        Register the handler for snapshots pushed by the peer.
        
        Only one handler is kept; registering again replaces it.
        """
        pass
    
    def close(self) -> None:
        """Tear down the session (optional)."""
        pass


class ReplicationError(Exception):
    """Base exception for replication operations."""
    pass


class SessionUnavailableError(ReplicationError):
    """No session with the paired device can be established."""
    pass
