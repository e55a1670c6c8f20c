"""
In-Process Replication Channels

LoopbackReplicationChannel wires two trackers in the same process to
each other (tests, local demo). NullReplicationChannel is used when
replication is disabled: it never has an active session.
"""

from typing import Optional

from water_tracker.models.snapshot import SyncSnapshot
from water_tracker.services.replication.interface import (
    ReplicationChannelInterface,
    SnapshotCallback,
)


class LoopbackReplicationChannel(ReplicationChannelInterface):
    """
    One end of an in-process device pair.
    
    Snapshots go through the wire form on the way over, so ids are
    dropped exactly as they would be between real devices. Delivery is
    synchronous, on the sender's thread.
    """
    
    name = "loopback"
    
    def __init__(self):
        self._peer: Optional["LoopbackReplicationChannel"] = None
        self._callback: Optional[SnapshotCallback] = None
        self._active = False
        self.sent: list[dict] = []
    
    @classmethod
    def pair(cls) -> tuple["LoopbackReplicationChannel", "LoopbackReplicationChannel"]:
        first, second = cls(), cls()
        first._peer = second
        second._peer = first
        return first, second
    
    def activate(self) -> None:
        self._active = True
    
    def close(self) -> None:
        self._active = False
    
    def is_session_active(self) -> bool:
        return self._active and self._peer is not None and self._peer._active
    
    def send_snapshot(self, snapshot: SyncSnapshot) -> bool:
        if not self.is_session_active():
            return False
        message = snapshot.to_message()
        self.sent.append(message)
        self._peer._deliver(message)
        return True
    
    def on_snapshot_received(self, callback: SnapshotCallback) -> None:
        self._callback = callback
    
    def _deliver(self, message: dict) -> None:
        if self._callback is not None:
            self._callback(SyncSnapshot.from_message(message))


class NullReplicationChannel(ReplicationChannelInterface):
    """A channel with no peer. Every send is dropped."""
    
    name = "none"
    
    def activate(self) -> None:
        pass
    
    def is_session_active(self) -> bool:
        return False
    
    def send_snapshot(self, snapshot: SyncSnapshot) -> bool:
        return False
    
    def on_snapshot_received(self, callback: SnapshotCallback) -> None:
        pass
