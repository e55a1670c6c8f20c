"""
Tracker Event Models

Every tracker mutation and every adapter hiccup produces one of these.
They are written to the local structured log only - there is no history
model, so events are never stored.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class TrackerEventType(str, Enum):
    """Types of events the tracker logs."""
    # Lifecycle
    STATE_LOADED = "state_loaded"
    DEFAULTS_SUBSTITUTED = "defaults_substituted"
    
    # User actions
    WATER_ADDED = "water_added"
    DAILY_RESET = "daily_reset"
    GOAL_CHANGED = "goal_changed"
    GOAL_REACHED = "goal_reached"
    PRESET_ADDED = "preset_added"
    PRESET_REJECTED = "preset_rejected"
    PRESETS_REMOVED = "presets_removed"
    
    # Persistence
    PERSISTENCE_FAILED = "persistence_failed"
    SUBSCRIBER_FAILED = "subscriber_failed"
    
    # Replication
    REPLICATION_ACTIVATED = "replication_activated"
    REPLICATION_UNAVAILABLE = "replication_unavailable"
    SNAPSHOT_SENT = "snapshot_sent"
    SNAPSHOT_DROPPED = "snapshot_dropped"
    SNAPSHOT_RECEIVED = "snapshot_received"


class Severity(str, Enum):
    """Severity level for tracker events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class TrackerEvent(BaseModel):
    """A single tracker event."""
    
    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: TrackerEventType
    severity: Severity = Severity.INFO
    description: str
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    is_user_action: bool = False
    
    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class TrackerEventBuilder:
    """
    Helper class to build tracker events with common patterns.
    
    Usage:
        event = TrackerEventBuilder.water_added(requested=250, before=0, after=250)
    """
    
    @staticmethod
    def state_loaded(daily_goal: int, current_intake: int, preset_count: int) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.STATE_LOADED,
            description="Tracker state loaded",
            details={
                "daily_goal": daily_goal,
                "current_intake": current_intake,
                "preset_count": preset_count,
            },
        )
    
    @staticmethod
    def defaults_substituted(key: str, reason: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.DEFAULTS_SUBSTITUTED,
            severity=Severity.WARNING,
            description=f"Default used for {key}: {reason}",
            details={"key": key, "reason": reason},
        )
    
    @staticmethod
    def water_added(requested: int, before: int, after: int) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.WATER_ADDED,
            description=f"Added {after - before} mL",
            details={
                "requested_ml": requested,
                "before_ml": before,
                "after_ml": after,
                "clamped": before + requested != after,
            },
            is_user_action=True,
        )
    
    @staticmethod
    def daily_reset(previous_intake: int) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.DAILY_RESET,
            description="Daily intake reset",
            details={"previous_intake_ml": previous_intake},
            is_user_action=True,
        )
    
    @staticmethod
    def goal_changed(old_goal: int, new_goal: int) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.GOAL_CHANGED,
            description=f"Daily goal changed to {new_goal} mL",
            details={"old_goal_ml": old_goal, "new_goal_ml": new_goal},
            is_user_action=True,
        )
    
    @staticmethod
    def goal_reached(current_intake: int, daily_goal: int) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.GOAL_REACHED,
            description="Daily goal reached",
            details={"current_intake_ml": current_intake, "daily_goal_ml": daily_goal},
        )
    
    @staticmethod
    def preset_added(preset_id: UUID, name: str, volume: int) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.PRESET_ADDED,
            description="Preset added",
            details={"preset_id": str(preset_id), "name": name, "volume_ml": volume},
            is_user_action=True,
        )
    
    @staticmethod
    def preset_rejected(name: str, volume_text: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.PRESET_REJECTED,
            severity=Severity.DEBUG,
            description="Preset input ignored",
            details={"name": name, "volume_text": volume_text},
            is_user_action=True,
        )
    
    @staticmethod
    def presets_removed(indices: list[int], names: list[str]) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.PRESETS_REMOVED,
            description=f"Removed {len(names)} preset(s)",
            details={"indices": indices, "names": names},
            is_user_action=True,
        )
    
    @staticmethod
    def persistence_failed(key: str, error_message: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.PERSISTENCE_FAILED,
            severity=Severity.ERROR,
            description=f"Failed to persist {key}",
            details={"key": key},
            error_message=error_message,
        )
    
    @staticmethod
    def subscriber_failed(subscriber: str, error_message: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.SUBSCRIBER_FAILED,
            severity=Severity.ERROR,
            description="Change subscriber raised",
            details={"subscriber": subscriber},
            error_message=error_message,
        )
    
    @staticmethod
    def replication_activated(channel: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.REPLICATION_ACTIVATED,
            description=f"Replication session requested via {channel}",
            details={"channel": channel},
        )
    
    @staticmethod
    def replication_unavailable(channel: str, error_message: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.REPLICATION_UNAVAILABLE,
            severity=Severity.WARNING,
            description=f"Replication unavailable via {channel}",
            details={"channel": channel},
            error_message=error_message,
        )
    
    @staticmethod
    def snapshot_sent(fields: list[str]) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.SNAPSHOT_SENT,
            severity=Severity.DEBUG,
            description="Snapshot pushed to paired device",
            details={"fields": fields},
        )
    
    @staticmethod
    def snapshot_dropped(reason: str) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.SNAPSHOT_DROPPED,
            severity=Severity.DEBUG,
            description="Snapshot not sent",
            details={"reason": reason},
        )
    
    @staticmethod
    def snapshot_received(fields: list[str]) -> TrackerEvent:
        return TrackerEvent(
            event_type=TrackerEventType.SNAPSHOT_RECEIVED,
            description="Snapshot applied from paired device",
            details={"fields": fields},
        )
