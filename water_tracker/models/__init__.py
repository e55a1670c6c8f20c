"""
Data Models Package

Pydantic models for presets, replication snapshots and tracker events.
"""

from water_tracker.models.preset import (
    DEFAULT_PRESETS,
    CupPreset,
    decode_presets,
    default_presets,
    encode_presets,
)
from water_tracker.models.snapshot import PresetPayload, SyncSnapshot
from water_tracker.models.events import (
    Severity,
    TrackerEvent,
    TrackerEventBuilder,
    TrackerEventType,
)

__all__ = [
    # Preset models
    "DEFAULT_PRESETS",
    "CupPreset",
    "decode_presets",
    "default_presets",
    "encode_presets",
    # Snapshot models
    "PresetPayload",
    "SyncSnapshot",
    # Event models
    "Severity",
    "TrackerEvent",
    "TrackerEventBuilder",
    "TrackerEventType",
]
