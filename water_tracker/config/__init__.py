"""Configuration package."""

from water_tracker.config.settings import (
    AppSettings,
    ReplicationSettings,
    Settings,
    StorageSettings,
    TrackerSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ReplicationSettings",
    "Settings",
    "StorageSettings",
    "TrackerSettings",
    "get_settings",
    "validate_all_settings",
]
