"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
SQLite is the on-device backend; the in-memory store is for tests.
"""

from water_tracker.services.storage.interface import (
    CUP_PRESETS_KEY,
    CURRENT_INTAKE_KEY,
    DAILY_GOAL_KEY,
    ConnectionError,
    CorruptDataError,
    KeyValueStoreInterface,
    StorageError,
)
from water_tracker.services.storage.memory import InMemoryKeyValueStore
from water_tracker.services.storage.sqlite import SqliteKeyValueStore

__all__ = [
    # Interface
    "KeyValueStoreInterface",
    # Keys
    "CUP_PRESETS_KEY",
    "CURRENT_INTAKE_KEY",
    "DAILY_GOAL_KEY",
    # Exceptions
    "ConnectionError",
    "CorruptDataError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "SqliteKeyValueStore",
]
