"""
Abstract Key-Value Storage Interface

DESIGN DECISION: The tracker only ever needs four primitive operations.
Keeping the interface this thin allows us to:
1. Swap SQLite for any other on-device store
2. Use in-memory storage for testing
3. Keep tracker logic decoupled from storage implementation

All operations are synchronous. Implementations raise StorageError;
the tracker catches it, so a failed save looks like a successful one
to the user.
"""

from abc import ABC, abstractmethod
from typing import Optional


# Persisted key names
DAILY_GOAL_KEY = "dailyGoal"
CURRENT_INTAKE_KEY = "currentIntake"
CUP_PRESETS_KEY = "cupPresets"


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the tracker's key-value store.
    """
    
    @abstractmethod
    def load_int(self, key: str) -> Optional[int]:
        """
        Load an integer value.
        
        Returns:
            The stored integer, or None if the key is absent
            
        Raises:
            StorageError: If the backend can't be read
            CorruptDataError: If the key holds something other than an integer
        """
        pass
    
    @abstractmethod
    def save_int(self, key: str, value: int) -> None:
        """
        Store an integer value, replacing any previous value.
        
        Raises:
            StorageError: If save fails
        """
        pass
    
    @abstractmethod
    def load_blob(self, key: str) -> Optional[bytes]:
        """
        Load a binary value.
        
        Returns:
            The stored bytes, or None if the key is absent
        """
        pass
    
    @abstractmethod
    def save_blob(self, key: str, value: bytes) -> None:
        """
        Store a binary value, replacing any previous value.
        
        Raises:
            StorageError: If save fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Stored value has the wrong type or shape."""
    pass


class ConnectionError(StorageError):
    """Could not open the storage backend."""
    pass
