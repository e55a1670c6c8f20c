"""
In-Memory Key-Value Store

Used by tests and when no on-disk storage is configured. Values live
only as long as the process.
"""

from typing import Optional, Union

from water_tracker.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dictionary-backed store."""
    
    def __init__(self, initial: Optional[dict[str, Union[int, bytes]]] = None):
        self._data: dict[str, Union[int, bytes]] = dict(initial or {})
    
    def load_int(self, key: str) -> Optional[int]:
        value = self._data.get(key)
        if value is None:
            return None
        if not isinstance(value, int):
            raise CorruptDataError(f"{key} does not hold an integer")
        return value
    
    def save_int(self, key: str, value: int) -> None:
        self._data[key] = int(value)
    
    def load_blob(self, key: str) -> Optional[bytes]:
        value = self._data.get(key)
        if value is None:
            return None
        if not isinstance(value, bytes):
            raise CorruptDataError(f"{key} does not hold binary data")
        return value
    
    def save_blob(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)
    
    def keys(self) -> list[str]:
        return list(self._data)
