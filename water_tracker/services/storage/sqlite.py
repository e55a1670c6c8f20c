"""
SQLite Key-Value Store

DESIGN DECISION: SQLite is the on-device store because:
1. It ships with Python - nothing to install on the device
2. Single-file, survives restarts
3. Typed columns let one table hold both integers and blobs

TRADEOFFS:
- One connection per call (we write a few rows per user tap, that's fine)
- A locked database is retried briefly, then surfaced as StorageError
"""

import sqlite3
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from water_tracker.services.storage.interface import (
    ConnectionError,
    CorruptDataError,
    KeyValueStoreInterface,
    StorageError,
)


_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value
)
"""

_transient_retry = retry(
    retry=retry_if_exception_type(sqlite3.OperationalError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
    reraise=True,
)


class SqliteKeyValueStore(KeyValueStoreInterface):
    """
    SQLite implementation of the key-value store.
    
    Each key is one row; the value column keeps SQLite's native type
    (INTEGER for ints, BLOB for bytes) so loads can check what they got.
    """
    
    def __init__(self, database_path: Union[str, Path], timeout: float = 5.0):
        self._path = str(Path(database_path).expanduser())
        self._timeout = timeout
        self._initialize()
    
    @property
    def database_path(self) -> str:
        return self._path
    
    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._path, timeout=self._timeout)
    
    def _initialize(self) -> None:
        """Create the kv table if this is a fresh database."""
        try:
            self._execute_write(_SCHEMA, ())
        except StorageError as e:
            raise ConnectionError(f"Failed to open database {self._path}: {e}") from e
    
    @_transient_retry
    def _write(self, sql: str, params: tuple) -> None:
        conn = self._connect()
        try:
            with conn:
                conn.execute(sql, params)
        finally:
            conn.close()
    
    @_transient_retry
    def _read(self, key: str) -> Optional[tuple]:
        conn = self._connect()
        try:
            return conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
    
    def _execute_write(self, sql: str, params: tuple) -> None:
        try:
            self._write(sql, params)
        except (sqlite3.Error, OverflowError) as e:
            # OverflowError: integer outside SQLite's 64-bit range
            raise StorageError(str(e)) from e
    
    def _load(self, key: str) -> Optional[object]:
        try:
            row = self._read(key)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {key}: {e}") from e
        return None if row is None else row[0]
    
    def _save(self, key: str, value: object) -> None:
        self._execute_write(
            "INSERT INTO kv (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value),
        )
    
    def load_int(self, key: str) -> Optional[int]:
        value = self._load(key)
        if value is None:
            return None
        if not isinstance(value, int):
            raise CorruptDataError(f"{key} does not hold an integer")
        return value
    
    def save_int(self, key: str, value: int) -> None:
        self._save(key, int(value))
    
    def load_blob(self, key: str) -> Optional[bytes]:
        value = self._load(key)
        if value is None:
            return None
        if not isinstance(value, bytes):
            raise CorruptDataError(f"{key} does not hold binary data")
        return value
    
    def save_blob(self, key: str, value: bytes) -> None:
        self._save(key, sqlite3.Binary(value))
