"""
Slot stores - local key-value persistence.

Two implementations share the SlotStore protocol:
- MemorySlotStore: dict-backed, lives as long as the process
- SqliteSlotStore: single-file SQLite database, survives restarts

Rules:
------
- Every write replaces the whole slot value (last write wins)
- Each operation runs in its own transaction
- Reads are synchronous and never cached here
- No background flushing, no retries

Known slots:
- campusMarkers: JSON array of {id, lat, lng, name, desc}
- campusEvents: JSON array of {name, desc}
- campusChat: raw rendered transcript markup (not JSON)
"""

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from campusmap.errors import StorageError, StorageReadError


# Database schema version for migrations
SCHEMA_VERSION = 1

MARKERS_SLOT = "campusMarkers"
EVENTS_SLOT = "campusEvents"
CHAT_SLOT = "campusChat"


class SlotStore(Protocol):
    """String-keyed, string-valued persistent store."""
    
    def get(self, key: str) -> Optional[str]:
        ...
    
    def set(self, key: str, value: str) -> None:
        ...
    
    def remove(self, key: str) -> None:
        ...
    
    def keys(self) -> List[str]:
        ...


class MemorySlotStore:
    """In-process slot store. Contents are lost when the process exits."""
    
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._slots: Dict[str, str] = dict(initial or {})
    
    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)
    
    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Slot values must be strings, got {type(value).__name__}")
        self._slots[key] = value
    
    def remove(self, key: str) -> None:
        self._slots.pop(key, None)
    
    def keys(self) -> List[str]:
        return sorted(self._slots)


class SqliteSlotStore:
    """
    SQLite-backed slot store.
    
    Stores every slot as one row of the `slots` table. The database file
    is created on first use together with its schema.
    """
    
    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize the slot store.
        
        Args:
            db_path: Path to SQLite database file (defaults to ./campusmap.db)
        """
        if db_path is None:
            db_path = Path.cwd() / "campusmap.db"
        
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
    
    @contextmanager
    def _connect(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"Database operation failed: {e}") from e
        finally:
            conn.close()
    
    def _ensure_schema(self) -> None:
        """Create schema if it doesn't exist."""
        with self._connect() as conn:
            cursor = conn.cursor()
            
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
            """)
            
            cursor.execute("SELECT version FROM schema_version ORDER BY version DESC LIMIT 1")
            row = cursor.fetchone()
            current_version = row[0] if row else 0
            
            if current_version > SCHEMA_VERSION:
                raise StorageError(
                    f"Database schema version {current_version} is newer than "
                    f"supported version {SCHEMA_VERSION}"
                )
            
            if current_version < 1:
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS slots (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)
                cursor.execute(
                    "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
                    (1, datetime.now(timezone.utc).isoformat()),
                )
    
    def get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM slots WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None
    
    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(f"Slot values must be strings, got {type(value).__name__}")
        with self._connect() as conn:
            conn.execute("""
                INSERT INTO slots (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """, (key, value, datetime.now(timezone.utc).isoformat()))
    
    def remove(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM slots WHERE key = ?", (key,))
    
    def keys(self) -> List[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT key FROM slots ORDER BY key").fetchall()
        return [row[0] for row in rows]


def read_json(store: SlotStore, key: str) -> Any:
    """
    Read and decode a JSON slot.
    
    Raises:
        StorageReadError: If the slot is absent or not valid JSON
    """
    raw = store.get(key)
    if raw is None:
        raise StorageReadError(key, "slot is empty", missing=True)
    
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageReadError(key, f"invalid JSON: {e}") from e


def write_json(store: SlotStore, key: str, value: Any) -> None:
    """Encode value as JSON and overwrite the slot."""
    store.set(key, json.dumps(value, ensure_ascii=False))
