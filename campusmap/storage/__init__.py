"""
Slot storage for campus map state.

A slot is a named entry in a local key-value store. Values are strings;
JSON encoding is layered on top by read_json / write_json.
"""

from .slots import (
    MemorySlotStore,
    SlotStore,
    SqliteSlotStore,
    read_json,
    write_json,
)

__all__ = [
    "SlotStore",
    "MemorySlotStore",
    "SqliteSlotStore",
    "read_json",
    "write_json",
]
