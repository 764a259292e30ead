"""Layout persistence package.

Provides the ``RecordStore`` ABC with memory, JSON-file and SQLite
backends, plus ``LayoutStore`` for the positions and viewport records.
"""

from forcegraph.persistence.backends import JsonFileStore, MemoryStore, RecordStore, SqliteStore
from forcegraph.persistence.records import (
    PINNED_COUNT_KEY,
    POSITIONS_KEY,
    PersistedPosition,
    parse_positions,
    snapshot_positions,
    viewport_key,
)
from forcegraph.persistence.serializers import JsonSerializer, Serializer
from forcegraph.persistence.store import LayoutStore, SnapshotWriter

__all__ = [
    "JsonFileStore",
    "JsonSerializer",
    "LayoutStore",
    "MemoryStore",
    "PINNED_COUNT_KEY",
    "POSITIONS_KEY",
    "PersistedPosition",
    "RecordStore",
    "Serializer",
    "SnapshotWriter",
    "SqliteStore",
    "open_store",
    "parse_positions",
    "snapshot_positions",
    "viewport_key",
]


def open_store(path: str | None) -> RecordStore:
    """Pick a backend from a path: ``.json`` -> file, anything else -> SQLite, None -> memory."""
    if path is None:
        return MemoryStore()
    if path.endswith(".json"):
        return JsonFileStore(path)
    return SqliteStore(path)
