"""Key-value backends for layout records.

Each backend stores JSON-serializable values under string keys and
survives process restarts (except ``MemoryStore``). Backend failures are
raised as ``StorageError``; deciding what to do about them is the
caller's job.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from forcegraph.exceptions import MalformedInputError, StorageError
from forcegraph.persistence.serializers import JsonSerializer, Serializer

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """Base class for layout record persistence.

    Sync methods are the contract. The async variants default to the
    sync ones; backends with real async I/O override them.
    """

    def __init__(self, serializer: Serializer | None = None) -> None:
        self._serializer = serializer or JsonSerializer()

    # === Sync ===

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Absent keys are ignored."""
        ...

    @abstractmethod
    def keys(self) -> list[str]:
        """All stored keys, sorted."""
        ...

    # === Async ===

    async def get_async(self, key: str) -> Any | None:
        return self.get(key)

    async def set_async(self, key: str, value: Any) -> None:
        self.set(key, value)

    # === Lifecycle ===

    def close(self) -> None:  # noqa: B027
        """Release resources (connections, handles)."""

    async def close_async(self) -> None:
        self.close()


class MemoryStore(RecordStore):
    """In-process store. Values are serialized on write so callers never share state with it.

    Example:
        >>> store = MemoryStore()
        >>> store.set("positions", {"a": {"x": 1, "y": 2, "pinned": False}})
        >>> store.get("positions")["a"]["x"]
        1
    """

    def __init__(self, serializer: Serializer | None = None) -> None:
        super().__init__(serializer)
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        text = self._data.get(key)
        return None if text is None else self._serializer.loads(text)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = self._serializer.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileStore(RecordStore):
    """All records in one JSON document on disk.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so a crash mid-write leaves the previous
    document intact.

    Args:
        path: Path to the JSON document (created on first write).
    """

    def __init__(self, path: str | Path, serializer: Serializer | None = None) -> None:
        super().__init__(serializer or JsonSerializer(indent=2))
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self, key: str) -> dict[str, Any]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError("read", key, e) from e
        document = self._serializer.loads(text)
        if not isinstance(document, dict):
            raise MalformedInputError(f"layout file must hold an object, got {type(document).__name__}", key=str(self._path))
        return document

    def _write_document(self, document: dict[str, Any], key: str) -> None:
        text = self._serializer.dumps(document)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(text)
                os.replace(tmp, self._path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as e:
            raise StorageError("write", key, e) from e

    def get(self, key: str) -> Any | None:
        return self._read_document(key).get(key)

    def set(self, key: str, value: Any) -> None:
        try:
            document = self._read_document(key)
        except MalformedInputError as e:
            logger.warning("Replacing unreadable layout file %s: %s", self._path, e)
            document = {}
        document[key] = value
        self._write_document(document, key)

    def delete(self, key: str) -> None:
        document = self._read_document(key)
        if key in document:
            del document[key]
            self._write_document(document, key)

    def keys(self) -> list[str]:
        return sorted(self._read_document("*"))


# === SQLite ===

SCHEMA_VERSION = 1

_CREATE_SQL = """
CREATE TABLE IF NOT EXISTS _schema_version (version INTEGER NOT NULL);
CREATE TABLE IF NOT EXISTS records (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

_UPSERT_SQL = """
INSERT INTO records (key, value, updated_at) VALUES (?, ?, ?)
ON CONFLICT(key) DO UPDATE SET
    value = excluded.value,
    updated_at = excluded.updated_at
"""


def ensure_schema(conn: Any) -> None:
    """Create the records table and stamp the schema version (idempotent)."""
    conn.executescript(_CREATE_SQL)
    row = conn.execute("SELECT version FROM _schema_version").fetchone()
    if row is None:
        conn.execute("INSERT INTO _schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
    elif row[0] != SCHEMA_VERSION:
        logger.warning("Layout database schema v%s, expected v%s", row[0], SCHEMA_VERSION)
    conn.commit()


def _require_aiosqlite() -> Any:
    """Import aiosqlite with a clear error message if not installed."""
    try:
        import aiosqlite

        return aiosqlite
    except ImportError:
        raise ImportError("SqliteStore async writes require aiosqlite. Install it with: pip install aiosqlite") from None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqliteStore(RecordStore):
    """SQLite-backed records.

    Sync reads and writes use stdlib ``sqlite3``; the async variants use
    ``aiosqlite`` so snapshot writes can run as fire-and-forget tasks on
    the event loop. WAL mode lets both connections share the file.

    Args:
        path: Path to the SQLite database file.

    Example::

        store = SqliteStore("./layout.db")
        store.set("positions", {"a": {"x": 10.0, "y": 20.0, "pinned": True}})
        await store.set_async("viewport:graph", {"panX": 0, "panY": 0, "zoom": 1})
    """

    def __init__(self, path: str | Path, serializer: Serializer | None = None) -> None:
        super().__init__(serializer)
        self._path = str(path)
        self._sync_conn: Any = None
        self._db: Any = None

    @property
    def path(self) -> str:
        return self._path

    def _sync_db(self) -> Any:
        """Open the sync connection (lazy, cached)."""
        if self._sync_conn is None:
            try:
                conn = sqlite3.connect(self._path)
                conn.execute("PRAGMA journal_mode=WAL")
                ensure_schema(conn)
            except sqlite3.Error as e:
                raise StorageError("read", "*", e) from e
            self._sync_conn = conn
        return self._sync_conn

    async def _async_db(self) -> Any:
        """Open the aiosqlite connection (lazy, cached)."""
        if self._db is None:
            aiosqlite = _require_aiosqlite()
            self._sync_db()  # schema setup is sync
            self._db = await aiosqlite.connect(self._path)
            await self._db.execute("PRAGMA journal_mode=WAL")
        return self._db

    def get(self, key: str) -> Any | None:
        db = self._sync_db()
        try:
            row = db.execute("SELECT value FROM records WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError("read", key, e) from e
        return None if row is None else self._serializer.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        text = self._serializer.dumps(value)
        db = self._sync_db()
        try:
            db.execute(_UPSERT_SQL, (key, text, _now()))
            db.commit()
        except sqlite3.Error as e:
            raise StorageError("write", key, e) from e

    def delete(self, key: str) -> None:
        db = self._sync_db()
        try:
            db.execute("DELETE FROM records WHERE key = ?", (key,))
            db.commit()
        except sqlite3.Error as e:
            raise StorageError("write", key, e) from e

    def keys(self) -> list[str]:
        db = self._sync_db()
        try:
            return [row[0] for row in db.execute("SELECT key FROM records ORDER BY key").fetchall()]
        except sqlite3.Error as e:
            raise StorageError("read", "*", e) from e

    async def get_async(self, key: str) -> Any | None:
        db = await self._async_db()
        try:
            cursor = await db.execute("SELECT value FROM records WHERE key = ?", (key,))
            row = await cursor.fetchone()
        except sqlite3.Error as e:
            raise StorageError("read", key, e) from e
        return None if row is None else self._serializer.loads(row[0])

    async def set_async(self, key: str, value: Any) -> None:
        text = self._serializer.dumps(value)
        db = await self._async_db()
        try:
            await db.execute(_UPSERT_SQL, (key, text, _now()))
            await db.commit()
        except sqlite3.Error as e:
            raise StorageError("write", key, e) from e

    def close(self) -> None:
        if self._sync_conn is not None:
            self._sync_conn.close()
            self._sync_conn = None

    async def close_async(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None
        self.close()
