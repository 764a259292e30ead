"""Layout persistence: positions and viewport records on top of a RecordStore.

Every read and write here degrades instead of failing. A storage error or
a malformed record is logged and treated as "nothing saved", so the view
falls back to the default layout and keeps running on in-memory state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from forcegraph.exceptions import MalformedInputError, StorageError
from forcegraph.persistence.records import (
    PINNED_COUNT_KEY,
    POSITIONS_KEY,
    PersistedPosition,
    parse_positions,
    snapshot_positions,
    viewport_key,
)
from forcegraph.viewport import GRAPH_ZOOM, ZOOM_RANGES, Viewport

if TYPE_CHECKING:
    from forcegraph.graph.types import Node
    from forcegraph.persistence.backends import RecordStore

logger = logging.getLogger(__name__)


class SnapshotWriter:
    """Writes whole-record snapshots without letting a stale one win.

    Each submitted snapshot gets the next generation number for its key.
    Inside a running event loop the write is a fire-and-forget task;
    tasks are serialized by a lock and a task whose generation has been
    superseded by the time it gets the lock is dropped. Outside an event
    loop the write happens synchronously.
    """

    def __init__(self, backend: RecordStore) -> None:
        self._backend = backend
        self._generations: dict[str, int] = {}
        self._written: dict[str, int] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._lock: asyncio.Lock | None = None

    @property
    def pending(self) -> int:
        """Number of writes still in flight."""
        return len(self._tasks)

    def written_generation(self, key: str) -> int:
        """Generation of the last snapshot that reached storage for key (0 if none)."""
        return self._written.get(key, 0)

    def submit(self, key: str, value: Any) -> int:
        """Queue a snapshot for key and return its generation."""
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None:
            self._write_sync(key, value, generation)
        else:
            task = loop.create_task(self._write_async(key, value, generation))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        return generation

    def _write_sync(self, key: str, value: Any, generation: int) -> None:
        try:
            self._backend.set(key, value)
        except (StorageError, MalformedInputError):
            logger.warning("Failed to save %r, keeping in-memory state", key, exc_info=True)
            return
        self._written[key] = generation

    async def _write_async(self, key: str, value: Any, generation: int) -> None:
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            if generation != self._generations.get(key):
                logger.debug("Dropping superseded snapshot %r generation %d", key, generation)
                return
            try:
                await self._backend.set_async(key, value)
            except (StorageError, MalformedInputError):
                logger.warning("Failed to save %r, keeping in-memory state", key, exc_info=True)
                return
            self._written[key] = generation

    async def flush(self) -> None:
        """Wait for every write in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))


class LayoutStore:
    """Load and save a view's positions map and viewports.

    Args:
        backend: Where records live
        writer: Snapshot writer (default: one over backend)

    Example:
        >>> from forcegraph.persistence import MemoryStore
        >>> store = LayoutStore(MemoryStore())
        >>> store.load_positions()
        {}
    """

    def __init__(self, backend: RecordStore, writer: SnapshotWriter | None = None) -> None:
        self.backend = backend
        self.writer = writer or SnapshotWriter(backend)

    def _read(self, key: str) -> Any | None:
        try:
            return self.backend.get(key)
        except StorageError:
            logger.warning("Failed to load %r, using defaults", key, exc_info=True)
        except MalformedInputError as e:
            logger.warning("Ignoring unreadable %r record: %s", key, e)
        return None

    # === Positions ===

    def load_positions(self, known_ids: Iterable[str] | None = None) -> dict[str, PersistedPosition]:
        """Saved positions keyed by node id; empty when absent or unreadable."""
        raw = self._read(POSITIONS_KEY)
        if raw is None:
            return {}
        try:
            return parse_positions(raw, known_ids)
        except MalformedInputError as e:
            logger.warning("Ignoring saved positions: %s", e)
            return {}

    def save_positions(self, nodes: Iterable[Node]) -> int:
        """Persist the full position map for nodes as one snapshot.

        Also records how many nodes are pinned. Returns the snapshot's
        generation number.
        """
        snapshot = snapshot_positions(nodes)
        pinned = sum(1 for entry in snapshot.values() if entry["pinned"])
        generation = self.writer.submit(POSITIONS_KEY, snapshot)
        self.writer.submit(PINNED_COUNT_KEY, pinned)
        logger.info("Saved %d positions, %d pinned", len(snapshot), pinned)
        return generation

    def load_pinned_count(self) -> int:
        value = self._read(PINNED_COUNT_KEY)
        return value if isinstance(value, int) and not isinstance(value, bool) else 0

    def clear_positions(self) -> None:
        """Forget every saved position (next load uses the default layout)."""
        for key in (POSITIONS_KEY, PINNED_COUNT_KEY):
            try:
                self.backend.delete(key)
            except StorageError:
                logger.warning("Failed to clear %r", key, exc_info=True)
            except MalformedInputError as e:
                logger.warning("Could not clear unreadable %r record: %s", key, e)

    # === Viewport ===

    def load_viewport(self, view: str = "graph") -> Viewport | None:
        """Saved viewport for a view type, or None when absent or unreadable."""
        raw = self._read(viewport_key(view))
        if raw is None:
            return None
        try:
            return Viewport.from_dict(raw, zoom_range=ZOOM_RANGES.get(view, GRAPH_ZOOM))
        except MalformedInputError as e:
            logger.warning("Ignoring saved %s viewport: %s", view, e)
            return None

    def save_viewport(self, viewport: Viewport, view: str = "graph") -> int:
        return self.writer.submit(viewport_key(view), viewport.to_dict())

    # === Lifecycle ===

    async def flush(self) -> None:
        await self.writer.flush()

    def close(self) -> None:
        self.backend.close()

    async def close_async(self) -> None:
        await self.writer.flush()
        await self.backend.close_async()
