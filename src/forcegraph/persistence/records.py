"""Persisted layout records and their validation."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from forcegraph.exceptions import MalformedInputError

if TYPE_CHECKING:
    from forcegraph.graph.types import Node

logger = logging.getLogger(__name__)

POSITIONS_KEY = "positions"
PINNED_COUNT_KEY = "pinned_count"


def viewport_key(view: str) -> str:
    """Store key for one view type's viewport, e.g. ``viewport:graph``."""
    return f"viewport:{view}"


def _finite(value: Any, name: str, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise MalformedInputError(f"'{name}' must be a finite number, got {value!r}", key=key)
    return float(value)


@dataclass(frozen=True)
class PersistedPosition:
    """The durable record of one node's manual layout: where it is and whether it is pinned."""

    x: float
    y: float
    pinned: bool = False

    @classmethod
    def from_node(cls, node: Node) -> PersistedPosition:
        return cls(node.x, node.y, node.pinned)

    @classmethod
    def from_dict(cls, data: Any, *, key: str = "?") -> PersistedPosition:
        """Validate one stored entry.

        Raises:
            MalformedInputError: If the entry is not an object of finite
                coordinates. A non-boolean ``pinned`` is also rejected.
        """
        if not isinstance(data, dict):
            raise MalformedInputError(f"position must be an object, got {type(data).__name__}", key=key)
        pinned = data.get("pinned", False)
        if not isinstance(pinned, bool):
            raise MalformedInputError(f"'pinned' must be a boolean, got {pinned!r}", key=key)
        return cls(_finite(data.get("x"), "x", key), _finite(data.get("y"), "y", key), pinned)

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "pinned": self.pinned}


def parse_positions(raw: Any, known_ids: Iterable[str] | None = None) -> dict[str, PersistedPosition]:
    """Validate a stored positions map entry by entry.

    Entries that are malformed, or whose id is not in known_ids (when
    given), are dropped with a warning. The rest are returned.

    Raises:
        MalformedInputError: If the record as a whole is not an object.
    """
    if not isinstance(raw, dict):
        raise MalformedInputError(f"positions record must be an object, got {type(raw).__name__}", key=POSITIONS_KEY)

    known = set(known_ids) if known_ids is not None else None
    positions: dict[str, PersistedPosition] = {}
    skipped = 0
    for node_id, entry in raw.items():
        if known is not None and node_id not in known:
            skipped += 1
            continue
        try:
            positions[str(node_id)] = PersistedPosition.from_dict(entry, key=str(node_id))
        except MalformedInputError as e:
            logger.warning("Ignoring saved position: %s", e)
    if skipped:
        logger.debug("Ignoring %d saved position(s) for unknown node ids", skipped)
    return positions


def snapshot_positions(nodes: Iterable[Node]) -> dict[str, dict[str, Any]]:
    """Full position map for every node, ready to serialize."""
    return {node.id: PersistedPosition.from_node(node).to_dict() for node in nodes}
