"""Concept graph types: extraction input and simulation nodes/edges."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from forcegraph.exceptions import MalformedInputError


class NodeState(Enum):
    """Who may write a node's position.

    Values:
        FREE: The simulator moves the node.
        DRAGGING: The interaction controller moves the node; the simulator skips it.
        PINNED: Nobody moves the node except an explicit drag.
    """

    FREE = "free"
    DRAGGING = "dragging"
    PINNED = "pinned"


def _first(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


@dataclass(frozen=True)
class Concept:
    """One concept produced by the extraction service.

    Attributes:
        id: Stable concept identifier (also the node id)
        name: Display name
        type: Concept type tag (person, topic, ...)
        mention_count: Number of notes mentioning the concept
        related_ids: Ids of related concepts, informational only
    """

    id: str
    name: str
    type: str = "other"
    mention_count: int = 0
    related_ids: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> Concept:
        """Parse an extraction record.

        Accepts ``mentionCount`` or a ``mentions`` list, camelCase or
        snake_case keys.

        Raises:
            MalformedInputError: If the record is not an object or has no id.
        """
        if not isinstance(data, dict):
            raise MalformedInputError(f"concept must be an object, got {type(data).__name__}")
        concept_id = data.get("id")
        if concept_id is None or concept_id == "":
            raise MalformedInputError("concept is missing an id")

        count = _first(data, "mentionCount", "mention_count")
        if count is None:
            mentions = data.get("mentions")
            count = len(mentions) if isinstance(mentions, list) else 0
        try:
            count = max(0, int(count))
        except (TypeError, ValueError):
            raise MalformedInputError(f"mention count must be an integer, got {count!r}", key=str(concept_id)) from None

        related = _first(data, "relatedConceptIds", "related_concept_ids", "relatedConcepts", default=())
        return cls(
            id=str(concept_id),
            name=str(data.get("name") or concept_id),
            type=str(data.get("type") or "other"),
            mention_count=count,
            related_ids=tuple(str(r) for r in related) if isinstance(related, (list, tuple)) else (),
        )


@dataclass(frozen=True)
class Edge:
    """Weighted, undirected spring between two concepts.

    Strength scales both the drawn line weight and the attraction force.
    """

    source_id: str
    target_id: str
    strength: float = 1.0

    @classmethod
    def from_dict(cls, data: Any) -> Edge:
        """Parse a relationship record; strength is clamped to [0, 1].

        A missing or non-numeric strength counts as 1.0.

        Raises:
            MalformedInputError: If either endpoint id is missing.
        """
        if not isinstance(data, dict):
            raise MalformedInputError(f"relationship must be an object, got {type(data).__name__}")
        source = _first(data, "sourceId", "source_id", "source")
        target = _first(data, "targetId", "target_id", "target")
        if source is None or target is None:
            raise MalformedInputError("relationship is missing sourceId or targetId")

        strength = data.get("strength", 1.0)
        if isinstance(strength, bool) or not isinstance(strength, (int, float)) or not math.isfinite(strength):
            strength = 1.0
        return cls(str(source), str(target), max(0.0, min(1.0, float(strength))))


# The extraction service calls them relationships; the engine calls them edges.
Relationship = Edge


@dataclass(eq=False)
class Node:
    """A concept's physics state plus display metadata.

    Mutated in place by the simulator (position, velocity) and by the
    interaction controller (drag position, state). Identity-compared.
    """

    id: str
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    state: NodeState = NodeState.FREE
    mention_count: int = 0
    label: str = ""
    type_tag: str = "other"
    _rest_state: NodeState = field(default=NodeState.FREE, repr=False)

    @classmethod
    def from_concept(cls, concept: Concept, x: float, y: float, *, pinned: bool = False) -> Node:
        state = NodeState.PINNED if pinned else NodeState.FREE
        return cls(
            id=concept.id,
            x=x,
            y=y,
            state=state,
            mention_count=concept.mention_count,
            label=concept.name,
            type_tag=concept.type,
            _rest_state=state,
        )

    @property
    def pinned(self) -> bool:
        """Pinned now, or pinned once the current drag ends."""
        if self.state is NodeState.DRAGGING:
            return self._rest_state is NodeState.PINNED
        return self.state is NodeState.PINNED

    @property
    def is_fixed(self) -> bool:
        """True when the simulator must not move this node."""
        return self.state is not NodeState.FREE

    @property
    def is_dragging(self) -> bool:
        return self.state is NodeState.DRAGGING

    def begin_drag(self) -> None:
        if self.state is not NodeState.DRAGGING:
            self._rest_state = self.state
            self.state = NodeState.DRAGGING
        self.vx = 0.0
        self.vy = 0.0

    def drag_to(self, x: float, y: float) -> None:
        self.x = x
        self.y = y
        self.vx = 0.0
        self.vy = 0.0

    def end_drag(self) -> None:
        if self.state is NodeState.DRAGGING:
            self.state = self._rest_state

    def toggle_pin(self) -> bool:
        """Flip the pinned flag and return the new value.

        During a drag only the resting state flips, so the drag continues.
        """
        if self.state is NodeState.DRAGGING:
            self._rest_state = NodeState.FREE if self._rest_state is NodeState.PINNED else NodeState.PINNED
        else:
            self.state = NodeState.FREE if self.state is NodeState.PINNED else NodeState.PINNED
            self._rest_state = self.state
        if self.pinned:
            self.vx = 0.0
            self.vy = 0.0
        return self.pinned
