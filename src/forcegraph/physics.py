"""Force-directed simulation step.

Each tick applies, to every free node:

1. a centring pull toward the middle of the bounds,
2. inverse-square repulsion from every other node,
3. spring attraction along edges toward the rest length,

then integrates velocity with damping and clamps the position inside the
bounds margin. Pinned and dragged nodes never move but still push and pull
their neighbours.

Repulsion is all-pairs, O(n^2) per tick. That is fine for a few hundred
nodes; beyond that the layout needs spatial partitioning.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import TYPE_CHECKING

from forcegraph.config import PhysicsConfig

if TYPE_CHECKING:
    from forcegraph.graph.model import GraphModel
    from forcegraph.graph.types import Node
    from forcegraph.viewport import Bounds


def kinetic_energy(nodes: Iterable[Node]) -> float:
    """Sum of squared speeds over free nodes."""
    return sum(n.vx * n.vx + n.vy * n.vy for n in nodes if not n.is_fixed)


class PhysicsSimulator:
    """Mutates node velocity and position in place, one tick at a time.

    Args:
        config: Force constants (default: PhysicsConfig())

    Example:
        >>> from forcegraph.graph import Concept, Edge, GraphModel
        >>> from forcegraph.viewport import Bounds
        >>> bounds = Bounds(600, 400)
        >>> model = GraphModel.build([Concept("a", "A"), Concept("b", "B")], [Edge("a", "b")], bounds=bounds)
        >>> sim = PhysicsSimulator()
        >>> for _ in range(50):
        ...     sim.tick(model, bounds)
    """

    def __init__(self, config: PhysicsConfig | None = None) -> None:
        self.config = config or PhysicsConfig()
        self.ticks = 0

    def tick(self, model: GraphModel, bounds: Bounds) -> None:
        """Advance the simulation by one step."""
        cfg = self.config
        nodes = model.nodes
        center = bounds.center

        # Centring and repulsion read positions only, so updating
        # velocities in a single pass is order-independent.
        for node in nodes:
            if node.is_fixed:
                continue

            node.vx += (center.x - node.x) * cfg.center_force
            node.vy += (center.y - node.y) * cfg.center_force

            for other in nodes:
                if other is node:
                    continue
                dx = node.x - other.x
                dy = node.y - other.y
                dist = max(math.hypot(dx, dy), 1.0)
                force = cfg.repulsion / (dist * dist)
                node.vx += dx / dist * force
                node.vy += dy / dist * force

        for edge, source, target in model.resolved_edges():
            if source is target:
                continue
            dx = target.x - source.x
            dy = target.y - source.y
            dist = math.hypot(dx, dy) or 1.0
            force = (dist - cfg.rest_length) * cfg.attraction * edge.strength
            fx = dx / dist * force
            fy = dy / dist * force
            if not source.is_fixed:
                source.vx += fx
                source.vy += fy
            if not target.is_fixed:
                target.vx -= fx
                target.vy -= fy

        max_x = bounds.width - cfg.margin
        max_y = bounds.height - cfg.margin
        for node in nodes:
            if node.is_fixed:
                continue
            node.vx *= cfg.damping
            node.vy *= cfg.damping
            node.x += node.vx
            node.y += node.vy
            node.x = max(cfg.margin, min(max_x, node.x))
            node.y = max(cfg.margin, min(max_y, node.y))

        self.ticks += 1

    def run(self, model: GraphModel, bounds: Bounds, ticks: int) -> None:
        """Run several ticks back to back (headless settling)."""
        for _ in range(ticks):
            self.tick(model, bounds)
