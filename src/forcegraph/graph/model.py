"""GraphModel: nodes and edges built once per input graph."""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING

import networkx as nx

from forcegraph.config import LayoutConfig
from forcegraph.graph.types import Concept, Edge, Node

if TYPE_CHECKING:
    from forcegraph.persistence.records import PersistedPosition
    from forcegraph.viewport import Bounds

logger = logging.getLogger(__name__)


def circle_position(
    index: int,
    count: int,
    bounds: Bounds,
    *,
    layout: LayoutConfig,
    rng: random.Random,
) -> tuple[float, float]:
    """Default placement: evenly spaced on a circle around the centre, jittered.

    The jitter breaks the symmetry that would otherwise leave opposite
    nodes exactly balanced.
    """
    angle = 2 * math.pi * index / max(count, 1)
    radius = min(bounds.width, bounds.height) * layout.circle_ratio
    center = bounds.center
    x = center.x + math.cos(angle) * radius + rng.uniform(-layout.jitter, layout.jitter)
    y = center.y + math.sin(angle) * radius + rng.uniform(-layout.jitter, layout.jitter)
    return x, y


def initialize_graph(
    concepts: Iterable[Concept],
    relationships: Iterable[Edge],
    prior_positions: Mapping[str, PersistedPosition] | None,
    bounds: Bounds,
    *,
    layout: LayoutConfig | None = None,
    rng: random.Random | None = None,
) -> tuple[list[Node], list[Edge]]:
    """Create simulation nodes and edges for a concept graph.

    Nodes with a saved position take it verbatim, pinned flag included.
    The rest go on the default circle. A saved position with non-finite
    coordinates is ignored.

    Args:
        concepts: Concepts in draw order
        relationships: Edges; order is irrelevant
        prior_positions: Saved positions keyed by node id
        bounds: Surface extent used for the default circle
        layout: Placement tuning (default: LayoutConfig())
        rng: Random source for jitter (default: module random)

    Returns:
        (nodes, edges) with nodes in concept order
    """
    layout = layout or LayoutConfig()
    rng = rng or random.Random()
    prior_positions = prior_positions or {}
    concepts = list(concepts)

    nodes: list[Node] = []
    seen: set[str] = set()
    for i, concept in enumerate(concepts):
        if concept.id in seen:
            logger.warning("Duplicate concept id %r, keeping the first", concept.id)
            continue
        seen.add(concept.id)

        saved = prior_positions.get(concept.id)
        if saved is not None and not (math.isfinite(saved.x) and math.isfinite(saved.y)):
            logger.warning("Saved position for %r is not finite, using default layout", concept.id)
            saved = None

        if saved is not None:
            nodes.append(Node.from_concept(concept, saved.x, saved.y, pinned=saved.pinned))
        else:
            x, y = circle_position(i, len(concepts), bounds, layout=layout, rng=rng)
            nodes.append(Node.from_concept(concept, x, y))

    return nodes, list(relationships)


class GraphModel:
    """Holds one input graph's nodes and edges. No behaviour beyond lookup.

    Nodes keep insertion order, which is also draw order. Edges whose
    endpoints do not exist stay in ``edges`` but are never resolved, so
    the simulator and renderer skip them.

    Attributes:
        nodes: Nodes in draw order
        edges: All edges, dangling ones included
        nx_graph: Undirected networkx graph of the resolvable edges

    Example:
        >>> from forcegraph.viewport import Bounds
        >>> model = GraphModel.build(
        ...     [Concept("a", "A"), Concept("b", "B")],
        ...     [Edge("a", "b"), Edge("a", "zzz")],
        ...     bounds=Bounds(600, 400),
        ... )
        >>> len(list(model.resolved_edges())), len(model.dangling_edges())
        (1, 1)
    """

    def __init__(self, nodes: list[Node], edges: list[Edge]) -> None:
        self.nodes = nodes
        self.edges = edges
        self._index = {node.id: node for node in nodes}
        self.nx_graph = self._build_graph()

    @classmethod
    def build(
        cls,
        concepts: Iterable[Concept],
        relationships: Iterable[Edge],
        prior_positions: Mapping[str, PersistedPosition] | None = None,
        *,
        bounds: Bounds,
        layout: LayoutConfig | None = None,
        rng: random.Random | None = None,
    ) -> GraphModel:
        nodes, edges = initialize_graph(
            concepts, relationships, prior_positions, bounds, layout=layout, rng=rng
        )
        return cls(nodes, edges)

    @classmethod
    def empty(cls) -> GraphModel:
        return cls([], [])

    def _build_graph(self) -> nx.Graph:
        G = nx.Graph()
        G.add_nodes_from(self._index)
        for edge in self.edges:
            if edge.source_id in self._index and edge.target_id in self._index:
                G.add_edge(edge.source_id, edge.target_id, strength=edge.strength)
        dangling = len(self.edges) - sum(1 for _ in self.resolved_edges())
        if dangling:
            logger.warning("Skipping %d edge(s) with unknown endpoints", dangling)
        return G

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def get(self, node_id: str) -> Node | None:
        return self._index.get(node_id)

    def resolved_edges(self) -> Iterator[tuple[Edge, Node, Node]]:
        """Yield (edge, source, target) for edges whose endpoints both exist."""
        for edge in self.edges:
            source = self._index.get(edge.source_id)
            target = self._index.get(edge.target_id)
            if source is None or target is None:
                continue
            yield edge, source, target

    def dangling_edges(self) -> list[Edge]:
        return [e for e in self.edges if e.source_id not in self._index or e.target_id not in self._index]

    def neighbors(self, node_id: str) -> list[str]:
        """Ids of nodes sharing a resolvable edge with node_id."""
        if node_id not in self.nx_graph:
            return []
        return list(self.nx_graph.neighbors(node_id))

    def component_count(self) -> int:
        return nx.number_connected_components(self.nx_graph) if self.nodes else 0

    def pinned_count(self) -> int:
        return sum(1 for node in self.nodes if node.pinned)

    def content_bounds(self) -> tuple[float, float, float, float] | None:
        """(min_x, min_y, max_x, max_y) over node centres, or None when empty."""
        if not self.nodes:
            return None
        xs = [n.x for n in self.nodes]
        ys = [n.y for n in self.nodes]
        return min(xs), min(ys), max(xs), max(ys)
