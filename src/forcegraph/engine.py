"""GraphEngine: one interactive graph view, wired end to end.

Each view owns its own engine instance: graph model, simulator, viewport,
interaction controller, render loop and persistence. Nothing here is
module-level state, so several views can run side by side.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from forcegraph.config import ForceGraphConfig
from forcegraph.events import CallbackProcessor, EventDispatcher, EventProcessor, LayoutSettledEvent
from forcegraph.graph.model import GraphModel
from forcegraph.interaction import InteractionController
from forcegraph.loop import AsyncioScheduler, RenderLoop, Scheduler
from forcegraph.persistence import LayoutStore, MemoryStore, RecordStore
from forcegraph.physics import PhysicsSimulator, kinetic_energy
from forcegraph.render import GraphRenderer, render_svg
from forcegraph.viewport import GRAPH_ZOOM, ZOOM_RANGES, Bounds, Point, Viewport

if TYPE_CHECKING:
    from forcegraph.graph.types import Concept, Edge
    from forcegraph.render.surface import Surface

logger = logging.getLogger(__name__)

DEFAULT_SIZE = Bounds(600, 400)


class GraphEngine:
    """A force-directed graph view.

    Args:
        config: Engine settings (default: ForceGraphConfig())
        store: Layout persistence, or a bare RecordStore to wrap (default: in-memory)
        surface: Where frames are drawn; None runs headless
        scheduler: Frame scheduler (default: AsyncioScheduler on the running loop)
        view: View type, "graph" or "board"; selects the zoom range and viewport record
        on_node_click: Called with a concept id when a node is clicked
        on_node_double_click: Called with a concept id after its pin was toggled
        processors: Extra event processors
        strict_events: Re-raise processor failures instead of logging them
        rng: Random source for default-layout jitter

    Example:
        >>> from forcegraph.graph import Concept, Edge
        >>> from forcegraph.loop import ManualScheduler
        >>> engine = GraphEngine(scheduler=ManualScheduler())
        >>> engine.load([Concept("a", "A"), Concept("b", "B")], [Edge("a", "b")])
        0
        >>> engine.settle(50)
        >>> sorted(engine.snapshot())
        ['a', 'b']
    """

    def __init__(
        self,
        *,
        config: ForceGraphConfig | None = None,
        store: LayoutStore | RecordStore | None = None,
        surface: Surface | None = None,
        scheduler: Scheduler | None = None,
        view: str = "graph",
        on_node_click: Callable[[str], object] | None = None,
        on_node_double_click: Callable[[str], object] | None = None,
        processors: Iterable[EventProcessor] = (),
        strict_events: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or ForceGraphConfig()
        if store is None:
            store = MemoryStore()
        self.store = store if isinstance(store, LayoutStore) else LayoutStore(store)
        self.surface = surface
        self.view = view
        self._size = DEFAULT_SIZE
        self._rng = rng or random.Random()

        self.dispatcher = EventDispatcher(list(processors), strict=strict_events)
        if on_node_click is not None or on_node_double_click is not None:
            self.dispatcher.add(CallbackProcessor(on_node_click, on_node_double_click))

        zoom_range = ZOOM_RANGES.get(view, GRAPH_ZOOM)
        self.viewport = self.store.load_viewport(view) or Viewport(zoom_range=zoom_range)
        self.model = GraphModel.empty()
        self.simulator = PhysicsSimulator(self.config.physics)
        self.renderer = GraphRenderer(self.config.style)
        self.controller = InteractionController(
            self.model,
            self.viewport,
            config=self.config.interaction,
            style=self.config.style,
            save_positions=self.save_positions,
            save_viewport=self.save_viewport,
            dispatcher=self.dispatcher,
            view=view,
        )
        self.loop = RenderLoop(
            self._simulate,
            self._draw,
            scheduler or AsyncioScheduler(),
            config=self.config.loop,
            is_ready=self._surface_ready,
            is_dragging=lambda: self.controller.is_dragging,
            energy=lambda: kinetic_energy(self.model.nodes),
            on_settled=self._on_settled,
        )

    def __repr__(self) -> str:
        return f"GraphEngine(view={self.view!r}, nodes={len(self.model)}, edges={len(self.model.edges)})"

    # === Geometry ===

    @property
    def bounds(self) -> Bounds:
        """Surface extent used for centring, clamping and the default layout."""
        if self.surface is not None:
            return Bounds(self.surface.width, self.surface.height)
        return self._size

    def resize(self, width: float, height: float) -> None:
        """Record a new size (headless engines) or resize a resizable surface."""
        self._size = Bounds(width, height)
        resize = getattr(self.surface, "resize", None)
        if callable(resize):
            resize(width, height)

    def _surface_ready(self) -> bool:
        return self.surface is None or self.bounds.is_sized

    # === Graph ===

    def load(self, concepts: Iterable[Concept], relationships: Iterable[Edge]) -> int:
        """Replace the node set, restoring saved positions for known ids.

        Returns the number of nodes placed from a saved position.
        """
        concepts = list(concepts)
        prior = self.store.load_positions(c.id for c in concepts)
        bounds = self.bounds if self.bounds.is_sized else DEFAULT_SIZE
        self.model = GraphModel.build(
            concepts, relationships, prior, bounds=bounds, layout=self.config.layout, rng=self._rng
        )
        self.controller.set_model(self.model)
        self.loop.restart_settling()
        logger.debug("Loaded %d nodes (%d restored), %d edges", len(self.model), len(prior), len(self.model.edges))
        return len(prior)

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Current position map: {id: {"x", "y", "pinned"}}."""
        return {n.id: {"x": n.x, "y": n.y, "pinned": n.pinned} for n in self.model.nodes}

    # === Persistence ===

    def save_positions(self) -> int:
        return self.store.save_positions(self.model.nodes)

    def save_viewport(self) -> int:
        return self.store.save_viewport(self.viewport, self.view)

    def clear_saved_positions(self) -> None:
        self.store.clear_positions()

    # === Frames ===

    def _simulate(self) -> None:
        self.simulator.tick(self.model, self.bounds)

    def _draw(self) -> None:
        if self.surface is None:
            return
        self.renderer.draw(
            self.surface,
            self.model,
            self.viewport,
            selected_ids=self.controller.selected_ids,
            hovered_id=self.controller.hovered_id,
        )

    def _on_settled(self, frames: int, energy: float) -> None:
        self.dispatcher.emit(LayoutSettledEvent(view=self.view, frames=frames, energy=energy))

    def start(self) -> None:
        self.loop.start()

    def stop(self) -> None:
        self.loop.stop()

    def settle(self, ticks: int) -> None:
        """Run ticks simulation steps synchronously, without drawing."""
        self.simulator.run(self.model, self.bounds, ticks)

    def draw(self) -> None:
        """Paint one frame now. Raises SurfaceUnavailableError on an unsized surface."""
        self._draw()

    # === Input ===

    def pointer_down(self, x: float, y: float, *, shift: bool = False) -> None:
        self.controller.pointer_down(Point(x, y), shift=shift)

    def pointer_move(self, x: float, y: float) -> None:
        self.controller.pointer_move(Point(x, y))

    def pointer_up(self, x: float | None = None, y: float | None = None) -> None:
        self.controller.pointer_up(Point(x, y) if x is not None and y is not None else None)

    def pointer_leave(self) -> None:
        self.controller.pointer_leave()

    def double_click(self, x: float, y: float) -> None:
        self.controller.double_click(Point(x, y))

    def wheel(self, x: float, y: float, delta_y: float) -> None:
        self.controller.wheel(Point(x, y), delta_y)

    # === Viewport controls ===

    def zoom_in(self) -> None:
        self._zoom_about_center(self.config.interaction.button_zoom)

    def zoom_out(self) -> None:
        self._zoom_about_center(1 / self.config.interaction.button_zoom)

    def _zoom_about_center(self, factor: float) -> None:
        bounds = self.bounds if self.bounds.is_sized else self._size
        self.viewport.zoom_toward(bounds.center, factor)
        self.save_viewport()

    def reset_view(self) -> None:
        """Pan 0, zoom 1."""
        self.viewport.reset()
        self.save_viewport()

    def zoom_to_fit(self, padding: float = 50.0) -> None:
        """Fit every node on screen, never zooming in past 1."""
        box = self.model.content_bounds()
        if box is None:
            return
        min_x, min_y, max_x, max_y = box
        bounds = self.bounds if self.bounds.is_sized else self._size
        self.viewport.fit(Point(min_x, min_y), Point(max_x, max_y), bounds.width, bounds.height, padding=padding)
        self.save_viewport()

    def visible_node_ids(self) -> list[str]:
        """Ids of nodes whose centres are on screen, in draw order."""
        bounds = self.bounds if self.bounds.is_sized else self._size
        top_left, bottom_right = self.viewport.visible_bounds(bounds.width, bounds.height)
        return [n.id for n in self.controller.hit_tester.nodes_in_rect(top_left, bottom_right)]

    # === Output ===

    def to_svg(self) -> str:
        bounds = self.bounds if self.bounds.is_sized else self._size
        return render_svg(
            self.model,
            self.viewport,
            bounds.width,
            bounds.height,
            style=self.config.style,
            selected_ids=self.controller.selected_ids,
            hovered_id=self.controller.hovered_id,
        )

    def _repr_svg_(self) -> str:
        """Jupyter rich display."""
        return self.to_svg()

    # === Lifecycle ===

    def close(self) -> None:
        """Stop the loop and release storage. Pending async writes are not awaited."""
        self.loop.stop()
        self.dispatcher.shutdown()
        self.store.close()

    async def close_async(self) -> None:
        """Stop the loop, wait for pending writes, release storage."""
        self.loop.stop()
        self.dispatcher.shutdown()
        await self.store.close_async()

    async def __aenter__(self) -> GraphEngine:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close_async()
