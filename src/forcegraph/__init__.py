"""forcegraph - An interactive force-directed layout engine for concept graphs."""

from forcegraph.config import ForceGraphConfig, load_config
from forcegraph.engine import GraphEngine
from forcegraph.events import (
    BaseEvent,
    CallbackProcessor,
    Event,
    EventDispatcher,
    EventProcessor,
    LayoutSettledEvent,
    NodeClickEvent,
    NodeDoubleClickEvent,
    NodePinToggledEvent,
    SelectionChangedEvent,
    TypedEventProcessor,
)
from forcegraph.exceptions import (
    ForceGraphError,
    MalformedInputError,
    StorageError,
    SurfaceUnavailableError,
)
from forcegraph.graph import Concept, Edge, GraphModel, Node, NodeState, Relationship, initialize_graph, load_graph_file
from forcegraph.hit_test import HitTester, node_radius
from forcegraph.interaction import Gesture, InteractionController
from forcegraph.loop import AsyncioScheduler, ManualScheduler, RenderLoop, Scheduler
from forcegraph.persistence import JsonFileStore, LayoutStore, MemoryStore, PersistedPosition, RecordStore, SqliteStore
from forcegraph.physics import PhysicsSimulator, kinetic_energy
from forcegraph.render import GraphRenderer, RecordingSurface, Surface, SvgSurface
from forcegraph.viewport import Bounds, Point, Viewport, ZoomRange

__all__ = [
    # Engine
    "GraphEngine",
    "ForceGraphConfig",
    "load_config",
    # Graph model
    "Concept",
    "Edge",
    "Relationship",
    "Node",
    "NodeState",
    "GraphModel",
    "initialize_graph",
    "load_graph_file",
    # Simulation and geometry
    "PhysicsSimulator",
    "kinetic_energy",
    "Viewport",
    "ZoomRange",
    "Point",
    "Bounds",
    "HitTester",
    "node_radius",
    # Interaction and frames
    "InteractionController",
    "Gesture",
    "RenderLoop",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
    # Rendering
    "GraphRenderer",
    "Surface",
    "RecordingSurface",
    "SvgSurface",
    # Persistence
    "LayoutStore",
    "RecordStore",
    "MemoryStore",
    "JsonFileStore",
    "SqliteStore",
    "PersistedPosition",
    # Events
    "BaseEvent",
    "Event",
    "EventDispatcher",
    "EventProcessor",
    "TypedEventProcessor",
    "CallbackProcessor",
    "NodeClickEvent",
    "NodeDoubleClickEvent",
    "NodePinToggledEvent",
    "SelectionChangedEvent",
    "LayoutSettledEvent",
    # Errors
    "ForceGraphError",
    "MalformedInputError",
    "StorageError",
    "SurfaceUnavailableError",
]
