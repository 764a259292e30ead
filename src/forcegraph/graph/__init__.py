"""Concept graph model for the layout engine."""

from forcegraph.graph.loader import load_graph_file, parse_graph
from forcegraph.graph.model import GraphModel, circle_position, initialize_graph
from forcegraph.graph.types import Concept, Edge, Node, NodeState, Relationship

__all__ = [
    "Concept",
    "Edge",
    "GraphModel",
    "Node",
    "NodeState",
    "Relationship",
    "circle_position",
    "initialize_graph",
    "load_graph_file",
    "parse_graph",
]
