"""Shared fixtures for forcegraph tests."""

from __future__ import annotations

import random

import pytest

from forcegraph.graph import Concept, Edge, GraphModel
from forcegraph.viewport import Bounds


@pytest.fixture
def bounds():
    return Bounds(600, 400)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def star_concepts():
    """Hub "h" plus five leaves, each joined to the hub at full strength."""
    concepts = [Concept("h", "Hub", "topic", mention_count=5)]
    concepts += [Concept(f"l{i}", f"Leaf {i}", "person") for i in range(5)]
    edges = [Edge("h", f"l{i}", 1.0) for i in range(5)]
    return concepts, edges


@pytest.fixture
def star_model(star_concepts, bounds, rng):
    concepts, edges = star_concepts
    return GraphModel.build(concepts, edges, {}, bounds=bounds, rng=rng)
