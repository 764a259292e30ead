"""Parse the extraction service's graph payload."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from forcegraph.exceptions import MalformedInputError
from forcegraph.graph.types import Concept, Edge

logger = logging.getLogger(__name__)


def parse_graph(payload: Any) -> tuple[list[Concept], list[Edge]]:
    """Turn ``{"concepts": [...], "relationships": [...]}`` into typed lists.

    Malformed entries are logged and skipped; the rest of the graph loads.

    Raises:
        MalformedInputError: If the payload itself is not an object.
    """
    if not isinstance(payload, dict):
        raise MalformedInputError(f"graph payload must be an object, got {type(payload).__name__}")

    concepts: list[Concept] = []
    for raw in payload.get("concepts") or []:
        try:
            concepts.append(Concept.from_dict(raw))
        except MalformedInputError as e:
            logger.warning("Skipping concept: %s", e)

    edges: list[Edge] = []
    for raw in payload.get("relationships") or []:
        try:
            edges.append(Edge.from_dict(raw))
        except MalformedInputError as e:
            logger.warning("Skipping relationship: %s", e)

    return concepts, edges


def load_graph_file(path: str | Path) -> tuple[list[Concept], list[Edge]]:
    """Read a graph payload from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        MalformedInputError: If the file is not valid JSON or not an object.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"invalid JSON: {e}", key=str(path)) from e
    return parse_graph(payload)
