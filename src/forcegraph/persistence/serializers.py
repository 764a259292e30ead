"""Serializers for layout record storage."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from forcegraph.exceptions import MalformedInputError


class Serializer(ABC):
    """Converts layout records to text for storage and back."""

    @abstractmethod
    def dumps(self, value: Any) -> str: ...

    @abstractmethod
    def loads(self, data: str) -> Any: ...


class JsonSerializer(Serializer):
    """JSON serializer (default). Human-readable and inspectable.

    Refuses NaN and infinity on write, so a corrupted coordinate never
    reaches storage. Unparseable stored text raises MalformedInputError.
    """

    def __init__(self, *, indent: int | None = None):
        self._indent = indent

    def dumps(self, value: Any) -> str:
        try:
            return json.dumps(value, allow_nan=False, indent=self._indent)
        except (TypeError, ValueError) as e:
            raise MalformedInputError(f"record is not JSON-serializable: {e}") from e

    def loads(self, data: str) -> Any:
        try:
            return json.loads(data)
        except (json.JSONDecodeError, TypeError) as e:
            raise MalformedInputError(f"stored record is not valid JSON: {e}") from e
