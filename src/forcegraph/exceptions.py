"""Exceptions for the forcegraph layout engine.

None of these reach the host during a frame or a pointer handler. Each one
marks a failure the engine recovers from locally.
"""

from __future__ import annotations


class ForceGraphError(Exception):
    """Base class for all forcegraph errors."""


class MalformedInputError(ForceGraphError):
    """Input data that cannot be used as given.

    Raised for concepts without an id, relationships without endpoints, and
    persisted records with non-finite or non-numeric coordinates. Callers
    skip the offending item or fall back to the default layout.

    Attributes:
        detail: What was wrong with the input
        key: Optional identifier of the offending record (node id, store key)
        message: Human-readable error message
    """

    def __init__(self, detail: str, *, key: str | None = None) -> None:
        self.detail = detail
        self.key = key
        self.message = f"{detail} (key={key!r})" if key is not None else detail
        super().__init__(self.message)


class StorageError(ForceGraphError):
    """A persistence backend failed to read or write.

    Wraps the backend's own exception so ``LayoutStore`` can log it and
    carry on with in-memory state.

    Attributes:
        operation: "read" or "write"
        key: Store key being accessed
        message: Human-readable error message
    """

    def __init__(self, operation: str, key: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.key = key
        self.message = f"Storage {operation} failed for key '{key}'"
        if cause is not None:
            self.message += f": {cause}"
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause


class SurfaceUnavailableError(ForceGraphError):
    """The drawing surface has no usable size yet.

    The render loop defers the frame until the surface reports
    positive dimensions.
    """

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        super().__init__(f"Surface is not sized yet ({width}x{height})")
