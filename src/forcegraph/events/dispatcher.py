"""Event dispatcher for one graph view."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from forcegraph.events.processor import EventProcessor
    from forcegraph.events.types import Event

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Delivers a view's events to its processors, in registration order.

    Pointer handlers and frames call ``emit`` directly, so by default a
    failing processor is logged and counted and the remaining processors
    still run. With ``strict=True`` the first failure propagates.

    After ``shutdown`` the dispatcher is closed: processors are released
    and later events are dropped.

    Args:
        processors: Initial processors (duplicates are registered once)
        strict: Re-raise processor failures
    """

    def __init__(
        self,
        processors: list[EventProcessor] | None = None,
        *,
        strict: bool = False,
    ) -> None:
        self._processors: list[EventProcessor] = []
        self._strict = strict
        self._closed = False
        self.failures = 0
        for processor in processors or ():
            self.add(processor)

    @property
    def active(self) -> bool:
        """True while open with at least one registered processor."""
        return not self._closed and bool(self._processors)

    def add(self, processor: EventProcessor) -> None:
        """Register a processor. Adding the same processor twice is a no-op."""
        if any(p is processor for p in self._processors):
            return
        self._processors.append(processor)

    def remove(self, processor: EventProcessor) -> None:
        self._processors = [p for p in self._processors if p is not processor]

    def emit(self, event: Event) -> None:
        """Send *event* to every processor synchronously."""
        if self._closed:
            logger.debug("Dropping %s after shutdown", type(event).__name__)
            return
        for processor in list(self._processors):
            try:
                processor.on_event(event)
            except Exception:
                if self._strict:
                    raise
                self.failures += 1
                logger.warning(
                    "EventProcessor %s failed on %s from %s view",
                    processor,
                    type(event).__name__,
                    event.view,
                    exc_info=True,
                )

    def shutdown(self) -> None:
        """Shut down every processor once. Best-effort unless strict.

        In strict mode every processor is still shut down and the first
        failure is raised afterwards.
        """
        if self._closed:
            return
        self._closed = True
        processors, self._processors = self._processors, []
        first_error: BaseException | None = None
        for processor in processors:
            try:
                processor.shutdown()
            except Exception as e:
                if self._strict:
                    first_error = first_error or e
                else:
                    logger.warning("EventProcessor %s failed during shutdown", processor, exc_info=True)
        if first_error is not None:
            raise first_error
