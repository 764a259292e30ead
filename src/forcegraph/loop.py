"""Render loop: simulate, then draw, one frame at a time.

The loop runs at full rate (one frame per ``frame_interval``) until the
layout settles, then drops to one frame per ``throttle_interval``. A drag
in progress always gets full rate. Frames are driven by a ``Scheduler``
so the same loop runs on an asyncio event loop or on a manual test clock.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from forcegraph.config import LoopConfig
from forcegraph.exceptions import SurfaceUnavailableError

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    """Runs one callback after a delay. Scheduling again replaces the pending callback."""

    def schedule(self, callback: Callable[[], None], delay: float) -> None: ...

    def cancel(self) -> None: ...


class ManualScheduler:
    """Scheduler on a virtual clock, advanced explicitly. For tests and headless runs.

    Example:
        >>> calls = []
        >>> scheduler = ManualScheduler()
        >>> scheduler.schedule(lambda: calls.append(scheduler.now), 0.5)
        >>> scheduler.advance(1.0)
        >>> calls
        [0.5]
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._pending: tuple[float, Callable[[], None]] | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def next_delay(self) -> float | None:
        """Time until the pending callback is due, or None."""
        return None if self._pending is None else self._pending[0] - self.now

    def schedule(self, callback: Callable[[], None], delay: float) -> None:
        self._pending = (self.now + max(delay, 0.0), callback)

    def cancel(self) -> None:
        self._pending = None

    def step(self) -> bool:
        """Jump to the pending callback and run it. Returns False if nothing was pending."""
        if self._pending is None:
            return False
        due, callback = self._pending
        self._pending = None
        self.now = max(self.now, due)
        callback()
        return True

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running every callback that falls due on the way."""
        target = self.now + seconds
        while self._pending is not None and self._pending[0] <= target:
            self.step()
        self.now = target


class AsyncioScheduler:
    """Scheduler backed by ``loop.call_later`` on the running event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    def schedule(self, callback: Callable[[], None], delay: float) -> None:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self.cancel()
        self._handle = self._loop.call_later(max(delay, 0.0), callback)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class RenderLoop:
    """Drives simulate/draw frames through a scheduler.

    Args:
        simulate: Advance physics by one tick
        draw: Paint the current state; may raise SurfaceUnavailableError
        scheduler: Where the next frame gets scheduled
        config: Timing and settle detection (default: LoopConfig())
        is_ready: False while the surface is unsized; the frame is deferred
        is_dragging: True while a node drag is in progress
        energy: Current kinetic energy, used by the "energy" settle mode
        on_settled: Called once with (frames, energy) when the loop throttles

    Example:
        >>> ticks = []
        >>> scheduler = ManualScheduler()
        >>> loop = RenderLoop(lambda: ticks.append(1), lambda: None, scheduler)
        >>> loop.start()
        >>> scheduler.advance(1.0)
        >>> loop.frames > 0
        True
    """

    def __init__(
        self,
        simulate: Callable[[], None],
        draw: Callable[[], None],
        scheduler: Scheduler,
        *,
        config: LoopConfig | None = None,
        is_ready: Callable[[], bool] | None = None,
        is_dragging: Callable[[], bool] | None = None,
        energy: Callable[[], float] | None = None,
        on_settled: Callable[[int, float], None] | None = None,
    ) -> None:
        self.config = config or LoopConfig()
        self._simulate = simulate
        self._draw = draw
        self._scheduler = scheduler
        self._is_ready = is_ready or (lambda: True)
        self._is_dragging = is_dragging or (lambda: False)
        self._energy = energy or (lambda: 0.0)
        self._on_settled = on_settled

        self.frames = 0
        self.deferred = 0
        self.settled = False
        self.last_delay: float | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Schedule the first frame. No-op if already running."""
        if self._running:
            return
        self._running = True
        logger.debug("Render loop started")
        self._schedule(0.0)

    def stop(self) -> None:
        """Cancel the pending frame. A stopped loop never runs another frame."""
        if not self._running:
            return
        self._running = False
        self._scheduler.cancel()
        logger.debug("Render loop stopped after %d frames", self.frames)

    def restart_settling(self) -> None:
        """Return to full rate, e.g. after the node set is replaced."""
        self.frames = 0
        self.settled = False

    def _schedule(self, delay: float) -> None:
        self.last_delay = delay
        self._scheduler.schedule(self._frame, delay)

    def _defer(self, reason: str) -> None:
        self.deferred += 1
        logger.debug("Deferring frame: %s", reason)
        self._schedule(self.config.frame_interval)

    def _frame(self) -> None:
        if not self._running:
            return
        if not self._is_ready():
            self._defer("surface not sized")
            return

        try:
            self._simulate()
            self._draw()
        except SurfaceUnavailableError as e:
            self._defer(str(e))
            return
        except Exception:
            logger.error("Frame %d failed", self.frames + 1, exc_info=True)

        self.frames += 1
        if not self.settled and self._check_settled():
            self.settled = True
            energy = self._energy()
            logger.debug("Layout settled after %d frames (energy %.3f)", self.frames, energy)
            if self._on_settled is not None:
                self._on_settled(self.frames, energy)

        if self._running:
            full_rate = not self.settled or self._is_dragging()
            self._schedule(self.config.frame_interval if full_rate else self.config.throttle_interval)

    def _check_settled(self) -> bool:
        cfg = self.config
        if cfg.settle_mode == "energy":
            return self.frames >= cfg.min_settle_frames and self._energy() < cfg.energy_threshold
        return self.frames >= cfg.settle_frames
