"""
Render and preview scheduling.

This module owns the timers that turn bursts of state changes into at most
one repaint per frame tick and one preview regeneration per quiet period,
without any knowledge of what is being rendered.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer

from ..config import POINTER_THROTTLE_MS, PREVIEW_DEBOUNCE_MS, RENDER_FRAME_INTERVAL_MS


class UpdateScheduler:
    """Coalesces render requests per frame and debounces preview requests."""

    def __init__(
        self,
        *,
        on_render: Callable[[], None],
        on_preview: Callable[[], None],
        frame_interval_ms: int = RENDER_FRAME_INTERVAL_MS,
        preview_delay_ms: int = PREVIEW_DEBOUNCE_MS,
        timer_parent: QObject | None = None,
    ) -> None:
        """Initialize the scheduler.

        Parameters
        ----------
        on_render:
            Callback for the coalesced repaint.
        on_preview:
            Callback for the debounced preview regeneration.
        frame_interval_ms:
            Frame tick; repaint requests inside one tick collapse into one.
        preview_delay_ms:
            Quiet period the preview channel waits for after the last request.
        timer_parent:
            Parent QObject for timers (optional).
        """
        self._on_render = on_render
        self._on_preview = on_preview

        # Render timer - fires once per frame tick while a repaint is pending
        self._render_timer = QTimer(timer_parent)
        self._render_timer.setSingleShot(True)
        self._render_timer.setInterval(int(frame_interval_ms))
        self._render_timer.timeout.connect(self._handle_render_tick)

        # Preview timer - restarted by every request
        self._preview_timer = QTimer(timer_parent)
        self._preview_timer.setSingleShot(True)
        self._preview_timer.setInterval(int(preview_delay_ms))
        self._preview_timer.timeout.connect(self._handle_preview_timeout)

    def render_pending(self) -> bool:
        return self._render_timer.isActive()

    def preview_pending(self) -> bool:
        return self._preview_timer.isActive()

    def request_render(self) -> None:
        """Schedule a repaint for the next frame tick unless one is pending."""
        if self._render_timer.isActive():
            return
        self._render_timer.start()

    def request_preview(self) -> None:
        """Schedule a preview regeneration, restarting the quiet period."""
        self._preview_timer.start()

    def flush_preview(self) -> None:
        """Cancel any pending preview and regenerate now."""
        self._preview_timer.stop()
        self._on_preview()

    def cancel(self) -> None:
        """Drop every pending request."""
        self._render_timer.stop()
        self._preview_timer.stop()

    def _handle_render_tick(self) -> None:
        self._on_render()

    def _handle_preview_timeout(self) -> None:
        self._on_preview()


class PointerThrottle:
    """Drops pointer-move events that arrive faster than one per interval."""

    def __init__(
        self,
        interval_ms: float = POINTER_THROTTLE_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._interval = float(interval_ms) / 1000.0
        self._clock = clock
        self._last: float | None = None

    def accept(self) -> bool:
        """Return True and remember the time if the event may be handled."""
        now = self._clock()
        if self._last is not None and now - self._last < self._interval:
            return False
        self._last = now
        return True

    def reset(self) -> None:
        self._last = None


__all__ = ["PointerThrottle", "UpdateScheduler"]
