from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Literal, Protocol

from stockline_core.event_loop import DelayedTask, EventLoop
from stockline_core.events import InputEvent

if TYPE_CHECKING:
    from stockline_plot.chart import LineChart


LOGGER = logging.getLogger(__name__)

LONG_PRESS_TIMEOUT_S = 0.25

ScrubState = Literal["idle", "armed", "long_press_active", "rejected"]


class ScrubListener(Protocol):
    def on_scrubbed(self, x: float, y: float) -> None:
        ...

    def on_scrub_ended(self) -> None:
        ...


@dataclass
class _Contact:
    down_x: float
    down_y: float
    down_time: float
    pending: DelayedTask | None = None


class ScrubGestureDetector:
    """Turns a pointer contact into scrub notifications once it becomes a long press.

    A contact that moves past `touch_slop` before the long-press timeout is
    rejected and left for other handlers (e.g. scrolling). `on_touch` returns
    whether the event was consumed.
    """

    def __init__(
        self,
        listener: ScrubListener,
        loop: EventLoop,
        touch_slop: float,
        *,
        long_press_timeout_s: float = LONG_PRESS_TIMEOUT_S,
        enabled: bool = True,
    ) -> None:
        if touch_slop < 0:
            raise ValueError("touch_slop must be >= 0")
        if long_press_timeout_s <= 0:
            raise ValueError("long_press_timeout_s must be > 0")
        self._listener = listener
        self._loop = loop
        self._touch_slop = float(touch_slop)
        self._timeout_s = float(long_press_timeout_s)
        self._enabled = enabled
        self._state: ScrubState = "idle"
        self._contact: _Contact | None = None

    @property
    def state(self) -> ScrubState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        if not enabled and self._state != "idle":
            # The end of this contact would arrive while disabled and be dropped.
            self._on_end()
        self._enabled = enabled

    def on_touch(self, event: InputEvent) -> bool:
        if not self._enabled:
            return False
        if event.event_type == "pointer_down":
            return self._on_down(event)
        if event.event_type == "pointer_move":
            return self._on_move(event)
        if event.event_type in ("pointer_up", "pointer_cancel"):
            return self._on_end()
        return False

    def _on_down(self, event: InputEvent) -> bool:
        if self._state != "idle":
            # A new contact without an end for the previous one.
            LOGGER.debug("contact restarted in state %s", self._state)
            self._on_end()
        contact = _Contact(down_x=event.x, down_y=event.y, down_time=event.timestamp)
        contact.pending = self._loop.post_delayed(self._timeout_s, self._on_long_press)
        self._contact = contact
        self._transition("armed")
        return True

    def _on_move(self, event: InputEvent) -> bool:
        contact = self._contact
        if contact is None or self._state in ("idle", "rejected"):
            return False

        if self._state == "long_press_active":
            self._listener.on_scrubbed(event.x, event.y)
            return True

        elapsed = event.timestamp - contact.down_time
        if elapsed >= self._timeout_s:
            self._cancel_pending()
            self._transition("long_press_active")
            self._listener.on_scrubbed(event.x, event.y)
            return True

        dx = abs(event.x - contact.down_x)
        dy = abs(event.y - contact.down_y)
        if dx >= self._touch_slop or dy >= self._touch_slop:
            self._cancel_pending()
            self._transition("rejected")
            return False
        return True

    def _on_end(self) -> bool:
        self._cancel_pending()
        previous = self._state
        self._contact = None
        self._transition("idle")
        if previous in ("armed", "long_press_active"):
            self._listener.on_scrub_ended()
            return True
        return False

    def _on_long_press(self) -> None:
        contact = self._contact
        if contact is None or self._state != "armed" or not self._enabled:
            return
        contact.pending = None
        self._transition("long_press_active")
        self._listener.on_scrubbed(contact.down_x, contact.down_y)

    def _cancel_pending(self) -> None:
        contact = self._contact
        if contact is not None and contact.pending is not None:
            contact.pending.cancel()
            contact.pending = None

    def _transition(self, state: ScrubState) -> None:
        if state != self._state:
            LOGGER.debug("scrub gesture %s -> %s", self._state, state)
        self._state = state


def attach_scrub_detector(chart: LineChart, loop: EventLoop) -> ScrubGestureDetector:
    """Wire a detector configured from `chart.config` as the loop's pointer handler."""
    config = chart.config
    detector = ScrubGestureDetector(
        chart,
        loop,
        touch_slop=config.touch_slop * chart.density,
        long_press_timeout_s=config.long_press_timeout_s,
        enabled=config.scrub_enabled,
    )
    loop.set_handler(detector.on_touch)
    return detector
