from __future__ import annotations

from typing import Mapping

from stockline_core.events import InputEvent


_CONTACT_PHASES: dict[str, str] = {
    "pointer_down": "pointer_down",
    "mouse_down": "pointer_down",
    "touch_start": "pointer_down",
    "pointer_move": "pointer_move",
    "mouse_move": "pointer_move",
    "mouse_drag": "pointer_move",
    "trackpad_move": "pointer_move",
    "touch_move": "pointer_move",
    "pointer_up": "pointer_up",
    "mouse_up": "pointer_up",
    "touch_end": "pointer_up",
    "pointer_cancel": "pointer_cancel",
    "touch_cancel": "pointer_cancel",
}


def parse_hdi_pointer_event(event_type: str, payload: object, timestamp: float) -> InputEvent | None:
    """Normalize a raw HDI pointer event into a contact `InputEvent`.

    Returns None for event types that are not pointer contact phases or for
    payloads without a usable position. Cancel events may omit the position.
    """

    phase = _CONTACT_PHASES.get(event_type)
    if phase is None:
        return None
    if not isinstance(payload, Mapping):
        payload = {}
    try:
        x = float(payload["x"])
        y = float(payload["y"])
    except (KeyError, TypeError, ValueError):
        if phase != "pointer_cancel":
            return None
        x = y = 0.0
    return InputEvent(event_type=phase, timestamp=float(timestamp), x=x, y=y)  # type: ignore[arg-type]
