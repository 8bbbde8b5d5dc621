from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


EventType = Literal[
    "pointer_down",
    "pointer_move",
    "pointer_up",
    "pointer_cancel",
]

POINTER_EVENT_TYPES: frozenset[str] = frozenset(
    {"pointer_down", "pointer_move", "pointer_up", "pointer_cancel"}
)


@dataclass(frozen=True)
class InputEvent:
    """A single pointer contact event in surface pixel coordinates.

    `timestamp` is in seconds on the same clock the event loop schedules against.
    """

    event_type: EventType
    timestamp: float
    x: float
    y: float

    def __post_init__(self) -> None:
        if self.event_type not in POINTER_EVENT_TYPES:
            raise ValueError(f"unsupported event type: {self.event_type!r}")
