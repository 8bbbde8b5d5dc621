from .event_loop import Clock, DelayedTask, EventLoop, ManualClock, MonotonicClock
from .events import POINTER_EVENT_TYPES, EventType, InputEvent

__all__ = [
    "Clock",
    "DelayedTask",
    "EventLoop",
    "EventType",
    "InputEvent",
    "ManualClock",
    "MonotonicClock",
    "POINTER_EVENT_TYPES",
]
