from stockline_ui.gestures import (
    LONG_PRESS_TIMEOUT_S,
    ScrubGestureDetector,
    ScrubListener,
    ScrubState,
    attach_scrub_detector,
)
from stockline_ui.interaction import parse_hdi_pointer_event

__all__ = [
    "LONG_PRESS_TIMEOUT_S",
    "ScrubGestureDetector",
    "ScrubListener",
    "ScrubState",
    "attach_scrub_detector",
    "parse_hdi_pointer_event",
]
