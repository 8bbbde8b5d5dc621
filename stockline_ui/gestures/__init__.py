from .scrub import (
    LONG_PRESS_TIMEOUT_S,
    ScrubGestureDetector,
    ScrubListener,
    ScrubState,
    attach_scrub_detector,
)

__all__ = [
    "LONG_PRESS_TIMEOUT_S",
    "ScrubGestureDetector",
    "ScrubListener",
    "ScrubState",
    "attach_scrub_detector",
]
