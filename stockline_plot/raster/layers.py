from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class DirtyState:
    """Redraw bookkeeping for a chart surface."""

    dirty: bool = True
    requests: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def mark(self, reason: str) -> None:
        self.dirty = True
        self.requests += 1
        self.metadata["reason"] = reason

    def clear(self) -> None:
        self.dirty = False
