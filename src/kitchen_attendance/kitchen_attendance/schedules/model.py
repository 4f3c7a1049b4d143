from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time


@dataclass(frozen=True)
class ShiftWindow:
    """Operational window of one kitchen role (may wrap past midnight)."""

    start: time
    end: time
    description: str
    tasks: tuple[str, ...] = field(default_factory=tuple)

    @property
    def crosses_midnight(self) -> bool:
        return self.end <= self.start

    @property
    def label(self) -> str:
        return f"{self.start:%H:%M} - {self.end:%H:%M}"
