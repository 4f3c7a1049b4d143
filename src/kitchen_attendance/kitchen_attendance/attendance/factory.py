from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import VerdictKind
from .model import ShiftVerdict
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.too_early_strategy import TooEarlyStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on the shift verdict."""

    def for_clock_in(self, verdict: ShiftVerdict) -> AttendanceStrategy:
        if verdict.kind == VerdictKind.TOO_EARLY:
            return TooEarlyStrategy()
        if verdict.kind == VerdictKind.LATE:
            return LateStrategy()
        return NormalStrategy()

    def for_clock_out(self) -> AttendanceStrategy:
        # Clock-out has no timing policy yet; EARLY_LEAVE/OVERTIME are never produced.
        return NormalStrategy()
