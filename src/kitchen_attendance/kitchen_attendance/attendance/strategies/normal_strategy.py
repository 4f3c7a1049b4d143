from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..model import ShiftVerdict
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in, normal check-out."""

    def decide_clock_in(self, verdict: ShiftVerdict) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ON_TIME)
