from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..model import ShiftVerdict
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in: still recorded, with the timing message appended to the note."""

    def decide_clock_in(self, verdict: ShiftVerdict) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, note=f" [{verdict.message}]")
