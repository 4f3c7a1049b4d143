from __future__ import annotations

from ...core.exceptions import PolicyRejectionError
from ..model import ShiftVerdict
from .base import AttendanceStrategy, StatusDecision


class TooEarlyStrategy(AttendanceStrategy):
    """Check-in before the early window opens is refused outright."""

    def decide_clock_in(self, verdict: ShiftVerdict) -> StatusDecision:
        raise PolicyRejectionError(verdict)
