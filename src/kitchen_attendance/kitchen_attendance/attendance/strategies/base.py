from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.enums import AttendanceStatus
from ..model import ShiftVerdict


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: str = ""


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_clock_in(self, verdict: ShiftVerdict) -> StatusDecision:
        raise NotImplementedError

    def decide_clock_out(self) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ON_TIME)
