from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence

from ..attendance.model import AttendanceRecord


@dataclass(frozen=True)
class VerificationResult:
    is_verified: bool
    note: str


@dataclass(frozen=True)
class OperationalAnalysis:
    summary: str
    attendance_rate: float
    role_breakdown: dict[str, int] = field(default_factory=dict)
    predicted_portions: int = 0
    anomalies: tuple[str, ...] = ()

    def as_dict(self) -> dict:
        return {
            "summary": self.summary,
            "attendanceRate": self.attendance_rate,
            "roleBreakdown": dict(self.role_breakdown),
            "predictedPortions": self.predicted_portions,
            "anomalies": list(self.anomalies),
        }


VERIFICATION_UNAVAILABLE = VerificationResult(is_verified=True, note="AI Verification unavailable (Offline)")
ANALYSIS_UNAVAILABLE = OperationalAnalysis(summary="AI Analysis unavailable currently.", attendance_rate=0.0)
REPORT_UNAVAILABLE = "Error generating report."


class PhotoVerifier(Protocol):
    async def verify(self, image_jpeg: bytes) -> VerificationResult:
        raise NotImplementedError


class OperationalAnalyzer(Protocol):
    async def analyze(self, clock_ins: Sequence[AttendanceRecord], total_volunteers: int) -> OperationalAnalysis:
        raise NotImplementedError


class ReportGenerator(Protocol):
    async def generate(self, records: Sequence[AttendanceRecord]) -> str:
        raise NotImplementedError
