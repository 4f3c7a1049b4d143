from __future__ import annotations

from typing import Sequence

from ..attendance.model import AttendanceRecord
from ..core.exceptions import ExternalServiceError
from .ports import OperationalAnalysis, VerificationResult


class OfflineAI:
    """Stand-in for every AI collaborator when no API key is configured.

    Each call fails like an unreachable service, so callers take their
    documented fallback path.
    """

    async def verify(self, image_jpeg: bytes) -> VerificationResult:
        raise ExternalServiceError("AI service is not configured")

    async def analyze(self, clock_ins: Sequence[AttendanceRecord], total_volunteers: int) -> OperationalAnalysis:
        raise ExternalServiceError("AI service is not configured")

    async def generate(self, records: Sequence[AttendanceRecord]) -> str:
        raise ExternalServiceError("AI service is not configured")
