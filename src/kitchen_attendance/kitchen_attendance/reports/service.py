from __future__ import annotations

from datetime import datetime

from ..ai.fallback import call_with_fallback
from ..ai.ports import ANALYSIS_UNAVAILABLE, REPORT_UNAVAILABLE, OperationalAnalysis, OperationalAnalyzer, ReportGenerator
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_AI_TIMEOUT_SECONDS
from ..core.exceptions import ValidationError
from ..volunteers.repository import VolunteerRepository


class ReportService:
    """AI-backed operational summaries; every call degrades to a neutral value."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        volunteers: VolunteerRepository,
        *,
        analyzer: OperationalAnalyzer,
        generator: ReportGenerator,
        timeout: float = DEFAULT_AI_TIMEOUT_SECONDS,
    ):
        self._attendance = attendance
        self._volunteers = volunteers
        self._analyzer = analyzer
        self._generator = generator
        self._timeout = float(timeout)

    async def dashboard_analysis(self, *, now: datetime | None = None) -> OperationalAnalysis:
        now = now or now_local()
        clock_ins = [r for r in self._attendance.today(now) if r.is_clock_in]
        return await call_with_fallback(
            self._analyzer.analyze(clock_ins, len(self._volunteers.list_all())),
            timeout=self._timeout,
            fallback=ANALYSIS_UNAVAILABLE,
            label="operational analysis",
        )

    async def daily_report(self) -> str:
        records = self._attendance.records()
        if not records:
            raise ValidationError("Belum ada data relawan untuk dilaporkan")
        return await call_with_fallback(
            self._generator.generate(records),
            timeout=self._timeout,
            fallback=REPORT_UNAVAILABLE,
            label="daily report",
        )
