from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import pytest

from src.kitchen_attendance.kitchen_attendance.ai.ports import OperationalAnalysis
from src.kitchen_attendance.kitchen_attendance.attendance.model import AttendanceRecord, LocationFix
from src.kitchen_attendance.kitchen_attendance.core.enums import AttendanceStatus, EventType
from src.kitchen_attendance.kitchen_attendance.core.exceptions import ExternalServiceError, ValidationError
from src.kitchen_attendance.kitchen_attendance.reports.service import ReportService


class FakeAttendanceRepo:
    def __init__(self, rows):
        self._rows = tuple(rows)

    def records(self):
        return self._rows

    def today(self, now):
        return tuple(r for r in self._rows if r.timestamp.date() == now.date())


class FakeVolunteerRepo:
    def __init__(self, count):
        self._count = count

    def list_all(self):
        return tuple(range(self._count))


class FakeAnalyzer:
    def __init__(self, error=None):
        self.error = error
        self.last_args = None

    async def analyze(self, clock_ins, total_volunteers):
        self.last_args = (list(clock_ins), total_volunteers)
        if self.error:
            raise self.error
        return OperationalAnalysis(summary="ok", attendance_rate=50.0, role_breakdown={"Cook": 1}, predicted_portions=300)


class FakeGenerator:
    def __init__(self, text="Laporan harian", error=None):
        self.text = text
        self.error = error

    async def generate(self, records):
        if self.error:
            raise self.error
        return self.text


def _record(record_id, when, event_type=EventType.CLOCK_IN):
    return AttendanceRecord(
        id=record_id,
        volunteer_id=record_id,
        volunteer_name=f"R{record_id}",
        event_type=event_type,
        status=AttendanceStatus.ON_TIME,
        timestamp=when,
        photo_reference="",
        location=LocationFix(0.0, 0.0, 0.0),
        verification_note="",
        is_verified=True,
        activity="Cook",
    )


def test_analysis_gets_only_todays_clock_ins(fixed_now):
    rows = [
        _record("1", fixed_now),
        _record("2", fixed_now, EventType.CLOCK_OUT),
        _record("3", fixed_now - timedelta(days=1)),
    ]
    analyzer = FakeAnalyzer()
    svc = ReportService(FakeAttendanceRepo(rows), FakeVolunteerRepo(4), analyzer=analyzer, generator=FakeGenerator())

    analysis = asyncio.run(svc.dashboard_analysis(now=fixed_now))

    assert analysis.predicted_portions == 300
    assert [r.id for r in analyzer.last_args[0]] == ["1"]
    assert analyzer.last_args[1] == 4


def test_analysis_falls_back_when_service_fails(fixed_now):
    svc = ReportService(
        FakeAttendanceRepo([]),
        FakeVolunteerRepo(2),
        analyzer=FakeAnalyzer(error=ExternalServiceError("offline")),
        generator=FakeGenerator(),
    )

    analysis = asyncio.run(svc.dashboard_analysis(now=fixed_now))

    assert analysis.summary == "AI Analysis unavailable currently."
    assert analysis.attendance_rate == 0.0
    assert analysis.role_breakdown == {}
    assert analysis.anomalies == ()


def test_daily_report_requires_records():
    svc = ReportService(FakeAttendanceRepo([]), FakeVolunteerRepo(0), analyzer=FakeAnalyzer(), generator=FakeGenerator())

    with pytest.raises(ValidationError):
        asyncio.run(svc.daily_report())


def test_daily_report_text_and_fallback(fixed_now):
    rows = [_record("1", fixed_now)]
    ok = ReportService(FakeAttendanceRepo(rows), FakeVolunteerRepo(1), analyzer=FakeAnalyzer(), generator=FakeGenerator())
    broken = ReportService(
        FakeAttendanceRepo(rows),
        FakeVolunteerRepo(1),
        analyzer=FakeAnalyzer(),
        generator=FakeGenerator(error=ExternalServiceError("offline")),
    )

    assert asyncio.run(ok.daily_report()) == "Laporan harian"
    assert asyncio.run(broken.daily_report()) == "Error generating report."
