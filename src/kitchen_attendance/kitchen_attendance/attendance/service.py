from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import now_local
from ..core.constants import GENERAL_ROLE
from ..core.enums import AttendanceStatus, EventType
from ..volunteers.repository import VolunteerRepository
from .local_attendance_repository import AttendanceRecordStore
from .model import AttendanceRecord

HISTORY_CSV_FIELDS = [
    "id",
    "date",
    "time",
    "volunteer_id",
    "name",
    "activity",
    "type",
    "status",
    "verified",
    "latitude",
    "longitude",
    "note",
]


@dataclass(frozen=True)
class DashboardStats:
    registered_volunteers: int
    active_volunteers: int
    late_count: int
    records_today: int


class AttendanceService:
    """Read-side use cases over the attendance log (dashboard, history, export)."""

    def __init__(self, attendance: AttendanceRecordStore, volunteers: VolunteerRepository):
        self._attendance = attendance
        self._volunteers = volunteers

    def dashboard_stats(self, *, now: datetime | None = None) -> DashboardStats:
        now = now or now_local()
        return DashboardStats(
            registered_volunteers=len(self._volunteers.list_all()),
            active_volunteers=self._attendance.active_volunteer_count(now),
            late_count=self._attendance.late_count(now),
            records_today=len(self._attendance.today(now)),
        )

    def history_rows(self, *, limit: int | None = None) -> list[dict]:
        records = self._attendance.records()
        if limit is not None:
            records = records[:limit]
        return [self._to_ui(r) for r in records]

    def history_csv(self) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=HISTORY_CSV_FIELDS)
        writer.writeheader()
        for r in self._attendance.records():
            writer.writerow(
                {
                    "id": r.id,
                    "date": r.timestamp.strftime("%Y-%m-%d"),
                    "time": r.timestamp.strftime("%H:%M:%S"),
                    "volunteer_id": r.volunteer_id,
                    "name": r.volunteer_name,
                    "activity": r.activity or GENERAL_ROLE,
                    "type": r.event_type.value,
                    "status": r.status.value,
                    "verified": "yes" if r.is_verified else "no",
                    "latitude": r.location.latitude,
                    "longitude": r.location.longitude,
                    "note": r.verification_note,
                }
            )
        return out.getvalue().encode("utf-8-sig")

    def _to_ui(self, r: AttendanceRecord) -> dict:
        if r.event_type == EventType.CLOCK_IN:
            label, css = ("TERLAMBAT", "bg-danger") if r.status == AttendanceStatus.LATE else ("TEPAT WAKTU", "bg-success")
        elif r.status == AttendanceStatus.EARLY_LEAVE:
            label, css = "PULANG CEPAT", "bg-warning text-dark"
        else:
            label, css = "SELESAI", "bg-secondary"

        return {
            "id": r.id,
            "date": r.timestamp.strftime("%Y-%m-%d"),
            "time": r.timestamp.strftime("%H:%M:%S"),
            "name": r.volunteer_name,
            "activity": r.activity or GENERAL_ROLE,
            "type": "MASUK" if r.event_type == EventType.CLOCK_IN else "PULANG",
            "status": label,
            "css_class": css,
            "verified": r.is_verified,
            "note": r.verification_note,
            "photo": r.photo_reference,
            "location": {
                "latitude": r.location.latitude,
                "longitude": r.location.longitude,
                "accuracy": r.location.accuracy,
            },
        }
