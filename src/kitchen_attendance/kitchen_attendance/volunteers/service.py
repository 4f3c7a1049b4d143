from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.ids import next_time_id
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..schedules.service import ScheduleService
from .model import Volunteer
from .repository import VolunteerRepository


class VolunteerService:
    """Use case: register and find volunteers."""

    def __init__(self, volunteers: VolunteerRepository, schedules: ScheduleService):
        self._volunteers = volunteers
        self._schedules = schedules

    def list_all(self) -> Sequence[Volunteer]:
        return self._volunteers.list_all()

    def get(self, volunteer_id: str) -> Volunteer:
        volunteer = self._volunteers.get_by_id(str(volunteer_id))
        if not volunteer:
            raise ValidationError("Relawan tidak ditemukan")
        return volunteer

    def search(self, query: Optional[str]) -> list[Volunteer]:
        needle = (query or "").strip().lower()
        return [v for v in self._volunteers.list_all() if needle in v.name.lower()]

    def register(self, *, name: str, phone: str, role: Optional[str], now: datetime | None = None) -> Volunteer:
        now = now or now_local()
        name = require_non_empty(name, "Nama lengkap")
        phone = require_non_empty(phone, "Nomor HP")

        existing = self._volunteers.list_all()
        volunteer = Volunteer(
            id=next_time_id(now, (v.id for v in existing)),
            name=name,
            phone=phone,
            default_role=self._schedules.normalize_role(role),
            join_date=now,
        )
        self._volunteers.add(volunteer)
        return volunteer
