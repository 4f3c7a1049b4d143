from __future__ import annotations

from datetime import datetime, time

from ..common.datetime_utils import minutes_of_day
from ..core.constants import EARLY_CHECKIN_WINDOW_MINUTES, MANDATORY_ARRIVAL_MINUTES, MINUTES_PER_DAY
from ..core.enums import VerdictKind
from ..schedules.repository import ScheduleTable
from .model import ShiftVerdict


class ShiftStatusEvaluator:
    """Classify an arrival time against the volunteer's role schedule.

    Volunteers must arrive `arrival_buffer_minutes` before their shift starts;
    check-in opens `early_window_minutes` before that deadline. The deadline is
    wrapped once around midnight, shifts are assumed to be checked into within
    the same nominal 24h cycle as `now`.
    """

    def __init__(
        self,
        table: ScheduleTable,
        *,
        arrival_buffer_minutes: int = MANDATORY_ARRIVAL_MINUTES,
        early_window_minutes: int = EARLY_CHECKIN_WINDOW_MINUTES,
    ):
        self._table = table
        self._buffer = int(arrival_buffer_minutes)
        self._early_window = int(early_window_minutes)

    def arrival_deadline(self, start: time) -> int:
        deadline = minutes_of_day(start) - self._buffer
        if deadline < 0:
            deadline += MINUTES_PER_DAY
        return deadline

    def evaluate(self, role: str, now: datetime) -> ShiftVerdict:
        window = self._table.lookup(role)
        if window is None:
            return ShiftVerdict(VerdictKind.OK, "Role umum")

        diff = minutes_of_day(now) - self.arrival_deadline(window.start)

        if diff < -self._early_window:
            return ShiftVerdict(VerdictKind.TOO_EARLY, f"Terlalu awal (Max {self._early_label()} sebelum shift)")
        if diff > 0:
            return ShiftVerdict(
                VerdictKind.LATE,
                f"Terlambat! Wajib hadir {self._buffer} menit sebelum {window.start:%H:%M}",
            )
        return ShiftVerdict(VerdictKind.OK, "Tepat Waktu")

    def _early_label(self) -> str:
        if self._early_window % 60 == 0:
            return f"{self._early_window // 60} jam"
        return f"{self._early_window} menit"
