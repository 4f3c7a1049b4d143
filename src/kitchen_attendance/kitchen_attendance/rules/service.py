from __future__ import annotations

from ..core.constants import EARLY_CHECKIN_WINDOW_MINUTES, MANDATORY_ARRIVAL_MINUTES, RULES_ACCEPTED_KEY
from ..schedules.service import ScheduleService
from ..storage.base import KeyValueStorage


class RulesService:
    """One-time acknowledgement of the kitchen rules shown at start-up."""

    def __init__(
        self,
        storage: KeyValueStorage,
        schedules: ScheduleService,
        *,
        arrival_buffer_minutes: int = MANDATORY_ARRIVAL_MINUTES,
        early_window_minutes: int = EARLY_CHECKIN_WINDOW_MINUTES,
    ):
        self._storage = storage
        self._schedules = schedules
        self._buffer = arrival_buffer_minutes
        self._early_window = early_window_minutes

    def needs_acknowledgement(self) -> bool:
        return not self._storage.get(RULES_ACCEPTED_KEY)

    def accept(self) -> None:
        self._storage.set(RULES_ACCEPTED_KEY, "true")

    def rules(self) -> dict:
        return {
            "mandatory": [
                f"Relawan WAJIB HADIR {self._buffer} MENIT SEBELUM jam operasional role masing-masing.",
                f"Absen masuk paling cepat {self._early_window} menit sebelum batas kehadiran.",
                "Jika nama Anda tidak ada di database, wajib lapor admin untuk input data baru.",
                "APD (Masker, Apron, Hairnet) wajib dipakai sebelum foto absensi.",
            ],
            "policy": [
                "Kehadiran minimal 80% untuk bonus insentif.",
                "Sistem AI akan mendeteksi otomatis jika Anda terlambat atau pulang awal.",
            ],
            "schedules": self._schedules.list_rows(),
        }
