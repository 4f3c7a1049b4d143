from __future__ import annotations

from datetime import time
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..common.datetime_utils import parse_hhmm
from ..core.exceptions import ValidationError
from .model import ShiftWindow
from .repository import ScheduleTable

DEFAULT_JOB_SCHEDULES: Mapping[str, ShiftWindow] = MappingProxyType(
    {
        "Gudang": ShiftWindow(
            start=time(18, 0),
            end=time(2, 0),
            description="Persiapan Bahan Baku (Malam)",
            tasks=("Bongkar Muat Sayur", "Kupas & Potong", "QC Bahan"),
        ),
        "Helper": ShiftWindow(
            start=time(0, 0),
            end=time(8, 0),
            description="Helper Masak & Streamer (3 Shift)",
            tasks=("Helper Umum (2 org)", "Potong Ayam (1 org)", "Streamer Nasi (1 org)"),
        ),
        "Cook": ShiftWindow(
            start=time(1, 0),
            end=time(9, 0),
            description="Tim Utama Memasak",
            tasks=("Tahap 1 (02:00-05:00)", "Tahap 2 (05:00-08:00)", "Seasoning"),
        ),
        "Pemorsian": ShiftWindow(
            start=time(3, 0),
            end=time(11, 0),
            description="Packing & Plating",
            tasks=("Tahap 1 (03:00-06:00)", "Tahap 2 (06:00-10:00)"),
        ),
        "Driver": ShiftWindow(
            start=time(7, 0),
            end=time(15, 0),
            description="Distribusi Makanan",
            tasks=("Muat Barang", "Jalan Tahap 1 (07:30)", "Jalan Tahap 2 (10:30)"),
        ),
        "Cuci Ompreng": ShiftWindow(
            start=time(13, 30),
            end=time(21, 30),
            description="Sanitasi & Kebersihan",
            tasks=("Cuci Ompreng", "Sterilisasi Alat", "Bersih Area"),
        ),
    }
)


class StaticScheduleTable(ScheduleTable):
    """Schedule table configured once at start-up and never edited."""

    def __init__(self, schedules: Mapping[str, ShiftWindow] | None = None):
        self._schedules = MappingProxyType(dict(DEFAULT_JOB_SCHEDULES if schedules is None else schedules))

    @classmethod
    def from_config(cls, raw: Mapping[str, Mapping]) -> "StaticScheduleTable":
        """Build a table from {"Role": {"start": "HH:MM", "end": "HH:MM", ...}}."""

        schedules: dict[str, ShiftWindow] = {}
        for role, entry in raw.items():
            try:
                schedules[str(role)] = ShiftWindow(
                    start=parse_hhmm(entry["start"]),
                    end=parse_hhmm(entry["end"]),
                    description=str(entry.get("description", "")),
                    tasks=tuple(str(t) for t in entry.get("tasks", ())),
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise ValidationError(f"Jadwal role {role!r} tidak valid") from exc
        return cls(schedules)

    def lookup(self, role: str) -> Optional[ShiftWindow]:
        return self._schedules.get(role)

    def roles(self) -> list[str]:
        return list(self._schedules.keys())

    def items(self) -> Iterable[tuple[str, ShiftWindow]]:
        return self._schedules.items()
